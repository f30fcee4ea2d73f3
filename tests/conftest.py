"""Pytest configuration and fixtures."""

import os
from collections.abc import Sequence

import pytest
from returns.maybe import Maybe, Nothing, Some

from uibuilder.agents import CodeGenerator, Explainer, OracleMessage, Planner
from uibuilder.core import Settings, create_container
from uibuilder.monitoring import MetricsCollector
from uibuilder.pipeline import GenerationPipeline
from uibuilder.schema import UIPlan
from uibuilder.versions import VersionStore


# ============================================================================
# Pytest Hooks
# ============================================================================


def pytest_configure(config):
    """Keep tests offline regardless of the developer's environment."""
    os.environ["UIB_ORACLE_ENABLED"] = "false"
    os.environ["UIB_LOG_LEVEL"] = "DEBUG"
    os.environ.pop("OPENAI_API_KEY", None)


# ============================================================================
# Oracle Fakes
# ============================================================================


class ScriptedOracle:
    """Oracle that replays canned answers in order, then goes quiet."""

    def __init__(self, *answers: str | None) -> None:
        self.answers = list(answers)
        self.calls: list[list[OracleMessage]] = []

    async def complete(self, messages: Sequence[OracleMessage]) -> Maybe[str]:
        self.calls.append(list(messages))
        if not self.answers:
            return Nothing
        answer = self.answers.pop(0)
        return Nothing if answer is None else Some(answer)


class ExplodingOracle:
    """Oracle that breaks its contract by raising."""

    async def complete(self, messages: Sequence[OracleMessage]) -> Maybe[str]:
        raise RuntimeError("oracle exploded")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def settings():
    """Offline settings."""
    return Settings(oracle_enabled=False, oracle_api_key="")


@pytest.fixture
def di_container(settings):
    """Dependency injection container for testing."""
    return create_container(settings)


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def store():
    return VersionStore()


@pytest.fixture
def planner(metrics):
    """Planner with no oracle (deterministic path only)."""
    return Planner(metrics=metrics)


@pytest.fixture
def generator():
    return CodeGenerator()


@pytest.fixture
def explainer():
    return Explainer()


@pytest.fixture
def pipeline(planner, generator, explainer, store, metrics):
    return GenerationPipeline(
        planner=planner,
        generator=generator,
        explainer=explainer,
        store=store,
        metrics=metrics,
    )


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def sample_plan_dict():
    """Small valid plan covering nesting and every prop type."""
    return {
        "mode": "split",
        "root": [
            {"id": "navbar-1", "component": "Navbar", "props": {"title": "Ops UI", "links": ["Home", "Team"]}},
            {
                "id": "card-4",
                "component": "Card",
                "props": {"title": "Ops Controls"},
                "children": [
                    {"id": "input-2", "component": "Input", "props": {"label": "Search", "placeholder": "Find"}},
                    {"id": "button-3", "component": "Button", "props": {"label": "Apply", "variant": "primary"}},
                ],
            },
            {
                "id": "chart-5",
                "component": "Chart",
                "props": {"title": "Ops Metrics", "data": [{"label": "Mon", "value": 12}, {"label": "Tue", "value": 3.5}]},
            },
        ],
    }


@pytest.fixture
def sample_plan(sample_plan_dict):
    return UIPlan.model_validate(sample_plan_dict)
