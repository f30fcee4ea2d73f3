"""Agent data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from uibuilder.core import get_logger
from uibuilder.schema import UIPlan, WireModel

logger = get_logger(__name__)

Stage = Literal["planner", "generator", "explainer", "safety", "store"]


class OracleMessage(BaseModel):
    """Role-tagged message sent to the oracle."""

    role: str = Field(..., pattern="^(system|user|assistant)$")
    content: str = Field(..., min_length=1)


class StageLogEvent(WireModel):
    """One entry in a request's advisory stage log."""

    stage: Stage
    timestamp: str
    detail: str


class StageLog:
    """Ordered stage log for one request; also mirrored to structlog."""

    def __init__(self) -> None:
        self._events: list[StageLogEvent] = []

    def push(self, stage: Stage, detail: str) -> None:
        self._events.append(
            StageLogEvent(stage=stage, timestamp=datetime.now(timezone.utc).isoformat(), detail=detail)
        )
        logger.debug("stage", stage=stage, detail=detail)

    def extend(self, events: list[StageLogEvent]) -> None:
        self._events.extend(events)

    def all(self) -> list[StageLogEvent]:
        return list(self._events)


@dataclass(frozen=True)
class PlannerResult:
    plan: UIPlan
    warnings: list[str] = field(default_factory=list)
    logs: list[StageLogEvent] = field(default_factory=list)
    source: Literal["oracle", "synthesis", "modification"] = "synthesis"


@dataclass(frozen=True)
class GeneratorResult:
    code: str
    used_components: list[str]
    logs: list[StageLogEvent] = field(default_factory=list)


@dataclass(frozen=True)
class ExplainerResult:
    explanation: str
    logs: list[StageLogEvent] = field(default_factory=list)
    from_oracle: bool = False


__all__ = [
    "Stage",
    "OracleMessage",
    "StageLogEvent",
    "StageLog",
    "PlannerResult",
    "GeneratorResult",
    "ExplainerResult",
]
