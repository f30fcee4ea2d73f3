"""Dependency Injection Container.

The container owns process-lifetime objects. Everything is a singleton, so
the version store is created once per container and shared by every request
served through it.
"""

from injector import Injector, Module, provider, singleton

from uibuilder.agents import ChatCompletionsOracle, CodeGenerator, Explainer, NullOracle, Oracle, Planner
from uibuilder.monitoring import MetricsCollector
from uibuilder.pipeline import GenerationPipeline
from uibuilder.versions import VersionStore
from .config import Settings, get_settings
from .logging_config import get_logger

logger = get_logger(__name__)


class CoreModule(Module):
    """Core dependencies."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @singleton
    @provider
    def provide_settings(self) -> Settings:
        return self.settings

    @singleton
    @provider
    def provide_metrics(self) -> MetricsCollector:
        return MetricsCollector()

    @singleton
    @provider
    def provide_oracle(self, settings: Settings, metrics: MetricsCollector) -> Oracle:
        """Real oracle only when enabled and credentialed."""
        if not settings.oracle_enabled or not settings.oracle_api_key:
            logger.info("oracle_disabled", enabled=settings.oracle_enabled)
            return NullOracle()
        return ChatCompletionsOracle.from_settings(settings, metrics)

    @singleton
    @provider
    def provide_version_store(self) -> VersionStore:
        return VersionStore()

    @singleton
    @provider
    def provide_planner(self, oracle: Oracle, metrics: MetricsCollector) -> Planner:
        return Planner(oracle=oracle, metrics=metrics)

    @singleton
    @provider
    def provide_generator(self) -> CodeGenerator:
        return CodeGenerator()

    @singleton
    @provider
    def provide_explainer(self, oracle: Oracle) -> Explainer:
        return Explainer(oracle=oracle)

    @singleton
    @provider
    def provide_pipeline(
        self,
        settings: Settings,
        planner: Planner,
        generator: CodeGenerator,
        explainer: Explainer,
        store: VersionStore,
        metrics: MetricsCollector,
    ) -> GenerationPipeline:
        return GenerationPipeline(
            planner=planner,
            generator=generator,
            explainer=explainer,
            store=store,
            metrics=metrics,
            stream_by_line=settings.stream_explanation_by_line,
        )


def create_container(settings: Settings | None = None) -> Injector:
    """Create configured injector."""
    return Injector([CoreModule(settings or get_settings())])
