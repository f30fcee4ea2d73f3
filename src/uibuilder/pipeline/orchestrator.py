"""Generation pipeline.

planner -> generator -> explainer -> analysis -> store append, strictly in
order. A snapshot is stored only after every stage has succeeded; any stage
error aborts the request and leaves the history untouched.
"""

from collections.abc import AsyncIterator
from contextlib import nullcontext
from dataclasses import dataclass

from uibuilder.agents import CodeGenerator, Explainer, Planner, StageLogEvent
from uibuilder.core import (
    GenerationAction,
    GenerationRequest,
    LogContext,
    ReplayRequest,
    UIBuilderError,
    canonical_json,
    get_logger,
    hash_string,
)
from uibuilder.core.id import new_request_id
from uibuilder.monitoring import MetricsCollector
from uibuilder.schema import UIPlan, analyze_generated_code
from uibuilder.versions import (
    SnapshotDraft,
    VersionDiff,
    VersionSnapshot,
    VersionStore,
    diff_lines,
    summarize,
)
from .models import (
    ErrorEvent,
    ExplanationChunkEvent,
    FinalEvent,
    GenerationResult,
    PipelineEvent,
    ReplayResult,
    StatusEvent,
)

logger = get_logger(__name__)


def plan_fingerprint(plan: UIPlan) -> str:
    """xxhash of the key-sorted plan; equal plans give equal fingerprints."""
    return hash_string(canonical_json(plan.to_dict()))


@dataclass(frozen=True)
class _Job:
    """One resolved unit of work for the stages."""

    intent: str
    action: GenerationAction
    base: VersionSnapshot | None
    explanation_prefix: str = ""

    @property
    def prior_plan(self) -> UIPlan | None:
        if self.action == "modify" and self.base is not None:
            return self.base.plan
        return None

    @property
    def is_modification(self) -> bool:
        return self.action == "modify" and self.base is not None


class GenerationPipeline:
    """
    Runs requests against one shared version store.

    Stage agents and the store are injected; the pipeline holds no other
    state between requests.
    """

    def __init__(
        self,
        planner: Planner,
        generator: CodeGenerator,
        explainer: Explainer,
        store: VersionStore,
        metrics: MetricsCollector | None = None,
        stream_by_line: bool = True,
    ) -> None:
        self.planner = planner
        self.generator = generator
        self.explainer = explainer
        self.store = store
        self.metrics = metrics
        self.stream_by_line = stream_by_line

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def run(self, request: GenerationRequest) -> GenerationResult:
        """
        Execute the full pipeline and return the committed version.

        Raises:
            VersionNotFoundError: Explicit base version does not exist
            GenerationError: A stage produced invalid output
        """
        with LogContext(request_id=new_request_id(), action=request.action):
            return await self._complete(self._resolve(request))

    async def stream(self, request: GenerationRequest) -> AsyncIterator[PipelineEvent]:
        """
        Execute the pipeline, yielding progress events.

        Ordering: status events as stages finish, explanation chunks, then
        exactly one ``final`` or ``error`` event. Errors never propagate out
        of the iterator.
        """
        with LogContext(request_id=new_request_id(), action=request.action):
            yield StatusEvent(message="Planner started")

            result: GenerationResult | None = None
            try:
                async for item in self._stages(self._resolve(request)):
                    if isinstance(item, GenerationResult):
                        result = item
                    else:
                        yield item
            except UIBuilderError as e:
                yield ErrorEvent(error=str(e))
                return
            except Exception as e:
                logger.exception("stream_failed", error=str(e))
                yield ErrorEvent(error=str(e) or "Unknown error")
                return

            explanation = result.version.explanation
            if self.stream_by_line:
                for line in filter(None, explanation.split("\n")):
                    yield ExplanationChunkEvent(chunk=f"{line}\n")
            else:
                yield ExplanationChunkEvent(chunk=explanation)

            yield FinalEvent(version=result.version, logs=result.logs, warnings=result.warnings)

    async def replay(self, request: ReplayRequest | str) -> ReplayResult:
        """
        Re-run the pipeline from a stored snapshot's intent and lineage.

        The stored code and plan are not reused: the snapshot's intent and
        action are replayed against its base snapshot's plan.

        Raises:
            VersionNotFoundError: Source version does not exist
        """
        source_id = request if isinstance(request, str) else request.source_version_id
        source = self.store.require(source_id)

        with LogContext(request_id=new_request_id(), action=source.action, replay_of=source.id):
            base = self.store.get(source.base_version_id) if source.base_version_id else None
            job = _Job(
                intent=source.intent,
                action=source.action,
                base=base,
                explanation_prefix=f"[Replay from {source.id}]\n",
            )
            result = await self._complete(job)

        matches = plan_fingerprint(result.version.plan) == plan_fingerprint(source.plan)
        logger.info("replay_complete", source=source.id, version_id=result.version.id, matches_source=matches)
        return ReplayResult(
            version=result.version,
            logs=result.logs,
            warnings=result.warnings,
            replayed_from=source.id,
            matches_source=matches,
        )

    def list_versions(self) -> list[VersionSnapshot]:
        return self.store.list()

    def rollback(self, version_id: str) -> VersionSnapshot:
        """Return a stored snapshot for restoring; the history is unchanged."""
        snapshot = self.store.require(version_id)
        logger.info("rollback", version_id=version_id)
        return snapshot

    def compare(self, from_id: str, to_id: str) -> VersionDiff:
        """Line diff of two versions' code."""
        source = self.store.require(from_id)
        target = self.store.require(to_id)
        lines = diff_lines(source.code, target.code)
        return VersionDiff(
            from_version_id=source.id,
            to_version_id=target.id,
            lines=lines,
            summary=summarize(lines),
            plan_changed=plan_fingerprint(source.plan) != plan_fingerprint(target.plan),
        )

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _resolve(self, request: GenerationRequest) -> _Job:
        """Pick the base snapshot: the explicit one (must exist) or the latest."""
        if request.base_version_id:
            base = self.store.require(request.base_version_id)
        else:
            base = self.store.latest()
        return _Job(intent=request.intent, action=request.action, base=base)

    async def _complete(self, job: _Job) -> GenerationResult:
        result: GenerationResult | None = None
        async for item in self._stages(job):
            if isinstance(item, GenerationResult):
                result = item
        if result is None:
            raise RuntimeError("Pipeline finished without a result")
        return result

    async def _stages(self, job: _Job) -> AsyncIterator[StatusEvent | GenerationResult]:
        """Yield a status after each stage, then the committed result."""
        try:
            with self._timed("planner"):
                planned = await self.planner.plan(
                    job.intent,
                    prior_plan=job.prior_plan,
                    regenerate_from_scratch=job.action == "regenerate",
                )
            yield StatusEvent(message="Planner completed")

            with self._timed("generator"):
                generated = self.generator.generate(planned.plan)
            yield StatusEvent(message="Generator completed")

            with self._timed("explainer"):
                explained = await self.explainer.explain(
                    job.intent, planned.plan, generated.code, job.is_modification
                )
            yield StatusEvent(message="Explainer completed")

            with self._timed("analysis"):
                analysis = analyze_generated_code(generated.code, planned.plan)

            draft = SnapshotDraft(
                intent=job.intent,
                action=job.action,
                base_version_id=job.base.id if job.base else None,
                plan=planned.plan,
                code=generated.code,
                explanation=job.explanation_prefix + explained.explanation,
                analysis=analysis,
            )
            with self._timed("store"):
                version = self.store.add(draft)
        except UIBuilderError as e:
            logger.warning("pipeline_failed", error=str(e), stage=getattr(e, "stage", None))
            self._record(job.action, "error")
            raise

        self._record(job.action, "ok")
        if self.metrics:
            self.metrics.set_versions_stored(len(self.store))

        logs: list[StageLogEvent] = [*planned.logs, *generated.logs, *explained.logs]
        logger.info("pipeline_complete", version_id=version.id, plan_source=planned.source, score=analysis.score)
        yield GenerationResult(version=version, logs=logs, warnings=list(planned.warnings))

    def _timed(self, stage: str):
        return self.metrics.time_stage(stage) if self.metrics else nullcontext()

    def _record(self, action: str, status: str) -> None:
        if self.metrics:
            self.metrics.record_request(action, status)


__all__ = ["GenerationPipeline", "plan_fingerprint"]
