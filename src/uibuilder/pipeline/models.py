"""Pipeline results and stream events."""

from typing import Literal, Union

from uibuilder.agents import StageLogEvent
from uibuilder.schema import WireModel
from uibuilder.versions import VersionSnapshot


class GenerationResult(WireModel):
    version: VersionSnapshot
    logs: list[StageLogEvent]
    warnings: list[str]


class ReplayResult(GenerationResult):
    replayed_from: str
    matches_source: bool


# ============================================================================
# Stream events (one JSON object per line on the wire)
# ============================================================================


class StatusEvent(WireModel):
    type: Literal["status"] = "status"
    message: str


class ExplanationChunkEvent(WireModel):
    type: Literal["explanation_chunk"] = "explanation_chunk"
    chunk: str


class FinalEvent(WireModel):
    type: Literal["final"] = "final"
    version: VersionSnapshot
    logs: list[StageLogEvent]
    warnings: list[str]


class ErrorEvent(WireModel):
    type: Literal["error"] = "error"
    error: str


PipelineEvent = Union[StatusEvent, ExplanationChunkEvent, FinalEvent, ErrorEvent]


__all__ = [
    "GenerationResult",
    "ReplayResult",
    "StatusEvent",
    "ExplanationChunkEvent",
    "FinalEvent",
    "ErrorEvent",
    "PipelineEvent",
]
