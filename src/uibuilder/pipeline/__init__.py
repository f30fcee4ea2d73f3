"""Request orchestration across the agents and the version store."""

from .models import (
    ErrorEvent,
    ExplanationChunkEvent,
    FinalEvent,
    GenerationResult,
    PipelineEvent,
    ReplayResult,
    StatusEvent,
)
from .orchestrator import GenerationPipeline, plan_fingerprint

__all__ = [
    "GenerationPipeline",
    "plan_fingerprint",
    "GenerationResult",
    "ReplayResult",
    "PipelineEvent",
    "StatusEvent",
    "ExplanationChunkEvent",
    "FinalEvent",
    "ErrorEvent",
]
