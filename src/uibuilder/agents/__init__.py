"""Pipeline agents: planner, generator, explainer and the optional oracle."""

from .models import (
    ExplainerResult,
    GeneratorResult,
    OracleMessage,
    PlannerResult,
    Stage,
    StageLog,
    StageLogEvent,
)
from .oracle import ChatCompletionsOracle, NullOracle, Oracle
from .planner import Planner, synthesize_plan, modify_plan
from .generator import CodeGenerator
from .explainer import Explainer, fallback_explanation
from .prompts import PromptBuilder

__all__ = [
    # Models
    "ExplainerResult",
    "GeneratorResult",
    "OracleMessage",
    "PlannerResult",
    "Stage",
    "StageLog",
    "StageLogEvent",
    # Oracle
    "Oracle",
    "NullOracle",
    "ChatCompletionsOracle",
    # Agents
    "Planner",
    "synthesize_plan",
    "modify_plan",
    "CodeGenerator",
    "Explainer",
    "fallback_explanation",
    "PromptBuilder",
]
