"""Explainer Agent - rationale for a generated version."""

from uibuilder.core import get_logger
from uibuilder.schema import UIPlan
from .models import ExplainerResult, StageLog
from .oracle import NullOracle, Oracle
from .prompts import PromptBuilder

logger = get_logger(__name__)


def fallback_explanation(plan: UIPlan, is_modification: bool) -> str:
    """Three-line template used whenever the oracle has nothing to say."""
    seen: dict[str, None] = {}
    for node in plan.root:
        seen.setdefault(node.component, None)

    change = (
        "This is an incremental edit. Existing plan structure was preserved and only requested sections were updated."
        if is_modification
        else "This was generated as a new baseline screen."
    )
    return "\n".join(
        [
            f"Layout mode: {plan.mode} was selected to match the requested information density and hierarchy.",
            f"Component selection: {', '.join(seen)}. All components come from the fixed deterministic library.",
            change,
        ]
    )


class Explainer:
    def __init__(self, oracle: Oracle | None = None) -> None:
        self.oracle = oracle or NullOracle()

    async def explain(self, intent: str, plan: UIPlan, code: str, is_modification: bool) -> ExplainerResult:
        log = StageLog()

        try:
            answer = await self.oracle.complete(PromptBuilder.explainer(intent, plan, code))
            text = answer.value_or(None)
        except Exception as e:
            logger.warning("oracle_failed", error=str(e))
            text = None

        if text is not None and text.strip():
            log.push("explainer", "Oracle explanation generated")
            return ExplainerResult(explanation=text.strip(), logs=log.all(), from_oracle=True)

        log.push("explainer", "Fallback explanation generated")
        return ExplainerResult(explanation=fallback_explanation(plan, is_modification), logs=log.all())


__all__ = ["Explainer", "fallback_explanation"]
