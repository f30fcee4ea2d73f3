"""Tests for the explainer agent."""

from conftest import ExplodingOracle, ScriptedOracle
from uibuilder.agents import Explainer, fallback_explanation


async def test_fallback_for_new_baseline(explainer, sample_plan):
    result = await explainer.explain("ops", sample_plan, "code", is_modification=False)

    lines = result.explanation.split("\n")
    assert lines == [
        "Layout mode: split was selected to match the requested information density and hierarchy.",
        "Component selection: Navbar, Card, Chart. All components come from the fixed deterministic library.",
        "This was generated as a new baseline screen.",
    ]
    assert result.from_oracle is False
    assert result.logs[0].detail == "Fallback explanation generated"


def test_fallback_for_incremental_edit(sample_plan):
    text = fallback_explanation(sample_plan, is_modification=True)
    assert text.endswith(
        "This is an incremental edit. Existing plan structure was preserved and only requested sections were updated."
    )


def test_fallback_deduplicates_components(sample_plan):
    doubled = sample_plan.model_copy(update={"root": [*sample_plan.root, *sample_plan.root]})
    assert "Component selection: Navbar, Card, Chart." in fallback_explanation(doubled, False)


async def test_oracle_text_is_used(sample_plan):
    oracle = ScriptedOracle("  Split layout keeps navigation visible.  ")
    result = await Explainer(oracle=oracle).explain("ops", sample_plan, "code", is_modification=False)

    assert result.explanation == "Split layout keeps navigation visible."
    assert result.from_oracle is True
    assert oracle.calls[0][0].role == "system"
    assert "Code:\ncode" in oracle.calls[0][1].content


async def test_blank_oracle_text_falls_back(sample_plan):
    result = await Explainer(oracle=ScriptedOracle("   ")).explain("ops", sample_plan, "code", False)
    assert result.from_oracle is False


async def test_raising_oracle_falls_back(sample_plan):
    result = await Explainer(oracle=ExplodingOracle()).explain("ops", sample_plan, "code", True)
    assert result.explanation.startswith("Layout mode: split")
