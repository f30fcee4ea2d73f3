"""
Prompt Builder
System instructions and user prompts for the oracle.
"""

from uibuilder.schema import ALLOWED_COMPONENTS, UIPlan
from .models import OracleMessage

PLANNER_SYSTEM_PROMPT = f"""
You are the planning agent of a deterministic UI builder.
Rules:
- Output strict JSON only.
- Use only these components: {", ".join(ALLOWED_COMPONENTS)}.
- Never invent new components.
- Only Card and Modal may have children.
- Prefer preserving existing hierarchy when a prior plan exists.
- Full regeneration only if the user explicitly asks to regenerate from scratch.
Component props (no extra keys):
- Button: {{"label": str, "variant"?: "primary"|"secondary"}}
- Card: {{"title": str}}
- Input: {{"label": str, "placeholder"?: str, "value"?: str}}
- Table: {{"columns": [str], "rows": [[str]]}}
- Modal: {{"title": str, "open": bool}}
- Sidebar: {{"title": str, "items": [str]}}
- Navbar: {{"title": str, "links": [str]}}
- Chart: {{"title": str, "data": [{{"label": str, "value": number}}]}}
JSON schema keys:
{{
  "mode": "stack|grid|split",
  "root": [{{"id": "string", "component": "...", "props": {{}}, "children": []}}],
  "modificationInstructions": "string optional"
}}
""".strip()

EXPLAINER_SYSTEM_PROMPT = """
You are the explanation agent of a deterministic UI builder.
Explain:
1) Why the layout mode was selected.
2) Why each component type was selected.
3) What changed versus the prior version (if this is an edit).
Keep the explanation concise and technical.
""".strip()


class PromptBuilder:
    """Builds oracle message sequences."""

    @staticmethod
    def planner(intent: str, prior_plan: UIPlan | None) -> list[OracleMessage]:
        prior = prior_plan.to_json(indent=2) if prior_plan else "null"
        return [
            OracleMessage(role="system", content=PLANNER_SYSTEM_PROMPT),
            OracleMessage(role="user", content=f"Intent:\n{intent}\n\nPrior Plan:\n{prior}"),
        ]

    @staticmethod
    def explainer(intent: str, plan: UIPlan, code: str) -> list[OracleMessage]:
        return [
            OracleMessage(role="system", content=EXPLAINER_SYSTEM_PROMPT),
            OracleMessage(
                role="user",
                content=f"Intent:\n{intent}\n\nPlan:\n{plan.to_json(indent=2)}\n\nCode:\n{code}",
            ),
        ]
