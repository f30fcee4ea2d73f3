"""Code Generator - renders a validated plan as a TSX module."""

from returns.pipeline import is_successful

from uibuilder.core import CodeSafetyError, PlanValidationError, WhitelistViolationError, get_logger, safe_json_dumps
from uibuilder.schema import (
    ALLOWED_COMPONENTS,
    PLAN_IDENTIFIER,
    UI_LIBRARY_MODULE,
    UINode,
    UIPlan,
    escape_template_literal,
    plan_components,
    validate_generated_code,
    validate_plan,
)
from .models import GeneratorResult, StageLog

logger = get_logger(__name__)

LAYOUT_CLASSES = {
    "stack": "space-y-4",
    "grid": "grid grid-cols-1 gap-4 md:grid-cols-2",
    "split": "grid grid-cols-1 gap-4 lg:grid-cols-[260px_1fr]",
}

ITEM_INDENT = 8
NEST_INDENT = 2


def render_node(node: UINode, depth: int = ITEM_INDENT) -> str:
    """Render one node; props are spread from their compact JSON form."""
    indent = " " * depth
    props = safe_json_dumps(node.props)

    if node.children:
        children = "\n".join(render_node(child, depth + NEST_INDENT) for child in node.children)
        return f"{indent}<{node.component} {{...{props}}}>\n{children}\n{indent}</{node.component}>"

    return f"{indent}<{node.component} {{...{props}}} />"


def compose_layout(plan: UIPlan) -> str:
    items = "\n".join(render_node(node) for node in plan.root)
    return f'      <section className="{LAYOUT_CLASSES[plan.mode]}">\n{items}\n      </section>'


class CodeGenerator:
    """
    Deterministic TSX emitter.

    Output is a pure function of the plan: no timestamps, no randomness.
    The plan is embedded verbatim so it can be recovered from the code.
    """

    def generate(self, plan: UIPlan) -> GeneratorResult:
        """
        Generate code for a plan.

        Raises:
            PlanValidationError: Plan fails validation
            WhitelistViolationError: Plan uses a component outside the library
            CodeSafetyError: Emitted code fails the safety checks
        """
        log = StageLog()

        validation = validate_plan(plan)
        if not is_successful(validation):
            raise PlanValidationError(f"Generator received invalid plan: {validation.failure()}")

        used = plan_components(plan)
        unauthorized = [name for name in used if name not in ALLOWED_COMPONENTS]
        if unauthorized:
            raise WhitelistViolationError(unauthorized)

        log.push("generator", f"components={','.join(used)}")

        imports = f'import {{ {", ".join(used)} }} from "{UI_LIBRARY_MODULE}";'
        serialized = escape_template_literal(plan.to_json(indent=2))

        code = (
            f"{imports}\n"
            "\n"
            f"const {PLAN_IDENTIFIER} = `{serialized}`;\n"
            "\n"
            "export default function GeneratedUI() {\n"
            "  return (\n"
            '    <main className="space-y-4">\n'
            f"{compose_layout(plan)}\n"
            "    </main>\n"
            "  );\n"
            "}\n"
        )

        checked = validate_generated_code(code)
        if not is_successful(checked):
            logger.error("code_safety_failed", error=checked.failure())
            raise CodeSafetyError(f"Generated code failed safety checks: {checked.failure()}")

        log.push("generator", "Generated code passed validation")
        logger.info("code_generated", components=len(used), size=len(code))
        return GeneratorResult(code=code, used_components=used, logs=log.all())


__all__ = ["CodeGenerator", "LAYOUT_CLASSES", "render_node", "compose_layout"]
