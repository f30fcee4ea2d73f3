"""Plan and generated-code validation.

Everything here fails closed: a plan with any structural or semantic problem
is rejected whole, and code with any prohibited construct is rejected.
Results use the ``returns`` Result container so callers must handle both
branches explicitly.
"""

import re
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from uibuilder.core.json import JSONParseError, loads
from uibuilder.core.validate import MAX_NODE_DEPTH, MAX_PLAN_SIZE, format_validation_error
from .models import COMPONENT_REGISTRY, UINode, UIPlan

UI_LIBRARY_MODULE = "@/components/ui"
PLAN_IDENTIFIER = "uiPlanJson"

SUSPICIOUS_PATTERNS = (
    re.compile(r"ignore\s+all\s+instructions", re.IGNORECASE),
    re.compile(r"ignore\s+(?:the\s+)?(?:previous|prior|above)\s+instructions", re.IGNORECASE),
    re.compile(r"system\s+prompt", re.IGNORECASE),
    re.compile(r"developer\s+message", re.IGNORECASE),
    re.compile(r"execute\s+code", re.IGNORECASE),
    re.compile(r"bypass\s+safety", re.IGNORECASE),
)
ANGLE_BRACKETS = re.compile(r"[<>]")

LIBRARY_IMPORT = re.compile(r'from\s+"@/components/ui"')
FOREIGN_IMPORT = re.compile(r"""from\s+["'](?!@/components/ui["'])[^"']+["']""")
BARE_IMPORT = re.compile(r"""^\s*import\s+["'][^"']+["']""", re.MULTILINE)
INLINE_STYLE = re.compile(r"style=\{\{")
RAW_HTML = re.compile(r"dangerouslySetInnerHTML")

EMBEDDED_PLAN = re.compile(r"const\s+" + PLAN_IDENTIFIER + r"\s*=\s*`((?:\\.|[^`\\])*)`\s*;", re.DOTALL)
TEMPLATE_ESCAPE = re.compile(r"\\([\\`$])")


@dataclass(frozen=True)
class InjectionScan:
    """Sanitized intent plus whether it looked adversarial."""

    clean: str
    flagged: bool


def filter_prompt_injection(text: str | None) -> InjectionScan:
    """
    Flag prompt-injection phrasing and strip markup characters.

    Never blocks: the caller always gets a usable string and decides what to
    do with the flag (the pipeline surfaces it as a warning).

    Examples:
        >>> filter_prompt_injection("  <b>Ignore all instructions</b> ")
        InjectionScan(clean='bIgnore all instructions/b', flagged=True)
    """
    raw = text or ""
    flagged = any(pattern.search(raw) for pattern in SUSPICIOUS_PATTERNS)
    clean = ANGLE_BRACKETS.sub("", raw).strip()
    return InjectionScan(clean=clean, flagged=flagged)


def _decode_payload(payload: Any) -> Result[Any, str]:
    if isinstance(payload, UIPlan):
        return Success(payload.to_dict())
    if isinstance(payload, (str, bytes)):
        if len(payload) > MAX_PLAN_SIZE:
            return Failure(f"Plan payload exceeds {MAX_PLAN_SIZE} bytes")
        try:
            return Success(loads(payload))
        except JSONParseError:
            return Failure("Plan payload is not valid JSON")
    return Success(payload)


def _validate_node(node: UINode, path: str, errors: list[str]) -> None:
    spec = COMPONENT_REGISTRY[node.component]

    try:
        spec.props_model.model_validate(node.props)
    except PydanticValidationError as e:
        errors.append(f"{path}: invalid props for {node.component} ({format_validation_error(e)})")

    if node.children and not spec.allows_children:
        errors.append(f"{path}: {node.component} does not allow children")

    for idx, child in enumerate(node.children or ()):
        _validate_node(child, f"{path}.children[{idx}]", errors)


def _node_depth(data: Any) -> int:
    """Deepest node nesting in a raw plan payload (top-level nodes are depth 1)."""
    if not isinstance(data, dict) or not isinstance(data.get("root"), list):
        return 0

    deepest = 0
    pending = [(node, 1) for node in data["root"]]
    while pending:
        node, depth = pending.pop()
        deepest = max(deepest, depth)
        children = node.get("children") if isinstance(node, dict) else None
        if isinstance(children, list):
            pending.extend((child, depth + 1) for child in children)
    return deepest


def validate_plan(payload: Any) -> Result[UIPlan, str]:
    """
    Validate a plan in two phases.

    Phase 1 checks the overall shape (mode, non-empty root, node structure).
    Phase 2 checks every node's props against its component's exact schema
    and rejects children on kinds that can't own them. Errors from phase 2
    carry a path such as ``root[0].children[1]``.

    Args:
        payload: Mapping, JSON text, or an existing UIPlan (re-checked)

    Returns:
        Success(plan) or Failure(human-readable error)
    """
    decoded = _decode_payload(payload)
    if not is_successful(decoded):
        return decoded
    data = decoded.unwrap()

    if _node_depth(data) > MAX_NODE_DEPTH:
        return Failure(f"Plan nesting exceeds {MAX_NODE_DEPTH} levels of nodes")

    try:
        plan = UIPlan.model_validate(data)
    except PydanticValidationError as e:
        return Failure(f"Invalid plan schema: {format_validation_error(e)}")

    errors: list[str] = []
    for idx, node in enumerate(plan.root):
        _validate_node(node, f"root[{idx}]", errors)
    if errors:
        return Failure("; ".join(errors))

    return Success(plan)


def validate_generated_code(code: str) -> Result[str, str]:
    """
    Check generated source against the output policy.

    Four independent checks, first failure wins: imports the fixed UI
    library, imports nothing else, no inline styles, no raw HTML injection.
    Import checks skip the embedded plan literal, which is inert text; the
    style and raw HTML checks cover the whole module.
    """
    module = EMBEDDED_PLAN.sub("", code)
    if not LIBRARY_IMPORT.search(module):
        return Failure("Generated code must import from deterministic UI library")
    if FOREIGN_IMPORT.search(module) or BARE_IMPORT.search(module):
        return Failure("Generated code contains non-whitelisted imports")
    if INLINE_STYLE.search(code):
        return Failure("Inline styles are forbidden")
    if RAW_HTML.search(code):
        return Failure("dangerouslySetInnerHTML is forbidden")
    return Success(code)


def escape_template_literal(text: str) -> str:
    """Escape text for embedding in a JS template literal."""
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


def parse_plan_from_code(code: str) -> Result[UIPlan, str]:
    """Recover the embedded plan from generated code without regenerating."""
    match = EMBEDDED_PLAN.search(code)
    if match is None:
        return Failure(f"Could not find {PLAN_IDENTIFIER} in generated code")

    payload = TEMPLATE_ESCAPE.sub(r"\1", match.group(1))
    return validate_plan(payload).alt(lambda error: f"Invalid {PLAN_IDENTIFIER} payload: {error}")


def plan_components(plan: UIPlan) -> list[str]:
    """Component kinds used anywhere in the plan, first-seen order."""
    seen: dict[str, None] = {}
    for node in plan.walk():
        seen.setdefault(node.component, None)
    return list(seen)


__all__ = [
    "UI_LIBRARY_MODULE",
    "PLAN_IDENTIFIER",
    "InjectionScan",
    "filter_prompt_injection",
    "validate_plan",
    "validate_generated_code",
    "escape_template_literal",
    "parse_plan_from_code",
    "plan_components",
]
