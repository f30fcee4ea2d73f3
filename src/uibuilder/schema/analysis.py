"""Graded static analysis of generated code.

Unlike ``validate_generated_code`` this never fails: it reports findings and
a score that starts at 100 and loses a fixed number of points per finding
kind, floored at zero.
"""

import re
from typing import Literal

from uibuilder.schema.models import ALLOWED_COMPONENTS, UIPlan, WireModel
from uibuilder.schema.validation import plan_components

ROOT_COMPONENT = "GeneratedUI"

JSX_OPEN = re.compile(r"<[A-Za-z][A-Za-z0-9]*")
IMPORT_LINE = re.compile(r"^import\s+", re.MULTILINE)
COMPONENT_TAG = re.compile(r"<([A-Z][A-Za-z0-9]*)\b")
RAW_HTML = re.compile(r"dangerouslySetInnerHTML")
INLINE_STYLE = re.compile(r"style=\{\{")
DYNAMIC_CLASS = re.compile(r"className=\{`")

PENALTIES = {
    "dangerous-html": 50,
    "inline-style": 30,
    "dynamic-class": 10,
    "illegal-component": 40,
    "missing-component": 15,
}

FindingLevel = Literal["info", "warning", "error"]


class AnalysisFinding(WireModel):
    level: FindingLevel
    code: str
    message: str


class AnalysisMetrics(WireModel):
    line_count: int
    jsx_count: int
    import_count: int


class StaticAnalysisReport(WireModel):
    score: int
    findings: list[AnalysisFinding]
    metrics: AnalysisMetrics

    @property
    def has_errors(self) -> bool:
        return any(f.level == "error" for f in self.findings)


def _rendered_tags(code: str) -> list[str]:
    seen: dict[str, None] = {}
    for match in COMPONENT_TAG.finditer(code):
        seen.setdefault(match.group(1), None)
    return list(seen)


def analyze_generated_code(code: str, plan: UIPlan) -> StaticAnalysisReport:
    """
    Score generated code against the output policy.

    Args:
        code: Generated source
        plan: The plan the code was generated from

    Returns:
        Report with score, ordered findings and size metrics
    """
    findings: list[AnalysisFinding] = []

    if RAW_HTML.search(code):
        findings.append(
            AnalysisFinding(
                level="error", code="dangerous-html", message="Found forbidden dangerouslySetInnerHTML usage."
            )
        )

    if INLINE_STYLE.search(code):
        findings.append(AnalysisFinding(level="error", code="inline-style", message="Found forbidden inline style usage."))

    if DYNAMIC_CLASS.search(code):
        findings.append(
            AnalysisFinding(
                level="warning",
                code="dynamic-class",
                message="Detected dynamic class composition; review deterministic styling constraints.",
            )
        )

    used_tags = _rendered_tags(code)
    illegal = [tag for tag in used_tags if tag not in ALLOWED_COMPONENTS and tag != ROOT_COMPONENT]
    if illegal:
        findings.append(
            AnalysisFinding(
                level="error",
                code="illegal-component",
                message=f"Detected non-whitelisted JSX components: {', '.join(illegal)}",
            )
        )

    missing = [component for component in plan_components(plan) if component not in used_tags]
    if missing:
        findings.append(
            AnalysisFinding(
                level="warning",
                code="missing-component",
                message=f"Generated code does not render some planned components: {', '.join(missing)}",
            )
        )

    score = 100 - sum(PENALTIES[f.code] for f in findings)

    if not findings:
        findings.append(
            AnalysisFinding(level="info", code="clean", message="Static analysis found no safety or policy violations.")
        )

    return StaticAnalysisReport(
        score=max(0, score),
        findings=findings,
        metrics=AnalysisMetrics(
            line_count=len(code.split("\n")),
            jsx_count=len(JSX_OPEN.findall(code)),
            import_count=len(IMPORT_LINE.findall(code)),
        ),
    )


__all__ = ["AnalysisFinding", "AnalysisMetrics", "StaticAnalysisReport", "analyze_generated_code", "PENALTIES"]
