"""Plan schema, validation and static analysis."""

from .models import (
    ALLOWED_COMPONENTS,
    COMPONENT_REGISTRY,
    LAYOUT_MODES,
    ComponentName,
    ComponentSpec,
    LayoutMode,
    UINode,
    UIPlan,
    WireModel,
)
from .validation import (
    PLAN_IDENTIFIER,
    UI_LIBRARY_MODULE,
    InjectionScan,
    escape_template_literal,
    filter_prompt_injection,
    parse_plan_from_code,
    plan_components,
    validate_generated_code,
    validate_plan,
)
from .analysis import AnalysisFinding, AnalysisMetrics, StaticAnalysisReport, analyze_generated_code

__all__ = [
    # Model
    "ALLOWED_COMPONENTS",
    "COMPONENT_REGISTRY",
    "LAYOUT_MODES",
    "ComponentName",
    "ComponentSpec",
    "LayoutMode",
    "UINode",
    "UIPlan",
    "WireModel",
    # Validation
    "PLAN_IDENTIFIER",
    "UI_LIBRARY_MODULE",
    "InjectionScan",
    "escape_template_literal",
    "filter_prompt_injection",
    "parse_plan_from_code",
    "plan_components",
    "validate_generated_code",
    "validate_plan",
    # Analysis
    "AnalysisFinding",
    "AnalysisMetrics",
    "StaticAnalysisReport",
    "analyze_generated_code",
]
