"""Planner Agent - oracle first, deterministic synthesis as fallback."""

from typing import Any

from returns.pipeline import is_successful

from uibuilder.core import JSONParseError, extract_json, get_logger, rolling_hash
from uibuilder.monitoring import MetricsCollector
from uibuilder.schema import UINode, UIPlan, filter_prompt_injection, validate_plan
from . import intent as heuristics
from .intent import (
    extract_key_phrases,
    infer_mode,
    infer_requested_components,
    infer_topic,
    pick_by_hash,
    to_title_case,
    wants_start_over,
)
from .models import PlannerResult, StageLog
from .oracle import NullOracle, Oracle
from .prompts import PromptBuilder

logger = get_logger(__name__)

INJECTION_WARNING = "Prompt injection patterns were sanitized"

NAV_LINK_SETS = (
    ["Overview", "Discover", "Updates", "Settings"],
    ["Home", "Insights", "Tasks", "Team"],
    ["Feed", "Explore", "Alerts", "Profile"],
    ["Summary", "Pipelines", "Reports", "Preferences"],
)
SIDEBAR_ITEM_SETS = (
    ["Dashboard", "Projects", "Timeline", "Members", "Settings"],
    ["Workspace", "Queue", "Approvals", "Analytics", "Admin"],
    ["Library", "Collections", "Bookmarks", "Notifications", "Help"],
    ["Catalog", "Operations", "Billing", "Users", "Security"],
)
SOCIAL_NAV_LINKS = ["Home", "Network", "Jobs", "Messages", "Alerts"]
COMMERCE_SIDEBAR_ITEMS = ["Catalog", "Orders", "Customers", "Promotions", "Analytics"]
SOCIAL_SIDEBAR_ITEMS = ["Feed", "Profile", "Connections", "Groups", "Events"]
SOCIAL_TABLE_ROWS = [
    ["Jane Doe", "Product Designer", "Connect"],
    ["Arjun Rao", "Software Engineer", "Message"],
    ["Nina Kim", "Marketing Lead", "Follow"],
]

PRIMARY_ACTIONS = ("Apply", "Create", "Save", "Search", "Launch")
SECONDARY_ACTIONS = ("Reset", "Clear", "Cancel", "Back", "Filter")
ROW_STATES = ("Draft", "Active", "Review", "Blocked", "Done")
ROW_ACTIONS = ("View", "Edit", "Open", "Inspect", "Track")
CHART_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

DEFAULT_TABLE_COLUMNS = ["Name", "Status", "Action"]
MINIMAL_NAVBAR = {"title": "Minimal UI", "links": ["Home", "Settings"]}


class NodeFactory:
    """
    Builds nodes with ids ``<component>-<n>`` from a per-plan counter.

    Children are built before their parent, so a parent's number is higher
    than its children's.
    """

    def __init__(self, start: int = 1) -> None:
        self.counter = start

    def node(self, component: str, props: dict[str, Any], children: list[UINode] | None = None) -> UINode:
        node_id = f"{component.lower()}-{self.counter}"
        self.counter += 1
        return UINode(id=node_id, component=component, props=props, children=children)

    def chart(self, topic: str, seed: int) -> UINode:
        return self.node("Chart", {"title": f"{topic} Metrics", "data": chart_data(seed)})

    def table_card(self, topic: str, columns: list[str], rows: list[list[str]]) -> UINode:
        table = self.node("Table", {"columns": columns, "rows": rows})
        return self.node("Card", {"title": f"{topic} Table"}, [table])


def chart_data(seed: int) -> list[dict[str, Any]]:
    """Six weekday points; each value is in [10 + 2*i, 35 + 2*i]."""
    return [
        {"label": label, "value": 10 + ((seed >> (idx % 16)) % 26) + idx * 2}
        for idx, label in enumerate(CHART_LABELS)
    ]


def table_rows(phrases: list[str], seed: int) -> list[list[str]]:
    subject_a = to_title_case(phrases[0] if len(phrases) > 0 else "Item")
    subject_b = to_title_case(phrases[1] if len(phrases) > 1 else "Status")
    subject_c = to_title_case(phrases[2] if len(phrases) > 2 else "Owner")
    return [
        [f"{subject_a} A", pick_by_hash(ROW_STATES, seed, 1), f"{subject_c} 1"],
        [f"{subject_a} B", pick_by_hash(ROW_STATES, seed, 2), f"{subject_c} 2"],
        [f"{subject_a} C", pick_by_hash(ROW_STATES, seed, 3), pick_by_hash(ROW_ACTIONS, seed, 4)],
        [f"{subject_b} D", pick_by_hash(ROW_STATES, seed, 0), pick_by_hash(ROW_ACTIONS, seed, 2)],
    ]


# ============================================================================
# Full synthesis
# ============================================================================


def synthesize_plan(intent: str) -> UIPlan:
    """
    Build a plan from scratch using keyword heuristics only.

    Root order is fixed: Navbar, Sidebar, auth or controls card, table card,
    Chart, settings Modal. The same intent always produces the same plan.
    """
    text = intent.lower()
    seed = rolling_hash(text)
    topic = infer_topic(intent)
    phrases = extract_key_phrases(intent)
    requested = infer_requested_components(intent)
    make = NodeFactory()
    root: list[UINode] = []

    if "Navbar" in requested:
        links = SOCIAL_NAV_LINKS if heuristics.SOCIAL_CONTENT.search(text) else pick_by_hash(NAV_LINK_SETS, seed)
        root.append(make.node("Navbar", {"title": f"{topic} UI", "links": list(links)}))

    if "Sidebar" in requested:
        if heuristics.COMMERCE.search(text):
            items = COMMERCE_SIDEBAR_ITEMS
        elif heuristics.SOCIAL_CONTENT.search(text):
            items = SOCIAL_SIDEBAR_ITEMS
        else:
            items = pick_by_hash(SIDEBAR_ITEM_SETS, seed, 3)
        root.append(make.node("Sidebar", {"title": f"{topic} Menu", "items": list(items)}))

    if heuristics.AUTH.search(text):
        submit = "Create Account" if heuristics.SIGNUP.search(text) else "Sign In"
        fields = [
            make.node("Input", {"label": "Email", "placeholder": "you@example.com"}),
            make.node("Input", {"label": "Password", "placeholder": "Enter password"}),
            make.node("Button", {"label": submit, "variant": "primary"}),
        ]
        root.append(make.node("Card", {"title": f"{topic} Authentication"}, fields))
    elif "Card" in requested:
        controls: list[UINode] = []
        if "Input" in requested:
            label = f"Search {to_title_case(phrases[0])}" if phrases else "Search"
            placeholder = f"Find {' '.join(phrases[:2])}" if phrases else f"Find {topic.lower()} items"
            controls.append(make.node("Input", {"label": label, "placeholder": placeholder}))
        if "Button" in requested:
            controls.append(make.node("Button", {"label": pick_by_hash(PRIMARY_ACTIONS, seed, 1), "variant": "primary"}))
            controls.append(make.node("Button", {"label": pick_by_hash(SECONDARY_ACTIONS, seed, 2), "variant": "secondary"}))
        root.append(make.node("Card", {"title": f"{topic} Controls"}, controls or None))

    if "Table" in requested:
        if heuristics.SOCIAL_CONTENT.search(text):
            rows = [list(row) for row in SOCIAL_TABLE_ROWS]
        else:
            rows = table_rows(phrases, seed)
        if len(phrases) >= 2:
            columns = [to_title_case(phrases[0]), to_title_case(phrases[1]), "Action"]
        else:
            columns = list(DEFAULT_TABLE_COLUMNS)
        root.append(make.table_card(topic, columns, rows))

    if "Chart" in requested:
        root.append(make.chart(topic, seed))

    if "Modal" in requested or heuristics.SETTINGS.search(text):
        fields = [
            make.node("Input", {"label": "Display Name", "placeholder": topic}),
            make.node("Button", {"label": "Save", "variant": "primary"}),
        ]
        root.append(make.node("Modal", {"title": f"{topic} Settings", "open": True}, fields))

    if not root:
        button = make.node("Button", {"label": "Continue", "variant": "primary"})
        root.append(make.node("Card", {"title": f"{topic} Panel"}, [button]))

    return UIPlan(mode=infer_mode(intent), root=root)


# ============================================================================
# Incremental modification
# ============================================================================


def _has_component(plan: UIPlan, component: str) -> bool:
    """Present at the top level or among immediate children."""
    for node in plan.root:
        if node.component == component:
            return True
        if any(child.component == component for child in node.children or ()):
            return True
    return False


def _rewrite_navbars(nodes: list[UINode]) -> list[UINode]:
    rewritten = []
    for node in nodes:
        update: dict[str, Any] = {}
        if node.component == "Navbar":
            update["props"] = {"title": MINIMAL_NAVBAR["title"], "links": list(MINIMAL_NAVBAR["links"])}
        if node.children:
            update["children"] = _rewrite_navbars(node.children)
        rewritten.append(node.model_copy(update=update) if update else node)
    return rewritten


def modify_plan(intent: str, prior_plan: UIPlan) -> UIPlan:
    """
    Apply textual edit triggers to a copy of the prior plan.

    Triggers run in order: minimal, settings modal, convert (returns a fresh
    synthesis), add/include/insert. The prior plan is never mutated.
    """
    text = intent.lower()
    plan = prior_plan.model_copy(deep=True)
    make = NodeFactory(start=prior_plan.node_count() + 1)

    if heuristics.EDIT_MINIMAL.search(text):
        plan = plan.model_copy(update={"mode": "stack", "root": _rewrite_navbars(plan.root)})

    if heuristics.EDIT_SETTINGS_MODAL.search(text) and not any(n.component == "Modal" for n in plan.root):
        fields = [
            make.node("Input", {"label": "Theme", "placeholder": "Light or Dark"}),
            make.node("Button", {"label": "Save", "variant": "primary"}),
        ]
        modal = make.node("Modal", {"title": "Settings", "open": True}, fields)
        plan = plan.model_copy(update={"root": [*plan.root, modal]})

    if heuristics.EDIT_CONVERT.search(text):
        converted = synthesize_plan(intent)
        return converted.model_copy(
            update={"modification_instructions": f"Converted UI based on request: {intent}"}
        )

    if heuristics.EDIT_ADD.search(text):
        requested = infer_requested_components(intent)
        topic = infer_topic(intent)
        seed = rolling_hash(text)
        additions: list[UINode] = []

        if "Chart" in requested and not _has_component(plan, "Chart"):
            additions.append(make.chart(topic, seed))
        if "Table" in requested and not _has_component(plan, "Table"):
            rows = table_rows(extract_key_phrases(intent), seed)
            additions.append(make.table_card(topic, list(DEFAULT_TABLE_COLUMNS), rows))
        if "Input" in requested and not _has_component(plan, "Input"):
            fields = [
                make.node("Input", {"label": "Search", "placeholder": f"Find {topic.lower()} items"}),
                make.node("Button", {"label": "Apply", "variant": "primary"}),
            ]
            additions.append(make.node("Card", {"title": f"{topic} Input"}, fields))

        if additions:
            plan = plan.model_copy(update={"root": [*plan.root, *additions]})

    return plan.model_copy(update={"modification_instructions": intent})


# ============================================================================
# Agent
# ============================================================================


class Planner:
    """Turns an intent (and optional prior plan) into a validated plan."""

    def __init__(self, oracle: Oracle | None = None, metrics: MetricsCollector | None = None) -> None:
        self.oracle = oracle or NullOracle()
        self.metrics = metrics

        logger.info("initialized", oracle=type(self.oracle).__name__)

    async def plan(
        self,
        intent: str,
        prior_plan: UIPlan | None = None,
        regenerate_from_scratch: bool = False,
    ) -> PlannerResult:
        log = StageLog()
        scan = filter_prompt_injection(intent)
        log.push("safety", "Prompt injection pattern flagged" if scan.flagged else "No injection pattern detected")
        warnings = [INJECTION_WARNING] if scan.flagged else []

        full_regenerate = regenerate_from_scratch or wants_start_over(scan.clean)
        log.push("planner", f"full_regenerate={str(full_regenerate).lower()}")

        oracle_plan = await self._consult_oracle(scan.clean, prior_plan, log)
        if oracle_plan is not None:
            self._record_source("oracle")
            return PlannerResult(plan=oracle_plan, warnings=warnings, logs=log.all(), source="oracle")

        if prior_plan is None or full_regenerate:
            plan = synthesize_plan(scan.clean)
            log.push("planner", "Applied intent-aware deterministic planning")
            source = "synthesis"
        else:
            plan = modify_plan(scan.clean, prior_plan)
            log.push("planner", "Applied deterministic incremental modification")
            source = "modification"

        logger.info("plan_ready", source=source, mode=plan.mode, nodes=plan.node_count())
        self._record_source(source)
        return PlannerResult(plan=plan, warnings=warnings, logs=log.all(), source=source)

    async def _consult_oracle(self, clean: str, prior_plan: UIPlan | None, log: StageLog) -> UIPlan | None:
        """Ask the oracle; return its plan only if it validates."""
        try:
            answer = await self.oracle.complete(PromptBuilder.planner(clean, prior_plan))
        except Exception as e:
            logger.warning("oracle_failed", error=str(e))
            answer = None

        raw = answer.value_or(None) if answer is not None else None
        if raw is None:
            return None

        try:
            payload = extract_json(raw)
        except JSONParseError as e:
            logger.warning("oracle_plan_unparsable", error=str(e), preview=raw[:200])
            log.push("planner", "Oracle plan was not valid JSON; falling back to deterministic planner")
            self._record_rejection("parse")
            return None

        result = validate_plan(payload)
        if not is_successful(result):
            log.push("planner", f"Oracle plan rejected: {result.failure()}")
            self._record_rejection("validation")
            return None

        log.push("planner", "Oracle plan accepted by schema validation")
        return result.unwrap()

    def _record_source(self, source: str) -> None:
        if self.metrics:
            self.metrics.record_plan_source(source)

    def _record_rejection(self, reason: str) -> None:
        if self.metrics:
            self.metrics.record_plan_rejection(reason)


__all__ = ["Planner", "NodeFactory", "synthesize_plan", "modify_plan", "chart_data", "table_rows", "INJECTION_WARNING"]
