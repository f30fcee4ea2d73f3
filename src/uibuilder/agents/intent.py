"""Deterministic intent analysis.

Pattern and keyword matching only. Every function here is a pure function of
its text argument, so the same intent always yields the same result.
"""

import re
from typing import Sequence, TypeVar

from uibuilder.schema import LayoutMode

T = TypeVar("T")

STOPWORDS = frozenset(
    {
        "create", "build", "make", "design", "generate", "ui", "page", "screen",
        "dashboard", "app", "website", "for", "with", "and", "the", "a", "an",
        "to", "of", "in", "on", "from", "that", "this",
    }
)  # fmt: skip

MAX_KEY_PHRASES = 6

NON_ALNUM = re.compile(r"[^a-z0-9\s]")

MODE_STACK = re.compile(r"minimal|simple|clean|single column|stack", re.IGNORECASE)
MODE_GRID = re.compile(r"grid|cards layout|two columns", re.IGNORECASE)

# Per-kind triggers. Alternation binds loosely: ``\bnavbar|header`` means
# "\bnavbar" or "header", matching the historical trigger behavior.
COMPONENT_TRIGGERS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("Navbar", re.compile(r"\bnavbar|header|top nav|navigation\b")),
    ("Sidebar", re.compile(r"\bsidebar|side nav|left nav\b")),
    ("Card", re.compile(r"\bcard|panel|widget|section\b")),
    ("Input", re.compile(r"\binput|field|form|search|textbox|text box|login|signup|register\b")),
    ("Button", re.compile(r"\bbutton|cta|submit|action\b")),
    ("Table", re.compile(r"\btable|list|rows|columns|grid data\b")),
    ("Modal", re.compile(r"\bmodal|dialog|popup\b")),
    ("Chart", re.compile(r"\bchart|graph|analytics|stats|trend|metrics\b")),
)

DASHBOARD = re.compile(r"\bdashboard|admin|portal|console\b")
AUTH = re.compile(r"\blogin|sign in|signup|register|auth\b")
SIGNUP = re.compile(r"signup|register")
SOCIAL = re.compile(r"\bfeed|social|linkedin|twitter|instagram\b")
SOCIAL_CONTENT = re.compile(r"\bfeed|social|linkedin\b")
COMMERCE = re.compile(r"\becommerce|store|shop\b")
SETTINGS = re.compile(r"\bsettings|preferences\b")

COMPOUND_TRIGGERS: tuple[tuple[re.Pattern[str], tuple[str, ...]], ...] = (
    (DASHBOARD, ("Navbar", "Sidebar", "Card", "Chart")),
    (AUTH, ("Card", "Input", "Button")),
    (SOCIAL, ("Navbar", "Sidebar", "Card", "Table")),
)
DEFAULT_COMPONENTS = ("Navbar", "Card", "Input", "Button")

START_OVER = re.compile(r"regenerate\s+from\s+scratch|start\s+over", re.IGNORECASE)

# Incremental edit triggers (matched against lowercased text)
EDIT_MINIMAL = re.compile(r"minimal|simple|clean")
EDIT_SETTINGS_MODAL = re.compile(r"\bsettings\s+modal|settings dialog|settings popup\b")
EDIT_CONVERT = re.compile(r"\bconvert to|change to|make it like|turn into\b")
EDIT_ADD = re.compile(r"\badd\b|\binclude\b|\binsert\b")


def to_title_case(value: str) -> str:
    """
    Capitalize each space-separated word, lowercasing the rest.

    Examples:
        >>> to_title_case("sales PIPELINE")
        'Sales Pipeline'
    """
    return " ".join(part[:1].upper() + part[1:].lower() for part in value.split(" ") if part)


def extract_key_phrases(intent: str) -> list[str]:
    """
    Keyword-like tokens: lowercased, punctuation stripped, words longer than
    two characters, stop words removed, deduplicated, first six kept.

    Examples:
        >>> extract_key_phrases("Create a CRM dashboard for sales leads, sales!")
        ['crm', 'sales', 'leads']
    """
    words = NON_ALNUM.sub(" ", intent.lower()).split()
    seen: dict[str, None] = {}
    for word in words:
        if len(word) > 2 and word not in STOPWORDS:
            seen.setdefault(word, None)
    return list(seen)[:MAX_KEY_PHRASES]


def infer_topic(intent: str) -> str:
    """Title-cased first one or two key phrases, ``Workspace`` when none."""
    phrases = extract_key_phrases(intent)
    if not phrases:
        return "Workspace"
    return to_title_case(" ".join(phrases[:2]))


def infer_mode(intent: str) -> LayoutMode:
    if MODE_STACK.search(intent):
        return "stack"
    if MODE_GRID.search(intent):
        return "grid"
    return "split"


def infer_requested_components(intent: str) -> set[str]:
    """Component kinds the intent asks for, including compound triggers."""
    text = intent.lower()
    requested = {name for name, pattern in COMPONENT_TRIGGERS if pattern.search(text)}

    for pattern, implied in COMPOUND_TRIGGERS:
        if pattern.search(text):
            requested.update(implied)

    if not requested:
        requested.update(DEFAULT_COMPONENTS)

    return requested


def wants_start_over(intent: str) -> bool:
    return START_OVER.search(intent) is not None


def pick_by_hash(items: Sequence[T], seed: int, offset: int = 0) -> T:
    """Deterministically choose one option; the seed is an index, not entropy."""
    return items[(seed + offset) % len(items)]


__all__ = [
    "STOPWORDS",
    "COMPONENT_TRIGGERS",
    "to_title_case",
    "extract_key_phrases",
    "infer_topic",
    "infer_mode",
    "infer_requested_components",
    "wants_start_over",
    "pick_by_hash",
]
