"""UI plan data model and the component registry.

The eight component kinds form a closed set. ``COMPONENT_REGISTRY`` is the one
place that knows, per kind, the exact prop schema and whether the kind may own
children; validation, generation and analysis all dispatch through it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Annotated, Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt, StrictStr, model_validator
from pydantic.alias_generators import to_camel

from uibuilder.core.json import safe_json_dumps

ComponentName = Literal["Button", "Card", "Input", "Table", "Modal", "Sidebar", "Navbar", "Chart"]
LayoutMode = Literal["stack", "grid", "split"]

ALLOWED_COMPONENTS: tuple[str, ...] = get_args(ComponentName)
LAYOUT_MODES: tuple[str, ...] = get_args(LayoutMode)

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class WireModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Per-component props
# ============================================================================


class PropsModel(BaseModel):
    """Exact prop schema: strict types, no unknown keys.

    Optional props may be omitted but never sent as ``null``; the ``None``
    defaults only stand for "absent".
    """

    model_config = ConfigDict(strict=True, extra="forbid", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def reject_explicit_null(cls, data: Any) -> Any:
        if isinstance(data, dict):
            nulls = [key for key, value in data.items() if value is None]
            if nulls:
                raise ValueError(f"null is not allowed for {', '.join(nulls)}")
        return data


class ButtonProps(PropsModel):
    label: NonEmptyStr
    variant: Literal["primary", "secondary"] | None = None


class CardProps(PropsModel):
    title: NonEmptyStr


class InputProps(PropsModel):
    label: NonEmptyStr
    placeholder: StrictStr | None = None
    value: StrictStr | None = None


class TableProps(PropsModel):
    columns: list[StrictStr]
    rows: list[list[StrictStr]]


class ModalProps(PropsModel):
    title: NonEmptyStr
    open: StrictBool


class SidebarProps(PropsModel):
    title: NonEmptyStr
    items: list[StrictStr]


class NavbarProps(PropsModel):
    title: NonEmptyStr
    links: list[StrictStr]


class ChartPoint(PropsModel):
    label: StrictStr
    value: StrictInt | StrictFloat


class ChartProps(PropsModel):
    title: NonEmptyStr
    data: list[ChartPoint]


@dataclass(frozen=True)
class ComponentSpec:
    """What the library accepts for one component kind."""

    name: str
    props_model: type[PropsModel]
    allows_children: bool = False


COMPONENT_REGISTRY: dict[str, ComponentSpec] = {
    "Button": ComponentSpec("Button", ButtonProps),
    "Card": ComponentSpec("Card", CardProps, allows_children=True),
    "Input": ComponentSpec("Input", InputProps),
    "Table": ComponentSpec("Table", TableProps),
    "Modal": ComponentSpec("Modal", ModalProps, allows_children=True),
    "Sidebar": ComponentSpec("Sidebar", SidebarProps),
    "Navbar": ComponentSpec("Navbar", NavbarProps),
    "Chart": ComponentSpec("Chart", ChartProps),
}


# ============================================================================
# Plan tree
# ============================================================================


class UINode(BaseModel):
    """One typed element of a plan."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: NonEmptyStr
    component: ComponentName
    props: dict[str, Any]
    children: list[UINode] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id,
            "component": self.component,
            "props": copy.deepcopy(self.props),
        }
        if self.children is not None:
            out["children"] = [child.to_dict() for child in self.children]
        return out

    def walk(self):
        """Yield this node and every descendant, depth-first."""
        yield self
        for child in self.children or ():
            yield from child.walk()


class UIPlan(BaseModel):
    """Layout mode plus the top-level node forest."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    mode: LayoutMode
    root: list[UINode] = Field(min_length=1)
    modification_instructions: StrictStr | None = Field(default=None, alias="modificationInstructions")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"mode": self.mode, "root": [node.to_dict() for node in self.root]}
        if self.modification_instructions is not None:
            out["modificationInstructions"] = self.modification_instructions
        return out

    def to_json(self, indent: int = 0) -> str:
        return safe_json_dumps(self.to_dict(), indent=indent)

    def walk(self):
        for node in self.root:
            yield from node.walk()

    def node_count(self) -> int:
        return sum(1 for _ in self.walk())


UINode.model_rebuild()


__all__ = [
    "ComponentName",
    "LayoutMode",
    "ALLOWED_COMPONENTS",
    "LAYOUT_MODES",
    "WireModel",
    "PropsModel",
    "ButtonProps",
    "CardProps",
    "InputProps",
    "TableProps",
    "ModalProps",
    "SidebarProps",
    "NavbarProps",
    "ChartPoint",
    "ChartProps",
    "ComponentSpec",
    "COMPONENT_REGISTRY",
    "UINode",
    "UIPlan",
]
