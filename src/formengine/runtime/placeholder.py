"""
Placeholder values substituted for names that cannot be resolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..ui.elements import Element
from .values import UNDEFINED


@dataclass(frozen=True)
class Placeholder:
    """Inert component tagged with the name it stands in for.

    Rendering it yields a `display: contents` host node carrying
    `data-missing`, with the caller's children passed through untouched.
    Reading a property yields a nested placeholder so the marker still
    names the original reference.
    """

    name: str

    def __call__(self, props: Any = None, *_: Any) -> Element:
        children = UNDEFINED
        if isinstance(props, dict):
            children = props.get("children", UNDEFINED)
        values = {"data-missing": self.name, "style": {"display": "contents"}}
        if children is not UNDEFINED:
            values["children"] = children
        return Element(type="div", props=values)

    @property
    def display_name(self) -> str:
        return f"Placeholder_{self.name}"

    def member(self, prop: str) -> "Placeholder":
        return Placeholder(f"{self.name}.{prop}")


def missing_name(value: Any) -> Optional[str]:
    """Return the name a placeholder stands in for, or None for real values."""
    if isinstance(value, Placeholder):
        return value.name
    if isinstance(value, Element) and isinstance(value.props, dict):
        marker = value.props.get("data-missing")
        if isinstance(marker, str):
            return marker
    return None
