"""
Element model produced by markup and by `createElement`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..runtime.values import UNDEFINED


class FragmentType:
    """Sentinel element type that renders only its children."""

    def __repr__(self) -> str:
        return "Fragment"


Fragment = FragmentType()


@dataclass(eq=False)
class Element:
    type: Any
    props: Dict[str, Any] = field(default_factory=dict)
    key: Any = None
    ref: Any = None

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        name = self.type if isinstance(self.type, str) else getattr(self.type, "name", repr(self.type))
        return f"<Element {name}>"


@dataclass(eq=False)
class Context:
    default: Any = UNDEFINED
    display_name: str = "Context"
    Provider: "ContextProvider" = None  # type: ignore[assignment]
    Consumer: "ContextConsumer" = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        self.Provider = ContextProvider(self)
        self.Consumer = ContextConsumer(self)


@dataclass(eq=False)
class ContextProvider:
    context: Context


@dataclass(eq=False)
class ContextConsumer:
    context: Context


@dataclass(eq=False)
class Memo:
    """Result of `memo(component)`; renders exactly like the wrapped component."""

    component: Any
    compare: Optional[Callable[..., Any]] = None

    def __call__(self, props: Any = None) -> Any:
        return self.component(props if props is not None else {})


@dataclass(eq=False)
class ForwardRef:
    render: Any

    def __call__(self, props: Any = None) -> Any:
        props = props if props is not None else {}
        return self.render(props, props.get("ref", None) if isinstance(props, dict) else None)


def _clean_props(props: Any) -> Dict[str, Any]:
    if props is None or props is UNDEFINED:
        return {}
    if not isinstance(props, dict):
        return {}
    return dict(props)


def create_element(type_: Any, props: Any = None, *children: Any) -> Element:
    values = _clean_props(props)
    key = values.pop("key", None)
    ref = values.pop("ref", None)
    if len(children) == 1:
        values["children"] = children[0]
    elif len(children) > 1:
        values["children"] = list(children)
    if key is UNDEFINED:
        key = None
    return Element(type=type_, props=values, key=key, ref=ref)


def clone_element(element: Element, props: Any = None, *children: Any) -> Element:
    if not isinstance(element, Element):
        raise TypeError("cloneElement expects an element")
    values = dict(element.props)
    overrides = _clean_props(props)
    key = overrides.pop("key", element.key)
    ref = overrides.pop("ref", element.ref)
    values.update(overrides)
    if len(children) == 1:
        values["children"] = children[0]
    elif len(children) > 1:
        values["children"] = list(children)
    return Element(type=element.type, props=values, key=key, ref=ref)


def is_valid_element(value: Any) -> bool:
    return isinstance(value, Element)


def create_context(default: Any = UNDEFINED) -> Context:
    return Context(default=default)


def memo(component: Any, compare: Any = None) -> Memo:
    return Memo(component=component, compare=compare)


def forward_ref(render: Any) -> ForwardRef:
    return ForwardRef(render=render)
