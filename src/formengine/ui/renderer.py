"""
Renderer: invokes components and produces a host-node tree.

The tree can be serialised to HTML (`to_html`) or to JSON-safe data
(`to_data`). State updates made by effects re-render the root until the tree
settles, bounded by `max_passes`.
"""

from __future__ import annotations

import html
import logging
import math
import re
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Dict, List, Optional, Set, Tuple, Union

from ..errors import SCRIPT_FAILURES, FormEngineError, RenderError
from ..runtime.functions import call_value
from ..runtime.values import UNDEFINED, format_number, is_number, to_string
from .elements import ContextConsumer, ContextProvider, Element, FragmentType
from .hooks import HookFrame, activate, deactivate

logger = logging.getLogger(__name__)

VOID_TAGS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"}
)

UNITLESS_STYLES = frozenset(
    {"flex", "flexGrow", "flexShrink", "fontWeight", "lineHeight", "opacity", "order", "zIndex", "zoom", "gridRow", "gridColumn"}
)

ATTRIBUTE_NAMES = {"className": "class", "htmlFor": "for"}


@dataclass
class HostNode:
    tag: str
    props: Dict[str, Any] = field(default_factory=dict)
    children: List[Union["HostNode", str]] = field(default_factory=list)

    def find_all(self, predicate: Any) -> List["HostNode"]:
        found = [self] if predicate(self) else []
        for child in self.children:
            if isinstance(child, HostNode):
                found.extend(child.find_all(predicate))
        return found

    def text(self) -> str:
        return "".join(child if isinstance(child, str) else child.text() for child in self.children)


RenderOutput = List[Union[HostNode, str]]


def _type_token(element_type: Any) -> Any:
    try:
        hash(element_type)
    except TypeError:
        return id(element_type)
    return element_type


def _component_name(element_type: Any) -> str:
    name = getattr(element_type, "display_name", None) or getattr(element_type, "name", None)
    if not name:
        name = getattr(element_type, "__name__", "") or type(element_type).__name__
    return str(name)


class Renderer:
    """Renders element trees while keeping hook state between renders."""

    def __init__(self, max_passes: int = 25) -> None:
        self.max_passes = max(1, max_passes)
        self.frames: Dict[Tuple[Any, ...], HookFrame] = {}
        self.root: Any = None
        self.nodes: RenderOutput = []
        self.dirty = False
        self._ids = count()
        self._seen: Set[Tuple[Any, ...]] = set()
        self._effects: List[Tuple[HookFrame, int, Any]] = []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, element: Any) -> RenderOutput:
        self.root = element
        passes = 0
        while True:
            passes += 1
            self.dirty = False
            self._seen = set()
            self._effects = []
            nodes = self._render(element, ())
            self._unmount_unseen()
            self._run_effects()
            if not self.dirty:
                break
            if passes >= self.max_passes:
                raise RenderError(
                    f"Too many re-renders: state kept changing after {self.max_passes} passes"
                )
        self.nodes = nodes
        return nodes

    def rerender(self) -> RenderOutput:
        if self.root is None:
            return []
        return self.render(self.root)

    def render_safely(self, element: Any) -> RenderOutput:
        """Render with an error boundary: failures become an inert error node."""
        try:
            return self.render(element)
        except SCRIPT_FAILURES as exc:
            message = exc.message if isinstance(exc, FormEngineError) else str(exc)
            logger.warning("Render failed: %s", message)
            self.nodes = [error_node(f"Error: {message}")]
            return self.nodes

    def unmount(self) -> None:
        for frame in self.frames.values():
            frame.run_cleanups()
        self.frames.clear()
        self.root = None
        self.nodes = []

    def schedule(self, frame: HookFrame) -> None:
        self.dirty = True

    def next_id(self) -> int:
        return next(self._ids)

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def _render(self, node: Any, path: Tuple[Any, ...], contexts: Optional[Dict[Any, Any]] = None) -> RenderOutput:
        contexts = contexts if contexts is not None else {}
        if node is None or node is UNDEFINED or isinstance(node, bool):
            return []
        if isinstance(node, str):
            return [node] if node else []
        if is_number(node):
            return [format_number(node)]
        if isinstance(node, (list, tuple)):
            output: RenderOutput = []
            for index, child in enumerate(node):
                segment = child.key if isinstance(child, Element) and child.key is not None else index
                output.extend(self._render(child, path + (segment,), contexts))
            return output
        if isinstance(node, Element):
            return self._render_element(node, path, contexts)
        if isinstance(node, dict):
            keys = ", ".join(str(key) for key in node.keys())
            raise RenderError(f"Objects are not valid as a child (found: object with keys {{{keys}}})")
        if callable(node):
            return []
        return [to_string(node)]

    def _render_element(self, element: Element, path: Tuple[Any, ...], contexts: Dict[Any, Any]) -> RenderOutput:
        element_type = element.type
        children = element.props.get("children", UNDEFINED)
        if isinstance(element_type, str):
            props = {key: value for key, value in element.props.items() if key != "children"}
            if "dangerouslySetInnerHTML" in props:
                props.pop("dangerouslySetInnerHTML")
            inner = self._render(children, path + (element_type,), contexts)
            return [HostNode(element_type, props, inner)]
        if isinstance(element_type, FragmentType):
            return self._render(children, path + ("fragment",), contexts)
        if isinstance(element_type, ContextProvider):
            scoped = dict(contexts)
            scoped[element_type.context] = element.props.get("value", UNDEFINED)
            return self._render(children, path + ("provider",), scoped)
        if isinstance(element_type, ContextConsumer):
            value = contexts.get(element_type.context, element_type.context.default)
            if not callable(children):
                raise RenderError("Context consumer expects a function as its child")
            return self._render(call_value(children, [value]), path + ("consumer",), contexts)
        if callable(element_type):
            return self._render_component(element, path, contexts)
        raise RenderError(
            f"Element type is invalid: expected a string or a component but got: {to_string(element_type)}"
        )

    def _render_component(self, element: Element, path: Tuple[Any, ...], contexts: Dict[Any, Any]) -> RenderOutput:
        element_type = element.type
        frame_path = path + (_type_token(element_type),)
        frame = self.frames.get(frame_path)
        if frame is None:
            frame = HookFrame(self, _component_name(element_type))
            self.frames[frame_path] = frame
        self._seen.add(frame_path)
        props = dict(element.props)
        if element.ref is not None:
            props.setdefault("ref", element.ref)
        frame.begin(contexts)
        token = activate(frame)
        try:
            result = call_value(element_type, [props], description=frame.name)
            frame.finish()
        finally:
            deactivate(token)
        for index, effect in frame.pending_effects:
            self._effects.append((frame, index, effect))
        frame.pending_effects = []
        return self._render(result, frame_path, contexts)

    def _unmount_unseen(self) -> None:
        for frame_path in [key for key in self.frames if key not in self._seen]:
            self.frames.pop(frame_path).run_cleanups()

    def _run_effects(self) -> None:
        for frame, index, effect in self._effects:
            cleanup = frame.cleanups.pop(index, None)
            if cleanup is not None:
                call_value(cleanup, [])
            result = call_value(effect, [])
            if callable(result):
                frame.cleanups[index] = result
        self._effects = []


def error_node(message: str) -> HostNode:
    return HostNode("div", {"className": "error-message"}, [message])


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def _kebab(name: str) -> str:
    return re.sub(r"([A-Z])", lambda match: "-" + match.group(1).lower(), name)


def style_to_css(style: Dict[str, Any]) -> str:
    parts = []
    for key, value in style.items():
        if value is None or value is UNDEFINED or isinstance(value, bool) or callable(value):
            continue
        if is_number(value):
            text = format_number(value) if value == 0 or key in UNITLESS_STYLES else f"{format_number(value)}px"
        else:
            text = to_string(value)
        parts.append(f"{_kebab(key)}: {text}")
    return "; ".join(parts)


def _attributes(props: Dict[str, Any]) -> str:
    rendered = []
    for key, value in props.items():
        if key in {"key", "ref", "children"} or value is None or value is UNDEFINED or value is False:
            continue
        if callable(value):
            continue
        name = ATTRIBUTE_NAMES.get(key, key)
        if key == "style" and isinstance(value, dict):
            css = style_to_css(value)
            if css:
                rendered.append(f' style="{html.escape(css)}"')
            continue
        if value is True:
            rendered.append(f" {name}")
            continue
        if isinstance(value, (dict, list)):
            continue
        rendered.append(f' {name}="{html.escape(to_string(value))}"')
    return "".join(rendered)


def to_html(nodes: Union[RenderOutput, HostNode, str]) -> str:
    if isinstance(nodes, str):
        return html.escape(nodes, quote=False)
    if isinstance(nodes, HostNode):
        attributes = _attributes(nodes.props)
        if nodes.tag in VOID_TAGS:
            return f"<{nodes.tag}{attributes} />"
        return f"<{nodes.tag}{attributes}>{to_html(nodes.children)}</{nodes.tag}>"
    return "".join(to_html(node) for node in nodes)


def json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (bool, str)):
        return value
    if is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if isinstance(value, list):
        return [json_safe(item) for item in value if item is not UNDEFINED and not callable(item)]
    if isinstance(value, dict):
        return {
            str(key): json_safe(item)
            for key, item in value.items()
            if item is not UNDEFINED and not callable(item)
        }
    return to_string(value)


def to_data(nodes: Union[RenderOutput, HostNode, str]) -> Any:
    if isinstance(nodes, str):
        return nodes
    if isinstance(nodes, HostNode):
        props = {
            key: json_safe(value)
            for key, value in nodes.props.items()
            if key not in {"key", "ref"} and value is not UNDEFINED and not callable(value)
        }
        return {"tag": nodes.tag, "props": props, "children": [to_data(child) for child in nodes.children]}
    return [to_data(node) for node in nodes]
