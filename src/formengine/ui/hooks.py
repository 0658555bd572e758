"""
Stateful bindings (hooks) for components rendered by `Renderer`.

Each component instance owns a `HookFrame`; hooks are matched to slots by
call order, so a component must call the same hooks in the same order on
every render.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from ..errors import HookError
from ..runtime.functions import NativeFunction, call_value
from ..runtime.values import UNDEFINED, same_value_zero

if TYPE_CHECKING:  # pragma: no cover
    from .elements import Context
    from .renderer import Renderer

_current_frame: ContextVar[Optional["HookFrame"]] = ContextVar("formengine_hook_frame", default=None)


class StateSlot:
    __slots__ = ("value", "setter")

    def __init__(self, value: Any) -> None:
        self.value = value
        self.setter: Any = None


class HookFrame:
    """Slot storage and pending effects for one mounted component."""

    def __init__(self, renderer: "Renderer", name: str = "") -> None:
        self.renderer = renderer
        self.name = name
        self.kinds: List[str] = []
        self.slots: List[Any] = []
        self.cleanups: Dict[int, Any] = {}
        self.pending_effects: List[Tuple[int, Any]] = []
        self.contexts: Dict[Any, Any] = {}
        self.index = 0
        self.mounted = False

    def begin(self, contexts: Dict[Any, Any]) -> None:
        self.index = 0
        self.contexts = contexts
        self.pending_effects = []

    def next_slot(self, kind: str) -> Tuple[int, bool]:
        index = self.index
        self.index += 1
        if index < len(self.kinds):
            if self.kinds[index] != kind:
                raise HookError(
                    f"Hook order changed in {self.name or 'component'}: expected {self.kinds[index]} "
                    f"at position {index} but got {kind}"
                )
            return index, False
        if self.mounted:
            raise HookError(f"Rendered more hooks than during the previous render of {self.name or 'component'}")
        self.kinds.append(kind)
        self.slots.append(None)
        return index, True

    def finish(self) -> None:
        if self.mounted and self.index != len(self.kinds):
            raise HookError(f"Rendered fewer hooks than expected in {self.name or 'component'}")
        self.mounted = True

    def run_cleanups(self) -> None:
        for index in sorted(self.cleanups):
            call_value(self.cleanups[index], [])
        self.cleanups.clear()


def current_frame() -> HookFrame:
    frame = _current_frame.get()
    if frame is None:
        raise HookError("Invalid hook call. Hooks can only be called inside the body of a function component.")
    return frame


def activate(frame: Optional[HookFrame]) -> Any:
    return _current_frame.set(frame)


def deactivate(token: Any) -> None:
    _current_frame.reset(token)


def _deps_changed(previous: Any, deps: Any) -> bool:
    if deps is UNDEFINED or deps is None or previous is None:
        return True
    if not isinstance(deps, list) or not isinstance(previous, list) or len(deps) != len(previous):
        return True
    return any(not same_value_zero(old, new) for old, new in zip(previous, deps))


def use_state(initial: Any = UNDEFINED) -> List[Any]:
    frame = current_frame()
    index, new = frame.next_slot("state")
    if new:
        value = call_value(initial, []) if callable(initial) else initial
        slot = StateSlot(value)

        def set_state(update: Any = UNDEFINED) -> Any:
            value = call_value(update, [slot.value]) if callable(update) else update
            if not same_value_zero(value, slot.value):
                slot.value = value
                frame.renderer.schedule(frame)
            return UNDEFINED

        slot.setter = NativeFunction("setState", set_state)
        frame.slots[index] = slot
    slot = frame.slots[index]
    return [slot.value, slot.setter]


def use_reducer(reducer: Any, initial: Any = UNDEFINED, init: Any = UNDEFINED) -> List[Any]:
    frame = current_frame()
    index, new = frame.next_slot("reducer")
    if new:
        value = call_value(init, [initial]) if init is not UNDEFINED else initial
        slot = StateSlot(value)

        def dispatch(action: Any = UNDEFINED) -> Any:
            value = call_value(reducer, [slot.value, action])
            if not same_value_zero(value, slot.value):
                slot.value = value
                frame.renderer.schedule(frame)
            return UNDEFINED

        slot.setter = NativeFunction("dispatch", dispatch)
        frame.slots[index] = slot
    slot = frame.slots[index]
    return [slot.value, slot.setter]


def _effect(kind: str, effect: Any, deps: Any) -> Any:
    frame = current_frame()
    index, new = frame.next_slot(kind)
    previous = None if new else frame.slots[index]
    if new or _deps_changed(previous, deps):
        frame.slots[index] = list(deps) if isinstance(deps, list) else None
        frame.pending_effects.append((index, effect))
    return UNDEFINED


def use_effect(effect: Any, deps: Any = UNDEFINED) -> Any:
    return _effect("effect", effect, deps)


def use_layout_effect(effect: Any, deps: Any = UNDEFINED) -> Any:
    return _effect("layout_effect", effect, deps)


def use_memo(factory: Any, deps: Any = UNDEFINED) -> Any:
    frame = current_frame()
    index, new = frame.next_slot("memo")
    if new or _deps_changed(frame.slots[index][0], deps):
        frame.slots[index] = (list(deps) if isinstance(deps, list) else None, call_value(factory, []))
    return frame.slots[index][1]


def use_callback(callback: Any, deps: Any = UNDEFINED) -> Any:
    frame = current_frame()
    index, new = frame.next_slot("callback")
    if new or _deps_changed(frame.slots[index][0], deps):
        frame.slots[index] = (list(deps) if isinstance(deps, list) else None, callback)
    return frame.slots[index][1]


def use_ref(initial: Any = UNDEFINED) -> Dict[str, Any]:
    frame = current_frame()
    index, new = frame.next_slot("ref")
    if new:
        frame.slots[index] = {"current": initial}
    return frame.slots[index]


def use_context(context: "Context") -> Any:
    frame = current_frame()
    return frame.contexts.get(context, getattr(context, "default", UNDEFINED))


def use_id() -> str:
    frame = current_frame()
    index, new = frame.next_slot("id")
    if new:
        frame.slots[index] = f":r{frame.renderer.next_id()}:"
    return frame.slots[index]


HOOKS: Dict[str, Callable[..., Any]] = {
    "useState": use_state,
    "useReducer": use_reducer,
    "useEffect": use_effect,
    "useLayoutEffect": use_layout_effect,
    "useMemo": use_memo,
    "useCallback": use_callback,
    "useRef": use_ref,
    "useContext": use_context,
    "useId": use_id,
}
