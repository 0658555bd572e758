"""
Form state store.

A `FormStateStore` owns one form's data, the initial data its whole-form
source declared, and the listeners re-rendering on change. Hook bindings
are bound methods handed to the environment, never module globals.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from ..runtime.functions import NativeFunction, call_value
from ..runtime.values import UNDEFINED
from ..ui import hooks
from .produce import clone, produce

logger = logging.getLogger(__name__)


def empty_form_data() -> Dict[str, Any]:
    return {"field": {"data": {}, "status": {}}, "uiState": {"sections": {}}}


def default_source_data() -> Dict[str, Any]:
    return {
        "patient": {
            "patientId": 500063,
            "name": {"text": "John Smith", "first": "John", "family": "Smith"},
            "dob": "1980-01-15",
            "birthDate": "1980-01-15",
            "gender": "male",
        },
        "optionLists": {},
        "formData": {},
    }


class FormStateStore:
    def __init__(self, source_data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = empty_form_data()
        self._initial: Dict[str, Any] = {}
        self._listeners: List[Callable[[], Any]] = []
        self.source_data: Dict[str, Any] = source_data if source_data is not None else default_source_data()
        self.set_form_data_binding = NativeFunction("setFormData", self.set_form_data)

    def reset(self) -> None:
        self._data = empty_form_data()
        self._initial = {}
        self._notify()

    def set_initial_data(self, data: Any = UNDEFINED) -> None:
        """Record a whole-form's InitialData and merge it into `field.data`."""
        self._initial = data if isinstance(data, dict) else {}
        if self._initial:
            field = dict(self._data.get("field") or {})
            field["data"] = {**(field.get("data") or {}), **clone(self._initial)}
            self._data = {**self._data, "field": field}
        self._notify()

    def get_initial_data(self) -> Dict[str, Any]:
        return self._initial

    def get_form_data(self) -> Dict[str, Any]:
        return self._data

    def set_form_data(self, updater: Any = UNDEFINED) -> Any:
        """Apply a recipe, a curried producer, or a partial dict."""
        if callable(updater):
            draft = clone(self._data)
            result = call_value(updater, [draft])
            self._data = result if isinstance(result, dict) else draft
        elif isinstance(updater, dict):
            self._data = {**self._data, **updater}
        else:
            logger.debug("Ignoring form data update of type %s", type(updater).__name__)
            return UNDEFINED
        self._notify()
        return UNDEFINED

    def subscribe(self, listener: Callable[[], Any]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ------------------------------------------------------------------
    # Hook bindings
    # ------------------------------------------------------------------

    def use_active_data(self, selector: Any = UNDEFINED) -> List[Any]:
        """`[formDataWithSetter, setFormData]`, or `[selected, update]` with a selector."""
        _, force_update = hooks.use_reducer(lambda count, _action=None: count + 1, 0)
        hooks.use_effect(lambda: self.subscribe(lambda: call_value(force_update, [UNDEFINED])), [])
        setter = self.set_form_data_binding
        if callable(selector):
            def update_selected(updates: Any = UNDEFINED) -> Any:
                def recipe(draft: Any) -> Any:
                    target = call_value(selector, [draft])
                    if isinstance(target, dict) and isinstance(updates, dict):
                        target.update(updates)
                    return UNDEFINED

                return self.set_form_data(produce(NativeFunction("recipe", recipe)))

            return [call_value(selector, [self._data]), NativeFunction("setSelected", update_selected)]
        return [{**self._data, "setFormData": setter}, setter]

    def use_source_data(self) -> Dict[str, Any]:
        return {
            **self.source_data,
            "initialData": self._initial,
            "useAppSettings": NativeFunction("useAppSettings", lambda: {}),
        }

    def bindings(self) -> Dict[str, Any]:
        """Names form code reaches the store through."""
        return {
            "useActiveData": NativeFunction("useActiveData", self.use_active_data),
            "useSourceData": NativeFunction("useSourceData", self.use_source_data),
            "getFormData": NativeFunction("getFormData", self.get_form_data),
            "initFormData": NativeFunction("initFormData", self.reset),
            "produce": NativeFunction("produce", produce),
        }
