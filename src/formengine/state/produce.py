"""
Copy-on-write updates in the style of `produce(base, recipe)`.
"""

from __future__ import annotations

from typing import Any

from ..runtime.functions import NativeFunction, ScriptFunction, call_value
from ..runtime.values import UNDEFINED


def clone(value: Any) -> Any:
    """Copy the dict/list structure of a value; leaves are shared."""
    if isinstance(value, dict):
        return {key: clone(item) for key, item in value.items()}
    if isinstance(value, list):
        return [clone(item) for item in value]
    return value


def produce(base: Any = UNDEFINED, recipe: Any = UNDEFINED) -> Any:
    """Apply `recipe` to a draft copy of `base` and return the next state.

    A recipe may mutate the draft (returning undefined, or None from a
    Python callable) or return a replacement. Called with only a function,
    returns a curried producer.
    """
    if callable(base) and recipe is UNDEFINED:
        curried = base
        return NativeFunction("producer", lambda state=UNDEFINED, *args: produce(state, curried))
    draft = clone(base)
    result = call_value(recipe, [draft])
    if result is UNDEFINED or (result is None and not isinstance(recipe, ScriptFunction)):
        return draft
    return result
