"""
Callable values: script functions, host-implemented natives, and the
helpers that call or construct any of them.
"""

from __future__ import annotations

import inspect
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence

from .. import ast_nodes
from ..errors import EvaluationError
from .values import UNDEFINED, ScriptObject

if TYPE_CHECKING:  # pragma: no cover
    from .interpreter import Interpreter
    from .scope import Scope


class ScriptFunction:
    """A function defined in script code; also a plain Python callable."""

    def __init__(self, node: ast_nodes.FunctionExpr, closure: "Scope", interpreter: "Interpreter", name: str = "") -> None:
        self.node = node
        self.closure = closure
        self.interpreter = interpreter
        self.name = name or node.name or ""
        self.properties: Dict[str, Any] = {}

    @property
    def is_arrow(self) -> bool:
        return self.node.is_arrow

    @property
    def arity(self) -> int:
        count = 0
        for param in self.node.params:
            if isinstance(param, (ast_nodes.AssignmentPattern, ast_nodes.RestElement)):
                break
            count += 1
        return count

    def __call__(self, *args: Any) -> Any:
        return self.interpreter.call_script_function(self, UNDEFINED, list(args))

    def invoke(self, this: Any, args: Sequence[Any]) -> Any:
        return self.interpreter.call_script_function(self, this, list(args))

    def __repr__(self) -> str:
        return f"<function {self.name or 'anonymous'}>"


class NativeFunction:
    """Host function exposed to scripts, with optional static properties."""

    def __init__(
        self,
        name: str,
        func: Callable[..., Any],
        properties: Optional[Dict[str, Any]] = None,
        construct: Optional[Callable[..., Any]] = None,
        instance_check: Optional[Callable[[Any], bool]] = None,
    ) -> None:
        self.name = name
        self.func = func
        self.properties: Dict[str, Any] = dict(properties or {})
        self.construct = construct
        self.instance_check = instance_check

    def __call__(self, *args: Any) -> Any:
        return self.func(*fit_args(self.func, args))

    def __repr__(self) -> str:
        return f"<native {self.name}>"


class BoundFunction:
    """Result of `fn.bind(thisArg, ...args)`."""

    def __init__(self, target: Any, this: Any, bound_args: Sequence[Any]) -> None:
        self.target = target
        self.this = this
        self.bound_args = list(bound_args)
        self.name = f"bound {getattr(target, 'name', '')}"
        self.properties: Dict[str, Any] = {}

    def __call__(self, *args: Any) -> Any:
        return call_value(self.target, self.bound_args + list(args), self.this)


@lru_cache(maxsize=512)
def _positional_limit_cached(func: Callable[..., Any]) -> Optional[int]:
    return _positional_limit(func)


def _positional_limit(func: Callable[..., Any]) -> Optional[int]:
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


def fit_args(func: Callable[..., Any], args: Sequence[Any]) -> Sequence[Any]:
    """Drop surplus arguments a host function cannot accept, as scripts may pass extra ones."""
    try:
        limit = _positional_limit_cached(func)
    except TypeError:
        limit = _positional_limit(func)
    if limit is None or len(args) <= limit:
        return args
    return args[:limit]


def call_value(func: Any, args: Sequence[Any], this: Any = UNDEFINED, description: str = "") -> Any:
    if isinstance(func, ScriptFunction):
        return func.invoke(this, args)
    if isinstance(func, (NativeFunction, BoundFunction)):
        return func(*args)
    if not callable(func):
        raise EvaluationError(f"{description or 'value'} is not a function")
    return func(*fit_args(func, list(args)))


def construct_value(callee: Any, args: List[Any], description: str = "") -> Any:
    if isinstance(callee, NativeFunction):
        if callee.construct is None:
            raise EvaluationError(f"{description or callee.name} is not a constructor")
        return callee.construct(*fit_args(callee.construct, args))
    if isinstance(callee, ScriptFunction):
        if callee.is_arrow:
            raise EvaluationError(f"{description or callee.name} is not a constructor")
        instance = ScriptObject(constructor=callee)
        prototype = callee.properties.get("prototype")
        if isinstance(prototype, dict):
            for key, value in prototype.items():
                instance.setdefault(key, value)
        result = callee.invoke(instance, args)
        if isinstance(result, (dict, list)) or isinstance(result, ScriptFunction):
            return result
        return instance
    if isinstance(callee, type):
        return callee(*args)
    raise EvaluationError(f"{description or 'value'} is not a constructor")


def function_arity(func: Any) -> int:
    if isinstance(func, ScriptFunction):
        return func.arity
    target = func.func if isinstance(func, NativeFunction) else func
    limit = _positional_limit(target) if callable(target) else 0
    return limit or 0
