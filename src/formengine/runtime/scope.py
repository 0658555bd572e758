"""
Lexical scopes for the script interpreter.

Every chain ends in a root scope that decides what an unbound name means:
`EnvironmentScope` rejects it, `PlaceholderScope` substitutes a Placeholder.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from ..errors import EvaluationError, UnresolvedNameError
from .placeholder import Placeholder
from .values import UNDEFINED

logger = logging.getLogger(__name__)

# Names that form code commonly probes for; a miss is expected and not logged.
OPTIONAL_NAMES = frozenset(
    {
        "InitialData",
        "Schema",
        "Query",
        "Identity",
        "__scope__",
        "style",
        "handleBeforeUnload",
        "undefined",
        "FormComponent",
        "arguments",
    }
)


class Scope:
    __slots__ = ("vars", "parent", "kind", "constants")

    def __init__(self, parent: Optional["Scope"] = None, kind: str = "block") -> None:
        self.vars: Dict[str, Any] = {}
        self.parent = parent
        self.kind = kind
        self.constants: set[str] = set()

    def child(self, kind: str = "block") -> "Scope":
        return Scope(self, kind)

    def root(self) -> "Scope":
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    def function_scope(self) -> "Scope":
        scope = self
        while scope.kind not in {"function", "module"} and scope.parent is not None:
            scope = scope.parent
        return scope

    def module_scope(self) -> "Scope":
        scope = self
        while scope.kind != "module" and scope.parent is not None:
            scope = scope.parent
        return scope

    def declare(self, name: str, value: Any, kind: str = "let") -> None:
        target = self.function_scope() if kind == "var" else self
        target.vars[name] = value
        if kind == "const":
            target.constants.add(name)
        else:
            target.constants.discard(name)

    def has(self, name: str) -> bool:
        scope: Optional[Scope] = self
        while scope is not None:
            if name in scope.vars:
                return True
            scope = scope.parent
        return False

    def lookup(self, name: str) -> Any:
        scope = self
        while True:
            if name in scope.vars:
                return scope.vars[name]
            if scope.parent is None:
                return scope.missing(name)
            scope = scope.parent

    def lookup_this(self) -> Any:
        scope: Optional[Scope] = self
        while scope is not None:
            if scope.kind in {"function", "module"} and "this" in scope.vars:
                return scope.vars["this"]
            scope = scope.parent
        return UNDEFINED

    def assign(self, name: str, value: Any) -> None:
        scope = self
        while True:
            if name in scope.vars and scope.writable(name):
                if name in scope.constants:
                    raise EvaluationError("Assignment to constant variable.")
                scope.vars[name] = value
                return
            if scope.parent is None:
                break
            scope = scope.parent
        scope.assign_missing(name, value, self)

    def writable(self, name: str) -> bool:
        return True

    def missing(self, name: str) -> Any:
        raise UnresolvedNameError(f"{name} is not defined", name=name)

    def assign_missing(self, name: str, value: Any, origin: "Scope") -> None:
        raise UnresolvedNameError(f"{name} is not defined", name=name)


class EnvironmentScope(Scope):
    """Strict root: environment names behave like parameters of a strict function."""

    __slots__ = ()

    def __init__(self, bindings: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(None, kind="environment")
        self.vars = dict(bindings or {})


class PlaceholderScope(Scope):
    """Dynamic-lookup root used by whole-form and component-group execution.

    Unknown reads synthesise a Placeholder (logged unless the name is in
    `optional_names`). Bound names are read-only here: assignment to a name
    not declared in script lands in the module scope instead.
    """

    __slots__ = ("warn", "optional_names", "misses", "_placeholders")

    def __init__(
        self,
        bindings: Optional[Dict[str, Any]] = None,
        *,
        warn: bool = True,
        optional_names: Iterable[str] = OPTIONAL_NAMES,
    ) -> None:
        super().__init__(None, kind="environment")
        self.vars = dict(bindings or {})
        self.warn = warn
        self.optional_names = frozenset(optional_names)
        self.misses: list[str] = []
        self._placeholders: Dict[str, Placeholder] = {}

    def writable(self, name: str) -> bool:
        return False

    def missing(self, name: str) -> Any:
        placeholder = self._placeholders.get(name)
        if placeholder is None:
            placeholder = Placeholder(name)
            self._placeholders[name] = placeholder
            self.misses.append(name)
            if self.warn and name not in self.optional_names:
                logger.warning("[Form] Missing: %s", name)
        return placeholder

    def assign_missing(self, name: str, value: Any, origin: Scope) -> None:
        origin.module_scope().vars[name] = value
