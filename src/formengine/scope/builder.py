"""
Environment builder.

A `ScopeBuilder` collects named bindings in sections and flattens them into
the name -> value map executed source text runs against. Sections are
composed in a fixed order so globals always win over components and
namespaces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..runtime.functions import NativeFunction, call_value
from ..runtime.stdlib import build_standard_globals
from ..runtime.values import UNDEFINED
from ..ui import elements
from ..ui.hooks import HOOKS

# Names whose calls are slot-indexed per render; their presence forces a
# named-function wrapper.
STATEFUL_BINDING_NAMES: Tuple[str, ...] = (
    "useState",
    "useEffect",
    "useMemo",
    "useCallback",
    "useRef",
    "useSourceData",
    "useActiveData",
    "useCodeList",
    "useFormState",
    "useFieldValue",
    "useActivityOptions",
    "useSection",
    "useTheme",
)

SECTIONS: Tuple[str, ...] = ("primitives", "hooks", "namespaces", "components", "utilities", "globals")


@dataclass
class ScopeConfig:
    primitives: Dict[str, Any] = field(default_factory=dict)
    hooks: Dict[str, Any] = field(default_factory=dict)
    namespaces: Dict[str, Any] = field(default_factory=dict)
    components: Dict[str, Any] = field(default_factory=dict)
    utilities: Dict[str, Any] = field(default_factory=dict)
    globals: Dict[str, Any] = field(default_factory=dict)

    def copy(self) -> "ScopeConfig":
        return ScopeConfig(**{name: dict(getattr(self, name)) for name in SECTIONS})


def _children_map(children: Any, callback: Any) -> Any:
    if children is None or children is UNDEFINED:
        return children
    items = children if isinstance(children, list) else [children]
    return [call_value(callback, [child, index]) for index, child in enumerate(items)]


def _children_count(children: Any) -> int:
    if children is None or children is UNDEFINED:
        return 0
    return len(children) if isinstance(children, list) else 1


def _children_to_array(children: Any) -> Any:
    if children is None or children is UNDEFINED:
        return []
    return list(children) if isinstance(children, list) else [children]


def _children_only(children: Any) -> Any:
    if not elements.is_valid_element(children):
        raise TypeError("React.Children.only expected to receive a single element child.")
    return children


def _children_for_each(children: Any, callback: Any) -> Any:
    _children_map(children, callback)
    return UNDEFINED


def core_bindings() -> Dict[str, Any]:
    """Element factories, hook functions and the `React` namespace."""
    hooks = {name: NativeFunction(name, func) for name, func in HOOKS.items()}
    factories = {
        "createElement": NativeFunction("createElement", elements.create_element),
        "cloneElement": NativeFunction("cloneElement", elements.clone_element),
        "isValidElement": NativeFunction("isValidElement", elements.is_valid_element),
        "createContext": NativeFunction("createContext", elements.create_context),
        "memo": NativeFunction("memo", elements.memo),
        "forwardRef": NativeFunction("forwardRef", elements.forward_ref),
        "Fragment": elements.Fragment,
    }
    children = {
        "map": NativeFunction("map", _children_map),
        "forEach": NativeFunction("forEach", _children_for_each),
        "count": NativeFunction("count", _children_count),
        "toArray": NativeFunction("toArray", _children_to_array),
        "only": NativeFunction("only", _children_only),
    }
    react = {**factories, **hooks, "Children": children}
    return {"React": react, **hooks, **factories}


class ScopeBuilder:
    """Chainable collector of Environment sections."""

    def __init__(self, config: Optional[ScopeConfig] = None) -> None:
        self.config = config.copy() if config is not None else ScopeConfig()

    def _merge(self, section: str, bindings: Optional[Mapping[str, Any]]) -> "ScopeBuilder":
        if bindings:
            getattr(self.config, section).update(bindings)
        return self

    def with_primitives(self, bindings: Mapping[str, Any]) -> "ScopeBuilder":
        return self._merge("primitives", bindings)

    def with_hooks(self, bindings: Mapping[str, Any], replace: bool = False) -> "ScopeBuilder":
        if replace:
            self.config.hooks = dict(bindings or {})
            return self
        return self._merge("hooks", bindings)

    def with_namespaces(self, bindings: Mapping[str, Any]) -> "ScopeBuilder":
        return self._merge("namespaces", bindings)

    def with_components(self, bindings: Mapping[str, Any]) -> "ScopeBuilder":
        return self._merge("components", bindings)

    def with_utilities(self, bindings: Mapping[str, Any]) -> "ScopeBuilder":
        return self._merge("utilities", bindings)

    def with_globals(self, bindings: Mapping[str, Any]) -> "ScopeBuilder":
        return self._merge("globals", bindings)

    def extend(self, config: ScopeConfig) -> "ScopeBuilder":
        """Merge every section of `config` into this builder."""
        for section in SECTIONS:
            self._merge(section, getattr(config, section))
        return self

    def get_config(self) -> ScopeConfig:
        return self.config.copy()

    def build_scope(self) -> Dict[str, Any]:
        scope: Dict[str, Any] = core_bindings()
        scope.update(self.config.primitives)
        scope.update(self.config.hooks)
        scope.update(self.config.namespaces)
        scope.update(self.config.components)
        scope.update(self.config.utilities)
        scope.update(build_standard_globals())
        scope.update(self.config.globals)
        return scope
