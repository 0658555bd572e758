"""
Multi-group registry loader.

Component groups are loaded together in passes: the first pass runs every
group on its own, later passes re-run each group with the whole Registry
injected so that forward references between groups resolve.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import EngineConfig, load_config
from .errors import SCRIPT_FAILURES, GroupLoadFailure
from .executor import compile_group, error_message, execute_program
from .runtime.placeholder import Placeholder
from .runtime.scope import Scope
from .runtime.values import is_nullish

if TYPE_CHECKING:  # pragma: no cover
    from .scope.builder import ScopeBuilder

logger = logging.getLogger(__name__)

# Names read back from every group's module frame besides the group's own name.
DEFAULT_EXPORT_CATALOGUE: Tuple[str, ...] = ("default_", "default", "Component", "Schema")


@dataclass
class GroupSource:
    name: str
    code: str
    identity: Optional[Dict[str, Any]] = None


@dataclass
class GroupLoadError:
    group: str
    message: str
    code: str = "FE-3001"
    line: Optional[int] = None
    column: Optional[int] = None

    @classmethod
    def from_exception(cls, group: str, exc: BaseException) -> "GroupLoadError":
        failure = GroupLoadFailure(error_message(exc), group=group)
        return cls(
            group=group,
            message=failure.message,
            code=failure.code,
            line=getattr(exc, "line", None),
            column=getattr(exc, "column", None),
        )


@dataclass
class RegistryLoadResult:
    components: Dict[str, Any] = field(default_factory=dict)
    groups: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    errors: List[GroupLoadError] = field(default_factory=list)
    metadata: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def error_for(self, group: str) -> Optional[GroupLoadError]:
        for error in self.errors:
            if error.group == group:
                return error
        return None


class ComponentRegistry:
    """Name -> export map owned by one load."""

    def __init__(self, components: Optional[Dict[str, Any]] = None) -> None:
        self.components: Dict[str, Any] = dict(components or {})

    def merge(self, exports: Dict[str, Any]) -> None:
        self.components.update(exports)

    def snapshot(self) -> Dict[str, Any]:
        return dict(self.components)

    def names(self) -> List[str]:
        return sorted(self.components)

    def __contains__(self, name: object) -> bool:
        return name in self.components

    def __len__(self) -> int:
        return len(self.components)


def declares_name(code: str, name: str) -> bool:
    """True when the group's own source declares `name`, shadowing an injected export."""
    escaped = re.escape(name)
    patterns = (
        rf"\b(?:const|let|var)\s+{escaped}\s*=",
        rf"\bfunction\s+{escaped}\s*\(",
        rf"^\s*{escaped}\s*=\s*\(",
    )
    return any(re.search(pattern, code, re.MULTILINE) for pattern in patterns)


def extract_exports(module: Scope, group: str, catalogue: Iterable[str], include_declarations: bool = True) -> Dict[str, Any]:
    """Read the catalogue names, the group name and (optionally) every top-level binding."""
    names: List[str] = list(module.vars) if include_declarations else []
    names.extend(name for name in (*catalogue, group) if name not in names)
    exports: Dict[str, Any] = {}
    for name in names:
        if name not in module.vars:
            continue
        value = module.vars[name]
        if is_nullish(value) or isinstance(value, Placeholder):
            continue
        exports[name] = value
    return exports


def _group_environment(base: Dict[str, Any], source: GroupSource, registry: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    environment = dict(base)
    if registry:
        for name, value in registry.items():
            if not declares_name(source.code, name):
                environment[name] = value
    return environment


def _run_group(
    source: GroupSource,
    base: Dict[str, Any],
    registry: Optional[Dict[str, Any]],
    catalogue: Sequence[str],
    config: EngineConfig,
) -> Tuple[Dict[str, Any], Optional[BaseException]]:
    try:
        program = compile_group(source.code)
        execution = execute_program(
            program,
            _group_environment(base, source, registry),
            dynamic=True,
            warn_missing=config.warn_missing_names,
        )
    except SCRIPT_FAILURES as exc:
        return {}, exc
    return extract_exports(execution.module, source.name, catalogue), None


def load_component_groups(
    sources: Sequence[GroupSource],
    scope_builder: "ScopeBuilder",
    *,
    enable_cross_references: Optional[bool] = None,
    passes: Optional[int] = None,
    additional_scope: Optional[Dict[str, Any]] = None,
    catalogue: Sequence[str] = DEFAULT_EXPORT_CATALOGUE,
    config: Optional[EngineConfig] = None,
) -> RegistryLoadResult:
    """Load every group into one Registry.

    Pass 1 runs each group with no other group's exports. Each further pass
    (two passes in total by default) re-runs every group with the current
    Registry injected; its results overwrite earlier values of the same name
    and replace the group's snapshot in `groups`. A failing group keeps its
    last good snapshot and is reported once.
    """
    config = config or load_config()
    cross_references = config.enable_cross_references if enable_cross_references is None else enable_cross_references
    total_passes = max(1, passes if passes is not None else config.loader_passes)
    base = {**scope_builder.build_scope(), **(additional_scope or {})}

    registry = ComponentRegistry()
    result = RegistryLoadResult()
    failed: Dict[str, GroupLoadError] = {}

    for source in sources:
        if source.identity:
            result.metadata[source.name] = source.identity

    def record_failure(source: GroupSource, exc: BaseException, pass_number: int) -> None:
        if source.name in failed:
            return
        error = GroupLoadError.from_exception(source.name, exc)
        failed[source.name] = error
        result.errors.append(error)
        logger.warning("Group %s failed in pass %d: %s", source.name, pass_number, error.message)

    for source in sources:
        exports, exc = _run_group(source, base, None, catalogue, config)
        if exc is not None:
            record_failure(source, exc, 1)
        result.groups[source.name] = exports
        registry.merge(exports)

    if cross_references:
        for pass_number in range(2, total_passes + 1):
            for source in sources:
                exports, exc = _run_group(source, base, registry.components, catalogue, config)
                if exc is not None:
                    record_failure(source, exc, pass_number)
                    continue
                result.groups[source.name] = exports
                registry.merge(exports)

    result.components = registry.snapshot()
    logger.info("Loaded %d exports from %d groups", len(result.components), len(sources))
    return result


def load_single_group(
    source: GroupSource,
    scope_builder: "ScopeBuilder",
    registry: ComponentRegistry,
    *,
    additional_scope: Optional[Dict[str, Any]] = None,
    catalogue: Sequence[str] = DEFAULT_EXPORT_CATALOGUE,
    config: Optional[EngineConfig] = None,
) -> Tuple[Dict[str, Any], Optional[GroupLoadError]]:
    """Load one group against an existing Registry and merge its exports into it."""
    config = config or load_config()
    base = {**scope_builder.build_scope(), **(additional_scope or {})}
    exports, exc = _run_group(source, base, registry.components, catalogue, config)
    if exc is not None:
        error = GroupLoadError.from_exception(source.name, exc)
        logger.warning("Group %s failed: %s", source.name, error.message)
        return {}, error
    registry.merge(exports)
    return exports, None
