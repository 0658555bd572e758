"""
Environment-bound executor.

Compiles transformed source text with the embedded script compiler and runs
it against an Environment. Ordinary shapes resolve names statically; the
whole-form path and component groups use a dynamic-lookup root that
substitutes Placeholders for unknown names. Every failure is converted into
an inert error-display unit at this boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple

from . import ast_nodes
from .config import EngineConfig, load_config
from .errors import SCRIPT_FAILURES, CompileFailure, FormEngineError, LexError, ParseError
from .observability.logging_utils import redact_source
from .parser import parse_source, parse_value_source
from .references import free_names
from .runtime.functions import NativeFunction
from .runtime.interpreter import Interpreter
from .runtime.placeholder import Placeholder
from .runtime.scope import EnvironmentScope, PlaceholderScope, Scope
from .runtime.values import UNDEFINED, is_nullish
from .transformer import COMPONENT_NAME, SourceShape, TransformResult, WrapperKind, preprocess_markup, transform_source
from .transformer.rewrite import EMPTY_SOURCE_TEXT, normalize_source
from .ui.elements import create_element

if TYPE_CHECKING:  # pragma: no cover
    from .scope.builder import ScopeBuilder

logger = logging.getLogger(__name__)

FORM_COMPONENT_NAME = "FormComponent"
INITIAL_DATA_NAME = "InitialData"
MISSING_FORM_COMPONENT = "FormComponent not found in the form code"

EMPTY_STYLE = {"color": "#797775", "fontStyle": "italic"}
TEXT_STYLE = {"fontStyle": "italic", "color": "#605e5c", "padding": "8px"}


@dataclass
class CompiledUnit:
    transform: TransformResult
    program: Optional[ast_nodes.Program] = None
    references: Tuple[str, ...] = ()

    @property
    def shape(self) -> SourceShape:
        return self.transform.shape

    @property
    def wrapper(self) -> WrapperKind:
        return self.transform.wrapper


@dataclass
class UnitExecution:
    """Outcome of running one compiled program."""

    value: Any
    module: Scope
    misses: List[str] = field(default_factory=list)


@dataclass
class FormRender:
    render: Any
    initial_data: Any = field(default_factory=dict)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, FormEngineError):
        return str(exc)
    return str(exc) or type(exc).__name__


def error_component(message: str) -> NativeFunction:
    """Inert component rendering `div.error-message`."""
    return NativeFunction("ErrorMessage", lambda props=None: create_element("div", {"className": "error-message"}, message))


def static_component(value: Any, name: str = "Preview") -> NativeFunction:
    return NativeFunction(name, lambda props=None: value)


def _inert_component(result: TransformResult) -> NativeFunction:
    style = EMPTY_STYLE if result.shape is SourceShape.EMPTY else TEXT_STYLE
    return static_component(create_element("div", {"style": dict(style)}, result.body or EMPTY_SOURCE_TEXT), "InertText")


def _parse(body: str, value_program: bool) -> ast_nodes.Program:
    try:
        return parse_value_source(body) if value_program else parse_source(body)
    except (LexError, ParseError) as exc:
        raise CompileFailure(exc.message, line=exc.line, column=exc.column) from exc


def compile_source(text: str) -> CompiledUnit:
    """Transform `text` and parse the rewritten body.

    Raises `CompileFailure` when the body is not valid script.
    """
    result = transform_source(text)
    if result.is_inert:
        return CompiledUnit(result)
    program = _parse(result.body, result.wrapper in (WrapperKind.VERBATIM, WrapperKind.IIFE))
    return CompiledUnit(result, program, free_names(program))


def compile_group(code: str) -> ast_nodes.Program:
    """Parse component-group source text as a plain program."""
    return _parse(preprocess_markup(normalize_source(code or "")), False)


def execute_program(
    program: ast_nodes.Program,
    environment: Dict[str, Any],
    *,
    dynamic: bool = False,
    warn_missing: bool = True,
) -> UnitExecution:
    """Run `program` in a fresh module frame whose root binds `environment`."""
    root: Scope
    if dynamic:
        root = PlaceholderScope(environment, warn=warn_missing)
    else:
        root = EnvironmentScope(environment)
    module = root.child("module")
    value = Interpreter().run_program(program, module)
    misses = list(root.misses) if isinstance(root, PlaceholderScope) else []
    return UnitExecution(value, module, misses)


def _is_real(value: Any) -> bool:
    return not is_nullish(value) and not isinstance(value, Placeholder)


def render_function(unit: CompiledUnit, environment: Dict[str, Any]) -> Any:
    """Execute an ordinary-shape unit and return its render function."""
    if unit.transform.is_inert or unit.program is None:
        return _inert_component(unit.transform)
    try:
        execution = execute_program(unit.program, environment)
    except SCRIPT_FAILURES as exc:
        logger.warning("Source execution failed: %s", error_message(exc))
        return error_component(error_message(exc))
    if unit.wrapper is WrapperKind.NAMED_FUNCTION:
        component = execution.module.vars.get(COMPONENT_NAME, UNDEFINED)
        if not callable(component):
            return error_component(f"{COMPONENT_NAME} is not defined")
        return component
    return static_component(execution.value)


def form_render(unit: CompiledUnit, environment: Dict[str, Any], config: Optional[EngineConfig] = None) -> FormRender:
    """Execute a whole-form unit and read `FormComponent` and `InitialData` back."""
    config = config or load_config()
    if unit.program is None:
        return FormRender(error_component(MISSING_FORM_COMPONENT), {})
    try:
        execution = execute_program(unit.program, environment, dynamic=True, warn_missing=config.warn_missing_names)
    except SCRIPT_FAILURES as exc:
        logger.warning("Form execution failed: %s", error_message(exc))
        return FormRender(error_component(error_message(exc)), {})
    module_vars = execution.module.vars
    initial_data = module_vars.get(INITIAL_DATA_NAME, UNDEFINED)
    if not _is_real(initial_data):
        initial_data = {}
    component = module_vars.get(FORM_COMPONENT_NAME, UNDEFINED)
    if not _is_real(component) or not callable(component):
        return FormRender(error_component(MISSING_FORM_COMPONENT), initial_data)
    return FormRender(component, initial_data)


def compile_and_render(
    text: str,
    environment: Dict[str, Any],
    on_initial_data: Optional[Callable[[Any], Any]] = None,
    config: Optional[EngineConfig] = None,
) -> Tuple[Any, CompiledUnit | None]:
    """Compile and execute `text`, returning `(render, unit)`; `unit` is None on a compile failure."""
    logger.debug("Compiling source: %s", redact_source(text))
    try:
        unit = compile_source(text)
    except CompileFailure as exc:
        logger.warning("Source compilation failed: %s", error_message(exc))
        return error_component(error_message(exc)), None
    if unit.shape is SourceShape.WHOLE_FORM:
        form = form_render(unit, environment, config)
        if on_initial_data is not None:
            on_initial_data(form.initial_data)
        return form.render, unit
    return render_function(unit, environment), unit


def create_component_from_code(
    text: str,
    scope_builder: "ScopeBuilder",
    on_initial_data: Optional[Callable[[Any], Any]] = None,
    config: Optional[EngineConfig] = None,
) -> Any:
    """Build an Environment from `scope_builder` and turn `text` into a render function."""
    render, _ = compile_and_render(text, scope_builder.build_scope(), on_initial_data, config)
    return render
