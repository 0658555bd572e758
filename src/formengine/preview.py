"""
Live preview: source text in, rendered HTML out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import EngineConfig, load_config
from .executor import compile_and_render
from .scope.builder import ScopeBuilder
from .scope.mois import MoisScopeBuilder
from .state import FormStateStore
from .ui.elements import create_element
from .ui.renderer import HostNode, Renderer, to_data, to_html

logger = logging.getLogger(__name__)


@dataclass
class PreviewResult:
    html: str
    nodes: List[Any] = field(default_factory=list)
    initial_data: Any = field(default_factory=dict)
    shape: Optional[str] = None
    error: Optional[str] = None
    references: Tuple[str, ...] = ()
    form_data: Dict[str, Any] = field(default_factory=dict)

    def tree(self) -> Any:
        return to_data(self.nodes)


def _first_error(nodes: List[Any]) -> Optional[str]:
    for node in nodes:
        if not isinstance(node, HostNode):
            continue
        found = node.find_all(lambda candidate: candidate.props.get("className") == "error-message")
        if found:
            return found[0].text()
    return None


def render_preview(
    code: str,
    scope_builder: Optional[ScopeBuilder] = None,
    store: Optional[FormStateStore] = None,
    wrapper: Any = None,
    layout: Any = None,
    config: Optional[EngineConfig] = None,
) -> PreviewResult:
    """Compile `code`, render it inside the optional layout and wrapper, and serialise.

    The store is reset first and receives a whole-form's initial data before
    rendering. Failures surface as an error node, never as an exception.
    """
    config = config or load_config()
    if store is None:
        store = getattr(scope_builder, "store", None) or FormStateStore()
    if scope_builder is None:
        scope_builder = MoisScopeBuilder(store=store)
    store.reset()

    render, unit = compile_and_render(code, scope_builder.build_scope(), store.set_initial_data, config)
    element = create_element(render, {})
    if layout is not None:
        element = create_element(layout, {}, element)
    if wrapper is not None:
        element = create_element(wrapper, {}, element)

    renderer = Renderer(max_passes=config.max_render_passes)
    nodes = renderer.render_safely(element)
    form_data = store.get_form_data()
    renderer.unmount()

    error = _first_error(nodes)
    if error:
        logger.info("Preview rendered with error: %s", error)
    return PreviewResult(
        html=to_html(nodes),
        nodes=nodes,
        initial_data=store.get_initial_data(),
        shape=unit.shape.value if unit is not None else None,
        error=error,
        references=unit.references if unit is not None else (),
        form_data=form_data,
    )
