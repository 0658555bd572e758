"""Transform and render routes for the live preview."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter

from ...config import EngineConfig
from ...errors import CompileFailure
from ...executor import compile_source
from ...observability.logging_utils import redact_source
from ...preview import render_preview
from ...scope.mois import MoisScopeBuilder
from ...state import FormStateStore
from ...transformer import transform_source
from ...ui.renderer import json_safe
from ..schemas import RenderRequest, RenderResponse, TransformRequest, TransformResponse

logger = logging.getLogger(__name__)

BuilderFactory = Callable[[FormStateStore, Optional[dict]], MoisScopeBuilder]


def default_builder_factory(store: FormStateStore, identity: Optional[dict] = None) -> MoisScopeBuilder:
    return MoisScopeBuilder(store=store, identity=identity)


def build_preview_router(config: EngineConfig, builder_factory: BuilderFactory = default_builder_factory) -> APIRouter:
    router = APIRouter()

    @router.post("/api/transform", response_model=TransformResponse)
    def api_transform(payload: TransformRequest) -> TransformResponse:
        result = transform_source(payload.code)
        references: list[str] = []
        error = None
        try:
            references = list(compile_source(payload.code).references)
        except CompileFailure as exc:
            error = str(exc)
        return TransformResponse(
            shape=result.shape.value,
            wrapper=result.wrapper.value,
            body=result.body,
            uses_stateful_bindings=result.uses_stateful_bindings,
            references_form=result.references_form,
            references=references,
            error=error,
        )

    @router.post("/api/render", response_model=RenderResponse)
    def api_render(payload: RenderRequest) -> RenderResponse:
        logger.debug("Render request: %s", redact_source(payload.code))
        store = FormStateStore(source_data=payload.source_data)
        builder = builder_factory(store, payload.identity)
        result = render_preview(payload.code, scope_builder=builder, store=store, config=config)
        return RenderResponse(
            html=result.html,
            tree=result.tree(),
            initial_data=json_safe(result.initial_data),
            form_data=json_safe(result.form_data),
            shape=result.shape,
            error=result.error,
            references=list(result.references),
        )

    return router


__all__ = ["build_preview_router", "default_builder_factory"]
