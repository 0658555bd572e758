"""Application factory that builds the FastAPI preview app."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from ..config import EngineConfig, load_config
from ..version import __version__
from .routes import build_groups_router, build_health_router, build_preview_router
from .routes.preview import BuilderFactory, default_builder_factory

logger = logging.getLogger(__name__)


def create_app(config: Optional[EngineConfig] = None, builder_factory: BuilderFactory = default_builder_factory) -> FastAPI:
    """Create the FastAPI app."""

    config = config or load_config()
    app = FastAPI(title="formengine preview", version=__version__)
    app.include_router(build_health_router())
    app.include_router(build_preview_router(config, builder_factory))
    app.include_router(build_groups_router(config))
    logger.debug("Preview app created (cross references: %s)", config.enable_cross_references)
    return app


__all__ = ["create_app"]
