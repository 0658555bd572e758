"""API routers for the preview server."""

from .groups import build_groups_router
from .health import build_health_router
from .preview import build_preview_router

__all__ = ["build_groups_router", "build_health_router", "build_preview_router"]
