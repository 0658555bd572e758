"""
Centralized configuration loader for the form engine.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass
class EngineConfig:
    enable_cross_references: bool = True
    loader_passes: int = 2
    warn_missing_names: bool = True
    max_render_passes: int = 25
    log_level: str = "WARNING"


def _env_bool(environ: dict, name: str, default: bool) -> bool:
    val = environ.get(name)
    if val is None:
        return default
    lowered = str(val).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def _env_int(environ: dict, name: str, default: int, minimum: int = 1) -> int:
    try:
        value = int(environ.get(name, default))
    except (TypeError, ValueError):
        return default
    return value if value >= minimum else default


def load_config(env: Optional[dict] = None) -> EngineConfig:
    environ = env if env is not None else os.environ
    return EngineConfig(
        enable_cross_references=_env_bool(environ, "FORMENGINE_CROSS_REFERENCES", True),
        loader_passes=_env_int(environ, "FORMENGINE_LOADER_PASSES", 2),
        warn_missing_names=_env_bool(environ, "FORMENGINE_WARN_MISSING", True),
        max_render_passes=_env_int(environ, "FORMENGINE_MAX_RENDER_PASSES", 25),
        log_level=str(environ.get("FORMENGINE_LOG_LEVEL") or "WARNING").upper(),
    )
