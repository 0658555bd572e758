from __future__ import annotations

import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
SOURCE_PREVIEW_LIMIT = 80


def _env_bool(name: str, default: bool = True) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def redact_source(text: Optional[str], limit: int = SOURCE_PREVIEW_LIMIT) -> str:
    """
    Shorten author source text before it reaches a log record.
    """

    if not text:
        return ""
    if not _env_bool("FORMENGINE_LOG_REDACT_SOURCE", True):
        return text
    flattened = " ".join(text.split())
    if len(flattened) <= limit:
        return flattened
    return f"{flattened[:limit]}... [{len(text)} chars]"


def configure_logging(level: str = "WARNING", fmt: str = DEFAULT_FORMAT) -> None:
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=fmt)
    logging.getLogger("formengine").setLevel(resolved)
