"""
Source transformer: classifies author source text and rewrites it into one
invokable body. Nothing here executes code.
"""

from .models import COMPONENT_NAME, SourceShape, TransformResult, WrapperKind
from .rewrite import EMPTY_SOURCE_TEXT, preprocess_markup, transform_source

__all__ = [
    "COMPONENT_NAME",
    "EMPTY_SOURCE_TEXT",
    "SourceShape",
    "TransformResult",
    "WrapperKind",
    "preprocess_markup",
    "transform_source",
]
