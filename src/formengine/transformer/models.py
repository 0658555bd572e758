"""
Result types for the source transformer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SourceShape(str, Enum):
    EMPTY = "empty"
    TEXT = "text"
    MARKUP = "markup"
    STATEMENTS = "statements"
    FUNCTION_BODY = "function_body"
    ARROW_COMPONENT = "arrow_component"
    WHOLE_FORM = "whole_form"


class WrapperKind(str, Enum):
    INERT = "inert"
    VERBATIM = "verbatim"
    IIFE = "iife"
    NAMED_FUNCTION = "named_function"
    WHOLE_FORM = "whole_form"


# Name the named-function wrapper defines and the executor reads back.
COMPONENT_NAME = "ExampleComponent"


@dataclass(frozen=True)
class TransformResult:
    shape: SourceShape
    wrapper: WrapperKind
    body: str
    uses_stateful_bindings: bool = False
    references_form: bool = False

    @property
    def is_inert(self) -> bool:
        return self.wrapper is WrapperKind.INERT
