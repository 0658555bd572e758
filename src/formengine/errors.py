"""
Custom error types for the formengine toolchain.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class FormEngineError(Exception):
    """Base error with optional location metadata."""

    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        location = ""
        if self.line is not None:
            location = f" (line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location += ")"
        return f"{self.message}{location}"


class LexError(FormEngineError):
    """Lexical analysis error."""


class ParseError(FormEngineError):
    """Parsing error."""


class EvaluationError(FormEngineError):
    """Raised when script evaluation fails."""


@dataclass
class UnresolvedNameError(EvaluationError):
    """Raised on the static resolution path when a free identifier is unbound."""

    name: str = ""


@dataclass
class ScriptThrow(EvaluationError):
    """Carries a value thrown by author code with `throw`."""

    value: Any = None


class HookError(FormEngineError):
    """Raised when a stateful binding is used outside a render or out of order."""


class RenderError(FormEngineError):
    """Raised when an element tree cannot be rendered."""


@dataclass
class CompileFailure(FormEngineError):
    """Raised when rewritten source text cannot be compiled."""

    code: str = "FE-1001"
    diagnostics: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:  # pragma: no cover - trivial
        if self.diagnostics is None:
            self.diagnostics = [
                {
                    "code": self.code,
                    "message": self.message,
                    "severity": "error",
                    "line": self.line,
                    "column": self.column,
                }
            ]


@dataclass
class GroupLoadFailure(FormEngineError):
    """Raised inside the loader when one component group fails to execute."""

    group: str = ""
    code: str = "FE-3001"
    diagnostics: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:  # pragma: no cover - trivial
        if self.diagnostics is None:
            self.diagnostics = [
                {"code": self.code, "message": self.message, "severity": "error", "group": self.group}
            ]


# Failures a script `catch` clause or a render error boundary may observe.
SCRIPT_FAILURES = (FormEngineError, ArithmeticError, LookupError, TypeError, ValueError, AttributeError, RecursionError)
