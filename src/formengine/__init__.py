"""
formengine: compile and render live form component source.
"""

from .version import __version__, TREE_VERSION  # noqa: F401

__all__ = [
    "lexer",
    "parser",
    "ast_nodes",
    "runtime",
    "ui",
    "state",
    "scope",
    "transformer",
    "executor",
    "loader",
    "preview",
    "errors",
    "config",
    "__version__",
    "TREE_VERSION",
]
