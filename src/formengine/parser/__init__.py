"""
Parser package facade.

Public API: `parse_source` for whole programs, `parse_value_source` for
bodies whose leading expression is the result, and `parse_expression_source`
for a single expression.
"""

from __future__ import annotations

from .. import ast_nodes
from ..errors import ParseError
from .core import Parser
from .markup import clean_markup_text


def parse_source(source: str) -> ast_nodes.Program:
    """Parse helper for tests and tooling."""
    return Parser.from_source(source).parse_program()


def parse_value_source(source: str) -> ast_nodes.Program:
    return Parser.from_source(source).parse_value_program()


def parse_expression_source(source: str) -> ast_nodes.Expr:
    parser = Parser.from_source(source)
    expression = parser.parse_expression()
    parser.match_punct(";")
    if not parser.check("EOF"):
        raise parser.unexpected()
    return expression


__all__ = [
    "parse_source",
    "parse_value_source",
    "parse_expression_source",
    "clean_markup_text",
    "ParseError",
    "Parser",
]
