"""
Parser for the form script language.

Expression, statement, and markup rules live in sibling modules and are
attached to `Parser` as methods. The parser pulls tokens from the lexer on
demand so that markup can be read from the raw source.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .. import ast_nodes
from ..errors import ParseError
from ..lexer import Lexer, Token
from . import expr, markup, stmt


class Parser:
    def __init__(self, lexer: Lexer) -> None:
        self.lexer = lexer
        self.current: Token = lexer.next_token()
        self.previous: Optional[Token] = None
        self.no_in = False

    @classmethod
    def from_source(cls, source: str, line_offset: int = 0) -> "Parser":
        return cls(Lexer(source, base_offset=line_offset))

    # statements
    parse_program = stmt.parse_program
    parse_value_program = stmt.parse_value_program
    parse_statement = stmt.parse_statement
    parse_block = stmt.parse_block
    parse_var_decl = stmt.parse_var_decl
    parse_function_decl = stmt.parse_function_decl
    parse_if = stmt.parse_if
    parse_for = stmt.parse_for
    parse_while = stmt.parse_while
    parse_do_while = stmt.parse_do_while
    parse_switch = stmt.parse_switch
    parse_try = stmt.parse_try
    parse_import = stmt.parse_import
    parse_export = stmt.parse_export
    consume_semicolon = stmt.consume_semicolon

    # expressions
    parse_expression = expr.parse_expression
    parse_assignment = expr.parse_assignment
    parse_conditional = expr.parse_conditional
    parse_binary = expr.parse_binary
    parse_unary = expr.parse_unary
    parse_postfix = expr.parse_postfix
    parse_call_member = expr.parse_call_member
    parse_new = expr.parse_new
    parse_arguments = expr.parse_arguments
    parse_primary = expr.parse_primary
    parse_template = expr.parse_template
    parse_array_literal = expr.parse_array_literal
    parse_object_literal = expr.parse_object_literal
    parse_property_key = expr.parse_property_key
    parse_function_expr = expr.parse_function_expr
    parse_function_rest = expr.parse_function_rest
    parse_params = expr.parse_params
    parse_function_body = expr.parse_function_body
    try_parse_arrow = expr.try_parse_arrow
    parse_arrow_body = expr.parse_arrow_body
    parse_binding_target = expr.parse_binding_target
    parse_binding_element = expr.parse_binding_element
    parse_object_pattern = expr.parse_object_pattern
    parse_array_pattern = expr.parse_array_pattern
    to_pattern = expr.to_pattern

    # markup
    parse_markup = markup.parse_markup
    read_markup_element = markup.read_markup_element
    parse_markup_children = markup.parse_markup_children
    parse_markup_attributes = markup.parse_markup_attributes
    parse_markup_embedded = markup.parse_markup_embedded
    read_markup_name = markup.read_markup_name
    markup_tag_expr = markup.markup_tag_expr
    skip_markup_space = markup.skip_markup_space

    # -- token helpers -----------------------------------------------------

    def peek(self) -> Token:
        return self.current

    def peek_offset(self, offset: int) -> Token:
        state = self.save()
        try:
            for _ in range(offset):
                self.advance()
            return self.current
        finally:
            self.restore(state)

    def advance(self) -> Token:
        token = self.current
        self.previous = token
        self.current = self.lexer.next_token()
        return token

    def save(self) -> Tuple[int, Token, Optional[Token]]:
        return (self.lexer.pos, self.current, self.previous)

    def restore(self, state: Tuple[int, Token, Optional[Token]]) -> None:
        self.lexer.pos, self.current, self.previous = state

    def reset_to(self, pos: int) -> None:
        """Re-synchronise the token stream at a raw source position."""
        self.lexer.pos = pos
        self.current = self.lexer.next_token()

    def check(self, token_type: str) -> bool:
        return self.current.type == token_type

    def check_value(self, token_type: str, value: str) -> bool:
        return self.current.type == token_type and self.current.value == value

    def check_punct(self, *values: str) -> bool:
        return self.current.type == "PUNCT" and self.current.value in values

    def check_keyword(self, *values: str) -> bool:
        return self.current.type == "KEYWORD" and self.current.value in values

    def match_value(self, token_type: str, value: str) -> bool:
        if self.check_value(token_type, value):
            self.advance()
            return True
        return False

    def match_punct(self, value: str) -> bool:
        return self.match_value("PUNCT", value)

    def consume(self, token_type: str, value: str | None = None) -> Token:
        token = self.current
        if token.type != token_type:
            raise self.error(f"Expected {value or token_type}", token)
        if value is not None and token.value != value:
            raise self.error(f"Expected '{value}'", token)
        return self.advance()

    def consume_punct(self, value: str) -> Token:
        return self.consume("PUNCT", value)

    def consume_name(self) -> Token:
        if self.current.type != "NAME":
            raise self.error("Expected identifier", self.current)
        return self.advance()

    def error(self, message: str, token: Token) -> ParseError:
        if token.type == "EOF" and not message.startswith("Unexpected"):
            message = f"{message} but reached end of input"
        return ParseError(message, token.line, token.column)

    def unexpected(self, token: Optional[Token] = None) -> ParseError:
        token = token or self.current
        if token.type == "EOF":
            return ParseError("Unexpected end of input", token.line, token.column)
        return ParseError(f"Unexpected token '{token.value}'", token.line, token.column)

    def _span(self, token: Token) -> ast_nodes.Span:
        return ast_nodes.Span(line=token.line, column=token.column)
