"""Markup parsing helpers attached to `Parser` as methods.

Markup is read straight from the source text rather than from the token
stream: element text is not script and must not be tokenised. Embedded
`{...}` expressions hand control back to the expression parser, which stops
on the closing brace without reading past it.
"""

from __future__ import annotations

import html
from typing import Any, List, Tuple

from .. import ast_nodes
from ..errors import ParseError
from ..lexer import is_identifier_part

__all__ = [
    "parse_markup",
    "read_markup_element",
    "parse_markup_children",
    "parse_markup_attributes",
    "parse_markup_embedded",
    "read_markup_name",
    "markup_tag_expr",
    "skip_markup_space",
    "clean_markup_text",
]


def clean_markup_text(text: str) -> str:
    """Collapse element text the way markup compilers do.

    Lines are trimmed where they meet a line break, whitespace-only lines
    vanish, and the surviving lines are joined with a single space.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    last_non_empty = -1
    for index, line in enumerate(lines):
        if line.strip(" \t"):
            last_non_empty = index
    result = ""
    for index, line in enumerate(lines):
        trimmed = line.replace("\t", " ")
        if index != 0:
            trimmed = trimmed.lstrip(" ")
        if index != len(lines) - 1:
            trimmed = trimmed.rstrip(" ")
        if trimmed:
            if index != last_non_empty:
                trimmed += " "
            result += trimmed
    return result


def _error(self, message: str, pos: int) -> ParseError:
    line, column = self.lexer.location(pos)
    return ParseError(message, line, column)


def _span_at(self, pos: int) -> ast_nodes.Span:
    line, column = self.lexer.location(pos)
    return ast_nodes.Span(line=line, column=column)


def skip_markup_space(self, pos: int) -> int:
    source = self.lexer.source
    while pos < len(source):
        if source[pos].isspace():
            pos += 1
        elif source.startswith("/*", pos):
            end = source.find("*/", pos + 2)
            if end == -1:
                raise _error(self, "Unterminated comment", pos)
            pos = end + 2
        elif source.startswith("//", pos):
            end = source.find("\n", pos)
            pos = len(source) if end == -1 else end
        else:
            break
    return pos


def read_markup_name(self, pos: int, allow_member: bool = True) -> Tuple[str, int]:
    source = self.lexer.source
    start = pos
    while pos < len(source):
        char = source[pos]
        if is_identifier_part(char) or char in "-:" or (allow_member and char == "."):
            pos += 1
        else:
            break
    return source[start:pos], pos


def markup_tag_expr(self, name: str, pos: int) -> ast_nodes.Expr:
    span = _span_at(self, pos)
    if "." in name:
        parts = name.split(".")
        if not all(parts):
            raise _error(self, f"Invalid element name '{name}'", pos)
        node: Any = ast_nodes.Identifier(name=parts[0], span=span)
        for part in parts[1:]:
            node = ast_nodes.Member(object=node, property=ast_nodes.Literal(value=part), span=span)
        return node
    if name[0].islower() or "-" in name or ":" in name:
        return ast_nodes.Literal(value=name, span=span)
    return ast_nodes.Identifier(name=name, span=span)


def parse_markup(self, token) -> ast_nodes.Expr:
    node, end = self.read_markup_element(token.start)
    self.reset_to(end)
    return node


def read_markup_element(self, start: int) -> Tuple[ast_nodes.Expr, int]:
    source = self.lexer.source
    pos = self.skip_markup_space(start + 1)
    if source.startswith(">", pos):
        children, pos = self.parse_markup_children(pos + 1, "")
        return ast_nodes.JsxFragment(children=children, span=_span_at(self, start)), pos
    name, pos = self.read_markup_name(pos)
    if not name:
        raise _error(self, "Expected element name", pos)
    attributes, pos, self_closing = self.parse_markup_attributes(pos)
    children: List[ast_nodes.Expr] = []
    if not self_closing:
        children, pos = self.parse_markup_children(pos, name)
    tag = self.markup_tag_expr(name, start)
    return ast_nodes.JsxElement(tag=tag, attributes=attributes, children=children, span=_span_at(self, start)), pos


def parse_markup_attributes(self, pos: int) -> Tuple[List[Any], int, bool]:
    source = self.lexer.source
    attributes: List[Any] = []
    while True:
        pos = self.skip_markup_space(pos)
        if pos >= len(source):
            raise _error(self, "Unterminated element", pos)
        char = source[pos]
        if char == "/":
            end = self.skip_markup_space(pos + 1)
            if not source.startswith(">", end):
                raise _error(self, "Expected '>'", end)
            return attributes, end + 1, True
        if char == ">":
            return attributes, pos + 1, False
        if char == "{":
            inner = self.skip_markup_space(pos + 1)
            if not source.startswith("...", inner):
                raise _error(self, "Expected '...' in spread attribute", inner)
            argument, pos = self.parse_markup_embedded(inner + 3)
            attributes.append(ast_nodes.JsxSpreadAttribute(argument=argument, span=_span_at(self, inner)))
            continue
        name, name_end = self.read_markup_name(pos, allow_member=False)
        if not name:
            raise _error(self, f"Unexpected character '{char}' in element", pos)
        span = _span_at(self, pos)
        after = self.skip_markup_space(name_end)
        if not source.startswith("=", after):
            attributes.append(ast_nodes.JsxAttribute(name=name, value=None, span=span))
            pos = name_end
            continue
        value_pos = self.skip_markup_space(after + 1)
        quote = source[value_pos] if value_pos < len(source) else ""
        if quote in {'"', "'"}:
            end = source.find(quote, value_pos + 1)
            if end == -1:
                raise _error(self, "Unterminated string constant", value_pos)
            text = html.unescape(source[value_pos + 1:end])
            value: Any = ast_nodes.Literal(value=text, span=_span_at(self, value_pos))
            pos = end + 1
        elif quote == "{":
            value, pos = self.parse_markup_embedded(value_pos + 1)
        elif quote == "<":
            value, pos = self.read_markup_element(value_pos)
        else:
            raise _error(self, "Attribute value must be an expression or a quoted text", value_pos)
        attributes.append(ast_nodes.JsxAttribute(name=name, value=value, span=span))


def parse_markup_embedded(self, pos: int) -> Tuple[ast_nodes.Expr, int]:
    """Parse the expression of a `{...}` container; `pos` is just past the brace."""
    self.reset_to(pos)
    saved_no_in = self.no_in
    self.no_in = False
    try:
        expression = self.parse_expression()
    finally:
        self.no_in = saved_no_in
    token = self.peek()
    if not (token.type == "PUNCT" and token.value == "}"):
        raise self.error("Expected '}'", token)
    return expression, token.end


def parse_markup_children(self, pos: int, name: str) -> Tuple[List[ast_nodes.Expr], int]:
    source = self.lexer.source
    children: List[ast_nodes.Expr] = []
    text_start = pos

    def flush(end: int) -> None:
        text = clean_markup_text(html.unescape(source[text_start:end]))
        if text:
            children.append(ast_nodes.Literal(value=text, span=_span_at(self, text_start)))

    while True:
        if pos >= len(source):
            label = f"<{name}>" if name else "<>"
            raise _error(self, f"Expected corresponding closing tag for {label}", pos)
        char = source[pos]
        if char == "<":
            flush(pos)
            after = self.skip_markup_space(pos + 1)
            if source.startswith("/", after):
                closing_pos = self.skip_markup_space(after + 1)
                closing, closing_end = self.read_markup_name(closing_pos)
                closing_end = self.skip_markup_space(closing_end)
                if not source.startswith(">", closing_end):
                    raise _error(self, "Expected '>'", closing_end)
                if closing != name:
                    label = f"</{name}>" if name else "</>"
                    raise _error(self, f"Expected corresponding closing tag {label}", closing_pos)
                return children, closing_end + 1
            child, pos = self.read_markup_element(pos)
            children.append(child)
            text_start = pos
            continue
        if char == "{":
            flush(pos)
            self.lexer.pos = pos + 1
            self.lexer.skip_trivia()
            inner = self.lexer.pos
            if source.startswith("}", inner):
                pos = inner + 1
            elif source.startswith("...", inner):
                argument, pos = self.parse_markup_embedded(inner + 3)
                children.append(ast_nodes.Spread(argument=argument, span=_span_at(self, inner)))
            else:
                expression, pos = self.parse_markup_embedded(pos + 1)
                children.append(expression)
            text_start = pos
            continue
        pos += 1
