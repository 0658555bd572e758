"""
On-demand lexer for the form script language.

The parser pulls one token at a time so that markup regions can be read
character by character from the same position (see parser/markup.py).
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from .errors import LexError

KEYWORDS = {
    "const",
    "let",
    "var",
    "function",
    "return",
    "if",
    "else",
    "for",
    "while",
    "do",
    "break",
    "continue",
    "switch",
    "case",
    "default",
    "try",
    "catch",
    "finally",
    "throw",
    "new",
    "typeof",
    "void",
    "delete",
    "in",
    "instanceof",
    "true",
    "false",
    "null",
    "this",
    "import",
    "export",
    "class",
}

# Longest first so that greedy matching picks `===` before `==`.
PUNCTUATORS = (
    ">>>=",
    "...",
    "===",
    "!==",
    "**=",
    "<<=",
    ">>=",
    ">>>",
    "&&=",
    "||=",
    "??=",
    "=>",
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "??",
    "?.",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
    "&=",
    "|=",
    "^=",
    "**",
    "<<",
    ">>",
    "{",
    "}",
    "(",
    ")",
    "[",
    "]",
    ";",
    ",",
    "<",
    ">",
    "+",
    "-",
    "*",
    "/",
    "%",
    "&",
    "|",
    "^",
    "!",
    "~",
    "?",
    ":",
    "=",
    ".",
    "@",
)

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


@dataclass
class Token:
    type: str
    value: Any
    line: int
    column: int
    start: int
    end: int
    newline_before: bool = False

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


@dataclass
class TemplateParts:
    """Cooked string chunks and the raw source of each `${...}` substitution."""

    quasis: List[str]
    expressions: List[Tuple[str, int]]


def is_identifier_start(char: str) -> bool:
    return char.isalpha() or char in "_$"


def is_identifier_part(char: str) -> bool:
    return char.isalnum() or char in "_$"


class Lexer:
    """
    Pull-based lexer; `pos` may be moved by the markup reader between tokens.
    """

    def __init__(self, source: str, filename: str = "<form>", base_offset: int = 0) -> None:
        self.source = source
        self.filename = filename
        self.pos = 0
        self._base_offset = base_offset
        self._line_starts = [0]
        for index, char in enumerate(source):
            if char == "\n":
                self._line_starts.append(index + 1)

    def location(self, pos: int) -> Tuple[int, int]:
        line_index = bisect_right(self._line_starts, pos) - 1
        return line_index + 1 + self._base_offset, pos - self._line_starts[line_index] + 1

    def error(self, message: str, pos: Optional[int] = None) -> LexError:
        line, column = self.location(self.pos if pos is None else pos)
        return LexError(message, line, column)

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        while True:
            token = self.next_token()
            tokens.append(token)
            if token.type == "EOF":
                return tokens

    def skip_trivia(self) -> bool:
        """Skip whitespace and comments; report whether a newline was crossed."""
        source = self.source
        saw_newline = False
        while self.pos < len(source):
            char = source[self.pos]
            if char == "\n":
                saw_newline = True
                self.pos += 1
            elif char.isspace():
                self.pos += 1
            elif source.startswith("//", self.pos):
                end = source.find("\n", self.pos)
                self.pos = len(source) if end == -1 else end
            elif source.startswith("/*", self.pos):
                end = source.find("*/", self.pos + 2)
                if end == -1:
                    raise self.error("Unterminated comment")
                if "\n" in source[self.pos:end]:
                    saw_newline = True
                self.pos = end + 2
            else:
                break
        return saw_newline

    def next_token(self) -> Token:
        newline_before = self.skip_trivia()
        source = self.source
        start = self.pos
        line, column = self.location(start)
        if start >= len(source):
            return Token("EOF", None, line, column, start, start, newline_before)

        char = source[start]
        if is_identifier_start(char):
            end = start + 1
            while end < len(source) and is_identifier_part(source[end]):
                end += 1
            word = source[start:end]
            self.pos = end
            token_type = "KEYWORD" if word in KEYWORDS else "NAME"
            return Token(token_type, word, line, column, start, end, newline_before)

        if char.isdigit() or (char == "." and start + 1 < len(source) and source[start + 1].isdigit()):
            value = self._read_number()
            return Token("NUMBER", value, line, column, start, self.pos, newline_before)

        if char in "'\"":
            value = self._read_string(char)
            return Token("STRING", value, line, column, start, self.pos, newline_before)

        if char == "`":
            value = self._read_template()
            return Token("TEMPLATE", value, line, column, start, self.pos, newline_before)

        for punct in PUNCTUATORS:
            if source.startswith(punct, start):
                if punct == "?." and start + 2 < len(source) and source[start + 2].isdigit():
                    continue
                self.pos = start + len(punct)
                return Token("PUNCT", punct, line, column, start, self.pos, newline_before)

        raise self.error(f"Unexpected character '{char}'", start)

    def _read_number(self) -> Any:
        source = self.source
        start = self.pos
        if source.startswith(("0x", "0X"), start):
            end = start + 2
            while end < len(source) and source[end] in "0123456789abcdefABCDEF":
                end += 1
            self.pos = end
            return int(source[start + 2:end], 16)
        end = start
        is_float = False
        while end < len(source) and source[end].isdigit():
            end += 1
        if end < len(source) and source[end] == "." and not source.startswith("..", end):
            is_float = True
            end += 1
            while end < len(source) and source[end].isdigit():
                end += 1
        if end < len(source) and source[end] in "eE":
            probe = end + 1
            if probe < len(source) and source[probe] in "+-":
                probe += 1
            if probe < len(source) and source[probe].isdigit():
                is_float = True
                end = probe
                while end < len(source) and source[end].isdigit():
                    end += 1
        if end < len(source) and is_identifier_start(source[end]):
            raise self.error("Identifier directly after number", end)
        text = source[start:end]
        self.pos = end
        if is_float:
            number = float(text)
            return int(number) if number.is_integer() and abs(number) < 2**53 else number
        return int(text)

    def _read_escape(self) -> str:
        source = self.source
        # self.pos points at the character after the backslash
        if self.pos >= len(source):
            raise self.error("Unterminated escape sequence")
        char = source[self.pos]
        self.pos += 1
        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]
        if char == "\n":
            return ""
        if char == "x":
            digits = source[self.pos:self.pos + 2]
            self.pos += 2
            try:
                return chr(int(digits, 16))
            except ValueError as exc:
                raise self.error("Invalid hexadecimal escape sequence") from exc
        if char == "u":
            if source.startswith("{", self.pos):
                end = source.find("}", self.pos)
                if end == -1:
                    raise self.error("Invalid Unicode escape sequence")
                digits = source[self.pos + 1:end]
                self.pos = end + 1
            else:
                digits = source[self.pos:self.pos + 4]
                self.pos += 4
            try:
                return chr(int(digits, 16))
            except ValueError as exc:
                raise self.error("Invalid Unicode escape sequence") from exc
        return char

    def _read_string(self, quote: str) -> str:
        source = self.source
        start = self.pos
        self.pos += 1
        chars: List[str] = []
        while True:
            if self.pos >= len(source) or source[self.pos] == "\n":
                raise self.error("Unterminated string literal", start)
            char = source[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chars)
            if char == "\\":
                self.pos += 1
                chars.append(self._read_escape())
                continue
            chars.append(char)
            self.pos += 1

    def _read_template(self) -> TemplateParts:
        source = self.source
        start = self.pos
        self.pos += 1
        quasis: List[str] = []
        expressions: List[Tuple[str, int]] = []
        chunk: List[str] = []
        while True:
            if self.pos >= len(source):
                raise self.error("Unterminated template literal", start)
            char = source[self.pos]
            if char == "`":
                self.pos += 1
                quasis.append("".join(chunk))
                return TemplateParts(quasis=quasis, expressions=expressions)
            if char == "\\":
                self.pos += 1
                chunk.append(self._read_escape())
                continue
            if source.startswith("${", self.pos):
                quasis.append("".join(chunk))
                chunk = []
                expr_start = self.pos + 2
                expr_end = self.scan_balanced(expr_start, "}")
                expressions.append((source[expr_start:expr_end], expr_start))
                self.pos = expr_end + 1
                continue
            chunk.append(char)
            self.pos += 1

    def scan_balanced(self, pos: int, closer: str) -> int:
        """Return the index of the `closer` that balances the region starting at `pos`."""
        source = self.source
        depth = 0
        pairs = {"{": "}", "(": ")", "[": "]"}
        stack: List[str] = []
        while pos < len(source):
            char = source[pos]
            if char in "'\"":
                end = pos + 1
                while end < len(source) and source[end] != char:
                    end += 2 if source[end] == "\\" else 1
                pos = end + 1
                continue
            if char == "`":
                saved = self.pos
                self.pos = pos
                self._read_template()
                pos = self.pos
                self.pos = saved
                continue
            if source.startswith("//", pos):
                end = source.find("\n", pos)
                pos = len(source) if end == -1 else end
                continue
            if source.startswith("/*", pos):
                end = source.find("*/", pos + 2)
                pos = len(source) if end == -1 else end + 2
                continue
            if char in pairs:
                stack.append(pairs[char])
                depth += 1
            elif stack and char == stack[-1]:
                stack.pop()
                depth -= 1
            elif depth == 0 and char == closer:
                return pos
            pos += 1
        raise self.error(f"Expected '{closer}'", pos)
