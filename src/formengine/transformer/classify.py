"""
Static classification of author source text.

Every check here is textual: nothing is parsed or executed, so a check can
never fail on malformed input.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

from ..scope.builder import STATEFUL_BINDING_NAMES

FORM_NAMES = ("FormComponent", "InitialData")

_FORM_PATTERNS = tuple(
    re.compile(pattern.format(name=name))
    for name in FORM_NAMES
    for pattern in (r"\b{name}\s*=(?!=)", r"\b(?:const|let|var)\s+{name}\b", r"\bfunction\s+{name}\b")
)

_STATEMENT_START = re.compile(r"(?:^|\n)(?:const|let|var|function)\s")
_TOP_LEVEL_RETURN = re.compile(r"return\s*[\s(]")
_IIFE_START = re.compile(r"^\s*\(\s*(?:function\s*\(|\(\)\s*=>)")
_ARROW_COMPONENT_START = re.compile(r"^\s*\(\s*\)\s*=>\s*\{")
_CALL_START = re.compile(r"^[A-Z][a-zA-Z]*\s*\(")
_IDENTIFIER_CHAR = re.compile(r"[A-Za-z0-9_]")
_MARKUP_BOUNDARY = re.compile(r";\s*(?=<)")
_LINE_MARKUP_START = re.compile(r";\s*<")

_CODE_PREFIXES = ("<", "//", "/*", "const ", "let ", "var ", "function ", "(", "{", ";<")

_OPEN_COMPONENT_TAG = re.compile(r"<[A-Z][^/>]*")
_CLOSE_COMPONENT_TAG = re.compile(r"</[A-Z]")
_SELF_CLOSE = re.compile(r"/>")
_HOST_SELF_CLOSE = re.compile(r"<[a-z][^<>]*/>")


def is_whole_form(text: str) -> bool:
    """True when the text assigns or declares `FormComponent` or `InitialData`."""
    return any(pattern.search(text) for pattern in _FORM_PATTERNS)


def references_form_names(text: str) -> bool:
    return any(re.search(rf"\b{name}\b", text) for name in FORM_NAMES)


def uses_stateful_bindings(text: str, names: Iterable[str] = STATEFUL_BINDING_NAMES) -> bool:
    return any(re.search(rf"\b{re.escape(name)}\b", text) for name in names)


def has_statements(text: str) -> bool:
    return bool(_STATEMENT_START.search(text))


def has_top_level_return(text: str) -> bool:
    """Look for a `return` at brace depth zero that is not part of a longer identifier."""
    depth = 0
    for index, char in enumerate(text):
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif depth == 0 and char == "r" and _TOP_LEVEL_RETURN.match(text, index):
            previous = text[index - 1] if index > 0 else " "
            if not _IDENTIFIER_CHAR.match(previous):
                return True
    return False


def is_iife(text: str) -> bool:
    return bool(_IIFE_START.match(text))


def is_arrow_component(text: str) -> bool:
    """`() => { ... return ... }` where the return sits directly in the arrow body."""
    match = _ARROW_COMPONENT_START.match(text)
    return bool(match) and has_top_level_return(text[match.end():])


def looks_like_code(text: str) -> bool:
    """Heuristic separating source text from prose pasted into a preview."""
    return (
        text.startswith(_CODE_PREFIXES)
        or bool(_CALL_START.match(text))
        or "=>" in text
        or "return " in text
    )


def _is_comment_line(line: str) -> bool:
    return line.startswith(("//", "/*", "*"))


def find_markup_split(text: str) -> Optional[Tuple[str, str]]:
    """Split statements-then-markup text into `(prologue, markup)`.

    Lines are scanned with brace and paren depth, skipping template literal
    contents; the first depth-zero line opening an element after at least one
    statement line starts the markup region. Falls back to the last `;`
    followed by `<`.
    """
    lines = text.split("\n")
    split_at = -1
    braces = parens = 0
    in_template = False
    seen_statement = False
    for index, raw in enumerate(lines):
        line = raw.strip()
        if not line or (not in_template and _is_comment_line(line)):
            continue
        if _LINE_MARKUP_START.match(line) and braces == 0 and parens == 0 and not in_template:
            split_at = index
            break
        opened_in_template = in_template
        previous = ""
        for char in line:
            if char == "`" and previous != "\\":
                in_template = not in_template
            elif not in_template:
                if char == "{":
                    braces += 1
                elif char == "}":
                    braces -= 1
                elif char == "(":
                    parens += 1
                elif char == ")":
                    parens -= 1
            previous = char
        if (
            seen_statement
            and not opened_in_template
            and not in_template
            and braces == 0
            and parens == 0
            and line.startswith("<")
        ):
            split_at = index
            break
        seen_statement = True

    prologue = markup = ""
    if split_at > 0:
        prologue = "\n".join(lines[:split_at]).strip()
        markup = "\n".join(lines[split_at:]).strip()
        if markup.startswith(";"):
            markup = markup[1:].strip()
    if not markup:
        boundaries = list(_MARKUP_BOUNDARY.finditer(text))
        if boundaries:
            prologue = text[: boundaries[-1].start()].strip()
            markup = text[boundaries[-1].end() :].strip()
    if prologue and markup:
        return prologue, markup
    return None


def strip_leading_comments(text: str) -> str:
    remaining = text
    while remaining:
        trimmed = remaining.lstrip()
        if trimmed.startswith("//"):
            newline = trimmed.find("\n")
            remaining = "" if newline == -1 else trimmed[newline + 1 :]
        elif trimmed.startswith("/*"):
            end = trimmed.find("*/")
            remaining = "" if end == -1 else trimmed[end + 2 :]
        else:
            return trimmed
    return ""


def count_root_elements(markup: str) -> int:
    """Count top-level elements, tracking component open, close and self-close tags per line."""
    roots = 0
    depth = 0
    for raw in markup.split("\n"):
        line = raw.strip()
        if _is_comment_line(line):
            continue
        if depth == 0 and line.startswith("<") and not line.startswith(("</", "<!")):
            roots += 1
        opens = len(_OPEN_COMPONENT_TAG.findall(line))
        closes = len(_CLOSE_COMPONENT_TAG.findall(line))
        self_closing = len(_SELF_CLOSE.findall(line)) - len(_HOST_SELF_CLOSE.findall(line))
        depth += opens - closes - self_closing
    return roots
