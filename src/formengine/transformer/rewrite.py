"""
Rewrites classified source text into one invokable body.
"""

from __future__ import annotations

import re
from typing import List

from . import classify
from .models import COMPONENT_NAME, SourceShape, TransformResult, WrapperKind

EMPTY_SOURCE_TEXT = "No code to display"

HTML_ATTRIBUTE_NAMES = {
    "rowspan": "rowSpan",
    "colspan": "colSpan",
    "cellpadding": "cellPadding",
    "cellspacing": "cellSpacing",
    "tabindex": "tabIndex",
    "readonly": "readOnly",
    "maxlength": "maxLength",
    "minlength": "minLength",
    "autocomplete": "autoComplete",
    "autofocus": "autoFocus",
    "contenteditable": "contentEditable",
    "crossorigin": "crossOrigin",
    "datetime": "dateTime",
    "enctype": "encType",
    "formaction": "formAction",
    "formenctype": "formEncType",
    "formmethod": "formMethod",
    "formnovalidate": "formNoValidate",
    "formtarget": "formTarget",
    "frameborder": "frameBorder",
    "hreflang": "hrefLang",
    "inputmode": "inputMode",
    "srcdoc": "srcDoc",
    "srcset": "srcSet",
    "usemap": "useMap",
}

_ATTRIBUTE_PATTERNS = [
    (re.compile(rf"\b{name}(\s*=)", re.IGNORECASE), replacement) for name, replacement in HTML_ATTRIBUTE_NAMES.items()
]
_TABLE_ROW_OPEN = re.compile(r"(<table[^>]*>)(\s*)(<tr[\s>])", re.IGNORECASE)
_TABLE_ROW_CLOSE = re.compile(r"(</tr>)(\s*)(</table>)", re.IGNORECASE)

# Line endings after which no statement terminator is appended.
_STRUCTURAL_ENDINGS = (";", "{", "}", "(", ")", "[", "]", ",", ":", "`")


def normalize_source(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n").strip()


def preprocess_markup(text: str) -> str:
    """Rename HTML attribute spellings and give bare table rows a `<tbody>`."""
    result = text
    for pattern, replacement in _ATTRIBUTE_PATTERNS:
        result = pattern.sub(lambda match, name=replacement: name + match.group(1), result)
    result = _TABLE_ROW_OPEN.sub(r"\1\2<tbody>\3", result)
    result = _TABLE_ROW_CLOSE.sub(r"\1\2</tbody>\3", result)
    return result


def terminate_statements(prologue: str) -> str:
    """Append `;` to depth-zero lines outside template literals that end mid-statement."""
    braces = parens = 0
    in_template = False
    processed: List[str] = []
    for line in prologue.split("\n"):
        trimmed = line.strip()
        for index, char in enumerate(trimmed):
            previous = trimmed[index - 1] if index else ""
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
        if (
            trimmed
            and braces == 0
            and parens == 0
            and not in_template
            and not trimmed.startswith(("//", "/*", "*"))
            and not trimmed.endswith(_STRUCTURAL_ENDINGS)
        ):
            processed.append(line + ";")
        else:
            processed.append(line)
    return "\n".join(processed)


def wrap_siblings(markup: str) -> str:
    """Wrap several top-level elements in one fragment."""
    if markup.startswith(";"):
        markup = re.sub(r"^;\s*", "", markup)
    markup = classify.strip_leading_comments(markup)
    if classify.count_root_elements(markup) > 1:
        return f"<>{markup}</>"
    return markup


def _function_body(body: str, stateful: bool) -> str:
    if stateful:
        return f"function {COMPONENT_NAME}() {{\n{body}\n}}"
    return f"(function() {{\n{body}\n}})()"


def _split_body(text: str, stateful: bool) -> str:
    split = classify.find_markup_split(text)
    if split is None:
        return _function_body(text, stateful)
    prologue, markup = split
    return _function_body(f"{terminate_statements(prologue)}\nreturn (\n{markup}\n);", stateful)


def transform_source(text: str) -> TransformResult:
    """Classify `text` and rewrite it into a single invokable body.

    Identical input always yields an equal result; text that fits no shape
    falls back to an immediately-invoked function body.
    """
    clean = preprocess_markup(normalize_source(text or ""))
    references_form = classify.references_form_names(clean)
    if not clean:
        return TransformResult(SourceShape.EMPTY, WrapperKind.INERT, EMPTY_SOURCE_TEXT)
    if classify.is_whole_form(clean):
        return TransformResult(
            SourceShape.WHOLE_FORM,
            WrapperKind.WHOLE_FORM,
            clean,
            uses_stateful_bindings=classify.uses_stateful_bindings(clean),
            references_form=True,
        )
    if not classify.looks_like_code(clean):
        return TransformResult(SourceShape.TEXT, WrapperKind.INERT, clean)

    stateful = classify.uses_stateful_bindings(clean)
    statements = classify.has_statements(clean)
    has_return = classify.has_top_level_return(clean)
    iife = classify.is_iife(clean)

    if classify.is_arrow_component(clean):
        shape = SourceShape.ARROW_COMPONENT
        if stateful:
            wrapper, body = WrapperKind.NAMED_FUNCTION, f"const {COMPONENT_NAME} = {clean}"
        else:
            wrapper, body = WrapperKind.IIFE, f"({clean})()"
    elif statements and (has_return or iife):
        shape = SourceShape.FUNCTION_BODY
        if stateful:
            wrapper, body = WrapperKind.NAMED_FUNCTION, f"function {COMPONENT_NAME}() {{ {clean} }}"
        elif iife:
            wrapper, body = WrapperKind.VERBATIM, clean
        else:
            wrapper, body = WrapperKind.IIFE, f"(function() {{ {clean} }})()"
    elif statements:
        shape = SourceShape.STATEMENTS
        wrapper = WrapperKind.NAMED_FUNCTION if stateful else WrapperKind.IIFE
        body = _split_body(clean, stateful)
    else:
        shape = SourceShape.MARKUP
        wrapper, body = WrapperKind.VERBATIM, wrap_siblings(clean)
    return TransformResult(shape, wrapper, body, uses_stateful_bindings=stateful, references_form=references_form)
