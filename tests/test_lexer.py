import pytest

from formengine.errors import LexError
from formengine.lexer import Lexer, TemplateParts


def _tokens(source: str):
    return [token for token in Lexer(source).tokenize() if token.type != "EOF"]


def test_keywords_names_and_punctuators():
    tokens = _tokens("const total = a?.b ?? 0;")
    assert [(t.type, t.value) for t in tokens] == [
        ("KEYWORD", "const"),
        ("NAME", "total"),
        ("PUNCT", "="),
        ("NAME", "a"),
        ("PUNCT", "?."),
        ("NAME", "b"),
        ("PUNCT", "??"),
        ("NUMBER", 0),
        ("PUNCT", ";"),
    ]


def test_longest_punctuator_wins():
    values = [t.value for t in _tokens("a === b !== c >>>= d")]
    assert "===" in values
    assert "!==" in values
    assert ">>>=" in values


def test_optional_chain_not_confused_with_ternary_decimal():
    values = [t.value for t in _tokens("x ?.5 : 1")]
    assert values[1] == "?"


def test_numbers_hex_and_exponent():
    numbers = [t.value for t in _tokens("0xff 1.5 2e3 .25") if t.type == "NUMBER"]
    assert numbers[0] == 255
    assert numbers[1] == 1.5
    assert numbers[2] == 2000
    assert numbers[3] == 0.25


def test_string_escapes():
    (token,) = _tokens(r"'line\nnext \'quoted\''")
    assert token.type == "STRING"
    assert token.value == "line\nnext 'quoted'"


def test_template_literal_parts():
    (token,) = _tokens("`Hello ${name}, you are ${age} years`")
    assert token.type == "TEMPLATE"
    assert isinstance(token.value, TemplateParts)
    assert token.value.quasis == ["Hello ", ", you are ", " years"]
    assert [source for source, _ in token.value.expressions] == ["name", "age"]


def test_comments_are_skipped_and_newlines_recorded():
    tokens = _tokens("a // trailing\n/* block\ncomment */ b")
    assert [t.value for t in tokens] == ["a", "b"]
    assert tokens[1].newline_before is True
    assert tokens[0].newline_before is False


def test_token_locations():
    tokens = _tokens("a\n  bb")
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (2, 3)


def test_unterminated_comment_raises_with_location():
    with pytest.raises(LexError) as excinfo:
        _tokens("a /* never closed")
    assert excinfo.value.line == 1
    assert "Unterminated comment" in excinfo.value.message


def test_unexpected_character():
    with pytest.raises(LexError):
        _tokens("a # b")
