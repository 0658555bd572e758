import pytest

from formengine import ast_nodes
from formengine.errors import ParseError
from formengine.parser import clean_markup_text, parse_expression_source, parse_source, parse_value_source


def test_parse_var_decl_with_destructuring_defaults_and_rest():
    program = parse_source("const { a, b: renamed = 2, ...rest } = source;")
    (decl,) = program.body
    assert isinstance(decl, ast_nodes.VarDecl)
    assert decl.kind == "const"
    pattern = decl.declarations[0].target
    assert isinstance(pattern, ast_nodes.ObjectPattern)
    assert len(pattern.properties) == 2
    assert isinstance(pattern.properties[1].value, ast_nodes.AssignmentPattern)
    assert isinstance(pattern.rest, ast_nodes.Identifier)
    assert pattern.rest.name == "rest"


def test_parse_array_pattern():
    program = parse_source("let [first, , third = 3] = items;")
    pattern = program.body[0].declarations[0].target
    assert isinstance(pattern, ast_nodes.ArrayPattern)
    assert pattern.elements[1] is None
    assert isinstance(pattern.elements[2], ast_nodes.AssignmentPattern)


def test_operator_precedence():
    expr = parse_expression_source("a + b * c ** 2")
    assert isinstance(expr, ast_nodes.Binary)
    assert expr.op == "+"
    assert expr.right.op == "*"
    assert expr.right.right.op == "**"


def test_nullish_and_logical_operators():
    expr = parse_expression_source("a ?? b || c")
    assert isinstance(expr, ast_nodes.Logical)


def test_arrow_function_expression_body():
    expr = parse_expression_source("(x, y = 1) => x + y")
    assert isinstance(expr, ast_nodes.FunctionExpr)
    assert expr.is_arrow
    assert expr.expression_body
    assert len(expr.params) == 2


def test_optional_chaining_call():
    expr = parse_expression_source("props?.onChange?.(value)")
    assert isinstance(expr, ast_nodes.ChainExpr)


def test_markup_element_with_attributes_and_children():
    expr = parse_expression_source('<Stack horizontal className="row" tokens={{ childrenGap: 8 }}>Hi {name}</Stack>')
    assert isinstance(expr, ast_nodes.JsxElement)
    assert isinstance(expr.tag, ast_nodes.Identifier)
    assert expr.tag.name == "Stack"
    names = [attribute.name for attribute in expr.attributes]
    assert names == ["horizontal", "className", "tokens"]
    assert expr.attributes[0].value is None
    assert isinstance(expr.children[0], ast_nodes.Literal)
    assert expr.children[0].value == "Hi "
    assert isinstance(expr.children[1], ast_nodes.Identifier)


def test_lowercase_tag_is_literal_and_member_tag_is_member():
    host = parse_expression_source("<div />")
    assert isinstance(host.tag, ast_nodes.Literal)
    assert host.tag.value == "div"
    member = parse_expression_source("<Fluent.Text>x</Fluent.Text>")
    assert isinstance(member.tag, ast_nodes.Member)


def test_fragment_and_spread_attribute():
    expr = parse_expression_source("<><Text {...props} /><br /></>")
    assert isinstance(expr, ast_nodes.JsxFragment)
    assert len(expr.children) == 2
    assert isinstance(expr.children[0].attributes[0], ast_nodes.JsxSpreadAttribute)


def test_markup_entities_are_decoded():
    expr = parse_expression_source("<span>a &amp; b</span>")
    assert expr.children[0].value == "a & b"


def test_clean_markup_text_collapses_lines():
    assert clean_markup_text("\n   Hello\n   world  \n") == "Hello world"
    assert clean_markup_text("  \n  ") == ""


def test_mismatched_closing_tag_raises():
    with pytest.raises(ParseError) as excinfo:
        parse_expression_source("<div><span></div>")
    assert "closing tag" in excinfo.value.message


def test_value_program_returns_leading_expression():
    program = parse_value_source("(function() { return 1; })()")
    assert isinstance(program.body[0], ast_nodes.Return)


def test_import_statements_are_skipped():
    program = parse_source('import React, { useState } from "react";\nconst a = 1;')
    assert isinstance(program.body[0], ast_nodes.Empty)
    assert isinstance(program.body[1], ast_nodes.VarDecl)


def test_export_default_binds_default():
    program = parse_source("export default function Widget() { return null; }")
    (block,) = program.body
    assert isinstance(block, ast_nodes.Block)
    assert block.scoped is False
    assert block.body[1].declarations[0].target.name == "default"


def test_automatic_semicolon_on_newline():
    program = parse_source("const a = 1\nconst b = 2")
    assert len(program.body) == 2


def test_missing_semicolon_on_same_line_raises():
    with pytest.raises(ParseError):
        parse_source("const a = 1 const b = 2")


def test_class_declarations_are_rejected():
    with pytest.raises(ParseError):
        parse_source("class Widget {}")
