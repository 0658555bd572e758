from formengine.transformer import (
    COMPONENT_NAME,
    EMPTY_SOURCE_TEXT,
    SourceShape,
    WrapperKind,
    preprocess_markup,
    transform_source,
)
from formengine.transformer import classify
from formengine.transformer.rewrite import terminate_statements, wrap_siblings


def test_empty_text_is_inert():
    for text in ("", "   \r\n  ", None):
        result = transform_source(text)
        assert result.shape is SourceShape.EMPTY
        assert result.wrapper is WrapperKind.INERT
        assert result.body == EMPTY_SOURCE_TEXT
        assert result.is_inert


def test_prose_is_inert_literal_text():
    result = transform_source("Just some notes about the form")
    assert result.shape is SourceShape.TEXT
    assert result.wrapper is WrapperKind.INERT
    assert result.body == "Just some notes about the form"


def test_whole_form_keeps_text_as_is():
    text = "const InitialData = { a: 1 };\nconst FormComponent = () => <Text>hi</Text>;"
    result = transform_source(text)
    assert result.shape is SourceShape.WHOLE_FORM
    assert result.wrapper is WrapperKind.WHOLE_FORM
    assert result.body == text
    assert result.references_form


def test_whole_form_detection_variants():
    assert classify.is_whole_form("FormComponent = () => null")
    assert classify.is_whole_form("function InitialData() {}")
    assert classify.is_whole_form("let InitialData = {}")
    assert not classify.is_whole_form("if (FormComponent == null) {}")
    assert not classify.is_whole_form("const MyFormComponent = 1")


def test_markup_is_wrapped_verbatim():
    result = transform_source("<Text>Hello</Text>")
    assert result.shape is SourceShape.MARKUP
    assert result.wrapper is WrapperKind.VERBATIM
    assert result.body == "<Text>Hello</Text>"


def test_sibling_roots_are_wrapped_in_a_fragment():
    result = transform_source("<Text>A</Text>\n<Text>B</Text>")
    assert result.body == "<><Text>A</Text>\n<Text>B</Text></>"


def test_nested_markup_is_one_root():
    assert classify.count_root_elements("<Stack>\n  <Text>A</Text>\n  <Text>B</Text>\n</Stack>") == 1
    assert classify.count_root_elements("<br />\n<br />") == 2
    assert wrap_siblings("<Stack>\n<Text />\n</Stack>") == "<Stack>\n<Text />\n</Stack>"


def test_statements_then_markup_are_split_into_an_iife():
    result = transform_source("const name = 'Ann'\n<Text>{name}</Text>")
    assert result.shape is SourceShape.STATEMENTS
    assert result.wrapper is WrapperKind.IIFE
    assert result.body == "(function() {\nconst name = 'Ann';\nreturn (\n<Text>{name}</Text>\n);\n})()"


def test_stateful_statements_use_a_named_function():
    result = transform_source("const [n, setN] = useState(1);\n<Text>{n}</Text>")
    assert result.shape is SourceShape.STATEMENTS
    assert result.wrapper is WrapperKind.NAMED_FUNCTION
    assert result.uses_stateful_bindings
    assert result.body.startswith(f"function {COMPONENT_NAME}() {{")


def test_function_body_with_top_level_return():
    result = transform_source("const a = 1;\nreturn <Text>{a}</Text>;")
    assert result.shape is SourceShape.FUNCTION_BODY
    assert result.wrapper is WrapperKind.IIFE
    assert result.body == "(function() { const a = 1;\nreturn <Text>{a}</Text>; })()"


def test_iife_is_kept_verbatim():
    text = "(function() {\nconst a = 1;\nreturn <Text>{a}</Text>;\n})()"
    result = transform_source(text)
    assert result.shape is SourceShape.FUNCTION_BODY
    assert result.wrapper is WrapperKind.VERBATIM
    assert result.body == text


def test_arrow_component_without_bindings_is_invoked():
    text = "() => {\nconst a = 1;\nreturn <Text>{a}</Text>;\n}"
    result = transform_source(text)
    assert result.shape is SourceShape.ARROW_COMPONENT
    assert result.wrapper is WrapperKind.IIFE
    assert result.body == f"({text})()"


def test_arrow_component_with_bindings_is_named():
    text = "() => {\nconst [v] = useState(2);\nreturn <Text>{v}</Text>;\n}"
    result = transform_source(text)
    assert result.shape is SourceShape.ARROW_COMPONENT
    assert result.wrapper is WrapperKind.NAMED_FUNCTION
    assert result.body == f"const {COMPONENT_NAME} = {text}"


def test_classification_is_deterministic():
    text = "const rows = [1, 2];\n<Stack>{rows.map(r => <Text key={r}>{r}</Text>)}</Stack>"
    assert transform_source(text) == transform_source(text)


def test_top_level_return_ignores_nested_and_embedded_words():
    assert classify.has_top_level_return("return (\n<div/>\n)")
    assert not classify.has_top_level_return("function f() { return 1; }")
    assert not classify.has_top_level_return("const noreturn = 1; myreturn (x)")


def test_stateful_binding_detection_uses_word_boundaries():
    assert classify.uses_stateful_bindings("const [a] = useState(1)")
    assert not classify.uses_stateful_bindings("const useStateful = 1")


def test_looks_like_code_heuristic():
    assert classify.looks_like_code("<div />")
    assert classify.looks_like_code("Widget(props)")
    assert classify.looks_like_code("x => x")
    assert not classify.looks_like_code("Hello world")


def test_markup_split_scans_lines_then_falls_back_to_last_boundary():
    assert classify.find_markup_split("const a = 1;\n<Text>{a}</Text>") == ("const a = 1;", "<Text>{a}</Text>")
    assert classify.find_markup_split("const a = 1; const b = 2; <Text>{a}</Text>") == (
        "const a = 1; const b = 2",
        "<Text>{a}</Text>",
    )
    assert classify.find_markup_split("const a = 1;") is None


def test_markup_split_waits_for_depth_zero():
    text = "const f = () => {\nreturn 1;\n}\n<Text>{f()}</Text>"
    prologue, markup = classify.find_markup_split(text)
    assert prologue == "const f = () => {\nreturn 1;\n}"
    assert markup == "<Text>{f()}</Text>"


def test_terminate_statements_respects_depth_and_templates():
    prologue = "const a = 1\nconst b = {\n  x: 1\n}\nconst t = `a\nb`\nfoo()"
    assert terminate_statements(prologue) == "const a = 1;\nconst b = {\n  x: 1\n}\nconst t = `a\nb`\nfoo()"


def test_leading_comments_are_stripped():
    assert classify.strip_leading_comments("// note\n/* block */ <Text />") == "<Text />"
    assert classify.strip_leading_comments("// only a comment") == ""


def test_html_attribute_spellings_are_renamed():
    assert preprocess_markup('<td colspan="2" rowspan={3}>x</td>') == '<td colSpan="2" rowSpan={3}>x</td>'
    assert preprocess_markup("<input readonly maxlength={4} />") == "<input readonly maxLength={4} />"


def test_bare_table_rows_get_a_tbody():
    assert (
        preprocess_markup("<table><tr><td>x</td></tr></table>")
        == "<table><tbody><tr><td>x</td></tr></tbody></table>"
    )


def test_line_endings_are_normalised():
    result = transform_source("<Text>a</Text>\r\n")
    assert result.body == "<Text>a</Text>"


def test_markup_split_ignores_markup_inside_template_literals():
    text = "const html = `\n<b>inside</b>\n`;\n<Text>{html}</Text>"
    assert classify.find_markup_split(text) == ("const html = `\n<b>inside</b>\n`;", "<Text>{html}</Text>")
