import pytest

from formengine.errors import CompileFailure
from formengine.executor import (
    MISSING_FORM_COMPONENT,
    compile_and_render,
    compile_source,
    create_component_from_code,
    form_render,
)
from formengine.scope import MoisScopeBuilder, ScopeBuilder
from formengine.transformer import SourceShape, WrapperKind
from formengine.ui.elements import create_element
from formengine.ui.renderer import Renderer, to_html


def render_html(component) -> str:
    return to_html(Renderer().render(create_element(component, {})))


def test_compile_source_collects_references():
    unit = compile_source("<Text>{name}</Text>")
    assert unit.shape is SourceShape.MARKUP
    assert unit.wrapper is WrapperKind.VERBATIM
    assert unit.references == ("Text", "name")


def test_compile_source_skips_declared_and_member_names():
    unit = compile_source("const label = props.title;\n<Text>{label}</Text>")
    assert "label" not in unit.references
    assert "title" not in unit.references
    assert "props" in unit.references


def test_compile_source_inert_has_no_program():
    unit = compile_source("")
    assert unit.program is None
    assert unit.references == ()


def test_compile_failure_carries_location():
    with pytest.raises(CompileFailure) as excinfo:
        compile_source("const a = ;\n<Text />")
    assert excinfo.value.code == "FE-1001"
    assert excinfo.value.line is not None
    assert excinfo.value.diagnostics[0]["severity"] == "error"


def test_markup_renders_with_primitives():
    component = create_component_from_code('<Text className="greeting">Hello</Text>', MoisScopeBuilder())
    html = render_html(component)
    assert html.startswith("<span")
    assert 'data-component="Text"' in html
    assert ">Hello</span>" in html


def test_empty_text_renders_placeholder_message():
    html = render_html(create_component_from_code("", ScopeBuilder()))
    assert "No code to display" in html
    assert "font-style: italic" in html


def test_prose_renders_as_literal_text():
    html = render_html(create_component_from_code("Remember to sign", ScopeBuilder()))
    assert ">Remember to sign</div>" in html


def test_statements_then_markup():
    code = "const who = 'Ann'\nconst greeting = `Hi ${who}`\n<Text>{greeting}</Text>"
    html = render_html(create_component_from_code(code, MoisScopeBuilder()))
    assert ">Hi Ann</span>" in html


def test_stateful_source_renders_through_named_function():
    code = "const [count, setCount] = useState(3);\n<Text>{count}</Text>"
    html = render_html(create_component_from_code(code, ScopeBuilder().with_primitives({"Text": "span"})))
    assert html == "<span>3</span>"


def test_arrow_component_renders():
    code = "() => {\nconst items = ['a', 'b'];\nreturn <ul>{items.map(i => <li key={i}>{i}</li>)}</ul>;\n}"
    assert render_html(create_component_from_code(code, ScopeBuilder())) == "<ul><li>a</li><li>b</li></ul>"


def test_unresolved_name_on_static_path_names_the_identifier():
    html = render_html(create_component_from_code("<Missing />", ScopeBuilder()))
    assert html.startswith('<div class="error-message">Missing is not defined')


def test_compile_error_becomes_error_unit():
    render, unit = compile_and_render("<Text>", ScopeBuilder().build_scope())
    assert unit is None
    html = render_html(render)
    assert 'class="error-message"' in html
    assert "closing tag" in html


def test_thrown_error_becomes_error_unit():
    html = render_html(create_component_from_code("(function() {\nthrow new Error('bad');\n})()", ScopeBuilder()))
    assert html.startswith('<div class="error-message">bad')


def test_whole_form_returns_component_and_initial_data():
    code = (
        "const InitialData = { field: { data: { name: 'Ann' } } };\n"
        "const FormComponent = () => <Text>{InitialData.field.data.name}</Text>;"
    )
    received = []
    component = create_component_from_code(code, MoisScopeBuilder(), on_initial_data=received.append)
    assert received == [{"field": {"data": {"name": "Ann"}}}]
    assert ">Ann</span>" in render_html(component)


def test_whole_form_round_trip_is_unmodified():
    code = "InitialData = { a: [1, 2] };\nFormComponent = function() { return null; };"
    unit = compile_source(code)
    form = form_render(unit, ScopeBuilder().build_scope())
    assert form.initial_data == {"a": [1, 2]}
    assert callable(form.render)
    assert form.render({}) is None


def test_whole_form_without_component_reports_missing():
    received = []
    component = create_component_from_code("const InitialData = { a: 1 };", ScopeBuilder(), on_initial_data=received.append)
    assert received == [{"a": 1}]
    assert render_html(component) == f'<div class="error-message">{MISSING_FORM_COMPONENT}</div>'


def test_whole_form_without_initial_data_hands_over_empty_dict():
    received = []
    create_component_from_code("const FormComponent = () => null;", ScopeBuilder(), on_initial_data=received.append)
    assert received == [{}]


def test_whole_form_unknown_names_render_as_placeholders(caplog):
    code = "const FormComponent = () => <Unknown.Widget>kept</Unknown.Widget>;"
    with caplog.at_level("WARNING"):
        html = render_html(create_component_from_code(code, ScopeBuilder()))
    assert 'data-missing="Unknown.Widget"' in html
    assert "kept" in html
    assert "display: contents" in html
    assert "[Form] Missing: Unknown" in caplog.text


def test_whole_form_execution_error_is_contained():
    html = render_html(create_component_from_code("const FormComponent = null;\nnull.boom;", ScopeBuilder()))
    assert 'class="error-message"' in html
    assert "Cannot read properties of null" in html
