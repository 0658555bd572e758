from formengine.preview import render_preview
from formengine.scope import MoisScopeBuilder
from formengine.state import FormStateStore
from formengine.ui.elements import create_element

WHOLE_FORM = """
const InitialData = { field1: "hello" };
const FormComponent = () => {
  const [formData] = useActiveData();
  return <Text>{formData.field.data.field1}</Text>;
};
""".strip()


def test_markup_preview():
    result = render_preview('<Text>Hi</Text>')
    assert ">Hi</span>" in result.html
    assert result.error is None
    assert result.shape == "markup"
    assert result.references == ("Text",)
    assert result.tree()[0]["tag"] == "span"


def test_whole_form_preview_feeds_store():
    result = render_preview(WHOLE_FORM)
    assert result.shape == "whole_form"
    assert result.error is None
    assert ">hello</span>" in result.html
    assert result.initial_data == {"field1": "hello"}
    assert result.form_data["field"]["data"] == {"field1": "hello"}


def test_preview_uses_given_store_and_resets_it():
    store = FormStateStore()
    store.set_form_data({"stale": True})
    result = render_preview(WHOLE_FORM, scope_builder=MoisScopeBuilder(store=store), store=store)
    assert "stale" not in store.get_form_data()
    assert store.get_initial_data() == {"field1": "hello"}
    assert result.error is None


def test_execution_error_becomes_error_node():
    result = render_preview("<Text>{missing.value}</Text>")
    assert result.error is not None
    assert "missing is not defined" in result.error
    assert 'class="error-message"' in result.html


def test_compile_error_has_no_shape():
    result = render_preview("const a = ;\n<Text />")
    assert result.error is not None
    assert result.shape is None
    assert result.references == ()


def test_render_error_is_contained():
    code = """
const [count, setCount] = useState(0);
setCount(count + 1);
<Text>{count}</Text>
""".strip()
    result = render_preview(code)
    assert result.error is not None
    assert result.error.startswith("Error: Too many re-renders")


def test_layout_and_wrapper_surround_the_preview():
    def Layout(props):
        return create_element("main", None, props["children"])

    def Wrapper(props):
        return create_element("section", None, props["children"])

    result = render_preview("<Text>x</Text>", layout=Layout, wrapper=Wrapper)
    assert result.html.startswith("<section><main><span")
    assert result.html.endswith("</span></main></section>")


def test_prose_renders_inert():
    result = render_preview("just some words")
    assert result.error is None
    assert "just some words" in result.html


def test_oversized_string_becomes_error_node():
    result = render_preview("<div>{'x'.padStart(1e12)}</div>")
    assert result.error is not None
    assert "Invalid string length" in result.error
