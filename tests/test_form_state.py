from formengine.runtime.values import UNDEFINED
from formengine.state import FormStateStore
from formengine.state.form_state import default_source_data, empty_form_data
from formengine.state.produce import produce
from formengine.ui.elements import create_element
from formengine.ui.renderer import Renderer, to_html


def test_new_store_has_empty_shape_and_default_patient():
    store = FormStateStore()
    assert store.get_form_data() == empty_form_data()
    assert store.source_data["patient"]["name"]["text"] == "John Smith"
    assert store.source_data["patient"]["patientId"] == 500063
    assert store.source_data["optionLists"] == {}


def test_custom_source_data_replaces_default():
    store = FormStateStore(source_data={"patient": {"patientId": 1}})
    assert store.use_source_data()["patient"] == {"patientId": 1}


def test_initial_data_merges_into_field_data():
    store = FormStateStore()
    store.set_initial_data({"field1": "hello"})
    assert store.get_initial_data() == {"field1": "hello"}
    assert store.get_form_data()["field"]["data"] == {"field1": "hello"}
    assert store.use_source_data()["initialData"] == {"field1": "hello"}


def test_non_dict_initial_data_is_treated_as_empty():
    store = FormStateStore()
    store.set_initial_data(UNDEFINED)
    assert store.get_initial_data() == {}
    assert store.get_form_data()["field"]["data"] == {}


def test_set_form_data_accepts_recipe_or_partial():
    store = FormStateStore()

    def recipe(draft):
        draft["field"]["data"]["name"] = "Ada"

    store.set_form_data(recipe)
    assert store.get_form_data()["field"]["data"] == {"name": "Ada"}

    store.set_form_data({"extra": True})
    assert store.get_form_data()["extra"] is True
    assert store.get_form_data()["field"]["data"] == {"name": "Ada"}

    store.set_form_data(lambda draft: {"replaced": 1})
    assert store.get_form_data() == {"replaced": 1}


def test_recipe_does_not_mutate_previous_state():
    store = FormStateStore()
    before = store.get_form_data()
    store.set_form_data(lambda draft: draft["field"]["data"].update({"x": 1}))
    assert before["field"]["data"] == {}


def test_subscribe_and_unsubscribe():
    store = FormStateStore()
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append("changed"))
    store.set_form_data({"a": 1})
    unsubscribe()
    store.set_form_data({"a": 2})
    assert calls == ["changed"]


def test_reset_clears_data_and_initial():
    store = FormStateStore()
    store.set_initial_data({"a": 1})
    store.reset()
    assert store.get_form_data() == empty_form_data()
    assert store.get_initial_data() == {}


def test_produce_mutating_and_replacing_recipes():
    base = {"items": [1]}
    assert produce(base, lambda draft: draft["items"].append(2)) == {"items": [1, 2]}
    assert base == {"items": [1]}
    assert produce(base, lambda draft: {"items": []}) == {"items": []}


def test_curried_produce_feeds_set_form_data():
    store = FormStateStore()
    producer = produce(lambda draft: draft["field"]["status"].update({"saved": True}))
    store.set_form_data(producer)
    assert store.get_form_data()["field"]["status"] == {"saved": True}


def test_bindings_expose_store_names():
    bindings = FormStateStore().bindings()
    assert set(bindings) == {"useActiveData", "useSourceData", "getFormData", "initFormData", "produce"}


def test_use_active_data_rerenders_after_update():
    store = FormStateStore()

    def Field(props):
        data, set_form_data = store.use_active_data()
        return create_element("span", None, data["field"]["data"].get("name", "empty"))

    renderer = Renderer()
    assert to_html(renderer.render(create_element(Field, {}))) == "<span>empty</span>"
    store.set_form_data(lambda draft: draft["field"]["data"].update({"name": "Ada"}))
    assert renderer.dirty
    assert to_html(renderer.rerender()) == "<span>Ada</span>"


def test_use_active_data_with_selector():
    store = FormStateStore()
    store.set_initial_data({"name": "Ada"})
    seen = {}

    def Field(props):
        selected, update = store.use_active_data(lambda data: data["field"]["data"])
        seen["selected"] = selected
        seen["update"] = update
        return None

    Renderer().render(create_element(Field, {}))
    assert seen["selected"] == {"name": "Ada"}
    seen["update"]({"age": 3})
    assert store.get_form_data()["field"]["data"] == {"name": "Ada", "age": 3}


def test_default_source_data_is_fresh_per_call():
    first = default_source_data()
    first["patient"]["patientId"] = 0
    assert default_source_data()["patient"]["patientId"] == 500063


def test_python_recipe_returning_none_keeps_draft():
    def recipe(draft):
        draft["count"] = draft["count"] + 1

    assert produce({"count": 1}, recipe) == {"count": 2}


def test_curried_producer_updates_nested_status():
    store = FormStateStore()
    store.set_form_data(produce(lambda draft: draft["field"]["status"].update({"saved": True})))
    store.set_form_data(produce(lambda draft: draft["uiState"]["sections"].update({"0": "open"})))
    assert store.get_form_data()["field"]["status"] == {"saved": True}
    assert store.get_form_data()["uiState"]["sections"] == {"0": "open"}
