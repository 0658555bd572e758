import math

import pytest

from formengine.errors import HookError, RenderError
from formengine.ui import hooks
from formengine.ui.elements import Fragment, clone_element, create_context, create_element, forward_ref, memo
from formengine.ui.renderer import HostNode, Renderer, json_safe, to_data, to_html


def html_of(element, renderer=None) -> str:
    return to_html((renderer or Renderer()).render(element))


def test_create_element_pops_key_and_collects_children():
    element = create_element("div", {"key": "k", "id": "x"}, "a", "b")
    assert element.key == "k"
    assert element.props == {"id": "x", "children": ["a", "b"]}


def test_clone_element_merges_props():
    original = create_element("span", {"title": "a", "id": "1"}, "text")
    cloned = clone_element(original, {"title": "b"})
    assert cloned.props == {"title": "b", "id": "1", "children": "text"}
    assert original.props["title"] == "a"


def test_host_serialisation_rules():
    node = HostNode(
        "div",
        {
            "className": "a",
            "style": {"marginTop": 4, "opacity": 0.5, "zIndex": 2},
            "disabled": True,
            "hidden": False,
            "onClick": lambda: None,
        },
        ["x < y"],
    )
    assert to_html(node) == '<div class="a" style="margin-top: 4px; opacity: 0.5; z-index: 2" disabled>x &lt; y</div>'
    assert to_html(HostNode("input", {"value": 'a"b'})) == '<input value="a&quot;b" />'


def test_to_data_is_json_safe():
    nodes = [HostNode("p", {"onClick": lambda: None, "n": float("nan"), "htmlFor": "f"}, ["t"])]
    assert to_data(nodes) == [{"tag": "p", "props": {"n": None, "htmlFor": "f"}, "children": ["t"]}]
    assert json_safe({"a": [1, math.inf], "b": lambda: None}) == {"a": [1, None]}


def test_fragments_numbers_and_falsy_children():
    element = create_element(Fragment, None, create_element("b", None, 1.5), None, False, True, "tail")
    assert html_of(element) == "<b>1.5</b>tail"


def test_objects_are_not_valid_children():
    with pytest.raises(RenderError) as excinfo:
        Renderer().render(create_element("div", None, {"a": 1}))
    assert "Objects are not valid as a child" in excinfo.value.message


def test_state_and_rerender_after_handler():
    handles = {}

    def Counter(props):
        count, set_count = hooks.use_state(0)
        handles["increment"] = set_count
        return create_element("b", None, count)

    renderer = Renderer()
    assert html_of(create_element(Counter, {}), renderer) == "<b>0</b>"
    handles["increment"](lambda current: current + 1)
    assert to_html(renderer.rerender()) == "<b>1</b>"


def test_effects_run_after_commit_and_rerender_until_settled():
    def Loader(props):
        status, set_status = hooks.use_state("loading")
        hooks.use_effect(lambda: set_status("ready"), [])
        return create_element("span", None, status)

    assert html_of(create_element(Loader, {})) == "<span>ready</span>"


def test_runaway_updates_are_bounded():
    def Runaway(props):
        value, set_value = hooks.use_state(0)
        hooks.use_effect(lambda: set_value(value + 1))
        return create_element("span", None, value)

    renderer = Renderer(max_passes=3)
    with pytest.raises(RenderError):
        renderer.render(create_element(Runaway, {}))
    nodes = renderer.render_safely(create_element(Runaway, {}))
    assert nodes[0].props["className"] == "error-message"
    assert nodes[0].text().startswith("Error: Too many re-renders")


def test_hooks_outside_render_raise():
    with pytest.raises(HookError) as excinfo:
        hooks.use_state(1)
    assert "Invalid hook call" in excinfo.value.message


def test_hook_order_change_raises():
    calls = {"count": 0}

    def Flaky(props):
        calls["count"] += 1
        if calls["count"] == 1:
            hooks.use_state(1)
        else:
            hooks.use_ref(None)
        return None

    renderer = Renderer()
    renderer.render(create_element(Flaky, {}))
    with pytest.raises(HookError):
        renderer.rerender()


def test_unmount_and_unseen_components_run_cleanups():
    log = []

    def Widget(props):
        hooks.use_effect(lambda: (lambda: log.append(props["name"])), [])
        return None

    def Parent(props):
        return create_element(Widget, {"name": "child"}) if props["show"] else None

    renderer = Renderer()
    renderer.render(create_element(Parent, {"show": True}))
    renderer.render(create_element(Parent, {"show": False}))
    assert log == ["child"]

    renderer.render(create_element(Widget, {"name": "root"}))
    renderer.unmount()
    assert log == ["child", "root"]


def test_memo_ref_and_callback_keep_identity():
    seen = []

    def Stable(props):
        ref = hooks.use_ref(0)
        ref["current"] += 1
        memoised = hooks.use_memo(lambda: {"built": True}, [])
        callback = hooks.use_callback(lambda: None, [])
        seen.append((ref["current"], id(memoised), id(callback)))
        return None

    renderer = Renderer()
    renderer.render(create_element(Stable, {}))
    renderer.rerender()
    assert seen[1][0] == 2
    assert seen[0][1:] == seen[1][1:]


def test_context_provider_and_consumer():
    theme = create_context("light")

    def Themed(props):
        return create_element("i", None, hooks.use_context(theme))

    assert html_of(create_element(Themed, {})) == "<i>light</i>"
    provided = create_element(theme.Provider, {"value": "dark"}, create_element(Themed, {}))
    assert html_of(provided) == "<i>dark</i>"
    consumer = create_element(theme.Consumer, {}, lambda value: value.upper())
    assert html_of(consumer) == "LIGHT"


def test_memo_and_forward_ref_render_wrapped_components():
    def Label(props):
        return create_element("label", None, props["text"])

    def Field(props, ref):
        return create_element("input", {"ref": ref, "name": props["name"]})

    assert html_of(create_element(memo(Label), {"text": "Name"})) == "<label>Name</label>"
    assert html_of(create_element(forward_ref(Field), {"name": "n"})) == '<input name="n" />'


def test_use_id_is_stable_per_instance():
    ids = []

    def Tagged(props):
        ids.append(hooks.use_id())
        return None

    renderer = Renderer()
    renderer.render(create_element(Tagged, {}))
    renderer.rerender()
    assert ids[0] == ids[1]
