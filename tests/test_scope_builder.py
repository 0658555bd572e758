from formengine.executor import create_component_from_code
from formengine.loader import ComponentRegistry
from formengine.scope import MoisScopeBuilder, ScopeBuilder
from formengine.scope.builder import STATEFUL_BINDING_NAMES, ScopeConfig
from formengine.scope.mois import DEFAULT_IDENTITY, FALLBACK_CODE_LIST, get_age, get_date_string
from formengine.state import FormStateStore
from formengine.ui.elements import create_element
from formengine.ui.renderer import Renderer, to_html


def render_html(component) -> str:
    return to_html(Renderer().render(create_element(component, {})))


def test_sections_compose_in_order():
    scope = (
        ScopeBuilder()
        .with_primitives({"Box": "primitive", "Shared": "primitive"})
        .with_components({"Shared": "component"})
        .with_utilities({"Math": "utility"})
        .build_scope()
    )
    assert scope["Box"] == "primitive"
    assert scope["Shared"] == "component"
    assert isinstance(scope["Math"], dict)


def test_globals_win_over_everything():
    scope = ScopeBuilder().with_components({"Math": "component"}).with_globals({"Math": "global"}).build_scope()
    assert scope["Math"] == "global"


def test_core_bindings_are_always_present():
    scope = ScopeBuilder().build_scope()
    for name in ("React", "useState", "useEffect", "createElement", "Fragment", "JSON"):
        assert name in scope
    assert "useReducer" in scope["React"]
    assert set(scope["React"]["Children"]) == {"map", "forEach", "count", "toArray", "only"}


def test_with_hooks_replace_discards_previous_hooks():
    builder = ScopeBuilder().with_hooks({"useA": 1, "useB": 2})
    builder.with_hooks({"useC": 3}, replace=True)
    assert builder.get_config().hooks == {"useC": 3}


def test_get_config_returns_a_copy():
    builder = ScopeBuilder().with_utilities({"x": 1})
    config = builder.get_config()
    config.utilities["y"] = 2
    assert "y" not in builder.get_config().utilities


def test_extend_merges_every_section():
    builder = ScopeBuilder().with_components({"A": 1})
    builder.extend(ScopeConfig(components={"B": 2}, globals={"G": 3}))
    config = builder.get_config()
    assert config.components == {"A": 1, "B": 2}
    assert config.globals == {"G": 3}


def test_builder_from_config_does_not_share_sections():
    config = ScopeConfig(primitives={"P": 1})
    builder = ScopeBuilder(config)
    builder.with_primitives({"Q": 2})
    assert config.primitives == {"P": 1}


def test_stateful_binding_names_cover_form_hooks():
    assert isinstance(STATEFUL_BINDING_NAMES, tuple)
    for name in ("useState", "useActiveData", "useSourceData", "useCodeList"):
        assert name in STATEFUL_BINDING_NAMES


def test_mois_scope_contents():
    scope = MoisScopeBuilder().build_scope()
    for name in ("Text", "Stack", "TextField", "Fluent", "Fabric", "FluentUI", "MoisControl", "MoisHooks", "MoisFunction"):
        assert name in scope
    assert scope["Fluent"]["Text"] is scope["Text"]
    assert scope["Identity"] == DEFAULT_IDENTITY
    assert scope["SelectableOptionMenuItemType"]["Header"] == 2
    assert "SubmitButton" in scope["MoisControl"]
    assert "useActiveData" in scope


def test_identity_override():
    scope = MoisScopeBuilder(identity={"title": "Intake"}).build_scope()
    assert scope["Identity"] == {"title": "Intake"}


def test_code_list_falls_back_and_reads_option_lists():
    store = FormStateStore(source_data={"optionLists": {"colours": [{"code": "R", "display": "Red"}]}})
    builder = MoisScopeBuilder(store=store)
    assert builder.use_code_list("colours") == [{"code": "R", "display": "Red"}]
    assert builder.use_code_list("unknown") == FALLBACK_CODE_LIST


def test_date_helpers():
    assert get_date_string("2024-03-05T10:00:00Z") == "2024-03-05"
    assert get_date_string("") == ""
    assert get_age("") == ""
    assert get_age("2000-01-01").endswith(" years")


def test_submit_button_renders_action_attribute():
    component = create_component_from_code("<MoisControl.SubmitButton />", MoisScopeBuilder())
    html = render_html(component)
    assert 'data-action="SubmitButton"' in html
    assert "Submit" in html


def test_section_provides_use_section_values():
    code = """
const Inner = () => {
  const section = useSection();
  return <Text>{section.layout}</Text>;
};
<Section layout="grid"><Inner /></Section>
""".strip()
    html = render_html(create_component_from_code(code, MoisScopeBuilder()))
    assert "grid" in html


def test_field_value_hook_reads_store():
    store = FormStateStore()
    store.set_initial_data({"name": "Ada"})
    code = """
const [name] = useFieldValue("name", "none");
<Text>{name}</Text>
""".strip()
    html = render_html(create_component_from_code(code, MoisScopeBuilder(store=store)))
    assert ">Ada</span>" in html


def test_with_group_components_accepts_registry_or_mapping():
    def Badge(props):
        return create_element("em", None, "badge")

    builder = MoisScopeBuilder().with_group_components(ComponentRegistry({"Badge": Badge}))
    assert builder.build_scope()["Badge"] is Badge
    builder = MoisScopeBuilder().with_group_components({"Badge": Badge})
    assert render_html(create_component_from_code("<Badge />", builder)) == "<em>badge</em>"
