import pytest

from formengine.loader import (
    ComponentRegistry,
    GroupSource,
    declares_name,
    load_component_groups,
    load_single_group,
)
from formengine.runtime.placeholder import missing_name
from formengine.scope import MoisScopeBuilder, ScopeBuilder
from formengine.ui.elements import Element

USES_Z = GroupSource(name="Forms", code="const Y = () => Z();")
DEFINES_Z = GroupSource(name="Widgets", code="const Z = () => <span>z</span>;")


def load(sources, **kwargs):
    return load_component_groups(sources, ScopeBuilder(), **kwargs)


@pytest.mark.parametrize("order", [(USES_Z, DEFINES_Z), (DEFINES_Z, USES_Z)])
def test_forward_references_resolve_in_either_order(order):
    result = load(list(order))
    assert result.errors == []
    element = result.components["Y"]()
    assert isinstance(element, Element)
    assert element.type == "span"


def test_unresolved_reference_yields_placeholder_element():
    result = load([USES_Z])
    element = result.components["Y"]()
    assert missing_name(element) == "Z"


def test_cross_references_can_be_disabled():
    result = load([USES_Z, DEFINES_Z], enable_cross_references=False)
    assert missing_name(result.components["Y"]()) == "Z"
    assert "Z" in result.components


def test_cross_references_disabled_from_environment(monkeypatch):
    monkeypatch.setenv("FORMENGINE_CROSS_REFERENCES", "false")
    result = load([USES_Z, DEFINES_Z])
    assert missing_name(result.components["Y"]()) == "Z"


def test_groups_map_their_own_exports():
    result = load([USES_Z, DEFINES_Z])
    assert set(result.groups["Forms"]) == {"Y"}
    assert set(result.groups["Widgets"]) == {"Z"}


def test_failing_group_is_isolated_and_reported_once():
    broken = GroupSource(name="Broken", code="const X = ;")
    result = load([broken, DEFINES_Z])
    assert [error.group for error in result.errors] == ["Broken"]
    assert result.groups["Broken"] == {}
    assert "Z" in result.components
    assert result.error_for("Broken").line == 1
    assert result.error_for("Widgets") is None


def test_runtime_throw_is_reported_with_group_name():
    thrower = GroupSource(name="Thrower", code='const A = 1;\nthrow new Error("boom");')
    result = load([thrower])
    error = result.error_for("Thrower")
    assert "boom" in error.message
    assert error.code == "FE-3001"
    assert "A" not in result.components


def test_three_hop_chain_does_not_throw():
    sources = [
        GroupSource(name="First", code="const A1 = () => B1();"),
        GroupSource(name="Second", code="const B1 = () => C1();"),
        GroupSource(name="Third", code="const C1 = () => <b>c</b>;"),
    ]
    two_passes = load(sources)
    assert isinstance(two_passes.components["A1"](), Element)
    three_passes = load(sources, passes=3)
    assert three_passes.components["A1"]().type == "b"


def test_loading_is_idempotent():
    first = load([USES_Z, DEFINES_Z])
    second = load([USES_Z, DEFINES_Z])
    assert sorted(first.components) == sorted(second.components)


def test_identity_is_recorded_as_metadata():
    source = GroupSource(name="Intake", code="const Intake = () => null;", identity={"title": "Intake"})
    result = load([source])
    assert result.metadata == {"Intake": {"title": "Intake"}}


def test_catalogue_names_and_undeclared_assignments_are_exported():
    source = GroupSource(name="Card", code="Card = () => <div>card</div>;\nSchema = { fields: [] };")
    result = load([source])
    assert set(result.groups["Card"]) == {"Card", "Schema"}


def test_export_default_is_collected():
    source = GroupSource(name="Panel", code="export default () => <div>panel</div>;")
    result = load([source])
    assert "default" in result.components


def test_declares_name():
    assert declares_name("const Foo = () => null;", "Foo")
    assert declares_name("function Foo(props) {}", "Foo")
    assert declares_name("Foo = (props) => null;", "Foo")
    assert not declares_name("const FooBar = 1;", "Foo")
    assert not declares_name("render(Foo);", "Foo")


def test_own_declaration_shadows_injected_export():
    first = GroupSource(name="One", code='const Shared = () => "one";')
    second = GroupSource(name="Two", code='const Shared = () => "two";\nconst UseShared = () => Shared();')
    result = load([first, second])
    assert result.components["UseShared"]() == "two"


def test_load_single_group_merges_into_registry():
    registry = ComponentRegistry(load([DEFINES_Z]).components)
    exports, error = load_single_group(USES_Z, ScopeBuilder(), registry)
    assert error is None
    assert "Y" in registry
    assert exports["Y"]().type == "span"

    exports, error = load_single_group(GroupSource(name="Bad", code="const = 1;"), ScopeBuilder(), registry)
    assert exports == {}
    assert error.group == "Bad"


def test_additional_scope_is_visible_to_groups():
    source = GroupSource(name="Labels", code="const Label = () => prefix;")
    result = load_component_groups([source], ScopeBuilder(), additional_scope={"prefix": "P-"})
    assert result.components["Label"]() == "P-"


def test_groups_use_mois_environment():
    source = GroupSource(name="Fields", code="const NameField = () => <TextField label=\"Name\" />;")
    result = load_component_groups([source], MoisScopeBuilder())
    assert result.errors == []
    assert isinstance(result.components["NameField"](), Element)


def test_summary_is_logged(caplog):
    with caplog.at_level("INFO", logger="formengine"):
        load([USES_Z, DEFINES_Z])
    assert "Loaded 2 exports from 2 groups" in caplog.text


def test_failure_is_logged(caplog):
    with caplog.at_level("WARNING", logger="formengine"):
        load([GroupSource(name="Broken", code="const X = ;")])
    assert "Group Broken failed in pass 1" in caplog.text


@pytest.mark.parametrize("order", [(USES_Z, DEFINES_Z), (DEFINES_Z, USES_Z)])
def test_group_snapshots_hold_final_pass_exports(order):
    result = load(list(order))
    assert result.groups["Forms"]["Y"]().type == "span"
    assert result.groups["Forms"]["Y"] is result.components["Y"]


def test_group_failing_in_a_later_pass_keeps_its_first_snapshot():
    source = GroupSource(name="Late", code='const Late = () => "late";\nif (Flag === 1) { throw new Error("late failure"); }')
    flag = GroupSource(name="Flags", code="const Flag = 1;")
    result = load([source, flag])
    assert [error.group for error in result.errors] == ["Late"]
    assert result.groups["Late"]["Late"]() == "late"


def test_oversized_string_fails_only_its_own_group():
    greedy = GroupSource(name="Greedy", code="const a = 'x'.padStart(1e12);")
    result = load([greedy, DEFINES_Z])
    assert [error.group for error in result.errors] == ["Greedy"]
    assert "Invalid string length" in result.error_for("Greedy").message
    assert "Z" in result.components
