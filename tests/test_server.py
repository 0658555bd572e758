from fastapi.testclient import TestClient

from formengine.config import EngineConfig
from formengine.scope import MoisScopeBuilder
from formengine.server import create_app
from formengine.version import TREE_VERSION, __version__


def client(config=None, **kwargs) -> TestClient:
    return TestClient(create_app(config or EngineConfig(), **kwargs))


def test_health():
    response = client().get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_transform_route():
    response = client().post("/api/transform", json={"code": "<Text>{name}</Text>"})
    assert response.status_code == 200
    data = response.json()
    assert data["shape"] == "markup"
    assert data["wrapper"] == "verbatim"
    assert data["references"] == ["Text", "name"]
    assert data["error"] is None


def test_transform_route_reports_compile_errors():
    data = client().post("/api/transform", json={"code": "const a = ;\n<Text />"}).json()
    assert data["references"] == []
    assert data["error"]


def test_render_route():
    data = client().post("/api/render", json={"code": "<Text>Hi</Text>"}).json()
    assert ">Hi</span>" in data["html"]
    assert data["tree_version"] == TREE_VERSION
    assert data["tree"][0]["tag"] == "span"
    assert data["error"] is None
    assert data["form_data"]["field"]["data"] == {}


def test_render_route_uses_source_data_and_identity():
    code = """
const source = useSourceData();
<Text>{source.patient.name.text} / {Identity.title}</Text>
""".strip()
    payload = {
        "code": code,
        "source_data": {"patient": {"name": {"text": "Jane Roe"}}},
        "identity": {"title": "Intake"},
    }
    data = client().post("/api/render", json=payload).json()
    assert data["error"] is None
    assert "Jane Roe" in data["html"]
    assert "Intake" in data["html"]


def test_render_route_with_custom_builder_factory():
    calls = []

    def factory(store, identity=None):
        calls.append(identity)
        return MoisScopeBuilder(store=store).with_globals({"greeting": "hey"})

    data = client(builder_factory=factory).post("/api/render", json={"code": "<Text>{greeting}</Text>"}).json()
    assert calls == [None]
    assert ">hey</span>" in data["html"]


def test_render_route_returns_initial_data():
    code = 'const InitialData = { a: 1 };\nconst FormComponent = () => <Text>form</Text>;'
    data = client().post("/api/render", json={"code": code}).json()
    assert data["shape"] == "whole_form"
    assert data["initial_data"] == {"a": 1}
    assert data["form_data"]["field"]["data"] == {"a": 1}


def test_groups_route():
    payload = {
        "groups": [
            {"name": "Forms", "code": "const Y = () => Z();", "identity": {"title": "Forms"}},
            {"name": "Widgets", "code": "const Z = () => <span>z</span>;"},
            {"name": "Broken", "code": "const X = ;"},
        ]
    }
    response = client().post("/api/groups/load", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["groups"]["Forms"] == ["Y"]
    assert data["registry"] == ["Y", "Z"]
    assert [error["group"] for error in data["errors"]] == ["Broken"]
    assert data["errors"][0]["code"] == "FE-3001"
    assert data["metadata"] == {"Forms": {"title": "Forms"}}


def test_groups_route_rejects_duplicate_names():
    payload = {"groups": [{"name": "A", "code": ""}, {"name": "A", "code": ""}]}
    response = client().post("/api/groups/load", json=payload)
    assert response.status_code == 400
    assert "A" in response.json()["detail"]


def test_groups_route_validates_payload():
    assert client().post("/api/groups/load", json={"groups": [], "passes": 0}).status_code == 422
    assert client().post("/api/groups/load", json={"groups": [{"name": "", "code": ""}]}).status_code == 422
