import pytest
from fastapi.testclient import TestClient

from archgraph.api.routes import get_generator
from archgraph.graph.errors import ExternalServiceError
from archgraph.main import app
from conftest import scenario_raw


class RouteGenerator:
    def __init__(self, error=None):
        self.error = error

    def generate(self, prompt, depth_level, code_mode):
        if self.error:
            raise self.error
        return {"title": "Generated", "children": [{"title": "Part"}]}

    def analyze(self, files):
        return {"id": "repo", "title": files[0]["path"]}

    def document(self, tree):
        return f"# {tree['title']}"


@pytest.fixture
def client():
    app.dependency_overrides[get_generator] = lambda: RouteGenerator()
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_generate_returns_normalized_tree(client):
    response = client.post("/generate", json={"prompt": "a shop", "level": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Generated"
    assert body["id"]
    assert body["children"][0]["description"] == ""


def test_generate_rejects_empty_prompt(client):
    assert client.post("/generate", json={"prompt": "  ", "level": 1}).status_code == 400


def test_generate_rejects_bad_level(client):
    assert client.post("/generate", json={"prompt": "x", "level": 9}).status_code == 422


def test_generate_service_failure(client):
    app.dependency_overrides[get_generator] = lambda: RouteGenerator(
        error=ExternalServiceError("model offline")
    )
    response = client.post("/generate", json={"prompt": "x"})

    assert response.status_code == 502
    assert response.json()["detail"] == "model offline"


def test_analyze(client):
    response = client.post("/analyze", json={"files": [{"path": "main.py", "content": ""}]})
    assert response.json()["title"] == "main.py"
    assert client.post("/analyze", json={"files": []}).status_code == 400


def test_document(client):
    response = client.post("/document", json={"architecture": scenario_raw()})
    assert response.json() == {"documentation": "# System"}


def test_layout_with_focus(client):
    response = client.post("/layout", json={"architecture": scenario_raw(), "focus_id": "b"})
    body = response.json()

    assert [n["id"] for n in body["nodes"]] == ["b", "b1", "b2"]
    assert [b["id"] for b in body["breadcrumbs"]] == ["sys", "b"]
    assert body["edges"][0]["id"] == "b->b1"


def test_render_svg(client):
    response = client.post("/render/svg", json={"architecture": scenario_raw()})
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.count("<rect") == 5
