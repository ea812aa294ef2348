from fastapi import FastAPI
from starlette.testclient import TestClient

from api_explorer.main import create_app
from api_explorer.schemas import ExplorerOptions

app: FastAPI = create_app()
client = TestClient(app)


def test_health_check():
    assert client.get("/").json() == {"status": "ok"}


def test_demo_host_documents_sample_model():
    body = client.get("/explorer/swagger.json").json()
    assert "/Products" in body["paths"]
    assert body["info"]["title"] == "API Explorer Demo"


def test_demo_host_serves_rest_api():
    created = client.post("/api/Products", json={"name": "pen", "price": 1.5})
    assert created.status_code == 200
    assert client.get(f"/api/Products/{created.json()['id']}").json()["name"] == "pen"


def test_request_id_is_accepted():
    resp = client.get("/explorer/config.json", headers={"X-Request-Id": "abc123"})
    assert resp.status_code == 200


def test_explicit_options_override_settings():
    custom = TestClient(create_app(ExplorerOptions(mount_path="/docs", swagger_ui=False), with_sample_model=False))
    assert custom.get("/docs/config.json").json()["url"] == "/docs/swagger.json"
    assert custom.get("/docs/swagger.json").json()["paths"] == {}
