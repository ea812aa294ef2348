import json

import pytest
from pydantic import BaseModel
from starlette.testclient import TestClient

from tests.conftest import Customer, Post, Tag, configure_rest_api_and_explorer, make_host


@pytest.fixture()
def client(host) -> TestClient:
    configure_rest_api_and_explorer(host)
    return TestClient(host)


def _filter(**spec) -> dict:
    return {"filter": json.dumps(spec)}


def test_create_and_find(client):
    created = client.post("/api/products", json={"name": "pen", "price": 2})
    assert created.status_code == 200
    assert created.json() == {"name": "pen", "price": 2.0, "id": 1}

    client.post("/api/products", json={"name": "ink"})
    assert [row["name"] for row in client.get("/api/products").json()] == ["pen", "ink"]


def test_find_with_filter(client):
    for name in ("pen", "ink", "pad"):
        client.post("/api/products", json={"name": name})

    assert client.get("/api/products", params=_filter(where={"name": "ink"})).json()[0]["id"] == 2
    assert [r["name"] for r in client.get("/api/products", params=_filter(limit=1, skip=1)).json()] == ["ink"]


def test_bad_filter_is_400(client):
    assert client.get("/api/products", params={"filter": "{nope"}).status_code == 400
    assert client.get("/api/products", params={"filter": "[1]"}).status_code == 400
    assert client.get("/api/products", params=_filter(limit=-1)).status_code == 400


def test_find_one_and_count(client):
    client.post("/api/products", json={"name": "pen"})

    assert client.get("/api/products/findOne").json()["name"] == "pen"
    assert client.get("/api/products/findOne", params=_filter(where={"name": "x"})).status_code == 404
    assert client.get("/api/products/count").json() == {"count": 1}
    assert client.get("/api/products/count", params={"where": json.dumps({"name": "x"})}).json() == {"count": 0}


def test_find_by_id_exists_replace_delete(client):
    client.post("/api/products", json={"name": "pen"})

    assert client.get("/api/products/1").json()["name"] == "pen"
    assert client.get("/api/products/2").status_code == 404
    assert client.get("/api/products/1/exists").json() == {"exists": True}

    replaced = client.put("/api/products/1", json={"name": "quill", "price": 3})
    assert replaced.json() == {"name": "quill", "price": 3.0, "id": 1}
    assert client.put("/api/products/9", json={"name": "x"}).status_code == 404

    assert client.delete("/api/products/1").json() == {"count": 1}
    assert client.get("/api/products/1/exists").json() == {"exists": False}


def test_validation_error_is_422(client):
    assert client.post("/api/products", json={"price": 1}).status_code == 422


def test_models_added_after_mount_are_served(host, client):
    host.state.models.register(Customer)
    resp = client.post("/api/Customers", json={"email": "a@b.test"})
    assert resp.status_code == 200
    assert resp.json()["id"] == 1


def test_disabled_method_is_not_routed(host, client):
    host.state.models.get("product").disable_remote_method_by_name("count")
    # Falls through to /products/{id}, which rejects a non-integer id.
    assert client.get("/api/products/count").status_code != 200


def test_custom_remote_method(host, client):
    async def greet(name: str = "world"):
        return {"greeting": f"hello {name}"}

    host.state.models.get("product").remote_method("greet", greet, description="Say hello.")

    assert client.get("/api/products/greet", params={"name": "pen"}).json() == {"greeting": "hello pen"}
    paths = client.get("/explorer/swagger.json").json()["paths"]
    assert paths["/products/greet"]["get"]["operationId"] == "product.greet"


def test_rest_under_custom_root():
    client = TestClient(configure_rest_api_and_explorer(make_host(rest_api_root="/apis/")))
    assert client.get("/apis/products").status_code == 200


def test_integer_id_schema_accepts_client_ids(host, client):
    class Item(BaseModel):
        id: int
        name: str

    host.state.models.register(Item)
    resp = client.post("/api/Items", json={"id": 42, "name": "a"})
    assert resp.status_code == 200
    assert resp.json() == {"id": 1, "name": "a"}


def test_nested_models_round_trip(host, client):
    host.state.models.register(Post)
    host.state.models.register(Tag)

    resp = client.post("/api/Posts", json={"title": "hello", "tag": {"label": "news"}})
    assert resp.status_code == 200
    assert resp.json()["tag"] == {"label": "news", "id": None}
