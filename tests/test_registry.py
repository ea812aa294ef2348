from concurrent.futures import ThreadPoolExecutor
from typing import get_args

import pytest
from pydantic import BaseModel

from api_explorer.models import DEFAULT_METHODS, MemoryDataSource, ModelRegistry
from api_explorer.schemas import ExplorerOptions
from tests.conftest import DUMMY_UI, Customer, Post, Product, Tag


def test_register_remotes_default_methods():
    registry = ModelRegistry()
    definition = registry.register(Product, name="product")

    assert definition.plural == "products"
    assert [m.name for m in definition.enabled_methods()] == [name for name, *_ in DEFAULT_METHODS]
    assert definition.record_model.__name__ == "product"
    assert "id" in definition.record_model.model_fields
    assert "product" in registry and len(registry) == 1


def test_plural_override_and_class_name_default():
    registry = ModelRegistry()
    assert registry.register(Customer).name == "Customer"
    assert registry.register(Product, plural="inventory").plural == "inventory"


def test_version_bumps_on_every_change():
    registry = ModelRegistry()
    start = registry.version
    definition = registry.register(Product)
    definition.disable_remote_method_by_name("count")
    definition.remote_method("ping", lambda: {"pong": True})
    registry.unregister("Product")
    assert registry.version == start + 4


def test_disable_unknown_method_raises():
    definition = ModelRegistry().register(Product)
    with pytest.raises(KeyError):
        definition.disable_remote_method_by_name("nope")


def test_reregistering_replaces_definition():
    registry = ModelRegistry()
    registry.register(Product, name="item").disable_remote_method_by_name("find")
    fresh = registry.register(Product, name="item")
    assert "find" in [m.name for m in fresh.enabled_methods()]
    assert len(registry) == 1


def test_memory_datasource_crud():
    store = MemoryDataSource()
    first = store.create("product", {"name": "pen"})
    store.create("product", {"name": "ink"})

    assert first == {"name": "pen", "id": 1}
    assert store.find("product", where={"name": "ink"}) == [{"name": "ink", "id": 2}]
    assert store.find("product", limit=1, skip=1) == [{"name": "ink", "id": 2}]
    assert store.count("product") == 2
    assert store.replace("product", 1, {"name": "quill"}) == {"name": "quill", "id": 1}
    assert store.replace("product", 99, {}) is None
    assert store.delete("product", 1) is True
    assert store.delete("product", 1) is False
    assert store.find_by_id("product", 1) is None


def test_explorer_options_normalization():
    options = ExplorerOptions(mount_path="swagger/", ui_dirs=str(DUMMY_UI), resource_path="/openapi.json")
    assert options.mount_path == "/swagger"
    assert options.ui_dirs == [str(DUMMY_UI)]
    assert options.resource_path == "openapi.json"
    assert ExplorerOptions(ui_dirs=None).ui_dirs == []


def test_non_integer_id_field_is_rejected():
    class Item(BaseModel):
        id: str
        name: str

    with pytest.raises(ValueError):
        ModelRegistry().register(Item)


def test_integer_id_field_becomes_optional():
    class Item(BaseModel):
        id: int
        name: str

    record_model = ModelRegistry().register(Item).record_model
    assert record_model(name="a").id is None


def test_nested_schema_points_at_registered_record_model():
    registry = ModelRegistry()
    post = registry.register(Post)
    tag = registry.register(Tag)

    nested = post.record_model.model_fields["tag"].annotation
    assert tag.record_model in get_args(nested)
    assert "id" in tag.record_model.model_fields


def test_memory_datasource_concurrent_writes_and_reads():
    store = MemoryDataSource()

    def work(n: int) -> int:
        store.create("product", {"name": f"p{n}"})
        return store.count("product")

    with ThreadPoolExecutor(max_workers=8) as pool:
        counts = list(pool.map(work, range(200)))

    assert store.count("product") == 200
    assert max(counts) == 200
    assert sorted(row["id"] for row in store.find("product")) == list(range(1, 201))
