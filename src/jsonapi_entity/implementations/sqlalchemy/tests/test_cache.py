import pytest
import sqlalchemy as sa  # type: ignore

from ....models import LookupKey
from ....tests.testing import FakeRepository, make_resource, ref


@pytest.fixture
def engine():
    yield sa.create_engine("sqlite://")


@pytest.fixture
def metadata():
    return sa.MetaData()


@pytest.fixture
def target():
    from ..cache import SQLACacheStore

    return SQLACacheStore


@pytest.fixture
def store(target, engine, metadata):
    store = target(engine, metadata)
    metadata.create_all(bind=engine)
    return store


def test_set_and_get(store):
    resource = {"data": {"type": "node--page", "id": "1", "attributes": {"title": "x"}}}
    assert store.get("/jsonapi/node/page/1") is None
    store.set("/jsonapi/node/page/1", resource)
    assert store.get("/jsonapi/node/page/1") == resource


def test_set_replaces(store):
    store.set("a", {"data": {"id": "1"}})
    store.set("a", {"data": {"id": "2"}})
    assert store.get("a") == {"data": {"id": "2"}}
    assert store.items() == [("a", {"data": {"id": "2"}})]


def test_items_and_clear(store):
    store.set("b", {"data": 2})
    store.set("a", {"data": 1})
    assert store.items() == [("a", {"data": 1}), ("b", {"data": 2})]
    store.clear()
    assert store.items() == []


def test_create_table(target, engine):
    store = target(engine, table_name="entities")
    store.create_table()
    store.create_table()
    assert sa.inspect(engine).has_table("entities")


@pytest.mark.asyncio
async def test_backs_a_repository(store):
    resources = {
        "a1": make_resource(
            "node--article",
            "a1",
            attributes={"title": "x"},
            relationships={"field_tags": {"data": [ref("taxonomy_term--tags", "t1")]}},
        ),
        "t1": make_resource("taxonomy_term--tags", "t1", attributes={"drupal_internal__tid": 3}),
    }
    repo = FakeRepository(resources, max_depth=1)
    repo.cache = store
    await repo.get_entity(LookupKey("node", "article", "a1"), 0)
    assert [endpoint for endpoint, _ in store.items()] == [
        "node/article/a1",
        "taxonomy_term/tags/t1",
    ]
    assert store.get("taxonomy_term/tags/t1")["data"]["attributes"] == {
        "drupal_internal__tid": 3
    }
