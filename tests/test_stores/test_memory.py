"""Tests for InMemoryStore."""

import pytest

from timekeeper.stores import InMemoryStore


@pytest.fixture
def store():
    return InMemoryStore()


async def test_get_nonexistent(store):
    assert await store.get("ns", "key") is None


async def test_set_and_get(store):
    await store.set("ns", "k", {"val": 1})
    assert await store.get("ns", "k") == {"val": 1}


async def test_overwrite(store):
    await store.set("ns", "k", {"a": 1})
    await store.set("ns", "k", {"a": 2})
    assert (await store.get("ns", "k"))["a"] == 2


async def test_delete(store):
    await store.set("ns", "k", {"v": 1})
    await store.delete("ns", "k")
    assert await store.get("ns", "k") is None


async def test_delete_nonexistent(store):
    await store.delete("ns", "nope")  # should not raise


async def test_exists(store):
    assert not await store.exists("ns", "k")
    await store.set("ns", "k", {})
    assert await store.exists("ns", "k")


async def test_list_keys_per_namespace(store):
    await store.set("ns", "a", {})
    await store.set("ns", "b", {})
    await store.set("other", "c", {})
    assert sorted(await store.list_keys("ns")) == ["a", "b"]
    assert await store.list_keys("empty") == []


async def test_values_and_query(store):
    await store.set("ns", "a", {"n": 1})
    await store.set("ns", "b", {"n": 2})
    await store.set("ns", "c", {"n": 3})
    assert sorted(v["n"] for v in await store.values("ns")) == [1, 2, 3]
    assert await store.query("ns", lambda v: v["n"] > 2) == [{"n": 3}]


async def test_values_are_copies(store):
    original = {"nested": {"x": 1}}
    await store.set("ns", "k", original)
    original["nested"]["x"] = 99
    fetched = await store.get("ns", "k")
    fetched["nested"]["x"] = 42
    assert await store.get("ns", "k") == {"nested": {"x": 1}}


async def test_save_and_close_are_noops(store):
    await store.set("ns", "k", {"v": 1})
    await store.save()
    await store.close()
    assert await store.get("ns", "k") == {"v": 1}
