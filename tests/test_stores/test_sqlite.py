"""Tests for SQLiteStore."""

import pytest

from timekeeper.exceptions import StoreError
from timekeeper.stores import SQLiteStore


@pytest.fixture
async def store():
    s = SQLiteStore(":memory:")
    yield s
    await s.close()


async def test_get_nonexistent(store):
    assert await store.get("ns", "key") is None


async def test_set_get_and_overwrite(store):
    await store.set("ns", "k", {"a": 1, "nested": {"b": [1, 2]}})
    assert await store.get("ns", "k") == {"a": 1, "nested": {"b": [1, 2]}}
    await store.set("ns", "k", {"a": 2})
    assert await store.get("ns", "k") == {"a": 2}


async def test_delete_and_exists(store):
    await store.set("ns", "k", {})
    assert await store.exists("ns", "k")
    await store.delete("ns", "k")
    assert not await store.exists("ns", "k")
    await store.delete("ns", "k")


async def test_namespaces_are_separate(store):
    await store.set("ns", "a", {"n": 1})
    await store.set("ns", "b", {"n": 2})
    await store.set("other", "a", {"n": 3})
    assert sorted(await store.list_keys("ns")) == ["a", "b"]
    assert sorted(v["n"] for v in await store.values("ns")) == [1, 2]
    assert await store.query("other", lambda v: True) == [{"n": 3}]


async def test_saved_writes_survive_reopen(tmp_path):
    path = str(tmp_path / "tracker.db")
    first = SQLiteStore(path)
    await first.set("sessions", "s1", {"state": "running"})
    await first.save()
    await first.close()

    second = SQLiteStore(path)
    try:
        assert await second.get("sessions", "s1") == {"state": "running"}
    finally:
        await second.close()


async def test_unsaved_writes_are_discarded_on_close(tmp_path):
    path = str(tmp_path / "tracker.db")
    first = SQLiteStore(path)
    await first.set("sessions", "kept", {"v": 1})
    await first.save()
    await first.set("sessions", "lost", {"v": 2})
    await first.delete("sessions", "kept")
    await first.close()

    second = SQLiteStore(path)
    try:
        assert await second.list_keys("sessions") == ["kept"]
    finally:
        await second.close()


async def test_unopenable_path_raises_store_error(tmp_path):
    store = SQLiteStore(str(tmp_path / "missing" / "tracker.db"))
    with pytest.raises(StoreError):
        await store.get("ns", "k")
