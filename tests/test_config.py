"""Tests for configuration and tracker wiring."""

import pytest
from pydantic import ValidationError

from timekeeper.config import (
    LiveStatusConfig,
    StoreConfig,
    TrackerConfig,
    build_tracker,
    create_store,
)
from timekeeper.exceptions import InvalidInputError
from timekeeper.live import WebhookProjector
from timekeeper.stores import InMemoryStore, SQLiteStore


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "TIMEKEEPER_STORE",
        "TIMEKEEPER_DB_PATH",
        "TIMEKEEPER_LIVE_URL",
        "TIMEKEEPER_REFRESH_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = TrackerConfig.from_env()
    assert config.store.type == "memory"
    assert config.live.url == ""
    assert config.live.refresh_seconds == 30.0
    assert config.reminders


def test_db_path_implies_sqlite(clean_env):
    clean_env.setenv("TIMEKEEPER_DB_PATH", "/tmp/tk.db")
    config = TrackerConfig.from_env()
    assert config.store == StoreConfig(type="sqlite", path="/tmp/tk.db")


def test_live_settings_from_env(clean_env):
    clean_env.setenv("TIMEKEEPER_LIVE_URL", "https://display.example.com/live")
    clean_env.setenv("TIMEKEEPER_REFRESH_SECONDS", "5")
    config = TrackerConfig.from_env()
    assert config.live.url == "https://display.example.com/live"
    assert config.live.refresh_seconds == 5.0


def test_unknown_store_type_rejected():
    with pytest.raises(ValidationError):
        StoreConfig(type="redis")


def test_refresh_must_be_positive():
    with pytest.raises(ValidationError):
        LiveStatusConfig(refresh_seconds=0)
    assert LiveStatusConfig(refresh_seconds=None).refresh_seconds is None


def test_create_store():
    assert isinstance(create_store(StoreConfig()), InMemoryStore)
    assert isinstance(create_store(StoreConfig(type="sqlite", path=":memory:")), SQLiteStore)
    with pytest.raises(InvalidInputError):
        create_store(StoreConfig(type="sqlite"))


async def test_build_tracker_without_live(clean_env):
    tracker = build_tracker(TrackerConfig())
    assert tracker.live is None
    assert isinstance(tracker.store, InMemoryStore)
    await tracker.aclose()


async def test_build_tracker_with_webhook(clean_env):
    config = TrackerConfig(live=LiveStatusConfig(url="https://display.example.com/live"))
    store = InMemoryStore()
    tracker = build_tracker(config, store=store)
    assert tracker.store is store
    assert tracker.live is not None
    assert isinstance(tracker.live.projector, WebhookProjector)
    await tracker.aclose()
