"""Configuration models and factories for building a tracker.

Example:
    config = TrackerConfig.from_env()
    tracker = build_tracker(config)
"""

from __future__ import annotations

import os
from typing import Literal

import httpx
from pydantic import BaseModel, Field

from timekeeper._internal.clock import Clock
from timekeeper.exceptions import InvalidInputError
from timekeeper.live import LiveStatus, WebhookProjector
from timekeeper.notifications import REMINDER_HOURS, InMemoryNotificationScheduler
from timekeeper.stores import InMemoryStore, SQLiteStore, Store
from timekeeper.tracker import TimeTracker


class StoreConfig(BaseModel):
    """Store configuration.

    Attributes:
        type: Store type ("memory" or "sqlite")
        path: Path to SQLite database file (for sqlite type)
    """

    type: Literal["memory", "sqlite"] = "memory"
    path: str = ""


class LiveStatusConfig(BaseModel):
    """Live display configuration.

    Attributes:
        url: Display endpoint for :class:`WebhookProjector`; empty disables
            live status.
        refresh_seconds: Refresh period while running; ``None`` disables.
        timeout: HTTP timeout in seconds.
    """

    url: str = ""
    refresh_seconds: float | None = Field(default=30.0, gt=0)
    timeout: float = Field(default=10.0, gt=0)


class TrackerConfig(BaseModel):
    store: StoreConfig = Field(default_factory=StoreConfig)
    live: LiveStatusConfig = Field(default_factory=LiveStatusConfig)
    reminders: bool = True
    reminder_hours: int = Field(default=REMINDER_HOURS, ge=1)

    @classmethod
    def from_env(cls) -> TrackerConfig:
        """Read ``TIMEKEEPER_*`` environment variables over the defaults."""
        store_type = os.getenv("TIMEKEEPER_STORE", "")
        db_path = os.getenv("TIMEKEEPER_DB_PATH", "")
        refresh = os.getenv("TIMEKEEPER_REFRESH_SECONDS", "")
        return cls.model_validate(
            {
                "store": {
                    "type": store_type or ("sqlite" if db_path else "memory"),
                    "path": db_path,
                },
                "live": {
                    "url": os.getenv("TIMEKEEPER_LIVE_URL", ""),
                    "refresh_seconds": float(refresh) if refresh else 30.0,
                },
            }
        )


def create_store(config: StoreConfig) -> Store:
    if config.type == "sqlite":
        if not config.path:
            raise InvalidInputError("SQLite store requires 'path' configuration")
        return SQLiteStore(config.path)
    return InMemoryStore()


def build_tracker(
    config: TrackerConfig | None = None,
    *,
    clock: Clock | None = None,
    store: Store | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> TimeTracker:
    """Wire a :class:`TimeTracker` and its collaborators from *config*.

    Args:
        config:      Settings; defaults to :meth:`TrackerConfig.from_env`.
        clock:       Clock shared by the tracker and live status.
        store:       Use this store instead of creating one from config.
        http_client: Client for the live status webhook.  The caller keeps
                     ownership and must close it.
    """
    config = config or TrackerConfig.from_env()
    live = None
    if config.live.url:
        live = LiveStatus(
            WebhookProjector(config.live.url, timeout=config.live.timeout, client=http_client),
            clock=clock,
            refresh_interval=config.live.refresh_seconds,
        )
    scheduler = InMemoryNotificationScheduler(config.reminder_hours) if config.reminders else None
    return TimeTracker(
        store or create_store(config.store),
        clock=clock,
        scheduler=scheduler,
        live=live,
    )
