"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from timekeeper import TimeTracker
from timekeeper.live import InMemoryProjector, LiveStatus
from timekeeper.notifications import InMemoryNotificationScheduler
from timekeeper.stores import InMemoryStore

# A Monday morning
T0 = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, start: datetime = T0):
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def scheduler():
    return InMemoryNotificationScheduler()


@pytest.fixture
def projector():
    return InMemoryProjector()


@pytest.fixture
async def tracker(store, clock, scheduler, projector):
    live = LiveStatus(projector, clock=clock, refresh_interval=None)
    tk = TimeTracker(store, clock=clock, scheduler=scheduler, live=live)
    yield tk
    await tk.aclose()


@pytest.fixture
async def work(tracker):
    category = await tracker.create_category("Work", "#4ECDC4")
    return category


@pytest.fixture
async def api(tracker, work):
    return await tracker.create_project("API", category_id=work.id)


@pytest.fixture
async def docs(tracker, work):
    return await tracker.create_project("Docs", category_id=work.id)
