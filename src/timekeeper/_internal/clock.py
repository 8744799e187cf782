"""Clock abstraction so timer and aggregation logic never read the wall clock directly."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol


class Clock(Protocol):
    """Protocol for getting the current instant.  Inject a fake in tests."""

    def now(self) -> datetime: ...


class SystemClock:
    """Default clock backed by the real system time (timezone-aware UTC)."""

    def now(self) -> datetime:
        return datetime.now(UTC)
