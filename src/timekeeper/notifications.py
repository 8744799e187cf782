"""Hourly "time running" reminders for open sessions.

While a session runs, the user gets one reminder at each top-of-hour
boundary for the next day.  Reminder ids are the session id plus an hour
index so that cancelling a session can find every one of them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

REMINDER_HOURS = 24
REMINDER_TITLE = "Time running"


def hourly_reminder_times(from_instant: datetime, hours: int = REMINDER_HOURS) -> list[datetime]:
    """The next *hours* top-of-hour instants strictly after *from_instant*."""
    top = from_instant.replace(minute=0, second=0, microsecond=0)
    return [top + timedelta(hours=i) for i in range(1, hours + 1)]


def reminder_id(session_id: str, index: int) -> str:
    return f"{session_id}-{index}"


@dataclass(frozen=True)
class Reminder:
    identifier: str
    session_id: str
    fire_at: datetime
    title: str
    body: str


def build_reminders(
    session_id: str, project_name: str, from_instant: datetime, hours: int = REMINDER_HOURS
) -> list[Reminder]:
    body = f"You're working on {project_name}."
    return [
        Reminder(
            identifier=reminder_id(session_id, i),
            session_id=session_id,
            fire_at=fire_at,
            title=REMINDER_TITLE,
            body=body,
        )
        for i, fire_at in enumerate(hourly_reminder_times(from_instant, hours))
    ]


class NotificationScheduler(ABC):
    """Boundary to whatever delivers local notifications.

    Implementations raise :class:`~timekeeper.exceptions.NotificationError`
    on failure; the tracker treats every failure as non-fatal.
    """

    @abstractmethod
    async def schedule_hourly_reminders(
        self, session_id: str, project_name: str, from_instant: datetime
    ) -> None:
        """Schedule one reminder per top-of-hour for the next 24 hours."""
        ...

    @abstractmethod
    async def cancel_reminders(self, session_id: str) -> None:
        """Drop pending and delivered reminders tagged with *session_id*."""
        ...


class InMemoryNotificationScheduler(NotificationScheduler):
    """Holds reminders in dicts.  ``deliver_due`` simulates the OS firing them."""

    def __init__(self, hours: int = REMINDER_HOURS) -> None:
        self.hours = hours
        self.pending: dict[str, Reminder] = {}
        self.delivered: dict[str, Reminder] = {}

    async def schedule_hourly_reminders(
        self, session_id: str, project_name: str, from_instant: datetime
    ) -> None:
        # rescheduling replaces the previous batch
        await self.cancel_reminders(session_id)
        for reminder in build_reminders(session_id, project_name, from_instant, self.hours):
            self.pending[reminder.identifier] = reminder
        logger.debug("Scheduled %d reminders for session %s", self.hours, session_id)

    async def cancel_reminders(self, session_id: str) -> None:
        for bucket in (self.pending, self.delivered):
            for identifier in [k for k, r in bucket.items() if r.session_id == session_id]:
                del bucket[identifier]

    def deliver_due(self, now: datetime) -> list[Reminder]:
        """Move reminders due at or before *now* from pending to delivered."""
        due = sorted(
            (r for r in self.pending.values() if r.fire_at <= now), key=lambda r: r.fire_at
        )
        for reminder in due:
            del self.pending[reminder.identifier]
            self.delivered[reminder.identifier] = reminder
        return due

    def reminders_for(self, session_id: str) -> list[Reminder]:
        return sorted(
            (r for r in self.pending.values() if r.session_id == session_id),
            key=lambda r: r.fire_at,
        )
