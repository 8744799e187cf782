"""timekeeper: project time tracking with pausable sessions.

Sessions move through running/paused/stopped by pure transitions; the
tracker persists each new state and tells the reminder scheduler and the
live display.  Totals are always recomputed from sessions at the instant
they are asked for.
"""

from timekeeper.exceptions import (
    CategoryInUseError,
    DurationFormatError,
    DuplicateNameError,
    InvalidInputError,
    InvalidIntervalError,
    InvalidTransitionError,
    NotificationError,
    OpenSessionError,
    PreconditionViolation,
    ProjectorError,
    RecordNotFoundError,
    StoreError,
    TimekeeperError,
)
from timekeeper.models import Category, Project, SessionState, WorkSession
from timekeeper.result import TimerResult
from timekeeper.snapshot import TimerSnapshot
from timekeeper.timer import current_duration
from timekeeper.tracker import TimeTracker

__all__ = [
    "Category",
    "CategoryInUseError",
    "DuplicateNameError",
    "DurationFormatError",
    "InvalidInputError",
    "InvalidIntervalError",
    "InvalidTransitionError",
    "NotificationError",
    "OpenSessionError",
    "PreconditionViolation",
    "Project",
    "ProjectorError",
    "RecordNotFoundError",
    "SessionState",
    "StoreError",
    "TimeTracker",
    "TimekeeperError",
    "TimerResult",
    "TimerSnapshot",
    "WorkSession",
    "current_duration",
]
