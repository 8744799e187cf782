"""Category, Project and WorkSession records.

All three are frozen dataclasses.  Nothing in the package mutates a record
in place: timer transitions and edits produce a new value with
``dataclasses.replace`` and the tracker persists that value.
"""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

DEFAULT_PROJECT_COLOR = "#1E90FF"

CATEGORY_PALETTE = (
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FECA57",
    "#FF9FF3", "#54A0FF", "#5F27CD", "#00D2D3", "#FF9F43",
    "#74B9FF", "#A29BFE", "#FD79A8", "#FDCB6E", "#6C5CE7",
    "#E17055", "#81ECEC", "#FAB1A0", "#00B894", "#E84393",
)  # fmt: skip


def new_id() -> str:
    return uuid.uuid4().hex


def random_color_hex() -> str:
    """Pick a display color for a category created without one."""
    return random.choice(CATEGORY_PALETTE)


class SessionState(str, Enum):
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True)
class Category:
    """A named, colored group of projects.

    Attributes:
        name:      Display name, unique across categories.
        color_hex: ``#RRGGBB`` color inherited by the category's projects.
        id:        Opaque identifier.
    """

    name: str
    color_hex: str = field(default_factory=random_color_hex)
    id: str = field(default_factory=new_id)


@dataclass(frozen=True)
class Project:
    """Something time is tracked against.  Owns its sessions."""

    name: str
    category_id: str | None = None
    id: str = field(default_factory=new_id)

    def effective_color(self, category: Category | None) -> str:
        """Effective color: the owning category's, else the default."""
        if category is not None and category.color_hex:
            return category.color_hex
        return DEFAULT_PROJECT_COLOR


@dataclass(frozen=True)
class WorkSession:
    """One tracked interval of work, possibly split into several active segments.

    Attributes:
        start:                When the session began.  Never changes.
        project_id:           Owning project.
        end:                  Set once the session is stopped.
        last_resume:          Start of the current active segment; ``None``
                              while paused or stopped.
        elapsed_before_pause: Time accrued by all completed segments.  Holds
                              the final total once stopped.
        id:                   Opaque identifier.
    """

    start: datetime
    project_id: str | None = None
    end: datetime | None = None
    last_resume: datetime | None = None
    elapsed_before_pause: timedelta = timedelta(0)
    id: str = field(default_factory=new_id)

    @property
    def state(self) -> SessionState:
        if self.end is not None:
            return SessionState.STOPPED
        if self.last_resume is not None:
            return SessionState.RUNNING
        return SessionState.PAUSED

    @property
    def is_open(self) -> bool:
        return self.end is None
