"""TimerSnapshot: everything an out-of-process display needs to show a session."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any

from timekeeper.models import SessionState, WorkSession


@dataclass(frozen=True)
class TimerSnapshot:
    """Self-sufficient description of a session's timer at one instant.

    A display that received this snapshot can show the right elapsed time at
    any later instant on its own clock via :meth:`elapsed`; it never has to
    ask for a newer snapshot to stay correct.

    Attributes:
        session_id:    Session being displayed.
        project_name:  Label for the display.
        project_color: ``#RRGGBB`` accent color.
        is_running:    Whether an active segment is in progress.
        accumulated:   Time accrued before the active segment (the total,
                       when not running).
        active_since:  Start of the active segment, ``None`` unless running.
        captured_at:   When the snapshot was taken.
    """

    session_id: str
    project_name: str
    project_color: str
    is_running: bool
    accumulated: timedelta
    active_since: datetime | None
    captured_at: datetime

    @classmethod
    def of(
        cls,
        session: WorkSession,
        *,
        project_name: str,
        project_color: str,
        at: datetime,
    ) -> TimerSnapshot:
        running = session.state is SessionState.RUNNING
        return cls(
            session_id=session.id,
            project_name=project_name,
            project_color=project_color,
            is_running=running,
            accumulated=session.elapsed_before_pause,
            active_since=session.last_resume if running else None,
            captured_at=at,
        )

    def elapsed(self, now: datetime) -> timedelta:
        if not self.is_running or self.active_since is None:
            return self.accumulated
        return self.accumulated + max(now - self.active_since, timedelta(0))

    def refreshed(self, at: datetime) -> TimerSnapshot:
        """Same timer state, re-stamped at *at*."""
        return replace(self, captured_at=at)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready payload for display surfaces."""
        return {
            "session_id": self.session_id,
            "project_name": self.project_name,
            "project_color": self.project_color,
            "is_running": self.is_running,
            "accumulated_seconds": self.accumulated.total_seconds(),
            "active_since": self.active_since.isoformat() if self.active_since else None,
            "captured_at": self.captured_at.isoformat(),
        }
