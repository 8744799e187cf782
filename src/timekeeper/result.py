"""TimerResult: the outcome of a single timer command."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timekeeper.exceptions import StoreError
    from timekeeper.models import WorkSession


@dataclass(frozen=True)
class TimerResult:
    """Immutable result returned by every :class:`TimeTracker` timer command.

    Attributes:
        session: The session after the command.  This is the authoritative
                 state even when ``saved`` is ``False``.
        changed: ``False`` when the command was a tolerated no-op (pausing a
                 paused session, stopping a stopped one, ...).
        saved:   ``False`` when the store rejected the write.  The transition
                 still stands; retry with :meth:`TimeTracker.save_session`.
        error:   The store failure, when ``saved`` is ``False``.
    """

    session: WorkSession
    changed: bool = True
    saved: bool = True
    error: StoreError | None = None

    # ── Factory helpers ──────────────────────────────────────

    @staticmethod
    def ok(session: WorkSession) -> TimerResult:
        return TimerResult(session=session)

    @staticmethod
    def unchanged(session: WorkSession) -> TimerResult:
        return TimerResult(session=session, changed=False)

    @staticmethod
    def unsaved(session: WorkSession, error: StoreError) -> TimerResult:
        return TimerResult(session=session, saved=False, error=error)
