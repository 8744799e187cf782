"""Session timer state machine.

States are derived from the session fields (see :class:`WorkSession`)::

    start ──► RUNNING ◄──resume── PAUSED
                 │  └───pause────►  │
                 └──stop──► STOPPED ◄┘

Every function here is pure: it takes the instant explicitly, never reads a
clock, and returns a new :class:`WorkSession`.  A transition that has nothing
to do (pausing a paused session, resuming a running one, stopping a stopped
one) returns the very same object, so callers can tell no-ops apart with
``is``.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from timekeeper.exceptions import InvalidIntervalError, InvalidTransitionError
from timekeeper.models import SessionState, WorkSession

_ZERO = timedelta(0)


def _segment(session: WorkSession, at: datetime) -> timedelta:
    """Length of the active segment ending at *at*, never negative."""
    if session.last_resume is None:
        return _ZERO
    return max(at - session.last_resume, _ZERO)


def current_duration(session: WorkSession, at: datetime) -> timedelta:
    """How long *session* has accrued as of *at*.

    Stopped and paused sessions report ``elapsed_before_pause``; a running
    session adds its active segment.  This is the only duration formula used
    for display and aggregation.
    """
    if session.state is SessionState.RUNNING:
        return session.elapsed_before_pause + _segment(session, at)
    return session.elapsed_before_pause


def start_session(project_id: str, at: datetime) -> WorkSession:
    return WorkSession(start=at, project_id=project_id, last_resume=at)


def start_session_from_past(project_id: str, past: datetime, at: datetime) -> WorkSession:
    """Open a running session that has been going since *past*."""
    if past > at:
        raise InvalidIntervalError("start from past", "start instant is in the future")
    return WorkSession(
        start=past,
        project_id=project_id,
        last_resume=at,
        elapsed_before_pause=at - past,
    )


def log_past(project_id: str, start: datetime, end: datetime) -> WorkSession:
    """Create an already-stopped session covering ``[start, end)``."""
    if end <= start:
        raise InvalidIntervalError("log past session", "end must be after start")
    return WorkSession(
        start=start,
        project_id=project_id,
        end=end,
        elapsed_before_pause=end - start,
    )


def pause(session: WorkSession, at: datetime) -> WorkSession:
    state = session.state
    if state is SessionState.PAUSED:
        return session
    if state is SessionState.STOPPED:
        raise InvalidTransitionError("pause", state)
    return replace(
        session,
        elapsed_before_pause=session.elapsed_before_pause + _segment(session, at),
        last_resume=None,
    )


def resume(session: WorkSession, at: datetime) -> WorkSession:
    state = session.state
    if state is SessionState.RUNNING:
        return session
    if state is SessionState.STOPPED:
        raise InvalidTransitionError("resume", state)
    return replace(session, last_resume=at)


def stop(session: WorkSession, at: datetime) -> WorkSession:
    """Close *session*, folding any active segment into the final total."""
    if session.state is SessionState.STOPPED:
        return session
    return replace(
        session,
        elapsed_before_pause=session.elapsed_before_pause + _segment(session, at),
        last_resume=None,
        end=at,
    )
