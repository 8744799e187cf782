"""TimeTracker: the central orchestrator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from timekeeper import aggregator, timer
from timekeeper._internal.clock import Clock, SystemClock
from timekeeper.exceptions import (
    CategoryInUseError,
    DuplicateNameError,
    InvalidInputError,
    OpenSessionError,
    RecordNotFoundError,
    StoreError,
)
from timekeeper.formatting import parse_duration
from timekeeper.models import Category, Project, SessionState, WorkSession, random_color_hex
from timekeeper.result import TimerResult
from timekeeper.snapshot import TimerSnapshot
from timekeeper.stores.memory import InMemoryStore
from timekeeper.stores.records import (
    CATEGORIES,
    PROJECTS,
    SESSIONS,
    CategoryRecord,
    ProjectRecord,
    SessionRecord,
    dump,
)

if TYPE_CHECKING:
    from timekeeper.live import LiveStatus
    from timekeeper.notifications import NotificationScheduler
    from timekeeper.stores.base import Store

logger = logging.getLogger(__name__)


class TimeTracker:
    """Owns categories, projects and sessions and runs every timer command.

    Each command follows the same path: load the session, apply the pure
    transition from :mod:`timekeeper.timer`, persist the new value, then tell
    the collaborators (reminder scheduler, live status).  Persistence and
    collaborator failures never undo a transition.

    Parameters:
        store:     Persistence backend.  Defaults to :class:`InMemoryStore`.
        clock:     Source of "now" for commands called without ``at``.
        scheduler: Optional reminder scheduler.
        live:      Optional live status component.
    """

    def __init__(
        self,
        store: Store | None = None,
        *,
        clock: Clock | None = None,
        scheduler: NotificationScheduler | None = None,
        live: LiveStatus | None = None,
    ) -> None:
        self._store: Store = store or InMemoryStore()
        self._clock = clock or SystemClock()
        self._scheduler = scheduler
        self._live = live

    @property
    def store(self) -> Store:
        return self._store

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def live(self) -> LiveStatus | None:
        return self._live

    async def aclose(self) -> None:
        """Stop live refreshes and close the store."""
        if self._live is not None:
            await self._live.aclose()
        await self._store.close()

    # ── categories ───────────────────────────────────────────

    async def create_category(self, name: str, color_hex: str = "") -> Category:
        name = _clean_name(name, "category")
        if await self.find_category(name) is not None:
            raise DuplicateNameError("create category", f"'{name}' already exists")
        category = Category(name=name, color_hex=color_hex or random_color_hex())
        await self._put_category(category)
        logger.info("Created category %r (%s)", name, category.id)
        return category

    async def find_category(self, name: str) -> Category | None:
        """Exact-name lookup."""
        rows = await self._store.query(CATEGORIES, lambda v: v["name"] == name)
        return CategoryRecord.model_validate(rows[0]).to_model() if rows else None

    async def find_or_create_category(self, name: str) -> Category:
        existing = await self.find_category(_clean_name(name, "category"))
        return existing or await self.create_category(name)

    async def get_category(self, category_id: str) -> Category:
        value = await self._store.get(CATEGORIES, category_id)
        if value is None:
            raise RecordNotFoundError("category", category_id)
        return CategoryRecord.model_validate(value).to_model()

    async def list_categories(self) -> list[Category]:
        records = [CategoryRecord.model_validate(v) for v in await self._store.values(CATEGORIES)]
        return sorted((r.to_model() for r in records), key=lambda c: c.name)

    async def update_category(
        self, category_id: str, *, name: str | None = None, color_hex: str | None = None
    ) -> Category:
        category = await self.get_category(category_id)
        if name is not None:
            name = _clean_name(name, "category")
            other = await self.find_category(name)
            if other is not None and other.id != category_id:
                raise DuplicateNameError("rename category", f"'{name}' already exists")
            category = replace(category, name=name)
        if color_hex is not None:
            category = replace(category, color_hex=color_hex)
        await self._put_category(category)
        return category

    async def delete_category(self, category_id: str) -> None:
        """Delete a category that owns no projects.

        Raises:
            CategoryInUseError: If any project still belongs to the category.
        """
        category = await self.get_category(category_id)
        owned = await self.list_projects(category_id=category_id)
        if owned:
            raise CategoryInUseError(category.name, len(owned))
        await self._store.delete(CATEGORIES, category_id)
        await self._store.save()
        logger.info("Deleted category %r", category.name)

    async def backfill_category_colors(self) -> int:
        """Give every category stored without a color a palette color.

        Returns:
            Number of categories updated.
        """
        updated = 0
        for category in await self.list_categories():
            if not category.color_hex:
                color = random_color_hex()
                await self._put_category(replace(category, color_hex=color))
                logger.info("Assigned color %s to category %r", color, category.name)
                updated += 1
        return updated

    # ── projects ─────────────────────────────────────────────

    async def create_project(
        self,
        name: str,
        *,
        category_id: str | None = None,
        category_name: str | None = None,
    ) -> Project:
        """Create a project, optionally filed under a category.

        *category_name* reuses the category with that exact name or creates
        it; *category_id* must already exist.
        """
        name = _clean_name(name, "project")
        if category_name and category_name.strip():
            category_id = (await self.find_or_create_category(category_name)).id
        elif category_id is not None:
            await self.get_category(category_id)
        project = Project(name=name, category_id=category_id)
        await self._put_project(project)
        logger.info("Created project %r (%s)", name, project.id)
        return project

    async def get_project(self, project_id: str) -> Project:
        value = await self._store.get(PROJECTS, project_id)
        if value is None:
            raise RecordNotFoundError("project", project_id)
        return ProjectRecord.model_validate(value).to_model()

    async def list_projects(self, *, category_id: str | None = None) -> list[Project]:
        projects = [
            ProjectRecord.model_validate(v).to_model() for v in await self._store.values(PROJECTS)
        ]
        if category_id is not None:
            projects = [p for p in projects if p.category_id == category_id]
        return sorted(projects, key=lambda p: p.name)

    async def update_project(
        self,
        project_id: str,
        *,
        name: str | None = None,
        category_name: str | None = None,
    ) -> Project:
        """Rename and/or re-file a project.  An empty *category_name* un-files it."""
        project = await self.get_project(project_id)
        if name is not None:
            project = replace(project, name=_clean_name(name, "project"))
        if category_name is not None:
            if category_name.strip():
                category = await self.find_or_create_category(category_name)
                project = replace(project, category_id=category.id)
            else:
                project = replace(project, category_id=None)
        await self._put_project(project)
        return project

    async def delete_project(self, project_id: str) -> None:
        """Delete a project together with all of its sessions."""
        project = await self.get_project(project_id)
        for session in await self.sessions_for(project_id):
            await self._store.delete(SESSIONS, session.id)
            await self._forget_session(session)
        await self._store.delete(PROJECTS, project_id)
        await self._store.save()
        logger.info("Deleted project %r and its sessions", project.name)

    async def project_color(self, project: Project) -> str:
        category = None
        if project.category_id is not None:
            value = await self._store.get(CATEGORIES, project.category_id)
            category = CategoryRecord.model_validate(value).to_model() if value else None
        return project.effective_color(category)

    # ── sessions ─────────────────────────────────────────────

    async def get_session(self, session_id: str) -> WorkSession:
        value = await self._store.get(SESSIONS, session_id)
        if value is None:
            raise RecordNotFoundError("session", session_id)
        return SessionRecord.model_validate(value).to_model()

    async def list_sessions(self) -> list[WorkSession]:
        return await self._query_sessions(lambda v: True)

    async def sessions_for(self, project_id: str) -> list[WorkSession]:
        """The project's sessions, oldest first."""
        return await self._query_sessions(lambda v: v["project_id"] == project_id)

    async def sessions_between(self, start: datetime, end: datetime) -> list[WorkSession]:
        """Sessions whose start falls in ``[start, end)``."""
        start, end = _aware(start, "start"), _aware(end, "end")
        return aggregator.sessions_in_range(await self.list_sessions(), start, end)

    async def open_session(self, project_id: str) -> WorkSession | None:
        """The project's running or paused session, if any."""
        for session in await self.sessions_for(project_id):
            if session.is_open:
                return session
        return None

    async def current_duration(self, session_id: str, at: datetime | None = None) -> timedelta:
        session = await self.get_session(session_id)
        return timer.current_duration(session, self._at(at))

    async def snapshot(self, session_id: str, at: datetime | None = None) -> TimerSnapshot:
        session = await self.get_session(session_id)
        return await self._snapshot(session, self._at(at))

    async def delete_session(self, session_id: str) -> None:
        """Delete a session, cancelling its reminders and any live display of it."""
        session = await self.get_session(session_id)
        await self._store.delete(SESSIONS, session_id)
        await self._forget_session(session)
        await self._store.save()
        logger.info("Deleted session %s", session_id)

    async def save_session(self, session: WorkSession) -> TimerResult:
        """Write *session* again, e.g. after a result came back unsaved."""
        return await self._commit(session)

    # ── timer commands ───────────────────────────────────────

    async def start(self, project_id: str, at: datetime | None = None) -> TimerResult:
        """Start timing *project*.

        If the project already has an open session it is resumed (or left
        running) rather than a second one being created.
        """
        at = self._at(at)
        project = await self.get_project(project_id)
        existing = await self.open_session(project_id)
        if existing is not None:
            logger.info("Project %r already has open session %s", project.name, existing.id)
            return await self._apply(existing, timer.resume(existing, at), at, project)

        session = timer.start_session(project.id, at)
        logger.info("Started session %s for %r", session.id, project.name)
        result = await self._commit(session)
        await self._announce(session, project, at)
        return result

    async def start_from_past(
        self, project_id: str, past: datetime, at: datetime | None = None
    ) -> TimerResult:
        """Start a running session that has been going since *past*.

        Raises:
            OpenSessionError: If the project already has an open session.
            InvalidIntervalError: If *past* is after *at*.
        """
        at = self._at(at)
        past = _aware(past, "past")
        project = await self.get_project(project_id)
        existing = await self.open_session(project_id)
        if existing is not None:
            raise OpenSessionError("start from past", project_id, existing.id)

        session = timer.start_session_from_past(project.id, past, at)
        logger.info("Started session %s for %r from %s", session.id, project.name, past)
        result = await self._commit(session)
        await self._announce(session, project, at)
        return result

    async def pause(self, session_id: str, at: datetime | None = None) -> TimerResult:
        at = self._at(at)
        session = await self.get_session(session_id)
        return await self._apply(session, timer.pause(session, at), at)

    async def resume(self, session_id: str, at: datetime | None = None) -> TimerResult:
        at = self._at(at)
        session = await self.get_session(session_id)
        return await self._apply(session, timer.resume(session, at), at)

    async def stop(self, session_id: str, at: datetime | None = None) -> TimerResult:
        at = self._at(at)
        session = await self.get_session(session_id)
        return await self._apply(session, timer.stop(session, at), at)

    async def log_past(self, project_id: str, start: datetime, end: datetime) -> TimerResult:
        """Backfill a finished session covering ``[start, end)``."""
        start, end = _aware(start, "start"), _aware(end, "end")
        project = await self.get_project(project_id)
        session = timer.log_past(project.id, start, end)
        logger.info("Logged past session %s for %r", session.id, project.name)
        return await self._commit(session)

    async def log_past_duration(self, project_id: str, start: datetime, text: str) -> TimerResult:
        """Backfill a session from a user-entered ``"H:MM"`` duration.

        Raises:
            DurationFormatError: If *text* is malformed.  Nothing is created.
        """
        duration = parse_duration(text)
        start = _aware(start, "start")
        return await self.log_past(project_id, start, start + duration)

    # ── aggregates ───────────────────────────────────────────

    async def project_total(self, project_id: str, at: datetime | None = None) -> timedelta:
        project = await self.get_project(project_id)
        sessions = await self.sessions_for(project_id)
        return aggregator.project_total(project, sessions, self._at(at))

    async def category_total(self, category_id: str, at: datetime | None = None) -> timedelta:
        category = await self.get_category(category_id)
        return aggregator.category_total(
            category,
            await self.list_projects(category_id=category_id),
            await self.list_sessions(),
            self._at(at),
        )

    async def day_buckets(
        self, week_start: datetime, at: datetime | None = None
    ) -> list[aggregator.DayBucket]:
        week_start = _aware(week_start, "week_start")
        projects = {p.id: p for p in await self.list_projects()}
        return aggregator.bucket_by_day(
            await self.list_sessions(), projects, week_start, self._at(at)
        )

    async def weekly_breakdown(
        self, week_start: datetime, at: datetime | None = None
    ) -> aggregator.WeeklyBreakdown:
        week_start = _aware(week_start, "week_start")
        week_end = week_start + timedelta(days=7)
        return aggregator.weekly_project_breakdown(
            await self.list_sessions(),
            {p.id: p for p in await self.list_projects()},
            {c.id: c for c in await self.list_categories()},
            week_start,
            week_end,
            self._at(at),
        )

    async def category_breakdown(
        self, at: datetime | None = None
    ) -> list[aggregator.CategoryShare]:
        return aggregator.category_breakdown(
            await self.list_categories(),
            await self.list_projects(),
            await self.list_sessions(),
            self._at(at),
        )

    # ── internals ────────────────────────────────────────────

    def _at(self, at: datetime | None) -> datetime:
        """*at*, or now when omitted.  Naive instants are rejected."""
        return self._clock.now() if at is None else _aware(at, "at")

    async def _apply(
        self,
        before: WorkSession,
        after: WorkSession,
        at: datetime,
        project: Project | None = None,
    ) -> TimerResult:
        if after is before:
            logger.debug("Session %s already %s", before.id, before.state.value)
            return TimerResult.unchanged(before)

        logger.info("Session %s: %s -> %s", after.id, before.state.value, after.state.value)
        result = await self._commit(after)
        if project is None and after.project_id is not None:
            project = await self._project_or_none(after.project_id)

        if after.state is SessionState.STOPPED:
            await self._cancel_reminders(after.id)
            if self._live is not None:
                await self._live.end(after.id)
        elif project is not None:
            await self._announce(after, project, at)
        return result

    async def _announce(self, session: WorkSession, project: Project, at: datetime) -> None:
        """Reschedule or cancel reminders and push a snapshot for an open session."""
        if session.state is SessionState.RUNNING:
            await self._schedule_reminders(session, project, at)
        else:
            await self._cancel_reminders(session.id)
        if self._live is not None:
            await self._live.show(
                TimerSnapshot.of(
                    session,
                    project_name=project.name,
                    project_color=await self.project_color(project),
                    at=at,
                )
            )

    async def _commit(self, session: WorkSession) -> TimerResult:
        try:
            await self._store.set(SESSIONS, session.id, dump(SessionRecord.from_model(session)))
            await self._store.save()
        except StoreError as exc:
            logger.warning("Session %s not saved: %s", session.id, exc)
            return TimerResult.unsaved(session, exc)
        return TimerResult.ok(session)

    async def _forget_session(self, session: WorkSession) -> None:
        await self._cancel_reminders(session.id)
        # a stopped session was already cleared from the display
        if self._live is not None and session.is_open:
            await self._live.end(session.id)

    async def _schedule_reminders(
        self, session: WorkSession, project: Project, at: datetime
    ) -> None:
        if self._scheduler is None:
            return
        try:
            await self._scheduler.schedule_hourly_reminders(session.id, project.name, at)
        except Exception as exc:
            logger.warning("Scheduling reminders for session %s failed: %s", session.id, exc)

    async def _cancel_reminders(self, session_id: str) -> None:
        if self._scheduler is None:
            return
        try:
            await self._scheduler.cancel_reminders(session_id)
        except Exception as exc:
            logger.warning("Cancelling reminders for session %s failed: %s", session_id, exc)

    async def _snapshot(self, session: WorkSession, at: datetime) -> TimerSnapshot:
        project = await self._project_or_none(session.project_id) if session.project_id else None
        if project is None:
            return TimerSnapshot.of(
                session,
                project_name=aggregator.UNASSIGNED_PROJECT,
                project_color=aggregator.UNASSIGNED_COLOR,
                at=at,
            )
        return TimerSnapshot.of(
            session,
            project_name=project.name,
            project_color=await self.project_color(project),
            at=at,
        )

    async def _project_or_none(self, project_id: str) -> Project | None:
        value = await self._store.get(PROJECTS, project_id)
        return ProjectRecord.model_validate(value).to_model() if value else None

    async def _query_sessions(
        self, predicate: Callable[[dict[str, Any]], bool]
    ) -> list[WorkSession]:
        rows = await self._store.query(SESSIONS, predicate)
        sessions = [SessionRecord.model_validate(v).to_model() for v in rows]
        return sorted(sessions, key=lambda s: s.start)

    async def _put_category(self, category: Category) -> None:
        await self._store.set(CATEGORIES, category.id, dump(CategoryRecord.from_model(category)))
        await self._store.save()

    async def _put_project(self, project: Project) -> None:
        await self._store.set(PROJECTS, project.id, dump(ProjectRecord.from_model(project)))
        await self._store.save()


def _aware(instant: datetime, label: str) -> datetime:
    if instant.tzinfo is None or instant.utcoffset() is None:
        raise InvalidInputError(f"{label} must be timezone-aware, got {instant.isoformat()}")
    return instant


def _clean_name(name: str, kind: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidInputError(f"{kind} name must not be empty")
    return cleaned
