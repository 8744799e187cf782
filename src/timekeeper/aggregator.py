"""Roll session durations up into project, category, day and week totals.

Nothing here is cached.  Running sessions grow continuously, so every
function takes the instant to evaluate at and recomputes from the entities
it is given.
"""

from __future__ import annotations

import calendar
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from timekeeper.models import Category, Project, WorkSession
from timekeeper.timer import current_duration

UNASSIGNED_PROJECT = "No Project"
UNASSIGNED_COLOR = "#999999"

_ZERO = timedelta(0)
_DAY = timedelta(days=1)
_WEEK = timedelta(days=7)


@dataclass(frozen=True)
class DayBucket:
    """Sessions that started on one day, totalled overall and per project name."""

    day: datetime
    total: timedelta = _ZERO
    by_project: dict[str, timedelta] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectShare:
    name: str
    total: timedelta
    share: float
    color: str = UNASSIGNED_COLOR

    @property
    def percent(self) -> float:
        return self.share * 100.0


@dataclass(frozen=True)
class WeeklyBreakdown:
    week_start: datetime
    week_end: datetime
    total: timedelta
    projects: list[ProjectShare] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryShare:
    category_id: str
    name: str
    total: timedelta
    color: str


# ── totals ───────────────────────────────────────────────────


def total_duration(sessions: Iterable[WorkSession], at: datetime) -> timedelta:
    return sum((current_duration(s, at) for s in sessions), _ZERO)


def project_total(project: Project, sessions: Iterable[WorkSession], at: datetime) -> timedelta:
    """Sum of ``current_duration`` over the sessions *project* owns."""
    return total_duration((s for s in sessions if s.project_id == project.id), at)


def category_total(
    category: Category,
    projects: Iterable[Project],
    sessions: Iterable[WorkSession],
    at: datetime,
) -> timedelta:
    """Sum of :func:`project_total` over the projects *category* owns."""
    owned = {p.id for p in projects if p.category_id == category.id}
    return total_duration((s for s in sessions if s.project_id in owned), at)


# ── date ranges ──────────────────────────────────────────────


def sessions_in_range(
    sessions: Iterable[WorkSession], start: datetime, end: datetime
) -> list[WorkSession]:
    """Sessions whose ``start`` falls in ``[start, end)``."""
    return [s for s in sessions if start <= s.start < end]


def start_of_week(moment: datetime, first_weekday: int = calendar.MONDAY) -> datetime:
    """Midnight of the first day of the week containing *moment*, same tzinfo."""
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    offset = (midnight.weekday() - first_weekday) % 7
    return midnight - timedelta(days=offset)


def recent_week_starts(
    now: datetime, count: int = 8, first_weekday: int = calendar.MONDAY
) -> list[datetime]:
    """Starts of the current week and the ``count - 1`` weeks before it, newest first."""
    current = start_of_week(now, first_weekday)
    return [current - _WEEK * i for i in range(count)]


def _project_name(session: WorkSession, projects: Mapping[str, Project]) -> str:
    project = projects.get(session.project_id) if session.project_id else None
    return project.name if project is not None else UNASSIGNED_PROJECT


# ── bucketing ────────────────────────────────────────────────


def bucket_by_day(
    sessions: Iterable[WorkSession],
    projects: Mapping[str, Project],
    week_start: datetime,
    at: datetime,
) -> list[DayBucket]:
    """Split the week starting at *week_start* into seven day buckets.

    A session is attributed wholly to the day its ``start`` falls on, even
    when it runs past midnight.
    """
    sessions = list(sessions)
    buckets: list[DayBucket] = []
    for i in range(7):
        day = week_start + _DAY * i
        by_project: dict[str, timedelta] = defaultdict(lambda: _ZERO)
        total = _ZERO
        for session in sessions_in_range(sessions, day, day + _DAY):
            duration = current_duration(session, at)
            total += duration
            by_project[_project_name(session, projects)] += duration
        buckets.append(DayBucket(day=day, total=total, by_project=dict(by_project)))
    return buckets


def weekly_total(
    sessions: Iterable[WorkSession],
    week_start: datetime,
    week_end: datetime,
    at: datetime,
) -> timedelta:
    return total_duration(sessions_in_range(sessions, week_start, week_end), at)


def weekly_project_breakdown(
    sessions: Iterable[WorkSession],
    projects: Mapping[str, Project],
    categories: Mapping[str, Category],
    week_start: datetime,
    week_end: datetime,
    at: datetime,
) -> WeeklyBreakdown:
    """Per-project totals and shares for sessions started in ``[week_start, week_end)``.

    Projects with no accrued time are left out.  Shares are fractions of the
    weekly total and are all ``0.0`` when that total is zero.
    """
    totals: dict[str, timedelta] = defaultdict(lambda: _ZERO)
    colors: dict[str, str] = {}
    for session in sessions_in_range(sessions, week_start, week_end):
        name = _project_name(session, projects)
        totals[name] += current_duration(session, at)
        if name not in colors:
            colors[name] = _slice_color(session, projects, categories)

    week_sum = sum(totals.values(), _ZERO)
    shares = [
        ProjectShare(
            name=name,
            total=total,
            share=(total / week_sum) if week_sum > _ZERO else 0.0,
            color=colors[name],
        )
        for name, total in totals.items()
        if total > _ZERO
    ]
    shares.sort(key=lambda s: s.total, reverse=True)
    return WeeklyBreakdown(
        week_start=week_start, week_end=week_end, total=week_sum, projects=shares
    )


def _slice_color(
    session: WorkSession, projects: Mapping[str, Project], categories: Mapping[str, Category]
) -> str:
    project = projects.get(session.project_id) if session.project_id else None
    if project is None or project.category_id is None:
        return UNASSIGNED_COLOR
    category = categories.get(project.category_id)
    return category.color_hex if category is not None else UNASSIGNED_COLOR


def category_breakdown(
    categories: Iterable[Category],
    projects: Iterable[Project],
    sessions: Iterable[WorkSession],
    at: datetime,
) -> list[CategoryShare]:
    """All-time total per category, omitting empty ones, sorted by name."""
    projects = list(projects)
    sessions = list(sessions)
    result = []
    for category in sorted(categories, key=lambda c: c.name):
        total = category_total(category, projects, sessions, at)
        if total > _ZERO:
            result.append(
                CategoryShare(
                    category_id=category.id,
                    name=category.name,
                    total=total,
                    color=category.color_hex,
                )
            )
    return result
