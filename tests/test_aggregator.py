"""Tests for project/category totals and day/week summaries."""

import calendar
from datetime import UTC, datetime, timedelta

import pytest

from timekeeper import aggregator, timer
from timekeeper.models import Category, Project, WorkSession

# Monday
WEEK = datetime(2025, 3, 10, tzinfo=UTC)
H = timedelta(hours=1)


@pytest.fixture
def work():
    return Category(name="Work", color_hex="#4ECDC4", id="c-work")


@pytest.fixture
def home():
    return Category(name="Home", color_hex="#FF6B6B", id="c-home")


@pytest.fixture
def api(work):
    return Project(name="API", category_id=work.id, id="p-api")


@pytest.fixture
def docs(work):
    return Project(name="Docs", category_id=work.id, id="p-docs")


@pytest.fixture
def loose():
    return Project(name="Loose", id="p-loose")


def logged(project, start, hours):
    return timer.log_past(project.id, start, start + H * hours)


# ── totals ───────────────────────────────────────────────────


def test_project_total_mixes_states(api):
    at = WEEK + H * 10
    stopped = logged(api, WEEK, 1)
    paused = timer.pause(timer.start_session(api.id, WEEK + H * 2), WEEK + H * 2.5)
    running = timer.start_session(api.id, WEEK + H * 9)
    sessions = [stopped, paused, running]

    total = aggregator.project_total(api, sessions, at)
    assert total == sum((timer.current_duration(s, at) for s in sessions), timedelta(0))
    assert total == H * 2.5


def test_project_total_ignores_other_projects(api, docs):
    sessions = [logged(api, WEEK, 1), logged(docs, WEEK, 4)]
    assert aggregator.project_total(api, sessions, WEEK) == H


def test_project_total_without_sessions_is_zero(api):
    assert aggregator.project_total(api, [], WEEK) == timedelta(0)


def test_project_total_tracks_running_session(api):
    running = timer.start_session(api.id, WEEK)
    assert aggregator.project_total(api, [running], WEEK + H) == H
    assert aggregator.project_total(api, [running], WEEK + H * 2) == H * 2


def test_category_total_sums_projects(work, api, docs, loose):
    sessions = [logged(api, WEEK, 1), logged(docs, WEEK, 2), logged(loose, WEEK, 5)]
    projects = [api, docs, loose]
    assert aggregator.category_total(work, projects, sessions, WEEK) == sum(
        (aggregator.project_total(p, sessions, WEEK) for p in (api, docs)), timedelta(0)
    )
    assert aggregator.category_total(work, projects, sessions, WEEK) == H * 3


def test_category_with_empty_projects_is_zero(work, api, docs):
    assert aggregator.category_total(work, [api, docs], [], WEEK) == timedelta(0)


# ── weeks ────────────────────────────────────────────────────


def test_start_of_week_monday():
    thursday = datetime(2025, 3, 13, 17, 45, 12, tzinfo=UTC)
    assert aggregator.start_of_week(thursday) == WEEK


def test_start_of_week_sunday_first():
    thursday = datetime(2025, 3, 13, 17, 45, tzinfo=UTC)
    assert aggregator.start_of_week(thursday, calendar.SUNDAY) == datetime(
        2025, 3, 9, tzinfo=UTC
    )


def test_recent_week_starts():
    weeks = aggregator.recent_week_starts(WEEK + timedelta(days=2), count=8)
    assert len(weeks) == 8
    assert weeks[0] == WEEK
    assert weeks[-1] == WEEK - timedelta(weeks=7)


# ── day buckets ──────────────────────────────────────────────


def test_bucket_by_day_groups_by_start_day(api, docs):
    projects = {p.id: p for p in (api, docs)}
    sessions = [
        logged(api, WEEK + H * 9, 1),
        logged(docs, WEEK + H * 13, 2),
        logged(api, WEEK + timedelta(days=2, hours=10), 3),
        logged(api, WEEK + timedelta(days=7), 1),  # next week
    ]
    buckets = aggregator.bucket_by_day(sessions, projects, WEEK, WEEK + timedelta(days=8))

    assert len(buckets) == 7
    assert [b.day for b in buckets] == [WEEK + timedelta(days=i) for i in range(7)]
    assert buckets[0].total == H * 3
    assert buckets[0].by_project == {"API": H, "Docs": H * 2}
    assert buckets[2].by_project == {"API": H * 3}
    assert buckets[1].total == timedelta(0)
    assert buckets[1].by_project == {}


def test_session_spanning_midnight_stays_on_start_day(api):
    late = logged(api, WEEK + H * 23, 3)
    buckets = aggregator.bucket_by_day([late], {api.id: api}, WEEK, WEEK + timedelta(days=2))
    assert buckets[0].total == H * 3
    assert buckets[1].total == timedelta(0)


def test_bucket_unknown_project_is_labelled(api):
    orphan = WorkSession(start=WEEK, end=WEEK + H, elapsed_before_pause=H)
    buckets = aggregator.bucket_by_day([orphan], {api.id: api}, WEEK, WEEK + H)
    assert buckets[0].by_project == {aggregator.UNASSIGNED_PROJECT: H}


# ── weekly breakdown ─────────────────────────────────────────


def test_weekly_total_filters_range(api):
    sessions = [
        logged(api, WEEK - H, 1),
        logged(api, WEEK, 2),
        logged(api, WEEK + timedelta(days=7), 4),
    ]
    assert aggregator.weekly_total(sessions, WEEK, WEEK + timedelta(days=7), WEEK) == H * 2


def test_weekly_breakdown_shares(work, api, docs, loose):
    projects = {p.id: p for p in (api, docs, loose)}
    categories = {work.id: work}
    sessions = [logged(api, WEEK, 3), logged(docs, WEEK + H * 5, 1), logged(loose, WEEK, 1)]

    breakdown = aggregator.weekly_project_breakdown(
        sessions, projects, categories, WEEK, WEEK + timedelta(days=7), WEEK
    )

    assert breakdown.total == H * 5
    assert [p.name for p in breakdown.projects][0] == "API"
    assert sum(p.percent for p in breakdown.projects) == pytest.approx(100.0)
    api_share = breakdown.projects[0]
    assert api_share.share == pytest.approx(0.6)
    assert api_share.color == "#4ECDC4"
    loose_share = next(p for p in breakdown.projects if p.name == "Loose")
    assert loose_share.color == aggregator.UNASSIGNED_COLOR


def test_weekly_breakdown_empty_week(api):
    breakdown = aggregator.weekly_project_breakdown(
        [], {api.id: api}, {}, WEEK, WEEK + timedelta(days=7), WEEK
    )
    assert breakdown.total == timedelta(0)
    assert breakdown.projects == []


def test_weekly_breakdown_zero_duration_sessions_do_not_divide(api):
    paused_at_start = timer.pause(timer.start_session(api.id, WEEK), WEEK)
    breakdown = aggregator.weekly_project_breakdown(
        [paused_at_start], {api.id: api}, {}, WEEK, WEEK + timedelta(days=7), WEEK + H
    )
    assert breakdown.total == timedelta(0)
    assert breakdown.projects == []


# ── category breakdown ───────────────────────────────────────


def test_category_breakdown_skips_empty_and_sorts(work, home, api, docs):
    chores = Project(name="Chores", category_id=home.id, id="p-chores")
    idle = Category(name="Idle", color_hex="#000000", id="c-idle")
    sessions = [logged(api, WEEK, 2), logged(chores, WEEK, 1)]

    shares = aggregator.category_breakdown(
        [work, idle, home], [api, docs, chores], sessions, WEEK
    )

    assert [s.name for s in shares] == ["Home", "Work"]
    assert shares[1].total == H * 2
    assert shares[0].color == "#FF6B6B"
