"""
timekeeper: Hello World

Sessions start, pause, resume and stop. Totals are recomputed from the
sessions every time you ask, so a running session counts up to "now".
"""

import asyncio
from datetime import UTC, datetime, timedelta

from timekeeper import TimeTracker
from timekeeper.aggregator import start_of_week
from timekeeper.formatting import format_duration
from timekeeper.live import InMemoryProjector, LiveStatus
from timekeeper.notifications import InMemoryNotificationScheduler


def show(label: str, result) -> None:
    print(f"  {label:<8} state={result.session.state.value:<8} changed={result.changed}")


async def main():
    # ──────────────────────────────────────
    #  1. Create the tracker
    # ──────────────────────────────────────
    scheduler = InMemoryNotificationScheduler()
    projector = InMemoryProjector()
    tracker = TimeTracker(
        scheduler=scheduler,
        live=LiveStatus(projector, refresh_interval=None),
    )

    api = await tracker.create_project("API", category_name="Work")
    docs = await tracker.create_project("Docs", category_name="Work")
    garden = await tracker.create_project("Garden", category_name="Home")

    monday = start_of_week(datetime.now(UTC)) + timedelta(hours=9)

    # ──────────────────────────────────────
    #  2. One session, with a break
    # ──────────────────────────────────────
    print("=== Timer ===\n")

    result = await tracker.start(api.id, monday)
    show("start", result)
    print(f"  reminders scheduled: {len(scheduler.reminders_for(result.session.id))}")

    session_id = result.session.id
    show("pause", await tracker.pause(session_id, monday + timedelta(minutes=50)))
    show("pause", await tracker.pause(session_id, monday + timedelta(minutes=55)))
    show("resume", await tracker.resume(session_id, monday + timedelta(hours=1)))
    show("stop", await tracker.stop(session_id, monday + timedelta(hours=2)))

    total = await tracker.project_total(api.id)
    print(f"  API total: {format_duration(total)}")
    print(f"  display cleared: {projector.current is None}")

    # ──────────────────────────────────────
    #  3. Backfill forgotten time
    # ──────────────────────────────────────
    print("\n=== Log past ===\n")

    await tracker.log_past_duration(docs.id, monday + timedelta(days=1), "1:30")
    await tracker.log_past(
        garden.id, monday + timedelta(days=2), monday + timedelta(days=2, minutes=45)
    )

    # ──────────────────────────────────────
    #  4. Weekly summary
    # ──────────────────────────────────────
    print("\n=== This week ===\n")

    week = start_of_week(monday)
    breakdown = await tracker.weekly_breakdown(week, monday + timedelta(days=3))
    print(f"  Total: {format_duration(breakdown.total)}")
    for share in breakdown.projects:
        print(f"  {share.name:<8} {format_duration(share.total):>12}  {share.percent:5.1f}%")

    for category in await tracker.category_breakdown(monday + timedelta(days=3)):
        print(f"  [{category.name}] {format_duration(category.total)}")

    await tracker.aclose()


if __name__ == "__main__":
    asyncio.run(main())
