# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for running one tracker command from a JSON request.

Orchestrates the full execution flow:
1. Create store from configuration
2. Build a TimeTracker on it from TrackerConfig
3. Validate the command's arguments
4. Run the command
5. Return a structured, JSON-ready result
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any, ClassVar

import httpx
from pydantic import BaseModel, ValidationError

from timekeeper import TimeTracker, TimekeeperError, timer
from timekeeper._internal.clock import Clock, SystemClock
from timekeeper.aggregator import start_of_week
from timekeeper.config import TrackerConfig, build_tracker, create_store
from timekeeper.formatting import format_duration
from timekeeper.models import WorkSession
from timekeeper.result import TimerResult
from timekeeper.stores import Store

from .schema import (
    AtArgs,
    CategoryArgs,
    CreateCategoryArgs,
    CreateProjectArgs,
    LogPastArgs,
    ProjectArgs,
    RunnerInput,
    RunnerOutput,
    SessionArgs,
    StartFromPastArgs,
    WeeklySummaryArgs,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any, TimeTracker, Any], Awaitable[Any]]


class ExecutionError(Exception):
    """Raised when a request cannot be dispatched."""

    pass


class Executor:
    """Runs a single command against a tracker.

    The tracker is wired by :func:`~timekeeper.config.build_tracker` from
    ``TrackerConfig.from_env()`` unless a *config* is passed, so
    ``TIMEKEEPER_LIVE_URL`` and the reminder settings apply to every command.

    The executor is designed for dependency injection to support testing.
    Pass a custom store to the constructor to override store creation, a
    clock to pin "now", and an *http_client* for the live status webhook.

    Example:
        executor = Executor()
        output = await executor.execute(input_data)

        # For testing with an in-memory store:
        executor = Executor(store=InMemoryStore())
    """

    _commands: ClassVar[dict[str, tuple[type[BaseModel], Handler]]] = {}

    def __init__(
        self,
        store: Store | None = None,
        clock: Clock | None = None,
        config: TrackerConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._injected_store = store
        self._clock = clock or SystemClock()
        self._config = config
        self._http_client = http_client

    @classmethod
    def commands(cls) -> list[str]:
        return sorted(cls._commands)

    async def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Execute the command and wrap every failure in a ``RunnerOutput``."""
        try:
            result = await self._execute_internal(input_data)
        except ValidationError as e:
            return RunnerOutput(success=False, error=str(e), error_type="ValidationError")
        except (ExecutionError, TimekeeperError) as e:
            return RunnerOutput(success=False, error=str(e), error_type=type(e).__name__)
        except Exception as e:
            logger.exception("Command %r failed", input_data.command)
            return RunnerOutput(success=False, error=str(e), error_type=type(e).__name__)
        return RunnerOutput(success=True, result=result)

    async def _execute_internal(self, input_data: RunnerInput) -> Any:
        entry = self._commands.get(input_data.command)
        if entry is None:
            raise ExecutionError(
                f"Unknown command '{input_data.command}'. Known: {', '.join(self.commands())}"
            )
        args_model, handler = entry
        args = args_model.model_validate(input_data.args)

        store = self._injected_store or create_store(input_data.store)
        owns_store = self._injected_store is None
        tracker = build_tracker(
            self._config or TrackerConfig.from_env(),
            clock=self._clock,
            store=store,
            http_client=self._http_client,
        )
        try:
            return await handler(self, tracker, args)
        finally:
            if owns_store:
                await tracker.aclose()
            elif tracker.live is not None:
                await tracker.live.aclose()

    def _now(self, args: AtArgs) -> datetime:
        return args.at or self._clock.now()

    # ── serialization ────────────────────────────────────────

    def _session_dict(self, session: WorkSession, at: datetime) -> dict[str, Any]:
        duration = timer.current_duration(session, at)
        return {
            "id": session.id,
            "project_id": session.project_id,
            "state": session.state.value,
            "start": session.start.isoformat(),
            "end": session.end.isoformat() if session.end else None,
            "duration_seconds": duration.total_seconds(),
            "duration": format_duration(duration),
        }

    def _result_dict(self, result: TimerResult, at: datetime) -> dict[str, Any]:
        data = self._session_dict(result.session, at)
        data["changed"] = result.changed
        data["saved"] = result.saved
        return data


def command(name: str, args_model: type[BaseModel]) -> Callable[[Handler], Handler]:
    """Register *fn* as the handler of runner command *name*."""

    def register(fn: Handler) -> Handler:
        Executor._commands[name] = (args_model, fn)
        return fn

    return register


# ── commands ─────────────────────────────────────────────────


@command("create_category", CreateCategoryArgs)
async def _create_category(ex: Executor, tracker: TimeTracker, args: CreateCategoryArgs) -> Any:
    category = await tracker.create_category(args.name, args.color_hex)
    return {"id": category.id, "name": category.name, "color_hex": category.color_hex}


@command("delete_category", CategoryArgs)
async def _delete_category(ex: Executor, tracker: TimeTracker, args: CategoryArgs) -> Any:
    await tracker.delete_category(args.category_id)
    return {"deleted": args.category_id}


@command("create_project", CreateProjectArgs)
async def _create_project(ex: Executor, tracker: TimeTracker, args: CreateProjectArgs) -> Any:
    project = await tracker.create_project(args.name, category_name=args.category_name)
    return {"id": project.id, "name": project.name, "category_id": project.category_id}


@command("delete_project", ProjectArgs)
async def _delete_project(ex: Executor, tracker: TimeTracker, args: ProjectArgs) -> Any:
    await tracker.delete_project(args.project_id)
    return {"deleted": args.project_id}


@command("start", ProjectArgs)
async def _start(ex: Executor, tracker: TimeTracker, args: ProjectArgs) -> Any:
    at = ex._now(args)
    return ex._result_dict(await tracker.start(args.project_id, at), at)


@command("start_from_past", StartFromPastArgs)
async def _start_from_past(ex: Executor, tracker: TimeTracker, args: StartFromPastArgs) -> Any:
    at = ex._now(args)
    return ex._result_dict(await tracker.start_from_past(args.project_id, args.past, at), at)


@command("pause", SessionArgs)
async def _pause(ex: Executor, tracker: TimeTracker, args: SessionArgs) -> Any:
    at = ex._now(args)
    return ex._result_dict(await tracker.pause(args.session_id, at), at)


@command("resume", SessionArgs)
async def _resume(ex: Executor, tracker: TimeTracker, args: SessionArgs) -> Any:
    at = ex._now(args)
    return ex._result_dict(await tracker.resume(args.session_id, at), at)


@command("stop", SessionArgs)
async def _stop(ex: Executor, tracker: TimeTracker, args: SessionArgs) -> Any:
    at = ex._now(args)
    return ex._result_dict(await tracker.stop(args.session_id, at), at)


@command("log_past", LogPastArgs)
async def _log_past(ex: Executor, tracker: TimeTracker, args: LogPastArgs) -> Any:
    if args.end is not None:
        result = await tracker.log_past(args.project_id, args.start, args.end)
    else:
        result = await tracker.log_past_duration(args.project_id, args.start, args.duration or "")
    return ex._result_dict(result, ex._clock.now())


@command("delete_session", SessionArgs)
async def _delete_session(ex: Executor, tracker: TimeTracker, args: SessionArgs) -> Any:
    await tracker.delete_session(args.session_id)
    return {"deleted": args.session_id}


@command("status", SessionArgs)
async def _status(ex: Executor, tracker: TimeTracker, args: SessionArgs) -> Any:
    at = ex._now(args)
    snapshot = await tracker.snapshot(args.session_id, at)
    data = ex._session_dict(await tracker.get_session(args.session_id), at)
    data["snapshot"] = snapshot.to_dict()
    return data


@command("project_total", ProjectArgs)
async def _project_total(ex: Executor, tracker: TimeTracker, args: ProjectArgs) -> Any:
    total = await tracker.project_total(args.project_id, ex._now(args))
    return {"total_seconds": total.total_seconds(), "total": format_duration(total)}


@command("weekly_summary", WeeklySummaryArgs)
async def _weekly_summary(ex: Executor, tracker: TimeTracker, args: WeeklySummaryArgs) -> Any:
    at = ex._now(args)
    week_start = args.week_start or start_of_week(at)
    breakdown = await tracker.weekly_breakdown(week_start, at)
    days = await tracker.day_buckets(week_start, at)
    return {
        "week_start": week_start.isoformat(),
        "total_seconds": breakdown.total.total_seconds(),
        "projects": [
            {
                "name": share.name,
                "total_seconds": share.total.total_seconds(),
                "percent": share.percent,
                "color": share.color,
            }
            for share in breakdown.projects
        ],
        "days": [
            {
                "day": bucket.day.isoformat(),
                "total_seconds": bucket.total.total_seconds(),
                "by_project": {k: v.total_seconds() for k, v in bucket.by_project.items()},
            }
            for bucket in days
        ],
    }


@command("category_summary", AtArgs)
async def _category_summary(ex: Executor, tracker: TimeTracker, args: AtArgs) -> Any:
    shares = await tracker.category_breakdown(ex._now(args))
    return [
        {"name": s.name, "total_seconds": s.total.total_seconds(), "color": s.color}
        for s in shares
    ]
