# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON contract of
``python -m timekeeper.runner``: one command in on stdin, one result out on
stdout.
"""

from __future__ import annotations

from typing import Any

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from timekeeper.config import StoreConfig


class RunnerInput(BaseModel):
    """Complete input via stdin.

    Attributes:
        command: Command name (e.g., "start", "pause", "weekly_summary")
        args: Command-specific arguments, validated by the command's args model
        store: Store configuration
    """

    command: str
    args: dict[str, Any] = Field(default_factory=dict)
    store: StoreConfig = Field(default_factory=StoreConfig)


class RunnerOutput(BaseModel):
    """Complete output via stdout.

    The runner always outputs valid JSON matching this schema, even on
    errors.

    Attributes:
        success: Whether the command completed
        result: Command result (on success)
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    success: bool
    result: Any = None
    error: str = ""
    error_type: str = ""


# ── command arguments ────────────────────────────────────────


class AtArgs(BaseModel):
    at: AwareDatetime | None = None


class CreateCategoryArgs(BaseModel):
    name: str
    color_hex: str = ""


class CategoryArgs(BaseModel):
    category_id: str


class CreateProjectArgs(BaseModel):
    name: str
    category_name: str | None = None


class ProjectArgs(AtArgs):
    project_id: str


class SessionArgs(AtArgs):
    session_id: str


class StartFromPastArgs(ProjectArgs):
    past: AwareDatetime


class LogPastArgs(BaseModel):
    """Either ``end`` or an ``"H:MM"`` ``duration`` must be given."""

    project_id: str
    start: AwareDatetime
    end: AwareDatetime | None = None
    duration: str | None = None

    @model_validator(mode="after")
    def _end_or_duration(self) -> LogPastArgs:
        if (self.end is None) == (self.duration is None):
            raise ValueError("exactly one of 'end' or 'duration' is required")
        return self


class WeeklySummaryArgs(AtArgs):
    week_start: AwareDatetime | None = None
