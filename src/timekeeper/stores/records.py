"""Persisted record schemas.

These Pydantic models define what a store holds for each record kind and
convert between the frozen model dataclasses and JSON-ready dicts.
Instants are stored as ISO 8601 strings and durations as ISO 8601
durations.
"""

from __future__ import annotations

from dataclasses import asdict
from datetime import timedelta
from typing import Any

from pydantic import AwareDatetime, BaseModel, Field

from timekeeper.models import Category, Project, WorkSession

CATEGORIES = "categories"
PROJECTS = "projects"
SESSIONS = "sessions"


class CategoryRecord(BaseModel):
    id: str
    name: str
    color_hex: str = ""

    @classmethod
    def from_model(cls, category: Category) -> CategoryRecord:
        return cls(**asdict(category))

    def to_model(self) -> Category:
        return Category(id=self.id, name=self.name, color_hex=self.color_hex)


class ProjectRecord(BaseModel):
    id: str
    name: str
    category_id: str | None = None

    @classmethod
    def from_model(cls, project: Project) -> ProjectRecord:
        return cls(**asdict(project))

    def to_model(self) -> Project:
        return Project(id=self.id, name=self.name, category_id=self.category_id)


class SessionRecord(BaseModel):
    """Stored form of a :class:`WorkSession`.

    Attributes:
        id:                   Session id.
        project_id:           Owning project.
        start:                Session start.
        end:                  Stop instant, when stopped.
        last_resume:          Start of the active segment, when running.
        elapsed_before_pause: Accrued time of completed segments.
    """

    id: str
    project_id: str | None = None
    start: AwareDatetime
    end: AwareDatetime | None = None
    last_resume: AwareDatetime | None = None
    elapsed_before_pause: timedelta = Field(default=timedelta(0), ge=timedelta(0))

    @classmethod
    def from_model(cls, session: WorkSession) -> SessionRecord:
        return cls(**asdict(session))

    def to_model(self) -> WorkSession:
        return WorkSession(
            id=self.id,
            project_id=self.project_id,
            start=self.start,
            end=self.end,
            last_resume=self.last_resume,
            elapsed_before_pause=self.elapsed_before_pause,
        )


def dump(record: BaseModel) -> dict[str, Any]:
    return record.model_dump(mode="json")
