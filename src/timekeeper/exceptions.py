"""Custom exceptions for the timekeeper package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from timekeeper.models import SessionState


class TimekeeperError(Exception):
    """Base exception for all timekeeper errors."""


class PreconditionViolation(TimekeeperError):
    """Raised when a command is rejected before any state is touched."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation}: {message}")


class InvalidTransitionError(PreconditionViolation):
    """Raised when a session is not in a state that permits the transition."""

    def __init__(self, operation: str, state: SessionState) -> None:
        self.state = state
        super().__init__(operation, f"session is {state.value}")


class OpenSessionError(PreconditionViolation):
    """Raised when a project already has a running or paused session."""

    def __init__(self, operation: str, project_id: str, session_id: str) -> None:
        self.project_id = project_id
        self.session_id = session_id
        super().__init__(
            operation, f"project '{project_id}' already has open session '{session_id}'"
        )


class InvalidIntervalError(PreconditionViolation):
    """Raised when a start/end pair does not describe a forward interval."""


class CategoryInUseError(PreconditionViolation):
    """Raised when deleting a category that still owns projects."""

    def __init__(self, category_name: str, project_count: int) -> None:
        self.category_name = category_name
        self.project_count = project_count
        super().__init__(
            "delete category",
            f"'{category_name}' still owns {project_count} project(s)",
        )


class DuplicateNameError(PreconditionViolation):
    """Raised when a category name is already taken."""


class RecordNotFoundError(TimekeeperError):
    """Raised when a record id does not resolve in the store."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")


class InvalidInputError(TimekeeperError, ValueError):
    """Raised when user-entered values fail validation."""


class DurationFormatError(InvalidInputError):
    """Raised when an ``hours:minutes`` string cannot be parsed."""

    def __init__(self, text: str, detail: str) -> None:
        self.text = text
        super().__init__(f"Invalid duration '{text}': {detail}")


class StoreError(TimekeeperError):
    """Raised when a store operation fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store error during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class NotificationError(TimekeeperError):
    """Raised by a notification scheduler that could not (un)schedule reminders."""


class ProjectorError(TimekeeperError):
    """Raised by a live status projector that could not reach its display."""
