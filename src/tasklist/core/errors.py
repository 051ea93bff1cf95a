# src/tasklist/core/errors.py

"""
Error taxonomy.

Repository code raises these; the service boundary (tasks/task_api.py) catches
them, logs, notifies the user and returns a failed OpResult. Nothing here is
meant to escape to the event loop.
"""

from __future__ import annotations


class TaskListError(Exception):
    """Base class. `title` is the heading shown in the user notification."""

    title = "Error"

    def __init__(self, message: str, *, title: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title


class CapabilityUnavailable(TaskListError):
    """The host has no durable local storage. Expected, not a failure."""

    title = "No Database"


class InitializationFailure(TaskListError):
    """The handle or the schema could not be created."""

    title = "No Database"


class ValidationError(TaskListError):
    """Rejected before reaching the backend (e.g. empty task text)."""

    title = "Invalid Input"


class OperationFailure(TaskListError):
    """A backend call failed; the operation was not applied."""


class RecordNotFound(OperationFailure):
    def __init__(self, task_id: int, *, title: str | None = None) -> None:
        super().__init__(f"Task {task_id} does not exist.", title=title)
        self.task_id = task_id
