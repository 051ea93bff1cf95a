# src/tasklist/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.errors import TaskListError, ValidationError

EMPTY_TEXT_MESSAGE = "Task cannot be empty."


class InitState(StrEnum):
    """
    Startup state of the task list.

    LOADING until initialize() finishes; afterwards exactly one of:
    - READY: handle open and schema ensured
    - UNAVAILABLE: the host has no durable storage (capability gap)
    - ERROR: opening the store or creating the schema failed
    """

    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "task": self.text, "completed": self.completed}


@dataclass(frozen=True, slots=True)
class OpResult:
    """Outcome of a service call. A failed result means nothing was applied."""

    ok: bool
    error: TaskListError | None = None

    @classmethod
    def success(cls) -> OpResult:
        return cls(ok=True)

    @classmethod
    def failure(cls, error: TaskListError) -> OpResult:
        return cls(ok=False, error=error)


# ---- storage mapping (the only place that knows about the 0/1 encoding) ----


def completed_to_db(completed: bool) -> int:
    return 1 if completed else 0


def completed_from_db(raw: Any) -> bool:
    if raw is None:
        return False
    try:
        return int(raw) != 0
    except (TypeError, ValueError):
        return False


def task_from_row(row: Mapping[str, Any]) -> Task:
    return Task(
        id=int(row["id"]),
        text=str(row["task"] or ""),
        completed=completed_from_db(row["completed"]),
    )


def normalize_text(text: str | None) -> str:
    """Return the trimmed task text, or raise ValidationError when nothing is left."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError(EMPTY_TEXT_MESSAGE)
    return cleaned
