# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The service depends on Protocols instead of concrete implementations.
This keeps the notification channel and the repository swappable and makes
testing easier (see tests/fakes.py).
"""

from collections.abc import Callable, Sequence
from typing import Protocol

from ..tasks.task_models import Task

ProjectionListener = Callable[[tuple[Task, ...]], None]


class Notifier(Protocol):
    """
    User-visible notification channel (alert dialog, console line, ...).

    Must not raise; the caller treats notify() as fire-and-forget.
    """

    def notify(self, title: str, message: str) -> None: ...


class TaskRepo(Protocol):
    async def insert(self, text: str) -> int: ...
    async def list_tasks(self) -> Sequence[Task]: ...
    async def set_completed(self, task_id: int, completed: bool) -> None: ...
    async def toggle_completed(self, task_id: int) -> None: ...
    async def update_text(self, task_id: int, text: str) -> None: ...
    async def delete(self, task_id: int) -> bool: ...
    async def count_tasks(self) -> int: ...
