# src/tasklist/tasks/projection.py

from __future__ import annotations

"""
In-memory projection of the todos table and the refresh that rebuilds it.

The projection is never patched: every refresh reads the whole table and
replaces the snapshot. Refreshes may overlap (rapid taps each trigger one), so
each refresh takes a generation token when issued and its result is published
only if no newer refresh has been published already.
"""

import itertools
import logging
from collections.abc import Callable, Iterable

from ..core.errors import OperationFailure
from ..core.ports import Notifier, ProjectionListener, TaskRepo
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskProjection:
    """Read-only snapshot consumed by presentation."""

    def __init__(self) -> None:
        self._tasks: tuple[Task, ...] = ()
        self._generation = 0
        self._listeners: list[ProjectionListener] = []

    @property
    def generation(self) -> int:
        """Token of the last published refresh (0 = never refreshed)."""
        return self._generation

    def snapshot(self) -> tuple[Task, ...]:
        return self._tasks

    def publish(self, generation: int, tasks: Iterable[Task]) -> bool:
        """
        Replace the snapshot if `generation` is newer than the published one.
        Returns False (and changes nothing) for a stale result.
        """
        if generation <= self._generation:
            logger.debug(
                "Dropping stale refresh generation=%s (published=%s)",
                generation,
                self._generation,
            )
            return False

        self._tasks = tuple(tasks)
        self._generation = generation
        self._emit()
        return True

    def subscribe(self, listener: ProjectionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _emit(self) -> None:
        snapshot = self._tasks
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Projection listener failed.")


class ViewSynchronizer:
    def __init__(self, repo: TaskRepo, projection: TaskProjection, notifier: Notifier) -> None:
        self._repo = repo
        self._projection = projection
        self._notifier = notifier
        self._tokens = itertools.count(1)

    async def refresh(self) -> bool:
        """
        Re-read all tasks and publish them.

        A failed read publishes an empty snapshot: callers treat a fetch error
        like "no tasks", never like "keep the old list".
        Returns True if the read succeeded.
        """
        token = next(self._tokens)
        try:
            tasks = list(await self._repo.list_tasks())
        except OperationFailure:
            logger.exception("Failed to fetch todos (refresh #%s).", token)
            self._notifier.notify("Fetch Error", "Could not retrieve tasks from the database.")
            self._projection.publish(token, ())
            return False

        if self._projection.publish(token, tasks):
            logger.debug("Todos fetched: %d (refresh #%s)", len(tasks), token)
        return True
