# src/tasklist/tasks/task_api.py

"""
Task list service: the API presentation talks to.

- initialize(): open the store, ensure the schema, first refresh
- add_task / set_completed / toggle_completed / rename_task / remove_task
- get_projection() / subscribe(): read the current snapshot / get told about new ones

Every call is fail-safe: errors are logged, reported through the Notifier and
returned as a failed OpResult. A successful mutation is always followed by a
full refresh before the call returns; there is no optimistic local update.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from ..core.errors import (
    CapabilityUnavailable,
    InitializationFailure,
    OperationFailure,
    RecordNotFound,
    TaskListError,
    ValidationError,
)
from ..core.ports import Notifier, ProjectionListener, TaskRepo
from .projection import TaskProjection, ViewSynchronizer
from .storage import StorageLifecycle, ensure_schema
from .task_models import InitState, OpResult, Task, normalize_text
from .task_store import TaskStore

logger = logging.getLogger(__name__)

RepoFactory = Callable[[Any], TaskRepo]


@dataclass(frozen=True, slots=True)
class _OpText:
    action: str  # "Database is not available to {action} tasks."
    title: str
    message: str


_ADD = _OpText("add", "Add Error", "Could not add the task to the database.")
_UPDATE = _OpText("update", "Update Error", "Could not update task status.")
_SAVE = _OpText("edit", "Save Error", "Could not save the updated task.")
_DELETE = _OpText("delete", "Delete Error", "Could not delete the task.")


class TaskListService:
    def __init__(
        self,
        storage: StorageLifecycle,
        notifier: Notifier,
        *,
        repo_factory: RepoFactory = TaskStore,
    ) -> None:
        self._storage = storage
        self._notifier = notifier
        self._repo_factory = repo_factory

        self._repo: TaskRepo | None = None
        self._sync: ViewSynchronizer | None = None
        self._init_lock = asyncio.Lock()
        self._initialized = False

        self.projection = TaskProjection()
        self.state = InitState.LOADING

    # ---- lifecycle ----

    @property
    def initialized(self) -> bool:
        """True once initialize() has finished, whatever the outcome."""
        return self._initialized

    @property
    def has_database(self) -> bool:
        return self._repo is not None

    @property
    def capability_gap(self) -> bool:
        return self._storage.capability_gap

    async def initialize(self) -> InitState:
        async with self._init_lock:
            if self._initialized:
                return self.state

            try:
                self.state = await self._setup()
            except Exception:
                logger.exception("Initialization error.")
                self._notifier.notify("Initialization Error", "Could not initialize the application.")
                self.state = InitState.ERROR
            self._initialized = True

            # Still under the lock: a concurrent caller returns only after the first refresh.
            if self._repo is not None:
                await self.refresh()
            elif self.state is InitState.ERROR:
                self._notifier.notify(
                    "Database Not Ready",
                    "The database could not be initialized. Tasks cannot be loaded or saved.",
                )
            else:
                logger.info("Database is not available. Setup operations were skipped.")

            logger.info("Task list initialized state=%s", self.state.value)
            return self.state

    async def _setup(self) -> InitState:
        conn = await self._storage.open()
        if conn is None:
            return InitState.UNAVAILABLE if self._storage.capability_gap else InitState.ERROR

        # The handle stays set even if the schema step fails; CRUD calls then fail one by one.
        self._repo = self._repo_factory(conn)
        self._sync = ViewSynchronizer(self._repo, self.projection, self._notifier)

        if not await ensure_schema(conn, self._notifier):
            return InitState.ERROR

        try:
            total = await self._repo.count_tasks()
        except OperationFailure:
            total = -1
        logger.info("Task store ready db=%s total=%s", self._storage.db_path, total)
        return InitState.READY

    async def close(self) -> None:
        await self._storage.close()

    # ---- projection ----

    def get_projection(self) -> tuple[Task, ...]:
        return self.projection.snapshot()

    def subscribe(self, listener: ProjectionListener) -> Callable[[], None]:
        return self.projection.subscribe(listener)

    async def refresh(self) -> bool:
        if self._sync is None:
            logger.debug("DB not available for fetching todos.")
            return False
        return await self._sync.refresh()

    # ---- mutations ----

    async def add_task(self, text: str) -> OpResult:
        return await self._mutate(_ADD, lambda repo: repo.insert(normalize_text(text)))

    async def set_completed(self, task_id: int, completed: bool) -> OpResult:
        return await self._mutate(_UPDATE, lambda repo: repo.set_completed(task_id, completed))

    async def toggle_completed(self, task_id: int) -> OpResult:
        return await self._mutate(_UPDATE, lambda repo: repo.toggle_completed(task_id))

    async def rename_task(self, task_id: int, text: str) -> OpResult:
        return await self._mutate(_SAVE, lambda repo: repo.update_text(task_id, normalize_text(text)))

    async def remove_task(self, task_id: int) -> OpResult:
        return await self._mutate(_DELETE, lambda repo: repo.delete(task_id))

    async def _mutate(
        self,
        op: _OpText,
        call: Callable[[TaskRepo], Awaitable[object]],
    ) -> OpResult:
        repo = self._repo
        if repo is None:
            return self._fail(self._no_database(op))

        try:
            await call(repo)
        except ValidationError as e:
            logger.info("Rejected %s: %s", op.action, e.message)
            return self._fail(e)
        except RecordNotFound as e:
            logger.warning("%s: %s", op.title, e.message)
            self._notifier.notify(op.title, e.message)
            return OpResult.failure(e)
        except OperationFailure as e:
            logger.exception("Failed to %s task.", op.action)
            self._notifier.notify(op.title, op.message)
            return OpResult.failure(e)

        logger.info("Task %s succeeded.", op.action)
        await self.refresh()
        return OpResult.success()

    def _no_database(self, op: _OpText) -> TaskListError:
        message = f"Database is not available to {op.action} tasks."
        if self._storage.capability_gap:
            return CapabilityUnavailable(message)
        return InitializationFailure(message)

    def _fail(self, error: TaskListError) -> OpResult:
        self._notifier.notify(error.title, error.message)
        return OpResult.failure(error)
