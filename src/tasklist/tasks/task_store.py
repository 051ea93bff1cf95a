# src/tasklist/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3
from typing import TYPE_CHECKING

from ..core.errors import OperationFailure, RecordNotFound
from .task_models import Task, completed_to_db, normalize_text, task_from_row

if TYPE_CHECKING:
    import aiosqlite

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; larger ids cannot be bound or stored.
_SQLITE_INT_MIN = -(2**63)
_SQLITE_INT_MAX = 2**63 - 1
_BACKEND_ERRORS = (sqlite3.Error, ValueError, OverflowError)


def _storable_id(task_id: int) -> bool:
    return _SQLITE_INT_MIN <= int(task_id) <= _SQLITE_INT_MAX


class TaskStore:
    """
    Async CRUD over the `todos` table.

    Works on an already opened handle (see storage.StorageLifecycle) and expects
    the schema to exist. Backend errors are raised as OperationFailure; missing
    rows on update as RecordNotFound. Nothing here notifies the user.

    Ordering:
    - all calls share one aiosqlite connection, which executes requests on its
      worker thread in the order they were issued
    """

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def _execute_write(self, sql: str, params: tuple, *, what: str) -> int:
        """Run one statement + commit. Returns the affected row count."""
        try:
            cur = await self._conn.execute(sql, params)
            rowcount = cur.rowcount
            await cur.close()
            await self._conn.commit()
        except _BACKEND_ERRORS as e:
            # ValueError: aiosqlite refuses calls on a closed connection.
            raise OperationFailure(f"{what} failed: {e}") from e
        return rowcount

    # ---- public API ----

    async def count_tasks(self) -> int:
        try:
            rows = await self._conn.execute_fetchall("SELECT COUNT(*) FROM todos")
        except _BACKEND_ERRORS as e:
            raise OperationFailure(f"count failed: {e}") from e
        for (n,) in rows:
            return int(n)
        return 0

    async def insert(self, text: str) -> int:
        task_text = normalize_text(text)
        try:
            cur = await self._conn.execute(
                "INSERT INTO todos (task, completed) VALUES (?, ?)",
                (task_text, completed_to_db(False)),
            )
            rowid = cur.lastrowid
            await cur.close()
            await self._conn.commit()
        except _BACKEND_ERRORS as e:
            raise OperationFailure(f"insert failed: {e}") from e

        if rowid is None:
            raise OperationFailure("SQLite did not return lastrowid for todos insert")
        task_id = int(rowid)
        logger.debug("Task added id=%s", task_id)
        return task_id

    async def list_tasks(self) -> list[Task]:
        """Full table, most recently created first. Empty table -> []."""
        try:
            rows = await self._conn.execute_fetchall(
                "SELECT id, task, completed FROM todos ORDER BY id DESC"
            )
        except _BACKEND_ERRORS as e:
            raise OperationFailure(f"list failed: {e}") from e
        return [task_from_row(r) for r in rows]

    async def set_completed(self, task_id: int, completed: bool) -> None:
        if not _storable_id(task_id):
            raise RecordNotFound(task_id)
        n = await self._execute_write(
            "UPDATE todos SET completed = ? WHERE id = ?",
            (completed_to_db(completed), int(task_id)),
            what="update completed",
        )
        if n == 0:
            raise RecordNotFound(task_id)
        logger.debug("Task %s completed=%s", task_id, completed)

    async def toggle_completed(self, task_id: int) -> None:
        if not _storable_id(task_id):
            raise RecordNotFound(task_id)
        # Flipped in SQL: no read-modify-write round trip.
        n = await self._execute_write(
            "UPDATE todos SET completed = CASE WHEN completed THEN 0 ELSE 1 END WHERE id = ?",
            (int(task_id),),
            what="toggle completed",
        )
        if n == 0:
            raise RecordNotFound(task_id)
        logger.debug("Task %s completion toggled", task_id)

    async def update_text(self, task_id: int, text: str) -> None:
        task_text = normalize_text(text)
        if not _storable_id(task_id):
            raise RecordNotFound(task_id)
        n = await self._execute_write(
            "UPDATE todos SET task = ? WHERE id = ?",
            (task_text, int(task_id)),
            what="update text",
        )
        if n == 0:
            raise RecordNotFound(task_id)
        logger.debug("Task %s text updated", task_id)

    async def delete(self, task_id: int) -> bool:
        """Remove a task. Returns False if it was already absent (not an error)."""
        if not _storable_id(task_id):
            return False
        n = await self._execute_write(
            "DELETE FROM todos WHERE id = ?",
            (int(task_id),),
            what="delete",
        )
        logger.debug("Task %s delete rowcount=%s", task_id, n)
        return n > 0
