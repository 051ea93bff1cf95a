# src/tasklist/tasks/storage.py

"""
Storage handle lifecycle and schema initialization.

StorageLifecycle owns the single aiosqlite connection of the app. It is created
once by the composition root (cli/bootstrap.py) and handed to the service; there
is no module-level handle.

Neither open() nor ensure_schema() raises: failures are logged, reported through
the Notifier and turned into a None handle / False result.
"""

from __future__ import annotations

import contextlib
import importlib.util
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..core.ports import Notifier

if TYPE_CHECKING:
    import aiosqlite

logger = logging.getLogger(__name__)

TODOS_SCHEMA = """
CREATE TABLE IF NOT EXISTS todos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    task TEXT NOT NULL,
    completed INTEGER DEFAULT 0
)
"""


def storage_supported(settings: Any) -> bool:
    """
    Whether this host can keep a durable local store.

    Disabled explicitly via settings, or implicitly when the interpreter was
    built without the sqlite3 extension module.
    """
    if not bool(getattr(settings, "storage_enabled", True)):
        return False
    return importlib.util.find_spec("_sqlite3") is not None


class StorageLifecycle:
    def __init__(self, settings: Any, notifier: Notifier) -> None:
        self._settings = settings
        self._notifier = notifier
        self._handle: aiosqlite.Connection | None = None
        self._opened = False
        self.capability_gap = False

    @property
    def handle(self) -> aiosqlite.Connection | None:
        return self._handle

    @property
    def db_path(self) -> Path:
        return Path(self._settings.todos_db_path)

    async def open(self) -> aiosqlite.Connection | None:
        """
        Open (or create) the store. Runs at most once; later calls return the
        same handle or None.
        """
        if self._opened:
            return self._handle
        self._opened = True

        if not storage_supported(self._settings):
            self.capability_gap = True
            logger.warning("Durable local storage is not available on this host; running without a database.")
            return None

        # Imported here so a host without sqlite3 still reaches the capability check.
        import aiosqlite

        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = await aiosqlite.connect(
                str(self.db_path),
                timeout=float(getattr(self._settings, "db_timeout", 30.0)),
            )
            conn.row_factory = aiosqlite.Row
            await self._configure_conn(conn)
        except Exception:
            logger.exception("Failed to open database at %s", self.db_path)
            self._notifier.notify("Database Error", "Failed to open the local database.")
            return None

        self._handle = conn
        logger.info("Database opened db=%s", self.db_path)
        return conn

    @staticmethod
    async def _configure_conn(conn: aiosqlite.Connection) -> None:
        with contextlib.suppress(Exception):
            await conn.execute("PRAGMA journal_mode=WAL")

    async def close(self) -> None:
        """Shutdown hook; normal operation keeps the handle until process exit."""
        conn = self._handle
        if conn is None:
            return
        self._handle = None
        try:
            await conn.close()
        except Exception:
            logger.debug("Database close failed.", exc_info=True)


async def ensure_schema(conn: aiosqlite.Connection, notifier: Notifier) -> bool:
    """Create the todos table if missing. Idempotent; returns False on failure."""
    try:
        await conn.execute(TODOS_SCHEMA)
        await conn.commit()
    except Exception:
        logger.exception("Failed to set up database tables.")
        notifier.notify("Database Setup Error", "Failed to create necessary tables.")
        return False

    logger.info("Database 'todos' table setup complete.")
    return True
