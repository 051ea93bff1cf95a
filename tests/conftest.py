# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from tasklist.cli.bootstrap import create_initial_state
from tasklist.core.state import AppState

from .fakes import RecordingNotifier


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the storage layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tasklist-test",
        log_level="DEBUG",
        storage_enabled=True,
        data_dir=tmp_path,
        todos_db_path=tmp_path / "todos.sqlite3",
        db_timeout=5.0,
    )


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest_asyncio.fixture()
async def state(settings: SimpleNamespace, notifier: RecordingNotifier) -> AppState:
    """
    AppState with a real SQLite file under tmp_path, already initialized.

    NOTE: the store is real because its behaviour (ids, ordering, rowcounts)
    is part of what we want to test.
    """
    app_state = create_initial_state(settings=settings, notifier=notifier)
    await app_state.tasks.initialize()
    try:
        yield app_state
    finally:
        await app_state.tasks.close()
