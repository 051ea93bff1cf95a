# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- creates the one StorageLifecycle of the process and wires it into the service.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.notifier import LoggingNotifier
from ..core.ports import Notifier
from ..core.state import AppState
from ..tasks.storage import StorageLifecycle
from ..tasks.task_api import TaskListService

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, notifier: Notifier | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Nothing is opened here; call `await state.tasks.initialize()` from inside
    the event loop. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if notifier is None:
        notifier = LoggingNotifier()

    try:
        _ensure_local_dirs(settings)
    except OSError:
        # Storage lifecycle reports the real failure when it tries to open the file.
        logger.warning("Could not create data dir %s", getattr(settings, "data_dir", None))

    storage = StorageLifecycle(settings, notifier)
    return AppState(
        settings=settings,
        notifier=notifier,
        tasks=TaskListService(storage, notifier),
    )
