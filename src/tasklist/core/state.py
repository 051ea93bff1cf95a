# src/tasklist/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_api import TaskListService
from .ports import Notifier


@dataclass
class AppState:
    # Settings object (config.Settings, or a SimpleNamespace in tests).
    settings: Any

    notifier: Notifier
    tasks: TaskListService
