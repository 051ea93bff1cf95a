# src/tasklist/core/notifier.py

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Default Notifier when no front end is attached: notifications go to the log."""

    def notify(self, title: str, message: str) -> None:
        logger.warning("[%s] %s", title, message)
