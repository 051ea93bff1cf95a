# src/tasklist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, initializes the task store and runs the
console REPL on the asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(state: AppState) -> None:
    try:
        await state.tasks.initialize()
        await run_console_loop(state)
    finally:
        await state.tasks.close()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/tasklist")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "tasklist"))

    state = create_initial_state(settings=settings, notifier=ConsoleNotifier())

    try:
        asyncio.run(_run(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
