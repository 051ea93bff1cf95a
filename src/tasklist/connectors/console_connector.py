# src/tasklist/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_tasks
from ..core.state import AppState
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Notifier that prints alerts as timestamped console lines."""

    def notify(self, title: str, message: str) -> None:
        try:
            _print_ts(f"[{title}] {message}")
        except Exception:
            logger.debug("Console notify failed.", exc_info=True)


async def run_console_loop(state: AppState) -> None:
    app_name = str(getattr(state.settings, "app_name", "tasklist"))
    logger.info("Console connector started.")
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def on_changed(tasks: tuple[Task, ...]) -> None:
        print(render_tasks(state, tasks), flush=True)

    unsubscribe = state.tasks.subscribe(on_changed)
    print(render_tasks(state), flush=True)

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, "> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                if user_input.startswith("/"):
                    reply = await command_registry.handle(state, user_input)
                else:
                    # Plain text is a new task, like the submit action of the input box.
                    await state.tasks.add_task(user_input)
                    reply = None
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                print(reply, flush=True)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
