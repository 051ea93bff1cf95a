# src/tasklist/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.state import AppState
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], Awaitable[str | None]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command (or nothing to say).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id:>4}  {task.text}"


def empty_list_text(state: AppState) -> str:
    svc = state.tasks
    if svc.capability_gap:
        return "Local database not available on this host."
    if not svc.initialized:
        return "Initializing database..."
    if svc.has_database:
        return "No tasks yet. Add some!"
    return "Failed to initialize database. Tasks cannot be loaded."


def render_tasks(state: AppState, tasks: tuple[Task, ...] | None = None) -> str:
    if tasks is None:
        tasks = state.tasks.get_projection()
    if not tasks:
        return empty_list_text(state)
    return "\n".join(format_task(t) for t in tasks)


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str]) -> str:
    return render_tasks(state)


async def cmd_status(state: AppState, args: list[str]) -> str:
    svc = state.tasks
    db_path = getattr(state.settings, "todos_db_path", "?")
    return (
        "Status:\n"
        f"  Storage: {svc.state.value}\n"
        f"  Database: {db_path}\n"
        f"  Tasks: {len(svc.get_projection())}"
    )


async def cmd_add(state: AppState, args: list[str]) -> str | None:
    # Failures are reported through the notifier; the list is printed by the listener.
    await state.tasks.add_task(" ".join(args))
    return None


async def _with_id(state: AppState, args: list[str], usage: str, action) -> str | None:
    task_id = _parse_id(args)
    if task_id is None:
        return usage
    await action(task_id)
    return None


async def cmd_done(state: AppState, args: list[str]) -> str | None:
    return await _with_id(
        state, args, "Usage: /done <id>", lambda i: state.tasks.set_completed(i, True)
    )


async def cmd_undo(state: AppState, args: list[str]) -> str | None:
    return await _with_id(
        state, args, "Usage: /undo <id>", lambda i: state.tasks.set_completed(i, False)
    )


async def cmd_toggle(state: AppState, args: list[str]) -> str | None:
    return await _with_id(state, args, "Usage: /toggle <id>", state.tasks.toggle_completed)


async def cmd_rm(state: AppState, args: list[str]) -> str | None:
    return await _with_id(state, args, "Usage: /rm <id>", state.tasks.remove_task)


async def cmd_edit(state: AppState, args: list[str]) -> str | None:
    """
    /edit <id> <new text>
    """
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /edit <id> <new text>"
    await state.tasks.rename_task(task_id, " ".join(args[1:]))
    return None


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show all tasks, newest first.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text> (plain text works too).")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.")
registry.register("undo", cmd_undo, help_text="Mark a task not completed: /undo <id>.")
registry.register("toggle", cmd_toggle, help_text="Flip completion: /toggle <id>.", aliases=["t"])
registry.register("edit", cmd_edit, help_text="Change task text: /edit <id> <text>.")
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["del"])
registry.register("status", cmd_status, help_text="Show storage state and database path.")
