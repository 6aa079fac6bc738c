# src/pocket_todo/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import StoreMode, Task

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Handlers that declare a keyword-only `raw` parameter also get the
        text after the command name as typed (one separator removed).
        """
        if not line.startswith("/"):
            return None

        body = line[1:]
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        raw = body.lstrip()[len(parts[0]) :]
        if raw[:1].isspace():
            raw = raw[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            params = inspect.signature(handler).parameters
            nparams = sum(
                1 for p in params.values() if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
            )
            extra = {"raw": raw} if "raw" in params else {}
        except (TypeError, ValueError):
            nparams, extra = 3, {}

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit, **extra)
        else:
            result = cast(CommandHandler2, handler)(state, args, **extra)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  <n> is the position shown by /list; use #<id> to pick a task by id.")
        lines.append("  Anything else is added as a task (or replaces the text being edited).")
        return "\n".join(lines)


registry = CommandRegistry()


def resolve_task(tasks: tuple[Task, ...], ref: str) -> Task | None:
    """
    `#<id>` selects by id only. A bare number is the 1-based position in
    `tasks` when in range; otherwise it is tried as an id.
    """
    if ref.startswith("#"):
        tid = ref[1:]
        return next((t for t in tasks if t.id == tid), None)
    if ref.isascii() and ref.isdigit():
        idx = int(ref) - 1
        if 0 <= idx < len(tasks):
            return tasks[idx]
    return next((t for t in tasks if t.id == ref), None)


def render_tasks(state: AppState) -> str:
    snap = state.store.snapshot()
    if snap.is_empty:
        return "No tasks available"

    lines: list[str] = []
    if snap.active:
        lines.append("Active Tasks")
        for i, task in enumerate(snap.active, start=1):
            marker = " (editing)" if task.id == snap.editing_id else ""
            lines.append(f"  {i}. [ ] {task.text}{marker}  #{task.id}")
    else:
        lines.append("No tasks available")

    if snap.completed:
        lines.append("Done Tasks")
        for i, task in enumerate(snap.completed, start=1):
            lines.append(f"  {i}. [x] {task.text}  #{task.id}")
    return "\n".join(lines)


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return render_tasks(state)


def cmd_status(state: AppState, args: list[str]) -> str:
    store = state.store
    settings = state.settings
    editing = store.editing_id or "-"
    return (
        "Status:\n"
        f"  Mode: {store.mode.value}\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} ({getattr(settings, 'storage_path', '?')})\n"
        f"  Active: {len(store.active)}  Done: {len(store.completed)}\n"
        f"  Editing: {editing}\n"
        f"  Snapshots written: {store.writer.writes}  failed: {store.writer.failures}"
    )


def cmd_add(state: AppState, args: list[str], *, raw: str = "") -> str:
    # TaskValidationError propagates to the connector, which reports it.
    task = state.store.add(raw)
    return f"Added #{task.id}: {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /edit <n|#id>"
    task = resolve_task(state.store.active, args[0])
    if task is None:
        return f"No active task {args[0]}."
    state.store.edit(task)
    return f"Editing #{task.id}. Current text: {task.text}\nType the new text and press Enter."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <n|#id>"
    task = resolve_task(state.store.active, args[0])
    if task is None:
        return f"No active task {args[0]}."
    state.store.toggle_or_complete(task.id)
    return f"Done: {task.text}"


def cmd_undo(state: AppState, args: list[str]) -> str:
    store = state.store
    if store.mode is StoreMode.SPLIT:
        return "Done tasks cannot be reopened."
    if not args:
        return "Usage: /undo <n|#id>"
    task = resolve_task(store.completed, args[0])
    if task is None:
        return f"No done task {args[0]}."
    store.toggle_or_complete(task.id)
    return f"Reopened: {task.text}"


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if not args:
        return "Usage: /del <n|#id>"
    task = resolve_task(state.store.active, args[0])
    if task is None:
        return f"No active task {args[0]}."
    if await state.store.delete(task.id):
        return f"Deleted: {task.text}"
    return "Delete cancelled."


def cmd_delete_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /deldone <n|#id>"
    task = resolve_task(state.store.completed, args[0])
    if task is None or not state.store.delete_completed(task.id):
        return f"No done task {args[0]}."
    return f"Deleted: {task.text}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show active and done tasks.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add buy milk.")
registry.register("edit", cmd_edit, help_text="Edit an active task: /edit <n|#id>.")
registry.register("done", cmd_done, help_text="Complete an active task: /done <n|#id>.")
registry.register("undo", cmd_undo, help_text="Reopen a done task (flag mode only): /undo <n|#id>.")
registry.register("del", cmd_delete, help_text="Delete an active task (asks first): /del <n|#id>.", aliases=["rm"])
registry.register("deldone", cmd_delete_done, help_text="Delete a done task: /deldone <n|#id>.")
registry.register("status", cmd_status, help_text="Show store mode, storage and counters.")
