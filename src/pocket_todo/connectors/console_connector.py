# src/pocket_todo/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_tasks
from ..core.state import AppState
from ..tasks.task_models import TaskValidationError

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _prompt(state: AppState) -> str:
    store = state.store
    if store.is_editing:
        return f"Update task (was: {store.draft}) > "
    return "New task > "


async def run_console_loop(state: AppState) -> None:
    """
    Interactive front-end over the TaskStore.

    Plain lines are submitted (add, or update while editing); /commands map
    to the per-task controls. Input is read in a worker thread so pending
    snapshot writes keep running on the loop.
    """
    logger.info("Console connector started (mode=%s).", state.store.mode.value)
    app_name = str(getattr(state.settings, "app_name", "pocket-todo"))
    _print_ts(f"[{app_name}] Type a task to add it. Use /help for commands, /exit to quit.\n")
    print(render_tasks(state))

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            raw = await asyncio.to_thread(input, _prompt(state))
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        # Stripped only to classify the line; task text is kept as typed.
        stripped = raw.strip()
        if stripped.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            if stripped.startswith("/"):
                reply = await command_registry.handle(state, raw.lstrip(), emit=emit)
            else:
                task = state.store.submit(raw)
                reply = "Nothing to update." if task is None else render_tasks(state)
        except TaskValidationError as e:
            reply = f"Validation: {e}"
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        print(reply)

    logger.info("Console connector finished.")
