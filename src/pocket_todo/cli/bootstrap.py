# src/pocket_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the storage backend, confirmer and TaskStore into AppState.
"""

from __future__ import annotations

import asyncio
import logging

from ..config import Settings, get_settings
from ..core.ports import AlwaysConfirm, Confirmer, KeyValueStorage
from ..core.state import AppState
from ..storage import InMemoryKeyValueStore, JsonFileKeyValueStore, SqliteKeyValueStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


class ConsoleConfirmer:
    """Asks on stdin; anything but y/yes counts as cancel."""

    async def confirm(self, title: str, message: str) -> bool:
        try:
            answer = await asyncio.to_thread(input, f"{title}: {message} [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def build_storage(settings: Settings) -> KeyValueStorage:
    backend = settings.storage_backend
    if backend == "memory":
        logger.warning("Using in-memory storage; tasks will not survive a restart.")
        return InMemoryKeyValueStore()
    if backend == "json":
        return JsonFileKeyValueStore(settings.storage_path)
    return SqliteKeyValueStore(settings.storage_path)


def create_initial_state(*, settings: Settings | None = None, confirmer: Confirmer | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if confirmer is None:
        confirmer = ConsoleConfirmer() if settings.confirm_delete else AlwaysConfirm()

    storage = build_storage(settings)
    store = TaskStore(storage, mode=settings.store_mode, confirmer=confirmer)
    logger.info(
        "State ready mode=%s backend=%s path=%s",
        settings.store_mode.value,
        settings.storage_backend,
        settings.storage_path,
    )
    return AppState(settings=settings, storage=storage, store=store)
