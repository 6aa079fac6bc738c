# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from pocket_todo.config import Settings
from pocket_todo.core.state import AppState
from pocket_todo.tasks.task_models import StoreMode
from pocket_todo.tasks.task_store import TaskStore

from .fakes import RecordingStorage, ScriptedConfirmer


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a per-test tmp dir.

    Built directly rather than from the environment to keep tests deterministic.
    """
    return Settings(
        app_name="pocket-todo-test",
        log_level="DEBUG",
        store_mode=StoreMode.SPLIT,
        confirm_delete=True,
        data_dir=tmp_path,
        storage_backend="memory",
        storage_path=tmp_path / "tasks.sqlite3",
    )


@pytest.fixture()
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture()
def confirmer() -> ScriptedConfirmer:
    return ScriptedConfirmer(answer=True)


@pytest.fixture()
def split_store(storage: RecordingStorage, confirmer: ScriptedConfirmer) -> TaskStore:
    return TaskStore(storage, mode=StoreMode.SPLIT, confirmer=confirmer)


@pytest.fixture()
def flag_store(storage: RecordingStorage, confirmer: ScriptedConfirmer) -> TaskStore:
    return TaskStore(storage, mode=StoreMode.FLAG, confirmer=confirmer)


@pytest.fixture()
def state(settings: Settings, storage: RecordingStorage, split_store: TaskStore) -> AppState:
    return AppState(settings=settings, storage=storage, store=split_store)
