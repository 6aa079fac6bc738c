# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from pocket_todo.config import Settings
from pocket_todo.tasks.task_models import StoreMode

_VARS = (
    "TODO_APP_NAME",
    "TODO_LOG_LEVEL",
    "TODO_DATA_DIR",
    "TODO_STORE_MODE",
    "TODO_STORAGE_BACKEND",
    "TODO_STORAGE_PATH",
    "TODO_CONFIRM_DELETE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.app_name == "pocket-todo"
    assert s.log_level == "INFO"
    assert s.store_mode is StoreMode.SPLIT
    assert s.confirm_delete is True
    assert s.storage_backend == "sqlite"
    assert s.storage_path == Path(".local/pocket_todo") / "tasks.sqlite3"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TODO_STORE_MODE", "FLAG")
    monkeypatch.setenv("TODO_STORAGE_BACKEND", "json")
    monkeypatch.setenv("TODO_CONFIRM_DELETE", "no")
    monkeypatch.setenv("TODO_LOG_LEVEL", "debug")

    s = Settings.from_env()

    assert s.store_mode is StoreMode.FLAG
    assert s.storage_backend == "json"
    assert s.storage_path == tmp_path / "tasks.json"
    assert s.confirm_delete is False
    assert s.log_level == "DEBUG"


def test_invalid_values_fall_back(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TODO_STORE_MODE", "sideways")
    monkeypatch.setenv("TODO_STORAGE_BACKEND", "postgres")
    monkeypatch.setenv("TODO_STORAGE_PATH", str(tmp_path / "custom.db"))

    s = Settings.from_env()

    assert s.store_mode is StoreMode.SPLIT
    assert s.storage_backend == "sqlite"
    assert s.storage_path == tmp_path / "custom.db"
