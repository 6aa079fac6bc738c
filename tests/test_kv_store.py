# tests/test_kv_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from pocket_todo.storage import JsonFileKeyValueStore, SqliteKeyValueStore
from pocket_todo.tasks.task_models import PersistenceError, StoreMode
from pocket_todo.tasks.task_store import TaskStore


@pytest.mark.asyncio
async def test_sqlite_set_get_overwrite_remove(tmp_path: Path) -> None:
    kv = SqliteKeyValueStore(tmp_path / "nested" / "kv.sqlite3")

    assert await kv.get_item("tasks") is None
    await kv.set_item("tasks", "[]")
    await kv.set_item("tasks", '[{"id": "1"}]')
    assert await kv.get_item("tasks") == '[{"id": "1"}]'

    # A second instance sees the same file.
    again = SqliteKeyValueStore(tmp_path / "nested" / "kv.sqlite3")
    assert await again.get_item("tasks") == '[{"id": "1"}]'

    await kv.remove_item("tasks")
    assert await kv.get_item("tasks") is None


@pytest.mark.asyncio
async def test_json_file_store_persists_and_removes(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    kv = JsonFileKeyValueStore(path)

    await kv.set_item("tasks", "[1]")
    await kv.set_item("completedTasks", "[2]")
    assert path.exists()
    assert not path.with_suffix(".tmp").exists()

    reopened = JsonFileKeyValueStore(path)
    assert await reopened.get_item("tasks") == "[1]"
    assert await reopened.get_item("completedTasks") == "[2]"

    await reopened.remove_item("tasks")
    assert await kv.get_item("tasks") is None
    assert await kv.get_item("completedTasks") == "[2]"


@pytest.mark.asyncio
async def test_json_file_store_corrupt_file_raises_persistence_error(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{broken", "utf-8")
    kv = JsonFileKeyValueStore(path)

    with pytest.raises(PersistenceError):
        await kv.get_item("tasks")


@pytest.mark.asyncio
async def test_store_survives_restart_with_sqlite(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(SqliteKeyValueStore(db), mode=StoreMode.SPLIT)
    a = store.add("water plants")
    store.add("call mom")
    store.toggle_or_complete(a.id)
    await store.aclose()

    restarted = TaskStore(SqliteKeyValueStore(db), mode=StoreMode.SPLIT)
    await restarted.load()

    assert [t.text for t in restarted.active] == ["call mom"]
    assert [(t.id, t.completed) for t in restarted.completed] == [(a.id, True)]


@pytest.mark.asyncio
async def test_store_with_corrupt_json_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("not json at all", "utf-8")

    store = TaskStore(JsonFileKeyValueStore(path))
    await store.load()

    assert store.tasks == ()
