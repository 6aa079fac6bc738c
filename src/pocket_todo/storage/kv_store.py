# src/pocket_todo/storage/kv_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import sqlite3
import time
from pathlib import Path

from ..tasks.task_models import PersistenceError

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    """Dict-backed storage. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove_item(self, key: str) -> None:
        self.data.pop(key, None)


class SqliteKeyValueStore:
    """
    SQLite key-value store.

    One table `kv(key, value, updated_at)`; each call opens its own
    connection and runs in a worker thread so the event loop never blocks.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._ensure_schema()
        except sqlite3.Error as e:
            raise PersistenceError(f"cannot open kv store at {self._db_path}: {e}") from e
        logger.info("SqliteKeyValueStore ready db=%s", self._db_path)

    @property
    def path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _get_sync(self, key: str) -> str | None:
        conn = self._get_conn()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return None if row is None else str(row[0])
        finally:
            conn.close()

    def _set_sync(self, key: str, value: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, time.time()),
            )
            conn.commit()
        finally:
            conn.close()

    def _remove_sync(self, key: str) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    async def get_item(self, key: str) -> str | None:
        try:
            return await asyncio.to_thread(self._get_sync, key)
        except sqlite3.Error as e:
            raise PersistenceError(f"read failed key={key}: {e}") from e

    async def set_item(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._set_sync, key, value)
        except sqlite3.Error as e:
            raise PersistenceError(f"write failed key={key}: {e}") from e
        logger.debug("kv set key=%s bytes=%d", key, len(value))

    async def remove_item(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove_sync, key)
        except sqlite3.Error as e:
            raise PersistenceError(f"remove failed key={key}: {e}") from e


class JsonFileKeyValueStore:
    """
    All keys in one JSON object on disk.

    Writes go to a `.tmp` sibling first and are swapped in with os.replace.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except OSError as e:
            raise PersistenceError(f"cannot read {self._path}: {e}") from e
        except ValueError as e:
            raise PersistenceError(f"{self._path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"{self._path} does not hold a JSON object")
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except OSError as e:
            raise PersistenceError(f"cannot write {self._path}: {e}") from e
        with contextlib.suppress(OSError):
            # Best-effort: task text is private to the user.
            os.chmod(self._path, 0o600)

    async def get_item(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set_item(self, key: str, value: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            data[key] = value
            await asyncio.to_thread(self._write_all, data)

    async def remove_item(self, key: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read_all)
            if data.pop(key, None) is not None:
                await asyncio.to_thread(self._write_all, data)
