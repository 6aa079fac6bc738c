"""
Key-value storage backends for task snapshots.

- InMemoryKeyValueStore: dict only (tests, throwaway sessions)
- SqliteKeyValueStore: single `kv` table in a local SQLite file
- JsonFileKeyValueStore: one JSON object file, replaced atomically
"""

from .kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore, SqliteKeyValueStore

__all__ = ["InMemoryKeyValueStore", "JsonFileKeyValueStore", "SqliteKeyValueStore"]
