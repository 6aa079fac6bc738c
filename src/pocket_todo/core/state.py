# src/pocket_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..tasks.task_store import TaskStore
from .ports import KeyValueStorage


@dataclass
class AppState:
    # Settings live on the state so handlers can read them without globals.
    settings: object

    storage: KeyValueStorage
    store: TaskStore
