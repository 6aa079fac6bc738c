# src/pocket_todo/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

TASKS_KEY = "tasks"
COMPLETED_TASKS_KEY = "completedTasks"


class StoreMode(StrEnum):
    """
    How completion is represented.

    - FLAG: one list, completion is a flag flipped in place
    - SPLIT: completed tasks move to a second list (one-directional)
    """

    FLAG = "flag"
    SPLIT = "split"

    @classmethod
    def parse(cls, raw: str | None, default: StoreMode | None = None) -> StoreMode:
        fallback = default if default is not None else cls.SPLIT
        if not raw:
            return fallback
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return fallback


class TaskValidationError(ValueError):
    """User-supplied task text was rejected."""


class PersistenceError(RuntimeError):
    """Key-value storage read or write failed."""


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str
    completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "completed": self.completed}

    @classmethod
    def from_dict(cls, raw: Any) -> Task | None:
        """Build a Task from its JSON shape; None when the item is unusable."""
        if not isinstance(raw, dict):
            return None
        tid = raw.get("id")
        text = raw.get("text")
        if not isinstance(tid, str) or not tid or not isinstance(text, str):
            return None
        completed = raw.get("completed")
        return cls(id=tid, text=text, completed=completed if isinstance(completed, bool) else False)


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    """Read-only view handed to the presentation layer."""

    mode: StoreMode
    active: tuple[Task, ...]
    completed: tuple[Task, ...]
    editing_id: str | None
    draft: str

    @property
    def is_empty(self) -> bool:
        return not self.active and not self.completed
