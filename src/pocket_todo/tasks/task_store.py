# src/pocket_todo/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable, Iterable

from ..core.ports import AlwaysConfirm, Confirmer, KeyValueStorage
from .persistence import SnapshotWriter
from .task_models import (
    COMPLETED_TASKS_KEY,
    TASKS_KEY,
    PersistenceError,
    StoreMode,
    Task,
    TaskSnapshot,
    TaskValidationError,
)

logger = logging.getLogger(__name__)

EMPTY_TEXT_MESSAGE = "Task description cannot be empty."
DELETE_TITLE = "Confirm Delete"
DELETE_MESSAGE = "Are you sure you want to delete this task?"


class IdAllocator:
    """
    Millisecond wall-clock ids that never repeat within one store.

    A fresh id is max(now_ms, last + 1), so two tasks created in the same
    millisecond still get distinct ids.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def observe(self, ids: Iterable[str]) -> None:
        for tid in ids:
            if tid.isascii() and tid.isdigit():
                self._last = max(self._last, int(tid))

    def next_id(self) -> str:
        now_ms = int(self._clock() * 1000)
        self._last = max(now_ms, self._last + 1)
        return str(self._last)


class TaskStore:
    """
    In-memory task collections mirrored to key-value storage.

    All mutations are synchronous list operations; each one that changes
    state ends by submitting a full snapshot to the SnapshotWriter.

    Modes:
    - StoreMode.FLAG: one list, `toggle_or_complete` flips `completed`
    - StoreMode.SPLIT: `toggle_or_complete` moves a task from `active` to
      `completed`; there is no way back

    Editing mode: `edit()` remembers a task id and pre-fills `draft`;
    only `update()` leaves it.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        mode: StoreMode = StoreMode.SPLIT,
        confirmer: Confirmer | None = None,
        id_allocator: IdAllocator | None = None,
    ) -> None:
        self._storage = storage
        self._mode = mode
        self._confirmer: Confirmer = confirmer or AlwaysConfirm()
        self._ids = id_allocator or IdAllocator()
        self._writer = SnapshotWriter(storage)

        self._active: list[Task] = []
        self._completed: list[Task] = []

        self._editing_id: str | None = None
        self._draft = ""

    # ---- queries ----

    @property
    def mode(self) -> StoreMode:
        return self._mode

    @property
    def writer(self) -> SnapshotWriter:
        return self._writer

    @property
    def active(self) -> tuple[Task, ...]:
        if self._mode is StoreMode.FLAG:
            return tuple(t for t in self._active if not t.completed)
        return tuple(self._active)

    @property
    def completed(self) -> tuple[Task, ...]:
        if self._mode is StoreMode.FLAG:
            return tuple(t for t in self._active if t.completed)
        return tuple(self._completed)

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Every task in insertion order (split mode: active list first)."""
        return tuple(self._active) + tuple(self._completed)

    @property
    def editing_id(self) -> str | None:
        return self._editing_id

    @property
    def is_editing(self) -> bool:
        return self._editing_id is not None

    @property
    def draft(self) -> str:
        return self._draft

    def get(self, task_id: str) -> Task | None:
        found = self._locate(task_id)
        return found[1] if found else None

    def _locate(self, task_id: str) -> tuple[list[Task], Task] | None:
        for bucket in (self._active, self._completed):
            for task in bucket:
                if task.id == task_id:
                    return bucket, task
        return None

    def snapshot(self) -> TaskSnapshot:
        return TaskSnapshot(
            mode=self._mode,
            active=self.active,
            completed=self.completed,
            editing_id=self._editing_id,
            draft=self._draft,
        )

    # ---- load / persist ----

    async def load(self) -> None:
        """
        Replace in-memory state with the persisted snapshot.

        Missing keys, malformed blobs and storage errors all end in an empty
        collection; nothing is raised and nothing is written back.
        """
        self._active = await self._load_list(TASKS_KEY)
        self._completed = []
        if self._mode is StoreMode.SPLIT:
            seen = {t.id for t in self._active}
            self._completed = [t for t in await self._load_list(COMPLETED_TASKS_KEY) if t.id not in seen]

        self._ids.observe(t.id for t in self.tasks)
        logger.info(
            "Tasks loaded mode=%s active=%d completed=%d",
            self._mode.value,
            len(self.active),
            len(self.completed),
        )

    async def _load_list(self, key: str) -> list[Task]:
        try:
            raw = await self._storage.get_item(key)
        except PersistenceError:
            logger.exception("Reading %r from storage failed; starting empty.", key)
            return []
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except ValueError:
            logger.error("Stored %r is not valid JSON; starting empty.", key)
            return []
        if not isinstance(data, list):
            logger.error("Stored %r is not a JSON array; starting empty.", key)
            return []

        out: list[Task] = []
        seen: set[str] = set()
        for item in data:
            task = Task.from_dict(item)
            if task is None:
                logger.warning("Skipping malformed task in %r: %r", key, item)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s in %r", task.id, key)
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def _persist(self) -> None:
        items = {TASKS_KEY: json.dumps([t.to_dict() for t in self._active], ensure_ascii=False)}
        if self._mode is StoreMode.SPLIT:
            items[COMPLETED_TASKS_KEY] = json.dumps(
                [t.to_dict() for t in self._completed], ensure_ascii=False
            )
        self._writer.submit(items)

    async def flush(self) -> None:
        await self._writer.flush()

    async def aclose(self) -> None:
        await self.flush()
        logger.info(
            "TaskStore closed writes=%d failures=%d", self._writer.writes, self._writer.failures
        )

    # ---- mutations ----

    def add(self, text: str) -> Task:
        if not text or not text.strip():
            raise TaskValidationError(EMPTY_TEXT_MESSAGE)

        task = Task(id=self._ids.next_id(), text=text, completed=False)
        self._active.append(task)
        logger.debug("Task added id=%s", task.id)
        self._persist()
        return task

    def edit(self, task: Task) -> None:
        self._editing_id = task.id
        self._draft = task.text
        logger.debug("Editing task id=%s", task.id)

    def update(self, editing_id: str | None, text: str) -> Task | None:
        found = self._locate(editing_id) if editing_id is not None else None

        # Editing mode ends whether or not the task still exists.
        self._editing_id = None
        self._draft = ""

        if found is None:
            logger.debug("update: no task id=%s", editing_id)
            return None

        bucket, task = found
        updated = Task(id=task.id, text=text, completed=task.completed)
        bucket[bucket.index(task)] = updated
        self._persist()
        return updated

    def submit(self, text: str) -> Task | None:
        """Add a task, or update the one being edited."""
        if self._editing_id is not None:
            return self.update(self._editing_id, text)
        return self.add(text)

    async def delete(self, task_id: str) -> bool:
        if self._locate(task_id) is None:
            logger.debug("delete: no task id=%s", task_id)
            return False

        if not await self._confirmer.confirm(DELETE_TITLE, DELETE_MESSAGE):
            logger.debug("delete cancelled id=%s", task_id)
            return False

        # Re-resolve: the collections may have changed while the prompt was open.
        found = self._locate(task_id)
        if found is None:
            return False
        bucket, task = found
        bucket.remove(task)
        logger.debug("Task deleted id=%s", task_id)
        self._persist()
        return True

    def toggle_or_complete(self, task_id: str) -> Task | None:
        if self._mode is StoreMode.FLAG:
            for i, task in enumerate(self._active):
                if task.id == task_id:
                    flipped = Task(id=task.id, text=task.text, completed=not task.completed)
                    self._active[i] = flipped
                    self._persist()
                    return flipped
            logger.debug("toggle: no task id=%s", task_id)
            return None

        for i, task in enumerate(self._active):
            if task.id == task_id:
                del self._active[i]
                done = Task(id=task.id, text=task.text, completed=True)
                self._completed.append(done)
                self._persist()
                return done
        logger.debug("complete: no active task id=%s", task_id)
        return None

    def delete_completed(self, task_id: str) -> bool:
        if self._mode is StoreMode.FLAG:
            bucket = self._active
            matches = [t for t in bucket if t.id == task_id and t.completed]
        else:
            bucket = self._completed
            matches = [t for t in bucket if t.id == task_id]

        if not matches:
            logger.debug("delete_completed: no completed task id=%s", task_id)
            return False

        bucket.remove(matches[0])
        self._persist()
        return True
