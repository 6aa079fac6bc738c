# src/pocket_todo/tasks/persistence.py

"""
Snapshot writer.

Mirrors the task collections into key-value storage without blocking callers:
- one write in flight at a time,
- a snapshot submitted while a write runs replaces whatever is still queued,
- failures are logged and counted, never raised, never retried.

The durable state therefore converges to the last snapshot submitted.
"""

from __future__ import annotations

import asyncio
import logging

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)


class SnapshotWriter:
    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._pending: dict[str, str] | None = None
        self._worker: asyncio.Task[None] | None = None
        self.writes = 0
        self.failures = 0
        self.superseded = 0

    @property
    def busy(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(self, items: dict[str, str]) -> None:
        """
        Queue a full snapshot (key -> serialized value).

        Outside a running event loop the snapshot stays queued; the next
        submit() or flush() made on a loop writes it.
        """
        if self._pending is not None:
            self.superseded += 1
            logger.debug("Queued snapshot superseded keys=%s", sorted(self._pending))
        self._pending = dict(items)
        self._start_worker()

    def _start_worker(self) -> None:
        if self.busy or self._pending is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; task snapshot kept queued until the next flush.")
            return
        self._worker = loop.create_task(self._drain(), name="pocket-todo-snapshot-writer")

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    async def _drain(self) -> None:
        while self._pending is not None:
            items, self._pending = self._pending, None
            try:
                for key, value in items.items():
                    await self._storage.set_item(key, value)
            except Exception:
                self.failures += 1
                logger.exception("Persisting task snapshot failed keys=%s", sorted(items))
                continue
            self.writes += 1
            logger.debug("Task snapshot persisted keys=%s", sorted(items))

    async def flush(self) -> None:
        """Wait until every submitted snapshot has been written (or has failed)."""
        self._start_worker()
        while self.busy:
            assert self._worker is not None
            await asyncio.shield(self._worker)
