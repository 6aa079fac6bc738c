# src/pocket_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends and front-ends swappable and makes testing easier.
"""

from typing import Protocol


class KeyValueStorage(Protocol):
    """
    Durable string-keyed storage with string values.

    Implementations raise PersistenceError on I/O failure.
    """

    async def get_item(self, key: str) -> str | None: ...
    async def set_item(self, key: str, value: str) -> None: ...
    async def remove_item(self, key: str) -> None: ...


class Confirmer(Protocol):
    """
    Front-end side port: asks the user to confirm a destructive action.

    Returns True when the user accepted.
    """

    async def confirm(self, title: str, message: str) -> bool: ...


class AlwaysConfirm:
    """Confirmer used when prompts are disabled."""

    async def confirm(self, title: str, message: str) -> bool:
        return True
