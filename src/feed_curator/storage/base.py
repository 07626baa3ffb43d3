# feed_curator/storage/base.py
"""
Persistent key-value store contract.

The curator only needs a handful of keys, persisted across restarts:

- ``isRunning``   bool
- ``interests``   ordered list of strings
- ``curationLog`` list of decision log entries (at most 2000)
- ``aiStatus``    "stopped" | "loading" | "ready"
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


class StoreKeys:
    """Names of the persisted keys."""

    IS_RUNNING = "isRunning"
    INTERESTS = "interests"
    CURATION_LOG = "curationLog"
    AI_STATUS = "aiStatus"


@runtime_checkable
class PersistentStore(Protocol):
    """Async key-value store. Values must be JSON-serialisable."""

    async def get(self, key: str, default: Any = None) -> Any: ...

    async def set(self, **items: Any) -> None: ...

    async def set_many(self, items: Mapping[str, Any]) -> None: ...

    async def delete(self, key: str) -> None: ...


class StoreProvider:
    """Holds the process-wide default store."""

    _store: PersistentStore | None = None

    @classmethod
    def get_store(cls) -> PersistentStore:
        if cls._store is None:
            from feed_curator.storage.providers.memory import InMemoryStore

            cls._store = InMemoryStore()
        return cls._store

    @classmethod
    def set_store(cls, store: PersistentStore) -> None:
        cls._store = store
