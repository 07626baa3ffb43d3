# feed_curator/decision_log.py
"""
Decision Log - bounded, append-only history of classification decisions.

Backed by the persistent store under ``curationLog`` so the history
survives restarts and can be exported. Capacity is fixed (2000 by default);
once full, the oldest entries are evicted first. Appends are serialized
so concurrent decisions never overwrite each other.

Logging is best-effort: a failing store is reported and never propagates
into curation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from feed_curator.config import DEFAULT_LOG_CAPACITY
from feed_curator.models.classification import ClassificationResult, DecisionLogEntry
from feed_curator.storage.base import PersistentStore, StoreKeys

logger = logging.getLogger(__name__)


class DecisionLog:
    """Ring buffer of :class:`DecisionLogEntry` persisted in a store."""

    def __init__(self, store: PersistentStore, capacity: int = DEFAULT_LOG_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._store = store
        self.capacity = capacity
        self._lock = asyncio.Lock()

    async def _load_raw(self) -> list[dict[str, Any]]:
        raw = await self._store.get(StoreKeys.CURATION_LOG, [])
        return raw if isinstance(raw, list) else []

    async def append(self, entry: DecisionLogEntry) -> bool:
        """
        Append ``entry``, evicting from the front past capacity.

        Returns True when the entry was persisted.
        """
        async with self._lock:
            return await self._append_locked(entry)

    async def _append_locked(self, entry: DecisionLogEntry) -> bool:
        try:
            entries = await self._load_raw()
        except Exception as e:
            logger.error(f"Failed to read decision log: {e}")
            return False

        entries.append(entry.to_wire())
        overflow = len(entries) - self.capacity
        if overflow > 0:
            del entries[:overflow]

        try:
            await self._store.set(**{StoreKeys.CURATION_LOG: entries})
        except Exception as e:
            logger.error(f"Failed to persist decision log: {e}")
            return False
        return True

    async def record(self, item_id: str | None, text: str | None, result: ClassificationResult) -> bool:
        """Build an entry from a classification result and append it."""
        try:
            entry = DecisionLogEntry.from_result(item_id or "unknown", text, result)
        except ValidationError as e:
            logger.warning(f"Skipping malformed decision log entry for {item_id!r}: {e}")
            return False
        return await self.append(entry)

    async def dump(self) -> list[DecisionLogEntry]:
        """Full ordered history, oldest first."""
        entries: list[DecisionLogEntry] = []
        for raw in await self._load_raw():
            try:
                entries.append(DecisionLogEntry.model_validate(raw))
            except ValidationError:
                logger.warning(f"Dropping unreadable decision log entry: {raw!r}")
        return entries

    async def count(self) -> int:
        return len(await self._load_raw())

    async def clear(self) -> None:
        async with self._lock:
            await self._store.set(**{StoreKeys.CURATION_LOG: []})
