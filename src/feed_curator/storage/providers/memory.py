# feed_curator/storage/providers/memory.py
"""In-memory store, the default for tests and embedded use."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any


class InMemoryStore:
    """Dict-backed store. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    async def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    async def set(self, **items: Any) -> None:
        for key, value in items.items():
            self._data[key] = copy.deepcopy(value)

    async def set_many(self, items: Mapping[str, Any]) -> None:
        await self.set(**items)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def keys(self) -> list[str]:
        return list(self._data)

    async def clear(self) -> None:
        self._data.clear()
