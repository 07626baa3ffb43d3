# feed_curator/storage/providers/file.py
"""JSON-file store.

All keys live in a single JSON document. Writes go to a temporary file that
replaces the original, so a crash mid-write leaves the previous state intact.
Blocking file I/O runs in a worker thread to keep the event loop free.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from collections.abc import Mapping
from typing import Any

from feed_curator.exceptions import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore:
    """Store every key in one JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._cache: dict[str, Any] | None = None
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected store contents in {self.path}")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    async def _load(self) -> dict[str, Any]:
        if self._cache is None:
            self._cache = await asyncio.to_thread(self._read)
        return self._cache

    async def get(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            data = await self._load()
            return json.loads(json.dumps(data[key])) if key in data else default

    async def set(self, **items: Any) -> None:
        async with self._lock:
            data = dict(await self._load())
            data.update(items)
            await asyncio.to_thread(self._write, data)
            self._cache = data
        logger.debug(f"Persisted keys {sorted(items)} to {self.path}")

    async def set_many(self, items: Mapping[str, Any]) -> None:
        await self.set(**items)

    async def delete(self, key: str) -> None:
        async with self._lock:
            data = dict(await self._load())
            if key not in data:
                return
            del data[key]
            await asyncio.to_thread(self._write, data)
            self._cache = data

    async def clear_cache(self) -> None:
        """Drop the in-memory copy so the next read hits the file."""
        async with self._lock:
            self._cache = None
