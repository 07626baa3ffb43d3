# feed_curator/storage/__init__.py
"""Persistent storage for session flags, interests and the decision log."""

from feed_curator.storage.base import PersistentStore, StoreKeys, StoreProvider
from feed_curator.storage.providers import InMemoryStore, JsonFileStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "PersistentStore",
    "StoreKeys",
    "StoreProvider",
]
