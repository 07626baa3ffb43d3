# feed_curator/storage/providers/__init__.py
from feed_curator.storage.providers.file import JsonFileStore
from feed_curator.storage.providers.memory import InMemoryStore

__all__ = ["InMemoryStore", "JsonFileStore"]
