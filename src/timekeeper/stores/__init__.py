"""Storage backends for category, project and session records."""

from timekeeper.stores.base import Store
from timekeeper.stores.memory import InMemoryStore
from timekeeper.stores.sqlite import SQLiteStore

__all__ = ["InMemoryStore", "SQLiteStore", "Store"]
