"""InMemoryStore: zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import copy
from collections import defaultdict
from typing import Any

from timekeeper.stores.base import Store


class InMemoryStore(Store):
    """In-memory store using nested dicts.  Data is lost on process exit.

    Writes apply immediately, so :meth:`save` has nothing left to do.
    Values are copied in and out so callers never share a dict with the store.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        value = self._data[namespace].get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        self._data[namespace][key] = copy.deepcopy(value)

    async def delete(self, namespace: str, key: str) -> None:
        self._data[namespace].pop(key, None)

    async def list_keys(self, namespace: str) -> list[str]:
        return list(self._data[namespace].keys())

    async def values(self, namespace: str) -> list[dict[str, Any]]:
        return [copy.deepcopy(v) for v in self._data[namespace].values()]

    async def exists(self, namespace: str, key: str) -> bool:
        return key in self._data[namespace]

    async def save(self) -> None:
        pass
