"""Store protocol: generic record persistence for the tracker."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any


class Store(ABC):
    """Abstract base for all storage backends.

    Records live in *namespaces* (``"categories"``, ``"projects"``,
    ``"sessions"``) keyed by record id.  The store is agnostic to what is
    being stored; it just persists ``dict[str, Any]`` blobs keyed by
    ``(namespace, key)``.

    Writes may be staged until :meth:`save`, which must apply everything
    written since the previous save atomically.  Reads always see staged
    writes.
    """

    @abstractmethod
    async def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    async def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        """Create or overwrite a value."""
        ...

    @abstractmethod
    async def delete(self, namespace: str, key: str) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    async def list_keys(self, namespace: str) -> list[str]:
        """Return all keys within a namespace."""
        ...

    @abstractmethod
    async def values(self, namespace: str) -> list[dict[str, Any]]:
        """Return every value within a namespace."""
        ...

    @abstractmethod
    async def exists(self, namespace: str, key: str) -> bool:
        """Return ``True`` if the key exists in the namespace."""
        ...

    @abstractmethod
    async def save(self) -> None:
        """Make all staged writes durable, or raise ``StoreError``."""
        ...

    async def query(
        self, namespace: str, predicate: Callable[[dict[str, Any]], bool]
    ) -> list[dict[str, Any]]:
        """Return the values in *namespace* for which *predicate* is true."""
        return [v for v in await self.values(namespace) if predicate(v)]

    async def close(self) -> None:
        """Release resources.  Default is a no-op."""
