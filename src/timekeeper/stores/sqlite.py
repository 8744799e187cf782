"""SQLiteStore: durable, single-file storage backend using aiosqlite."""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

import aiosqlite

from timekeeper.exceptions import StoreError
from timekeeper.stores.base import Store

logger = logging.getLogger(__name__)

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS timekeeper_store (
    namespace TEXT NOT NULL,
    key       TEXT NOT NULL,
    value     TEXT NOT NULL,
    PRIMARY KEY (namespace, key)
)
"""


class SQLiteStore(Store):
    """Persistent store backed by a single SQLite file.

    Writes join one open transaction that :meth:`save` commits, so a batch
    of mutations becomes durable all at once.  Closing without saving
    discards the batch.

    Parameters:
        db_path: Path to the SQLite database file.  Use ``":memory:"``
                 for an in-memory database (useful for testing).
    """

    def __init__(self, db_path: str = "timekeeper.db") -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    @property
    def db_path(self) -> str:
        return self._db_path

    async def _connect(self) -> aiosqlite.Connection:
        if self._db is None:
            try:
                self._db = await aiosqlite.connect(self._db_path)
                await self._db.execute(_CREATE_TABLE)
                await self._db.commit()
            except sqlite3.Error as exc:
                raise StoreError("connect", str(exc)) from exc
            logger.debug("Opened SQLite store at %s", self._db_path)
        return self._db

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    # ── Store protocol ───────────────────────────────────────

    async def get(self, namespace: str, key: str) -> dict[str, Any] | None:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT value FROM timekeeper_store WHERE namespace = ? AND key = ?",
                (namespace, key),
            )
            row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise StoreError("get", str(exc)) from exc
        if row is None:
            return None
        result: dict[str, Any] = json.loads(row[0])
        return result

    async def set(self, namespace: str, key: str, value: dict[str, Any]) -> None:
        db = await self._connect()
        try:
            await db.execute(
                "INSERT OR REPLACE INTO timekeeper_store (namespace, key, value) VALUES (?, ?, ?)",
                (namespace, key, json.dumps(value)),
            )
        except sqlite3.Error as exc:
            raise StoreError("set", str(exc)) from exc

    async def delete(self, namespace: str, key: str) -> None:
        db = await self._connect()
        try:
            await db.execute(
                "DELETE FROM timekeeper_store WHERE namespace = ? AND key = ?",
                (namespace, key),
            )
        except sqlite3.Error as exc:
            raise StoreError("delete", str(exc)) from exc

    async def list_keys(self, namespace: str) -> list[str]:
        rows = await self._fetch_all(
            "SELECT key FROM timekeeper_store WHERE namespace = ?", namespace
        )
        return [row[0] for row in rows]

    async def values(self, namespace: str) -> list[dict[str, Any]]:
        rows = await self._fetch_all(
            "SELECT value FROM timekeeper_store WHERE namespace = ?", namespace
        )
        return [json.loads(row[0]) for row in rows]

    async def exists(self, namespace: str, key: str) -> bool:
        db = await self._connect()
        try:
            cursor = await db.execute(
                "SELECT 1 FROM timekeeper_store WHERE namespace = ? AND key = ?",
                (namespace, key),
            )
            return (await cursor.fetchone()) is not None
        except sqlite3.Error as exc:
            raise StoreError("exists", str(exc)) from exc

    async def save(self) -> None:
        db = await self._connect()
        try:
            await db.commit()
        except sqlite3.Error as exc:
            raise StoreError("save", str(exc)) from exc

    async def _fetch_all(self, sql: str, namespace: str) -> list[Any]:
        db = await self._connect()
        try:
            cursor = await db.execute(sql, (namespace,))
            return list(await cursor.fetchall())
        except sqlite3.Error as exc:
            raise StoreError("query", str(exc)) from exc
