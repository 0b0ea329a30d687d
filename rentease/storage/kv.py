"""String key-value store over one SQLite table.

:class:`KeyValueStore` mirrors the Web Storage API (``getItem``,
``setItem``, ``removeItem``) on top of a table created by
:func:`~rentease.storage.database.create_schema`.  Values are opaque strings;
JSON encoding is the job of :mod:`rentease.storage.collection_store`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import aiosqlite

from rentease.storage.database import LOCAL_STORAGE_TABLE, SESSION_STORAGE_TABLE

__all__ = ["KeyValueStore"]

logger = logging.getLogger(__name__)

_TABLES = frozenset({LOCAL_STORAGE_TABLE, SESSION_STORAGE_TABLE})


class KeyValueStore:
    """Async string key-value store backed by one SQLite table.

    The store owns no connection lifecycle; pass an open connection from
    :func:`~rentease.storage.database.open_db` and close it when done.

    Args:
        conn: Open :class:`aiosqlite.Connection` with the schema applied.
        table: ``"local_storage"`` or ``"session_storage"``.

    Raises:
        ValueError: If *table* is not one of the known key-value tables.
    """

    def __init__(self, conn: aiosqlite.Connection, table: str = LOCAL_STORAGE_TABLE) -> None:
        if table not in _TABLES:
            raise ValueError(f"Unknown key-value table {table!r}")
        self._conn = conn
        self._table = table

    @property
    def table(self) -> str:
        return self._table

    async def get_item(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None``."""
        cursor = await self._conn.execute(
            f"SELECT value FROM {self._table} WHERE key = ? LIMIT 1",
            (key,),
        )
        row = await cursor.fetchone()
        return None if row is None else row[0]

    async def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""
        await self.set_items({key: value})

    async def set_items(self, items: Mapping[str, str]) -> None:
        """Store several keys in a single transaction.

        Either every key is written or, if the commit fails, none is.
        """
        if not items:
            return
        await self._conn.executemany(
            f"INSERT OR REPLACE INTO {self._table} (key, value) VALUES (?, ?)",
            list(items.items()),
        )
        await self._conn.commit()
        logger.debug("%s: wrote %s", self._table, ", ".join(items))

    async def remove_item(self, key: str) -> None:
        await self._conn.execute(f"DELETE FROM {self._table} WHERE key = ?", (key,))
        await self._conn.commit()
        logger.debug("%s: removed %s", self._table, key)

    async def keys(self) -> list[str]:
        cursor = await self._conn.execute(f"SELECT key FROM {self._table} ORDER BY key")
        rows = await cursor.fetchall()
        return [row[0] for row in rows]
