"""SQLite database initialisation for Rentease.

Rentease persists two key-value namespaces as two SQLite tables, each
mapping a string key to a string (JSON) value:

* ``local_storage``: long-lived collections (``renteaseFlats``,
  ``favoriteFlats``, ``users``).
* ``session_storage``: the login session (``currentUserEmail``,
  ``loginTimestamp``).

This module is responsible for:

* Opening (or creating) the SQLite file.
* Configuring PRAGMA settings (WAL journal mode).
* Bootstrapping the schema via ``CREATE TABLE IF NOT EXISTS``.

Typical usage::

    from rentease.storage.database import open_db

    async def main() -> None:
        conn = await open_db()          # creates file + schema if absent
        # ... pass conn to KeyValueStore ...
        await conn.close()
"""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

__all__ = [
    "DEFAULT_DB_PATH",
    "LOCAL_STORAGE_TABLE",
    "SESSION_STORAGE_TABLE",
    "open_db",
    "create_schema",
]

logger = logging.getLogger(__name__)

#: Fallback database path when no explicit path is passed to :func:`open_db`.
DEFAULT_DB_PATH: Path = Path("rentease.db")

LOCAL_STORAGE_TABLE: str = "local_storage"
SESSION_STORAGE_TABLE: str = "session_storage"

_DDL_TEMPLATE = """\
CREATE TABLE IF NOT EXISTS {table} (
    key    TEXT NOT NULL,
    value  TEXT NOT NULL,
    PRIMARY KEY (key)
)"""


async def open_db(path: Path | str | None = None) -> aiosqlite.Connection:
    """Open (or create) the SQLite database and bootstrap the schema.

    Args:
        path: Filesystem path for the SQLite file, or ``":memory:"``.
            Defaults to :data:`DEFAULT_DB_PATH`.

    Returns:
        An open :class:`aiosqlite.Connection`.  The caller closes it.

    Raises:
        aiosqlite.OperationalError: If the file cannot be opened or created.
    """
    if path == ":memory:":
        conn: aiosqlite.Connection = await aiosqlite.connect(":memory:")
    else:
        db_path = Path(path or DEFAULT_DB_PATH)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("Opening SQLite database at %s", db_path)
        conn = await aiosqlite.connect(db_path)

    await _configure_pragmas(conn)
    await create_schema(conn)
    logger.debug("Key-value store ready at %s", path or DEFAULT_DB_PATH)
    return conn


async def create_schema(conn: aiosqlite.Connection) -> None:
    """Create both key-value tables if they do not already exist (idempotent)."""
    for table in (LOCAL_STORAGE_TABLE, SESSION_STORAGE_TABLE):
        await conn.execute(_DDL_TEMPLATE.format(table=table))
    await conn.commit()
    logger.debug("Schema bootstrap complete (%s, %s)", LOCAL_STORAGE_TABLE, SESSION_STORAGE_TABLE)


async def _configure_pragmas(conn: aiosqlite.Connection) -> None:
    """Enable WAL journal mode (reported as ``memory`` for in-memory databases)."""
    result = await conn.execute("PRAGMA journal_mode=WAL")
    row = await result.fetchone()
    mode = row[0] if row else "unknown"
    if mode != "wal":
        logger.debug("SQLite journal_mode is %r (expected for ':memory:')", mode)
