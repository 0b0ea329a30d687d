"""Shared pytest fixtures and configuration for the Rentease test suite.

This file is loaded automatically by pytest before any test module.
It provides project-wide fixtures used across the unit tests.
"""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator

import aiosqlite
import pytest
from pydantic_settings import SettingsConfigDict

from rentease.accounts.session import SessionManager
from rentease.core import configure_logging
from rentease.core.settings import Settings
from rentease.storage.collection_store import CollectionStore
from rentease.storage.database import LOCAL_STORAGE_TABLE, SESSION_STORAGE_TABLE, open_db
from rentease.storage.kv import KeyValueStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _configure_test_logging() -> None:
    """Force DEBUG logging in text format for every test.

    Using ``force=True`` ensures the configuration is applied even when
    pytest's own ``log_cli`` handler is already present.
    """
    configure_logging(level="DEBUG", fmt="text", force=True)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove Rentease env vars and disable ``.env`` loading for one test.

    pydantic-settings reads the on-disk ``.env`` file directly rather than
    via ``os.environ``, so the file has to be switched off as well.
    """
    prefixes = (
        "DATABASE_",
        "CITIES_",
        "SESSION_",
        "LOG_LEVEL",
        "LOG_FORMAT",
    )
    for key in list(os.environ):
        if any(key.startswith(prefix) for prefix in prefixes):
            monkeypatch.delenv(key, raising=False)

    monkeypatch.setattr(
        Settings,
        "model_config",
        SettingsConfigDict(
            env_file=None,
            env_file_encoding="utf-8",
            extra="ignore",
        ),
    )


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@pytest.fixture()
async def conn() -> AsyncGenerator[aiosqlite.Connection, None]:
    """In-memory SQLite database with both key-value tables."""
    connection = await open_db(":memory:")
    yield connection
    await connection.close()


@pytest.fixture()
def local_kv(conn: aiosqlite.Connection) -> KeyValueStore:
    return KeyValueStore(conn, LOCAL_STORAGE_TABLE)


@pytest.fixture()
def session_kv(conn: aiosqlite.Connection) -> KeyValueStore:
    return KeyValueStore(conn, SESSION_STORAGE_TABLE)


@pytest.fixture()
def collections(local_kv: KeyValueStore) -> CollectionStore:
    return CollectionStore(local_kv)


@pytest.fixture()
def session(session_kv: KeyValueStore) -> SessionManager:
    return SessionManager(session_kv)


@pytest.fixture()
async def logged_in(session: SessionManager) -> str:
    """Start a fresh session and return its email."""
    email = "tenant@example.com"
    await session.login(email)
    return email


# ---------------------------------------------------------------------------
# Misc helpers
# ---------------------------------------------------------------------------


@pytest.fixture()
def logger() -> logging.Logger:
    """Return a ``logging.Logger`` scoped to the running test."""
    return logging.getLogger("tests")
