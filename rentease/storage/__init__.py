"""SQLite-backed key-value storage and the JSON collections built on it."""

from rentease.storage.collection_store import (
    FAVORITES_KEY,
    FLATS_KEY,
    USERS_KEY,
    CollectionStore,
)
from rentease.storage.database import DEFAULT_DB_PATH, create_schema, open_db
from rentease.storage.kv import KeyValueStore
from rentease.storage.repository import FlatRepository

__all__ = [
    "DEFAULT_DB_PATH",
    "open_db",
    "create_schema",
    "KeyValueStore",
    "CollectionStore",
    "FlatRepository",
    "FLATS_KEY",
    "FAVORITES_KEY",
    "USERS_KEY",
]
