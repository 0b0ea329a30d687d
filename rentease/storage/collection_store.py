"""Named JSON collections on top of the key-value store.

A *collection* is a JSON array stored under a well-known key.  Three are
used:

+----------------------+------------------------------------------------+
| Key                  | Content                                        |
+======================+================================================+
| ``renteaseFlats``    | Every flat ever registered (authoritative).    |
+----------------------+------------------------------------------------+
| ``favoriteFlats``    | Copies of the flats currently favorited.       |
+----------------------+------------------------------------------------+
| ``users``            | Registered accounts.                           |
+----------------------+------------------------------------------------+

Loading never raises: a key that is absent, holds invalid JSON, or holds
something other than an array yields an empty list.  Entries inside the
array are **not** validated.  Saving always overwrites the whole array.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from rentease.core import events
from rentease.storage.kv import KeyValueStore

__all__ = [
    "FLATS_KEY",
    "FAVORITES_KEY",
    "USERS_KEY",
    "CollectionStore",
]

logger = logging.getLogger(__name__)

FLATS_KEY: str = "renteaseFlats"
FAVORITES_KEY: str = "favoriteFlats"
USERS_KEY: str = "users"


def _encode(records: Sequence[Any]) -> str:
    return json.dumps(list(records), ensure_ascii=False)


class CollectionStore:
    """Load / save JSON-array collections by name.

    Args:
        kv: The ``local_storage`` key-value store.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    async def load(self, name: str) -> list[Any]:
        """Return the collection stored under *name*, or ``[]``.

        Parse failures are logged at WARNING and recovered as an empty
        collection; they are never surfaced to the caller.
        """
        raw = await self._kv.get_item(name)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning(
                "Collection %s is not valid JSON (%s); treating as empty",
                name,
                exc,
                extra={"event": events.COLLECTION_PARSE_ERROR},
            )
            return []
        if not isinstance(data, list):
            logger.warning(
                "Collection %s holds %s instead of an array; treating as empty",
                name,
                type(data).__name__,
                extra={"event": events.COLLECTION_PARSE_ERROR},
            )
            return []
        return data

    async def save(self, name: str, records: Sequence[Any]) -> None:
        """Overwrite the collection stored under *name*."""
        await self._kv.set_item(name, _encode(records))
        logger.debug("Saved %d records to %s", len(records), name)

    async def save_many(self, collections: Mapping[str, Sequence[Any]]) -> None:
        """Overwrite several collections in one transaction."""
        await self._kv.set_items({name: _encode(records) for name, records in collections.items()})
        logger.debug(
            "Saved %s",
            ", ".join(f"{name}={len(records)}" for name, records in collections.items()),
        )
