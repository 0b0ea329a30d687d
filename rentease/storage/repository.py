"""Flat repository: registration with identity-key deduplication.

Provides :class:`FlatRepository`, the write path for new flats.  A flat is
appended to ``renteaseFlats`` only if no stored record shares its identity
key (see :mod:`rentease.core.ids`).

Typical usage::

    repo = FlatRepository(collections)
    try:
        key = await repo.insert(flat)
    except FlatAlreadyExistsError:
        ...  # tell the user the flat is already listed
"""

from __future__ import annotations

import logging
from typing import Any

from rentease.core import events
from rentease.core.exceptions import FlatAlreadyExistsError
from rentease.core.ids import identity_key
from rentease.core.models import Flat, FlatRecord
from rentease.storage.collection_store import FLATS_KEY, CollectionStore

__all__ = ["FlatRepository"]

logger = logging.getLogger(__name__)


class FlatRepository:
    """Data-access object for the ``renteaseFlats`` collection.

    Args:
        collections: Collection store over ``local_storage``.
    """

    def __init__(self, collections: CollectionStore) -> None:
        self._collections = collections

    async def all(self) -> list[Any]:
        """Return every stored flat record (malformed entries included)."""
        return await self._collections.load(FLATS_KEY)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if a stored flat has identity key *key*."""
        return any(identity_key(record) == key for record in await self.all())

    async def insert(self, flat: Flat) -> str:
        """Append *flat* to ``renteaseFlats`` and return its identity key.

        Args:
            flat: Validated flat from the registration form.

        Returns:
            The identity key of the stored record.

        Raises:
            :exc:`~rentease.core.exceptions.FlatAlreadyExistsError`:
                If a stored flat already has the same identity key.
        """
        record: FlatRecord = flat.to_record()
        key = identity_key(record)

        existing = await self.all()
        if any(identity_key(other) == key for other in existing):
            logger.info(
                "Rejected duplicate flat %s",
                key,
                extra={"event": events.FLAT_DUPLICATE},
            )
            raise FlatAlreadyExistsError(key)

        existing.append(record)
        await self._collections.save(FLATS_KEY, existing)
        logger.info(
            "Registered flat in %s (%d flats stored)",
            record["city"],
            len(existing),
            extra={"event": events.FLAT_REGISTERED},
        )
        return key
