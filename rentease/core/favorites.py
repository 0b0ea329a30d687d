"""Favorite synchronizer.

Favorites live in two places at once:

* the ``isFavorite`` flag on the flat's record in ``renteaseFlats``;
* a *copy* of the record in ``favoriteFlats``.

Storage has no referential integrity, so :class:`FavoriteSynchronizer` is the
only component allowed to change either side.  After any sequence of
:meth:`~FavoriteSynchronizer.set_favorite` / :meth:`~FavoriteSynchronizer.remove_favorite`
calls the following holds:

    identity keys flagged ``isFavorite=True`` in ``renteaseFlats``
    ==
    identity keys present in ``favoriteFlats``  (each exactly once)

Records are correlated by :func:`~rentease.core.ids.identity_key`.  A lookup
miss is not an error: the operation performs whatever side effects are still
well-defined and logs a warning.

Both collections are written in a single transaction so a caller never sees
one updated without the other.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import MutableMapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from rentease.core import events
from rentease.core.ids import identity_key
from rentease.storage.collection_store import FAVORITES_KEY, FLATS_KEY, CollectionStore

__all__ = ["FavoriteSynchronizer", "SyncResult"]

logger = logging.getLogger(__name__)


def _find_index(records: Sequence[Any], key: str) -> int | None:
    """Index of the first mutable record with identity *key*, else ``None``."""
    for index, record in enumerate(records):
        if isinstance(record, MutableMapping) and identity_key(record) == key:
            return index
    return None


def _label(record: Any) -> str:
    if isinstance(record, MutableMapping):
        return str(record.get("city", "?"))
    return "?"


@dataclass(slots=True)
class SyncResult:
    """Outcome of one synchronizer call.

    Attributes:
        key: Identity key the operation acted on.
        is_favorite: The favorite value that was applied.
        listing_found: ``True`` if a matching ``renteaseFlats`` record was
            found and updated.
        favorites: The ``favoriteFlats`` collection as persisted.
        view: For removals, the favorites view without the removed flat.
    """

    key: str
    is_favorite: bool
    listing_found: bool
    favorites: list[Any] = field(default_factory=list)
    view: list[Any] = field(default_factory=list)


class FavoriteSynchronizer:
    """Keeps ``renteaseFlats`` and ``favoriteFlats`` consistent.

    Args:
        collections: Collection store over ``local_storage``.
    """

    def __init__(self, collections: CollectionStore) -> None:
        self._collections = collections

    async def set_favorite(
        self,
        listings: list[Any],
        record: Any,
        value: bool,
    ) -> SyncResult:
        """Apply a favorite checkbox change made in the all-flats view.

        Steps:

        1. Set ``isFavorite`` on the first record of *listings* sharing the
           identity key of *record* (in place; a miss is logged).
        2. ``value=True``: append a copy to ``favoriteFlats`` unless the key
           is already present.
        3. ``value=False``: drop every ``favoriteFlats`` record with the key.
        4. Persist *listings* and the favorites in one transaction.

        Args:
            listings: The authoritative in-memory all-flats list.  Mutated.
            record: The flat whose checkbox changed.
            value: New favorite state.

        Returns:
            A :class:`SyncResult` describing what was written.
        """
        key = identity_key(record)
        index = _find_index(listings, key)
        target = listings[index] if index is not None else record

        if index is not None:
            listings[index]["isFavorite"] = value
        else:
            logger.warning(
                "No stored flat matches %s; updating favorites only",
                key,
                extra={"event": events.FAVORITE_LOOKUP_MISS},
            )

        favorites = await self._collections.load(FAVORITES_KEY)
        if value:
            if not any(identity_key(fav) == key for fav in favorites):
                favorite_copy = copy.deepcopy(target)
                if isinstance(favorite_copy, MutableMapping):
                    favorite_copy["isFavorite"] = True
                favorites.append(favorite_copy)
            logger.info(
                "Added to favorites list: %s",
                _label(record),
                extra={"event": events.FAVORITE_ADDED},
            )
        else:
            favorites = [fav for fav in favorites if identity_key(fav) != key]
            logger.info(
                "Removed from favorites list: %s",
                _label(record),
                extra={"event": events.FAVORITE_REMOVED},
            )

        await self._collections.save_many({FLATS_KEY: listings, FAVORITES_KEY: favorites})
        return SyncResult(
            key=key,
            is_favorite=value,
            listing_found=index is not None,
            favorites=favorites,
        )

    async def remove_favorite(
        self,
        record: Any,
        view: Sequence[Any] | None = None,
    ) -> SyncResult:
        """Handle the "Remove" button of the favorites view.

        Drops *record* from ``favoriteFlats`` and from *view* by identity key,
        and clears ``isFavorite`` on the first matching persisted
        ``renteaseFlats`` record, if any.

        Args:
            record: The favorite being removed.
            view: The favorites view's in-memory working copy.  Not mutated;
                the filtered list is returned in :attr:`SyncResult.view`.

        Returns:
            A :class:`SyncResult` describing what was written.
        """
        key = identity_key(record)

        favorites = [
            fav for fav in await self._collections.load(FAVORITES_KEY) if identity_key(fav) != key
        ]
        remaining_view = [item for item in (view or []) if identity_key(item) != key]

        listings = await self._collections.load(FLATS_KEY)
        index = _find_index(listings, key)
        to_save: dict[str, list[Any]] = {FAVORITES_KEY: favorites}
        if index is not None:
            listings[index]["isFavorite"] = False
            to_save[FLATS_KEY] = listings
        else:
            logger.warning(
                "No stored flat matches removed favorite %s",
                key,
                extra={"event": events.FAVORITE_LOOKUP_MISS},
            )

        await self._collections.save_many(to_save)
        logger.info(
            "Removed from favorites: %s",
            _label(record),
            extra={"event": events.FAVORITE_REMOVED},
        )
        return SyncResult(
            key=key,
            is_favorite=False,
            listing_found=index is not None,
            favorites=favorites,
            view=remaining_view,
        )
