"""Favorites view: the user's favorited flats with a "Remove" action.

The working copy is loaded from ``favoriteFlats``.  Filters and sorting work
exactly as on the all-flats view.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from rentease.accounts.session import SessionManager
from rentease.core.favorites import FavoriteSynchronizer, SyncResult
from rentease.core.pipeline import RenderedTable, ViewState
from rentease.core.render import EMPTY_FAVORITES_MESSAGE, ControlKind
from rentease.storage.collection_store import FAVORITES_KEY, CollectionStore
from rentease.views.base import TableView

__all__ = ["FavoritesView"]

logger = logging.getLogger(__name__)


class FavoritesView(TableView):
    """Controller for the favorites table."""

    name = "favorites"

    def __init__(self, state: ViewState, *, email: str, synchronizer: FavoriteSynchronizer) -> None:
        super().__init__(state, email=email)
        self._synchronizer = synchronizer
        self.last_sync: SyncResult | None = None

    @classmethod
    async def open(
        cls,
        collections: CollectionStore,
        session: SessionManager,
        *,
        at_ms: int | None = None,
    ) -> FavoritesView:
        """Validate the session, then load ``favoriteFlats``.

        Raises:
            SessionError: No valid session; nothing is loaded.
        """
        email = await session.validate(at_ms=at_ms)
        favorites = await collections.load(FAVORITES_KEY)
        logger.debug("Loaded %d favorites for %s", len(favorites), email)
        state = ViewState(
            listings=favorites,
            control=ControlKind.REMOVE,
            empty_message=EMPTY_FAVORITES_MESSAGE,
        )
        return cls(state, email=email, synchronizer=FavoriteSynchronizer(collections))

    async def remove(self, record: Any) -> RenderedTable:
        """Handle the "Remove" button on *record*'s row; re-render afterwards."""
        result = await self._synchronizer.remove_favorite(record, self.listings)
        self.last_sync = result
        self._state = replace(self._state, listings=result.view)
        return self.table()
