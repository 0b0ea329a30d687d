"""All-flats view: browse, filter, sort and toggle favorites.

Typical usage::

    view = await FlatsView.open(collections, session)   # SessionError if logged out
    view.apply_filters(FilterCriteria.from_inputs(min_price="1000"))
    view.sort_by("price")
    table = await view.toggle_favorite(record, True)
"""

from __future__ import annotations

import logging
from typing import Any

from rentease.accounts.session import SessionManager
from rentease.core.favorites import FavoriteSynchronizer, SyncResult
from rentease.core.pipeline import RenderedTable, ViewState
from rentease.core.render import EMPTY_FLATS_MESSAGE, ControlKind
from rentease.storage.collection_store import FLATS_KEY, CollectionStore
from rentease.views.base import TableView

__all__ = ["FlatsView"]

logger = logging.getLogger(__name__)


class FlatsView(TableView):
    """Controller for the table of every registered flat.

    The view's ``listings`` is the authoritative in-memory copy of
    ``renteaseFlats``; favorite toggles mutate it in place and persist it.
    """

    name = "flats"

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
    ) -> FlatsView:
        """Validate the session, then load ``renteaseFlats``.

        Raises:
            SessionError: No valid session; nothing is loaded.
        """
        email = await session.validate(at_ms=at_ms)
        listings = await collections.load(FLATS_KEY)
        logger.debug("Loaded %d flats for %s", len(listings), email)
        state = ViewState(
            listings=listings,
            control=ControlKind.CHECKBOX,
            empty_message=EMPTY_FLATS_MESSAGE,
        )
        return cls(state, email=email, synchronizer=FavoriteSynchronizer(collections))

    async def toggle_favorite(self, record: Any, checked: bool) -> RenderedTable:
        """Favorite checkbox changed on *record*'s row; re-render afterwards."""
        self.last_sync = await self._synchronizer.set_favorite(self.listings, record, checked)
        return self.table()
