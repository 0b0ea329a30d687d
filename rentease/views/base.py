"""Shared behaviour of the two flat tables (all flats, favorites).

A :class:`TableView` owns one :class:`~rentease.core.pipeline.ViewState` and
re-renders the whole table after every action.  Subclasses only decide which
collection the state is loaded from and what the favorite control does.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rentease.core import events
from rentease.core.criteria import FilterCriteria
from rentease.core.ids import identity_key
from rentease.core.pipeline import RenderedTable, ViewState, render, visible_flats
from rentease.core.sorting import SortState

__all__ = ["TableView"]

logger = logging.getLogger(__name__)


class TableView:
    """Filter / sort / render controller over an in-memory list of flats.

    Args:
        state: Initial view state; its ``listings`` list is the view's
            working copy.
        email: The logged-in user the view was opened for.
    """

    name: str = "table"

    def __init__(self, state: ViewState, *, email: str) -> None:
        self._state = state
        self.email = email

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def listings(self) -> list[Any]:
        return self._state.listings

    def table(self) -> RenderedTable:
        """Recompute filter → sort → render for the current state."""
        table = render(self._state)
        logger.debug(
            "%s view rendered %d rows",
            self.name,
            0 if table.is_empty else len(table.rows),
            extra={"event": events.VIEW_RENDERED},
        )
        return table

    def visible(self) -> list[Any]:
        """The records currently shown, in display order."""
        return visible_flats(self._state)

    def apply_filters(self, criteria: FilterCriteria) -> RenderedTable:
        self._state = self._state.with_criteria(criteria)
        return self.table()

    def sort_by(self, field: str) -> RenderedTable:
        """Header click: sort by *field*, flipping direction on a repeat click."""
        self._state = self._state.with_sort(self._state.sort.toggle(field))
        logger.debug("Sorting by: %s, Order: %s", self._state.sort.sort_by, self._state.sort.order)
        return self.table()

    def apply_sort(self, sort: SortState) -> RenderedTable:
        """Set the sort column and direction directly."""
        self._state = self._state.with_sort(sort)
        return self.table()

    def reset(self) -> RenderedTable:
        """Clear every filter and the sort column."""
        self._state = self._state.with_criteria(FilterCriteria()).with_sort(
            self._state.sort.reset()
        )
        return self.table()

    def find(self, identity: Mapping[str, Any]) -> Any | None:
        """First record in the working copy with the identity of *identity*."""
        key = identity_key(identity)
        return next((record for record in self.listings if identity_key(record) == key), None)
