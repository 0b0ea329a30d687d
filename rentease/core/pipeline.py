"""Filter → sort → render, as a pure function of an explicit view state.

Every user action (filter click, sort click, favorite toggle, reset) ends in
a full recomputation from the authoritative in-memory list held by the view;
nothing is patched incrementally.  :class:`ViewState` bundles everything the
computation needs so that

    render(state) == render_rows(sort(filter(state.listings, criteria), sort_by, order))

with no module-level mutable state involved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any

from rentease.core.criteria import FilterCriteria, filter_flats
from rentease.core.render import (
    EMPTY_FLATS_MESSAGE,
    ControlKind,
    FlatRow,
    PlaceholderRow,
    column_headers,
    render_rows,
)
from rentease.core.sorting import SortState, sort_flats

__all__ = ["RenderedTable", "ViewState", "render", "visible_flats"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ViewState:
    """Inputs of one table render.

    Attributes:
        listings: The records the view is built from.  The list object is
            shared with the owning view so favorite toggles are visible.
        criteria: Active filters.
        sort: Active sort column and direction.
        control: Favorite control to draw on each row.
        empty_message: Text of the placeholder row.
    """

    listings: list[Any] = field(default_factory=list)
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortState = field(default_factory=SortState)
    control: ControlKind = ControlKind.CHECKBOX
    empty_message: str = EMPTY_FLATS_MESSAGE

    def with_criteria(self, criteria: FilterCriteria) -> ViewState:
        return replace(self, criteria=criteria)

    def with_sort(self, sort: SortState) -> ViewState:
        return replace(self, sort=sort)


@dataclass(frozen=True, slots=True)
class RenderedTable:
    """Result of :func:`render`: header labels plus body rows."""

    headers: list[str]
    rows: list[FlatRow] | list[PlaceholderRow]

    @property
    def is_empty(self) -> bool:
        return len(self.rows) == 1 and isinstance(self.rows[0], PlaceholderRow)


def visible_flats(state: ViewState) -> list[Any]:
    """Filtered then sorted records of *state*."""
    return sort_flats(
        filter_flats(state.listings, state.criteria),
        state.sort.sort_by,
        state.sort.order,
    )


def render(state: ViewState) -> RenderedTable:
    """Recompute the whole table for *state*."""
    records = visible_flats(state)
    table = RenderedTable(
        headers=column_headers(state.sort),
        rows=render_rows(records, control=state.control, empty_message=state.empty_message),
    )
    logger.debug(
        "Rendered %d/%d flats (sort=%s %s)",
        len(records),
        len(state.listings),
        state.sort.sort_by,
        state.sort.order,
    )
    return table
