"""Display-ready rows for the flat tables.

Turns an already filtered and sorted sequence of flat records into
:class:`FlatRow` objects (one per record) or, when there is nothing to show,
a single :class:`PlaceholderRow`.  Markup is left to the front-end; this
module only fixes *what* is shown and in which column.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from rentease.core.ids import identity_key
from rentease.core.sorting import SortKey, SortState

__all__ = [
    "COLUMNS",
    "COLUMN_COUNT",
    "EMPTY_FAVORITES_MESSAGE",
    "EMPTY_FLATS_MESSAGE",
    "PLACEHOLDER",
    "ControlKind",
    "FlatRow",
    "PlaceholderRow",
    "column_headers",
    "format_cell",
    "render_rows",
]

logger = logging.getLogger(__name__)

#: Header labels, in display order.  The last column holds the favorite control.
COLUMNS: tuple[str, ...] = (
    "City",
    "Street",
    "Number",
    "Area",
    "AC",
    "Year Built",
    "Price",
    "Available Date",
    "Favorite",
)
COLUMN_COUNT: int = len(COLUMNS)

#: Shown for a missing or ``null`` field.
PLACEHOLDER: str = "N/A"

EMPTY_FLATS_MESSAGE: str = "No flats match the current filters or no flats available."
EMPTY_FAVORITES_MESSAGE: str = "You have no favorite flats yet."

_SORTABLE_HEADERS: dict[str, SortKey] = {
    "City": SortKey.CITY,
    "Price": SortKey.PRICE,
    "Area": SortKey.AREA,
}


class ControlKind(StrEnum):
    """Favorite control shown in the last column."""

    CHECKBOX = "checkbox"  # all-flats view: toggles the favorite flag
    REMOVE = "remove"  # favorites view: "Remove" button


@dataclass(frozen=True, slots=True)
class FlatRow:
    """One table row.

    Attributes:
        cells: The eight data cells, already formatted as text.
        control: Which favorite control to draw.
        checked: Checkbox state (``isFavorite``); ignored for ``REMOVE``.
        key: Identity key, so the front-end can route control events.
        record: The underlying record the control acts on.
    """

    cells: tuple[str, ...]
    control: ControlKind
    checked: bool
    key: str
    record: Any


@dataclass(frozen=True, slots=True)
class PlaceholderRow:
    """Single informational row shown when there are no flats."""

    message: str
    colspan: int = COLUMN_COUNT


def format_cell(value: Any) -> str:
    """Render one field value as table text."""
    if value is None:
        return PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def _row(record: Any, control: ControlKind) -> FlatRow:
    fields = record if isinstance(record, Mapping) else {}
    values = (
        fields.get("city"),
        fields.get("street"),
        fields.get("number"),
        fields.get("area"),
        "Yes" if fields.get("ac") else "No",
        fields.get("yearBuilt"),
        fields.get("price"),
        fields.get("availableDate"),
    )
    return FlatRow(
        cells=tuple(format_cell(value) for value in values),
        control=control,
        checked=bool(fields.get("isFavorite", False)),
        key=identity_key(record),
        record=record,
    )


def render_rows(
    records: Iterable[Any],
    *,
    control: ControlKind = ControlKind.CHECKBOX,
    empty_message: str = EMPTY_FLATS_MESSAGE,
) -> list[FlatRow] | list[PlaceholderRow]:
    """Return one :class:`FlatRow` per record, or a single placeholder row."""
    rows = [_row(record, control) for record in records]
    if not rows:
        logger.debug("No flats to display.")
        return [PlaceholderRow(message=empty_message)]
    return rows


def column_headers(sort_state: SortState) -> list[str]:
    """Header labels with the sort indicator on the active sortable column."""
    return [
        label + sort_state.indicator(_SORTABLE_HEADERS[label]) if label in _SORTABLE_HEADERS else label
        for label in COLUMNS
    ]
