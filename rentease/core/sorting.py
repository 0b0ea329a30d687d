"""Sort engine for flat records.

Orders a sequence of flat records by one field in one direction.

Comparison semantics
--------------------
* ``price`` and ``area`` compare as floats; a value that does not parse
  sorts as ``0`` (so a price of ``"abc"`` sorts as if the flat were free).
* Every other field compares case-insensitively as text.  Non-string values
  are compared by their string form; missing / ``null`` values as ``""``.

The sort is stable in both directions, so ties keep their input order and
fixtures are reproducible.  With no sort field the input order is returned
unchanged.

:class:`SortState` captures the column-header behaviour: clicking the active
column flips the direction, clicking another column sorts it ascending.

Typical usage::

    from rentease.core.sorting import SortOrder, SortState, sort_flats

    state = SortState().toggle("price")          # price ascending
    state = state.toggle("price")                # price descending
    ordered = sort_flats(flats, state.sort_by, state.order)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any

from rentease.core.numbers import sort_number

__all__ = [
    "NUMERIC_SORT_FIELDS",
    "SORT_INDICATORS",
    "SortKey",
    "SortOrder",
    "SortState",
    "sort_flats",
    "sort_value",
]

logger = logging.getLogger(__name__)


class SortKey(StrEnum):
    """Sortable columns exposed in the table header."""

    CITY = "city"
    PRICE = "price"
    AREA = "area"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


#: Fields compared numerically; everything else compares as text.
NUMERIC_SORT_FIELDS: frozenset[str] = frozenset({SortKey.PRICE, SortKey.AREA})

#: Suffix appended to the active column header.
SORT_INDICATORS: dict[SortOrder, str] = {
    SortOrder.ASC: " ▲",
    SortOrder.DESC: " ▼",
}


def sort_value(record: Any, field: str) -> float | str:
    """Return the comparison value of *record* for *field*."""
    value = record.get(field) if isinstance(record, Mapping) else None
    if field in NUMERIC_SORT_FIELDS:
        return sort_number(value)
    if value is None:
        return ""
    if isinstance(value, str):
        return value.lower()
    return str(value).lower()


def sort_flats(
    records: Iterable[Any],
    sort_by: str | None,
    order: SortOrder | str = SortOrder.ASC,
) -> list[Any]:
    """Return a new list of *records* ordered by *sort_by*.

    Args:
        records: Flat records to order.
        sort_by: Field name (one of :class:`SortKey` or any other field), or
            ``None`` for no reordering.
        order: ``"asc"`` or ``"desc"``.  Unknown values sort ascending.

    Returns:
        A new list; the input is not modified.
    """
    source = list(records)
    if not sort_by:
        return source

    descending = str(order) == SortOrder.DESC
    ordered = sorted(source, key=lambda record: sort_value(record, sort_by), reverse=descending)
    logger.debug("Sorted %d flats by %s %s", len(ordered), sort_by, "desc" if descending else "asc")
    return ordered


@dataclass(frozen=True, slots=True)
class SortState:
    """Current sort column and direction of a table view.

    Attributes:
        sort_by: Active sort field, or ``None`` for input order.
        order: Direction for :attr:`sort_by`.
    """

    sort_by: str | None = None
    order: SortOrder = SortOrder.ASC

    def toggle(self, field: str) -> SortState:
        """Return the state after the user clicks the *field* header."""
        if self.sort_by == field:
            flipped = SortOrder.DESC if self.order == SortOrder.ASC else SortOrder.ASC
            return replace(self, order=flipped)
        return SortState(sort_by=field, order=SortOrder.ASC)

    def reset(self) -> SortState:
        return SortState()

    def indicator(self, field: str) -> str:
        """Header suffix for *field*: ``" ▲"``, ``" ▼"`` or ``""``."""
        if self.sort_by != field:
            return ""
        return SORT_INDICATORS[self.order]

    def apply(self, records: Iterable[Any]) -> list[Any]:
        return sort_flats(records, self.sort_by, self.order)
