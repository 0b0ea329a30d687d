"""Rentease filter criteria and filter engine.

Defines :class:`FilterCriteria`, the set of optional predicates a user can
apply to the flat table, and :func:`filter_flats`, which narrows a sequence
of flat records to the ones satisfying **all** supplied predicates.

Criteria
--------
* ``city``: case-insensitive substring of the record's ``city``.
* ``min_price`` / ``max_price``: inclusive bounds on ``price``.
* ``min_area`` / ``max_area``: inclusive bounds on ``area``.

Every criterion is optional (``None`` = no constraint).  When a bound is set,
a record whose field is missing or does not parse as a number is
**excluded**; unknown values are never a wildcard pass.  Inverted bounds
(``min > max``) are not rejected; they simply match nothing.

Filtering never reorders: the output is a subsequence of the input in the
original order, and re-filtering with the same criteria is a no-op.

Typical usage::

    from rentease.core.criteria import FilterCriteria, filter_flats

    criteria = FilterCriteria.from_inputs(city=" kel ", min_price="1000")
    visible = filter_flats(all_flats, criteria)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field

from rentease.core.numbers import parse_float

__all__ = ["FilterCriteria", "filter_flats"]

logger = logging.getLogger(__name__)


def _field_number(record: Any, name: str) -> float | None:
    if not isinstance(record, Mapping):
        return None
    return parse_float(record.get(name))


class FilterCriteria(BaseModel):
    """User-supplied filter values.  All bounds are inclusive.

    Attributes:
        city: Lower-cased, trimmed city substring; ``None`` = any city.
        min_price: Minimum price; ``None`` = no lower bound.
        max_price: Maximum price; ``None`` = no upper bound.
        min_area: Minimum area; ``None`` = no lower bound.
        max_area: Maximum area; ``None`` = no upper bound.
    """

    model_config = {"frozen": True}

    city: str | None = Field(None, description="Case-insensitive city substring.")
    min_price: float | None = Field(None, description="Inclusive lower price bound.")
    max_price: float | None = Field(None, description="Inclusive upper price bound.")
    min_area: float | None = Field(None, description="Inclusive lower area bound.")
    max_area: float | None = Field(None, description="Inclusive upper area bound.")

    # ------------------------------------------------------------------
    # Construction from raw form input
    # ------------------------------------------------------------------

    @classmethod
    def from_inputs(
        cls,
        *,
        city: str | None = None,
        min_price: object = None,
        max_price: object = None,
        min_area: object = None,
        max_area: object = None,
    ) -> FilterCriteria:
        """Build criteria from raw filter-field values.

        The city is trimmed and lower-cased; a blank city means no city
        filter.  Numeric inputs go through
        :func:`~rentease.core.numbers.parse_float`; anything unparsable
        leaves that bound unset instead of raising.
        """
        normalised_city = (city or "").strip().lower() or None
        return cls(
            city=normalised_city,
            min_price=parse_float(min_price),
            max_price=parse_float(max_price),
            min_area=parse_float(min_area),
            max_area=parse_float(max_area),
        )

    @property
    def is_empty(self) -> bool:
        """``True`` when no criterion is set."""
        return all(
            value is None
            for value in (self.city, self.min_price, self.max_price, self.min_area, self.max_area)
        )

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def matches_city(self, record: Any) -> bool:
        if self.city is None:
            return True
        city = record.get("city") if isinstance(record, Mapping) else None
        if not isinstance(city, str) or not city:
            return False
        return self.city.lower() in city.lower()

    def matches_price(self, record: Any) -> bool:
        return self._within(_field_number(record, "price"), self.min_price, self.max_price)

    def matches_area(self, record: Any) -> bool:
        return self._within(_field_number(record, "area"), self.min_area, self.max_area)

    @staticmethod
    def _within(value: float | None, low: float | None, high: float | None) -> bool:
        """Bounds check where an unknown value fails any active bound."""
        if low is None and high is None:
            return True
        if value is None:
            return False
        if low is not None and value < low:
            return False
        if high is not None and value > high:
            return False
        return True

    def matches(self, record: Any) -> tuple[bool, str]:
        """Evaluate every criterion against *record*.

        Returns:
            A ``(passed, reason)`` tuple; *reason* names the first failed
            criterion and is ``""`` on pass.
        """
        if not self.matches_city(record):
            return False, f"city does not contain {self.city!r}"
        if not self.matches_price(record):
            return False, f"price outside [{self.min_price}, {self.max_price}]"
        if not self.matches_area(record):
            return False, f"area outside [{self.min_area}, {self.max_area}]"
        return True, ""


def filter_flats(records: Iterable[Any], criteria: FilterCriteria) -> list[Any]:
    """Return the records that satisfy every criterion, in input order.

    Args:
        records: Flat records (typically the authoritative all-flats list).
        criteria: Active filter values.

    Returns:
        A new list; the input is not modified.
    """
    source = list(records)
    if criteria.is_empty:
        return source

    kept = [record for record in source if criteria.matches(record)[0]]
    logger.debug("Filter kept %d/%d flats (%s)", len(kept), len(source), criteria)
    return kept
