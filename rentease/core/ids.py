"""Composite identity key for flat records.

Flats have no generated primary key.  The only notion of "the same flat" is
the **identity key**: the ordered tuple of five fields

    (city, street, number, area, yearBuilt)

taken from the record as stored.  The key correlates a flat across the two
separately persisted collections (``renteaseFlats`` and ``favoriteFlats``).

Identity contract
-----------------
* Values are compared exactly as stored: case-sensitive, untrimmed, and
  type-sensitive (``"60"`` and ``60`` are different keys).  Numbers are
  written the way JSON in a browser writes them: an integral float equals
  the integer (``60.0`` and ``60`` are the same key) and a non-finite float
  is written as ``null``.
* A field that is absent from the record is omitted from the canonical form.
  Two records both lacking ``yearBuilt`` therefore still match on that
  field, but an absent field never matches an explicit ``null``.
* The key is **not** unique by construction.  Two distinct real flats with
  the same city / street / number / area / year collide and are treated as
  one.  This is an accepted limitation of the persisted format.

Typical usage::

    from rentease.core.ids import identity_key, same_flat

    key = identity_key(record)   # '{"city":"Kelowna","street":...}'
    if same_flat(record, other):
        ...
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any

__all__ = [
    "IDENTITY_FIELDS",
    "core_properties",
    "identity_key",
    "same_flat",
]

logger = logging.getLogger(__name__)

#: The identity fields, in canonical order.
IDENTITY_FIELDS: tuple[str, ...] = ("city", "street", "number", "area", "yearBuilt")


def _canonical(value: Any) -> Any:
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return int(value)
    return value


def core_properties(record: Any) -> dict[str, Any]:
    """Return the identity fields of *record* in canonical order.

    Absent fields are left out of the result.  Numeric values are written
    in their JSON form, so an integral float becomes an ``int``.  A *record* that is not a
    mapping at all (a malformed persisted entry) has no identity fields.

    Args:
        record: A flat record as loaded from storage.

    Returns:
        An ordered ``dict`` holding at most the five identity fields.
    """
    if not isinstance(record, Mapping):
        return {}
    return {name: _canonical(record[name]) for name in IDENTITY_FIELDS if name in record}


def identity_key(record: Any) -> str:
    """Return the canonical, hashable identity key of *record*.

    The key is the compact JSON serialisation of :func:`core_properties`, so
    two records are the same flat iff their keys are equal strings.

    Example::

        >>> identity_key({"city": "Vernon", "street": "Main", "number": "5",
        ...               "area": "45", "yearBuilt": "1999", "price": "900"})
        '{"city":"Vernon","street":"Main","number":"5","area":"45","yearBuilt":"1999"}'
    """
    return json.dumps(
        core_properties(record),
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def same_flat(a: Any, b: Any) -> bool:
    """Return ``True`` if *a* and *b* share the same identity key."""
    return identity_key(a) == identity_key(b)
