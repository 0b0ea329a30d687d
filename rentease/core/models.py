"""Rentease domain models.

Two layers of representation coexist on purpose:

* **Records**: the plain JSON mappings found in storage
  (``dict[str, Any]``).  The filter, sort, identity, favorite and render code
  works on records directly so that whatever was persisted passes through
  un-validated; a malformed entry only ever causes a lookup miss.
* **Models**: :class:`Flat` and :class:`User` validate *user input* at the
  moment a flat or account is created, then serialise to exactly the JSON
  shape the records use (camelCase keys).

Typical usage::

    from rentease.core.models import Flat

    flat = Flat(
        city="Kelowna",
        street="Bernard Ave",
        number="12",
        area="60",
        ac=True,
        yearBuilt="2005",
        price="1500",
        availableDate="2026-11-01",
    )
    record = flat.to_record()
    # {"city": "Kelowna", ..., "availableDate": "2026-11-01"}
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rentease.core.numbers import parse_float

__all__ = [
    "FlatRecord",
    "Flat",
    "User",
]

logger = logging.getLogger(__name__)

#: A flat as persisted in ``renteaseFlats`` / ``favoriteFlats``.
FlatRecord = dict[str, Any]

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# ---------------------------------------------------------------------------
# Flat
# ---------------------------------------------------------------------------


class Flat(BaseModel):
    """A rental flat as entered on the "new flat" form.

    Numeric fields (``area``, ``yearBuilt``, ``price``) are kept as strings
    because that is how they are persisted; numbers passed in are converted
    to their string form.  ``isFavorite`` is left unset on creation and is
    only written by the favorite synchronizer.

    Attributes:
        city: City name, usually chosen from the city options list.
        street: Street name.
        number: Street number (string; may contain letters, e.g. ``"12B"``).
        area: Floor area in m², numeric string.
        ac: Whether the flat has air conditioning.
        year_built: Construction year, numeric string (alias ``yearBuilt``).
        price: Monthly rent, numeric string.
        available_date: ISO date the flat becomes available
            (alias ``availableDate``).
        is_favorite: Favorite flag (alias ``isFavorite``); ``None`` = never
            toggled.
    """

    model_config = ConfigDict(populate_by_name=True)

    city: str = Field(..., min_length=1)
    street: str = Field(..., min_length=1)
    number: str = Field(..., min_length=1)
    area: str
    ac: bool = False
    year_built: str = Field(..., alias="yearBuilt")
    price: str
    available_date: str = Field(..., alias="availableDate")
    is_favorite: bool | None = Field(None, alias="isFavorite")

    @field_validator("number", "area", "year_built", "price", mode="before")
    @classmethod
    def _numbers_to_str(cls, v: object) -> object:
        """Store numeric input the way a form would: as its string form."""
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("area", "price")
    @classmethod
    def _non_negative_number(cls, v: str) -> str:
        number = parse_float(v)
        if number is None or number < 0:
            raise ValueError(f"must be a non-negative number, got {v!r}")
        return v

    @field_validator("year_built")
    @classmethod
    def _year(cls, v: str) -> str:
        if not re.fullmatch(r"\d{4}", v.strip()):
            raise ValueError(f"yearBuilt must be a four-digit year, got {v!r}")
        return v

    @field_validator("available_date")
    @classmethod
    def _iso_date(cls, v: str) -> str:
        try:
            date.fromisoformat(v)
        except ValueError as exc:
            raise ValueError(f"availableDate must be an ISO date (YYYY-MM-DD), got {v!r}") from exc
        return v

    def to_record(self) -> FlatRecord:
        """Serialise to the persisted camelCase JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


class User(BaseModel):
    """A registered account as stored in the ``users`` collection.

    The password policy and birth-date window are enforced by
    :mod:`rentease.accounts.users`, not here, because profile updates apply
    them to partially-known records as well.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str
    password: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    birth_date: str = Field(..., alias="birthDate")

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str) -> str:
        if not _EMAIL_RE.match(v):
            raise ValueError(f"invalid email address: {v!r}")
        return v

    @field_validator("birth_date")
    @classmethod
    def _iso_birth_date(cls, v: str) -> str:
        try:
            date.fromisoformat(v)
        except ValueError as exc:
            raise ValueError(f"birthDate must be an ISO date (YYYY-MM-DD), got {v!r}") from exc
        return v

    def to_record(self) -> dict[str, Any]:
        """Serialise to the persisted camelCase JSON shape."""
        return self.model_dump(by_alias=True)
