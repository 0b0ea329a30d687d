"""New-flat form: city options and flat registration."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from rentease.accounts.session import SessionManager
from rentease.core.models import Flat
from rentease.storage.collection_store import CollectionStore
from rentease.storage.repository import FlatRepository

__all__ = ["NewFlatForm", "load_city_options"]

logger = logging.getLogger(__name__)


def load_city_options(path: Path | str) -> list[str]:
    """Read the city dropdown options from a JSON array file.

    Names are stripped; blanks and non-strings are dropped; the result is
    de-duplicated and sorted.  A missing or malformed file yields ``[]``.
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError, RecursionError) as exc:
        logger.warning("Error loading cities from %s: %s", path, exc)
        return []
    if not isinstance(data, list) or not data:
        logger.warning("No cities found in %s or it is not a valid array.", path)
        return []
    return sorted({name.strip() for name in data if isinstance(name, str) and name.strip()})


class NewFlatForm:
    """Controller for the "add a flat" form.

    Args:
        repo: Flat repository the form writes to.
        email: The logged-in user.
        cities: City dropdown options.
    """

    def __init__(self, repo: FlatRepository, *, email: str, cities: list[str] | None = None) -> None:
        self._repo = repo
        self.email = email
        self.cities = cities or []

    @classmethod
    async def open(
        cls,
        collections: CollectionStore,
        session: SessionManager,
        *,
        cities_path: Path | str | None = None,
        at_ms: int | None = None,
    ) -> NewFlatForm:
        """Validate the session and load the city options.

        Raises:
            SessionError: No valid session.
        """
        email = await session.validate(at_ms=at_ms)
        cities = load_city_options(cities_path) if cities_path else []
        return cls(FlatRepository(collections), email=email, cities=cities)

    async def submit(self, **fields: Any) -> str:
        """Validate the form fields and register the flat.

        Args:
            **fields: ``city``, ``street``, ``number``, ``area``, ``ac``,
                ``yearBuilt`` (or ``year_built``), ``price``,
                ``availableDate`` (or ``available_date``).

        Returns:
            The identity key of the new flat.

        Raises:
            pydantic.ValidationError: A field is missing or malformed.
            FlatAlreadyExistsError: Same identity key already registered.
        """
        flat = Flat.model_validate(fields)
        return await self._repo.insert(flat)
