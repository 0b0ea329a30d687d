"""User accounts stored in the ``users`` collection.

:class:`UserRepository` covers registration, login, profile lookup / update
and the navbar greeting.  Older records may carry underscore-prefixed keys
(``_email``, ``_firstName``, ...); they are honoured on read and kept on
update so such records are never duplicated under the plain key.

Password policy: at least six characters including a letter, a digit and
one of ``!@#$%^&*()_+-=[]{};':"\\|,.<>/?~```.  Birth dates must put the user
between 18 and 120 years old.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, MutableMapping
from datetime import date
from typing import Any

from rentease.core import events
from rentease.core.exceptions import (
    AccountError,
    AuthenticationError,
    PasswordMismatchError,
    PasswordPolicyError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from rentease.core.models import User
from rentease.storage.collection_store import USERS_KEY, CollectionStore

__all__ = [
    "GUEST_NAME",
    "MAX_AGE_YEARS",
    "MIN_AGE_YEARS",
    "PASSWORD_PATTERN",
    "UserRepository",
    "birth_date_bounds",
    "check_password",
    "user_field",
]

logger = logging.getLogger(__name__)

PASSWORD_PATTERN = re.compile(
    r"""^(?=.*[a-zA-Z])(?=.*\d)(?=.*[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?~`]).{6,}$"""
)

MIN_AGE_YEARS: int = 18
MAX_AGE_YEARS: int = 120

GUEST_NAME: str = "Guest"


def check_password(password: str, confirm: str | None = None) -> None:
    """Raise if *password* breaks the policy or does not match *confirm*.

    Raises:
        PasswordPolicyError: Complexity requirements not met.
        PasswordMismatchError: *confirm* given and different.
    """
    if not PASSWORD_PATTERN.match(password):
        raise PasswordPolicyError()
    if confirm is not None and password != confirm:
        raise PasswordMismatchError()


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:  # 29 February
        return day.replace(year=day.year - years, day=28)


def birth_date_bounds(today: date | None = None) -> tuple[date, date]:
    """Return ``(earliest, latest)`` acceptable birth dates."""
    today = today or date.today()
    return _years_before(today, MAX_AGE_YEARS), _years_before(today, MIN_AGE_YEARS)


def _check_birth_date(birth_date: str, today: date | None) -> None:
    earliest, latest = birth_date_bounds(today)
    try:
        born = date.fromisoformat(birth_date)
    except ValueError as exc:
        raise AccountError(f"Invalid birth date {birth_date!r}.") from exc
    if not earliest <= born <= latest:
        raise AccountError(
            f"Birth date must be between {earliest.isoformat()} and {latest.isoformat()}."
        )


def user_field(record: Any, name: str) -> Any:
    """Read *name* from a user record, preferring the legacy ``_name`` key."""
    if not isinstance(record, Mapping):
        return None
    legacy = record.get(f"_{name}")
    return legacy if legacy else record.get(name)


def _set_user_field(record: MutableMapping[str, Any], name: str, value: Any) -> None:
    if f"_{name}" in record:
        record[f"_{name}"] = value
    else:
        record[name] = value


def _is_user(record: Any, email: str) -> bool:
    return isinstance(record, Mapping) and email in (record.get("_email"), record.get("email"))


class UserRepository:
    """Data-access object for the ``users`` collection.

    Args:
        collections: Collection store over ``local_storage``.
    """

    def __init__(self, collections: CollectionStore) -> None:
        self._collections = collections

    async def find(self, email: str) -> dict[str, Any] | None:
        """Return the stored record for *email*, or ``None``."""
        for record in await self._collections.load(USERS_KEY):
            if _is_user(record, email):
                return record
        return None

    async def register(
        self,
        user: User,
        *,
        confirm_password: str,
        today: date | None = None,
    ) -> dict[str, Any]:
        """Append a new account and return its stored record.

        Raises:
            PasswordPolicyError: Password too weak.
            PasswordMismatchError: Confirmation differs.
            AccountError: Birth date outside the accepted window.
            UserAlreadyExistsError: Email already registered.
        """
        check_password(user.password, confirm_password)
        _check_birth_date(user.birth_date, today)

        users = await self._collections.load(USERS_KEY)
        if any(isinstance(record, Mapping) and record.get("email") == user.email for record in users):
            raise UserAlreadyExistsError(user.email)

        record = user.to_record()
        users.append(record)
        await self._collections.save(USERS_KEY, users)
        logger.info("Registered user %s", user.email, extra={"event": events.USER_REGISTERED})
        return record

    async def authenticate(self, email: str, password: str) -> dict[str, Any]:
        """Return the user matching the trimmed *email* / *password*.

        Raises:
            AuthenticationError: Blank input or no matching user.
        """
        email, password = email.strip(), password.strip()
        if email and password:
            for record in await self._collections.load(USERS_KEY):
                if (
                    isinstance(record, Mapping)
                    and record.get("email") == email
                    and record.get("password") == password
                ):
                    return record
        logger.info(
            "Login failed: Invalid email or password.",
            extra={"event": events.USER_LOGIN_FAILED},
        )
        raise AuthenticationError()

    async def update_profile(
        self,
        email: str,
        *,
        first_name: str,
        last_name: str,
        birth_date: str,
        password: str,
        today: date | None = None,
    ) -> dict[str, Any]:
        """Overwrite the editable profile fields of *email*'s record.

        Raises:
            PasswordPolicyError: New password too weak.
            AccountError: Birth date outside the accepted window.
            UserNotFoundError: No record for *email*.
        """
        check_password(password)
        _check_birth_date(birth_date, today)

        users = await self._collections.load(USERS_KEY)
        record = next((r for r in users if _is_user(r, email)), None)
        if record is None:
            raise UserNotFoundError(email)

        _set_user_field(record, "firstName", first_name)
        _set_user_field(record, "lastName", last_name)
        _set_user_field(record, "birthDate", birth_date)
        _set_user_field(record, "password", password)
        await self._collections.save(USERS_KEY, users)
        logger.info("Profile updated for %s", email, extra={"event": events.PROFILE_UPDATED})
        return record

    async def greeting_name(self, email: str | None) -> str:
        """Navbar greeting: first name, else the email, else ``"Guest"``."""
        if not email:
            return GUEST_NAME
        record = await self.find(email)
        return user_field(record, "firstName") or email
