"""Rentease exception taxonomy.

Every custom exception inherits from :class:`RenteaseError`.  Exceptions are
organised by architectural layer so callers can catch at the right granularity:

    Layer hierarchy
    ---------------
    RenteaseError
    ├── ConfigError
    ├── StorageError
    │   └── FlatAlreadyExistsError
    ├── AccountError
    │   ├── UserAlreadyExistsError
    │   ├── AuthenticationError
    │   ├── PasswordPolicyError
    │   ├── PasswordMismatchError
    │   └── UserNotFoundError
    └── SessionError
        ├── SessionMissingError
        └── SessionExpiredError

The filter / sort / identity / render functions in :mod:`rentease.core` never
raise: parse failures fall back to empty collections and numeric coercion
failures fall back to "unset" or zero.  The classes below are only raised at
the edges (registration, accounts, session precondition).

Usage:

    from rentease.core.exceptions import FlatAlreadyExistsError

    raise FlatAlreadyExistsError(identity_key(record))
"""

from __future__ import annotations

import logging

__all__ = [
    "RenteaseError",
    # Config
    "ConfigError",
    # Storage
    "StorageError",
    "FlatAlreadyExistsError",
    # Accounts
    "AccountError",
    "UserAlreadyExistsError",
    "AuthenticationError",
    "PasswordPolicyError",
    "PasswordMismatchError",
    "UserNotFoundError",
    # Session
    "SessionError",
    "SessionMissingError",
    "SessionExpiredError",
]

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class RenteaseError(Exception):
    """Root exception for all Rentease errors.

    Catch this to handle any application-level error uniformly.  Prefer
    catching layer-specific subclasses wherever possible.
    """


# ---------------------------------------------------------------------------
# Config layer
# ---------------------------------------------------------------------------


class ConfigError(RenteaseError):
    """Raised when the application configuration is invalid or incomplete."""


# ---------------------------------------------------------------------------
# Storage layer
# ---------------------------------------------------------------------------


class StorageError(RenteaseError):
    """Raised when a persistence operation fails."""


class FlatAlreadyExistsError(StorageError):
    """Raised when registering a flat whose identity key is already stored.

    Args:
        key: Canonical identity key of the conflicting flat.
    """

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            "A flat with these core details (City, Street, Number, Area, "
            f"Year Built) already exists: {key}"
        )


# ---------------------------------------------------------------------------
# Accounts layer
# ---------------------------------------------------------------------------


class AccountError(RenteaseError):
    """Base class for user registration, login and profile errors."""


class UserAlreadyExistsError(AccountError):
    """Raised when registering an email address that already has an account.

    Args:
        email: The conflicting email address.
    """

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"An account with this email address already exists: {email!r}")


class AuthenticationError(AccountError):
    """Raised when an email / password pair does not match any stored user."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password.")


class PasswordPolicyError(AccountError):
    """Raised when a password does not meet the complexity requirements."""

    def __init__(self) -> None:
        super().__init__(
            "Password does not meet complexity requirements "
            "(letters, numbers, special char, min 6)."
        )


class PasswordMismatchError(AccountError):
    """Raised when the password confirmation does not match."""

    def __init__(self) -> None:
        super().__init__("Passwords do not match.")


class UserNotFoundError(AccountError):
    """Raised when a profile operation targets an unknown email.

    Args:
        email: The email address that was looked up.
    """

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"User not found: {email!r}")


# ---------------------------------------------------------------------------
# Session layer
# ---------------------------------------------------------------------------


class SessionError(RenteaseError):
    """Precondition failure: no valid session.

    Raised by the view controllers *before* any filter / sort / favorite logic
    runs.  Callers should send the user back to the login step.
    """


class SessionMissingError(SessionError):
    """Raised when no user is logged in or the login timestamp is absent."""


class SessionExpiredError(SessionError):
    """Raised when the login timestamp is older than the session window.

    Args:
        age_ms: Age of the session in milliseconds.
        limit_ms: Configured session window in milliseconds.
    """

    def __init__(self, age_ms: int, limit_ms: int) -> None:
        self.age_ms = age_ms
        self.limit_ms = limit_ms
        super().__init__(
            f"Your session has expired ({age_ms} ms old, limit {limit_ms} ms). "
            "Please log in again."
        )
