"""Core domain models, filter / sort / identity logic, settings and logging."""

from rentease.core.criteria import FilterCriteria, filter_flats
from rentease.core.exceptions import (
    AccountError,
    AuthenticationError,
    ConfigError,
    FlatAlreadyExistsError,
    PasswordMismatchError,
    PasswordPolicyError,
    RenteaseError,
    SessionError,
    SessionExpiredError,
    SessionMissingError,
    StorageError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from rentease.core.ids import core_properties, identity_key, same_flat
from rentease.core.logging_config import JsonFormatter, configure_logging, new_action
from rentease.core.models import Flat, FlatRecord, User
from rentease.core.settings import Settings
from rentease.core.sorting import SortKey, SortOrder, SortState, sort_flats

__all__ = [
    # Logging
    "configure_logging",
    "new_action",
    "JsonFormatter",
    # Domain models
    "Flat",
    "FlatRecord",
    "User",
    # Settings
    "Settings",
    # Identity
    "core_properties",
    "identity_key",
    "same_flat",
    # Filter / sort
    "FilterCriteria",
    "filter_flats",
    "SortKey",
    "SortOrder",
    "SortState",
    "sort_flats",
    # Exceptions: base
    "RenteaseError",
    # Exceptions: config
    "ConfigError",
    # Exceptions: storage
    "StorageError",
    "FlatAlreadyExistsError",
    # Exceptions: accounts
    "AccountError",
    "UserAlreadyExistsError",
    "AuthenticationError",
    "PasswordPolicyError",
    "PasswordMismatchError",
    "UserNotFoundError",
    # Exceptions: session
    "SessionError",
    "SessionMissingError",
    "SessionExpiredError",
]
