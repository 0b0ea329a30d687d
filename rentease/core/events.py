"""Structured log event name constants for Rentease.

Every state transition worth grepping for emits a log record with an
``event`` field (``extra={"event": events.X}``).  In ``LOG_FORMAT=json`` mode
the value surfaces under ``extra.event``; in text mode the message itself is
self-describing.

Usage example::

    import logging
    from rentease.core import events

    logger = logging.getLogger(__name__)

    logger.info("Added to favorites list: %s", city, extra={"event": events.FAVORITE_ADDED})
"""

from __future__ import annotations

__all__ = [
    # Storage
    "COLLECTION_PARSE_ERROR",
    # Flats
    "FLAT_REGISTERED",
    "FLAT_DUPLICATE",
    # Favorites
    "FAVORITE_ADDED",
    "FAVORITE_REMOVED",
    "FAVORITE_LOOKUP_MISS",
    # Session
    "SESSION_VALID",
    "SESSION_MISSING",
    "SESSION_EXPIRED",
    # Accounts
    "USER_REGISTERED",
    "USER_LOGIN",
    "USER_LOGIN_FAILED",
    "USER_LOGOUT",
    "PROFILE_UPDATED",
    # Views
    "VIEW_RENDERED",
]

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

#: A persisted collection was not valid JSON (or not an array); treated as empty.
COLLECTION_PARSE_ERROR: str = "COLLECTION_PARSE_ERROR"

# ---------------------------------------------------------------------------
# Flats
# ---------------------------------------------------------------------------

#: A new flat was appended to ``renteaseFlats``.
FLAT_REGISTERED: str = "FLAT_REGISTERED"

#: Registration rejected because the identity key already exists.
FLAT_DUPLICATE: str = "FLAT_DUPLICATE"

# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------

#: A flat copy was inserted into ``favoriteFlats`` (or was already present).
FAVORITE_ADDED: str = "FAVORITE_ADDED"

#: Every record matching an identity key was dropped from ``favoriteFlats``.
FAVORITE_REMOVED: str = "FAVORITE_REMOVED"

#: The synchronizer found no All-Listings record for an identity key.
FAVORITE_LOOKUP_MISS: str = "FAVORITE_LOOKUP_MISS"

# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------

SESSION_VALID: str = "SESSION_VALID"
SESSION_MISSING: str = "SESSION_MISSING"
SESSION_EXPIRED: str = "SESSION_EXPIRED"

# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

USER_REGISTERED: str = "USER_REGISTERED"
USER_LOGIN: str = "USER_LOGIN"
USER_LOGIN_FAILED: str = "USER_LOGIN_FAILED"
USER_LOGOUT: str = "USER_LOGOUT"
PROFILE_UPDATED: str = "PROFILE_UPDATED"

# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

#: A view recomputed filter → sort → render.
VIEW_RENDERED: str = "VIEW_RENDERED"
