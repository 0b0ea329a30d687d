"""Login session stored in ``session_storage``.

A session is two keys:

* ``currentUserEmail``: the logged-in user's email;
* ``loginTimestamp``: login time in epoch milliseconds, as a string.

:meth:`SessionManager.validate` is the precondition every view checks before
running any filter / sort / favorite logic.  It raises a
:class:`~rentease.core.exceptions.SessionError` subclass (and clears the stale
keys) when the session is absent, malformed or older than the configured
window.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from rentease.core import events
from rentease.core.exceptions import SessionExpiredError, SessionMissingError
from rentease.storage.kv import KeyValueStore

__all__ = [
    "DEFAULT_SESSION_DURATION_MS",
    "SESSION_EMAIL_KEY",
    "SESSION_TIMESTAMP_KEY",
    "SessionManager",
    "now_ms",
]

logger = logging.getLogger(__name__)

SESSION_EMAIL_KEY: str = "currentUserEmail"
SESSION_TIMESTAMP_KEY: str = "loginTimestamp"

#: 60 minutes.
DEFAULT_SESSION_DURATION_MS: int = 60 * 60 * 1000


def now_ms() -> int:
    """Current UTC time in epoch milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)


class SessionManager:
    """Reads and writes the login session.

    Args:
        kv: The ``session_storage`` key-value store.
        duration_ms: Session window; see
            :attr:`~rentease.core.settings.Settings.session_duration_ms`.
    """

    def __init__(self, kv: KeyValueStore, duration_ms: int = DEFAULT_SESSION_DURATION_MS) -> None:
        self._kv = kv
        self._duration_ms = duration_ms

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    async def login(self, email: str, *, at_ms: int | None = None) -> None:
        """Start a session for *email* stamped at *at_ms* (default: now)."""
        stamp = now_ms() if at_ms is None else at_ms
        await self._kv.set_items({SESSION_EMAIL_KEY: email, SESSION_TIMESTAMP_KEY: str(stamp)})
        logger.info("Session started for %s", email, extra={"event": events.USER_LOGIN})

    async def logout(self) -> None:
        await self._clear()
        logger.info("You have been logged out.", extra={"event": events.USER_LOGOUT})

    async def current_email(self) -> str | None:
        """Logged-in email without checking the timestamp (navbar greeting)."""
        return await self._kv.get_item(SESSION_EMAIL_KEY)

    async def validate(self, *, at_ms: int | None = None) -> str:
        """Return the logged-in email if the session is valid.

        Args:
            at_ms: Time to validate against (default: now).

        Returns:
            The ``currentUserEmail`` value.

        Raises:
            SessionMissingError: No email, or no / unparsable timestamp.  A
                dangling email is cleared.
            SessionExpiredError: The session is older than the window.  Both
                keys are cleared.
        """
        email = await self._kv.get_item(SESSION_EMAIL_KEY)
        if not email:
            logger.info(
                "No user logged in. Redirecting to login.",
                extra={"event": events.SESSION_MISSING},
            )
            raise SessionMissingError("No user logged in.")

        raw_stamp = await self._kv.get_item(SESSION_TIMESTAMP_KEY)
        try:
            stamp = int(raw_stamp) if raw_stamp else None
        except ValueError:
            stamp = None
        if stamp is None:
            await self._kv.remove_item(SESSION_EMAIL_KEY)
            logger.info(
                "Login timestamp not found. Session invalid.",
                extra={"event": events.SESSION_MISSING},
            )
            raise SessionMissingError("Your session is invalid. Please log in again.")

        age_ms = (now_ms() if at_ms is None else at_ms) - stamp
        if age_ms > self._duration_ms:
            await self._clear()
            logger.info(
                "Session expired for %s after %d ms",
                email,
                age_ms,
                extra={"event": events.SESSION_EXPIRED},
            )
            raise SessionExpiredError(age_ms, self._duration_ms)

        logger.debug("Session valid for %s", email, extra={"event": events.SESSION_VALID})
        return email

    async def _clear(self) -> None:
        await self._kv.remove_item(SESSION_EMAIL_KEY)
        await self._kv.remove_item(SESSION_TIMESTAMP_KEY)
