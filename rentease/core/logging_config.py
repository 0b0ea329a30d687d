"""Rentease logging configuration.

Call ``configure_logging()`` once at process startup (e.g. in ``__main__``).
Every other module defines its own module-scope logger:

    import logging
    logger = logging.getLogger(__name__)

Environment variables (read at call time, explicit arguments win):
    LOG_LEVEL   DEBUG | INFO | WARNING | ERROR | CRITICAL   (default: INFO)
    LOG_FORMAT  text | json                                 (default: text)

Each user action (one filter click, one favorite toggle, one CLI command)
can be wrapped in :func:`new_action`; every record logged inside carries the
same short action id, so the storage writes, synchronizer messages and
render line of that action can be grepped together.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

__all__ = [
    "ACTION_ID_CTX",
    "ActionContextFilter",
    "JsonFormatter",
    "configure_logging",
    "new_action",
]

logger = logging.getLogger(__name__)

#: Identifier of the user action being handled; ``"-"`` outside any action.
ACTION_ID_CTX: ContextVar[str] = ContextVar("action_id", default="-")

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FORMATS = ("text", "json")

_TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(action_id)s] %(name)s: %(message)s"
_TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Loggers that are chatty below WARNING.
_QUIET_LOGGERS = ("aiosqlite", "asyncio")


class ActionContextFilter(logging.Filter):
    """Copy :data:`ACTION_ID_CTX` onto each record as ``record.action_id``."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.action_id = ACTION_ID_CTX.get()
        return True


@contextmanager
def new_action(label: str = "") -> Iterator[str]:
    """Run the block under a fresh action id and yield it.

    The id is eight hex characters, prefixed with ``label-`` when a label is
    given (``"toggle-1a2b3c4d"``).  The previous id is restored on exit.
    """
    suffix = uuid.uuid4().hex[:8]
    action_id = f"{label}-{suffix}" if label else suffix
    token = ACTION_ID_CTX.set(action_id)
    try:
        yield action_id
    finally:
        ACTION_ID_CTX.reset(token)


def _choose(value: str | None, env_var: str, default: str, allowed: tuple[str, ...]) -> str:
    chosen = value or os.environ.get(env_var) or default
    chosen = chosen.upper() if allowed is _LEVELS else chosen.lower()
    if chosen not in allowed:
        raise ValueError(f"Unknown {env_var} {chosen!r}. Must be one of: {', '.join(allowed)}")
    return chosen


def configure_logging(
    level: str | None = None,
    fmt: str | None = None,
    *,
    force: bool = False,
) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        level: Level name; falls back to ``$LOG_LEVEL``, then ``"INFO"``.
        fmt: ``"text"`` or ``"json"``; falls back to ``$LOG_FORMAT``, then
            ``"text"``.
        force: Replace existing root handlers.  Without it, a second call
            only adjusts the level.

    Raises:
        ValueError: Unknown level or format.
    """
    resolved_level = _choose(level, "LOG_LEVEL", "INFO", _LEVELS)
    resolved_fmt = _choose(fmt, "LOG_FORMAT", "text", _FORMATS)

    root = logging.getLogger()
    root.setLevel(resolved_level)
    if root.handlers and not force:
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved_level)
    handler.addFilter(ActionContextFilter())
    if resolved_fmt == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, _TEXT_DATEFMT))
    root.handlers[:] = [handler]

    quiet_level = logging.NOTSET if resolved_level == "DEBUG" else logging.WARNING
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


# Attributes every LogRecord has; anything else was passed through ``extra``.
_STANDARD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Shape::

        {
            "ts":      "2026-10-17T12:34:56.789Z",
            "level":   "INFO",
            "logger":  "rentease.core.favorites",
            "message": "Added to favorites list: Kelowna",
            "extra":   {"action_id": "toggle-1a2b3c4d", "event": "FAVORITE_ADDED"}
        }

    ``exc_info`` and ``stack_info`` keys appear only when the record has them.
    Values that are not JSON-serialisable are written with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        created = datetime.fromtimestamp(record.created, tz=UTC)
        payload: dict[str, Any] = {
            "ts": created.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "extra": {k: v for k, v in vars(record).items() if k not in _STANDARD_ATTRS},
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        elif record.exc_text:
            payload["exc_info"] = record.exc_text
        if record.stack_info:
            payload["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(payload, default=str, ensure_ascii=False)
