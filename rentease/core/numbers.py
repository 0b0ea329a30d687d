"""Best-effort numeric coercion for values stored as strings.

Flat records keep ``price`` and ``area`` as strings (they come straight from
form inputs), and filter bounds arrive as raw text.  :func:`parse_float`
reads the *leading* numeric prefix the way a browser's ``parseFloat`` does,
so ``"1500"``, ``" 1500 "``, ``"1500 CAD"`` and ``"1.5e3"`` all yield
``1500.0`` while ``"abc"`` or ``""`` yield ``None``.

Callers decide the fallback: the filter treats ``None`` as "bound unset" or
"record excluded", the sort engine treats it as ``0``.
"""

from __future__ import annotations

import math
import re

__all__ = ["parse_float", "sort_number"]

_LEADING_FLOAT_RE = re.compile(
    r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def parse_float(value: object) -> float | None:
    """Return the leading float in *value*, or ``None`` if there is none.

    Args:
        value: Anything found in a persisted record or a form input.  Numbers
            (but not booleans) are accepted as-is; strings are scanned for a
            leading numeric prefix after stripping whitespace.

    Returns:
        The parsed float, or ``None`` for missing / unparsable / NaN input.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
        return None if math.isnan(number) else number
    if not isinstance(value, str):
        return None

    match = _LEADING_FLOAT_RE.match(value.strip())
    if match is None:
        return None
    token = match.group(0)
    if token.lstrip("+-") == "Infinity":
        return -math.inf if token.startswith("-") else math.inf
    return float(token)


def sort_number(value: object) -> float:
    """Numeric sort value: :func:`parse_float` or ``0`` when unparsable.

    A price of ``"abc"`` therefore sorts as if it were free.
    """
    return parse_float(value) or 0.0
