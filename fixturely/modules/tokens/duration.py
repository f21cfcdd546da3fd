"""
Token lifetime parsing.

Lifetimes use the compact duration vocabulary ("30days", "2h", "1ms").
Numbers are seconds; a bare numeric string is milliseconds.
"""

import re
from datetime import timedelta
from typing import Union

_DURATION_PATTERN = re.compile(
    r"^(?P<amount>-?\d*\.?\d+)\s*(?P<unit>[a-z]*)$",
    re.IGNORECASE,
)

_SECOND = 1.0
_MINUTE = 60 * _SECOND
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_WEEK = 7 * _DAY
_YEAR = 365.25 * _DAY

_UNITS = {
    "years": _YEAR, "year": _YEAR, "yrs": _YEAR, "yr": _YEAR, "y": _YEAR,
    "weeks": _WEEK, "week": _WEEK, "w": _WEEK,
    "days": _DAY, "day": _DAY, "d": _DAY,
    "hours": _HOUR, "hour": _HOUR, "hrs": _HOUR, "hr": _HOUR, "h": _HOUR,
    "minutes": _MINUTE, "minute": _MINUTE, "mins": _MINUTE, "min": _MINUTE, "m": _MINUTE,
    "seconds": _SECOND, "second": _SECOND, "secs": _SECOND, "sec": _SECOND, "s": _SECOND,
    "milliseconds": 0.001, "millisecond": 0.001, "msecs": 0.001, "msec": 0.001, "ms": 0.001,
    "": 0.001,
}

Expiry = Union[int, float, str, timedelta]


def parse_expiry(value: Expiry) -> timedelta:
    """
    Convert a token lifetime into a timedelta.

    Args:
        value: Seconds as a number, a timedelta, or a duration string

    Returns:
        Lifetime as a timedelta

    Raises:
        ValueError: If the value cannot be interpreted as a duration

    Example:
        >>> parse_expiry("30days")
        datetime.timedelta(days=30)
        >>> parse_expiry("1ms")
        datetime.timedelta(microseconds=1000)
    """
    if isinstance(value, timedelta):
        return value

    if isinstance(value, bool):
        raise ValueError(f"Invalid token lifetime: {value!r}")

    if isinstance(value, (int, float)):
        return timedelta(seconds=value)

    if isinstance(value, str):
        match = _DURATION_PATTERN.match(value.strip())
        if match:
            unit = match.group("unit").lower()
            if unit in _UNITS:
                return timedelta(seconds=float(match.group("amount")) * _UNITS[unit])

    raise ValueError(f"Invalid token lifetime: {value!r}")
