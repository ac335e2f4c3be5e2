"""Time and timezone utilities for alertchart.

Provides consistent timestamp handling across the system with:
- UTC discipline: intervals are always timezone-aware UTC
- ISO-8601 format for the remote API
- Epoch second conversion for chart points
- Localization of naive CLI input via pytz
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytz

__all__ = [
    "ensure_utc",
    "epoch_seconds",
    "format_utc_iso8601",
    "localize",
    "parse_utc_iso8601",
]


def ensure_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime.

    Naive datetimes are assumed to already be in UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_utc_iso8601(dt: datetime) -> str:
    """Format datetime as ISO-8601 UTC with a ``Z`` suffix.

    Parameters
    ----------
    dt
        Datetime to format (naive values are treated as UTC)

    Returns
    -------
    str
        e.g. ``2025-10-08T04:00:00.000Z``
    """
    utc = ensure_utc(dt)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_utc_iso8601(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Parameters
    ----------
    value
        ISO-8601 string, ``Z`` or offset suffix accepted

    Returns
    -------
    datetime
        Aware datetime in UTC

    Raises
    ------
    ValueError
        If the string is not ISO-8601
    """
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValueError(f"Cannot parse datetime: {value}") from exc
    return ensure_utc(parsed)


def epoch_seconds(dt: datetime) -> int:
    """Whole seconds since the Unix epoch (fraction truncated)."""
    return int(ensure_utc(dt).timestamp())


def localize(dt: datetime, timezone_str: str = "UTC") -> datetime:
    """Attach ``timezone_str`` to a naive datetime and convert to UTC.

    Aware datetimes are only converted. Ambiguous or missing local times
    around DST transitions resolve to standard time (pytz default).

    Raises
    ------
    ValueError
        If the timezone name is unknown
    """
    if dt.tzinfo is not None:
        return ensure_utc(dt)

    try:
        tz = pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError as exc:
        raise ValueError(f"Invalid timezone: {timezone_str}") from exc

    return tz.localize(dt).astimezone(pytz.UTC)
