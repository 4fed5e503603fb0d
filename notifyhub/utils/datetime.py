"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_OFFSET_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(?:UTC|GMT)(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$",
    re.IGNORECASE,
)
_CLOCK_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<hours>\d{1,2}):(?P<minutes>\d{2})$")


def now_utc() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` to UTC, treating naive values as already UTC.

    SQLite drops ``tzinfo`` on the way back from the database, so every value
    read by a repository goes through this helper.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_timezone(tz_name: str) -> tzinfo:
    """Resolve ``tz_name`` (IANA name or ``UTC±HH:MM``) into a ``tzinfo``.

    Raises:
        ValueError: If the name is neither a known zone nor a fixed offset.
    """

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        match = _OFFSET_PATTERN.match(tz_name or "")
        if match:
            sign = -1 if match.group("sign") == "-" else 1
            hours = int(match.group("hours"))
            minutes = int(match.group("minutes") or 0)
            offset = timedelta(hours=hours, minutes=minutes)
            return timezone(sign * offset)
    raise ValueError(f"Unknown timezone: {tz_name}")


def clock_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` clock reading into minutes since midnight.

    Raises:
        ValueError: If ``value`` is not a valid 24h clock reading.
    """

    match = _CLOCK_PATTERN.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid time of day: {value!r}")
    hours = int(match.group("hours"))
    minutes = int(match.group("minutes"))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time of day: {value!r}")
    return hours * 60 + minutes


def to_isoformat(value: datetime | None) -> str | None:
    """Serialize ``value`` as an ISO 8601 UTC string for JSON columns."""

    normalized = ensure_utc(value)
    return normalized.isoformat() if normalized is not None else None


def parse_isoformat(value: str | datetime | None) -> datetime | None:
    """Inverse of :func:`to_isoformat`; accepts datetimes unchanged."""

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(value))
