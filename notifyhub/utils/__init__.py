"""Utility helpers for reusable functionality."""

from .datetime import (
    clock_to_minutes,
    ensure_utc,
    now_utc,
    parse_isoformat,
    resolve_timezone,
    to_isoformat,
)
from .formatter import DEFAULT_COUNTRY_CODE, format_email, format_phone_number

__all__ = [
    "clock_to_minutes",
    "ensure_utc",
    "now_utc",
    "parse_isoformat",
    "resolve_timezone",
    "to_isoformat",
    "DEFAULT_COUNTRY_CODE",
    "format_email",
    "format_phone_number",
]
