"""Validation helpers for preference payloads."""

from __future__ import annotations

from notifyhub.config import get_settings
from notifyhub.domain.entities import CATEGORIES, CHANNEL_EMAIL, CHANNELS
from notifyhub.domain.exceptions import ValidationError
from notifyhub.utils import clock_to_minutes, format_email, format_phone_number, resolve_timezone


def ensure_user_id(user_id: str) -> str:
    normalized = (user_id or "").strip()
    if not normalized:
        raise ValidationError("user_id cannot be empty")
    return normalized


def ensure_channel(channel: str) -> str:
    if channel not in CHANNELS:
        raise ValidationError(f"Invalid channel: {channel}")
    return channel


def ensure_category(category: str) -> str:
    if category not in CATEGORIES:
        raise ValidationError(f"Invalid category: {category}")
    return category


def ensure_clock(value: str, *, field_name: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must use the HH:MM format")
    try:
        clock_to_minutes(value)
    except ValueError as exc:
        raise ValidationError(f"{field_name} must use the HH:MM format") from exc
    return value.strip()


def ensure_timezone(value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid timezone: {value}")
    try:
        resolve_timezone(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid timezone: {value}") from exc
    return value


def normalize_channel_value(channel: str, value: str) -> str:
    """Normalize a destination the same way notification recipients are."""

    if channel == CHANNEL_EMAIL:
        return format_email(value)
    return format_phone_number(value, country_code=get_settings().default_country_code)
