"""Use cases that merge changes into stored preferences."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    CategoryPreferences,
    ChannelPreference,
    FrequencyCaps,
    Preference,
)
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import PreferenceRepository

from .get_or_create_preferences import get_or_create_preferences
from .validators import ensure_channel, ensure_clock, ensure_timezone, normalize_channel_value

logger = logging.getLogger(__name__)

_CHANNEL_FIELDS = {item.name for item in fields(ChannelPreference)}
_CATEGORY_FIELDS = {item.name for item in fields(CategoryPreferences)}
_FREQUENCY_FIELDS = {item.name for item in fields(FrequencyCaps)}
_PREFERENCE_FIELDS = {"allowed_time_start", "allowed_time_end", "timezone", "categories", "frequency"}


def _reject_unknown(keys: Mapping[str, Any], allowed: set[str], scope: str) -> None:
    unknown = sorted(set(keys) - allowed)
    if unknown:
        raise ValidationError(f"Unknown {scope} fields: {', '.join(unknown)}")


def apply_channel_changes(
    preference: Preference, channel: str, changes: Mapping[str, Any]
) -> None:
    """Shallow merge ``changes`` into one channel entry.

    A new destination value invalidates a previous verification unless the
    caller sets ``verified`` explicitly.
    """

    ensure_channel(channel)
    _reject_unknown(changes, _CHANNEL_FIELDS, "channel")
    entry = preference.channel(channel)

    if "value" in changes:
        raw_value = changes["value"]
        value = normalize_channel_value(channel, raw_value) if raw_value else None
        if value != entry.value:
            entry.value = value
            entry.verified = False
    if "enabled" in changes:
        entry.enabled = bool(changes["enabled"])
    if "verified" in changes:
        entry.verified = bool(changes["verified"])
    if "priority" in changes:
        priority = changes["priority"]
        if not isinstance(priority, int) or priority < 0:
            raise ValidationError("Channel priority must be a non-negative integer")
        entry.priority = priority


def apply_preference_changes(preference: Preference, changes: Mapping[str, Any]) -> None:
    _reject_unknown(changes, _PREFERENCE_FIELDS, "preference")
    target = preference.preferences

    if "allowed_time_start" in changes:
        target.allowed_time_start = ensure_clock(
            changes["allowed_time_start"], field_name="allowed_time_start"
        )
    if "allowed_time_end" in changes:
        target.allowed_time_end = ensure_clock(
            changes["allowed_time_end"], field_name="allowed_time_end"
        )
    if "timezone" in changes:
        target.timezone = ensure_timezone(changes["timezone"])

    categories = changes.get("categories") or {}
    _reject_unknown(categories, _CATEGORY_FIELDS, "category")
    for name, allowed in categories.items():
        setattr(target.categories, name, bool(allowed))

    frequency = changes.get("frequency") or {}
    _reject_unknown(frequency, _FREQUENCY_FIELDS, "frequency")
    for name, cap in frequency.items():
        if not isinstance(cap, int) or cap < 0:
            raise ValidationError(f"{name} must be a non-negative integer")
        setattr(target.frequency, name, cap)


def update_preferences(
    session: Session,
    user_id: str,
    *,
    channels: Mapping[str, Mapping[str, Any]] | None = None,
    preferences: Mapping[str, Any] | None = None,
) -> Preference:
    """Merge ``channels`` and ``preferences`` into the user's record."""

    preference = get_or_create_preferences(session, user_id)
    for channel, changes in (channels or {}).items():
        apply_channel_changes(preference, channel, changes)
    if preferences:
        apply_preference_changes(preference, preferences)

    updated = PreferenceRepository(session).update(preference)
    logger.info("Preferences updated for user %s", updated.user_id)
    return updated


def update_channel_preference(
    session: Session, user_id: str, channel: str, **changes: Any
) -> Preference:
    return update_preferences(session, user_id, channels={channel: changes})
