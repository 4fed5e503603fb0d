"""Use cases handling channel consent and verification."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Preference
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import PreferenceRepository

from .get_or_create_preferences import get_or_create_preferences
from .validators import ensure_channel, normalize_channel_value

OPT_IN = "opt-in"
OPT_OUT = "opt-out"
OPT_ACTIONS: tuple[str, ...] = (OPT_IN, OPT_OUT)

logger = logging.getLogger(__name__)


def opt_in_out(
    session: Session,
    user_id: str,
    channel: str,
    action: str,
    value: str | None = None,
) -> Preference:
    """Enable or disable ``channel`` for the user.

    Supplying ``value`` replaces the destination and always clears its
    verification.
    """

    ensure_channel(channel)
    if action not in OPT_ACTIONS:
        raise ValidationError(f"Invalid action: {action}. Use 'opt-in' or 'opt-out'")

    preference = get_or_create_preferences(session, user_id)
    entry = preference.channel(channel)
    entry.enabled = action == OPT_IN
    if value:
        entry.value = normalize_channel_value(channel, value)
        entry.verified = False

    updated = PreferenceRepository(session).update(preference)
    logger.info("User %s %s of %s", updated.user_id, "opted in" if entry.enabled else "opted out", channel)
    return updated


def verify_channel(session: Session, user_id: str, channel: str) -> Preference:
    """Mark the destination on file for ``channel`` as verified."""

    ensure_channel(channel)
    preference = get_or_create_preferences(session, user_id)
    entry = preference.channel(channel)
    if not entry.value:
        raise ValidationError(f"No {channel} value on file for user {preference.user_id}")

    entry.verified = True
    updated = PreferenceRepository(session).update(preference)
    logger.info("Channel %s verified for user %s", channel, updated.user_id)
    return updated
