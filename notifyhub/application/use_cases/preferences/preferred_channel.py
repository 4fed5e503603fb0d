"""Use case selecting the channel a user prefers to be reached on."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from .get_or_create_preferences import get_or_create_preferences


@dataclass(frozen=True)
class PreferredChannel:
    channel: str
    value: str


def preferred_channel(session: Session, user_id: str) -> PreferredChannel | None:
    """Return the usable channel with the lowest priority number.

    A channel is usable when it is enabled, verified and has a value. Ties
    keep the stored channel order.
    """

    preference = get_or_create_preferences(session, user_id)
    candidates = [
        (entry.priority, name, entry.value)
        for name, entry in preference.channels.items()
        if entry.enabled and entry.verified and entry.value
    ]
    if not candidates:
        return None
    _, channel, value = min(candidates, key=lambda candidate: candidate[0])
    return PreferredChannel(channel=channel, value=value)
