"""Domain entity describing how and when a user wants to be contacted."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .notification import CHANNEL_EMAIL, CHANNEL_SMS, CHANNEL_WHATSAPP, CHANNELS

CATEGORY_MARKETING = "marketing"
CATEGORY_TRANSACTIONAL = "transactional"
CATEGORY_ALERTS = "alerts"
CATEGORIES: tuple[str, ...] = (CATEGORY_MARKETING, CATEGORY_TRANSACTIONAL, CATEGORY_ALERTS)

# Lower number means more preferred.
DEFAULT_CHANNEL_PRIORITIES: dict[str, int] = {
    CHANNEL_SMS: 2,
    CHANNEL_EMAIL: 1,
    CHANNEL_WHATSAPP: 0,
}

DEFAULT_ALLOWED_TIME_START = "08:00"
DEFAULT_ALLOWED_TIME_END = "22:00"
DEFAULT_PREFERENCE_TIMEZONE = "America/Sao_Paulo"


@dataclass
class ChannelPreference:
    enabled: bool = False
    value: str | None = None
    verified: bool = False
    priority: int = 0


@dataclass
class CategoryPreferences:
    marketing: bool = False
    transactional: bool = True
    alerts: bool = True

    def allows(self, category: str) -> bool:
        return bool(getattr(self, category))


@dataclass
class FrequencyCaps:
    """Per-user delivery caps. Stored and exposed, not enforced."""

    max_per_day: int = 5
    max_per_week: int = 20


@dataclass
class DeliveryPreferences:
    allowed_time_start: str = DEFAULT_ALLOWED_TIME_START
    allowed_time_end: str = DEFAULT_ALLOWED_TIME_END
    timezone: str = DEFAULT_PREFERENCE_TIMEZONE
    categories: CategoryPreferences = field(default_factory=CategoryPreferences)
    frequency: FrequencyCaps = field(default_factory=FrequencyCaps)


def default_channels() -> dict[str, ChannelPreference]:
    return {
        channel: ChannelPreference(priority=DEFAULT_CHANNEL_PRIORITIES[channel])
        for channel in CHANNELS
    }


@dataclass
class Preference:
    """Contact preferences of a single user, keyed by ``user_id``."""

    id: str | None
    user_id: str
    channels: dict[str, ChannelPreference] = field(default_factory=default_channels)
    preferences: DeliveryPreferences = field(default_factory=DeliveryPreferences)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def channel(self, name: str) -> ChannelPreference:
        """Return the entry for ``name``, creating a default one when missing."""

        entry = self.channels.get(name)
        if entry is None:
            entry = ChannelPreference(priority=DEFAULT_CHANNEL_PRIORITIES.get(name, 0))
            self.channels[name] = entry
        return entry


__all__ = [
    "CATEGORY_MARKETING",
    "CATEGORY_TRANSACTIONAL",
    "CATEGORY_ALERTS",
    "CATEGORIES",
    "DEFAULT_CHANNEL_PRIORITIES",
    "DEFAULT_ALLOWED_TIME_START",
    "DEFAULT_ALLOWED_TIME_END",
    "DEFAULT_PREFERENCE_TIMEZONE",
    "ChannelPreference",
    "CategoryPreferences",
    "FrequencyCaps",
    "DeliveryPreferences",
    "Preference",
    "default_channels",
]
