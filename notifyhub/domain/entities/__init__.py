"""Domain entities for the notification service."""

from .notification import (
    CHANNEL_EMAIL,
    CHANNEL_SMS,
    CHANNEL_WHATSAPP,
    CHANNELS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_PRIORITY,
    NOTIFICATION_STATUSES,
    PRIORITIES,
    RECIPIENT_EMAIL,
    RECIPIENT_PHONE,
    RECIPIENT_TYPES,
    STATUS_CANCELLED,
    STATUS_DELIVERED,
    STATUS_FAILED,
    STATUS_PROCESSING,
    STATUS_QUEUED,
    STATUS_READ,
    STATUS_SCHEDULED,
    STATUS_SENT,
    Attachment,
    LiteralContent,
    Notification,
    NotificationContent,
    NotificationOptions,
    ProviderResponse,
    Recipient,
    StatusHistoryEntry,
    TemplateContent,
)
from .preference import (
    CATEGORIES,
    CATEGORY_ALERTS,
    CATEGORY_MARKETING,
    CATEGORY_TRANSACTIONAL,
    DEFAULT_CHANNEL_PRIORITIES,
    CategoryPreferences,
    ChannelPreference,
    DeliveryPreferences,
    FrequencyCaps,
    Preference,
)
from .template import DEFAULT_TEMPLATE_CATEGORY, TEMPLATE_CATEGORIES, Template, TemplateVersion

__all__ = [
    "CHANNEL_EMAIL",
    "CHANNEL_SMS",
    "CHANNEL_WHATSAPP",
    "CHANNELS",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_PRIORITY",
    "NOTIFICATION_STATUSES",
    "PRIORITIES",
    "RECIPIENT_EMAIL",
    "RECIPIENT_PHONE",
    "RECIPIENT_TYPES",
    "STATUS_CANCELLED",
    "STATUS_DELIVERED",
    "STATUS_FAILED",
    "STATUS_PROCESSING",
    "STATUS_QUEUED",
    "STATUS_READ",
    "STATUS_SCHEDULED",
    "STATUS_SENT",
    "Attachment",
    "LiteralContent",
    "Notification",
    "NotificationContent",
    "NotificationOptions",
    "ProviderResponse",
    "Recipient",
    "StatusHistoryEntry",
    "TemplateContent",
    "CATEGORIES",
    "CATEGORY_ALERTS",
    "CATEGORY_MARKETING",
    "CATEGORY_TRANSACTIONAL",
    "DEFAULT_CHANNEL_PRIORITIES",
    "CategoryPreferences",
    "ChannelPreference",
    "DeliveryPreferences",
    "FrequencyCaps",
    "Preference",
    "DEFAULT_TEMPLATE_CATEGORY",
    "TEMPLATE_CATEGORIES",
    "Template",
    "TemplateVersion",
]
