"""Domain entity representing a notification and its delivery lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from notifyhub.utils import now_utc

CHANNEL_SMS = "sms"
CHANNEL_EMAIL = "email"
CHANNEL_WHATSAPP = "whatsapp"
CHANNELS: tuple[str, ...] = (CHANNEL_SMS, CHANNEL_EMAIL, CHANNEL_WHATSAPP)

RECIPIENT_PHONE = "phone"
RECIPIENT_EMAIL = "email"
RECIPIENT_TYPES: tuple[str, ...] = (RECIPIENT_PHONE, RECIPIENT_EMAIL)

STATUS_QUEUED = "queued"
STATUS_SCHEDULED = "scheduled"
STATUS_PROCESSING = "processing"
STATUS_SENT = "sent"
STATUS_DELIVERED = "delivered"
STATUS_FAILED = "failed"
STATUS_CANCELLED = "cancelled"
STATUS_READ = "read"
NOTIFICATION_STATUSES: tuple[str, ...] = (
    STATUS_QUEUED,
    STATUS_SCHEDULED,
    STATUS_PROCESSING,
    STATUS_SENT,
    STATUS_DELIVERED,
    STATUS_FAILED,
    STATUS_CANCELLED,
    STATUS_READ,
)

PRIORITIES: tuple[str, ...] = ("high", "normal", "low")
DEFAULT_PRIORITY = "normal"
DEFAULT_MAX_RETRIES = 5


@dataclass
class Recipient:
    """Normalized destination of a notification."""

    type: str
    value: str


@dataclass
class Attachment:
    """File attached to an email notification."""

    filename: str
    content: str
    content_type: str = "application/octet-stream"


@dataclass
class LiteralContent:
    """Concrete message body ready to be handed to a provider.

    ``template_name`` and ``template_params`` reference a template registered
    on the vendor side (WhatsApp approved templates) and are only forwarded to
    WhatsApp providers.
    """

    text: str | None = None
    subject: str | None = None
    html: str | None = None
    attachments: list[Attachment] = field(default_factory=list)
    template_name: str | None = None
    template_params: dict[str, Any] = field(default_factory=dict)


@dataclass
class TemplateContent:
    """Reference to a stored template plus the values for its placeholders."""

    template_id: str
    parameters: dict[str, Any] = field(default_factory=dict)


NotificationContent = Union[LiteralContent, TemplateContent]


@dataclass
class StatusHistoryEntry:
    """Single transition recorded in a notification's history."""

    status: str
    timestamp: datetime
    details: str | None = None


@dataclass
class NotificationOptions:
    """Delivery options attached to a notification."""

    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    fallback_channels: list[str] = field(default_factory=list)
    priority: str = DEFAULT_PRIORITY
    retry_count: int = 0
    max_retries: int = DEFAULT_MAX_RETRIES
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    reply_to: str | None = None
    sender_id: str | None = None
    media_url: str | None = None
    media_type: str | None = None


@dataclass
class ProviderResponse:
    """Provider acknowledgement stored after a successful send."""

    message_id: str | None
    provider_timestamp: str | None
    raw_response: Any = None


@dataclass
class Notification:
    """A single delivery attempt of a message through one channel."""

    id: str | None
    recipient: Recipient
    channel: str
    content: NotificationContent
    provider: str | None = None
    status: str = STATUS_QUEUED
    status_history: list[StatusHistoryEntry] = field(default_factory=list)
    options: NotificationOptions = field(default_factory=NotificationOptions)
    provider_response: ProviderResponse | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def transition(
        self, status: str, details: str | None = None, *, at: datetime | None = None
    ) -> StatusHistoryEntry:
        """Move to ``status`` and append the matching history entry."""

        entry = StatusHistoryEntry(status=status, timestamp=at or now_utc(), details=details)
        self.status = status
        self.status_history.append(entry)
        return entry


__all__ = [
    "CHANNEL_SMS",
    "CHANNEL_EMAIL",
    "CHANNEL_WHATSAPP",
    "CHANNELS",
    "RECIPIENT_PHONE",
    "RECIPIENT_EMAIL",
    "RECIPIENT_TYPES",
    "STATUS_QUEUED",
    "STATUS_SCHEDULED",
    "STATUS_PROCESSING",
    "STATUS_SENT",
    "STATUS_DELIVERED",
    "STATUS_FAILED",
    "STATUS_CANCELLED",
    "STATUS_READ",
    "NOTIFICATION_STATUSES",
    "PRIORITIES",
    "DEFAULT_PRIORITY",
    "DEFAULT_MAX_RETRIES",
    "Recipient",
    "Attachment",
    "LiteralContent",
    "TemplateContent",
    "NotificationContent",
    "StatusHistoryEntry",
    "NotificationOptions",
    "ProviderResponse",
    "Notification",
]
