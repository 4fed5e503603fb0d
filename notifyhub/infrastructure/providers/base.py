"""Capability contract shared by every delivery provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from notifyhub.domain.entities import Attachment, NotificationOptions
from notifyhub.utils import now_utc, to_isoformat

STATUS_UNKNOWN = "unknown"


@dataclass
class MessageContent:
    """Provider-facing message body.

    Only the fields relevant to the target channel are filled: ``text`` for
    SMS, ``subject``/``text``/``html``/``attachments`` for email and ``text``
    plus the optional vendor template reference for WhatsApp.
    """

    text: str | None = None
    subject: str | None = None
    html: str | None = None
    attachments: list[Attachment] = field(default_factory=list)
    template_name: str | None = None
    template_params: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProviderResult:
    """Normalized acknowledgement returned by :meth:`NotificationProvider.send`."""

    success: bool
    provider: str
    message_id: str | None
    timestamp: str
    status: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProviderStatus:
    message_id: str
    status: str
    provider: str
    updated_at: str = field(default_factory=lambda: to_isoformat(now_utc()))
    details: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class NotificationProvider(Protocol):
    """Uniform ``send``/``get_status``/``check_health`` capability.

    ``send`` raises :class:`~notifyhub.domain.exceptions.ProviderError` on
    vendor failures and
    :class:`~notifyhub.domain.exceptions.ProviderConfigurationError` when the
    adapter lacks credentials. ``check_health`` never raises for vendor errors.
    """

    name: str
    channel: str

    def send(
        self, to: str, content: MessageContent, options: NotificationOptions
    ) -> ProviderResult:
        ...

    def get_status(self, message_id: str) -> ProviderStatus:
        ...

    def check_health(self) -> bool:
        ...


def unsupported_status(provider: str, message_id: str, note: str) -> ProviderStatus:
    """Status reply for vendors that only report delivery through webhooks."""

    return ProviderStatus(
        message_id=message_id,
        status=STATUS_UNKNOWN,
        provider=provider,
        details={"note": note},
    )


__all__ = [
    "STATUS_UNKNOWN",
    "MessageContent",
    "NotificationProvider",
    "ProviderResult",
    "ProviderStatus",
    "unsupported_status",
]
