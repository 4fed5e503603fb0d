"""Use case accepting a new notification request."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.application.use_cases.templates import render_template
from notifyhub.config import get_settings
from notifyhub.domain.entities import (
    CHANNEL_WHATSAPP,
    CHANNELS,
    PRIORITIES,
    RECIPIENT_EMAIL,
    RECIPIENT_TYPES,
    STATUS_QUEUED,
    STATUS_SCHEDULED,
    LiteralContent,
    Notification,
    NotificationContent,
    NotificationOptions,
    Recipient,
    TemplateContent,
)
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.providers import ProviderRegistry
from notifyhub.infrastructure.repositories import NotificationRepository
from notifyhub.utils import format_email, format_phone_number, now_utc

from .process_notification import DispatchResult, process_notification, status_url_for

logger = logging.getLogger(__name__)


@dataclass
class NewNotificationData:
    recipient: Recipient
    channel: str
    content: NotificationContent
    provider: str | None = None
    options: NotificationOptions = field(default_factory=NotificationOptions)
    metadata: dict[str, Any] = field(default_factory=dict)


def normalize_recipient(recipient: Recipient) -> Recipient:
    if recipient.type not in RECIPIENT_TYPES:
        raise ValidationError(f"Invalid recipient type: {recipient.type}")
    if not (recipient.value or "").strip():
        raise ValidationError("Recipient value cannot be empty")
    if recipient.type == RECIPIENT_EMAIL:
        return Recipient(type=recipient.type, value=format_email(recipient.value))
    country_code = get_settings().default_country_code
    return Recipient(
        type=recipient.type,
        value=format_phone_number(recipient.value, country_code=country_code),
    )


def _validate_options(channel: str, options: NotificationOptions) -> None:
    if options.priority not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {options.priority}")
    for fallback in options.fallback_channels:
        if fallback not in CHANNELS:
            raise ValidationError(f"Invalid fallback channel: {fallback}")
        if fallback == channel:
            raise ValidationError("Fallback channels cannot repeat the primary channel")
    if len(set(options.fallback_channels)) != len(options.fallback_channels):
        raise ValidationError("Fallback channels must be unique")


def _validate_content(channel: str, content: LiteralContent) -> None:
    if content.text or content.html:
        return
    if channel == CHANNEL_WHATSAPP and content.template_name:
        return
    raise ValidationError("Notification content cannot be empty")


def send_notification(
    session: Session,
    registry: ProviderRegistry,
    data: NewNotificationData,
) -> DispatchResult:
    """Validate, persist and, unless scheduled, immediately dispatch a notification.

    Template content is rendered before the record is stored. Scheduled
    notifications stay inert until an external trigger processes them.
    """

    if data.channel not in CHANNELS:
        raise ValidationError(f"Invalid channel: {data.channel}")
    _validate_options(data.channel, data.options)
    recipient = normalize_recipient(data.recipient)

    content = data.content
    if isinstance(content, TemplateContent):
        rendered = render_template(session, content.template_id, data.channel, content.parameters)
        content = LiteralContent(text=rendered.text, subject=rendered.subject, html=rendered.html)
    _validate_content(data.channel, content)

    notification = Notification(
        id=None,
        recipient=recipient,
        channel=data.channel,
        content=content,
        provider=data.provider,
        options=data.options,
        metadata=dict(data.metadata),
    )
    scheduled = data.options.scheduled_for is not None
    if scheduled:
        notification.transition(
            STATUS_SCHEDULED, f"Scheduled for {data.options.scheduled_for.isoformat()}"
        )
    else:
        notification.transition(STATUS_QUEUED, "Notification queued")
    notification.created_at = now_utc()

    repository = NotificationRepository(session)
    saved = repository.create(notification)

    if scheduled:
        logger.info("Notification %s scheduled on %s", saved.id, saved.channel)
        return DispatchResult(notification=saved, status_url=status_url_for(saved.id))

    logger.info("Notification %s queued on %s", saved.id, saved.channel)
    return process_notification(session, registry, saved)
