"""Dispatch engine: provider send, status bookkeeping and channel fallback."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace

from sqlalchemy.orm import Session

from notifyhub.domain.entities import (
    CHANNEL_EMAIL,
    CHANNEL_WHATSAPP,
    STATUS_FAILED,
    STATUS_PROCESSING,
    STATUS_QUEUED,
    STATUS_SENT,
    LiteralContent,
    Notification,
    ProviderResponse,
)
from notifyhub.domain.exceptions import (
    DeliveryError,
    ProviderConfigurationError,
    ProviderError,
)
from notifyhub.infrastructure.providers import MessageContent, ProviderRegistry
from notifyhub.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)

ORIGINAL_NOTIFICATION_KEY = "originalNotificationId"
FALLBACK_NOTIFICATION_KEY = "fallbackNotificationId"
IS_FALLBACK_KEY = "isFallback"


@dataclass
class DispatchResult:
    """Outcome of a send: the last notification of the chain and where to poll it."""

    notification: Notification
    status_url: str


def status_url_for(notification_id: str) -> str:
    return f"/notifications/{notification_id}/status"


def build_message_content(notification: Notification) -> MessageContent:
    """Map a stored notification onto the provider argument shape of its channel."""

    content = notification.content
    if not isinstance(content, LiteralContent):
        raise ProviderError(
            f"Notification {notification.id} holds unrendered template content",
            channel=notification.channel,
        )
    if notification.channel == CHANNEL_EMAIL:
        return MessageContent(
            subject=content.subject,
            text=content.text,
            html=content.html or content.text,
            attachments=list(content.attachments),
        )
    if notification.channel == CHANNEL_WHATSAPP:
        return MessageContent(
            text=content.text,
            template_name=content.template_name,
            template_params=dict(content.template_params),
        )
    return MessageContent(text=content.text)


def _mark_failed(
    repository: NotificationRepository, notification: Notification, exc: Exception
) -> None:
    notification.transition(STATUS_FAILED, f"Failed: {exc}")
    repository.update(notification)
    logger.error(
        "Notification %s failed on %s via %s: %s",
        notification.id,
        notification.channel,
        notification.provider,
        exc,
    )


def _attempt(
    repository: NotificationRepository,
    registry: ProviderRegistry,
    notification: Notification,
) -> Notification:
    """Deliver ``notification`` through a single provider.

    Failures are recorded on ``notification`` before the error is re-raised.
    """

    try:
        provider = registry.get_provider(notification.channel, notification.provider)
    except ProviderConfigurationError as exc:
        _mark_failed(repository, notification, exc)
        raise

    logger.debug("Notification %s resolved to provider %s", notification.id, provider.name)
    notification.provider = provider.name
    notification.transition(STATUS_PROCESSING, f"Processing with provider: {provider.name}")
    repository.update(notification)

    try:
        result = provider.send(
            notification.recipient.value,
            build_message_content(notification),
            notification.options,
        )
    except (ProviderError, ProviderConfigurationError) as exc:
        _mark_failed(repository, notification, exc)
        raise
    except Exception as exc:
        _mark_failed(repository, notification, exc)
        raise ProviderError(
            f"Unexpected error from {provider.name}: {exc}",
            provider=provider.name,
            channel=notification.channel,
        ) from exc

    notification.provider_response = ProviderResponse(
        message_id=result.message_id,
        provider_timestamp=result.timestamp,
        raw_response=result.details,
    )
    notification.transition(STATUS_SENT, f"Sent via {result.provider}")
    logger.debug(
        "Notification %s sent via %s with message id %s",
        notification.id,
        result.provider,
        result.message_id,
    )
    return repository.update(notification)


def _create_fallback(
    repository: NotificationRepository, failed: Notification
) -> Notification:
    next_channel, *remaining = failed.options.fallback_channels
    metadata = {
        key: value
        for key, value in failed.metadata.items()
        if key != FALLBACK_NOTIFICATION_KEY
    }
    metadata[ORIGINAL_NOTIFICATION_KEY] = failed.id
    metadata[IS_FALLBACK_KEY] = True

    fallback = Notification(
        id=None,
        recipient=replace(failed.recipient),
        channel=next_channel,
        content=copy.deepcopy(failed.content),
        options=replace(failed.options, fallback_channels=list(remaining), retry_count=0),
        metadata=metadata,
    )
    fallback.transition(
        STATUS_QUEUED, f"Fallback from {failed.channel} notification {failed.id}"
    )
    fallback = repository.create(fallback)

    failed.metadata[FALLBACK_NOTIFICATION_KEY] = fallback.id
    repository.update(failed)
    logger.info(
        "Falling back from %s to %s (notification %s -> %s)",
        failed.channel,
        next_channel,
        failed.id,
        fallback.id,
    )
    return fallback


def process_notification(
    session: Session,
    registry: ProviderRegistry,
    notification: Notification,
) -> DispatchResult:
    """Send ``notification`` and walk its fallback channels until one succeeds.

    Every attempt is a separate notification linked through metadata. The
    loop is bounded by the fallback list, which shrinks by one per attempt.

    Raises:
        DeliveryError: When the last attempt fails. It references that
            attempt and chains the underlying provider error.
    """

    repository = NotificationRepository(session)
    current = notification
    while True:
        try:
            sent = _attempt(repository, registry, current)
        except (ProviderError, ProviderConfigurationError) as exc:
            if not current.options.fallback_channels:
                raise DeliveryError(
                    f"Delivery of notification {current.id} via {current.channel} failed: {exc}",
                    notification_id=current.id,
                    channel=current.channel,
                    provider=current.provider,
                ) from exc
            current = _create_fallback(repository, current)
            continue
        return DispatchResult(notification=sent, status_url=status_url_for(sent.id))


__all__ = [
    "DispatchResult",
    "FALLBACK_NOTIFICATION_KEY",
    "IS_FALLBACK_KEY",
    "ORIGINAL_NOTIFICATION_KEY",
    "build_message_content",
    "process_notification",
    "status_url_for",
]
