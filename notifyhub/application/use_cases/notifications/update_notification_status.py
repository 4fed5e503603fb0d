"""Use case recording status changes reported from outside the engine."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from notifyhub.domain.entities import NOTIFICATION_STATUSES, Notification, ProviderResponse
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import NotificationRepository

from .get_notification import get_notification

logger = logging.getLogger(__name__)

_PROVIDER_RESPONSE_FIELDS = ("message_id", "provider_timestamp", "raw_response")


def update_notification_status(
    session: Session,
    notification_id: str,
    status: str,
    *,
    details: str | None = None,
    provider_response: Mapping[str, Any] | None = None,
) -> Notification:
    """Append ``status`` to the history, typically ``delivered`` or ``read``.

    ``provider_response`` is shallow-merged into the stored response. The
    record is read, modified and written back without locking, so concurrent
    updates of one notification are last-write-wins.
    """

    if status not in NOTIFICATION_STATUSES:
        raise ValidationError(f"Invalid status: {status}")

    notification = get_notification(session, notification_id)
    notification.transition(status, details or f"Status updated to {status}")

    if provider_response:
        unknown = sorted(set(provider_response) - set(_PROVIDER_RESPONSE_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown provider response fields: {', '.join(unknown)}")
        current = notification.provider_response or ProviderResponse(
            message_id=None, provider_timestamp=None
        )
        for key, value in provider_response.items():
            setattr(current, key, value)
        notification.provider_response = current

    updated = NotificationRepository(session).update(notification)
    logger.info("Notification %s moved to %s", updated.id, status)
    return updated
