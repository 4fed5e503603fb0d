"""Use case cancelling a scheduled notification."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from notifyhub.domain.entities import STATUS_CANCELLED, STATUS_SCHEDULED, Notification
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import NotificationRepository

from .get_notification import get_notification

logger = logging.getLogger(__name__)


def cancel_notification(session: Session, notification_id: str) -> Notification:
    """Cancel ``notification_id``. Only scheduled notifications can be cancelled."""

    notification = get_notification(session, notification_id)
    if notification.status != STATUS_SCHEDULED:
        raise ValidationError(
            f"Cannot cancel notification in {notification.status} status"
        )

    notification.transition(STATUS_CANCELLED, "Cancelled by request")
    cancelled = NotificationRepository(session).update(notification)
    logger.info("Notification %s cancelled", cancelled.id)
    return cancelled
