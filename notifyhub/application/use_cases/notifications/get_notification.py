"""Use case for retrieving a single notification."""

from __future__ import annotations

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import NotFoundError
from notifyhub.infrastructure.repositories import NotificationRepository


def get_notification(session: Session, notification_id: str) -> Notification:
    notification = NotificationRepository(session).get(notification_id)
    if notification is None:
        raise NotFoundError(f"Notification not found: {notification_id}")
    return notification
