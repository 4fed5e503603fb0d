"""Use case reporting the delivery status of a notification."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from notifyhub.domain.entities import Notification
from notifyhub.infrastructure.providers import ProviderRegistry, ProviderStatus

from .get_notification import get_notification


@dataclass
class NotificationStatusReport:
    notification: Notification
    provider_status: ProviderStatus | None = None


def get_notification_status(
    session: Session,
    registry: ProviderRegistry,
    notification_id: str,
    *,
    refresh: bool = False,
) -> NotificationStatusReport:
    """Return the stored status and, with ``refresh``, the provider's view.

    Refreshing never modifies the stored record.
    """

    notification = get_notification(session, notification_id)
    report = NotificationStatusReport(notification=notification)
    message_id = (
        notification.provider_response.message_id if notification.provider_response else None
    )
    if refresh and notification.provider and message_id:
        provider = registry.get_provider(notification.channel, notification.provider)
        report.provider_status = provider.get_status(message_id)
    return report
