"""External trigger entry points for scheduled notifications."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from notifyhub.domain.entities import STATUS_SCHEDULED
from notifyhub.domain.exceptions import DeliveryError, ValidationError
from notifyhub.infrastructure.providers import ProviderRegistry
from notifyhub.infrastructure.repositories import NotificationRepository
from notifyhub.utils import now_utc

from .get_notification import get_notification
from .process_notification import DispatchResult, process_notification

logger = logging.getLogger(__name__)


def trigger_scheduled_notification(
    session: Session, registry: ProviderRegistry, notification_id: str
) -> DispatchResult:
    """Process a scheduled notification now, regardless of its due time."""

    notification = get_notification(session, notification_id)
    if notification.status != STATUS_SCHEDULED:
        raise ValidationError(
            f"Only scheduled notifications can be dispatched, found {notification.status}"
        )
    return process_notification(session, registry, notification)


def dispatch_due_notifications(
    session: Session,
    registry: ProviderRegistry,
    *,
    now: datetime | None = None,
) -> list[DispatchResult]:
    """Process every scheduled notification that is due at ``now``.

    A failed delivery is logged and does not stop the remaining ones.
    """

    due = NotificationRepository(session).list_due_scheduled(now or now_utc())
    results: list[DispatchResult] = []
    for notification in due:
        try:
            results.append(process_notification(session, registry, notification))
        except DeliveryError as exc:
            logger.error("Scheduled notification %s failed: %s", notification.id, exc)
    logger.info("Dispatched %s of %s due notifications", len(results), len(due))
    return results
