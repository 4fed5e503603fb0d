"""Use case for listing notifications."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from notifyhub.application.use_cases.pagination import Page, offset_for, validate_pagination
from notifyhub.domain.entities import CHANNELS, NOTIFICATION_STATUSES, Notification
from notifyhub.domain.exceptions import ValidationError
from notifyhub.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    *,
    status: str | None = None,
    channel: str | None = None,
    recipient: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> Page[Notification]:
    """Return one page of notifications, newest first.

    ``recipient`` matches the normalized recipient value exactly.
    """

    page, limit = validate_pagination(page, limit)
    if status and status not in NOTIFICATION_STATUSES:
        raise ValidationError(f"Invalid status: {status}")
    if channel and channel not in CHANNELS:
        raise ValidationError(f"Invalid channel: {channel}")
    if created_from and created_to and created_from > created_to:
        raise ValidationError("created_from must not be after created_to")

    filters = {
        "status": status,
        "channel": channel,
        "recipient": recipient.strip() if recipient else None,
        "created_from": created_from,
        "created_to": created_to,
    }
    repository = NotificationRepository(session)
    items = repository.find(**filters, offset=offset_for(page, limit), limit=limit)
    return Page(items=list(items), total=repository.count(**filters), page=page, limit=limit)
