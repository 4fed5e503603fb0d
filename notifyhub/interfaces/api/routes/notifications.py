"""Routes for sending notifications and following their lifecycle."""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from notifyhub.application.use_cases.notifications import (
    IS_FALLBACK_KEY,
    DispatchResult,
    NewNotificationData,
    cancel_notification as cancel_notification_uc,
    get_notification as get_notification_uc,
    get_notification_status as get_notification_status_uc,
    list_notifications as list_notifications_uc,
    send_notification as send_notification_uc,
    trigger_scheduled_notification as trigger_scheduled_notification_uc,
    update_notification_status as update_notification_status_uc,
)
from notifyhub.domain.entities import Notification
from notifyhub.domain.exceptions import NotificationServiceError
from notifyhub.infrastructure.providers import ProviderRegistry, ProviderStatus
from notifyhub.interfaces.api.dependencies import get_db, get_provider_registry
from notifyhub.interfaces.api.routes_helpers import entity_payload, to_http_exception
from notifyhub.interfaces.api.schemas import (
    DispatchResponse,
    NotificationCreate,
    NotificationPage,
    NotificationRead,
    NotificationStatusRead,
    NotificationStatusUpdate,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_read_model(notification: Notification) -> NotificationRead:
    return NotificationRead.model_validate(entity_payload(notification))


def _dispatch_to_response(result: DispatchResult) -> DispatchResponse:
    notification = result.notification
    response = notification.provider_response
    return DispatchResponse(
        notification_id=notification.id,
        status=notification.status,
        channel=notification.channel,
        provider=notification.provider,
        recipient=notification.recipient.value,
        message_id=response.message_id if response else None,
        scheduled_for=notification.options.scheduled_for,
        status_url=result.status_url,
        is_fallback=bool(notification.metadata.get(IS_FALLBACK_KEY)),
    )


def _status_to_read_model(
    notification: Notification, provider_status: ProviderStatus | None = None
) -> NotificationStatusRead:
    payload = entity_payload(notification)
    return NotificationStatusRead.model_validate(
        {
            "notification_id": notification.id,
            "status": notification.status,
            "channel": notification.channel,
            "provider": notification.provider,
            "status_history": payload["status_history"],
            "provider_response": payload["provider_response"],
            "provider_status": entity_payload(provider_status) if provider_status else None,
        }
    )


@router.post("", response_model=DispatchResponse, status_code=status.HTTP_202_ACCEPTED)
def send_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> DispatchResponse:
    data = NewNotificationData(
        recipient=payload.recipient_entity(),
        channel=payload.channel,
        content=payload.content.to_domain(),
        provider=payload.provider,
        options=payload.options.to_domain(),
        metadata=dict(payload.metadata),
    )
    try:
        result = send_notification_uc(db, registry, data)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _dispatch_to_response(result)


@router.get("", response_model=NotificationPage)
def list_notifications(
    status_filter: str | None = Query(default=None, alias="status"),
    channel: str | None = None,
    recipient: str | None = None,
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    page: int = Query(default=1),
    limit: int = Query(default=20),
    db: Session = Depends(get_db),
) -> NotificationPage:
    try:
        result = list_notifications_uc(
            db,
            status=status_filter,
            channel=channel,
            recipient=recipient,
            created_from=created_from,
            created_to=created_to,
            page=page,
            limit=limit,
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return NotificationPage(
        items=[_notification_to_read_model(item) for item in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        pages=result.pages,
    )


@router.get("/{notification_id}", response_model=NotificationRead)
def get_notification(notification_id: str, db: Session = Depends(get_db)) -> NotificationRead:
    try:
        notification = get_notification_uc(db, notification_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_read_model(notification)


@router.delete("/{notification_id}", response_model=NotificationRead)
def cancel_notification(notification_id: str, db: Session = Depends(get_db)) -> NotificationRead:
    try:
        notification = cancel_notification_uc(db, notification_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_read_model(notification)


@router.get("/{notification_id}/status", response_model=NotificationStatusRead)
def get_notification_status(
    notification_id: str,
    refresh: bool = False,
    db: Session = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> NotificationStatusRead:
    try:
        report = get_notification_status_uc(db, registry, notification_id, refresh=refresh)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _status_to_read_model(report.notification, report.provider_status)


@router.patch("/{notification_id}/status", response_model=NotificationStatusRead)
def update_notification_status(
    notification_id: str,
    payload: NotificationStatusUpdate,
    db: Session = Depends(get_db),
) -> NotificationStatusRead:
    try:
        notification = update_notification_status_uc(
            db,
            notification_id,
            payload.status,
            details=payload.details,
            provider_response=payload.provider_response,
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _status_to_read_model(notification)


@router.post("/{notification_id}/dispatch", response_model=DispatchResponse)
def dispatch_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> DispatchResponse:
    try:
        result = trigger_scheduled_notification_uc(db, registry, notification_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _dispatch_to_response(result)
