"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy.orm import Query, Session

from notifyhub.domain.entities import (
    STATUS_SCHEDULED,
    Attachment,
    LiteralContent,
    Notification,
    NotificationContent,
    NotificationOptions,
    ProviderResponse,
    Recipient,
    StatusHistoryEntry,
    TemplateContent,
)
from notifyhub.infrastructure.models import NotificationModel
from notifyhub.utils import ensure_utc, now_utc, parse_isoformat, to_isoformat


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: str) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        if model is None:
            return None
        return self._to_entity(model)

    def find(
        self,
        *,
        status: str | None = None,
        channel: str | None = None,
        recipient: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
        offset: int = 0,
        limit: int | None = None,
    ) -> Sequence[Notification]:
        query = self._filtered_query(
            status=status,
            channel=channel,
            recipient=recipient,
            created_from=created_from,
            created_to=created_to,
        )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count(
        self,
        *,
        status: str | None = None,
        channel: str | None = None,
        recipient: str | None = None,
        created_from: datetime | None = None,
        created_to: datetime | None = None,
    ) -> int:
        query = self._filtered_query(
            status=status,
            channel=channel,
            recipient=recipient,
            created_from=created_from,
            created_to=created_to,
        )
        return query.count()

    def list_due_scheduled(self, now: datetime) -> Sequence[Notification]:
        """Return scheduled notifications whose dispatch time has passed."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == STATUS_SCHEDULED)
            .filter(NotificationModel.scheduled_for.isnot(None))
            .filter(NotificationModel.scheduled_for <= ensure_utc(now))
            .order_by(NotificationModel.scheduled_for.asc(), NotificationModel.id.asc())
        )
        return [self._to_entity(model) for model in query.all()]

    def create(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification, include_creation_fields=True)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, notification: Notification) -> Notification:
        if notification.id is None:
            raise ValueError("Notification id is required for updates")
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, notification, include_creation_fields=False)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def _filtered_query(
        self,
        *,
        status: str | None,
        channel: str | None,
        recipient: str | None,
        created_from: datetime | None,
        created_to: datetime | None,
    ) -> Query:
        query = self.session.query(NotificationModel)
        if status:
            query = query.filter(NotificationModel.status == status)
        if channel:
            query = query.filter(NotificationModel.channel == channel)
        if recipient:
            query = query.filter(NotificationModel.recipient_value == recipient)
        if created_from is not None:
            query = query.filter(NotificationModel.created_at >= ensure_utc(created_from))
        if created_to is not None:
            query = query.filter(NotificationModel.created_at <= ensure_utc(created_to))
        return query

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel,
        notification: Notification,
        *,
        include_creation_fields: bool,
    ) -> None:
        now = now_utc()
        if include_creation_fields:
            model.id = notification.id or uuid4().hex
            model.created_at = ensure_utc(notification.created_at) or now
        model.recipient_type = notification.recipient.type
        model.recipient_value = notification.recipient.value
        model.channel = notification.channel
        model.provider = notification.provider
        model.status = notification.status
        model.content = _dump_content(notification.content)
        model.status_history = [
            {
                "status": entry.status,
                "timestamp": to_isoformat(entry.timestamp),
                "details": entry.details,
            }
            for entry in notification.status_history
        ]
        model.options = _dump_options(notification.options)
        model.scheduled_for = ensure_utc(notification.options.scheduled_for)
        model.provider_response = _dump_provider_response(notification.provider_response)
        model.metadata_ = dict(notification.metadata or {})
        model.updated_at = now

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            recipient=Recipient(type=model.recipient_type, value=model.recipient_value),
            channel=model.channel,
            content=_load_content(model.content or {}),
            provider=model.provider,
            status=model.status,
            status_history=[
                StatusHistoryEntry(
                    status=item["status"],
                    timestamp=parse_isoformat(item.get("timestamp")),
                    details=item.get("details"),
                )
                for item in model.status_history or []
            ],
            options=_load_options(model.options or {}),
            provider_response=_load_provider_response(model.provider_response),
            metadata=dict(model.metadata_ or {}),
            created_at=ensure_utc(model.created_at),
            updated_at=ensure_utc(model.updated_at),
        )


def _dump_content(content: NotificationContent) -> dict[str, Any]:
    if isinstance(content, TemplateContent):
        return {
            "type": "template",
            "template_id": content.template_id,
            "parameters": dict(content.parameters),
        }
    return {
        "type": "literal",
        "text": content.text,
        "subject": content.subject,
        "html": content.html,
        "attachments": [
            {
                "filename": attachment.filename,
                "content": attachment.content,
                "content_type": attachment.content_type,
            }
            for attachment in content.attachments
        ],
        "template_name": content.template_name,
        "template_params": dict(content.template_params),
    }


def _load_content(payload: dict[str, Any]) -> NotificationContent:
    if payload.get("type") == "template":
        return TemplateContent(
            template_id=payload["template_id"],
            parameters=dict(payload.get("parameters") or {}),
        )
    return LiteralContent(
        text=payload.get("text"),
        subject=payload.get("subject"),
        html=payload.get("html"),
        attachments=[Attachment(**item) for item in payload.get("attachments") or []],
        template_name=payload.get("template_name"),
        template_params=dict(payload.get("template_params") or {}),
    )


def _dump_options(options: NotificationOptions) -> dict[str, Any]:
    return {
        "scheduled_for": to_isoformat(options.scheduled_for),
        "expires_at": to_isoformat(options.expires_at),
        "fallback_channels": list(options.fallback_channels),
        "priority": options.priority,
        "retry_count": options.retry_count,
        "max_retries": options.max_retries,
        "cc": list(options.cc),
        "bcc": list(options.bcc),
        "reply_to": options.reply_to,
        "sender_id": options.sender_id,
        "media_url": options.media_url,
        "media_type": options.media_type,
    }


def _load_options(payload: dict[str, Any]) -> NotificationOptions:
    values = dict(payload)
    values["scheduled_for"] = parse_isoformat(values.get("scheduled_for"))
    values["expires_at"] = parse_isoformat(values.get("expires_at"))
    return NotificationOptions(**values)


def _dump_provider_response(response: ProviderResponse | None) -> dict[str, Any] | None:
    if response is None:
        return None
    return {
        "message_id": response.message_id,
        "provider_timestamp": response.provider_timestamp,
        "raw_response": response.raw_response,
    }


def _load_provider_response(payload: dict[str, Any] | None) -> ProviderResponse | None:
    if payload is None:
        return None
    return ProviderResponse(
        message_id=payload.get("message_id"),
        provider_timestamp=payload.get("provider_timestamp"),
        raw_response=payload.get("raw_response"),
    )


__all__ = ["NotificationRepository"]
