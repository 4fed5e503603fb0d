"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from notifyhub.domain.entities import (
    DEFAULT_PRIORITY,
    Attachment,
    LiteralContent,
    NotificationContent,
    NotificationOptions,
    Recipient,
    TemplateContent,
)


class RecipientSchema(BaseModel):
    type: str = Field(..., description="phone or email")
    value: str = Field(..., min_length=1)


class AttachmentSchema(BaseModel):
    filename: str = Field(..., min_length=1)
    content: str = Field(..., description="Base64 encoded file content")
    content_type: str = "application/octet-stream"


class NotificationContentSchema(BaseModel):
    """Either literal content or a reference to a stored template."""

    model_config = ConfigDict(extra="forbid")

    text: str | None = None
    subject: str | None = None
    html: str | None = None
    attachments: list[AttachmentSchema] = Field(default_factory=list)
    template_name: str | None = Field(
        default=None, description="Vendor-approved WhatsApp template name"
    )
    template_params: dict[str, Any] = Field(default_factory=dict)
    template_id: str | None = Field(
        default=None, description="Id or name of a stored template to render"
    )
    parameters: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_variant(self) -> "NotificationContentSchema":
        if self.template_id and (self.text or self.html or self.subject):
            raise ValueError("template_id cannot be combined with literal content")
        return self

    def to_domain(self) -> NotificationContent:
        if self.template_id:
            return TemplateContent(template_id=self.template_id, parameters=dict(self.parameters))
        return LiteralContent(
            text=self.text,
            subject=self.subject,
            html=self.html,
            attachments=[Attachment(**item.model_dump()) for item in self.attachments],
            template_name=self.template_name,
            template_params=dict(self.template_params),
        )


class NotificationOptionsSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scheduled_for: datetime | None = None
    expires_at: datetime | None = None
    fallback_channels: list[str] = Field(default_factory=list)
    priority: str = DEFAULT_PRIORITY
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    reply_to: str | None = None
    sender_id: str | None = None
    media_url: str | None = None
    media_type: str | None = None

    def to_domain(self) -> NotificationOptions:
        return NotificationOptions(**self.model_dump())


class NotificationCreate(BaseModel):
    """Payload accepted by ``POST /notifications``."""

    recipient: RecipientSchema
    channel: str
    content: NotificationContentSchema
    provider: str | None = None
    options: NotificationOptionsSchema = Field(default_factory=NotificationOptionsSchema)
    metadata: dict[str, Any] = Field(default_factory=dict)

    def recipient_entity(self) -> Recipient:
        return Recipient(type=self.recipient.type, value=self.recipient.value)


class StatusHistoryEntryRead(BaseModel):
    status: str
    timestamp: datetime
    details: str | None = None


class ProviderResponseRead(BaseModel):
    message_id: str | None = None
    provider_timestamp: str | None = None
    raw_response: Any = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    recipient: RecipientSchema
    channel: str
    provider: str | None = None
    status: str
    content: dict[str, Any]
    status_history: list[StatusHistoryEntryRead]
    options: dict[str, Any]
    provider_response: ProviderResponseRead | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class NotificationPage(BaseModel):
    items: list[NotificationRead]
    total: int
    page: int
    limit: int
    pages: int


class DispatchResponse(BaseModel):
    """Acknowledgement returned after accepting a notification."""

    notification_id: str
    status: str
    channel: str
    provider: str | None = None
    recipient: str
    message_id: str | None = None
    scheduled_for: datetime | None = None
    status_url: str
    is_fallback: bool = False


class NotificationStatusUpdate(BaseModel):
    status: str
    details: str | None = None
    provider_response: dict[str, Any] | None = None


class ProviderStatusRead(BaseModel):
    message_id: str
    status: str
    provider: str
    updated_at: str
    details: dict[str, Any] = Field(default_factory=dict)


class NotificationStatusRead(BaseModel):
    notification_id: str
    status: str
    channel: str
    provider: str | None = None
    status_history: list[StatusHistoryEntryRead]
    provider_response: ProviderResponseRead | None = None
    provider_status: ProviderStatusRead | None = None


__all__ = [
    "AttachmentSchema",
    "DispatchResponse",
    "NotificationContentSchema",
    "NotificationCreate",
    "NotificationOptionsSchema",
    "NotificationPage",
    "NotificationRead",
    "NotificationStatusRead",
    "NotificationStatusUpdate",
    "ProviderResponseRead",
    "ProviderStatusRead",
    "RecipientSchema",
    "StatusHistoryEntryRead",
]
