"""Pydantic schemas used by the API layer."""

from .health import ChannelHealth, DatabaseHealth, HealthRead, ServiceHealth
from .notification import (
    DispatchResponse,
    NotificationCreate,
    NotificationPage,
    NotificationRead,
    NotificationStatusRead,
    NotificationStatusUpdate,
)
from .preference import (
    CanReceiveRead,
    OptRequest,
    PreferenceRead,
    PreferenceUpdate,
    PreferredChannelRead,
    VerifyRequest,
)
from .template import (
    RenderedContentRead,
    TemplateCreate,
    TemplatePage,
    TemplateRead,
    TemplateRenderRequest,
    TemplateUpdate,
)

__all__ = [
    "CanReceiveRead",
    "ChannelHealth",
    "DatabaseHealth",
    "DispatchResponse",
    "HealthRead",
    "NotificationCreate",
    "NotificationPage",
    "NotificationRead",
    "NotificationStatusRead",
    "NotificationStatusUpdate",
    "OptRequest",
    "PreferenceRead",
    "PreferenceUpdate",
    "PreferredChannelRead",
    "RenderedContentRead",
    "ServiceHealth",
    "TemplateCreate",
    "TemplatePage",
    "TemplateRead",
    "TemplateRenderRequest",
    "TemplateUpdate",
    "VerifyRequest",
]
