"""Delivery provider adapters and the registry selecting between them."""

from .base import (
    STATUS_UNKNOWN,
    MessageContent,
    NotificationProvider,
    ProviderResult,
    ProviderStatus,
)
from .registry import ProviderRegistry, build_provider_registry

__all__ = [
    "STATUS_UNKNOWN",
    "MessageContent",
    "NotificationProvider",
    "ProviderResult",
    "ProviderStatus",
    "ProviderRegistry",
    "build_provider_registry",
]
