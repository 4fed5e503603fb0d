"""Error taxonomy shared by every layer of the service."""

from __future__ import annotations


class NotificationServiceError(Exception):
    """Base class for errors raised by the notification service."""


class ValidationError(NotificationServiceError, ValueError):
    """Raised when input is malformed or an operation violates a policy."""


class NotFoundError(NotificationServiceError, LookupError):
    """Raised when a notification, template or preference cannot be located."""


class ProviderConfigurationError(NotificationServiceError):
    """Raised when a channel or provider is unknown or lacks credentials.

    These are deployment problems rather than transient failures, so they are
    never retried against the same channel.
    """


class ProviderError(NotificationServiceError, RuntimeError):
    """Raised when a delivery provider fails to fulfil a request."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        channel: str | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.channel = channel


class DeliveryError(ProviderError):
    """Raised when the last attempt of a delivery (fallbacks included) fails."""

    def __init__(
        self,
        message: str,
        *,
        notification_id: str | None,
        channel: str | None,
        provider: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider, channel=channel)
        self.notification_id = notification_id


__all__ = [
    "NotificationServiceError",
    "ValidationError",
    "NotFoundError",
    "ProviderConfigurationError",
    "ProviderError",
    "DeliveryError",
]
