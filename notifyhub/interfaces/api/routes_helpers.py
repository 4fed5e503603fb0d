"""Helper utilities shared across API route handlers."""

from __future__ import annotations

import dataclasses
from typing import Any

from fastapi import HTTPException, status

from notifyhub.domain.exceptions import (
    NotFoundError,
    NotificationServiceError,
    ProviderConfigurationError,
    ProviderError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[NotificationServiceError], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ProviderConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: NotificationServiceError) -> HTTPException:
    """Translate a service error into the matching ``HTTPException``."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


def entity_payload(entity: Any) -> dict[str, Any]:
    """Convert a domain dataclass into a plain dict for response models."""

    return dataclasses.asdict(entity)


__all__ = ["entity_payload", "to_http_exception"]
