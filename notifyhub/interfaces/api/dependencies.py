"""FastAPI dependency utilities."""

from fastapi import HTTPException, Request, status

from notifyhub.infrastructure.database import get_db
from notifyhub.infrastructure.providers import ProviderRegistry


def get_provider_registry(request: Request) -> ProviderRegistry:
    """Return the registry built by the application lifespan."""

    registry = getattr(request.app.state, "provider_registry", None)
    if registry is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Provider registry is not initialized",
        )
    return registry


__all__ = ["get_db", "get_provider_registry"]
