"""Service health route."""

import logging

import anyio
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notifyhub import __version__
from notifyhub.config import get_settings
from notifyhub.infrastructure.providers import ProviderRegistry
from notifyhub.interfaces.api.dependencies import get_db, get_provider_registry
from notifyhub.interfaces.api.schemas import HealthRead
from notifyhub.utils import now_utc

router = APIRouter(prefix="/health", tags=["health"])

logger = logging.getLogger(__name__)


def _ping_database(db: Session) -> bool:
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database health check failed", exc_info=True)
        return False
    return True


@router.get("", response_model=HealthRead)
async def check_health(
    db: Session = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
) -> HealthRead:
    """Report service, database and per-provider health.

    Provider probes run concurrently; a failing probe only flags its own
    provider.
    """

    database_up = await anyio.to_thread.run_sync(_ping_database, db)
    providers = await registry.check_health(timeout=get_settings().health_check_timeout_seconds)
    return HealthRead.model_validate(
        {
            "service": {"status": "up", "timestamp": now_utc(), "version": __version__},
            "database": {"status": "up" if database_up else "down"},
            "providers": providers,
        }
    )
