import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notifyhub.config import get_settings
from notifyhub.infrastructure.database import engine, initialize_database
from notifyhub.infrastructure.providers import ProviderRegistry, build_provider_registry
from notifyhub.interfaces.api.routes import register_routes
from notifyhub.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(provider_registry: ProviderRegistry | None = None) -> FastAPI:
    """Create the FastAPI application.

    ``provider_registry`` replaces the registry built from the settings,
    which lets callers run the API against in-process providers.
    """

    settings = get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare the database and provider registry, release them on shutdown."""

        initialize_database()
        app.state.provider_registry = provider_registry or build_provider_registry(settings)
        logger.info(
            "Providers registered: %s",
            {
                channel: app.state.provider_registry.list_providers(channel)
                for channel in app.state.provider_registry.channels()
            },
        )
        yield
        app.state.provider_registry.close()
        engine.dispose()

    app = FastAPI(title="notifyhub", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
