"""Application factory for FastAPI app.

Centralizes app construction (metadata, lifespan, middleware, handlers,
routers) so tests can build isolated apps with their own cooldown store.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.adapters.ttl_store.base import AbstractTTLStore
from app.adapters.ttl_store.factory import create_ttl_store
from app.api.routes import health_router, play_router
from app.core.config import settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.services.cooldown_limiter import CooldownLimiter

logger = logging.getLogger(__name__)


def _build_lifespan(store: AbstractTTLStore | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # A ConfigurationAppError raised here aborts startup
        ttl_store = store if store is not None else create_ttl_store(settings)
        app.state.ttl_store = ttl_store
        app.state.cooldown_limiter = CooldownLimiter(ttl_store)
        logger.info(
            "app.startup",
            extra={"store_backend": type(ttl_store).__name__},
        )
        try:
            yield
        finally:
            await ttl_store.close()
            logger.info("app.shutdown")

    return lifespan


def create_app(store: AbstractTTLStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store: Cooldown store to use instead of the configured backend
            (tests and embedding). The app closes it on shutdown.

    Returns:
        Configured FastAPI app with lifespan, middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Play Cooldown API",
        description=(
            "Lets each client (by IP address) play once per cooldown window. "
            "Cooldown records live in Redis with a matching TTL, so any number "
            "of API instances can share them."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=_build_lifespan(store),
    )

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(play_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
