"""FastAPI application bootstrap and router wiring."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.routers import admin, attributes, cart, catalog, health
from storefront.clients.backend import BackendClient
from storefront.core.config import Settings, get_settings
from storefront.services.cart import CartRepository
from storefront.services.catalog_store import CatalogStore
from storefront.utils.redis_client import create_redis_client

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    settings: Settings | None = None,
    backend_client: BackendClient | None = None,
    cart_repository: CartRepository | None = None,
    catalog_store: CatalogStore | None = None,
) -> FastAPI:
    """Instantiate the app; collaborators can be injected (tests do)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"Starting {settings.app_name} against {settings.backend_api_url}")
        yield
        app.state.backend_client.close()

    app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.backend_client = backend_client or BackendClient.from_settings(settings)
    app.state.catalog_store = catalog_store or CatalogStore(
        featured_limit=settings.featured_limit
    )
    app.state.cart_repository = cart_repository or CartRepository(
        create_redis_client(
            settings.redis_url, decode_responses=True, socket_connect_timeout=2
        ),
        ttl=timedelta(hours=settings.cart_ttl_hours),
    )

    cors_origins = settings.cors_origins
    logger.info(f"[CORS] Parsed allowed origins: {cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(catalog.router, prefix="/api/catalog", tags=["catalog"])
    app.include_router(attributes.router, prefix="/api/attributes", tags=["attributes"])
    app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
    app.include_router(admin.router, prefix="/api/admin", tags=["admin"])

    return app


app = create_app()
