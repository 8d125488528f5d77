"""Request-scoped access to the objects created by the app factory."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, status

from storefront.clients.backend import BackendClient, BackendError
from storefront.core.config import Settings
from storefront.services.cart import CartRepository
from storefront.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_backend_client(request: Request) -> BackendClient:
    return request.app.state.backend_client


def get_catalog_store(request: Request) -> CatalogStore:
    return request.app.state.catalog_store


def get_cart_repository(request: Request) -> CartRepository:
    return request.app.state.cart_repository


def get_loaded_catalog(
    store: CatalogStore = Depends(get_catalog_store),
    client: BackendClient = Depends(get_backend_client),
) -> CatalogStore:
    """Catalog store, fetched from the backend on first use."""
    if not store.loaded:
        try:
            store.refresh(client)
        except BackendError as e:
            logger.error(f"Failed to load catalog: {e}", exc_info=True)
            raise backend_http_error(e, "Error al cargar el catálogo de productos") from e
    return store


def backend_http_error(error: BackendError, detail: str) -> HTTPException:
    """Map a backend failure onto the response we give our own callers."""
    if error.status_code == status.HTTP_404_NOT_FOUND:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.message)
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
