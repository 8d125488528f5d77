"""Liveness and readiness probes."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from redis.exceptions import RedisError

from storefront.api.dependencies.services import (
    get_backend_client,
    get_cart_repository,
    get_catalog_store,
)
from storefront.clients.backend import BackendClient, BackendError
from storefront.services.cart import CartRepository
from storefront.services.catalog_store import CatalogStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/health", tags=["health"])

SERVICE_NAME = "storefront-api"


@router.get("/live", summary="Liveness probe")
async def live() -> dict[str, str]:
    """Indicates the API process is running."""
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/ready", summary="Readiness probe")
def ready(
    client: BackendClient = Depends(get_backend_client),
    repository: CartRepository = Depends(get_cart_repository),
    store: CatalogStore = Depends(get_catalog_store),
) -> dict[str, Any]:
    """Check the upstream product API and the cart store.

    The backend is required; Redis only degrades the cart, so its failure is
    reported without failing readiness.
    """
    checks: dict[str, Any] = {
        "status": "ok",
        "service": SERVICE_NAME,
        "checks": {},
    }

    try:
        client.ping()
        checks["checks"]["backend"] = {
            "status": "healthy",
            "message": "Backend API reachable",
        }
    except BackendError as e:
        logger.error(f"Backend health check failed: {e}", exc_info=True)
        checks["checks"]["backend"] = {
            "status": "unhealthy",
            "message": f"Backend API unreachable: {e.message}",
        }
        checks["status"] = "unhealthy"

    try:
        repository.client.ping()
        checks["checks"]["redis"] = {
            "status": "healthy",
            "message": "Redis connection successful",
        }
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        checks["checks"]["redis"] = {
            "status": "unhealthy",
            "message": f"Redis connection failed: {str(e)}",
        }

    checks["checks"]["catalog"] = {
        "status": "loaded" if store.loaded else "not_loaded",
        "products": len(store.products),
    }

    if checks["status"] != "ok":
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=checks,
        )
    return checks
