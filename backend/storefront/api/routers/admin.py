"""Admin console endpoints; mutations are forwarded to the backend."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from storefront.api.dependencies.services import (
    backend_http_error,
    get_backend_client,
    get_catalog_store,
)
from storefront.api.schemas.admin import (
    DisplayRowListResponse,
    DisplayRowRead,
    ProductDraft,
    ProductDraftValidation,
    ProductStats,
)
from storefront.api.schemas.product import (
    Product,
    ProductVariant,
    ProductVariantCreate,
    ProductVariantUpdate,
)
from storefront.clients.backend import BackendClient, BackendError
from storefront.services.admin_listing import (
    build_display_rows,
    calculate_stats,
    row_summary,
)
from storefront.services.catalog_store import CatalogStore, parse_products
from storefront.utils.product_validator import (
    generate_sku,
    generate_slug,
    validate_product_data,
)

logger = logging.getLogger(__name__)

router = APIRouter()

STATUSES = {"ALL", "ACTIVE", "INACTIVE", "DELETED"}
TYPES = {"ALL", "SIMPLE", "VARIABLE"}
SORTS = {"default", "name_asc", "name_desc", "price_asc", "price_desc", "newest", "oldest"}


def _fetch_admin_products(client: BackendClient, include_deleted: bool) -> list[Product]:
    try:
        records = client.list_products(include_inactive=True)
        if include_deleted:
            known = {str(record.get("id")) for record in records}
            records += [
                record
                for record in client.list_deleted_products()
                if str(record.get("id")) not in known
            ]
    except BackendError as e:
        logger.error(f"Failed to fetch admin products: {e}", exc_info=True)
        raise backend_http_error(e, "Error al cargar productos") from e
    return parse_products(records)


def _forward(
    action: Callable[[], Any],
    store: CatalogStore,
    description: str,
    failure_detail: str,
) -> Any:
    """Run a backend mutation, then mark the public catalog stale."""
    try:
        result = action()
    except BackendError as e:
        logger.error(f"Failed to {description}: {e}", exc_info=True)
        raise backend_http_error(e, failure_detail) from e
    store.invalidate()
    logger.info(f"Admin action succeeded: {description}")
    return result


@router.get(
    "/products/rows",
    summary="Product table rows (products, or variants when type=VARIABLE)",
    response_model=DisplayRowListResponse,
)
def list_rows(
    status_filter: str = Query("ALL", alias="status"),
    type_filter: str = Query("ALL", alias="type"),
    search: str = Query(""),
    sort: str = Query("default"),
    client: BackendClient = Depends(get_backend_client),
) -> DisplayRowListResponse:
    status_filter = status_filter.upper() if status_filter.upper() in STATUSES else "ALL"
    type_filter = type_filter.upper() if type_filter.upper() in TYPES else "ALL"
    sort = sort if sort in SORTS else "default"

    products = _fetch_admin_products(client, include_deleted=status_filter in ("ALL", "DELETED"))
    rows = build_display_rows(products, status_filter, type_filter, search, sort)
    return DisplayRowListResponse(
        items=[DisplayRowRead(**row_summary(row)) for row in rows],
        total=len(rows),
        has_filters=(
            bool(search.strip())
            or status_filter != "ALL"
            or type_filter != "ALL"
            or sort != "default"
        ),
    )


@router.get("/products/stats", summary="Product counters", response_model=ProductStats)
def product_stats(
    client: BackendClient = Depends(get_backend_client),
) -> ProductStats:
    products = _fetch_admin_products(client, include_deleted=True)
    return ProductStats(**calculate_stats(products))


@router.post(
    "/products/validate",
    summary="Validate a product form before submitting it",
    response_model=ProductDraftValidation,
)
async def validate_product(payload: ProductDraft) -> ProductDraftValidation:
    errors = validate_product_data(payload.model_dump(exclude_unset=True))
    name = payload.name.strip() if payload.name else ""
    return ProductDraftValidation(
        valid=not errors,
        errors=errors,
        suggested_slug=generate_slug(name) if name else None,
        suggested_sku=generate_sku(name) if name else None,
    )


@router.patch("/products/{product_id}/activate", response_model=Product)
def activate_product(
    product_id: str,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> Product:
    return _forward(
        lambda: client.activate_product(product_id),
        store,
        f"activate product {product_id}",
        "Error al activar producto",
    )


@router.patch("/products/{product_id}/deactivate", response_model=Product)
def deactivate_product(
    product_id: str,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> Product:
    return _forward(
        lambda: client.deactivate_product(product_id),
        store,
        f"deactivate product {product_id}",
        "Error al desactivar producto",
    )


@router.patch("/products/{product_id}/restore", response_model=Product)
def restore_product(
    product_id: str,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> Product:
    return _forward(
        lambda: client.restore_product(product_id),
        store,
        f"restore product {product_id}",
        "Error al restaurar producto",
    )


@router.delete("/products/{product_id}", summary="Soft delete a product")
def delete_product(
    product_id: str,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> Response:
    _forward(
        lambda: client.soft_delete_product(product_id),
        store,
        f"soft delete product {product_id}",
        "Error al eliminar producto",
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/products/{product_id}/variants",
    summary="Variants of a product",
    response_model=list[ProductVariant],
)
def list_variants(
    product_id: str,
    client: BackendClient = Depends(get_backend_client),
) -> list[ProductVariant]:
    try:
        return client.list_variants(product_id)
    except BackendError as e:
        logger.error(f"Failed to list variants of {product_id}: {e}", exc_info=True)
        raise backend_http_error(e, "Error al cargar variantes") from e


@router.post(
    "/products/{product_id}/variants",
    summary="Create a variant",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductVariant,
)
def create_variant(
    product_id: str,
    payload: ProductVariantCreate,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> ProductVariant:
    if payload.product_id != product_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="product_id in body does not match the URL",
        )
    return _forward(
        lambda: client.create_variant(payload),
        store,
        f"create variant for product {product_id}",
        "Error al crear variante",
    )


@router.patch("/variants/{variant_id}", response_model=ProductVariant)
def update_variant(
    variant_id: str,
    payload: ProductVariantUpdate,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> ProductVariant:
    return _forward(
        lambda: client.update_variant(variant_id, payload),
        store,
        f"update variant {variant_id}",
        "Error al actualizar variante",
    )


@router.delete("/variants/{variant_id}", summary="Delete a variant")
def delete_variant(
    variant_id: str,
    client: BackendClient = Depends(get_backend_client),
    store: CatalogStore = Depends(get_catalog_store),
) -> Response:
    _forward(
        lambda: client.delete_variant(variant_id),
        store,
        f"delete variant {variant_id}",
        "Error al eliminar variante",
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
