"""Public catalog endpoints: filtered listing, featured, categories, product detail."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from storefront.api.dependencies.services import (
    backend_http_error,
    get_app_settings,
    get_backend_client,
    get_catalog_store,
    get_loaded_catalog,
)
from storefront.api.schemas.catalog import (
    CatalogListResponse,
    CategorySummary,
    FilterSpec,
    PriceRange,
    ProductCard,
    ProductDetail,
)
from storefront.clients.backend import BackendClient, BackendError
from storefront.core.config import Settings
from storefront.services.catalog_store import CatalogStore
from storefront.services.filter_engine import has_filters, is_live
from storefront.services.presenters import product_card, product_detail

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/products",
    summary="List catalog products with filters",
    response_model=CatalogListResponse,
)
def list_products(
    search: str | None = Query(None, description="Case-insensitive text search"),
    category: str | None = Query(None, description="Category id or name"),
    min_price: str | None = Query(None, description="Inclusive lower bound on base price"),
    max_price: str | None = Query(None, description="Inclusive upper bound on base price"),
    sort_by: str | None = Query(None, description="name | created_at"),
    sort_order: str | None = Query(None, description="asc | desc"),
    store: CatalogStore = Depends(get_loaded_catalog),
    settings: Settings = Depends(get_app_settings),
) -> CatalogListResponse:
    """Return live products matching the filters.

    Malformed price bounds or sort values are ignored rather than rejected.
    """
    spec = FilterSpec(
        search=search,
        category=category,
        price_range=PriceRange(min=min_price, max=max_price),
        sort_by=sort_by,
        sort_order=sort_order,
    )
    products = store.filtered(spec)
    return CatalogListResponse(
        items=[product_card(product, settings) for product in products],
        total=len(products),
        has_filters=has_filters(spec),
        filters=spec,
    )


@router.get(
    "/featured",
    summary="Newest products for the home page",
    response_model=list[ProductCard],
)
def featured_products(
    store: CatalogStore = Depends(get_loaded_catalog),
    settings: Settings = Depends(get_app_settings),
) -> list[ProductCard]:
    return [product_card(product, settings) for product in store.featured]


@router.get(
    "/categories",
    summary="Categories present in the catalog with product counts",
    response_model=list[CategorySummary],
)
def list_categories(
    store: CatalogStore = Depends(get_loaded_catalog),
) -> list[CategorySummary]:
    return store.categories


@router.post(
    "/refresh",
    summary="Reload the catalog from the backend",
    response_model=dict,
)
def refresh_catalog(
    store: CatalogStore = Depends(get_catalog_store),
    client: BackendClient = Depends(get_backend_client),
) -> dict:
    try:
        products = store.refresh(client)
    except BackendError as e:
        logger.error(f"Catalog refresh failed: {e}", exc_info=True)
        raise backend_http_error(e, "Error al cargar el catálogo de productos") from e
    return {"products": len(products), "categories": len(store.categories)}


@router.get(
    "/products/slug/{slug}",
    summary="Product detail by slug",
    response_model=ProductDetail,
)
def get_product_by_slug(
    slug: str,
    store: CatalogStore = Depends(get_loaded_catalog),
    client: BackendClient = Depends(get_backend_client),
    settings: Settings = Depends(get_app_settings),
) -> ProductDetail:
    """Serve from the loaded catalog, falling back to the backend for unknown slugs."""
    product = store.get_by_slug(slug)
    if product is None:
        try:
            product = client.get_product_by_slug(slug)
        except BackendError as e:
            logger.warning(f"Product slug {slug} lookup failed: {e}")
            raise backend_http_error(e, "Producto no encontrado") from e
    if not is_live(product):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado"
        )
    return product_detail(product, settings)


@router.get(
    "/products/{product_id}",
    summary="Product detail by id",
    response_model=ProductDetail,
)
def get_product(
    product_id: str,
    store: CatalogStore = Depends(get_loaded_catalog),
    settings: Settings = Depends(get_app_settings),
) -> ProductDetail:
    product = store.get_by_id(product_id)
    if product is None or not is_live(product):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Producto no encontrado"
        )
    return product_detail(product, settings)
