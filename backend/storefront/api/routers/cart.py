"""Cart endpoints backed by Redis snapshots."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from storefront.api.dependencies.services import get_cart_repository, get_loaded_catalog
from storefront.api.schemas.cart import CartAddRequest, CartQuantityRequest, CartResponse
from storefront.services.cart import Cart, CartRepository
from storefront.services.catalog_store import CatalogStore
from storefront.services.pricing import display_stock, stock_status, variant_stock

logger = logging.getLogger(__name__)

router = APIRouter()


def _response(cart: Cart) -> CartResponse:
    return CartResponse(items=cart.items, total=cart.total, item_count=cart.item_count)


@router.get("/{cart_id}", summary="Current cart", response_model=CartResponse)
def get_cart(
    cart_id: str,
    repository: CartRepository = Depends(get_cart_repository),
) -> CartResponse:
    return _response(repository.load(cart_id))


@router.post(
    "/{cart_id}/items",
    summary="Add a product (or variant) to the cart",
    response_model=CartResponse,
)
def add_item(
    cart_id: str,
    payload: CartAddRequest,
    store: CatalogStore = Depends(get_loaded_catalog),
    repository: CartRepository = Depends(get_cart_repository),
) -> CartResponse:
    """Reject unknown products and anything currently out of stock."""
    product = store.get_by_id(payload.product_id)
    if product is None or not product.is_live:
        raise HTTPException(status_code=404, detail="Producto no encontrado")

    variant = None
    if payload.variant_id is not None:
        variant = next(
            (
                v
                for v in product.variants
                if v.id == payload.variant_id and v.is_active
            ),
            None,
        )
        if variant is None:
            raise HTTPException(status_code=404, detail="Variante no encontrada")

    if variant is not None:
        availability = stock_status(variant_stock(product, variant))
    else:
        availability = stock_status(display_stock(product))
    if not availability.can_add_to_cart:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=availability.message
        )

    cart = repository.load(cart_id)
    item = cart.add(product, payload.quantity, variant)
    repository.save(cart_id, cart)
    logger.info(f"Cart {cart_id}: {item.id} x{item.quantity}")
    return _response(cart)


@router.patch(
    "/{cart_id}/items/{item_id}",
    summary="Change a line's quantity",
    response_model=CartResponse,
)
def update_item(
    cart_id: str,
    item_id: str,
    payload: CartQuantityRequest,
    repository: CartRepository = Depends(get_cart_repository),
) -> CartResponse:
    cart = repository.load(cart_id)
    if cart.get(item_id) is None:
        raise HTTPException(status_code=404, detail="Item not in cart")
    cart.update_quantity(item_id, payload.quantity)
    repository.save(cart_id, cart)
    return _response(cart)


@router.delete(
    "/{cart_id}/items/{item_id}",
    summary="Remove a line",
    response_model=CartResponse,
)
def remove_item(
    cart_id: str,
    item_id: str,
    repository: CartRepository = Depends(get_cart_repository),
) -> CartResponse:
    cart = repository.load(cart_id)
    cart.remove(item_id)
    repository.save(cart_id, cart)
    return _response(cart)


@router.delete("/{cart_id}", summary="Empty the cart")
def clear_cart(
    cart_id: str,
    repository: CartRepository = Depends(get_cart_repository),
) -> Response:
    repository.delete(cart_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
