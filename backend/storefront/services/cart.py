"""Shopping cart lines keyed by product (and variant) id."""

from __future__ import annotations

import json
import logging
from datetime import timedelta

from pydantic import ValidationError
from redis import Redis
from redis.exceptions import RedisError

from storefront.api.schemas.cart import CartItem
from storefront.api.schemas.product import Product, ProductVariant
from storefront.services.images import primary_image

logger = logging.getLogger(__name__)

CART_PREFIX = "cart:items:v2:"


def cart_item_key(product_id: str, variant_id: str | None = None) -> str:
    """``productId`` for simple lines, ``productId-variantId`` when a variant is attached."""
    return f"{product_id}-{variant_id}" if variant_id else product_id


class Cart:
    """At most one line per key; adding an existing key bumps its quantity."""

    def __init__(self, items: list[CartItem] | None = None) -> None:
        self.items: list[CartItem] = list(items or [])

    def get(self, key: str) -> CartItem | None:
        for item in self.items:
            if item.id == key:
                return item
        return None

    def add(
        self,
        product: Product,
        quantity: int = 1,
        variant: ProductVariant | None = None,
    ) -> CartItem:
        quantity = max(1, quantity)
        key = cart_item_key(product.id, variant.id if variant else None)
        existing = self.get(key)
        if existing is not None:
            existing.quantity += quantity
            return existing

        if variant is not None:
            price = variant.price
        else:
            price = product.base_price or 0.0

        if variant is not None and variant.images:
            image = variant.images[0].url
        else:
            image = primary_image(product) or ""

        item = CartItem(
            id=key,
            product_id=product.id,
            variant_id=variant.id if variant else None,
            name=product.name,
            price=price,
            image=image,
            quantity=quantity,
        )
        self.items.append(item)
        return item

    def remove(self, key: str) -> None:
        self.items = [item for item in self.items if item.id != key]

    def update_quantity(self, key: str, quantity: int) -> None:
        item = self.get(key)
        if item is not None:
            item.quantity = max(1, quantity)

    def clear(self) -> None:
        self.items = []

    @property
    def total(self) -> float:
        return sum(item.price * item.quantity for item in self.items)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_json(self) -> str:
        return json.dumps([item.model_dump() for item in self.items])

    @classmethod
    def from_json(cls, raw: str | bytes | None) -> Cart:
        """Rebuild a cart from a stored snapshot; unreadable data yields an empty cart."""
        if not raw:
            return cls()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            return cls()
        if not isinstance(data, list):
            return cls()
        items: list[CartItem] = []
        for entry in data:
            try:
                items.append(CartItem.model_validate(entry))
            except ValidationError:
                logger.warning(f"Dropping unreadable cart line: {entry!r}")
                continue
        return cls(items)


class CartRepository:
    """Persist cart snapshots in Redis so a cart survives between requests.

    Redis availability should not break browsing: failures load an empty
    cart and skip the save.
    """

    def __init__(self, client: Redis, ttl: timedelta = timedelta(days=7)) -> None:
        self.client = client
        self.ttl = ttl

    @staticmethod
    def _key(cart_id: str) -> str:
        return f"{CART_PREFIX}{cart_id}"

    def load(self, cart_id: str) -> Cart:
        try:
            raw = self.client.get(self._key(cart_id))
        except RedisError as e:
            logger.warning(f"Could not load cart {cart_id}: {e}")
            return Cart()
        return Cart.from_json(raw)

    def save(self, cart_id: str, cart: Cart) -> None:
        try:
            self.client.set(
                self._key(cart_id),
                cart.to_json(),
                ex=int(self.ttl.total_seconds()),
            )
        except RedisError as e:
            logger.warning(f"Could not save cart {cart_id}: {e}")

    def delete(self, cart_id: str) -> None:
        try:
            self.client.delete(self._key(cart_id))
        except RedisError as e:
            logger.warning(f"Could not delete cart {cart_id}: {e}")
