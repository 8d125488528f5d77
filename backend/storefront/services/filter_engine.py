"""Pure filtering and sorting over the in-memory product list."""

from __future__ import annotations

import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any

from storefront.api.schemas.catalog import FilterSpec, PriceRange
from storefront.api.schemas.product import Product
from storefront.utils.coercion import timestamp_or_min


def is_live(product: Product) -> bool:
    """A product is shown in the catalog only while active and not soft-deleted."""
    return product.is_active and product.deleted_at is None


def as_filter_spec(spec: FilterSpec | Mapping[str, Any] | None) -> FilterSpec:
    if spec is None:
        return FilterSpec()
    if isinstance(spec, FilterSpec):
        return spec
    return FilterSpec.model_validate(dict(spec))


def has_filters(spec: FilterSpec | Mapping[str, Any] | None) -> bool:
    """True when a search, category or price bound is active; sort alone does not count."""
    spec = as_filter_spec(spec)
    if spec.search and spec.search.strip():
        return True
    if spec.category and spec.category.strip():
        return True
    return spec.price_range is not None and spec.price_range.is_set


def matches_search(product: Product, search: str) -> bool:
    needle = search.lower()
    if needle in product.name.lower():
        return True
    if product.description and needle in product.description.lower():
        return True
    if needle in product.sku.lower():
        return True
    if any(needle in category.name.lower() for category in product.categories):
        return True
    return any(
        needle in attribute.name.lower() or needle in attribute.value.lower()
        for attribute in product.attributes
    )


def matches_category(product: Product, category: str) -> bool:
    wanted = category.lower()
    return any(
        cat.id == category or cat.name.lower() == wanted
        for cat in product.categories
    )


def matches_price(product: Product, price_range: PriceRange) -> bool:
    if not price_range.is_set:
        return True
    price = product.base_price
    if price is None:
        return False
    if price_range.min is not None and price < price_range.min:
        return False
    if price_range.max is not None and price > price_range.max:
        return False
    return True


def collation_key(text: str) -> tuple[str, str]:
    """Approximate locale-aware ordering: accents and case break ties only.

    On a case-only tie lowercase sorts first.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.swapcase()


def _name_key(product: Product) -> tuple[str, str]:
    return collation_key(product.name)


def _created_key(product: Product) -> float:
    return timestamp_or_min(product.created_at)


SORT_KEYS = {"name": _name_key, "created_at": _created_key}


def sort_products(
    products: Iterable[Product],
    sort_by: str | None,
    sort_order: str | None = None,
) -> list[Product]:
    """Stable sort by name or created_at; descending unless ``asc`` is requested."""
    items = list(products)
    if sort_by not in SORT_KEYS:
        return items
    return sorted(items, key=SORT_KEYS[sort_by], reverse=(sort_order or "desc") == "desc")


def apply_filters(
    products: Iterable[Product],
    spec: FilterSpec | Mapping[str, Any] | None = None,
) -> list[Product]:
    """Return the live products matching ``spec``, sorted as requested.

    Constraints are applied in order: live predicate, search, category,
    price range, then sort. The input is never mutated and an empty
    result is a valid answer.
    """
    spec = as_filter_spec(spec)
    filtered = [product for product in products if is_live(product)]

    if spec.search and spec.search.strip():
        filtered = [p for p in filtered if matches_search(p, spec.search)]

    if spec.category and spec.category.strip():
        filtered = [p for p in filtered if matches_category(p, spec.category)]

    if spec.price_range is not None and spec.price_range.is_set:
        filtered = [p for p in filtered if matches_price(p, spec.price_range)]

    if spec.sort_by:
        filtered = sort_products(filtered, spec.sort_by, spec.sort_order)

    return filtered
