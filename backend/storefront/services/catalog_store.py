"""In-memory catalog: fetched products plus derived featured/category/filtered views."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from pydantic import ValidationError

from storefront.api.schemas.catalog import CategorySummary, FilterSpec
from storefront.api.schemas.product import Product
from storefront.services.filter_engine import (
    apply_filters,
    as_filter_spec,
    collation_key,
    has_filters,
    is_live,
    sort_products,
)

logger = logging.getLogger(__name__)

DEFAULT_FEATURED_LIMIT = 8


class ProductSource(Protocol):
    def list_public_products(self) -> list[dict[str, Any]]: ...


def parse_products(records: Iterable[Product | Mapping[str, Any]]) -> list[Product]:
    """Validate raw records, skipping (and logging) the ones that cannot be read."""
    products: list[Product] = []
    for index, record in enumerate(records):
        if isinstance(record, Product):
            products.append(record)
            continue
        try:
            products.append(Product.model_validate(dict(record)))
        except (ValidationError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable product record #{index}: {e}")
            continue
    return products


def build_category_index(products: Iterable[Product]) -> list[CategorySummary]:
    """Count products per category id; sorted by category name."""
    index: dict[str, CategorySummary] = {}
    for product in products:
        for category in product.categories:
            existing = index.get(category.id)
            if existing is None:
                index[category.id] = CategorySummary(
                    id=category.id, name=category.name, count=1
                )
            else:
                existing.count += 1
    return sorted(index.values(), key=lambda summary: collation_key(summary.name))


class CatalogStore:
    """Holds the public product list and the views derived from it.

    ``filtered()`` is memoised on the identity of the product list and the
    value of the filter spec; every ``load`` swaps the list and drops the memo.
    """

    def __init__(self, featured_limit: int = DEFAULT_FEATURED_LIMIT) -> None:
        self.featured_limit = featured_limit
        self._products: list[Product] = []
        self._featured: list[Product] = []
        self._categories: list[CategorySummary] = []
        self._current_filters = FilterSpec()
        self._memo: tuple[list[Product], FilterSpec, list[Product]] | None = None
        self.loaded = False

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def featured(self) -> list[Product]:
        return list(self._featured)

    @property
    def categories(self) -> list[CategorySummary]:
        return [summary.model_copy() for summary in self._categories]

    @property
    def current_filters(self) -> FilterSpec:
        return self._current_filters

    @property
    def has_filters(self) -> bool:
        return has_filters(self._current_filters)

    def load(self, records: Iterable[Product | Mapping[str, Any]]) -> list[Product]:
        """Replace the catalog with ``records`` (newest first, soft-deleted dropped)."""
        products = [p for p in parse_products(records) if p.deleted_at is None]
        self._products = sort_products(products, "created_at", "desc")
        live = [p for p in self._products if is_live(p)]
        self._featured = live[: self.featured_limit]
        self._categories = build_category_index(self._products)
        self._memo = None
        self.loaded = True
        logger.info(
            f"Catalog loaded: {len(self._products)} products, "
            f"{len(self._categories)} categories"
        )
        return self.products

    def invalidate(self) -> None:
        """Force the next read to re-fetch (used after admin mutations)."""
        self.loaded = False

    def refresh(self, source: ProductSource) -> list[Product]:
        """Fetch the public catalog from ``source`` and load it."""
        return self.load(source.list_public_products())

    def filtered(
        self, spec: FilterSpec | Mapping[str, Any] | None = None
    ) -> list[Product]:
        """Apply ``spec`` (default: the current filters) to the loaded products."""
        spec = self._current_filters if spec is None else as_filter_spec(spec)
        if self._memo is not None:
            source, cached_spec, result = self._memo
            if source is self._products and cached_spec == spec:
                return list(result)
        result = apply_filters(self._products, spec)
        self._memo = (self._products, spec, result)
        return list(result)

    def filter(self, spec: FilterSpec | Mapping[str, Any] | None) -> list[Product]:
        self._current_filters = as_filter_spec(spec)
        return self.filtered()

    def search(self, query: str) -> list[Product]:
        """Replace only the search term, keeping the other active filters."""
        self._current_filters = self._current_filters.merged(search=query)
        return self.filtered()

    def clear_filters(self) -> list[Product]:
        self._current_filters = FilterSpec()
        return self.filtered()

    def get_by_id(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def get_by_slug(self, slug: str) -> Product | None:
        for product in self._products:
            if product.slug == slug:
                return product
        return None
