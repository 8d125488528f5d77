"""Admin product table: status/type filters, sorting and product-or-variant rows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

from storefront.api.schemas.product import Product, ProductType, ProductVariant
from storefront.services.filter_engine import collation_key
from storefront.services.images import primary_image
from storefront.utils.coercion import timestamp_or_min

StatusFilter = Literal["ALL", "ACTIVE", "INACTIVE", "DELETED"]
TypeFilter = Literal["ALL", "SIMPLE", "VARIABLE"]
AdminSort = Literal[
    "default", "name_asc", "name_desc", "price_asc", "price_desc", "newest", "oldest"
]


@dataclass(frozen=True)
class ProductRow:
    data: Product
    kind: Literal["product"] = "product"


@dataclass(frozen=True)
class VariantRow:
    data: ProductVariant
    parent: Product
    kind: Literal["variant"] = "variant"


DisplayRow = ProductRow | VariantRow


def _matches_status(product: Product, status: str) -> bool:
    deleted = product.deleted_at is not None
    if status == "ACTIVE":
        return product.is_active and not deleted
    if status == "INACTIVE":
        return not product.is_active and not deleted
    if status == "DELETED":
        return deleted
    return not deleted


def _matches_type(product: Product, product_type: str) -> bool:
    if product_type == "VARIABLE":
        # Anything carrying variants is listed as variable, whatever its declared type.
        return bool(product.variants)
    if product_type == "SIMPLE":
        return product.type == ProductType.SIMPLE or not product.variants
    return True


def _matches_text(product: Product, search: str) -> bool:
    needle = search.lower()
    return (
        needle in product.name.lower()
        or needle in product.sku.lower()
        or (product.description is not None and needle in product.description.lower())
    )


def sort_admin_products(products: list[Product], sort: str) -> list[Product]:
    match sort:
        case "name_asc":
            return sorted(products, key=lambda p: collation_key(p.name))
        case "name_desc":
            return sorted(products, key=lambda p: collation_key(p.name), reverse=True)
        case "price_asc":
            return sorted(products, key=lambda p: p.base_price or 0)
        case "price_desc":
            return sorted(products, key=lambda p: p.base_price or 0, reverse=True)
        case "newest":
            return sorted(
                products, key=lambda p: timestamp_or_min(p.created_at), reverse=True
            )
        case "oldest":
            return sorted(products, key=lambda p: timestamp_or_min(p.created_at))
        case _:
            return list(products)


def filter_admin_products(
    products: Iterable[Product],
    status: str = "ALL",
    product_type: str = "ALL",
    search: str = "",
    sort: str = "default",
) -> list[Product]:
    """Status, then type, then free-text search, then sort."""
    filtered = [p for p in products if _matches_status(p, status)]
    filtered = [p for p in filtered if _matches_type(p, product_type)]
    if search.strip():
        filtered = [p for p in filtered if _matches_text(p, search)]
    return sort_admin_products(filtered, sort)


def variant_display_name(parent: Product, variant: ProductVariant) -> str:
    return f"{parent.name} - {variant.sku_suffix}"


def build_display_rows(
    products: Iterable[Product],
    status: str = "ALL",
    product_type: str = "ALL",
    search: str = "",
    sort: str = "default",
) -> list[DisplayRow]:
    """One row per product, or one row per variant when listing VARIABLE products."""
    processed = filter_admin_products(products, status, product_type, search, sort)
    if product_type != "VARIABLE":
        return [ProductRow(data=product) for product in processed]

    rows: list[DisplayRow] = [
        VariantRow(data=variant, parent=product)
        for product in processed
        for variant in product.variants
    ]
    if search.strip():
        needle = search.lower()
        rows = [
            row
            for row in rows
            if needle in variant_display_name(row.parent, row.data).lower()
            or needle in row.data.sku_suffix.lower()
        ]
    return rows


def row_summary(row: DisplayRow) -> dict[str, Any]:
    """Flatten a row into the columns the admin table renders."""
    match row:
        case ProductRow(data=product):
            return {
                "kind": "product",
                "id": product.id,
                "name": product.name,
                "sku": product.sku,
                "price": product.base_price,
                "categories": [c.name for c in product.categories],
                "type_label": "Simple" if product.type == ProductType.SIMPLE else "Variable",
                "image": primary_image(product),
                "is_active": product.is_active,
                "variant_count": len(product.variants),
                "parent_id": None,
            }
        case VariantRow(data=variant, parent=parent):
            return {
                "kind": "variant",
                "id": variant.id,
                "name": variant_display_name(parent, variant),
                "sku": variant.sku_suffix,
                "price": variant.price,
                "categories": [c.name for c in parent.categories],
                "type_label": "Variante",
                "image": primary_image(variant) or primary_image(parent),
                "is_active": variant.is_active,
                "variant_count": 0,
                "parent_id": parent.id,
            }
    raise TypeError(f"Unsupported display row: {type(row).__name__}")


def calculate_stats(products: Iterable[Product]) -> dict[str, Any]:
    products = list(products)
    priced = [p.base_price for p in products if p.base_price and p.base_price > 0]
    return {
        "total": len(products),
        "active": sum(1 for p in products if p.is_active and p.deleted_at is None),
        "inactive": sum(1 for p in products if not p.is_active and p.deleted_at is None),
        "deleted": sum(1 for p in products if p.deleted_at is not None),
        "with_images": sum(1 for p in products if p.images),
        "without_stock": sum(
            1 for p in products if p.type == ProductType.VARIABLE and not p.variants
        ),
        "average_price": sum(priced) / len(priced) if priced else 0.0,
    }
