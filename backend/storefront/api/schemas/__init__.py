"""API schema package."""
from storefront.api.schemas.catalog import FilterSpec, PriceRange
from storefront.api.schemas.product import (
    Category,
    Product,
    ProductAttribute,
    ProductImage,
    ProductType,
    ProductVariant,
)

__all__ = [
    "Category",
    "FilterSpec",
    "PriceRange",
    "Product",
    "ProductAttribute",
    "ProductImage",
    "ProductType",
    "ProductVariant",
]
