"""Display price/stock resolution for simple and variable products."""

from __future__ import annotations

from storefront.api.schemas.catalog import StockStatus
from storefront.api.schemas.product import Product, ProductType, ProductVariant
from storefront.utils.coercion import coerce_float, coerce_int

LOW_STOCK_THRESHOLD = 10
CURRENCY_SYMBOL = "S/"


def active_variants(product: Product) -> list[ProductVariant]:
    return [variant for variant in product.variants if variant.is_active]


def display_price(product: Product) -> float:
    """Cheapest active variant for VARIABLE products, otherwise base_price (0 when unset)."""
    if product.type == ProductType.VARIABLE:
        prices = [variant.price for variant in active_variants(product)]
        if prices:
            return min(prices)
    return product.base_price if product.base_price is not None else 0.0


def display_stock(product: Product) -> int:
    """Sum of active variant stock for VARIABLE products, otherwise product stock."""
    if product.type == ProductType.VARIABLE:
        return sum(variant.stock for variant in active_variants(product))
    return coerce_int(product.stock)


def variant_price(product: Product, variant: ProductVariant | None) -> float:
    """Price shown once a variant is picked on the detail page."""
    if product.type == ProductType.VARIABLE and variant is not None:
        return variant.price
    return product.base_price if product.base_price is not None else 0.0


def variant_stock(product: Product, variant: ProductVariant | None) -> int:
    if product.type == ProductType.VARIABLE and variant is not None:
        return variant.stock
    return coerce_int(product.stock)


def stock_status(stock: int | str | None) -> StockStatus:
    """Classify resolved stock into the three badge tiers used across the storefront."""
    count = coerce_int(stock)
    if count > LOW_STOCK_THRESHOLD:
        return StockStatus(status="in-stock", message="En stock", stock=count)
    if count > 0:
        return StockStatus(
            status="low-stock", message=f"Solo {count} disponibles", stock=count
        )
    return StockStatus(status="out-of-stock", message="Agotado", stock=count)


def product_stock_status(product: Product) -> StockStatus:
    return stock_status(display_stock(product))


def format_price(price: float | int | str | None) -> str:
    """Format as Peruvian soles, e.g. ``S/ 1,299.90``."""
    value = coerce_float(price)
    if value is None:
        return "Sin precio"
    sign = "-" if value < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {abs(value):,.2f}"
