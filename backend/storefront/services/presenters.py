"""Shape products into the card/detail payloads the storefront renders."""

from __future__ import annotations

from storefront.api.schemas.catalog import ProductCard, ProductDetail, VariantOption
from storefront.api.schemas.product import Product, ProductVariant
from storefront.core.config import Settings
from storefront.services.images import (
    build_image_url,
    gallery_images,
    image_src,
    ordered_images,
)
from storefront.services.pricing import (
    active_variants,
    display_price,
    display_stock,
    format_price,
    stock_status,
    variant_price,
    variant_stock,
)


def product_card(product: Product, settings: Settings) -> ProductCard:
    price = display_price(product)
    stock = display_stock(product)
    status = stock_status(stock)
    return ProductCard(
        id=product.id,
        name=product.name,
        slug=product.slug,
        sku=product.sku,
        type=product.type.value,
        price=price,
        formatted_price=format_price(price),
        stock=stock,
        stock_status=status,
        can_add_to_cart=status.can_add_to_cart,
        image=image_src(product, settings),
        categories=list(product.categories),
        sales_count=product.sales_count,
    )


def variant_option(
    product: Product, variant: ProductVariant, base_url: str
) -> VariantOption:
    """What the detail page shows once ``variant`` is picked, gallery included."""
    price = variant_price(product, variant)
    stock = variant_stock(product, variant)
    return VariantOption(
        id=variant.id,
        sku_suffix=variant.sku_suffix,
        price=price,
        formatted_price=format_price(price),
        stock=stock,
        stock_status=stock_status(stock),
        attributes=dict(variant.attributes),
        images=[
            image.model_copy(update={"url": build_image_url(image.url, base_url)})
            for image in gallery_images(product, variant)
        ],
    )


def product_detail(product: Product, settings: Settings) -> ProductDetail:
    card = product_card(product, settings)
    base_url = settings.resolved_media_base_url
    variants = [
        variant_option(product, variant, base_url)
        for variant in active_variants(product)
    ]
    # Duplicate attribute names collapse onto the last value.
    attributes = {attribute.name: attribute.value for attribute in product.attributes}
    return ProductDetail(
        **dict(card),
        description=product.description,
        images=[build_image_url(image.url, base_url) for image in ordered_images(product)],
        attributes=attributes,
        variants=variants,
    )
