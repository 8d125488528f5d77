"""Primary image resolution and gallery ordering."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from storefront.api.schemas.product import Product, ProductImage, ProductVariant
from storefront.core.config import Settings


def _images_of(entity: Any) -> list[ProductImage]:
    """Read ``images`` from a model or a raw mapping; anything else yields no images."""
    if entity is None:
        return []
    if isinstance(entity, Mapping):
        raw = entity.get("images")
    else:
        raw = getattr(entity, "images", None)
    if not raw:
        return []
    images: list[ProductImage] = []
    for item in raw:
        if isinstance(item, ProductImage):
            images.append(item)
        elif isinstance(item, Mapping):
            images.append(ProductImage.model_validate(dict(item)))
    return images


def primary_image(entity: Any) -> str | None:
    """URL of the first primary-flagged image, else the first image, else None."""
    images = _images_of(entity)
    if not images:
        return None
    for image in images:
        if image.is_primary:
            return image.url
    return images[0].url


def ordered_images(entity: Any) -> list[ProductImage]:
    """All images with the primary one moved to the front."""
    images = _images_of(entity)
    for index, image in enumerate(images):
        if image.is_primary:
            return [image] + images[:index] + images[index + 1 :]
    return images


def build_image_url(url: str | None, base_url: str) -> str:
    """Join relative upload paths to the media host; absolute URLs pass through."""
    if not url:
        return ""
    if url.startswith("http://") or url.startswith("https://"):
        return url
    path = url if url.startswith("/") else f"/{url}"
    return f"{base_url.rstrip('/')}{path}"


def image_src(entity: Any, settings: Settings) -> str:
    """Absolute URL of the primary image, or the placeholder asset."""
    url = primary_image(entity)
    if not url:
        return settings.placeholder_image
    return build_image_url(url, settings.resolved_media_base_url)


def gallery_images(
    product: Product, variant: ProductVariant | None = None
) -> list[ProductImage]:
    """Detail-page gallery: selected variant's images, then the product's ordered images."""
    gallery = ordered_images(product)
    if variant is not None and variant.images:
        return list(variant.images) + gallery
    return gallery
