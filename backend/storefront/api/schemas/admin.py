"""Admin table payloads."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class DisplayRowRead(BaseModel):
    kind: Literal["product", "variant"]
    id: str
    name: str
    sku: str
    price: float | None = None
    categories: list[str] = Field(default_factory=list)
    type_label: str
    image: str | None = None
    is_active: bool
    variant_count: int = 0
    parent_id: str | None = None


class DisplayRowListResponse(BaseModel):
    items: list[DisplayRowRead]
    total: int
    has_filters: bool


class ProductStats(BaseModel):
    total: int
    active: int
    inactive: int
    deleted: int
    with_images: int
    without_stock: int
    average_price: float


class ProductDraft(BaseModel):
    """Subset of a product form checked before it is sent to the backend."""

    name: str | None = None
    sku: str | None = None
    base_price: float | None = None
    categories: list[Any] | None = None


class ProductDraftValidation(BaseModel):
    valid: bool
    errors: list[str]
    suggested_slug: str | None = None
    suggested_sku: str | None = None
