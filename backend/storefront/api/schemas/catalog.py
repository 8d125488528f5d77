"""Filter specification and catalog view payloads."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.api.schemas.product import Category, ProductImage
from storefront.utils.coercion import coerce_float

SortField = Literal["name", "created_at"]
SortOrder = Literal["asc", "desc"]
StockLevel = Literal["in-stock", "low-stock", "out-of-stock"]


class PriceRange(BaseModel):
    """Inclusive bounds on base_price; a missing bound is unconstrained."""

    model_config = ConfigDict(frozen=True)

    min: float | None = None
    max: float | None = None

    @field_validator("min", "max", mode="before")
    @classmethod
    def ignore_malformed(cls, v: Any) -> float | None:
        return coerce_float(v)

    @property
    def is_set(self) -> bool:
        return self.min is not None or self.max is not None


class FilterSpec(BaseModel):
    """Catalog filter state; every field is optional and never fails validation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    search: str | None = None
    category: str | None = None
    price_range: PriceRange | None = Field(default=None, alias="priceRange")
    sort_by: SortField | None = Field(default=None, alias="sortBy")
    sort_order: SortOrder | None = Field(default=None, alias="sortOrder")

    @field_validator("search", "category", mode="before")
    @classmethod
    def as_optional_str(cls, v: Any) -> str | None:
        if v is None:
            return None
        return str(v)

    @field_validator("price_range", mode="before")
    @classmethod
    def lenient_range(cls, v: Any) -> Any:
        if v is None or isinstance(v, PriceRange):
            return v
        if isinstance(v, dict):
            return v
        return None

    @field_validator("sort_by", mode="before")
    @classmethod
    def known_sort_field(cls, v: Any) -> str | None:
        return v if v in ("name", "created_at") else None

    @field_validator("sort_order", mode="before")
    @classmethod
    def known_sort_order(cls, v: Any) -> str | None:
        if isinstance(v, str) and v.lower() in ("asc", "desc"):
            return v.lower()
        return None

    def merged(self, **changes: Any) -> FilterSpec:
        """Return a copy with the given fields replaced (validators re-run)."""
        data = self.model_dump()
        data.update(changes)
        return FilterSpec.model_validate(data)


class StockStatus(BaseModel):
    status: StockLevel
    message: str
    stock: int

    @property
    def can_add_to_cart(self) -> bool:
        return self.status != "out-of-stock"


class CategorySummary(BaseModel):
    id: str
    name: str
    count: int


class ProductCard(BaseModel):
    """Per-item view used by the catalog grid."""

    id: str
    name: str
    slug: str
    sku: str
    type: str
    price: float
    formatted_price: str
    stock: int
    stock_status: StockStatus
    can_add_to_cart: bool
    image: str
    categories: list[Category]
    sales_count: int = 0


class VariantOption(BaseModel):
    id: str
    sku_suffix: str
    price: float
    formatted_price: str
    stock: int
    stock_status: StockStatus
    attributes: dict[str, str]
    images: list[ProductImage] = Field(default_factory=list)


class ProductDetail(ProductCard):
    description: str | None = None
    images: list[str] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)
    variants: list[VariantOption] = Field(default_factory=list)


class CatalogListResponse(BaseModel):
    items: list[ProductCard]
    total: int
    has_filters: bool
    filters: FilterSpec
