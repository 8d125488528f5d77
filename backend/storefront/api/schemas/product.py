"""Pydantic models describing Product payloads returned by the upstream API."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.utils.coercion import (
    coerce_bool,
    coerce_datetime,
    coerce_deleted_at,
    coerce_float,
    coerce_int,
)


class ProductType(str, Enum):
    SIMPLE = "SIMPLE"
    VARIABLE = "VARIABLE"


class Category(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    slug: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def id_as_str(cls, v: Any) -> str:
        # Backend ids are numeric; filters compare them as strings.
        return "" if v is None else str(v)

    @field_validator("name", "slug", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> str:
        return "" if v is None else str(v)


class ProductImage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = ""
    url: str = ""
    alt_text: str | None = None
    is_primary: bool = False

    @field_validator("id", "url", mode="before")
    @classmethod
    def as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("is_primary", mode="before")
    @classmethod
    def lenient_bool(cls, v: Any) -> bool:
        return coerce_bool(v, default=False)

    @field_validator("alt_text", mode="before")
    @classmethod
    def optional_str(cls, v: Any) -> str | None:
        return None if v is None else str(v)


class ProductAttribute(BaseModel):
    """One name/value pair; names are not unique within a product."""

    model_config = ConfigDict(extra="ignore")

    name: str
    value: str

    @field_validator("name", "value", mode="before")
    @classmethod
    def as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)


class ProductVariant(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    product_id: str = ""
    sku_suffix: str = ""
    stock: int = 0
    price: float = 0.0
    min_stock: int = 0
    is_active: bool = True
    attributes: dict[str, str] = Field(default_factory=dict)
    images: list[ProductImage] = Field(default_factory=list)
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", "product_id", "sku_suffix", mode="before")
    @classmethod
    def as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("stock", "min_stock", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int:
        return coerce_int(v)

    @field_validator("price", mode="before")
    @classmethod
    def lenient_price(cls, v: Any) -> float:
        number = coerce_float(v)
        return 0.0 if number is None else number

    @field_validator("is_active", mode="before")
    @classmethod
    def lenient_active(cls, v: Any) -> bool:
        return coerce_bool(v, default=True)

    @field_validator("attributes", mode="before")
    @classmethod
    def attributes_as_mapping(cls, v: Any) -> dict[str, str]:
        if not v:
            return {}
        if isinstance(v, dict):
            return {str(k): "" if val is None else str(val) for k, val in v.items()}
        if isinstance(v, list):
            return {
                str(item.get("name", "")): str(item.get("value", ""))
                for item in v
                if isinstance(item, dict)
            }
        return {}

    @field_validator("images", mode="before")
    @classmethod
    def none_as_empty_list(cls, v: Any) -> Any:
        return v or []

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def lenient_datetime(cls, v: Any) -> datetime | None:
        return coerce_datetime(v)

    @field_validator("deleted_at", mode="before")
    @classmethod
    def lenient_deleted_at(cls, v: Any) -> datetime | None:
        return coerce_deleted_at(v)


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    description: str | None = None
    sku: str = ""
    slug: str = ""
    base_price: float | None = None
    stock: int = 0
    type: ProductType = ProductType.SIMPLE
    categories: list[Category] = Field(default_factory=list)
    images: list[ProductImage] = Field(default_factory=list)
    attributes: list[ProductAttribute] = Field(default_factory=list)
    variants: list[ProductVariant] = Field(default_factory=list)
    is_active: bool = True
    deleted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    sales_count: int = 0
    stock_alert: bool = False

    @field_validator("id", "name", "sku", "slug", mode="before")
    @classmethod
    def as_str(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("base_price", mode="before")
    @classmethod
    def lenient_price(cls, v: Any) -> float | None:
        return coerce_float(v)

    @field_validator("stock", "sales_count", mode="before")
    @classmethod
    def lenient_int(cls, v: Any) -> int:
        return coerce_int(v)

    @field_validator("type", mode="before")
    @classmethod
    def lenient_type(cls, v: Any) -> Any:
        if isinstance(v, str) and v.upper() in ProductType.__members__:
            return v.upper()
        return v if isinstance(v, ProductType) else ProductType.SIMPLE

    @field_validator("categories", "images", "variants", mode="before")
    @classmethod
    def none_as_empty_list(cls, v: Any) -> Any:
        return v or []

    @field_validator("attributes", mode="before")
    @classmethod
    def attributes_as_pairs(cls, v: Any) -> list[dict[str, Any]]:
        """Accept both ``[{name, value}]`` and ``{name: value}`` shapes."""
        if not v:
            return []
        if isinstance(v, dict):
            return [{"name": name, "value": value} for name, value in v.items()]
        return [item for item in v if isinstance(item, (dict, ProductAttribute))]

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def lenient_datetime(cls, v: Any) -> datetime | None:
        return coerce_datetime(v)

    @field_validator("deleted_at", mode="before")
    @classmethod
    def lenient_deleted_at(cls, v: Any) -> datetime | None:
        return coerce_deleted_at(v)

    @field_validator("is_active", mode="before")
    @classmethod
    def lenient_active(cls, v: Any) -> bool:
        return coerce_bool(v, default=True)

    @field_validator("stock_alert", mode="before")
    @classmethod
    def lenient_alert(cls, v: Any) -> bool:
        return coerce_bool(v, default=False)

    @property
    def is_live(self) -> bool:
        return self.is_active and self.deleted_at is None


class ProductVariantCreate(BaseModel):
    product_id: str
    sku_suffix: str
    stock: int = Field(0, ge=0)
    price: float = Field(..., ge=0)
    min_stock: int | None = Field(None, ge=0)
    attributes: dict[str, str] | None = None


class ProductVariantUpdate(BaseModel):
    sku_suffix: str | None = None
    stock: int | None = Field(None, ge=0)
    price: float | None = Field(None, ge=0)
    min_stock: int | None = Field(None, ge=0)
    attributes: dict[str, str] | None = None
