"""Cart line and request/response payloads."""

from pydantic import BaseModel, Field


class CartItem(BaseModel):
    id: str = Field(..., description="productId or productId-variantId")
    product_id: str
    variant_id: str | None = None
    name: str
    price: float
    image: str = ""
    quantity: int = Field(1, ge=1)


class CartAddRequest(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = Field(1, ge=1)


class CartQuantityRequest(BaseModel):
    quantity: int


class CartResponse(BaseModel):
    items: list[CartItem]
    total: float
    item_count: int
