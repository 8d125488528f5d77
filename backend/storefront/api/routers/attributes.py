"""Attribute vocabulary used by the product and variant editors."""

from __future__ import annotations

from fastapi import APIRouter, Query

from storefront.api.schemas.attribute import AttributeOption, AttributeSelectionPayload
from storefront.services.attributes import AttributeSelection, by_category, categories

router = APIRouter()


@router.get("/", summary="Predefined attributes", response_model=list[AttributeOption])
async def list_attributes(
    category: str | None = Query(None, description="e.g. muebles, cocina, textiles"),
) -> list[AttributeOption]:
    return by_category(category)


@router.get("/categories", summary="Attribute categories", response_model=list[str])
async def list_attribute_categories() -> list[str]:
    return categories()


@router.post(
    "/backend-format",
    summary="Fold selected and custom attributes into the backend map",
    response_model=dict[str, str],
)
async def to_backend_format(payload: AttributeSelectionPayload) -> dict[str, str]:
    """Later entries overwrite earlier ones that share a name."""
    selection = AttributeSelection(payload.selected, payload.custom)
    return selection.to_backend_format()
