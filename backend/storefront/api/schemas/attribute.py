"""Attribute vocabulary and name/value payloads."""

from pydantic import BaseModel, ConfigDict, Field


class AttributeOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    values: tuple[str, ...]
    category: str | None = None


class AttributePair(BaseModel):
    name: str
    value: str


class AttributeSelectionPayload(BaseModel):
    """Form state posted by the product/variant editor."""

    selected: list[AttributePair] = Field(default_factory=list)
    custom: list[AttributePair] = Field(default_factory=list)
