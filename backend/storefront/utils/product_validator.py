"""Slug/SKU helpers and form validation for product payloads."""

from __future__ import annotations

import re
import time
from typing import Any

_ACCENTS = {
    "a": "áàäâã",
    "e": "éèëê",
    "i": "íìïî",
    "o": "óòöôõ",
    "u": "úùüû",
    "n": "ñ",
    "c": "ç",
}
_ACCENT_TABLE = str.maketrans(
    {accented: plain for plain, chars in _ACCENTS.items() for accented in chars}
)
SKU_PATTERN = re.compile(r"^[A-Z0-9-]+$")
MAX_PRICE = 999999.99


def generate_slug(name: str) -> str:
    """``"Mesa de Centro Ñandú"`` -> ``"mesa-de-centro-nandu"``."""
    slug = name.lower().strip().translate(_ACCENT_TABLE)
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def validate_sku(sku: str) -> bool:
    return bool(SKU_PATTERN.match(sku)) and 3 <= len(sku) <= 50


def generate_sku(name: str, now: float | None = None) -> str:
    """Uppercase name prefix plus the last six digits of the epoch millis."""
    clean = re.sub(r"[^A-Z0-9\s]", "", name.upper())
    clean = re.sub(r"\s+", "-", clean)[:20]
    millis = int((time.time() if now is None else now) * 1000)
    return f"{clean}-{str(millis)[-6:]}"


def validate_product_data(data: dict[str, Any]) -> list[str]:
    """Return user-facing error messages; an empty list means the payload is valid.

    Only keys present in ``data`` are checked, so partial updates validate too.
    """
    errors: list[str] = []

    if "name" in data and data["name"] is not None:
        name = str(data["name"])
        if not name.strip():
            errors.append("El nombre es requerido")
        elif len(name) < 2:
            errors.append("El nombre debe tener al menos 2 caracteres")
        elif len(name) > 255:
            errors.append("El nombre no puede exceder 255 caracteres")

    if "sku" in data and data["sku"] is not None:
        sku = str(data["sku"])
        if not sku.strip():
            errors.append("El SKU es requerido")
        elif not validate_sku(sku):
            errors.append(
                "El SKU debe contener solo letras mayúsculas, números y guiones"
            )

    price = data.get("base_price")
    if price is not None:
        if price < 0:
            errors.append("El precio no puede ser negativo")
        elif price > MAX_PRICE:
            errors.append("El precio no puede exceder S/ 999,999.99")

    if "categories" in data:
        categories = data["categories"]
        if not isinstance(categories, list) or not categories:
            errors.append("Debe seleccionar al menos una categoría")

    return errors
