import pytest

from storefront.utils.product_validator import (
    generate_sku,
    generate_slug,
    validate_product_data,
    validate_sku,
)


@pytest.mark.parametrize(
    ("name", "slug"),
    [
        ("Mesa de Centro Ñandú", "mesa-de-centro-nandu"),
        ("  Sofá   cama!! ", "sofa-cama"),
        ("Silla -- Eames", "silla-eames"),
    ],
)
def test_generate_slug(name, slug):
    assert generate_slug(name) == slug


def test_validate_sku():
    assert validate_sku("SIL-001")
    assert not validate_sku("sil-001")
    assert not validate_sku("AB")
    assert not validate_sku("A" * 51)


def test_generate_sku_uses_name_prefix_and_clock():
    assert generate_sku("mesa roble", now=1_700_000_123.5) == "MESA-ROBLE-123500"


def test_valid_payload_has_no_errors():
    data = {"name": "Mesa", "sku": "MES-01", "base_price": 10, "categories": [1]}
    assert validate_product_data(data) == []


def test_partial_payload_only_checks_present_keys():
    assert validate_product_data({"base_price": 5}) == []


def test_errors_are_reported():
    errors = validate_product_data(
        {"name": "M", "sku": "bad sku", "base_price": -1, "categories": []}
    )
    assert errors == [
        "El nombre debe tener al menos 2 caracteres",
        "El SKU debe contener solo letras mayúsculas, números y guiones",
        "El precio no puede ser negativo",
        "Debe seleccionar al menos una categoría",
    ]
