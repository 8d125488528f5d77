"""Shared fixtures: product factories, a fake backend, an in-memory redis stand-in."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient
from redis.exceptions import RedisError

from storefront.api.schemas.product import Product, ProductVariant
from storefront.clients.backend import BackendError
from storefront.core.config import Settings
from storefront.main import create_app
from storefront.services.cart import CartRepository
from storefront.services.catalog_store import CatalogStore


def product_data(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": "p1",
        "name": "Silla Eames",
        "description": "Silla de diseño con patas de madera",
        "sku": "SIL-EAMES-01",
        "slug": "silla-eames",
        "base_price": 250.0,
        "stock": 12,
        "type": "SIMPLE",
        "categories": [{"id": 3, "name": "Sillas", "slug": "sillas"}],
        "images": [],
        "attributes": [{"name": "Material", "value": "Madera"}],
        "variants": [],
        "is_active": True,
        "deleted_at": None,
        "created_at": "2024-01-10T10:00:00Z",
        "updated_at": "2024-01-10T10:00:00Z",
        "sales_count": 0,
    }
    data.update(overrides)
    return data


def make_product(**overrides: Any) -> Product:
    return Product.model_validate(product_data(**overrides))


def make_variant(**overrides: Any) -> ProductVariant:
    data: dict[str, Any] = {
        "id": "v1",
        "product_id": "p1",
        "sku_suffix": "ROJO",
        "stock": 5,
        "price": 100.0,
        "min_stock": 1,
        "is_active": True,
        "attributes": {"Color": "Rojo"},
        "images": [],
    }
    data.update(overrides)
    return ProductVariant.model_validate(data)


class FakeBackend:
    """In-process stand-in for BackendClient."""

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self.records = records or []
        self.deleted: list[dict[str, Any]] = []
        self.calls: list[tuple[str, Any]] = []
        self.fail_with: BackendError | None = None
        self.closed = False

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def list_products(self, include_inactive: bool = False) -> list[dict[str, Any]]:
        self._check()
        self.calls.append(("list_products", include_inactive))
        if include_inactive:
            return list(self.records)
        return [r for r in self.records if r.get("is_active")]

    def list_public_products(self) -> list[dict[str, Any]]:
        self._check()
        self.calls.append(("list_public_products", None))
        return [r for r in self.records if r.get("is_active") and not r.get("deleted_at")]

    def list_deleted_products(self) -> list[dict[str, Any]]:
        self._check()
        return list(self.deleted)

    def get_product_by_slug(self, slug: str) -> Product:
        self._check()
        for record in self.records:
            if record.get("slug") == slug:
                return Product.model_validate(record)
        raise BackendError("Producto no encontrado", status_code=404)

    def activate_product(self, product_id: str) -> Product:
        self._check()
        self.calls.append(("activate_product", product_id))
        return make_product(id=product_id, is_active=True)

    def deactivate_product(self, product_id: str) -> Product:
        self._check()
        self.calls.append(("deactivate_product", product_id))
        return make_product(id=product_id, is_active=False)

    def restore_product(self, product_id: str) -> Product:
        self._check()
        self.calls.append(("restore_product", product_id))
        return make_product(id=product_id)

    def soft_delete_product(self, product_id: str) -> None:
        self._check()
        self.calls.append(("soft_delete_product", product_id))

    def list_variants(self, product_id: str) -> list[ProductVariant]:
        self._check()
        return [make_variant(product_id=product_id)]

    def create_variant(self, payload: Any) -> ProductVariant:
        self._check()
        self.calls.append(("create_variant", payload))
        return make_variant(product_id=payload.product_id, sku_suffix=payload.sku_suffix)

    def update_variant(self, variant_id: str, payload: Any) -> ProductVariant:
        self._check()
        self.calls.append(("update_variant", variant_id))
        return make_variant(id=variant_id)

    def delete_variant(self, variant_id: str) -> None:
        self._check()
        self.calls.append(("delete_variant", variant_id))

    def ping(self) -> bool:
        self._check()
        return True

    def close(self) -> None:
        self.closed = True


class MemoryRedis:
    """Just enough of the redis client API for CartRepository."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.broken = False

    def _check(self) -> None:
        if self.broken:
            raise RedisError("connection refused")

    def get(self, key: str) -> str | None:
        self._check()
        return self.data.get(key)

    def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.data[key] = value
        return True

    def delete(self, key: str) -> int:
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0

    def ping(self) -> bool:
        self._check()
        return True


@pytest.fixture
def settings() -> Settings:
    return Settings(
        backend_api_url="http://backend.test/api",
        placeholder_image="/placeholder-product.jpg",
        featured_limit=2,
    )


@pytest.fixture
def catalog_records() -> list[dict[str, Any]]:
    return [
        product_data(
            id="p1",
            name="Silla Eames",
            sku="SIL-001",
            slug="silla-eames",
            base_price=250,
            stock=12,
            created_at="2024-01-10T10:00:00Z",
            images=[{"id": "i1", "url": "/uploads/products/p1/a.jpg", "is_primary": True}],
        ),
        product_data(
            id="p2",
            name="Mesa de comedor",
            sku="MES-002",
            slug="mesa-de-comedor",
            base_price=900,
            stock=3,
            categories=[{"id": 4, "name": "Mesas", "slug": "mesas"}],
            attributes=[{"name": "Material", "value": "Roble"}],
            created_at="2024-03-01T10:00:00Z",
        ),
        product_data(
            id="p3",
            name="Sofá modular",
            sku="SOF-003",
            slug="sofa-modular",
            base_price=1500,
            type="VARIABLE",
            stock=0,
            categories=[{"id": 5, "name": "Sofás", "slug": "sofas"}],
            created_at="2024-02-01T10:00:00Z",
            variants=[
                {"id": "v1", "product_id": "p3", "sku_suffix": "GRIS", "price": 1400, "stock": 4, "is_active": True},
                {"id": "v2", "product_id": "p3", "sku_suffix": "AZUL", "price": 1200, "stock": 9, "is_active": False},
            ],
        ),
        product_data(
            id="p4",
            name="Lámpara retirada",
            sku="LAM-004",
            slug="lampara-retirada",
            is_active=False,
            created_at="2024-04-01T10:00:00Z",
        ),
    ]


@pytest.fixture
def fake_backend(catalog_records: list[dict[str, Any]]) -> FakeBackend:
    return FakeBackend(catalog_records)


@pytest.fixture
def memory_redis() -> MemoryRedis:
    return MemoryRedis()


@pytest.fixture
def app(settings: Settings, fake_backend: FakeBackend, memory_redis: MemoryRedis):
    return create_app(
        settings=settings,
        backend_client=fake_backend,
        cart_repository=CartRepository(memory_redis),
        catalog_store=CatalogStore(featured_limit=settings.featured_limit),
    )


@pytest.fixture
def client(app) -> TestClient:
    with TestClient(app) as test_client:
        yield test_client
