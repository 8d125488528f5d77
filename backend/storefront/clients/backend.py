"""HTTP client for the upstream product REST API."""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from storefront.api.schemas.product import (
    Product,
    ProductVariant,
    ProductVariantCreate,
    ProductVariantUpdate,
)
from storefront.core.config import Settings
from storefront.utils.coercion import coerce_bool, coerce_deleted_at

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

USER_AGENT = "Muebleria-Storefront/1.0"


class BackendError(Exception):
    """Raised when the upstream API is unreachable or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendClient:
    """Thin wrapper over the backend endpoints the storefront consumes.

    Requests are single-shot: no retry, no backoff. Every failure surfaces
    as ``BackendError`` so routers can turn it into an HTTP response.
    """

    products_path = "/products"
    variants_path = "/product-variants"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
        token: str | None = None,
    ) -> None:
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            headers=headers,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> BackendClient:
        return cls(settings.backend_api_url, timeout=settings.request_timeout_seconds)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BackendClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"Backend timeout on {method} {path}: {e}")
            raise BackendError(f"Request timeout on {method} {path}") from e
        except httpx.RequestError as e:
            logger.error(f"Backend request error on {method} {path}: {e}", exc_info=True)
            raise BackendError(f"Request failed: {str(e)}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(
                f"Backend {method} {path} failed: status={response.status_code} {message}"
            )
            raise BackendError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"Invalid JSON from {method} {path}", status_code=response.status_code
            ) from e

    # Products

    def list_products(self, include_inactive: bool = False) -> list[dict[str, Any]]:
        """Raw product records; validation is left to the catalog store."""
        params = {"includeInactive": "true"} if include_inactive else None
        data = self._request("GET", self.products_path, params=params)
        return _as_list(data)

    def list_public_products(self) -> list[dict[str, Any]]:
        """Only active, non-deleted records (the backend does not filter this endpoint)."""
        return [
            record
            for record in self.list_products()
            if coerce_bool(record.get("is_active"), default=True)
            and coerce_deleted_at(record.get("deleted_at")) is None
        ]

    def list_deleted_products(self) -> list[dict[str, Any]]:
        return _as_list(self._request("GET", f"{self.products_path}/deleted"))

    def get_product(self, product_id: str) -> Product:
        data = self._request("GET", f"{self.products_path}/{product_id}")
        return _parse(Product, data)

    def get_product_by_slug(self, slug: str) -> Product:
        data = self._request("GET", f"{self.products_path}/slug/{slug}")
        return _parse(Product, data)

    def activate_product(self, product_id: str) -> Product:
        data = self._request("PATCH", f"{self.products_path}/{product_id}/activate")
        return _parse(Product, data)

    def deactivate_product(self, product_id: str) -> Product:
        data = self._request("PATCH", f"{self.products_path}/{product_id}/deactivate")
        return _parse(Product, data)

    def soft_delete_product(self, product_id: str) -> None:
        self._request("DELETE", f"{self.products_path}/{product_id}")

    def restore_product(self, product_id: str) -> Product:
        data = self._request("PATCH", f"{self.products_path}/{product_id}/restore")
        return _parse(Product, data)

    def permanent_delete_product(self, product_id: str) -> None:
        self._request("DELETE", f"{self.products_path}/{product_id}/permanent")

    # Images

    def upload_product_image(
        self,
        product_id: str,
        file_obj: BinaryIO,
        filename: str,
        alt_text: str | None = None,
        is_primary: bool | None = None,
    ) -> dict[str, Any]:
        form: dict[str, str] = {}
        if alt_text:
            form["alt_text"] = alt_text
        if is_primary is not None:
            form["is_primary"] = str(is_primary).lower()
        return self._request(
            "POST",
            f"{self.products_path}/{product_id}/images",
            files={"image": (filename, file_obj)},
            data=form,
        )

    def delete_product_image(self, product_id: str, image_id: str) -> None:
        self._request("DELETE", f"{self.products_path}/{product_id}/images/{image_id}")

    def upload_variant_image(
        self,
        variant_id: str,
        file_obj: BinaryIO,
        filename: str,
        is_primary: bool | None = None,
    ) -> dict[str, Any]:
        form: dict[str, str] = {}
        if is_primary is not None:
            form["is_primary"] = str(is_primary).lower()
        return self._request(
            "POST",
            f"{self.variants_path}/{variant_id}/images",
            files={"image": (filename, file_obj)},
            data=form,
        )

    # Variants

    def list_variants(self, product_id: str) -> list[ProductVariant]:
        data = self._request("GET", f"{self.variants_path}/product/{product_id}")
        return [_parse(ProductVariant, item) for item in _as_list(data)]

    def create_variant(self, payload: ProductVariantCreate) -> ProductVariant:
        data = self._request(
            "POST", self.variants_path, json=payload.model_dump(exclude_none=True)
        )
        return _parse(ProductVariant, data)

    def update_variant(
        self, variant_id: str, payload: ProductVariantUpdate
    ) -> ProductVariant:
        data = self._request(
            "PATCH",
            f"{self.variants_path}/{variant_id}",
            json=payload.model_dump(exclude_none=True),
        )
        return _parse(ProductVariant, data)

    def delete_variant(self, variant_id: str) -> None:
        self._request("DELETE", f"{self.variants_path}/{variant_id}")

    def ping(self) -> bool:
        """Cheap reachability check used by the readiness probe."""
        self._request("GET", self.products_path, params={"limit": 1})
        return True


def _as_list(data: Any) -> list[dict[str, Any]]:
    """Accept both a bare list and a ``{"data": [...]}`` envelope."""
    if isinstance(data, dict):
        data = data.get("data", [])
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise BackendError(f"Unexpected {model.__name__} payload: {e.error_count()} error(s)") from e
