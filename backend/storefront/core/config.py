"""Centralized application settings using pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Look for .env in the backend directory, then the project root
env_path = Path(__file__).parent.parent.parent / ".env"
if not env_path.exists():
    env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
]


class Settings(BaseSettings):
    """Environment-aware configuration (upstream API, media, cart storage)."""

    app_name: str = "Mueblería Storefront"
    log_level: str = "INFO"

    # Upstream REST backend
    backend_api_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the product REST API (includes /api)",
    )
    media_base_url: str | None = Field(
        default=None,
        description="Base URL for uploaded images; derived from backend_api_url when unset",
    )
    request_timeout_seconds: float = 10.0

    # Catalog display
    placeholder_image: str = "/placeholder-product.jpg"
    featured_limit: int = Field(default=8, ge=0)

    # Cart storage
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    cart_ttl_hours: int = 24 * 7

    cors_origins_raw: str | None = Field(
        default=None,
        validation_alias="CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins",
        exclude=True,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated string to list."""
        if self.cors_origins_raw is None or not self.cors_origins_raw.strip():
            return list(DEFAULT_CORS_ORIGINS)
        origins = [
            origin.strip().rstrip("/")
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
        return origins if origins else list(DEFAULT_CORS_ORIGINS)

    @property
    def resolved_media_base_url(self) -> str:
        """Static files are served from the API host without the /api suffix."""
        if self.media_base_url:
            return self.media_base_url.rstrip("/")
        base = self.backend_api_url.rstrip("/")
        if base.endswith("/api"):
            base = base[: -len("/api")]
        return base

    @field_validator("backend_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str:
        if not v:
            return "INFO"
        return str(v).upper()


@lru_cache
def get_settings() -> Settings:
    """Provide singleton-like access for dependency injection."""
    return Settings()
