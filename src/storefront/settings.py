"""
storefront.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for both services.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    One settings object shared by the catalog and user services.
    `service` selects which app `python -m storefront.api` boots.
    """

    model_config = SettingsConfigDict(env_prefix="STOREFRONT_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service: Literal["catalog", "users"] = "catalog"
    service_name: str = "storefront"
    log_level: str = "INFO"
    # JSON for shipping; set false for human-readable console output locally.
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 3002

    # JSON list in env, e.g. STOREFRONT_ALLOWED_ORIGINS='["https://shop.example"]'
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "storefront-users"
    jwt_audience: str = "storefront-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    jwt_ttl_minutes: int = 60

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./storefront.db"

    # Product listing
    default_page_size: int = 20
    max_page_size: int = 100

    # Rate limiting (per client address, service routes only; health checks are exempt).
    # With `redis_url` set the quota is shared across workers via fastapi-limiter.
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60
    redis_url: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Both services read the same variables; deploy them with different
# STOREFRONT_SERVICE / STOREFRONT_API_PORT values.
