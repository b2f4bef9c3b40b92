"""
sourcing_portal.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
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
    Env-driven configuration with defaults that are safe for local dev.
    """

    model_config = SettingsConfigDict(env_prefix="SOURCING_", case_sensitive=False)

    # `prod` disables the demo data endpoint.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "sourcing-portal"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 5001
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "sourcing-portal"
    jwt_audience: str = "sourcing-api"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    token_ttl_minutes: int = 24 * 60
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./sourcing.db"

    # Workflow
    strict_status_transitions: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Tests build `Settings(...)` directly and hand it to `create_app`, so nothing
# here should read the environment outside of `Settings()` construction.
