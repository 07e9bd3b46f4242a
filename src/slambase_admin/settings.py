"""
slambase_admin.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Fail startup when platform endpoints/credentials are missing.
- Hide secrets from repr/logging (service key, JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Platform connection values have no defaults: a deployment without them
    raises a ValidationError on startup instead of serving an open dashboard.
    """

    model_config = SettingsConfigDict(env_prefix="SLAMBASE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "slambase-admin"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Hosted identity/data platform
    platform_url: str
    platform_anon_key: str
    platform_service_key: str = Field(repr=False)
    http_timeout_seconds: float = 10.0

    # Access tokens are HS256 JWTs signed with the platform secret.
    jwt_secret: str = Field(repr=False)
    jwt_alg: str = "HS256"
    jwt_audience: str = "authenticated"
    verify_session_remotely: bool = False

    # Session cookies
    cookie_prefix: str = "sb"
    auth_timeout_seconds: float = 5.0

    # Persistence (the platform's Postgres; sqlite+aiosqlite works for local runs)
    database_url: str

    # Object storage
    storage_bucket: str = "wrestlers"
    max_image_bytes: int = 5 * 1024 * 1024

    @property
    def cookie_secure(self) -> bool:
        return self.env == "prod"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()  # type: ignore[call-arg]


# --- Module Notes -----------------------------------------------------------
# Every collaborator client reads its endpoint and credentials from here; nothing
# else in the package touches os.environ.
