"""
moviebase.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT signing secret).
- Reject unusable signing configuration at startup.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_JWT_SECRET = "dev-only-secret-change-me-before-deploying"


class Settings(BaseSettings):
    """
    Process-wide configuration, loaded once at startup and never mutated.
    """

    model_config = SettingsConfigDict(env_prefix="MOVIEBASE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "moviebase-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: Literal["HS256", "HS384", "HS512"] = "HS256"
    jwt_issuer: str = "moviebase"
    jwt_audience: str = "moviebase-api"
    jwt_secret: str = Field(default=DEV_JWT_SECRET, repr=False)
    jwt_ttl: timedelta = timedelta(days=7)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./moviebase.db"

    # Front-ends allowed to call the API from a browser.
    cors_allowed_origins: list[str] = [
        "http://localhost:1234",
        "http://localhost:4200",
        "https://projectmoviebase.netlify.app",
        "https://elodloic.github.io",
    ]

    @field_validator("jwt_secret")
    @classmethod
    def _secret_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("jwt_secret must not be empty")
        return v

    @model_validator(mode="after")
    def _prod_needs_real_secret(self) -> Settings:
        if self.env == "prod" and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError("MOVIEBASE_JWT_SECRET must be set in prod")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Rotating `jwt_secret` invalidates every outstanding token; there is no key
# versioning, so rotation means a coordinated restart.
