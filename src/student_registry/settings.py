"""
student_registry.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret, session secret, backend API key).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single settings object injected across layers.

    When `backend_url` is unset the service mounts its embedded stand-in of the
    hosted database/auth service and talks to it in-process.
    """

    model_config = SettingsConfigDict(env_prefix="STUDENT_REGISTRY_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "student-registry"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Hosted backend (PostgREST + GoTrue compatible)
    backend_url: str | None = None
    backend_api_key: str = Field(default="", repr=False)
    backend_timeout_seconds: float = 10.0

    # Session tokens issued by the hosted auth service
    jwt_alg: str = "HS256"
    jwt_issuer: str = "student-registry-auth"
    jwt_audience: str = "authenticated"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    access_token_ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)

    # Browser session cookie (holds the access token between page loads)
    session_secret: str = Field(default="dev-session-secret-change-me", repr=False)
    session_cookie: str = "student_registry_session"
    session_https_only: bool = False

    # Embedded backend persistence
    database_url: str = "sqlite+aiosqlite:///./student_registry.db"
    password_hash_rounds: int = Field(default=12, ge=4, le=31)

    # pt-BR display
    display_date_format: str = "%d/%m/%Y"
    # Timestamps (e.g. created_at) are shown as local dates in this zone.
    display_timezone: str = "America/Sao_Paulo"

    @property
    def embedded_backend(self) -> bool:
        return not self.backend_url


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars on repeated lookups.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read the settings the app was built with (`app.state.settings`),
# so tests can construct apps with explicit Settings objects.
