"""Application configuration from environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ghost_sightings.errors import ConfigurationError
from ghost_sightings.schemas import CoordinatePolicy


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="ghost-sightings", description="Display name")
    app_env: str = Field(default="development", description="Deployment environment")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Servers
    api_host: str = Field(default="127.0.0.1", description="Host for the API server")
    api_port: int = Field(default=8000, description="Port for the API server")
    site_port: int = Field(default=8080, description="Port for the static site server")

    # Backing store (PostgREST-compatible, e.g. Supabase)
    store_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("store_url", "supabase_url", "next_public_supabase_url"),
        description="Base URL of the backing store",
    )
    store_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "store_key", "supabase_anon_key", "next_public_supabase_anon_key"
        ),
        description="Access key for reads and single inserts",
    )
    store_service_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("store_service_key", "supabase_service_role_key"),
        description="Privileged key for bulk import (falls back to store_key)",
    )
    store_table: str = Field(default="sightings", description="Table holding sightings")

    # Data handling
    coordinate_policy: CoordinatePolicy = Field(
        default=CoordinatePolicy.DROP_EITHER_ZERO,
        description="How records with a zero coordinate are treated at load time",
    )
    snapshot_ttl_seconds: int = Field(
        default=60, description="How long a cached sightings snapshot stays fresh"
    )
    data_dir: Path = Field(default=Path("data"), description="Root of the local data store")

    def require_store(self, *, service: bool = False) -> tuple[str, str]:
        """Return ``(url, key)`` for the backing store or raise.

        Args:
            service: Prefer the service key (bulk import) over the access key.

        Raises:
            ConfigurationError: if the URL or key is not configured.
        """
        if not self.store_url:
            msg = "Missing store URL: set STORE_URL"
            raise ConfigurationError(msg)
        key = (self.store_service_key or self.store_key) if service else self.store_key
        if not key:
            msg = "Missing store access key: set STORE_KEY"
            raise ConfigurationError(msg)
        return self.store_url.rstrip("/"), key


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
