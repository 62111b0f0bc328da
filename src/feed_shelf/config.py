# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads Supabase, JWT, upload and server settings from environment and .env file.

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase (camelCase names kept for existing .env files)
    supabase_url: str = Field("", validation_alias=AliasChoices("supabase_url", "supabaseurl"))
    supabase_key: SecretStr | None = Field(
        None, validation_alias=AliasChoices("supabase_key", "supabasekey")
    )
    feeds_table: str = "feeds"

    # Token verification
    jwt_secret: SecretStr | None = None
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = None
    jwt_issuer: str | None = None

    # Uploads
    upload_dir: Path = Path("./uploads")

    # Outbound HTTP
    request_timeout: int = 15

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3001
    cors_origins: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    @property
    def auth_url(self) -> str:
        """Base URL of the Supabase Auth (GoTrue) API."""
        return f"{self.supabase_url.rstrip('/')}/auth/v1"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
