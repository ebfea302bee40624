"""Application configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BUCKET_NAME = "example.com"
DEFAULT_JSON_KEY = "gcp.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # API settings
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=8000, description="API server port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Storage settings
    bucket_scope: str = Field(
        default="bucket",
        min_length=1,
        description="Namespace for the bucket connector configuration keys",
    )


class BucketSettings(BaseSettings):
    """Bucket connector settings, namespaced by a scope.

    For scope ``media`` the values are read from ``MEDIA_BUCKET_NAME``,
    ``MEDIA_JSON_KEY`` and ``MEDIA_REQUEST_TIMEOUT``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    bucket_name: str = Field(
        default=DEFAULT_BUCKET_NAME,
        description="GCS bucket receiving the objects",
    )
    json_key: str = Field(
        default=DEFAULT_JSON_KEY,
        description="Path to the service account credential file",
    )
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Timeout in seconds for each storage API call",
    )

    @classmethod
    def for_scope(cls, scope: str) -> BucketSettings:
        """Resolve settings for a scope from the environment."""
        return cls(_env_prefix=f"{scope}_")  # type: ignore[call-arg]

    @staticmethod
    def config_key(scope: str, name: str) -> str:
        """Dotted configuration key, e.g. ``media.bucket_name``."""
        return f"{scope}.{name}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reset_settings() -> None:
    """Reset cached settings (useful for testing)."""
    get_settings.cache_clear()
