"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class AppSettings(BaseSettings):
    """Router-wide configuration: rate limiting, client identity and CORS."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable the sliding-window rate limit per client address",
    )
    rate_limit_requests: int = Field(
        100,
        description="Maximum number of requests admitted per window (per client)",
        ge=1,
    )
    rate_limit_window_ms: int = Field(
        60_000,
        description="Sliding window length in milliseconds",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* headers when throttling (Retry-After is always sent)",
    )
    rate_limit_cleanup_probability: float = Field(
        0.01,
        description="Chance that an admitted request triggers a full sweep of idle clients",
        ge=0.0,
        le=1.0,
    )

    client_ip_header: str | None = Field(
        None,
        description=(
            "Header carrying the client address, e.g. CF-Connecting-IP. Only set this "
            "when every request arrives through a proxy that overwrites it"
        ),
    )
    cors_allowed_origins: str = Field(
        "http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of origins allowed by CORS preflight",
    )
    listing_cache_seconds: int = Field(
        300,
        description="Cache lifetime for the project listing response",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class StoreSettings(BaseSettings):
    """Object and metadata store configuration.

    The ``memory`` backend starts empty and is meant for tests and local
    experiments; ``filesystem`` reads a deployment directory tree.
    """

    backend: str = Field(
        "memory",
        description="Store backend: memory or filesystem",
    )
    assets_dir: str = Field(
        "data/assets",
        description="Root directory holding <project>/<path> asset files",
    )
    metadata_dir: str = Field(
        "data/metadata",
        description="Directory holding <project>.json metadata records",
    )
    io_timeout_seconds: float | None = Field(
        None,
        description="Timeout applied by the filesystem store to each blocking read",
    )
    chunk_size: int = Field(
        64 * 1024,
        description="Chunk size in bytes used when streaming asset bodies",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10 * 1024 * 1024, description="Rotate log file after N bytes (0 disables)")
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to accept and propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class AnalyticsSettings(BaseSettings):
    """Server-side page view tracking configuration."""

    provider: str = Field(
        "none",
        description="Analytics provider: none or posthog",
    )
    posthog_api_key: str | None = Field(
        None,
        description="PostHog project API key (required when provider=posthog)",
    )
    posthog_host: str = Field(
        "https://app.posthog.com",
        description="PostHog ingestion host",
    )
    timeout_seconds: float = Field(
        2.0,
        description="Timeout for a single capture request",
    )

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        case_sensitive=False,
    )


def _build_app_settings() -> AppSettings:
    return AppSettings()  # type: ignore[call-arg]


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=_build_app_settings)
    store: StoreSettings = Field(default_factory=StoreSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
