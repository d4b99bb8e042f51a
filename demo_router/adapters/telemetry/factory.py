"""Factory for the configured telemetry client."""

from __future__ import annotations

from demo_router.adapters.telemetry.base import AbstractTelemetryClient, NullTelemetryClient
from demo_router.adapters.telemetry.posthog_client import PostHogTelemetryClient
from demo_router.core.config import AnalyticsSettings, settings
from demo_router.core.errors import ValidationAppError


def create_telemetry_client(analytics_settings: AnalyticsSettings | None = None) -> AbstractTelemetryClient:
    """Instantiate the telemetry client selected by ``ANALYTICS_PROVIDER``.

    Raises:
        ValidationAppError: If the provider is unknown or misconfigured.
    """
    cfg = analytics_settings or settings.analytics
    provider = cfg.provider.lower()

    if provider in ("", "none"):
        return NullTelemetryClient()

    if provider == "posthog":
        if not cfg.posthog_api_key:
            raise ValidationAppError(
                code="analytics_missing_api_key",
                message="PostHog provider requires ANALYTICS_POSTHOG_API_KEY environment variable",
            )
        return PostHogTelemetryClient(
            api_key=cfg.posthog_api_key,
            host=cfg.posthog_host,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ValidationAppError(
        code="analytics_unknown_provider",
        message=f"Unknown analytics provider: '{provider}'. Supported providers: none, posthog",
    )
