"""Server-side analytics adapters."""

from demo_router.adapters.telemetry.base import AbstractTelemetryClient, NullTelemetryClient
from demo_router.adapters.telemetry.factory import create_telemetry_client
from demo_router.adapters.telemetry.posthog_client import PostHogTelemetryClient

__all__ = [
    "AbstractTelemetryClient",
    "NullTelemetryClient",
    "PostHogTelemetryClient",
    "create_telemetry_client",
]
