"""PostHog capture API client."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import httpx

from demo_router.adapters.telemetry.base import AbstractTelemetryClient

DEFAULT_POSTHOG_HOST = "https://app.posthog.com"


class PostHogTelemetryClient(AbstractTelemetryClient):
    """Sends ``$pageview`` events to the PostHog ``/capture/`` endpoint.

    One connection pool is shared by all captures until ``aclose``.
    """

    def __init__(
        self,
        api_key: str,
        host: str = DEFAULT_POSTHOG_HOST,
        timeout_seconds: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: PostHog project API key.
            host: Ingestion host, without trailing slash.
            timeout_seconds: Timeout for each capture request.
            transport: Optional httpx transport (tests inject a MockTransport).
        """
        self._api_key = api_key
        self._capture_url = f"{host.rstrip('/')}/capture/"
        self._client = httpx.AsyncClient(timeout=timeout_seconds, transport=transport)

    def build_payload(self, path: str, properties: dict[str, Any] | None = None) -> dict[str, Any]:
        return {
            "api_key": self._api_key,
            "event": "$pageview",
            "properties": {"$current_url": path, **(properties or {})},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def capture_page_view(self, path: str, properties: dict[str, Any] | None = None) -> None:
        """POST a page view event.

        Raises:
            httpx.HTTPError: On transport failures or non-2xx responses.
        """
        response = await self._client.post(self._capture_url, json=self.build_payload(path, properties))
        response.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()
