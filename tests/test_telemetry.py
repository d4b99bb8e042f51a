"""Tests for best-effort page view tracking."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from demo_router.adapters.telemetry.base import NullTelemetryClient
from demo_router.adapters.telemetry.factory import create_telemetry_client
from demo_router.adapters.telemetry.posthog_client import PostHogTelemetryClient
from demo_router.core.app_factory import create_app
from demo_router.core.config import AnalyticsSettings
from demo_router.core.errors import ValidationAppError


class TestPostHogClient:
    @pytest.mark.asyncio
    async def test_posts_pageview_to_capture_endpoint(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"status": 1})

        client = PostHogTelemetryClient(
            api_key="phc_test",
            host="https://ph.example/",
            transport=httpx.MockTransport(handler),
        )

        await client.capture_page_view("/demo-x", {"demo": "demo-x"})

        assert len(seen) == 1
        assert str(seen[0].url) == "https://ph.example/capture/"
        body = json.loads(seen[0].content)
        assert body["api_key"] == "phc_test"
        assert body["event"] == "$pageview"
        assert body["properties"] == {"$current_url": "/demo-x", "demo": "demo-x"}
        assert "timestamp" in body

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        client = PostHogTelemetryClient(
            api_key="phc_test",
            transport=httpx.MockTransport(lambda request: httpx.Response(503)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await client.capture_page_view("/x")

    @pytest.mark.asyncio
    async def test_captures_share_one_http_client(self, monkeypatch) -> None:
        created: list[httpx.AsyncClient] = []
        real_client = httpx.AsyncClient

        def _tracking_client(*args, **kwargs):
            instance = real_client(*args, **kwargs)
            created.append(instance)
            return instance

        monkeypatch.setattr(httpx, "AsyncClient", _tracking_client)
        client = PostHogTelemetryClient(
            api_key="phc_test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )

        for path in ("/a", "/b", "/c"):
            await client.capture_page_view(path)

        assert len(created) == 1
        await client.aclose()
        assert created[0].is_closed

    @pytest.mark.asyncio
    async def test_capture_after_close_fails(self) -> None:
        client = PostHogTelemetryClient(
            api_key="phc_test",
            transport=httpx.MockTransport(lambda request: httpx.Response(200)),
        )
        await client.aclose()

        with pytest.raises(RuntimeError):
            await client.capture_page_view("/x")


class TestFactory:
    def test_none_provider(self) -> None:
        assert isinstance(create_telemetry_client(AnalyticsSettings(provider="none")), NullTelemetryClient)

    def test_posthog_requires_key(self) -> None:
        with pytest.raises(ValidationAppError):
            create_telemetry_client(AnalyticsSettings(provider="posthog", posthog_api_key=None))

    def test_posthog_provider(self) -> None:
        cfg = AnalyticsSettings(provider="posthog", posthog_api_key="phc_test")

        assert isinstance(create_telemetry_client(cfg), PostHogTelemetryClient)

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValidationAppError):
            create_telemetry_client(AnalyticsSettings(provider="plausible"))


class TestDispatchIntegration:
    def _app(self, telemetry, metadata_store, object_store, rate_limiter):
        metadata_store.put("demo-x", {"name": "demo-x", "updated": "2024-01-01T00:00:00Z"})
        object_store.put("demo-x/index.html", "<h1>X</h1>")
        return create_app(
            object_store=object_store,
            metadata_store=metadata_store,
            rate_limiter=rate_limiter,
            telemetry=telemetry,
        )

    def test_served_asset_is_tracked(self, metadata_store, object_store, rate_limiter) -> None:
        telemetry = AsyncMock()
        client = TestClient(self._app(telemetry, metadata_store, object_store, rate_limiter))

        response = client.get("/demo-x/")

        assert response.status_code == 200
        telemetry.capture_page_view.assert_awaited_once_with("/demo-x", {"demo": "demo-x"})

    def test_not_found_is_not_tracked(self, metadata_store, object_store, rate_limiter) -> None:
        telemetry = AsyncMock()
        client = TestClient(self._app(telemetry, metadata_store, object_store, rate_limiter))

        client.get("/other/")

        telemetry.capture_page_view.assert_not_awaited()

    def test_tracking_failure_does_not_affect_response(self, metadata_store, object_store, rate_limiter) -> None:
        telemetry = AsyncMock()
        telemetry.capture_page_view.side_effect = httpx.ConnectError("unreachable")
        client = TestClient(self._app(telemetry, metadata_store, object_store, rate_limiter))

        response = client.get("/demo-x/")

        assert response.status_code == 200
        assert response.text == "<h1>X</h1>"

    def test_telemetry_closed_on_shutdown(self, metadata_store, object_store, rate_limiter) -> None:
        telemetry = AsyncMock()

        with TestClient(self._app(telemetry, metadata_store, object_store, rate_limiter)) as client:
            client.get("/demo-x/")
            telemetry.aclose.assert_not_awaited()

        telemetry.aclose.assert_awaited_once()
