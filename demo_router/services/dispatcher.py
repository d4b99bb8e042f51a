"""Top-level request dispatch.

Order of operations for every request:

1. ``OPTIONS`` short-circuits with the CORS preflight headers;
2. the client's rate limit is consumed (429 when exhausted);
3. the path is normalized;
4. the request is routed to the listing, a well-known text file, the API
   placeholder or the asset resolver;
5. any unexpected failure in the steps above becomes a generic 500.

Security headers are added by ``security_headers_middleware`` on the way out.
The dispatcher keeps no per-request state; the rate limiter it owns is the
only state shared between requests.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from demo_router.adapters.rate_limit.base import AbstractRateLimiter
from demo_router.adapters.storage.base import AbstractMetadataStore
from demo_router.adapters.telemetry.base import AbstractTelemetryClient, NullTelemetryClient
from demo_router.core.config import AppSettings
from demo_router.core.cors import get_cors_headers, parse_origins
from demo_router.core.logging import get_request_id
from demo_router.core.rate_limit import enforce_rate_limit
from demo_router.services.asset_resolver import (
    AssetFound,
    AssetResolver,
    ProjectNotFound,
    ResolvedAsset,
    normalize_pathname,
)
from demo_router.services.listing import list_projects

logger = logging.getLogger(__name__)

ROBOTS_TXT = "User-agent: *\nAllow: /\n"

Handler = Callable[[Request], Awaitable[Response]]


class RequestDispatcher:
    """Routes requests to the listing, text files, API placeholder or assets."""

    def __init__(
        self,
        *,
        resolver: AssetResolver,
        metadata_store: AbstractMetadataStore,
        rate_limiter: AbstractRateLimiter,
        app_settings: AppSettings,
        telemetry: AbstractTelemetryClient | None = None,
    ) -> None:
        self._resolver = resolver
        self._metadata_store = metadata_store
        self._rate_limiter = rate_limiter
        self._settings = app_settings
        self._telemetry = telemetry if telemetry is not None else NullTelemetryClient()
        self._allowed_origins = frozenset(parse_origins(app_settings.cors_allowed_origins))
        self._routes: dict[str, Handler] = {
            "/": self._serve_listing,
            "/robots.txt": self._serve_robots,
            "/api/demos": self._serve_api,
        }

    @property
    def rate_limiter(self) -> AbstractRateLimiter:
        return self._rate_limiter

    async def dispatch(self, request: Request) -> Response:
        """Produce the response for ``request``.

        Raises:
            HTTPException: 429 when the client exceeded its rate limit.
        """
        try:
            if request.method == "OPTIONS":
                return self._preflight(request)

            enforce_rate_limit(request, self._rate_limiter, self._settings)

            pathname = normalize_pathname(request.url.path)
            handler = self._routes.get(pathname)
            if handler is not None:
                return await handler(request)
            return await self._serve_asset(request, pathname)
        except HTTPException:
            raise
        except Exception as exc:
            logger.error(
                "dispatch.unhandled_exception",
                extra={
                    "error_type": type(exc).__name__,
                    "request_path": request.url.path,
                    "request_method": request.method,
                    "request_id": get_request_id(),
                },
            )
            return PlainTextResponse("Internal Server Error", status_code=500)

    def _preflight(self, request: Request) -> Response:
        headers = get_cors_headers(request.headers.get("origin"), self._allowed_origins)
        return Response(status_code=204, headers=headers)

    async def _serve_listing(self, request: Request) -> Response:
        projects = await list_projects(self._metadata_store)
        return JSONResponse(
            {"demos": [p.model_dump(mode="json") for p in projects]},
            headers={"Cache-Control": f"public, max-age={self._settings.listing_cache_seconds}"},
        )

    async def _serve_robots(self, request: Request) -> Response:
        return PlainTextResponse(ROBOTS_TXT, headers={"Cache-Control": "public, max-age=86400"})

    async def _serve_api(self, request: Request) -> Response:
        return JSONResponse({"message": "API coming soon"})

    async def _serve_asset(self, request: Request, pathname: str) -> Response:
        result = await self._resolver.resolve(pathname)

        if isinstance(result, ProjectNotFound):
            return PlainTextResponse("Demo not found", status_code=404)
        if not isinstance(result, AssetFound):
            return PlainTextResponse("Asset not found", status_code=404)

        asset = result.asset
        logger.info(
            "asset.served",
            extra={
                "project": asset.project,
                "asset_path": asset.asset_path,
                "content_type": asset.content_type,
                "spa_fallback": asset.spa_fallback,
            },
        )
        return self._asset_response(
            asset,
            background=BackgroundTask(self._track_page_view, pathname, asset.project),
        )

    def _asset_response(self, asset: ResolvedAsset, *, background: BackgroundTask | None) -> Response:
        # Content-Type is passed as a header so Starlette does not append a charset.
        headers = {
            "Content-Type": asset.content_type,
            "Cache-Control": asset.cache_control,
        }
        if asset.spa_fallback:
            headers["X-SPA-Route"] = "true"
        else:
            headers["X-Demo-Name"] = asset.project
        if asset.size is not None:
            headers["Content-Length"] = str(asset.size)

        return StreamingResponse(asset.body, headers=headers, background=background)

    async def _track_page_view(self, path: str, project: str) -> None:
        try:
            await self._telemetry.capture_page_view(path, {"demo": project})
        except Exception as exc:
            # Analytics must never affect serving.
            logger.debug(
                "telemetry.capture_failed",
                extra={"error_type": type(exc).__name__, "demo": project},
            )
