from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (stores, limiter, dispatcher, middleware,
handlers, routers) so tests can build isolated instances with injected
collaborators.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI

from demo_router.adapters.rate_limit.base import AbstractRateLimiter
from demo_router.adapters.storage.base import AbstractMetadataStore, AbstractObjectStore
from demo_router.adapters.storage.factory import create_metadata_store, create_object_store
from demo_router.adapters.telemetry.base import AbstractTelemetryClient
from demo_router.adapters.telemetry.factory import create_telemetry_client
from demo_router.api.routes import demos_router, health_router
from demo_router.core.config import Settings, settings as default_settings
from demo_router.core.exception_handlers import setup_exception_handlers
from demo_router.core.logging import configure_logging
from demo_router.core.middleware import request_id_middleware, security_headers_middleware
from demo_router.core.rate_limit import build_rate_limiter
from demo_router.services.asset_resolver import AssetResolver
from demo_router.services.dispatcher import RequestDispatcher


def create_app(
    config: Settings | None = None,
    *,
    object_store: AbstractObjectStore | None = None,
    metadata_store: AbstractMetadataStore | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    telemetry: AbstractTelemetryClient | None = None,
    clock: Callable[[], float] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Collaborators not passed in are built from configuration. The rate
    limiter created here lives as long as the app.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    cfg = config or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    if object_store is None:
        object_store = create_object_store(cfg.store)
    if metadata_store is None:
        metadata_store = create_metadata_store(cfg.store)
    if rate_limiter is None:
        rate_limiter = build_rate_limiter(cfg.app, clock=clock)
    if telemetry is None:
        telemetry = create_telemetry_client(cfg.analytics)

    dispatcher = RequestDispatcher(
        resolver=AssetResolver(metadata_store=metadata_store, object_store=object_store),
        metadata_store=metadata_store,
        rate_limiter=rate_limiter,
        app_settings=cfg.app,
        telemetry=telemetry,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await telemetry.aclose()

    app = FastAPI(
        title="Demo Router",
        description=(
            "Serves per-project static asset bundles with SPA fallback, "
            "a sliding-window rate limit and uniform cache/security headers."
        ),
        version="0.1.0",
        debug=cfg.app.debug,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.dispatcher = dispatcher

    # Middleware (last registered runs outermost)
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers: the catch-all dispatcher route must come last
    app.include_router(health_router)
    app.include_router(demos_router)

    return app
