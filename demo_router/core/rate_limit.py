"""Rate limiting glue between the HTTP layer and the limiter adapter.

Strategy:
- Sliding window per client network address.
- The address is the socket peer. Behind a proxy, uvicorn's proxy header
  support restores it for trusted hops. A client-supplied header is only
  consulted when ``APP_CLIENT_IP_HEADER`` is explicitly configured.
- Requests with no identifiable address share a single ``unknown`` bucket,
  so for those clients the limit is a coarse global guard rather than a
  per-client control.
"""

from __future__ import annotations

import hashlib
import logging
import random
import time
from typing import Callable

from fastapi import HTTPException, Request, status

from demo_router.adapters.rate_limit.base import AbstractRateLimiter
from demo_router.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from demo_router.core.config import AppSettings

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"


def build_rate_limiter(
    app_settings: AppSettings,
    *,
    clock: Callable[[], float] | None = None,
    rng: Callable[[], float] | None = None,
) -> AbstractRateLimiter:
    """Create the process-wide limiter from settings.

    Quota and window are read once here and fixed for the limiter's lifetime.
    """
    return InMemorySlidingWindowRateLimiter(
        limit=app_settings.rate_limit_requests,
        window_ms=app_settings.rate_limit_window_ms,
        clock=clock or time.time,
        cleanup_probability=app_settings.rate_limit_cleanup_probability,
        rng=rng or random.random,
    )


def get_client_identifier(request: Request, client_ip_header: str | None = None) -> str:
    """Return the client network address used as the limiter key."""

    if client_ip_header:
        forwarded = request.headers.get(client_ip_header)
        if forwarded:
            # X-Forwarded-For style lists carry the original client first.
            first = forwarded.split(",")[0].strip()
            if first:
                return first

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def enforce_rate_limit(request: Request, limiter: AbstractRateLimiter, app_settings: AppSettings) -> None:
    """Consume one unit of the client's budget.

    Args:
        request: Incoming request.
        limiter: The app's rate limiter.
        app_settings: Router settings (enable flag, header options).

    Raises:
        HTTPException: 429 Too Many Requests when the window is exhausted.
    """

    if not app_settings.rate_limit_enabled:
        return

    key = get_client_identifier(request, app_settings.client_ip_header)
    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_limiter_key(key),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 1
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_limiter_key(key),
            "limit": result.limit,
            "window_ms": app_settings.rate_limit_window_ms,
            "retry_after_s": retry_after,
            "path": request.url.path,
        },
    )

    headers = {"Retry-After": str(retry_after)}
    if app_settings.rate_limit_include_headers:
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail="Rate limit exceeded. Try again later.",
        headers=headers,
    )
