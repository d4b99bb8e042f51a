"""HTTP middleware: request correlation and security headers.

Usage:
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse

from demo_router.core.config import settings
from demo_router.core.logging import clear_request_id, get_request_id, set_request_id
from demo_router.core.security import apply_security_headers

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Accept or generate a request id and propagate it.

    The incoming ``X-Request-ID`` (configurable via LOG_REQUEST_ID_HEADER) is
    reused when present, otherwise a UUID4 is generated. The id is bound to the
    logging context for the lifetime of the request and echoed back together
    with an ``X-Request-Duration-ms`` header.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def security_headers_middleware(request: Request, call_next) -> Response:
    """Wrap every response with the security header set.

    An exception escaping the routes is turned into a generic 500 here so the
    error response is wrapped as well.
    """

    try:
        response: Response = await call_next(request)
    except Exception as exc:
        logger.error(
            "middleware.unhandled_exception",
            extra={
                "error_type": type(exc).__name__,
                "request_path": request.url.path,
                "request_method": request.method,
                "request_id": get_request_id(),
            },
        )
        response = PlainTextResponse("Internal Server Error", status_code=500)

    return apply_security_headers(response)
