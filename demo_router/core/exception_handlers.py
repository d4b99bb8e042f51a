"""Global exception handlers for consistent error responses.

The dispatcher already contains failures on the serving path; these handlers
are the safety net for everything else (health checks, errors raised while
building responses outside the dispatcher).

- ValidationAppError -> 400
- StoreAppError -> 500 with a generic message
- Unexpected Exception -> generic 500
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from demo_router.core.errors import AppError, StoreAppError
from demo_router.core.logging import get_request_id

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render domain errors as ``{"error": {code, message, request_id}}``.

    Store failures never expose their message or details to the client.
    """
    status_code = 400
    code, message = exc.code, exc.message
    if isinstance(exc, StoreAppError):
        status_code = 500
        code, message = "store_unavailable", GENERIC_ERROR_MESSAGE

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        },
    )

    error_content = {
        "code": code,
        "message": message,
        "request_id": get_request_id(),
    }
    if exc.details and status_code < 500:
        error_content["details"] = exc.details

    return JSONResponse(status_code=status_code, content={"error": error_content})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors; never leaks internals."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": GENERIC_ERROR_MESSAGE,
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
