"""Protective response headers applied to every response."""

from __future__ import annotations

from starlette.responses import Response

CONTENT_SECURITY_POLICY = "; ".join(
    [
        # Demos load arbitrary third-party resources.
        "default-src * 'unsafe-inline' 'unsafe-eval' data: blob:",
        "frame-ancestors 'self'",
    ]
)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}


def apply_security_headers(response: Response) -> Response:
    """Set the security header set on ``response``, overriding existing values.

    Status, body and every other header are left untouched.
    """
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response
