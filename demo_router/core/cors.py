"""CORS preflight headers."""

from __future__ import annotations

from typing import Iterable


def parse_origins(origins_string: str | None) -> set[str]:
    """Parse a comma-separated origin list into a set.

    Examples:
        >>> sorted(parse_origins("https://a.example, https://b.example"))
        ['https://a.example', 'https://b.example']
        >>> parse_origins(None)
        set()
    """
    if not origins_string:
        return set()
    return {origin.strip() for origin in origins_string.split(",") if origin.strip()}


def get_cors_headers(origin: str | None, allowed_origins: Iterable[str]) -> dict[str, str]:
    """Build the preflight headers for a request from ``origin``.

    Only an allow-listed origin is echoed back; any other origin gets
    ``Access-Control-Allow-Origin: null``.
    """
    headers = {
        "Access-Control-Allow-Methods": "GET, HEAD, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Max-Age": "86400",
    }

    if origin and origin in set(allowed_origins):
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
    else:
        headers["Access-Control-Allow-Origin"] = "null"

    return headers
