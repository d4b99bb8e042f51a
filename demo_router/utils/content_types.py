"""Content type and cache directive lookups for served assets."""

from __future__ import annotations

DEFAULT_CONTENT_TYPE = "application/octet-stream"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"

CONTENT_TYPES: dict[str, str] = {
    "html": HTML_CONTENT_TYPE,
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "ico": "image/x-icon",
    "woff": "font/woff",
    "woff2": "font/woff2",
    "ttf": "font/ttf",
    "otf": "font/otf",
}

CACHE_IMMUTABLE = "public, max-age=31536000, immutable"  # 1 year
CACHE_SHORT = "public, max-age=86400"  # 1 day
CACHE_REVALIDATE = "public, max-age=0, must-revalidate"
CACHE_DEFAULT = "public, max-age=3600"  # 1 hour


def get_content_type(path: str) -> str:
    """Map the extension of ``path`` to a MIME type.

    The extension is whatever follows the last dot, compared case-insensitively.
    Unknown or missing extensions map to ``application/octet-stream``.

    Examples:
        >>> get_content_type("assets/App.JS")
        'application/javascript'
        >>> get_content_type("LICENSE")
        'application/octet-stream'
    """
    extension = path.rsplit(".", 1)[-1].lower()
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def get_cache_control(content_type: str) -> str:
    """Pick the Cache-Control directive for a MIME type."""
    if content_type.startswith(("image/", "font/")):
        return CACHE_IMMUTABLE
    if "javascript" in content_type or "css" in content_type:
        return CACHE_SHORT
    if "html" in content_type:
        return CACHE_REVALIDATE
    return CACHE_DEFAULT
