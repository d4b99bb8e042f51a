"""Tests for content type and cache directive lookups."""

import pytest

from demo_router.utils.content_types import (
    CACHE_DEFAULT,
    CACHE_IMMUTABLE,
    CACHE_REVALIDATE,
    CACHE_SHORT,
    get_cache_control,
    get_content_type,
)

EXPECTED_TYPES = {
    "html": "text/html; charset=utf-8",
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


@pytest.mark.parametrize("extension,content_type", sorted(EXPECTED_TYPES.items()))
def test_known_extensions_ignore_case(extension: str, content_type: str) -> None:
    assert get_content_type(f"assets/file.{extension}") == content_type
    assert get_content_type(f"assets/FILE.{extension.upper()}") == content_type


@pytest.mark.parametrize("path", ["file.xyz", "LICENSE", "archive.tar.gz", "", "dir.v2/readme"])
def test_unknown_or_missing_extension_falls_back(path: str) -> None:
    assert get_content_type(path) == "application/octet-stream"


def test_only_last_extension_counts() -> None:
    assert get_content_type("bundle.min.js") == "application/javascript"


@pytest.mark.parametrize(
    "content_type,expected",
    [
        ("image/png", CACHE_IMMUTABLE),
        ("image/svg+xml", CACHE_IMMUTABLE),
        ("font/woff2", CACHE_IMMUTABLE),
        ("application/javascript", CACHE_SHORT),
        ("text/css", CACHE_SHORT),
        ("text/html; charset=utf-8", CACHE_REVALIDATE),
        ("application/json", CACHE_DEFAULT),
        ("application/octet-stream", CACHE_DEFAULT),
    ],
)
def test_cache_control_by_content_type(content_type: str, expected: str) -> None:
    assert get_cache_control(content_type) == expected


def test_cache_directive_values() -> None:
    assert get_cache_control("image/gif") == "public, max-age=31536000, immutable"
    assert get_cache_control("text/css") == "public, max-age=86400"
    assert get_cache_control("text/html") == "public, max-age=0, must-revalidate"
    assert get_cache_control("text/plain") == "public, max-age=3600"


@pytest.mark.parametrize("extension", sorted(EXPECTED_TYPES))
def test_every_supported_type_has_a_directive(extension: str) -> None:
    directive = get_cache_control(get_content_type(f"x.{extension}"))
    assert directive.startswith("public, max-age=")
