"""Pytest configuration and fixtures shared across all test modules.

Environment variables are fixed before any import of ``demo_router`` so the
module-level settings never pick up a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("ANALYTICS_PROVIDER", "none")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from demo_router.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from demo_router.adapters.storage.in_memory import InMemoryMetadataStore, InMemoryObjectStore
from demo_router.core.app_factory import create_app


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore(chunk_size=4)


@pytest.fixture
def metadata_store() -> InMemoryMetadataStore:
    return InMemoryMetadataStore()


@pytest.fixture
def clock() -> Mock:
    """Deterministic clock in UNIX seconds."""
    return Mock(return_value=1_000.0)


@pytest.fixture
def rate_limiter(clock: Mock) -> InMemorySlidingWindowRateLimiter:
    return InMemorySlidingWindowRateLimiter(limit=100, window_ms=60_000, clock=clock, cleanup_probability=0.0)


@pytest.fixture
def app(
    object_store: InMemoryObjectStore,
    metadata_store: InMemoryMetadataStore,
    rate_limiter: InMemorySlidingWindowRateLimiter,
) -> FastAPI:
    return create_app(
        object_store=object_store,
        metadata_store=metadata_store,
        rate_limiter=rate_limiter,
    )


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)
