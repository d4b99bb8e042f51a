"""Factory functions for creating store instances from configuration."""

from __future__ import annotations

from demo_router.adapters.storage.base import AbstractMetadataStore, AbstractObjectStore
from demo_router.adapters.storage.filesystem import FilesystemMetadataStore, FilesystemObjectStore
from demo_router.adapters.storage.in_memory import InMemoryMetadataStore, InMemoryObjectStore
from demo_router.core.config import StoreSettings, settings
from demo_router.core.errors import ValidationAppError

SUPPORTED_BACKENDS = ("memory", "filesystem")


def _unknown_backend(backend: str) -> ValidationAppError:
    return ValidationAppError(
        code="store_unknown_backend",
        message=(
            f"Unknown store backend: '{backend}'. Supported backends: "
            + ", ".join(SUPPORTED_BACKENDS)
        ),
        details={"backend": backend},
    )


def create_object_store(store_settings: StoreSettings | None = None) -> AbstractObjectStore:
    """Instantiate the asset blob store selected by ``STORE_BACKEND``.

    Raises:
        ValidationAppError: If the backend name is not supported.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "memory":
        return InMemoryObjectStore(chunk_size=cfg.chunk_size)
    if backend == "filesystem":
        return FilesystemObjectStore(
            cfg.assets_dir,
            chunk_size=cfg.chunk_size,
            timeout_seconds=cfg.io_timeout_seconds,
        )

    raise _unknown_backend(backend)


def create_metadata_store(store_settings: StoreSettings | None = None) -> AbstractMetadataStore:
    """Instantiate the project metadata store selected by ``STORE_BACKEND``.

    Raises:
        ValidationAppError: If the backend name is not supported.
    """
    cfg = store_settings or settings.store
    backend = cfg.backend.lower()

    if backend == "memory":
        return InMemoryMetadataStore()
    if backend == "filesystem":
        return FilesystemMetadataStore(cfg.metadata_dir, timeout_seconds=cfg.io_timeout_seconds)

    raise _unknown_backend(backend)
