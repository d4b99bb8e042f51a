"""Filesystem-backed stores.

Layout written by the deployment process::

    <assets_dir>/<project>/<path...>     asset blobs
    <metadata_dir>/<project>.json        metadata records

Blocking file I/O runs in the default thread pool executor, optionally bounded
by ``io_timeout_seconds``.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
from pathlib import Path
from typing import Any, AsyncIterator, BinaryIO, Callable, TypeVar

from demo_router.adapters.storage.base import (
    AbstractMetadataStore,
    AbstractObjectStore,
    StoredObject,
    parse_metadata,
)
from demo_router.core.errors import StoreAppError
from demo_router.schemas.metadata import ProjectMetadata

logger = logging.getLogger(__name__)

T = TypeVar("T")

METADATA_SUFFIX = ".json"


def _resolve_within(root: Path, relative: str) -> Path | None:
    """Join ``relative`` onto ``root``; None if the result escapes ``root``."""
    candidate = (root / relative).resolve()
    if candidate == root or root in candidate.parents:
        return candidate
    return None


class _ExecutorIO:
    """Runs blocking callables off the event loop with an optional timeout."""

    def __init__(self, *, timeout_seconds: float | None, backend: str) -> None:
        self._timeout = timeout_seconds
        self._backend = backend

    async def run(self, func: Callable[..., T], *args: Any, key: str) -> T:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, func, *args),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            logger.warning(
                "store.io_timeout",
                extra={"backend": self._backend, "key": key, "timeout_seconds": self._timeout},
            )
            raise StoreAppError(
                code="store_timeout",
                message="Store read timed out",
                details={"backend": self._backend, "key": key},
            ) from exc
        except OSError as exc:
            logger.error(
                "store.io_error",
                extra={"backend": self._backend, "key": key, "error_type": type(exc).__name__},
            )
            raise StoreAppError(
                code="store_io_error",
                message="Store read failed",
                details={"backend": self._backend, "key": key},
            ) from exc


def _open_file(path: Path) -> tuple[BinaryIO, int] | None:
    """Open ``path`` for reading; None if it is not a regular file."""
    try:
        handle = path.open("rb")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
        return None
    try:
        info = os.fstat(handle.fileno())
    except OSError:
        handle.close()
        raise
    if not stat.S_ISREG(info.st_mode):
        handle.close()
        return None
    return handle, info.st_size


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


class FilesystemObjectStore(AbstractObjectStore):
    """Serves blobs from files under a root directory."""

    def __init__(
        self,
        root: str | Path,
        *,
        chunk_size: int = 64 * 1024,
        timeout_seconds: float | None = None,
    ) -> None:
        self._root = Path(root).resolve()
        self._chunk_size = chunk_size
        self._io = _ExecutorIO(timeout_seconds=timeout_seconds, backend="filesystem-assets")

    async def get(self, key: str) -> StoredObject | None:
        path = _resolve_within(self._root, key)
        if path is None:
            logger.warning("store.key_outside_root", extra={"key": key})
            return None

        # Opened up front so a vanished or unreadable file fails before headers are sent.
        opened = await self._io.run(_open_file, path, key=key)
        if opened is None:
            return None
        handle, size = opened
        return StoredObject(key=key, size=size, body=self._stream(handle, key))

    async def _stream(self, handle: BinaryIO, key: str) -> AsyncIterator[bytes]:
        try:
            while True:
                chunk = await self._io.run(handle.read, self._chunk_size, key=key)
                if not chunk:
                    break
                yield chunk
        finally:
            handle.close()


class FilesystemMetadataStore(AbstractMetadataStore):
    """Reads ``<name>.json`` metadata records from a directory."""

    def __init__(self, root: str | Path, *, timeout_seconds: float | None = None) -> None:
        self._root = Path(root).resolve()
        self._io = _ExecutorIO(timeout_seconds=timeout_seconds, backend="filesystem-metadata")

    async def get(self, name: str) -> ProjectMetadata | None:
        if not name or "/" in name or "\\" in name:
            return None
        path = _resolve_within(self._root, name + METADATA_SUFFIX)
        if path is None:
            return None

        raw = await self._io.run(_read_text, path, key=name)
        if raw is None:
            return None
        return parse_metadata(raw, key=name)

    async def list(self) -> list[str]:
        def _scan() -> list[str]:
            if not self._root.is_dir():
                return []
            return sorted(
                p.name[: -len(METADATA_SUFFIX)]
                for p in self._root.iterdir()
                if p.is_file() and p.name.endswith(METADATA_SUFFIX)
            )

        return await self._io.run(_scan, key="*")
