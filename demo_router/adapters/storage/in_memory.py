"""In-memory stores used by tests and the ``memory`` backend."""

from __future__ import annotations

import json
from typing import Any, AsyncIterator

from demo_router.adapters.storage.base import (
    AbstractMetadataStore,
    AbstractObjectStore,
    StoredObject,
    parse_metadata,
)
from demo_router.schemas.metadata import ProjectMetadata


async def _iter_chunks(data: bytes, chunk_size: int) -> AsyncIterator[bytes]:
    for offset in range(0, len(data), chunk_size):
        yield data[offset : offset + chunk_size]


class InMemoryObjectStore(AbstractObjectStore):
    """Dict-backed blob store."""

    def __init__(self, *, chunk_size: int = 64 * 1024) -> None:
        self._blobs: dict[str, bytes] = {}
        self._chunk_size = chunk_size

    def put(self, key: str, data: bytes | str) -> None:
        self._blobs[key] = data.encode("utf-8") if isinstance(data, str) else bytes(data)

    async def get(self, key: str) -> StoredObject | None:
        data = self._blobs.get(key)
        if data is None:
            return None
        return StoredObject(key=key, size=len(data), body=_iter_chunks(data, self._chunk_size))


class InMemoryMetadataStore(AbstractMetadataStore):
    """Dict-backed metadata store.

    Records are kept as raw JSON text, like a key-value namespace would hold
    them, and validated on every read.
    """

    def __init__(self) -> None:
        self._records: dict[str, str] = {}

    def put(self, name: str, record: str | dict[str, Any] | ProjectMetadata) -> None:
        if isinstance(record, ProjectMetadata):
            record = record.model_dump_json()
        elif isinstance(record, dict):
            record = json.dumps(record)
        self._records[name] = record

    async def get(self, name: str) -> ProjectMetadata | None:
        raw = self._records.get(name)
        if raw is None:
            return None
        return parse_metadata(raw, key=name)

    async def list(self) -> list[str]:
        return sorted(self._records)
