"""Store interfaces shared by every backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import AsyncIterator

from pydantic import ValidationError

from demo_router.core.errors import MetadataValidationAppError
from demo_router.schemas.metadata import ProjectMetadata


@dataclass
class StoredObject:
    """A blob read from the object store.

    Attributes:
        key: Composite ``<project>/<path>`` key.
        size: Blob size in bytes, when known.
        body: Async stream of byte chunks; consumed once.
    """

    key: str
    size: int | None
    body: AsyncIterator[bytes]


class AbstractObjectStore(ABC):
    """Read side of the asset blob store."""

    @abstractmethod
    async def get(self, key: str) -> StoredObject | None:
        """Fetch the blob stored at ``key``.

        Returns:
            StoredObject, or None when nothing is stored at that key.

        Raises:
            StoreAppError: If the backend fails.
        """
        ...


class AbstractMetadataStore(ABC):
    """Read side of the project metadata store."""

    @abstractmethod
    async def get(self, name: str) -> ProjectMetadata | None:
        """Fetch and validate the metadata record for project ``name``.

        Raises:
            StoreAppError: If the backend fails.
            MetadataValidationAppError: If the stored record is malformed.
        """
        ...

    @abstractmethod
    async def list(self) -> list[str]:
        """Return every stored project key, sorted."""
        ...


def parse_metadata(raw: str | bytes, *, key: str) -> ProjectMetadata:
    """Decode a raw JSON metadata record.

    Raises:
        MetadataValidationAppError: If the payload is not valid JSON or does
            not match ``ProjectMetadata``.
    """
    try:
        return ProjectMetadata.model_validate_json(raw)
    except ValidationError as exc:
        raise MetadataValidationAppError(
            code="metadata_invalid",
            message=f"Metadata record '{key}' is malformed",
            details={"key": key, "context": {"errors": exc.error_count()}},
        ) from exc
