"""Project listing for the root page."""

from __future__ import annotations

import logging

from demo_router.adapters.storage.base import AbstractMetadataStore
from demo_router.schemas.metadata import ProjectMetadata

logger = logging.getLogger(__name__)


async def list_projects(metadata_store: AbstractMetadataStore) -> list[ProjectMetadata]:
    """Load every project record, featured first, then most recently updated.

    Keys listed by the store whose record has disappeared since are skipped.
    """
    projects: list[ProjectMetadata] = []
    for name in await metadata_store.list():
        metadata = await metadata_store.get(name)
        if metadata is None:
            logger.debug("listing.record_missing", extra={"project": name})
            continue
        projects.append(metadata)

    projects.sort(key=lambda m: m.updated, reverse=True)
    projects.sort(key=lambda m: not m.featured)
    return projects
