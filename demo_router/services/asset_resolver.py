"""Resolution of request paths to stored project assets.

A path ``/<project>/<asset path...>`` is resolved in three steps:

1. the project must have a metadata record, otherwise ``ProjectNotFound``;
2. the blob at ``<project>/<asset path>`` is looked up, ``index.html`` standing
   in for an empty asset path;
3. when that blob is absent and the asset path has no dot anywhere in it, the
   project's ``index.html`` is served instead (SPA fallback) so client-side
   routes resolve to the root document.

Anything else is ``AssetNotFound``. Not-found outcomes are returned, never
raised; store failures propagate as ``StoreAppError`` for the dispatcher to
contain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import AsyncIterator

from demo_router.adapters.storage.base import AbstractMetadataStore, AbstractObjectStore
from demo_router.schemas.metadata import ProjectMetadata
from demo_router.utils.content_types import HTML_CONTENT_TYPE, get_cache_control, get_content_type

logger = logging.getLogger(__name__)

INDEX_DOCUMENT = "index.html"


@dataclass
class ResolvedAsset:
    """An asset ready to be written to a response."""

    project: str
    asset_path: str
    content_type: str
    cache_control: str
    body: AsyncIterator[bytes]
    size: int | None = None
    spa_fallback: bool = False


@dataclass(frozen=True)
class AssetFound:
    asset: ResolvedAsset
    metadata: ProjectMetadata


@dataclass(frozen=True)
class ProjectNotFound:
    project: str


@dataclass(frozen=True)
class AssetNotFound:
    project: str
    asset_path: str


ResolveResult = AssetFound | ProjectNotFound | AssetNotFound


def normalize_pathname(pathname: str) -> str:
    """Strip one trailing slash, leaving the root path untouched."""
    if pathname != "/" and pathname.endswith("/"):
        return pathname[:-1]
    return pathname


def split_pathname(pathname: str) -> tuple[str, str]:
    """Split a normalized pathname into ``(project, asset_path)``.

    Examples:
        >>> split_pathname("/demo/assets/app.js")
        ('demo', 'assets/app.js')
        >>> split_pathname("/demo")
        ('demo', 'index.html')
    """
    parts = pathname.removeprefix("/").split("/")
    project = parts[0]
    asset_path = "/".join(parts[1:]) or INDEX_DOCUMENT
    return project, asset_path


class AssetResolver:
    """Resolves request paths against the metadata and object stores."""

    def __init__(self, *, metadata_store: AbstractMetadataStore, object_store: AbstractObjectStore) -> None:
        self._metadata_store = metadata_store
        self._object_store = object_store

    async def resolve(self, pathname: str) -> ResolveResult:
        """Resolve ``pathname`` to an asset.

        Args:
            pathname: Decoded URL path, e.g. ``/demo/about``.

        Returns:
            AssetFound, ProjectNotFound or AssetNotFound.

        Raises:
            StoreAppError: If a store lookup fails.
        """
        project, asset_path = split_pathname(normalize_pathname(pathname))
        if not project:
            return ProjectNotFound(project=project)

        metadata = await self._metadata_store.get(project)
        if metadata is None:
            logger.info("asset.project_not_found", extra={"project": project})
            return ProjectNotFound(project=project)

        stored = await self._object_store.get(f"{project}/{asset_path}")
        if stored is not None:
            content_type = get_content_type(asset_path)
            asset = ResolvedAsset(
                project=project,
                asset_path=asset_path,
                content_type=content_type,
                cache_control=get_cache_control(content_type),
                body=stored.body,
                size=stored.size,
            )
            return AssetFound(asset=asset, metadata=metadata)

        # Any dot, even in a directory name, disables the fallback.
        if "." not in asset_path:
            index = await self._object_store.get(f"{project}/{INDEX_DOCUMENT}")
            if index is not None:
                logger.debug(
                    "asset.spa_fallback",
                    extra={"project": project, "asset_path": asset_path},
                )
                asset = ResolvedAsset(
                    project=project,
                    asset_path=INDEX_DOCUMENT,
                    content_type=HTML_CONTENT_TYPE,
                    cache_control=get_cache_control(HTML_CONTENT_TYPE),
                    body=index.body,
                    size=index.size,
                    spa_fallback=True,
                )
                return AssetFound(asset=asset, metadata=metadata)

        logger.info(
            "asset.not_found",
            extra={"project": project, "asset_path": asset_path},
        )
        return AssetNotFound(project=project, asset_path=asset_path)
