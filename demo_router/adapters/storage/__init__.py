"""Object and metadata store adapters.

Stores are external collaborators of the router: writes happen out-of-band
through deployment, request handling only reads.
"""

from demo_router.adapters.storage.base import (
    AbstractMetadataStore,
    AbstractObjectStore,
    StoredObject,
)
from demo_router.adapters.storage.factory import create_metadata_store, create_object_store
from demo_router.adapters.storage.filesystem import FilesystemMetadataStore, FilesystemObjectStore
from demo_router.adapters.storage.in_memory import InMemoryMetadataStore, InMemoryObjectStore

__all__ = [
    "AbstractMetadataStore",
    "AbstractObjectStore",
    "FilesystemMetadataStore",
    "FilesystemObjectStore",
    "InMemoryMetadataStore",
    "InMemoryObjectStore",
    "StoredObject",
    "create_metadata_store",
    "create_object_store",
]
