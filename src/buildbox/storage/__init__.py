"""Storage subsystem: backend capability, artifact cache, and archives."""

from buildbox.storage.archive import create_archive, extract_archive
from buildbox.storage.backend import StorageBackend
from buildbox.storage.cache import ArtifactCache

__all__ = [
    "ArtifactCache",
    "StorageBackend",
    "create_archive",
    "extract_archive",
]
