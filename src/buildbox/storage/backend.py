"""Storage backend capability consumed by the artifact cache."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from buildbox.models.component import Component


@runtime_checkable
class StorageBackend(Protocol):
    """Remote artifact store the cache layer is written against.

    Implementations (filesystem mirrors, HTTP servers, object stores) need
    only these three methods.  Failures to resolve or download must be
    raised as :class:`~buildbox.errors.TransportError`.
    """

    def get_cache_root(self) -> Path:
        """Local directory under which cached artifacts are kept."""
        ...

    def resolve(
        self,
        name: str,
        version: int | None = None,
        environment: str | None = None,
    ) -> Component:
        """Resolve a possibly partial reference; ``version=None`` means latest."""
        ...

    def download(self, url: str, destination: Path) -> None:
        """Fetch the bytes at *url* into the local file *destination*."""
        ...
