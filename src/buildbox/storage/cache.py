"""Generic caching layer implemented once on top of any storage backend.

:class:`ArtifactCache` resolves components through a
:class:`~buildbox.storage.backend.StorageBackend`, keeps downloaded
tarballs in a versioned on-disk cache, unpacks them into the build's
``INPUT`` directory, and manages the local stash of unpublished output.

Cache layout under the backend's cache root::

    globals/<name>/<version>/<name>.tar
    environments/<env>/<name>/<version>/<name>.tar
    stash/<name>/<code>/<name>.tar.gz
    stash/<name>/<code>/lockfile.json

The presence of a cache directory is the only cached/not-cached signal.
Entries are never evicted by this layer.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path

from buildbox.errors import MissingStashArtifact, MissingTarball
from buildbox.models.component import Component
from buildbox.storage.archive import create_archive, extract_archive
from buildbox.storage.backend import StorageBackend

logger = logging.getLogger(__name__)

INPUT_DIR = "INPUT"
OUTPUT_DIR = "OUTPUT"
LOCKFILE = "lockfile.json"


class ArtifactCache:
    """Caching, unpacking and stashing of components for one build directory.

    Parameters
    ----------
    backend:
        Storage backend used for resolution, downloads and the cache root.
    workdir:
        Build directory holding ``INPUT/`` and ``OUTPUT/``.  Downloads are
        staged here as well.  Defaults to the current directory.
    """

    def __init__(self, backend: StorageBackend, workdir: Path | None = None) -> None:
        self.backend = backend
        self.workdir = workdir if workdir is not None else Path.cwd()

    @property
    def cache_root(self) -> Path:
        return Path(self.backend.get_cache_root())

    # ------------------------------------------------------------------
    # Published components
    # ------------------------------------------------------------------

    def cache_dir_for(
        self, name: str, version: int, environment: str | None = None
    ) -> Path:
        """Deterministic cache directory for ``(name, version, environment)``."""
        if environment is None:
            base = self.cache_root / "globals"
        else:
            base = self.cache_root / "environments" / environment
        return base / name / str(version)

    def is_cached(
        self, name: str, version: int, environment: str | None = None
    ) -> bool:
        return self.cache_dir_for(name, version, environment).is_dir()

    def _store_tarball(
        self, name: str, version: int, environment: str | None
    ) -> None:
        """Move ``<workdir>/<name>.tar`` into its cache directory.

        The tarball is placed in a temporary sibling directory which is then
        renamed, so the cache directory only appears once it is complete.
        """
        tarname = f"{name}.tar"
        src = self.workdir / tarname
        if not src.is_file():
            raise MissingTarball(f"Downloaded tarball {src} is missing")

        destdir = self.cache_dir_for(name, version, environment)
        destdir.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{version}-", dir=destdir.parent))
        staging.chmod(0o755)
        logger.debug("Move %s -> %s", src, destdir / tarname)
        try:
            shutil.move(str(src), staging / tarname)
            os.rename(staging, destdir)
        except OSError:
            if not destdir.is_dir():
                shutil.rmtree(staging, ignore_errors=True)
                raise
            # Another process stored the same key first; keep its copy.
            logger.debug("%s appeared concurrently, discarding staged copy", destdir)
            shutil.rmtree(staging)

    def retrieve_published(
        self,
        name: str,
        version: int | None = None,
        environment: str | None = None,
    ) -> tuple[Path, Component]:
        """Locate a component, downloading and caching it if necessary.

        Resolution always goes through the backend, even when *version* is
        given, so the returned :class:`Component` is authoritative.

        Returns
        -------
        tuple[Path, Component]
            Path of the cached tarball and the resolved component.
        """
        logger.debug("Locate component %s", name)
        component = self.backend.resolve(name, version, environment)

        if not self.is_cached(component.name, component.version, environment):
            logger.info("Downloading %s version %d", component.name, component.version)
            local_tarball = self.workdir / f"{component.name}.tar"
            self.backend.download(component.location, local_tarball)
            self._store_tarball(component.name, component.version, environment)

        assert self.is_cached(component.name, component.version, environment), (
            "cached component"
        )

        logger.debug("Fetching %s from cache", component.name)
        tarball = self.cache_dir_for(
            component.name, component.version, environment
        ) / f"{component.name}.tar"
        return tarball, component

    def unpack_published(
        self,
        name: str,
        version: int | None = None,
        environment: str | None = None,
    ) -> Component:
        """Retrieve a component and unpack it fresh into ``INPUT/<name>/``."""
        tarball, component = self.retrieve_published(name, version, environment)
        logger.debug("Unpacking tarball %s for %s", tarball, component.name)
        extract_archive(tarball, self.workdir / INPUT_DIR / name)
        return component

    # ------------------------------------------------------------------
    # Stash
    # ------------------------------------------------------------------

    def stash_dir_for(self, name: str, code: str) -> Path:
        return self.cache_root / "stash" / name / code

    def retrieve_stashed(self, name: str, code: str) -> Path:
        """Return the stashed tarball for ``(name, code)``.

        Raises
        ------
        MissingStashArtifact
            If nothing has been stashed under that name and code.
        """
        tarball = self.stash_dir_for(name, code) / f"{name}.tar.gz"
        if not tarball.is_file():
            raise MissingStashArtifact(name, code)
        return tarball

    def unpack_stashed(self, name: str, code: str) -> None:
        """Unpack a stashed build fresh into ``INPUT/<name>/``."""
        tarball = self.retrieve_stashed(name, code)
        extract_archive(tarball, self.workdir / INPUT_DIR / name)

    def stash_output(self, name: str, code: str) -> Path:
        """Archive ``OUTPUT/`` into the stash under ``(name, code)``.

        The lockfile is also copied next to the archive for people browsing
        the stash; the archive already contains it.  Stashing the same name
        and code again replaces the previous entry.

        Returns
        -------
        Path
            Path of the stashed tarball.
        """
        output = self.workdir / OUTPUT_DIR
        lockfile = output / LOCKFILE
        if not lockfile.is_file():
            raise FileNotFoundError(f"No lockfile at {lockfile}; nothing to stash")

        destdir = self.stash_dir_for(name, code)
        logger.debug("Creating %s", destdir)
        destdir.mkdir(parents=True, exist_ok=True)

        tarball = destdir / f"{name}.tar.gz"
        partial = tarball.with_name(tarball.name + ".partial")
        try:
            create_archive(output, partial)
        except Exception:
            partial.unlink(missing_ok=True)
            raise
        shutil.copyfile(lockfile, destdir / LOCKFILE)
        os.replace(partial, tarball)
        return tarball
