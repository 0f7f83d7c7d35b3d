"""Streaming gzip/tar helpers for component tarballs and stashes."""

from __future__ import annotations

import logging
import shutil
import tarfile
import zlib
from pathlib import Path

from buildbox.errors import ExtractionError

logger = logging.getLogger(__name__)


def extract_archive(archive: Path, target: Path) -> None:
    """Replace *target* with the contents of the gzip tarball *archive*.

    The archive is opened first, then any existing *target* is removed.
    It is decompressed and unpacked as a single stream, straight into
    *target*; there is no staging copy, so a failure can leave *target*
    partially populated.  Link targets are kept as stored, including
    absolute ones; members whose own path lands outside *target* are
    rejected.

    Raises
    ------
    ExtractionError
        On a missing or unreadable archive, corrupt compression, corrupt
        tar members, or a filesystem error while writing.
    """
    logger.debug("Unpacking %s into %s", archive, target)
    try:
        with tarfile.open(archive, mode="r|gz") as tar:
            if target.exists():
                shutil.rmtree(target)
            target.mkdir(parents=True)
            tar.extractall(target, filter="tar")
    except (OSError, EOFError, tarfile.TarError, zlib.error) as exc:
        raise ExtractionError(f"Failed to extract {archive}: {exc}") from exc


def create_archive(source: Path, destination: Path) -> None:
    """Write a gzip tarball of the contents of *source* to *destination*.

    Entries are stored relative to *source*, in sorted order.
    """
    logger.debug("Archiving %s into %s", source, destination)
    entries = sorted(source.iterdir())
    with tarfile.open(destination, mode="w:gz") as tar:
        for entry in entries:
            tar.add(entry, arcname=entry.name)
