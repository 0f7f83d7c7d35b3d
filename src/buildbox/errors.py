"""Exception hierarchy for buildbox.

Every fatal failure raised by the sandbox launcher or the artifact cache is
a :class:`BuildboxError`.  Each carries the ``exit_code`` the process
boundary should terminate with.  Filesystem failures are not wrapped and
surface as the native :class:`OSError`.

This module must NOT import from any other ``buildbox`` submodule.
"""

from __future__ import annotations


class BuildboxError(Exception):
    """Base exception for all buildbox errors."""

    exit_code: int = 1


class EnvironmentResolutionError(BuildboxError):
    """The host home directory could not be resolved."""


class PermissionMismatch(BuildboxError):
    """Host uid/gid differ from the sandbox account."""


class SubprocessFailure(BuildboxError):
    """The container runtime exited non-zero or was killed by a signal."""

    def __init__(self, code: int) -> None:
        super().__init__(f"Subprocess exited with code {code}")
        self.code = code
        self.exit_code = code


class MissingTarball(BuildboxError):
    """A download reported success but left no tarball behind."""


class MissingStashArtifact(BuildboxError):
    """Nothing is stashed under the requested name and code."""

    def __init__(self, name: str, code: str) -> None:
        super().__init__(f"No stashed artifact for {name}/{code}")
        self.name = name
        self.code = code


class TransportError(BuildboxError):
    """Resolution or download failure reported by a storage backend."""


class ExtractionError(BuildboxError):
    """Decompressing or unpacking an archive failed."""
