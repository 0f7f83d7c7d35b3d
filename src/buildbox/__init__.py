"""buildbox: sandboxed builds and a versioned local artifact cache."""

from buildbox.errors import (
    BuildboxError,
    EnvironmentResolutionError,
    ExtractionError,
    MissingStashArtifact,
    MissingTarball,
    PermissionMismatch,
    SubprocessFailure,
    TransportError,
)
from buildbox.models import Component, Mount, SandboxConfig
from buildbox.sandbox import PermissionGuard, SandboxLauncher
from buildbox.storage import ArtifactCache, StorageBackend

__all__ = [
    "ArtifactCache",
    "BuildboxError",
    "Component",
    "EnvironmentResolutionError",
    "ExtractionError",
    "MissingStashArtifact",
    "MissingTarball",
    "Mount",
    "PermissionGuard",
    "PermissionMismatch",
    "SandboxConfig",
    "SandboxLauncher",
    "StorageBackend",
    "SubprocessFailure",
    "TransportError",
]
