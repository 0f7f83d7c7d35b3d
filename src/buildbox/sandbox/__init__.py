"""Sandbox subsystem: container runtime invocation as a fixed account."""

from buildbox.sandbox.launcher import SandboxLauncher, UNKNOWN_EXIT_CODE
from buildbox.sandbox.permissions import PermissionGuard

__all__ = [
    "PermissionGuard",
    "SandboxLauncher",
    "UNKNOWN_EXIT_CODE",
]
