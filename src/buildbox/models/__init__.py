"""Core data models for buildbox."""

from buildbox.models.component import Component, Mount, SandboxConfig

__all__ = [
    "Component",
    "Mount",
    "SandboxConfig",
]
