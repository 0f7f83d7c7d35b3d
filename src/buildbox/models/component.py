"""Component, Mount, and SandboxConfig models."""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class Component(BaseModel):
    """A concrete, versioned artifact resolved by a storage backend."""

    name: str = Field(
        min_length=1,
        description="Component name as published upstream.",
    )
    version: int = Field(
        ge=0,
        description="Monotonically increasing version number for this name.",
    )
    location: str = Field(
        description="Backend-specific download location (URL or path).",
    )
    environment: str | None = Field(
        default=None,
        description="Environment tag the component was built for, if any.",
    )


class Mount(BaseModel):
    """A bind mount from a host path into the sandbox container."""

    src: str
    dest: str
    readonly: bool = False

    def flag(self) -> str:
        """Render the ``host:container[:ro]`` volume specification."""
        volume = f"{self.src}:{self.dest}"
        return f"{volume}:ro" if self.readonly else volume


class SandboxConfig(BaseModel):
    """Container settings shared by every sandboxed build and shell."""

    image: str = Field(
        validation_alias=AliasChoices("image", "container"),
        description="Container image reference (name:tag) to run.",
    )
    mounts: list[Mount] = Field(
        default_factory=list,
        description="Extra bind mounts added before the implicit ones.",
    )
