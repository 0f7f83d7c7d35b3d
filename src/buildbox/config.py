"""Pydantic settings and sandbox configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings

from buildbox.models.component import SandboxConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Process-level configuration loaded from environment variables."""

    model_config = {"env_prefix": "BUILDBOX_"}

    config_path: Path = Path("~/.buildbox/config.json")
    runtime: str = "docker"
    log_level: str = "INFO"


def load_sandbox_config(path: Path) -> SandboxConfig:
    """Read and validate a JSON sandbox configuration file.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    pydantic.ValidationError
        If the file does not describe a valid :class:`SandboxConfig`.
    """
    logger.debug("Loading sandbox config from %s", path)
    raw = Path(path).expanduser().read_text(encoding="utf-8")
    return SandboxConfig.model_validate_json(raw)
