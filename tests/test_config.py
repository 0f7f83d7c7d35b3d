"""Tests for settings, models and sandbox configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from buildbox.config import Settings, load_sandbox_config
from buildbox.models import Component, Mount, SandboxConfig


class TestSettings:
    def test_defaults(self, monkeypatch):
        for var in ("BUILDBOX_RUNTIME", "BUILDBOX_LOG_LEVEL", "BUILDBOX_CONFIG_PATH"):
            monkeypatch.delenv(var, raising=False)
        settings = Settings()
        assert settings.runtime == "docker"
        assert settings.log_level == "INFO"
        assert settings.config_path == Path("~/.buildbox/config.json")

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("BUILDBOX_RUNTIME", "podman")
        monkeypatch.setenv("BUILDBOX_CONFIG_PATH", "/etc/buildbox.json")
        settings = Settings()
        assert settings.runtime == "podman"
        assert settings.config_path == Path("/etc/buildbox.json")


class TestLoadSandboxConfig:
    def test_loads_mounts(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "image": "builder:2",
            "mounts": [{"src": "/opt/tools", "dest": "/tools", "readonly": True}],
        }))
        config = load_sandbox_config(path)
        assert config.image == "builder:2"
        assert config.mounts == [Mount(src="/opt/tools", dest="/tools", readonly=True)]

    def test_legacy_container_key(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"container": "builder:1"}))
        config = load_sandbox_config(path)
        assert config.image == "builder:1"
        assert config.mounts == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_sandbox_config(tmp_path / "absent.json")

    def test_missing_image_is_invalid(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{}")
        with pytest.raises(ValidationError):
            load_sandbox_config(path)


class TestModels:
    def test_mount_flag(self):
        assert Mount(src="/a", dest="/b").flag() == "/a:/b"
        assert Mount(src="/a", dest="/b", readonly=True).flag() == "/a:/b:ro"

    def test_component_version_unsigned(self):
        with pytest.raises(ValidationError):
            Component(name="zlib", version=-1, location="x")

    def test_sandbox_config_by_field_name(self):
        assert SandboxConfig(image="img:1").image == "img:1"
