"""Tests for the command-line entry point."""

from __future__ import annotations

import json
import subprocess

import pytest
from click.testing import CliRunner

from buildbox import cli as cli_module
from buildbox.sandbox import launcher as launcher_module


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"image": "img:1"}))
    monkeypatch.setenv("BUILDBOX_CONFIG_PATH", str(path))
    monkeypatch.setenv("BUILDBOX_RUNTIME", "docker")
    return path


class TestCli:
    def test_run_print(self, config_file):
        result = CliRunner().invoke(cli_module.cli, ["run", "--print", "echo", "hi"])
        assert result.exit_code == 0, result.output
        line = result.output.strip().splitlines()[-1]
        assert line.startswith("docker run --rm -v ")
        assert line.endswith("--user buildbox -t img:1 echo hi")

    def test_shell_print_with_command(self, config_file):
        result = CliRunner().invoke(cli_module.cli, ["shell", "--print", "-c", "make all"])
        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith("-it img:1 /bin/bash -c 'make all'")

    def test_run_passes_option_like_tokens(self, config_file):
        result = CliRunner().invoke(cli_module.cli, ["run", "--print", "ls", "-la"])
        assert result.exit_code == 0, result.output
        assert result.output.strip().endswith("img:1 ls -la")


class TestMain:
    def test_subprocess_failure_mirrors_exit_code(self, config_file, monkeypatch):
        monkeypatch.setattr(
            launcher_module.subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 3),
        )
        monkeypatch.setattr(
            launcher_module.PermissionGuard, "check", lambda self: None
        )
        assert cli_module.main(["run", "false"]) == 3

    def test_success_returns_zero(self, config_file, monkeypatch):
        monkeypatch.setattr(
            launcher_module.subprocess,
            "run",
            lambda args, **kwargs: subprocess.CompletedProcess(args, 0),
        )
        monkeypatch.setattr(
            launcher_module.PermissionGuard, "check", lambda self: None
        )
        assert cli_module.main(["run", "true"]) == 0

    def test_usage_error(self, config_file):
        assert cli_module.main(["run"]) == 2

    def test_missing_config_file(self, tmp_path, monkeypatch, caplog):
        monkeypatch.setenv("BUILDBOX_CONFIG_PATH", str(tmp_path / "absent.json"))
        assert cli_module.main(["shell", "--print"]) == 1
        assert "absent.json" in caplog.text

    def test_invalid_config_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"mounts": []}))
        monkeypatch.setenv("BUILDBOX_CONFIG_PATH", str(path))
        assert cli_module.main(["shell", "--print"]) == 1

    def test_options_after_command_reach_the_container(self, config_file, monkeypatch):
        calls = []

        def fake_run(args, **kwargs):
            calls.append(list(args))
            return subprocess.CompletedProcess(args, 0)

        monkeypatch.setattr(launcher_module.subprocess, "run", fake_run)
        monkeypatch.setattr(
            launcher_module.PermissionGuard, "check", lambda self: None
        )

        assert cli_module.main(["run", "grep", "--print", "x"]) == 0

        assert len(calls) == 1
        assert calls[0][-3:] == ["grep", "--print", "x"]
