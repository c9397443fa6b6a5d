"""Tests for the gsbuild command-line interface."""

from __future__ import annotations

import importlib
import json
import logging
import runpy
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

from gsbuild import meta
from gsbuild.cli.app import app
from gsbuild.pipeline import (
    PipelineCancelledError,
    PipelineResult,
    PipelineRunner,
    PipelineState,
    StepFailedError,
)

# The package re-exports the ``run`` command function, which shadows the submodule.
run_module = importlib.import_module("gsbuild.cli.commands.run")

# Mark all tests in this module as CLI tests
# Run with: pytest -m cli
pytestmark = pytest.mark.cli

runner = CliRunner()


@pytest.fixture
def base_args(ubuntu_os_release: Path, tmp_path: Path) -> list[str]:
    """Options pointing detection and builds at the temporary directory."""
    return ["--os-release", str(ubuntu_os_release), "--build-dir", str(tmp_path / "build")]


def _raise_from_run(monkeypatch: pytest.MonkeyPatch, exc: Exception) -> None:
    """Make PipelineRunner.run fail with ``exc`` carrying a partial result."""

    def fake_run(self: PipelineRunner, *, dry_run: bool = False) -> PipelineResult:
        exc.result = PipelineResult(name=self.config.name, state=PipelineState.FAILED)  # type: ignore[attr-defined]
        raise exc

    monkeypatch.setattr(run_module.PipelineRunner, "run", fake_run)


# ============================================================================
# Application
# ============================================================================


def test_app_help() -> None:
    """--help lists the commands."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("run", "plan", "detect"):
        assert command in result.stdout


def test_app_version() -> None:
    """--version prints the version."""
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert meta.__version__ in result.stdout


def test_app_no_args() -> None:
    """Running without a command shows usage."""
    result = runner.invoke(app, [])
    assert result.exit_code in (0, 2)


def test_app_invalid_command() -> None:
    """An unknown command is an error."""
    result = runner.invoke(app, ["invalid-command"])
    assert result.exit_code != 0


def test_cli_module_guard_executes(monkeypatch: pytest.MonkeyPatch) -> None:
    """The CLI module guard invokes the Typer app when executed directly."""
    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def fake_call(_self: object, *args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr("typer.main.Typer.__call__", fake_call)
    monkeypatch.delitem(sys.modules, "gsbuild.cli.app", raising=False)
    runpy.run_module("gsbuild.cli.app", run_name="__main__")

    assert calls == [((), {})]


# ============================================================================
# detect
# ============================================================================


class TestDetect:
    """Tests for the detect command."""

    def test_ubuntu(self, ubuntu_os_release: Path) -> None:
        """The OS and its packages are shown."""
        result = runner.invoke(app, ["detect", "--os-release", str(ubuntu_os_release)])
        assert result.exit_code == 0
        assert "Ubuntu 22.04.4 LTS" in result.stdout
        assert "libgnutls28-dev" in result.stdout
        assert "curl" not in result.stdout

    def test_apps_add_curl(self, ubuntu_os_release: Path) -> None:
        """--apps adds the application dependencies."""
        result = runner.invoke(app, ["detect", "--os-release", str(ubuntu_os_release), "--apps"])
        assert result.exit_code == 0
        assert "curl" in result.stdout

    def test_debian_backports(self, debian10_os_release: Path) -> None:
        """Debian 10 shows the backports source."""
        result = runner.invoke(app, ["detect", "--os-release", str(debian10_os_release)])
        assert result.exit_code == 0
        assert "buster-backports" in result.stdout

    def test_unsupported(self, write_file: Callable[[str, str], Path]) -> None:
        """Unsupported systems exit 1 with a message."""
        path = write_file("os-release", "ID=fedora\nVERSION_ID=40\n")
        result = runner.invoke(app, ["detect", "--os-release", str(path)])
        assert result.exit_code == 1
        assert "Unsupported OS: fedora" in result.output


# ============================================================================
# plan
# ============================================================================


class TestPlan:
    """Tests for the plan command."""

    def test_table(self, base_args: list[str]) -> None:
        """The core steps are listed in order."""
        result = runner.invoke(app, ["plan", *base_args])
        assert result.exit_code == 0
        assert result.stdout.index("install-dependencies") < result.stdout.index("build-libs-back")
        assert "build-app-gorm" not in result.stdout

    def test_apps(self, base_args: list[str]) -> None:
        """--apps includes the application steps."""
        result = runner.invoke(app, ["plan", *base_args, "--apps"])
        assert result.exit_code == 0
        assert "build-app-gorm" in result.stdout

    def test_json(self, base_args: list[str], tmp_path: Path) -> None:
        """--json emits a machine-readable plan."""
        result = runner.invoke(app, ["plan", *base_args, "--json"])
        assert result.exit_code == 0
        payload: dict[str, Any] = json.loads(result.stdout)
        assert payload["os"] == {"id": "ubuntu", "version_id": "22.04"}
        assert payload["build_dir"] == str(tmp_path / "build")
        assert payload["steps"][0]["name"] == "install-dependencies"
        assert payload["steps"][0]["phase"] == "dependencies"
        assert len(payload["steps"]) == 16

    def test_config_file(self, base_args: list[str], write_file: Callable[[str, str], Path]) -> None:
        """Settings come from --config."""
        config = write_file("custom.yml", "privilege:\n  sudo: ''\n  install: ''\n")
        result = runner.invoke(app, ["plan", *base_args, "--json", "--config", str(config)])
        assert result.exit_code == 0
        commands = [c for step in json.loads(result.stdout)["steps"] for c in step["commands"]]
        assert "apt-get update" in commands
        assert not any("sudo" in c for c in commands)

    def test_apps_disabled_as_string(self, base_args: list[str], write_file: Callable[[str, str], Path]) -> None:
        """build_apps: "no" leaves out the application steps and curl."""
        config = write_file("apps-off.yml", 'pipeline:\n  build_apps: "no"\n')
        result = runner.invoke(app, ["plan", *base_args, "--json", "--config", str(config)])
        assert result.exit_code == 0
        payload: dict[str, Any] = json.loads(result.stdout)
        assert payload["build_apps"] is False
        assert "checkout-apps" not in [step["name"] for step in payload["steps"]]
        assert not payload["steps"][0]["commands"][-1].endswith(" curl")

    def test_missing_config_file(self, base_args: list[str], tmp_path: Path) -> None:
        """A missing --config file exits 1."""
        result = runner.invoke(app, ["plan", *base_args, "--config", str(tmp_path / "absent.yml")])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    def test_invalid_config_value(self, base_args: list[str], write_file: Callable[[str, str], Path]) -> None:
        """Invalid settings exit 1 before anything runs."""
        config = write_file("bad.yml", "build:\n  jobs: lots\n")
        result = runner.invoke(app, ["plan", *base_args, "--config", str(config)])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output


# ============================================================================
# run
# ============================================================================


class TestRun:
    """Tests for the run command."""

    def test_dry_run(self, base_args: list[str], tmp_path: Path) -> None:
        """A dry run lists every step as skipped and creates nothing."""
        result = runner.invoke(app, ["run", *base_args, "--dry-run", "--no-prompt"])
        assert result.exit_code == 0, result.output
        assert "build-libs-back" in result.stdout
        assert "skipped" in result.stdout
        assert "Dry run" in result.stdout
        assert not (tmp_path / "build").exists()

    def test_unsupported_os_runs_nothing(self, write_file: Callable[[str, str], Path], tmp_path: Path) -> None:
        """Unsupported systems are rejected before the first step."""
        path = write_file("os-release", "ID=arch\n")
        result = runner.invoke(app, ["run", "--os-release", str(path), "--build-dir", str(tmp_path / "b")])
        assert result.exit_code == 1
        assert "Unsupported OS: arch" in result.output

    def test_step_failure_exit_code(self, base_args: list[str], monkeypatch: pytest.MonkeyPatch) -> None:
        """The failing command's exit status becomes the process status."""
        _raise_from_run(monkeypatch, StepFailedError("build-libs-base", "make -j4", 2))
        result = runner.invoke(app, ["run", *base_args])
        assert result.exit_code == 2
        assert "build-libs-base" in result.output
        assert "make -j4" in result.output

    def test_cancel_exit_code(self, base_args: list[str], monkeypatch: pytest.MonkeyPatch) -> None:
        """Declining a checkpoint exits 130."""
        _raise_from_run(monkeypatch, PipelineCancelledError("checkout-sources"))
        result = runner.invoke(app, ["run", *base_args])
        assert result.exit_code == run_module.CANCELLED_EXIT_CODE == 130
        assert "Cancelled after step 'checkout-sources'" in result.output

    def test_success_message(self, base_args: list[str], monkeypatch: pytest.MonkeyPatch) -> None:
        """A completed run tells the user how to load the environment."""

        def fake_run(self: PipelineRunner, *, dry_run: bool = False) -> PipelineResult:
            return PipelineResult(name=self.config.name, state=PipelineState.COMPLETED)

        monkeypatch.setattr(run_module.PipelineRunner, "run", fake_run)
        result = runner.invoke(app, ["run", *base_args])
        assert result.exit_code == 0
        assert "~/.bashrc" in result.stdout

    def test_success_logged(
        self,
        base_args: list[str],
        write_file: Callable[[str, str], Path],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A completed run logs its settings at TRACE and the result at SUCCESS."""
        log_file = tmp_path / "logs" / "run.log"
        config = write_file(
            "logging.yml",
            f"logger:\n  defaults:\n    output: file\n    file:\n      path: {log_file}\n      level: TRACE\n",
        )

        def fake_run(self: PipelineRunner, *, dry_run: bool = False) -> PipelineResult:
            return PipelineResult(name=self.config.name, state=PipelineState.COMPLETED)

        monkeypatch.setattr(run_module.PipelineRunner, "run", fake_run)
        result = runner.invoke(app, ["run", *base_args, "--config", str(config)])
        assert result.exit_code == 0, result.output

        for handler in logging.getLogger("gsbuild").handlers:
            handler.flush()
        text = log_file.read_text()
        assert "TRACE" in text and "Run settings | os=ubuntu" in text
        assert "SUCCESS" in text and "GNUstep installed | prefix=/usr/GNUstep" in text

    def test_options_reach_pipeline(self, base_args: list[str], monkeypatch: pytest.MonkeyPatch) -> None:
        """--prompt, --apps and --capture are passed to the runner."""
        seen: dict[str, Any] = {}

        def fake_run(self: PipelineRunner, *, dry_run: bool = False) -> PipelineResult:
            seen["config"] = self.config
            seen["steps"] = [s.name for s in self.steps]
            return PipelineResult(name=self.config.name, state=PipelineState.COMPLETED)

        monkeypatch.setattr(run_module.PipelineRunner, "run", fake_run)
        result = runner.invoke(app, ["run", *base_args, "--prompt", "--apps", "--capture"])
        assert result.exit_code == 0
        assert seen["config"].prompt_after_steps is True
        assert seen["config"].build_apps is True
        assert seen["config"].capture_output is True
        assert "build-app-systempreferences" in seen["steps"]

    def test_bad_log_preset(self, base_args: list[str]) -> None:
        """An unknown logging preset exits 1."""
        result = runner.invoke(app, ["run", *base_args, "--dry-run", "--log-preset", "loud"])
        assert result.exit_code == 1
        assert "Unknown logging preset" in result.output
