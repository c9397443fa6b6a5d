"""Tests for __main__ entry point.

These tests verify that the CLI can be invoked through python -m gsbuild.
"""

import os
import runpy
import subprocess
import sys
from subprocess import CompletedProcess

import pytest

# pylint: disable=import-outside-toplevel


def test_main_module_invocation() -> None:
    """`python -m gsbuild --help` runs without errors."""
    env = os.environ.copy()
    env["PYTHONIOENCODING"] = "utf-8"

    result: CompletedProcess[bytes] = subprocess.run(
        [sys.executable, "-m", "gsbuild", "--help"],
        capture_output=True,
        timeout=30,
        check=False,
        env=env,
    )
    stdout = result.stdout.decode("utf-8", errors="replace") if result.stdout else ""
    stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""

    assert result.returncode == 0, f"CLI failed: stdout={stdout!r}, stderr={stderr!r}"
    assert "gsbuild" in (stdout + stderr).lower()


def test_package_exports_version() -> None:
    """The package exposes its name and version."""
    import gsbuild
    from gsbuild import meta

    assert gsbuild.__version__ == meta.__version__
    assert gsbuild.__app_name__ == "gsbuild"


def test_main_module_guard_executes(monkeypatch: pytest.MonkeyPatch) -> None:
    """The __main__ guard invokes the CLI when run as a module."""
    calls: list[tuple[tuple[object, ...], dict[str, object]]] = []

    def fake_call(_self: object, *args: object, **kwargs: object) -> None:
        calls.append((args, kwargs))

    monkeypatch.setattr("typer.main.Typer.__call__", fake_call)
    monkeypatch.delitem(sys.modules, "gsbuild.__main__", raising=False)
    runpy.run_module("gsbuild.__main__", run_name="__main__")

    assert calls == [((), {})]
