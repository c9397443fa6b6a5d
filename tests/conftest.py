"""Shared pytest fixtures for gsbuild test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import logging
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

import gsbuild.config.loader as _cfg_loader
from gsbuild.provision.osinfo import OsRelease
from gsbuild.provision.settings import BuildSettings

# pylint: disable=redefined-outer-name

UBUNTU_OS_RELEASE = """\
PRETTY_NAME="Ubuntu 22.04.4 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
ID=ubuntu
ID_LIKE=debian
"""

DEBIAN_10_OS_RELEASE = """\
PRETTY_NAME="Debian GNU/Linux 10 (buster)"
VERSION_ID="10"
ID=debian
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep user and project config files out of every test."""
    home = tmp_path_factory.mktemp("xdg")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    monkeypatch.delenv(_cfg_loader.CONFIG_ENV_VAR, raising=False)
    _cfg_loader.reset_config()
    yield
    _cfg_loader.reset_config()


@pytest.fixture(autouse=True)
def clean_gsbuild_logger() -> Iterator[None]:
    """Drop handlers installed by init_logging between tests."""
    yield
    std_logger = logging.getLogger("gsbuild")
    for handler in list(std_logger.handlers):
        std_logger.removeHandler(handler)
    std_logger.propagate = True
    std_logger.setLevel(logging.NOTSET)


@pytest.fixture
def cfg_loader() -> object:
    """Expose the config.loader module for testing private helpers."""
    return _cfg_loader


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``content`` to ``tmp_path / name`` and return the path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def ubuntu_os_release(write_file: Callable[[str, str], Path]) -> Path:
    """An Ubuntu 22.04 os-release file."""
    return write_file("os-release", UBUNTU_OS_RELEASE)


@pytest.fixture
def debian10_os_release(write_file: Callable[[str, str], Path]) -> Path:
    """A Debian 10 os-release file (needs backports)."""
    return write_file("os-release-debian", DEBIAN_10_OS_RELEASE)


@pytest.fixture
def ubuntu() -> OsRelease:
    """Ubuntu 22.04 identity."""
    return OsRelease("ubuntu", "22.04", "Ubuntu 22.04.4 LTS")


@pytest.fixture
def settings(tmp_path: Path) -> BuildSettings:
    """Build settings rooted in the test's temporary directory."""
    return BuildSettings(build_dir=tmp_path / "GNUstep-build", jobs=4)


@pytest.fixture(scope="session")
def bash() -> str:
    """Path to bash, skipping when unavailable."""
    path = shutil.which("bash")
    if path is None:
        pytest.skip("bash is required")
    return path
