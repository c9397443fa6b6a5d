"""Show the detected OS and the dependency set it selects."""

from __future__ import annotations

from pathlib import Path

from rich.panel import Panel
from rich.table import Table

from gsbuild.provision import read_os_release, select_dependencies
from gsbuild.provision.exceptions import UnsupportedOperatingSystemError
from gsbuild.provision.osinfo import OS_RELEASE_PATH

from ..common import APPS_OPTION, CONFIG_OPTION, OS_RELEASE_OPTION, console, exit_error
from .common import load_settings


def detect(
    config_file: Path | None = CONFIG_OPTION,
    os_release: Path | None = OS_RELEASE_OPTION,
    build_apps: bool | None = APPS_OPTION,
) -> None:
    """Detect the host OS and list the packages that would be installed."""
    config = load_settings(config_file)
    if build_apps is None:
        build_apps = bool(config.pipeline.build_apps)
    try:
        release = read_os_release(os_release or config.get("os_release") or OS_RELEASE_PATH)
        deps = select_dependencies(release, build_apps=build_apps)
    except UnsupportedOperatingSystemError as exc:
        exit_error(str(exc))

    table = Table(show_header=False, box=None)
    table.add_column("Field", style="dim")
    table.add_column("Value")
    table.add_row("OS", release.pretty_name or str(release))
    table.add_row("ID", release.id)
    table.add_row("Version", release.version_id or "[dim]unknown[/]")
    if deps.backports:
        table.add_row("Backports", deps.backports)
    table.add_row("Packages", " ".join(deps.packages))
    console.print(Panel(table, title="Supported OS", style="green"))


__all__ = [
    "detect",
]
