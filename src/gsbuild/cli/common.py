"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer
from rich.console import Console

console = Console()
err_console = Console(stderr=True)


def exit_error(message: str, code: int = 1) -> NoReturn:
    """Print an error and exit with ``code``."""
    err_console.print(f"[bold red]Error:[/] {message}")
    raise typer.Exit(code=code)


CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file applied on top of the defaults.",
)

OS_RELEASE_OPTION = typer.Option(
    None,
    "--os-release",
    help="os-release file used for OS detection (default: /etc/os-release).",
)

APPS_OPTION = typer.Option(
    None,
    "--apps/--no-apps",
    help="Also build the optional GNUstep applications.",
)

BUILD_DIR_OPTION = typer.Option(
    None,
    "--build-dir",
    "-d",
    help="Directory sources are cloned and built in.",
)


__all__ = [
    "APPS_OPTION",
    "BUILD_DIR_OPTION",
    "CONFIG_OPTION",
    "OS_RELEASE_OPTION",
    "console",
    "err_console",
    "exit_error",
]
