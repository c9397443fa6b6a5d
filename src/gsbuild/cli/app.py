"""Typer application entry point for the ``gsbuild`` command."""

from __future__ import annotations

import typer

from gsbuild import meta

from .commands import detect, plan, run
from .common import console

app = typer.Typer(
    name=meta.__app_name__,
    help=f"{meta.__app_name__}: {meta.__description__}",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{meta.__app_name__} {meta.__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Build and install GNUstep from source."""


app.command("run")(run)
app.command("plan")(plan)
app.command("detect")(detect)


def main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    main()
