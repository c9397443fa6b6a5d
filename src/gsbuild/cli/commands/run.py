"""Run the provisioning pipeline."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from gsbuild.logging import init_logging
from gsbuild.pipeline import (
    PipelineCancelledError,
    PipelineError,
    PipelineResult,
    PipelineRunner,
    StepFailedError,
    StepStatus,
)

from ..common import (
    APPS_OPTION,
    BUILD_DIR_OPTION,
    CONFIG_OPTION,
    OS_RELEASE_OPTION,
    console,
    err_console,
    exit_error,
)
from .common import load_plan, load_settings

#: Exit code after the operator cancels at a checkpoint.
CANCELLED_EXIT_CODE = 130

_STATUS_STYLE = {
    StepStatus.SUCCESS: "green",
    StepStatus.SKIPPED: "dim",
    StepStatus.FAILED: "red",
    StepStatus.TIMEOUT: "red",
}


def _render_summary(result: PipelineResult) -> None:
    """Print one row per recorded step."""
    table = Table(title=f"Pipeline '{result.name}' ({result.state.value})", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Duration", justify="right")

    for index, step in enumerate(result.results, start=1):
        style = _STATUS_STYLE.get(step.status, "white")
        table.add_row(str(index), step.name, f"[{style}]{step.status.value}[/]", f"{step.duration:.1f}s")
    console.print(table)


def _render_failure(exc: StepFailedError) -> None:
    """Name the failing command and show the tail of its stderr if captured."""
    err_console.print(f"[bold red]Step '{exc.step_name}' failed[/] (exit code {exc.exit_code})")
    err_console.print(f"  command: [yellow]{exc.command}[/]")
    if exc.result and exc.result.results and exc.result.results[-1].stderr:
        tail = exc.result.results[-1].stderr.strip().splitlines()[-20:]
        err_console.print("\n".join(f"  | {line}" for line in tail), markup=False, highlight=False)


def run(
    config_file: Path | None = CONFIG_OPTION,
    os_release: Path | None = OS_RELEASE_OPTION,
    build_apps: bool | None = APPS_OPTION,
    build_dir: Path | None = BUILD_DIR_OPTION,
    prompt: bool | None = typer.Option(
        None,
        "--prompt/--no-prompt",
        help="Pause for confirmation after each major step.",
    ),
    stream: bool | None = typer.Option(
        None,
        "--stream/--capture",
        help="Stream command output to the terminal, or capture it into the results.",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Show what would run without executing anything.",
    ),
    log_preset: str | None = typer.Option(
        None,
        "--log-preset",
        help="Logging preset: dev, prod or debug.",
    ),
) -> None:
    """Install dependencies, then clone, build and install GNUstep.

    Stops at the first failing command and exits with its status.
    Re-running starts again from the first step.
    """
    config = load_settings(config_file)
    try:
        log = init_logging(preset=log_preset or config.logger.get("preset") or None)
    except ValueError as exc:
        exit_error(str(exc))

    plan = load_plan(
        config,
        os_release=os_release,
        build_apps=build_apps,
        build_dir=build_dir,
        prompt_after_steps=prompt,
        capture_output=None if stream is None else not stream,
    )
    log.trace(
        "Run settings",
        os=plan.release.id,
        build_dir=plan.pipeline.build_dir,
        build_apps=plan.pipeline.build_apps,
        prompt=plan.pipeline.prompt_after_steps,
    )
    runner = PipelineRunner(plan.steps, plan.pipeline)

    try:
        result = runner.run(dry_run=dry_run)
    except StepFailedError as exc:
        if exc.result:
            _render_summary(exc.result)
        _render_failure(exc)
        raise typer.Exit(code=exc.exit_code) from None
    except PipelineCancelledError as exc:
        if exc.result:
            _render_summary(exc.result)
        err_console.print(f"[yellow]Cancelled after step '{exc.step_name}'.[/]")
        raise typer.Exit(code=CANCELLED_EXIT_CODE) from None
    except PipelineError as exc:
        if exc.result:
            _render_summary(exc.result)
        exit_error(str(exc))

    _render_summary(result)
    if dry_run:
        console.print("[dim]Dry run: nothing was executed.[/]")
        return
    log.success("GNUstep installed", prefix=plan.settings.prefix, duration=f"{result.duration:.1f}s")
    console.print("[bold green]GNUstep build and installation complete.[/]")
    console.print(f"Open a new terminal or source {plan.settings.shell_rc} to use the new environment.")


__all__ = [
    "CANCELLED_EXIT_CODE",
    "run",
]
