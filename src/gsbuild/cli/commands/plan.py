"""Show the step list without running it."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from rich.table import Table

from gsbuild.pipeline import StepConfig, StepType, select_steps

from ..common import APPS_OPTION, BUILD_DIR_OPTION, CONFIG_OPTION, OS_RELEASE_OPTION, console
from .common import load_plan, load_settings


def _step_detail(step: StepConfig) -> str:
    if step.type == StepType.SHELL:
        return "\n".join(step.commands)
    if step.type == StepType.ENV:
        return "\n".join(f"{key}={value}" for key, value in step.env.items())
    if step.type == StepType.SOURCE:
        return f". {step.script}" + ("" if step.required else " (if present)")
    return f"{step.callable}{step.args}"


def _step_dict(step: StepConfig) -> dict[str, Any]:
    return {
        "name": step.name,
        "type": step.type.value,
        "phase": step.phase.value,
        "working_dir": step.working_dir,
        "interactive": step.interactive,
        "optional": step.optional,
        "commands": list(step.commands),
        "env": dict(step.env),
        "script": step.script,
        "callable": step.callable,
        "args": list(step.args),
    }


def plan(
    config_file: Path | None = CONFIG_OPTION,
    os_release: Path | None = OS_RELEASE_OPTION,
    build_apps: bool | None = APPS_OPTION,
    build_dir: Path | None = BUILD_DIR_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show every command."),
    as_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON for automation."),
) -> None:
    """List the steps a run would execute, in order."""
    loaded = load_plan(
        load_settings(config_file),
        os_release=os_release,
        build_apps=build_apps,
        build_dir=build_dir,
    )
    steps = select_steps(loaded.steps, build_apps=loaded.pipeline.build_apps)

    if as_json:
        payload = {
            "os": {"id": loaded.release.id, "version_id": loaded.release.version_id},
            "build_dir": str(loaded.pipeline.build_dir),
            "build_apps": loaded.pipeline.build_apps,
            "steps": [_step_dict(step) for step in steps],
        }
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
        return

    table = Table(title=f"Plan for {loaded.release} in {loaded.pipeline.build_dir}", show_lines=verbose)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Step", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Directory")
    table.add_column("Pause", justify="center")
    if verbose:
        table.add_column("Commands", overflow="fold")

    for index, step in enumerate(steps, start=1):
        row = [
            str(index),
            step.name,
            step.type.value,
            step.working_dir or "-",
            "yes" if step.interactive else "-",
        ]
        if verbose:
            row.append(_step_detail(step))
        table.add_row(*row)
    console.print(table)


__all__ = [
    "plan",
]
