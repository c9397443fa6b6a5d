"""Plan loading shared by the CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from box import Box

from gsbuild.config import ConfigError, load_config
from gsbuild.pipeline import PipelineConfig, PipelineConfigError, StepConfig, parse_pipeline_config
from gsbuild.provision import BuildSettings, OsRelease, build_plan, read_os_release
from gsbuild.provision.exceptions import UnsupportedOperatingSystemError
from gsbuild.provision.osinfo import OS_RELEASE_PATH

from ..common import exit_error


@dataclass(frozen=True)
class LoadedPlan:
    """Everything a command needs to show or run the pipeline."""

    config: Box
    release: OsRelease
    settings: BuildSettings
    pipeline: PipelineConfig
    steps: tuple[StepConfig, ...]


def load_settings(config_file: Path | None) -> Box:
    """Load the configuration cascade, exiting on errors."""
    try:
        return load_config(config_file)
    except ConfigError as exc:
        exit_error(str(exc))


def load_plan(
    config: Box,
    *,
    os_release: Path | None = None,
    build_apps: bool | None = None,
    build_dir: Path | None = None,
    **pipeline_overrides: Any,
) -> LoadedPlan:
    """Detect the OS and build the step list, exiting on errors.

    Unsupported systems are rejected here, before any step can run.
    """
    try:
        settings = BuildSettings.from_config(config, build_apps=build_apps, build_dir=build_dir)
        release = read_os_release(os_release or config.get("os_release") or OS_RELEASE_PATH)
        steps = build_plan(release, settings)

        section = dict(config.get("pipeline") or {})
        section.update({k: v for k, v in pipeline_overrides.items() if v is not None})
        section["build_dir"] = settings.build_dir
        section["build_apps"] = settings.build_apps
        pipeline = parse_pipeline_config(section)
    except UnsupportedOperatingSystemError as exc:
        exit_error(str(exc))
    except (ConfigError, PipelineConfigError) as exc:
        exit_error(f"Invalid configuration: {exc}")

    return LoadedPlan(config=config, release=release, settings=settings, pipeline=pipeline, steps=steps)


__all__ = [
    "LoadedPlan",
    "load_plan",
    "load_settings",
]
