"""Pipeline runner for sequential step execution.

Provides the ``PipelineRunner`` class that executes an ordered list of
steps, stops at the first failure, threads an explicit environment map
from step to step, and optionally pauses for operator confirmation.
"""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from rich.prompt import Confirm

from gsbuild.pipeline.environment import apply_delta
from gsbuild.pipeline.exceptions import (
    DirectoryError,
    PackageInstallError,
    PipelineCancelledError,
    PipelineConfigError,
    PipelineError,
    StepExecutionError,
    StepFailedError,
    StepTimeoutError,
)
from gsbuild.pipeline.models import (
    PipelineConfig,
    PipelineResult,
    PipelineState,
    StepConfig,
    StepContext,
    StepPhase,
    StepResult,
    StepStatus,
    StepType,
)
from gsbuild.pipeline.steps.callable import CallableStep
from gsbuild.pipeline.steps.env import EnvStep
from gsbuild.pipeline.steps.shell import ShellStep
from gsbuild.pipeline.steps.source import SourceStep
from gsbuild.pipeline.validators import validate_bool, validate_pipeline_steps

if TYPE_CHECKING:
    from gsbuild.pipeline.base import AbstractStep

logger = logging.getLogger(__name__)

#: Asked after an interactive step; returning False cancels the run.
ConfirmCallback = Callable[[StepConfig], bool]

# Step type to executor mapping
_STEP_EXECUTORS: dict[StepType, AbstractStep] = {
    StepType.SHELL: ShellStep(),
    StepType.ENV: EnvStep(),
    StepType.SOURCE: SourceStep(),
    StepType.CALLABLE: CallableStep(),
}


def prompt_confirm(step: StepConfig) -> bool:
    """Ask the operator on the terminal whether to continue."""
    return Confirm.ask(f"Step [bold]{step.name}[/] done. Continue to the next step?", default=True)


class PipelineRunner:
    """Execute a pipeline of sequential steps.

    Steps run strictly in declaration order; a step starts only after every
    command of the previous one exited 0. Optional steps are dropped unless
    ``config.build_apps`` is set.

    Args:
        steps: Ordered step list.
        config: Run-wide settings.
        base_env: Initial environment map (defaults to a copy of ``os.environ``).
        confirm: Checkpoint callback (defaults to a terminal prompt).

    Examples:
        >>> from gsbuild.pipeline.models import PipelineConfig, StepConfig
        >>> runner = PipelineRunner(
        ...     [StepConfig(name="greet", commands=("echo hello",))],
        ...     PipelineConfig(build_dir="."),
        ... )
        >>> result = runner.run()  # doctest: +SKIP
        >>> result.state  # doctest: +SKIP
        <PipelineState.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        steps: Iterable[StepConfig],
        config: PipelineConfig | None = None,
        *,
        base_env: Mapping[str, str] | None = None,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        self._all_steps = tuple(steps)
        validate_pipeline_steps(len(self._all_steps))
        seen: set[str] = set()
        for step in self._all_steps:
            if step.name in seen:
                raise PipelineConfigError(f"Duplicate step name: {step.name!r}")
            seen.add(step.name)

        self._config = config or PipelineConfig()
        self._base_env = dict(os.environ if base_env is None else base_env)
        self._confirm = confirm or prompt_confirm
        self._state = PipelineState.IDLE

    @property
    def config(self) -> PipelineConfig:
        """Return the pipeline configuration."""
        return self._config

    @property
    def state(self) -> PipelineState:
        """Current state of the run."""
        return self._state

    @property
    def steps(self) -> tuple[StepConfig, ...]:
        """Steps that will run, after the ``build_apps`` filter."""
        return select_steps(self._all_steps, build_apps=self._config.build_apps)

    @classmethod
    def from_config(
        cls,
        steps: Iterable[StepConfig],
        *,
        confirm: ConfirmCallback | None = None,
        **overrides: Any,
    ) -> PipelineRunner:
        """Create a PipelineRunner with settings from ``gsbuild.conf.yml``.

        Reads the ``pipeline`` section of the global configuration; keyword
        overrides with a value other than None take precedence.

        Raises:
            PipelineConfigError: If the settings are invalid.
        """
        from gsbuild.config import get_config  # pylint: disable=import-outside-toplevel

        section: Mapping[str, Any] = get_config().get("pipeline", {}) or {}
        data = {**section, **{k: v for k, v in overrides.items() if v is not None}}
        return cls(steps, parse_pipeline_config(data), confirm=confirm)

    def run(self, *, dry_run: bool = False) -> PipelineResult:
        """Execute the pipeline.

        Args:
            dry_run: If True, log every step without side effects.

        Returns:
            PipelineResult in state COMPLETED.

        Raises:
            DirectoryError: A step's working directory is missing.
            StepFailedError: A command exited non-zero (``PackageInstallError``
                for the dependency phase, ``StepTimeoutError`` on timeout).
            MissingArtifactError: A required generated script is absent.
            StepImportError: A callable target cannot be imported.
            StepExecutionError: An executor raised an unexpected error.
            PipelineCancelledError: The operator declined at a checkpoint.
        """
        steps = self.steps
        env = dict(self._base_env)
        pipeline_result = PipelineResult(name=self._config.name, env=env)
        start = time.monotonic()

        logger.info(
            "Pipeline '%s' started (%d steps, build_apps=%s, prompt=%s%s)",
            self._config.name,
            len(steps),
            self._config.build_apps,
            self._config.prompt_after_steps,
            ", dry_run=True" if dry_run else "",
        )

        try:
            for index, step in enumerate(steps, start=1):
                self._state = PipelineState.RUNNING
                logger.info("[%d/%d] %s", index, len(steps), step.description or step.name)

                result = self._execute_step(step, env, pipeline_result, dry_run=dry_run)
                env = apply_delta(env, result.env_delta)
                pipeline_result.env = env

                logger.info("Step '%s' -> %s (%.3fs)", result.name, result.status.value, result.duration)

                if not result.ok:
                    raise _failure_error(step, result, self._effective_timeout(step))

                if self._config.prompt_after_steps and step.interactive and not dry_run:
                    self._checkpoint(step)
        except PipelineCancelledError as exc:
            self._finish(pipeline_result, PipelineState.CANCELLED, start)
            exc.result = pipeline_result
            raise
        except PipelineError as exc:
            self._finish(pipeline_result, PipelineState.FAILED, start)
            exc.result = pipeline_result
            logger.error("Pipeline '%s' stopped: %s", self._config.name, exc)
            raise

        self._finish(pipeline_result, PipelineState.COMPLETED, start)
        logger.info(
            "Pipeline '%s' completed in %.3fs (%d steps)",
            self._config.name,
            pipeline_result.duration,
            len(pipeline_result.results),
        )
        return pipeline_result

    def _execute_step(
        self,
        step: StepConfig,
        env: dict[str, str],
        pipeline_result: PipelineResult,
        *,
        dry_run: bool,
    ) -> StepResult:
        """Resolve the context, run the executor and record its result.

        Errors raised by the executor itself are recorded as a failed result
        before being propagated. Anything that is not a ``PipelineError`` is
        wrapped in ``StepExecutionError``.
        """
        try:
            cwd = self._resolve_working_dir(step, check=not dry_run)
            context = StepContext(
                env=env,
                cwd=cwd,
                capture_output=self._config.capture_output,
                shell=self._config.shell,
                timeout=self._effective_timeout(step),
            )
            result = _STEP_EXECUTORS[step.type].execute(step, context, dry_run=dry_run)
        except PipelineError as exc:
            pipeline_result.results.append(StepResult(name=step.name, status=StepStatus.FAILED, error=str(exc)))
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.exception("Step '%s' executor error", step.name)
            reason = f"{type(exc).__name__}: {exc}"
            pipeline_result.results.append(StepResult(name=step.name, status=StepStatus.FAILED, error=reason))
            raise StepExecutionError(step.name, reason) from exc
        pipeline_result.results.append(result)
        return result

    def _resolve_working_dir(self, step: StepConfig, *, check: bool) -> Path | None:
        """Return the absolute working directory of a step.

        Raises:
            DirectoryError: If ``check`` and the directory does not exist.
        """
        if step.working_dir is None:
            return None
        path = Path(os.path.expandvars(step.working_dir)).expanduser()
        if not path.is_absolute():
            path = self._config.build_dir / path
        path = path.absolute()
        if check and not path.is_dir():
            raise DirectoryError(step.name, str(path))
        return path

    def _effective_timeout(self, step: StepConfig) -> float | None:
        return step.timeout if step.timeout is not None else self._config.default_timeout

    def _checkpoint(self, step: StepConfig) -> None:
        """Block until the operator confirms.

        Raises:
            PipelineCancelledError: On a negative answer or interrupted input.
        """
        self._state = PipelineState.AWAITING_CONFIRMATION
        try:
            proceed = self._confirm(step)
        except (KeyboardInterrupt, EOFError):
            proceed = False
        if not proceed:
            logger.warning("Pipeline '%s' cancelled after step '%s'", self._config.name, step.name)
            raise PipelineCancelledError(step.name)
        self._state = PipelineState.RUNNING

    def _finish(self, pipeline_result: PipelineResult, state: PipelineState, start: float) -> None:
        self._state = state
        pipeline_result.state = state
        pipeline_result.duration = time.monotonic() - start


# ============================================================================
# Helpers
# ============================================================================


def select_steps(steps: Iterable[StepConfig], *, build_apps: bool) -> tuple[StepConfig, ...]:
    """Drop optional application steps unless ``build_apps`` is set.

    Examples:
        >>> core = StepConfig(name="core", commands=("true",))
        >>> app = StepConfig(name="app", commands=("true",), optional=True)
        >>> [s.name for s in select_steps([core, app], build_apps=False)]
        ['core']
    """
    return tuple(step for step in steps if build_apps or not step.optional)


def _failure_error(step: StepConfig, result: StepResult, timeout: float | None) -> StepFailedError:
    """Build the exception describing a failed step result."""
    command = result.command or step.name
    if result.status == StepStatus.TIMEOUT:
        return StepTimeoutError(step.name, command, timeout or 0.0)
    exit_code = result.return_code if result.return_code else 1
    if exit_code < 0:
        # killed by signal N, reported as 128 + N like bash
        exit_code = 128 - exit_code
    if step.phase == StepPhase.DEPENDENCIES:
        return PackageInstallError(step.name, command, exit_code)
    return StepFailedError(step.name, command, exit_code)


def parse_pipeline_config(data: Mapping[str, Any]) -> PipelineConfig:
    """Parse raw settings (e.g. the ``pipeline`` config section).

    Raises:
        PipelineConfigError: If a value has the wrong type.

    Examples:
        >>> parse_pipeline_config({"build_apps": "yes", "build_dir": "/tmp/gs"}).build_apps
        True
    """
    default_timeout = data.get("default_timeout")
    if default_timeout is not None:
        try:
            default_timeout = float(default_timeout)
        except (TypeError, ValueError):
            raise PipelineConfigError(f"Invalid default_timeout {default_timeout!r}") from None

    kwargs: dict[str, Any] = {
        "prompt_after_steps": validate_bool("prompt_after_steps", data.get("prompt_after_steps", False)),
        "build_apps": validate_bool("build_apps", data.get("build_apps", False)),
        "build_dir": Path(str(data.get("build_dir") or "GNUstep-build")),
        "name": str(data.get("name") or "gnustep"),
        "capture_output": validate_bool("capture_output", data.get("capture_output", True)),
        "default_timeout": default_timeout,
    }
    if data.get("shell"):
        kwargs["shell"] = str(data["shell"])
    return PipelineConfig(**kwargs)


__all__ = [
    "ConfirmCallback",
    "PipelineRunner",
    "parse_pipeline_config",
    "prompt_confirm",
    "select_steps",
]
