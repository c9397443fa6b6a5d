"""Data models for the gsbuild.pipeline module.

This module defines the core data structures used by the pipeline module:

- StepType: Enum for step execution mode (shell, env, source, callable)
- StepPhase: Enum grouping steps by provisioning phase
- StepStatus: Enum for step result status
- PipelineState: Enum for the runner state machine
- StepConfig: Frozen configuration for a single pipeline step
- PipelineConfig: Frozen run-wide settings, read once at start
- StepContext: Environment and directory handed to a step executor
- StepResult: Mutable result of a single step execution
- PipelineResult: Mutable aggregate result of a pipeline execution
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from gsbuild.pipeline.exceptions import PipelineConfigError
from gsbuild.pipeline.validators import (
    MAX_STEP_ARGS,
    validate_callable_target,
    validate_commands,
    validate_env,
    validate_step_name,
)


class StepType(str, Enum):
    """Execution mode for a pipeline step.

    Attributes:
        SHELL: Run ``commands`` in order through the shell.
        ENV: Export ``env`` (expanded against the current environment).
        SOURCE: Source ``script`` and capture the variables it defines.
        CALLABLE: Import and call a Python function.
    """

    SHELL = "shell"
    ENV = "env"
    SOURCE = "source"
    CALLABLE = "callable"


class StepPhase(str, Enum):
    """Provisioning phase a step belongs to."""

    DEPENDENCIES = "dependencies"
    ENVIRONMENT = "environment"
    CHECKOUT = "checkout"
    BUILD = "build"
    FINALIZE = "finalize"
    APPS = "apps"


class StepStatus(str, Enum):
    """Result status of a pipeline step.

    Attributes:
        SUCCESS: Every command exited 0.
        FAILED: A command exited non-zero (or could not be started).
        SKIPPED: Nothing was executed (dry run, optional script absent).
        TIMEOUT: A command exceeded its timeout.
    """

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    TIMEOUT = "timeout"


class PipelineState(str, Enum):
    """State of a pipeline run.

    ``IDLE -> RUNNING -> (AWAITING_CONFIRMATION -> RUNNING)* -> COMPLETED``,
    with ``FAILED`` and ``CANCELLED`` as the other terminal states.
    """

    IDLE = "idle"
    RUNNING = "running"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        """Whether the run is over."""
        return self in (PipelineState.COMPLETED, PipelineState.FAILED, PipelineState.CANCELLED)


@dataclass(frozen=True, slots=True)
class StepConfig:
    """Configuration for a single pipeline step.

    Attributes:
        name: Unique step name within the pipeline.
        type: Execution mode.
        commands: Shell commands run in order (shell steps).
        env: Extra variables for this step's commands; for env steps, the
            variables to export.
        script: Script to source (source steps).
        required: Whether a missing ``script`` is an error (source steps).
        callable: Import target ``module.path:function`` (callable steps).
        args: Positional arguments for the callable, expanded against the
            current environment.
        working_dir: Directory the commands run in. Relative paths resolve
            against the pipeline build directory; None is the launch directory.
        interactive: Pause for confirmation after this step when prompting.
        optional: Application-build step, only run when apps are enabled.
        phase: Provisioning phase.
        timeout: Per-command timeout in seconds (None uses pipeline default).
        description: Human readable summary.

    Examples:
        >>> config = StepConfig(
        ...     name="build-libs-base",
        ...     type=StepType.SHELL,
        ...     commands=("./configure", "make -j4"),
        ...     working_dir="libs-base",
        ... )
        >>> config.commands[0]
        './configure'
    """

    name: str
    type: StepType = StepType.SHELL
    commands: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)
    script: str | None = None
    required: bool = True
    callable: str | None = None
    args: tuple[str, ...] = ()
    working_dir: str | None = None
    interactive: bool = False
    optional: bool = False
    phase: StepPhase = StepPhase.BUILD
    timeout: float | None = None
    description: str = ""

    def __post_init__(self) -> None:
        """Validate step configuration values.

        Raises:
            PipelineConfigError: If any configuration value is invalid.
        """
        validate_step_name(self.name)

        if isinstance(self.commands, (str, list)):
            commands = (self.commands,) if isinstance(self.commands, str) else tuple(self.commands)
            object.__setattr__(self, "commands", commands)

        if self.type == StepType.SHELL:
            validate_commands(self.name, self.commands)
        elif self.type == StepType.ENV:
            if not self.env:
                raise PipelineConfigError(f"Step '{self.name}': env step requires at least one variable")
        elif self.type == StepType.SOURCE:
            if not self.script:
                raise PipelineConfigError(f"Step '{self.name}': source step requires a 'script'")
        elif self.type == StepType.CALLABLE:
            if not self.callable:
                raise PipelineConfigError(f"Step '{self.name}': callable step requires a 'callable' target")
            validate_callable_target(self.callable)
            if len(self.args) > MAX_STEP_ARGS:
                raise PipelineConfigError(f"Step '{self.name}': too many arguments (max {MAX_STEP_ARGS})")

        if self.env:
            validate_env(self.env)

        if self.timeout is not None and self.timeout <= 0:
            raise PipelineConfigError(f"Step '{self.name}': timeout must be positive, got {self.timeout}")


def _default_shell() -> str | None:
    return shutil.which("bash")


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """Run-wide pipeline settings, immutable for the duration of a run.

    Attributes:
        prompt_after_steps: Pause after each interactive step for confirmation.
        build_apps: Include optional application-build steps.
        build_dir: Directory sources are cloned and built in.
        name: Pipeline name (used in logs and results).
        capture_output: Capture command output into results instead of
            streaming it to the terminal.
        shell: Shell executable for commands (None uses ``/bin/sh``).
        default_timeout: Per-command timeout for steps without one.

    Examples:
        >>> config = PipelineConfig(build_dir="GNUstep-build")
        >>> config.prompt_after_steps
        False
    """

    prompt_after_steps: bool = False
    build_apps: bool = False
    build_dir: Path = Path("GNUstep-build")
    name: str = "gnustep"
    capture_output: bool = True
    shell: str | None = field(default_factory=_default_shell)
    default_timeout: float | None = None

    def __post_init__(self) -> None:
        """Normalize and validate settings.

        Raises:
            PipelineConfigError: If a setting is invalid.
        """
        object.__setattr__(self, "build_dir", Path(self.build_dir).expanduser())
        if not self.name:
            raise PipelineConfigError("Pipeline name cannot be empty")
        if self.default_timeout is not None and self.default_timeout <= 0:
            raise PipelineConfigError(f"Pipeline default_timeout must be positive, got {self.default_timeout}")


@dataclass(slots=True)
class StepContext:
    """What a step executor runs against.

    Attributes:
        env: Current environment map (parent environment plus deltas of
            earlier steps). Executors must not mutate it.
        cwd: Resolved working directory, None for the launch directory.
        capture_output: Capture output instead of streaming it.
        shell: Shell executable.
        timeout: Effective per-command timeout.
    """

    env: dict[str, str]
    cwd: Path | None = None
    capture_output: bool = True
    shell: str | None = None
    timeout: float | None = None


@dataclass(slots=True)
class StepResult:
    """Result of a single pipeline step execution.

    Attributes:
        name: Step name.
        status: Execution result status.
        stdout: Standard output captured from the step.
        stderr: Standard error captured from the step.
        return_code: Exit code of the last command run.
        command: Last command run (the failing one on failure).
        commands_run: Number of commands started.
        env_delta: Variables this step adds to the pipeline environment.
        return_value: Return value (callable steps).
        duration: Execution duration in seconds.
        error: Error message if the step failed.

    Examples:
        >>> result = StepResult(name="build", status=StepStatus.SUCCESS)
        >>> result.ok
        True
    """

    name: str
    status: StepStatus
    stdout: str = ""
    stderr: str = ""
    return_code: int | None = None
    command: str | None = None
    commands_run: int = 0
    env_delta: dict[str, str] = field(default_factory=dict)
    return_value: object = None
    duration: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the step allows the pipeline to continue."""
        return self.status in (StepStatus.SUCCESS, StepStatus.SKIPPED)


@dataclass(slots=True)
class PipelineResult:
    """Aggregate result of a pipeline execution.

    Attributes:
        name: Pipeline name.
        results: One entry per step that started, in execution order.
        state: State of the run.
        env: Environment map after the last executed step.
        duration: Total pipeline execution duration in seconds.

    Examples:
        >>> result = PipelineResult(name="gnustep")
        >>> result.success
        False
    """

    name: str
    results: list[StepResult] = field(default_factory=list)
    state: PipelineState = PipelineState.IDLE
    env: dict[str, str] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def success(self) -> bool:
        """Whether the run completed with every step succeeding."""
        return self.state == PipelineState.COMPLETED and all(r.ok for r in self.results)

    @property
    def failed_steps(self) -> list[StepResult]:
        """Steps that failed or timed out."""
        return [r for r in self.results if r.status in (StepStatus.FAILED, StepStatus.TIMEOUT)]

    @property
    def step_names(self) -> list[str]:
        """Names of the recorded steps, in order."""
        return [r.name for r in self.results]


__all__ = [
    "PipelineConfig",
    "PipelineResult",
    "PipelineState",
    "StepConfig",
    "StepContext",
    "StepPhase",
    "StepResult",
    "StepStatus",
    "StepType",
]
