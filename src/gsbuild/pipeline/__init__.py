"""Sequential build pipeline driver.

Runs an ordered list of steps (shell commands, environment exports,
environment reloads from a generated script, Python callables) and stops
at the first failure. The environment is an explicit map threaded from
step to step; an optional checkpoint asks the operator before continuing.

Examples:
    >>> from gsbuild.pipeline import PipelineConfig, PipelineRunner, StepConfig
    >>> steps = [
    ...     StepConfig(name="configure", commands=("./configure",), working_dir="tools-make"),
    ...     StepConfig(name="compile", commands=("make -j4", "make install"), working_dir="tools-make"),
    ... ]
    >>> runner = PipelineRunner(steps, PipelineConfig(build_dir="GNUstep-build"))
    >>> result = runner.run()  # doctest: +SKIP
"""

from gsbuild.pipeline.base import AbstractStep
from gsbuild.pipeline.environment import apply_delta, diff_env, expand_value
from gsbuild.pipeline.exceptions import (
    DirectoryError,
    MissingArtifactError,
    PackageInstallError,
    PipelineCancelledError,
    PipelineConfigError,
    PipelineError,
    StepExecutionError,
    StepFailedError,
    StepImportError,
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
from gsbuild.pipeline.runner import PipelineRunner, parse_pipeline_config, select_steps
from gsbuild.pipeline.steps import CallableStep, EnvStep, ShellStep, SourceStep

__all__ = [
    "AbstractStep",
    "CallableStep",
    "DirectoryError",
    "EnvStep",
    "MissingArtifactError",
    "PackageInstallError",
    "PipelineCancelledError",
    "PipelineConfig",
    "PipelineConfigError",
    "PipelineError",
    "PipelineResult",
    "PipelineRunner",
    "PipelineState",
    "ShellStep",
    "SourceStep",
    "StepConfig",
    "StepContext",
    "StepExecutionError",
    "StepFailedError",
    "StepImportError",
    "StepPhase",
    "StepResult",
    "StepStatus",
    "StepTimeoutError",
    "StepType",
    "apply_delta",
    "diff_env",
    "expand_value",
    "parse_pipeline_config",
    "select_steps",
]
