"""Specialized exceptions raised by the gsbuild.pipeline module.

Exception hierarchy::

    GsbuildError
        PipelineError (base for all pipeline errors)
            PipelineConfigError (invalid configuration, also ValueError)
            DirectoryError (step working directory missing)
            StepFailedError (a command exited non-zero)
                PackageInstallError (failure while installing OS packages)
                StepTimeoutError (a command exceeded its timeout)
            StepImportError (callable import failure)
            StepExecutionError (executor raised unexpectedly)
            MissingArtifactError (expected file absent)
            PipelineCancelledError (operator declined a checkpoint)

Errors raised by ``PipelineRunner.run`` carry the partial
:class:`~gsbuild.pipeline.models.PipelineResult` in ``result``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gsbuild.config.exceptions import GsbuildError

if TYPE_CHECKING:
    from gsbuild.pipeline.models import PipelineResult

#: Exit code reported for a command killed by its timeout (as coreutils ``timeout``).
TIMEOUT_EXIT_CODE = 124


class PipelineError(GsbuildError):
    """Base exception for all pipeline module errors.

    Attributes:
        result: Partial pipeline result, set by the runner when available.
    """

    result: PipelineResult | None = None


class PipelineConfigError(PipelineError, ValueError):
    """Pipeline configuration is invalid.

    Raised when the pipeline or step configuration contains
    invalid values, missing required fields, or constraint
    violations.
    """


class DirectoryError(PipelineError):
    """A step's working directory does not exist.

    Attributes:
        step_name: Name of the step.
        path: The missing directory.
    """

    def __init__(self, step_name: str, path: str) -> None:
        super().__init__(f"Step '{step_name}': working directory does not exist: {path}")
        self.step_name = step_name
        self.path = path


class StepFailedError(PipelineError):
    """A command of a pipeline step exited with a non-zero status.

    Attributes:
        step_name: Name of the step that failed.
        command: The command that failed.
        exit_code: Its exit status.
    """

    def __init__(self, step_name: str, command: str, exit_code: int) -> None:
        """Initialize StepFailedError.

        Args:
            step_name: Name of the step that failed.
            command: The failing command.
            exit_code: The command's exit status.
        """
        super().__init__(f"Step '{step_name}' failed (exit code {exit_code}): {command}")
        self.step_name = step_name
        self.command = command
        self.exit_code = exit_code


class PackageInstallError(StepFailedError):
    """Installing OS packages with the system package manager failed."""


class StepTimeoutError(StepFailedError):
    """A command exceeded its timeout.

    Attributes:
        timeout: The timeout value in seconds.
    """

    def __init__(self, step_name: str, command: str, timeout: float) -> None:
        super().__init__(step_name, command, TIMEOUT_EXIT_CODE)
        self.args = (f"Step '{step_name}' exceeded timeout of {timeout}s: {command}",)
        self.timeout = timeout


class StepImportError(PipelineError):
    """Failed to import a callable target for a step.

    Attributes:
        step_name: Name of the step with the import failure.
        target: The import target string that failed.
    """

    def __init__(self, step_name: str, target: str) -> None:
        super().__init__(f"Step '{step_name}': cannot import '{target}'")
        self.step_name = step_name
        self.target = target


class StepExecutionError(PipelineError):
    """A step executor raised an unexpected error.

    The original exception is chained as ``__cause__``.

    Attributes:
        step_name: Name of the step.
    """

    def __init__(self, step_name: str, reason: str) -> None:
        super().__init__(f"Step '{step_name}' could not run: {reason}")
        self.step_name = step_name


class MissingArtifactError(PipelineError):
    """A file that an earlier step should have produced is absent.

    Attributes:
        step_name: Name of the step that needed the file.
        path: The missing file.
    """

    def __init__(self, step_name: str, path: str) -> None:
        super().__init__(f"Step '{step_name}': expected file not found: {path}")
        self.step_name = step_name
        self.path = path


class PipelineCancelledError(PipelineError):
    """The operator declined to continue at a checkpoint.

    Attributes:
        step_name: Step after which the pipeline stopped.
    """

    def __init__(self, step_name: str) -> None:
        super().__init__(f"Pipeline cancelled after step '{step_name}'")
        self.step_name = step_name


__all__ = [
    "DirectoryError",
    "MissingArtifactError",
    "PackageInstallError",
    "PipelineCancelledError",
    "PipelineConfigError",
    "PipelineError",
    "StepExecutionError",
    "StepFailedError",
    "StepImportError",
    "StepTimeoutError",
    "TIMEOUT_EXIT_CODE",
]
