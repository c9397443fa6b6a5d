"""Abstract base protocol for pipeline steps.

This module defines the protocol that all pipeline step implementations
must satisfy, enabling consistent execution across shell, env, source
and callable step types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from gsbuild.pipeline.models import StepConfig, StepContext, StepResult


@runtime_checkable
class AbstractStep(Protocol):
    """Protocol defining the interface for pipeline step executors.

    An executor is a pure function of (step, context): it reads the
    environment map from the context and reports the variables it
    produces in ``StepResult.env_delta`` instead of touching
    ``os.environ``.
    """

    def execute(
        self,
        config: StepConfig,
        context: StepContext,
        *,
        dry_run: bool = False,
    ) -> StepResult:
        """Execute a pipeline step.

        Args:
            config: Step configuration.
            context: Environment map, working directory and run settings.
            dry_run: If True, simulate execution without side effects.

        Returns:
            StepResult with status, output, duration and environment delta.
        """
        ...


__all__ = [
    "AbstractStep",
]
