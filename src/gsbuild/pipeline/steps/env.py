"""Env step executor for pipeline.

Exports variables for every later step. Values are expanded against the
current environment map, so ``/usr/local/lib:${LD_LIBRARY_PATH}`` extends
the inherited search path instead of replacing it.
"""

from __future__ import annotations

import logging
import time

from gsbuild.pipeline.environment import expand_value
from gsbuild.pipeline.models import StepConfig, StepContext, StepResult, StepStatus

logger = logging.getLogger(__name__)


class EnvStep:
    """Compute the environment delta of an ``env`` step."""

    def execute(
        self,
        config: StepConfig,
        context: StepContext,
        *,
        dry_run: bool = False,
    ) -> StepResult:
        start = time.monotonic()
        delta = {key: expand_value(value, context.env) for key, value in config.env.items()}
        for key, value in delta.items():
            logger.info("%sexport %s=%s", "[DRY RUN] " if dry_run else "", key, value)

        if dry_run:
            return StepResult(name=config.name, status=StepStatus.SKIPPED)

        return StepResult(
            name=config.name,
            status=StepStatus.SUCCESS,
            env_delta=delta,
            duration=time.monotonic() - start,
        )


__all__ = [
    "EnvStep",
]
