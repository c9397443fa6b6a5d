"""Callable step executor for pipeline.

Imports and calls a Python function directly using ``importlib``.
The callable target format is ``module.path:function_name``.

The function is called as ``func(*args, env=env)`` where ``args`` have been
expanded against the current environment map and ``env`` is a read-only
copy of it. A mapping return value becomes the step's environment delta.

Note:
    Callable steps do not support timeout. Use a shell step if the work
    may hang.
"""

from __future__ import annotations

import importlib
import logging
import time
from collections.abc import Mapping
from types import MappingProxyType

from gsbuild.pipeline.environment import expand_value
from gsbuild.pipeline.exceptions import StepImportError
from gsbuild.pipeline.models import StepConfig, StepContext, StepResult, StepStatus

logger = logging.getLogger(__name__)


class CallableStep:
    """Execute a Python callable as a pipeline step.

    Examples:
        >>> from gsbuild.pipeline.models import StepConfig, StepContext, StepType
        >>> step = CallableStep()
        >>> config = StepConfig(
        ...     name="persist",
        ...     type=StepType.CALLABLE,
        ...     callable="gsbuild.provision.shellrc:persist_environment",
        ...     args=("export CXXFLAGS=\\"${CXXFLAGS}\\"",),
        ... )
        >>> result = step.execute(config, StepContext(env={}))  # doctest: +SKIP
    """

    def execute(
        self,
        config: StepConfig,
        context: StepContext,
        *,
        dry_run: bool = False,
    ) -> StepResult:
        """Execute a Python callable.

        Returns:
            StepResult with return_value, env_delta, duration and status.

        Raises:
            StepImportError: If the target cannot be imported.
        """
        target = config.callable or ""
        args = tuple(expand_value(arg, context.env) for arg in config.args)
        logger.debug("CallableStep '%s': target=%r args=%r", config.name, target, args)

        if dry_run:
            logger.info("[DRY RUN] %s: %s%r", config.name, target, args)
            return StepResult(
                name=config.name,
                status=StepStatus.SKIPPED,
                stdout=f"[dry-run] would call: {target}",
            )

        module_path, _, func_name = target.rpartition(":")
        try:
            module = importlib.import_module(module_path)
            func = getattr(module, func_name)
        except (ImportError, AttributeError) as exc:
            logger.exception("CallableStep '%s' import error", config.name)
            raise StepImportError(config.name, target) from exc

        start = time.monotonic()
        try:
            return_value = func(*args, env=MappingProxyType(dict(context.env)))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            duration = time.monotonic() - start
            logger.exception("CallableStep '%s' execution error", config.name)
            return StepResult(
                name=config.name,
                status=StepStatus.FAILED,
                command=target,
                commands_run=1,
                return_code=1,
                duration=duration,
                error=str(exc),
            )

        duration = time.monotonic() - start
        delta = {str(k): str(v) for k, v in return_value.items()} if isinstance(return_value, Mapping) else {}
        logger.debug("CallableStep '%s' completed in %.3fs", config.name, duration)

        return StepResult(
            name=config.name,
            status=StepStatus.SUCCESS,
            command=target,
            commands_run=1,
            return_code=0,
            env_delta=delta,
            return_value=return_value,
            duration=duration,
        )


__all__ = [
    "CallableStep",
]
