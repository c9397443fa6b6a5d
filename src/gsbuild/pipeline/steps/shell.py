"""Shell step executor for pipeline.

Runs the step's commands one after another via
``subprocess.run(shell=True)``, each in the step's working directory and
with the pipeline environment map. The first non-zero exit stops the step.
"""

from __future__ import annotations

import logging
import subprocess
import time

from gsbuild.pipeline.models import StepConfig, StepContext, StepResult, StepStatus

logger = logging.getLogger(__name__)


class ShellStep:
    """Execute the shell commands of a pipeline step.

    Output is either captured into the result (``capture_output``) or
    inherited from the parent so long builds stream to the terminal.

    Examples:
        >>> from gsbuild.pipeline.models import StepConfig, StepContext
        >>> step = ShellStep()
        >>> config = StepConfig(name="greet", commands=("echo hello",))
        >>> result = step.execute(config, StepContext(env={}))  # doctest: +SKIP
        >>> result.status  # doctest: +SKIP
        <StepStatus.SUCCESS: 'success'>
    """

    def execute(
        self,
        config: StepConfig,
        context: StepContext,
        *,
        dry_run: bool = False,
    ) -> StepResult:
        """Run every command of the step in order.

        Args:
            config: Step configuration with commands and extra env.
            context: Environment map, working directory and run settings.
            dry_run: If True, log the commands without executing them.

        Returns:
            StepResult with output, return code of the last command run and
            duration. Shell steps never produce an environment delta.
        """
        if dry_run:
            for command in config.commands:
                logger.info("[DRY RUN] %s: %s", config.name, command)
            return StepResult(
                name=config.name,
                status=StepStatus.SKIPPED,
                stdout="\n".join(f"[dry-run] would execute: {c}" for c in config.commands),
            )

        env = {**context.env, **config.env}
        stdout_parts: list[str] = []
        stderr_parts: list[str] = []
        result = StepResult(name=config.name, status=StepStatus.SUCCESS)

        start = time.monotonic()
        for command in config.commands:
            result.command = command
            result.commands_run += 1
            logger.info("+ %s", command)
            try:
                proc = subprocess.run(  # noqa: S602
                    command,
                    shell=True,
                    executable=context.shell,
                    capture_output=context.capture_output,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    check=False,
                    timeout=context.timeout,
                    env=env,
                    cwd=context.cwd,
                )
            except subprocess.TimeoutExpired:
                logger.warning("Step '%s' timed out after %.1fs: %s", config.name, context.timeout, command)
                result.status = StepStatus.TIMEOUT
                result.error = f"Timed out after {context.timeout}s"
                break
            except OSError as exc:
                logger.exception("Step '%s' could not start: %s", config.name, command)
                result.status = StepStatus.FAILED
                result.return_code = 127
                result.error = str(exc)
                break

            result.return_code = proc.returncode
            if proc.stdout:
                stdout_parts.append(proc.stdout)
            if proc.stderr:
                stderr_parts.append(proc.stderr)

            if proc.returncode != 0:
                result.status = StepStatus.FAILED
                result.error = (proc.stderr or "").strip() or f"exit code {proc.returncode}"
                logger.warning(
                    "Step '%s' failed (rc=%d): %s",
                    config.name,
                    proc.returncode,
                    command,
                )
                break

        result.duration = time.monotonic() - start
        result.stdout = "".join(stdout_parts)
        result.stderr = "".join(stderr_parts)
        return result


__all__ = [
    "ShellStep",
]
