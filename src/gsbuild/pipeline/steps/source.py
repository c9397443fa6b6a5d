"""Source step executor for pipeline.

Reloads the environment from a generated setup script (for GNUstep,
``GNUstep.sh`` installed by tools-make). The contract: the script is
sourced by a child bash that starts from the current environment map; every
variable that is new or changed afterwards forms the step's environment
delta. Variables the script unsets are not removed from the map.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from gsbuild.pipeline.environment import diff_env
from gsbuild.pipeline.exceptions import MissingArtifactError
from gsbuild.pipeline.models import StepConfig, StepContext, StepResult, StepStatus

logger = logging.getLogger(__name__)

# Variables describing the helper shell itself rather than the script.
_IGNORED_VARS = frozenset({"_", "PWD", "OLDPWD", "SHLVL", "BASH_EXECUTION_STRING"})


def parse_env_dump(data: bytes) -> dict[str, str]:
    """Parse the NUL-separated output of ``env -0``.

    Examples:
        >>> parse_env_dump(b"A=1\\x00B=x=y\\x00")
        {'A': '1', 'B': 'x=y'}
    """
    env: dict[str, str] = {}
    for entry in data.split(b"\0"):
        if not entry or b"=" not in entry:
            continue
        key, _, value = entry.partition(b"=")
        env[key.decode("utf-8", "surrogateescape")] = value.decode("utf-8", "surrogateescape")
    return env


class SourceStep:
    """Source a script and report the variables it defines."""

    def execute(
        self,
        config: StepConfig,
        context: StepContext,
        *,
        dry_run: bool = False,
    ) -> StepResult:
        """Source ``config.script`` in a child shell.

        Raises:
            MissingArtifactError: If the script is absent and required.
        """
        script = os.path.expanduser(config.script or "")
        command = f". {script}"

        if dry_run:
            logger.info("[DRY RUN] %s: %s", config.name, command)
            return StepResult(name=config.name, status=StepStatus.SKIPPED, command=command)

        if not Path(script).is_file():
            if config.required:
                raise MissingArtifactError(config.name, script)
            logger.info("Step '%s': %s not present, nothing to source", config.name, script)
            return StepResult(name=config.name, status=StepStatus.SKIPPED, command=command)

        shell = context.shell or "/bin/sh"
        logger.info("+ %s", command)
        start = time.monotonic()
        try:
            proc = subprocess.run(  # noqa: S603
                [shell, "-c", '. "$1" >&2 && env -0', "gsbuild-source", script],
                capture_output=True,
                check=False,
                timeout=context.timeout,
                env=dict(context.env),
                cwd=context.cwd,
            )
        except subprocess.TimeoutExpired:
            return StepResult(
                name=config.name,
                status=StepStatus.TIMEOUT,
                command=command,
                commands_run=1,
                duration=time.monotonic() - start,
                error=f"Timed out after {context.timeout}s",
            )
        duration = time.monotonic() - start
        stderr = proc.stderr.decode("utf-8", "replace")

        if proc.returncode != 0:
            logger.warning("Step '%s' failed (rc=%d): %s", config.name, proc.returncode, command)
            return StepResult(
                name=config.name,
                status=StepStatus.FAILED,
                stderr=stderr,
                return_code=proc.returncode,
                command=command,
                commands_run=1,
                duration=duration,
                error=stderr.strip() or f"exit code {proc.returncode}",
            )

        sourced = parse_env_dump(proc.stdout)
        delta = {k: v for k, v in diff_env(context.env, sourced).items() if k not in _IGNORED_VARS}
        logger.info("Step '%s': %d variables loaded from %s", config.name, len(delta), script)
        logger.debug("Step '%s': delta=%s", config.name, sorted(delta))

        return StepResult(
            name=config.name,
            status=StepStatus.SUCCESS,
            stderr=stderr,
            return_code=0,
            command=command,
            commands_run=1,
            env_delta=delta,
            duration=duration,
        )


__all__ = [
    "SourceStep",
    "parse_env_dump",
]
