"""Input validation for gsbuild.pipeline module.

Validation runs when step and pipeline configurations are constructed, so a
malformed plan is rejected before any command executes.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from gsbuild.pipeline.exceptions import PipelineConfigError

# ============================================================================
# Constants - Hard Limits
# ============================================================================

#: Maximum step name length.
MAX_STEP_NAME_LENGTH = 64

#: Pattern for valid step names.
STEP_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")

#: Maximum number of steps in a single pipeline.
MAX_PIPELINE_STEPS = 50

#: Maximum number of commands in a single step.
MAX_STEP_COMMANDS = 64

#: Maximum number of arguments for a callable step.
MAX_STEP_ARGS = 50

#: Maximum length of a single command.
MAX_COMMAND_LENGTH = 4096

#: Maximum number of environment variables set by one step.
MAX_ENV_VARS = 100

#: Maximum length of an environment variable name.
MAX_ENV_KEY_LENGTH = 128

#: Maximum length of an environment variable value.
MAX_ENV_VALUE_LENGTH = 8192

#: Pattern for valid environment variable names.
ENV_KEY_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

#: Maximum length of a callable target string.
MAX_CALLABLE_TARGET_LENGTH = 256

#: Pattern for valid callable targets (module.path:function_name).
CALLABLE_TARGET_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_.]*:[a-zA-Z_][a-zA-Z0-9_]*$")

#: Accepted spellings of boolean settings.
_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")

#: Command patterns that are never part of a build plan.
DANGEROUS_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\brm\s+-[a-zA-Z]*[rR][a-zA-Z]*\s+(--no-preserve-root\s+)?/(\*)?(\s|$|;)"),
    re.compile(r"\b(curl|wget)\b[^|;&]*\|\s*(sudo\s+)?(ba|z|da)?sh\b"),
    re.compile(r":\(\)\s*\{\s*:\|:&\s*\};:"),
    re.compile(r"\bmkfs(\.\w+)?\s"),
    re.compile(r"\bdd\s+[^;|&]*of=/dev/(sd|nvme|hd)"),
)


# ============================================================================
# Validation Functions
# ============================================================================


def validate_step_name(name: str) -> str:
    """Validate and return a step name.

    Rules:
    - Cannot be empty
    - Max 64 characters (hard limit)
    - Must start with a letter
    - Only alphanumeric, underscore, hyphen allowed

    Args:
        name: Step name to validate.

    Returns:
        The validated step name (unchanged).

    Raises:
        PipelineConfigError: If name is invalid.

    Examples:
        >>> validate_step_name("build-libobjc2")
        'build-libobjc2'
        >>> validate_step_name("")
        Traceback (most recent call last):
            ...
        gsbuild.pipeline.exceptions.PipelineConfigError: Step name cannot be empty
    """
    if not name:
        raise PipelineConfigError("Step name cannot be empty")
    if len(name) > MAX_STEP_NAME_LENGTH:
        raise PipelineConfigError(f"Step name too long (max {MAX_STEP_NAME_LENGTH} chars)")
    if not STEP_NAME_PATTERN.match(name):
        raise PipelineConfigError(
            "Step name must start with a letter and contain only alphanumeric, underscore, or hyphen characters"
        )
    return name


def validate_command(command: str) -> str:
    """Validate a single shell command.

    Args:
        command: Command string.

    Returns:
        The validated command (unchanged).

    Raises:
        PipelineConfigError: If the command is empty, too long or dangerous.

    Examples:
        >>> validate_command("make -j4")
        'make -j4'
        >>> validate_command("rm -rf build")
        'rm -rf build'
    """
    if not command or not command.strip():
        raise PipelineConfigError("Command cannot be empty")
    if len(command) > MAX_COMMAND_LENGTH:
        raise PipelineConfigError(f"Command too long (max {MAX_COMMAND_LENGTH} chars)")
    for pattern in DANGEROUS_PATTERNS:
        if pattern.search(command):
            raise PipelineConfigError(f"Command contains a dangerous pattern: {command!r}")
    return command


def validate_commands(step_name: str, commands: tuple[str, ...]) -> tuple[str, ...]:
    """Validate the command list of a shell step."""
    if not commands:
        raise PipelineConfigError(f"Step '{step_name}': shell step requires at least one command")
    if len(commands) > MAX_STEP_COMMANDS:
        raise PipelineConfigError(f"Step '{step_name}': too many commands (max {MAX_STEP_COMMANDS})")
    for command in commands:
        validate_command(command)
    return commands


def validate_env(env: Mapping[str, str]) -> Mapping[str, str]:
    """Validate environment variables set by a step.

    Raises:
        PipelineConfigError: On too many variables, bad names or oversized values.

    Examples:
        >>> validate_env({"CC": "clang"})
        {'CC': 'clang'}
    """
    if len(env) > MAX_ENV_VARS:
        raise PipelineConfigError(f"Too many environment variables (max {MAX_ENV_VARS})")
    for key, value in env.items():
        if len(key) > MAX_ENV_KEY_LENGTH:
            raise PipelineConfigError(f"Environment variable name too long: {key[:32]!r}...")
        if not ENV_KEY_PATTERN.match(key):
            raise PipelineConfigError(f"Invalid environment variable name: {key!r}")
        if not isinstance(value, str):
            raise PipelineConfigError(f"Environment variable {key!r} must be a string, got {type(value).__name__}")
        if len(value) > MAX_ENV_VALUE_LENGTH:
            raise PipelineConfigError(f"Environment variable {key!r} value too long (max {MAX_ENV_VALUE_LENGTH})")
    return env


def validate_callable_target(target: str) -> str:
    """Validate a callable target string.

    Expected format: ``module.path:function_name``

    Examples:
        >>> validate_callable_target("gsbuild.provision.shellrc:persist_environment")
        'gsbuild.provision.shellrc:persist_environment'
    """
    if not target:
        raise PipelineConfigError("Callable target cannot be empty")
    if len(target) > MAX_CALLABLE_TARGET_LENGTH:
        raise PipelineConfigError(f"Callable target too long (max {MAX_CALLABLE_TARGET_LENGTH} chars)")
    if not CALLABLE_TARGET_PATTERN.match(target):
        raise PipelineConfigError(f"Invalid callable target format: {target!r} (expected 'module.path:function_name')")
    return target


def validate_bool(name: str, value: Any) -> bool:
    """Validate a boolean setting, accepting the usual YAML spellings.

    Args:
        name: Setting name, for the error message.
        value: A bool or a string such as ``yes``/``no`` or ``true``/``false`` (any case).

    Raises:
        PipelineConfigError: If the value is not a recognizable boolean.

    Examples:
        >>> validate_bool("build_apps", "no")
        False
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS + _FALSE_STRINGS:
        return value.strip().lower() in _TRUE_STRINGS
    raise PipelineConfigError(f"Setting '{name}' must be a boolean, got {value!r}")


def validate_pipeline_steps(step_count: int) -> None:
    """Validate the size of a step list.

    Raises:
        PipelineConfigError: If the list is empty or too long.
    """
    if step_count == 0:
        raise PipelineConfigError("Pipeline must have at least one step")
    if step_count > MAX_PIPELINE_STEPS:
        raise PipelineConfigError(f"Too many steps (max {MAX_PIPELINE_STEPS})")


__all__ = [
    "CALLABLE_TARGET_PATTERN",
    "DANGEROUS_PATTERNS",
    "ENV_KEY_PATTERN",
    "MAX_CALLABLE_TARGET_LENGTH",
    "MAX_COMMAND_LENGTH",
    "MAX_ENV_KEY_LENGTH",
    "MAX_ENV_VALUE_LENGTH",
    "MAX_ENV_VARS",
    "MAX_PIPELINE_STEPS",
    "MAX_STEP_ARGS",
    "MAX_STEP_COMMANDS",
    "MAX_STEP_NAME_LENGTH",
    "STEP_NAME_PATTERN",
    "validate_bool",
    "validate_callable_target",
    "validate_command",
    "validate_commands",
    "validate_env",
    "validate_pipeline_steps",
    "validate_step_name",
]
