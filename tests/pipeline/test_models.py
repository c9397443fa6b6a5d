"""Tests for the gsbuild.pipeline.models module."""

from __future__ import annotations

from pathlib import Path

import pytest

from gsbuild.pipeline.exceptions import PipelineConfigError
from gsbuild.pipeline.models import (
    PipelineConfig,
    PipelineResult,
    PipelineState,
    StepConfig,
    StepPhase,
    StepResult,
    StepStatus,
    StepType,
)


class TestStepConfig:
    """Tests for StepConfig validation."""

    def test_shell_defaults(self) -> None:
        """A shell step needs only a name and commands."""
        config = StepConfig(name="build", commands=("make",))
        assert config.type == StepType.SHELL
        assert config.phase == StepPhase.BUILD
        assert config.working_dir is None
        assert config.interactive is False
        assert config.optional is False

    def test_single_command_string(self) -> None:
        """A single command string becomes a one-element tuple."""
        config = StepConfig(name="build", commands="make")  # type: ignore[arg-type]
        assert config.commands == ("make",)

    def test_command_list(self) -> None:
        """A command list is frozen into a tuple."""
        config = StepConfig(name="build", commands=["make", "make install"])  # type: ignore[arg-type]
        assert config.commands == ("make", "make install")

    def test_shell_requires_commands(self) -> None:
        """A shell step without commands is rejected."""
        with pytest.raises(PipelineConfigError, match="at least one command"):
            StepConfig(name="empty")

    def test_env_requires_variables(self) -> None:
        """An env step without variables is rejected."""
        with pytest.raises(PipelineConfigError, match="env step"):
            StepConfig(name="env", type=StepType.ENV)

    def test_source_requires_script(self) -> None:
        """A source step without a script is rejected."""
        with pytest.raises(PipelineConfigError, match="script"):
            StepConfig(name="load", type=StepType.SOURCE)

    def test_callable_requires_target(self) -> None:
        """A callable step without a target is rejected."""
        with pytest.raises(PipelineConfigError, match="callable"):
            StepConfig(name="call", type=StepType.CALLABLE)

    def test_callable_target_format(self) -> None:
        """Callable targets must be module:function."""
        with pytest.raises(PipelineConfigError, match="Invalid callable target"):
            StepConfig(name="call", type=StepType.CALLABLE, callable="no_colon")

    def test_invalid_name(self) -> None:
        """Step names are validated."""
        with pytest.raises(PipelineConfigError):
            StepConfig(name="1-bad", commands=("true",))

    def test_invalid_env_key(self) -> None:
        """Environment variable names are validated."""
        with pytest.raises(PipelineConfigError, match="Invalid environment variable name"):
            StepConfig(name="env", type=StepType.ENV, env={"BAD-NAME": "x"})

    def test_non_positive_timeout(self) -> None:
        """Timeouts must be positive."""
        with pytest.raises(PipelineConfigError, match="timeout"):
            StepConfig(name="build", commands=("make",), timeout=0)

    def test_frozen(self) -> None:
        """Step configurations are immutable."""
        config = StepConfig(name="build", commands=("make",))
        with pytest.raises(AttributeError):
            config.name = "other"  # type: ignore[misc]


class TestPipelineConfig:
    """Tests for PipelineConfig."""

    def test_defaults(self) -> None:
        """Defaults match a non-interactive core-only run."""
        config = PipelineConfig()
        assert config.prompt_after_steps is False
        assert config.build_apps is False
        assert config.build_dir == Path("GNUstep-build")
        assert config.name == "gnustep"

    def test_build_dir_expanded(self) -> None:
        """A string build directory becomes an expanded Path."""
        config = PipelineConfig(build_dir="~/gs")  # type: ignore[arg-type]
        assert config.build_dir == Path.home() / "gs"

    def test_empty_name(self) -> None:
        """The pipeline name cannot be empty."""
        with pytest.raises(PipelineConfigError):
            PipelineConfig(name="")

    def test_bad_default_timeout(self) -> None:
        """The default timeout must be positive."""
        with pytest.raises(PipelineConfigError):
            PipelineConfig(default_timeout=-1)


class TestResults:
    """Tests for StepResult and PipelineResult."""

    @pytest.mark.parametrize(
        ("status", "ok"),
        [
            (StepStatus.SUCCESS, True),
            (StepStatus.SKIPPED, True),
            (StepStatus.FAILED, False),
            (StepStatus.TIMEOUT, False),
        ],
    )
    def test_step_ok(self, status: StepStatus, ok: bool) -> None:
        """Only success and skipped let the pipeline continue."""
        assert StepResult(name="s", status=status).ok is ok

    def test_pipeline_success_requires_completed(self) -> None:
        """A failed run is never successful, whatever its results."""
        result = PipelineResult(name="p", results=[StepResult(name="a", status=StepStatus.SUCCESS)])
        result.state = PipelineState.FAILED
        assert result.success is False
        result.state = PipelineState.COMPLETED
        assert result.success is True

    def test_failed_steps_and_names(self) -> None:
        """Failed steps are listed in order."""
        result = PipelineResult(
            name="p",
            results=[
                StepResult(name="a", status=StepStatus.SUCCESS),
                StepResult(name="b", status=StepStatus.TIMEOUT),
            ],
        )
        assert result.step_names == ["a", "b"]
        assert [r.name for r in result.failed_steps] == ["b"]

    @pytest.mark.parametrize(
        ("state", "terminal"),
        [
            (PipelineState.IDLE, False),
            (PipelineState.RUNNING, False),
            (PipelineState.AWAITING_CONFIRMATION, False),
            (PipelineState.COMPLETED, True),
            (PipelineState.FAILED, True),
            (PipelineState.CANCELLED, True),
        ],
    )
    def test_terminal_states(self, state: PipelineState, terminal: bool) -> None:
        """Completed, failed and cancelled end a run."""
        assert state.terminal is terminal
