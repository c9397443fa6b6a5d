"""Tests for the gsbuild.pipeline.exceptions module."""

from __future__ import annotations

from gsbuild.config.exceptions import GsbuildError
from gsbuild.pipeline.exceptions import (
    TIMEOUT_EXIT_CODE,
    DirectoryError,
    MissingArtifactError,
    PackageInstallError,
    PipelineCancelledError,
    PipelineConfigError,
    PipelineError,
    StepFailedError,
    StepImportError,
    StepTimeoutError,
)


class TestHierarchy:
    """Tests for the exception hierarchy."""

    def test_all_are_pipeline_errors(self) -> None:
        """Every pipeline exception derives from PipelineError and GsbuildError."""
        for exc in (
            PipelineConfigError("x"),
            DirectoryError("s", "/missing"),
            StepFailedError("s", "make", 2),
            PackageInstallError("s", "apt-get", 100),
            StepTimeoutError("s", "make", 1.0),
            StepImportError("s", "m:f"),
            MissingArtifactError("s", "/x.sh"),
            PipelineCancelledError("s"),
        ):
            assert isinstance(exc, PipelineError)
            assert isinstance(exc, GsbuildError)

    def test_config_error_is_value_error(self) -> None:
        """PipelineConfigError can be caught as ValueError."""
        assert isinstance(PipelineConfigError("bad"), ValueError)

    def test_install_and_timeout_are_step_failures(self) -> None:
        """Install and timeout failures are step failures with an exit code."""
        assert issubclass(PackageInstallError, StepFailedError)
        assert issubclass(StepTimeoutError, StepFailedError)


class TestAttributes:
    """Tests for exception attributes and messages."""

    def test_step_failed(self) -> None:
        """StepFailedError names the step, command and exit code."""
        exc = StepFailedError("build-libs-base", "make -j4", 2)
        assert exc.step_name == "build-libs-base"
        assert exc.command == "make -j4"
        assert exc.exit_code == 2
        assert "make -j4" in str(exc)
        assert exc.result is None

    def test_timeout_exit_code(self) -> None:
        """A timeout reports exit code 124."""
        exc = StepTimeoutError("build", "make", 30.0)
        assert exc.exit_code == TIMEOUT_EXIT_CODE == 124
        assert exc.timeout == 30.0
        assert "timeout of 30.0s" in str(exc)

    def test_directory_error(self) -> None:
        """DirectoryError keeps the missing path."""
        exc = DirectoryError("build-libobjc2", "/tmp/gs/libobjc2")
        assert exc.path == "/tmp/gs/libobjc2"
        assert "/tmp/gs/libobjc2" in str(exc)

    def test_cancelled(self) -> None:
        """PipelineCancelledError names the last completed step."""
        exc = PipelineCancelledError("checkout-sources")
        assert exc.step_name == "checkout-sources"
        assert "cancelled" in str(exc)
