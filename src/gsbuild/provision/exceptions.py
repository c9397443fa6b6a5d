"""Exceptions raised while preparing a provisioning plan.

Exception hierarchy::

    GsbuildError
        ProvisionError
            UnsupportedOperatingSystemError
"""

from __future__ import annotations

from gsbuild.config.exceptions import GsbuildError


class ProvisionError(GsbuildError):
    """Base exception for provisioning plan errors."""


class UnsupportedOperatingSystemError(ProvisionError):
    """The host OS cannot be detected or is not supported.

    Attributes:
        os_id: Detected OS identifier, None when detection failed.
    """

    def __init__(self, os_id: str | None, message: str | None = None) -> None:
        if message is None:
            message = f"Unsupported OS: {os_id}. Supported: ubuntu, debian."
        super().__init__(message)
        self.os_id = os_id


__all__ = [
    "ProvisionError",
    "UnsupportedOperatingSystemError",
]
