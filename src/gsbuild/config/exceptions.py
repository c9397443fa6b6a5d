"""Base exceptions for gsbuild and its configuration layer.

Exception hierarchy::

    GsbuildError (root of every gsbuild error)
        ConfigError (configuration layer)
            ConfigFileNotFoundError
            ConfigFormatError
"""

from __future__ import annotations


class GsbuildError(Exception):
    """Root exception for all gsbuild errors."""


class ConfigError(GsbuildError):
    """Base exception for configuration loading errors."""


class ConfigFileNotFoundError(ConfigError, FileNotFoundError):
    """An explicitly requested configuration file does not exist."""


class ConfigFormatError(ConfigError, ValueError):
    """A configuration file could not be parsed or has the wrong shape."""


__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "GsbuildError",
]
