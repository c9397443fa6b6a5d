"""Configuration management for gsbuild.

Examples:
    >>> from gsbuild.config import load_config
    >>> config = load_config()  # doctest: +SKIP
    >>> config.pipeline.build_apps  # doctest: +SKIP
    False
"""

from gsbuild.config.exceptions import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormatError,
    GsbuildError,
)
from gsbuild.config.loader import (
    ConfigLoader,
    deep_merge,
    get_config,
    load_config,
    load_from_file,
    reset_config,
)

__all__ = [
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormatError",
    "ConfigLoader",
    "GsbuildError",
    "deep_merge",
    "get_config",
    "load_config",
    "load_from_file",
    "reset_config",
]
