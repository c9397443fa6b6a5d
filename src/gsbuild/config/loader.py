"""Cascading YAML configuration loader.

Configuration is assembled from several locations, later ones overriding
earlier ones key by key (deep merge):

1. Package defaults shipped as ``gsbuild/gsbuild.conf.yml``
2. User config ``~/.config/gsbuild/gsbuild.conf.yml``
3. Project config ``./gsbuild.conf.yml``
4. Explicit file (``filename`` argument or ``GSBUILD_CONFIG`` env var)

The merged result is exposed as a :class:`box.Box` for dot access.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from box import Box

from gsbuild.config.exceptions import ConfigFileNotFoundError, ConfigFormatError

log = logging.getLogger(__name__)

CONFIG_FILENAME = "gsbuild.conf.yml"
CONFIG_ENV_VAR = "GSBUILD_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / CONFIG_FILENAME

_config: Box | None = None


def _user_config_path() -> Path:
    """Return the per-user configuration file location."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "gsbuild" / CONFIG_FILENAME


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML file into a dict.

    Args:
        path: File to read.

    Returns:
        Parsed mapping (empty for an empty file).

    Raises:
        ConfigFormatError: If the file is not valid YAML or not a mapping.
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigFormatError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ConfigFormatError(f"Top level of {path} must be a mapping, got {type(data).__name__}")
    return dict(data)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Examples:
        >>> deep_merge({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        {'a': {'x': 1, 'y': 3}}
    """
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Load gsbuild configuration from the cascade of known locations.

    Args:
        filename: Optional explicit configuration file, applied last.
        cascade: If False, only the package defaults and ``filename`` are read.

    Examples:
        >>> loader = ConfigLoader(cascade=False)
        >>> loader.config.pipeline.build_dir
        'GNUstep-build'
    """

    def __init__(self, filename: str | os.PathLike[str] | None = None, *, cascade: bool = True) -> None:
        self._filename = filename
        self._cascade = cascade
        self._config: Box | None = None

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Box:
        """Load package defaults overridden by a single file."""
        return cls(path, cascade=False).config

    @property
    def config(self) -> Box:
        """Return the merged configuration, loading it on first access."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def sources(self) -> list[Path]:
        """Return the ordered list of files that take part in the merge."""
        paths = [DEFAULT_CONFIG_PATH]
        if self._cascade:
            paths.extend([_user_config_path(), Path.cwd() / CONFIG_FILENAME])
        explicit = self._filename or os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            explicit_path = Path(explicit).expanduser()
            if not explicit_path.is_file():
                raise ConfigFileNotFoundError(f"Config file not found: {explicit_path}")
            paths.append(explicit_path)
        return paths

    def load(self) -> Box:
        """Read and merge every existing source file."""
        merged: dict[str, Any] = {}
        for path in self.sources():
            if not path.is_file():
                continue
            log.debug("Loading config from %s", path)
            merged = deep_merge(merged, _read_yaml(path))
        return Box(merged, default_box=True)


def load_config(filename: str | os.PathLike[str] | None = None) -> Box:
    """Load the cascading configuration and cache it globally.

    Args:
        filename: Optional explicit file applied on top of the cascade.

    Returns:
        Merged configuration.
    """
    global _config  # pylint: disable=global-statement
    _config = ConfigLoader(filename).config
    return _config


def load_from_file(path: str | os.PathLike[str]) -> Box:
    """Load package defaults overridden by ``path`` (no cascade)."""
    return ConfigLoader.from_file(path)


def get_config() -> Box:
    """Return the global configuration, loading it lazily."""
    if _config is None:
        return load_config()
    return _config


def reset_config() -> None:
    """Drop the cached global configuration."""
    global _config  # pylint: disable=global-statement
    _config = None


__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "ConfigLoader",
    "deep_merge",
    "get_config",
    "load_config",
    "load_from_file",
    "reset_config",
]
