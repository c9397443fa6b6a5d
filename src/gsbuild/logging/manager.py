"""Rich-backed logger with presets and structured context.

``LogManager`` is a :class:`logging.Logger` subclass. The logger itself
always accepts every level; handlers decide what gets written. Console
output goes through :class:`rich.logging.RichHandler`, file output through
a rotating file handler.

Presets:

- ``dev``: console only, DEBUG
- ``prod``: file only, INFO
- ``debug``: console (TRACE) and file (TRACE)
"""

from __future__ import annotations

import logging
import logging.handlers
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from box import Box
from rich.console import Console
from rich.logging import RichHandler

from gsbuild.config.exceptions import ConfigError
from gsbuild.config.loader import deep_merge, get_config

TRACE_LEVEL = 5
SUCCESS_LEVEL = 25

logging.addLevelName(TRACE_LEVEL, "TRACE")
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

FALLBACK_DEFAULTS: dict[str, Any] = {
    "output": "console",
    "console": {"level": "INFO", "show_path": False},
    "file": {
        "path": "gsbuild.log",
        "level": "DEBUG",
        "max_bytes": 10 * 1024 * 1024,
        "backup_count": 3,
    },
}

FALLBACK_PRESETS: dict[str, dict[str, Any]] = {
    "dev": {"output": "console", "console": {"level": "DEBUG"}},
    "prod": {"output": "file", "file": {"level": "INFO"}},
    "debug": {"output": "both", "console": {"level": "TRACE"}, "file": {"level": "TRACE"}},
}

_RESERVED_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


def _level_value(level: str | int) -> int:
    """Translate a level name (including TRACE/SUCCESS) to its number."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _global_logger_section() -> Mapping[str, Any]:
    """Return the ``logger`` section of the global config, or empty."""
    try:
        section = get_config().get("logger", {})
    except (ConfigError, OSError):
        return {}
    return section if isinstance(section, Mapping) else {}


class LogManager(logging.Logger):
    """Logger with presets, rich console output and structured context.

    Args:
        name: Logger name.
        preset: One of ``dev``, ``prod``, ``debug``.
        config: Explicit settings merged over defaults and preset.

    Examples:
        >>> log = LogManager(name="demo", config={"output": "console"})
        >>> log.success("installed", component="libobjc2")  # doctest: +SKIP
    """

    def __init__(
        self,
        name: str = "gsbuild",
        preset: str | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(name, TRACE_LEVEL)
        self._config = self._resolve_config(preset, config)
        self._setup_handlers()

    @staticmethod
    def _resolve_config(preset: str | None, config: Mapping[str, Any] | None) -> Box:
        """Merge fallback defaults, global config, preset and explicit config."""
        section = _global_logger_section()
        merged = deep_merge(FALLBACK_DEFAULTS, section.get("defaults", {}) or {})

        if preset is not None:
            presets = deep_merge(FALLBACK_PRESETS, section.get("presets", {}) or {})
            if preset not in presets:
                raise ValueError(f"Unknown logging preset {preset!r} (expected one of {sorted(presets)})")
            merged = deep_merge(merged, presets[preset])

        if config:
            merged = deep_merge(merged, config)
        return Box(merged, default_box=True)

    def _setup_handlers(self) -> None:
        output = self._config.output
        if output in ("console", "both"):
            handler = RichHandler(
                console=Console(stderr=True),
                show_path=bool(self._config.console.show_path),
                rich_tracebacks=True,
                markup=False,
            )
            handler.setLevel(_level_value(self._config.console.level or "INFO"))
            self.addHandler(handler)

        if output in ("file", "both"):
            file_cfg = self._config.file
            path = Path(file_cfg.path or "gsbuild.log").expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                path,
                maxBytes=int(file_cfg.max_bytes or 0),
                backupCount=int(file_cfg.backup_count or 0),
                encoding="utf-8",
            )
            file_handler.setLevel(_level_value(file_cfg.level or "DEBUG"))
            file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
            self.addHandler(file_handler)

    @staticmethod
    def _with_context(msg: str, context: Mapping[str, Any]) -> str:
        """Append ``key=value`` pairs to a message."""
        if not context:
            return msg
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{msg} | {pairs}"

    def _log_structured(self, level: int, msg: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        reserved = {k: v for k, v in kwargs.items() if k in _RESERVED_KWARGS}
        context = {k: v for k, v in kwargs.items() if k not in _RESERVED_KWARGS}
        reserved.setdefault("stacklevel", 3)
        self._log(level, self._with_context(msg, context), args, **reserved)

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log below DEBUG."""
        self._log_structured(TRACE_LEVEL, msg, args, kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._log_structured(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._log_structured(logging.INFO, msg, args, kwargs)

    def success(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a completed operation between INFO and WARNING."""
        self._log_structured(SUCCESS_LEVEL, msg, args, kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._log_structured(logging.WARNING, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._log_structured(logging.ERROR, msg, args, kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        self._log_structured(logging.CRITICAL, msg, args, kwargs)


__all__ = [
    "FALLBACK_DEFAULTS",
    "FALLBACK_PRESETS",
    "LogManager",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
]
