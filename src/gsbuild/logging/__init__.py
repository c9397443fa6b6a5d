"""Logging setup for gsbuild.

Library modules log through ``logging.getLogger(__name__)``; the CLI calls
:func:`init_logging` once so that every ``gsbuild.*`` logger shares the
handlers of a :class:`LogManager`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from gsbuild.logging.manager import SUCCESS_LEVEL, TRACE_LEVEL, LogManager


def init_logging(preset: str | None = None, config: Mapping[str, Any] | None = None) -> LogManager:
    """Configure the ``gsbuild`` logger tree.

    Args:
        preset: Logging preset (``dev``, ``prod``, ``debug``).
        config: Explicit logger settings.

    Returns:
        The root LogManager.
    """
    manager = LogManager(name="gsbuild", preset=preset, config=config)

    std_logger = logging.getLogger("gsbuild")
    for handler in list(std_logger.handlers):
        std_logger.removeHandler(handler)
    for handler in manager.handlers:
        std_logger.addHandler(handler)
    std_logger.setLevel(TRACE_LEVEL)
    std_logger.propagate = False

    return manager


__all__ = [
    "LogManager",
    "SUCCESS_LEVEL",
    "TRACE_LEVEL",
    "init_logging",
]
