"""CLI commands for gsbuild."""

from .detect import detect
from .plan import plan
from .run import run

__all__ = [
    "detect",
    "plan",
    "run",
]
