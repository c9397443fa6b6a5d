"""Command-line interface for gsbuild."""

from .app import app, main

__all__ = [
    "app",
    "main",
]
