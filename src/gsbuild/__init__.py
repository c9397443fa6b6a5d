"""gsbuild: provision a GNUstep development environment from source."""

from gsbuild.meta import __app_name__, __version__

__all__ = [
    "__app_name__",
    "__version__",
]
