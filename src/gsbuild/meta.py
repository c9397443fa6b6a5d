"""Package metadata."""

__app_name__ = "gsbuild"
__version__ = "0.1.0"
__description__ = "Build and install a GNUstep development environment from source."
__license_type__ = "MIT"
