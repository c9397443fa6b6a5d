"""Compiler and search-path variables exported for every build step."""

from __future__ import annotations

from gsbuild.provision.settings import BuildSettings


def build_exports(settings: BuildSettings) -> dict[str, str]:
    """Return the variables exported before the first build.

    Search paths reference their previous value so they are extended, not
    replaced; the env step expands them against the pipeline environment.

    Examples:
        >>> from pathlib import Path
        >>> exports = build_exports(BuildSettings(build_dir=Path("/tmp/gs")))
        >>> exports["LD_LIBRARY_PATH"]
        '/usr/local/lib:${LD_LIBRARY_PATH}'
    """
    return {
        "CC": settings.cc,
        "CXX": settings.cxx,
        "CXXFLAGS": settings.cxxflags,
        "RUNTIME_VERSION": settings.runtime_version,
        "PKG_CONFIG_PATH": f"{settings.local_lib}/pkgconfig:${{PKG_CONFIG_PATH}}",
        "LD_LIBRARY_PATH": f"{settings.local_lib}:${{LD_LIBRARY_PATH}}",
        "LDFLAGS": settings.ldflags,
    }


def persisted_lines(settings: BuildSettings) -> tuple[str, ...]:
    """Lines appended to the shell startup file.

    ``${RUNTIME_VERSION}`` and ``${CXXFLAGS}`` are left for the callable
    step to expand against the pipeline environment at run time.
    """
    return (
        f". {settings.gnustep_sh}",
        'export RUNTIME_VERSION="${RUNTIME_VERSION}"',
        'export CXXFLAGS="${CXXFLAGS}"',
    )


__all__ = [
    "build_exports",
    "persisted_lines",
]
