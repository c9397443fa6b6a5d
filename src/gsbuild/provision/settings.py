"""Build settings read from the ``build``, ``sources`` and ``privilege`` sections."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from gsbuild.config.exceptions import ConfigFormatError
from gsbuild.pipeline.exceptions import PipelineConfigError
from gsbuild.pipeline.validators import validate_bool

DEFAULT_MAKE_FLAGS: tuple[str, ...] = (
    "--with-layout=gnustep",
    "--disable-importing-config-file",
    "--enable-native-objc-exceptions",
    "--enable-objc-arc",
    "--enable-install-ld-so-conf",
    "--with-library-combo=ng-gnu-gnu",
    "--enable-debug-by-default",
)


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """Everything the plan builder needs besides the OS identity.

    Attributes:
        build_dir: Absolute directory sources are cloned into.
        prefix: Installation prefix of the GNUstep hierarchy.
        cc: C compiler.
        cxx: C++ compiler.
        cxxflags: C++ flags exported for every build.
        runtime_version: Objective-C runtime version exported as RUNTIME_VERSION.
        ldflags: Linker flags exported as LDFLAGS.
        local_lib: Directory prepended to LD_LIBRARY_PATH and PKG_CONFIG_PATH.
        jobs: Parallel make jobs.
        gnustep_sh: Environment script installed by tools-make.
        make_flags: configure flags for tools-make.
        base_url: Git base URL of the GNUstep repositories.
        libdispatch_url: Git URL of libdispatch.
        sudo: Prefix for privileged commands (apt-get, ldconfig).
        install: Prefix for ``make install`` (keeps the environment).
        shell_rc: Shell startup file the environment is persisted to.
        build_apps: Whether optional applications are part of the run.
    """

    build_dir: Path
    prefix: str = "/usr/GNUstep"
    cc: str = "clang"
    cxx: str = "clang++"
    cxxflags: str = "-std=c++11"
    runtime_version: str = "gnustep-2.1"
    ldflags: str = "-L/usr/local/lib"
    local_lib: str = "/usr/local/lib"
    jobs: int = field(default_factory=lambda: os.cpu_count() or 1)
    gnustep_sh: str = "/usr/GNUstep/System/Library/Makefiles/GNUstep.sh"
    make_flags: tuple[str, ...] = DEFAULT_MAKE_FLAGS
    base_url: str = "https://github.com/gnustep"
    libdispatch_url: str = "https://github.com/apple/swift-corelibs-libdispatch.git"
    sudo: str = "sudo"
    install: str = "sudo -E"
    shell_rc: str = "~/.bashrc"
    build_apps: bool = False

    @classmethod
    def from_config(cls, config: Mapping[str, Any], **overrides: Any) -> BuildSettings:
        """Build settings from a loaded configuration.

        Args:
            config: Full configuration (``build``, ``sources``, ``privilege``,
                ``pipeline`` and ``shell_rc`` keys are read).
            **overrides: Values taking precedence (None is ignored).

        Raises:
            ConfigFormatError: If a value has the wrong type.
        """
        build: Mapping[str, Any] = dict(config.get("build") or {})
        sources: Mapping[str, Any] = dict(config.get("sources") or {})
        privilege: Mapping[str, Any] = dict(config.get("privilege") or {})
        pipeline: Mapping[str, Any] = dict(config.get("pipeline") or {})

        values: dict[str, Any] = {
            "build_dir": pipeline.get("build_dir") or "GNUstep-build",
            "build_apps": pipeline.get("build_apps", False),
            "shell_rc": config.get("shell_rc") or "~/.bashrc",
        }
        for key in ("prefix", "cc", "cxx", "cxxflags", "runtime_version", "ldflags", "local_lib", "gnustep_sh"):
            if build.get(key) is not None:
                values[key] = str(build[key])
        if build.get("jobs") is not None:
            values["jobs"] = build["jobs"]
        if build.get("make_flags") is not None:
            values["make_flags"] = build["make_flags"]
        for key in ("base_url", "libdispatch_url"):
            if sources.get(key):
                values[key] = str(sources[key]).rstrip("/")
        for key in ("sudo", "install"):
            if privilege.get(key) is not None:
                values[key] = str(privilege[key])

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls._coerce(values)

    @classmethod
    def _coerce(cls, values: dict[str, Any]) -> BuildSettings:
        try:
            jobs = int(values.pop("jobs", os.cpu_count() or 1))
        except (TypeError, ValueError):
            raise ConfigFormatError("build.jobs must be an integer") from None
        if jobs < 1:
            raise ConfigFormatError(f"build.jobs must be at least 1, got {jobs}")

        make_flags = values.pop("make_flags", DEFAULT_MAKE_FLAGS)
        if isinstance(make_flags, str):
            make_flags = make_flags.split()
        if not isinstance(make_flags, (list, tuple)):
            raise ConfigFormatError("build.make_flags must be a list")

        try:
            build_apps = validate_bool("pipeline.build_apps", values.pop("build_apps", False))
        except PipelineConfigError as exc:
            raise ConfigFormatError(str(exc)) from None

        build_dir = Path(str(values.pop("build_dir"))).expanduser().absolute()
        return cls(
            build_dir=build_dir,
            jobs=jobs,
            make_flags=tuple(str(flag) for flag in make_flags),
            build_apps=build_apps,
            **values,
        )


__all__ = [
    "BuildSettings",
    "DEFAULT_MAKE_FLAGS",
]
