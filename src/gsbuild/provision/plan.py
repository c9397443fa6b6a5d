"""The GNUstep provisioning plan.

:func:`build_plan` turns the OS identity and build settings into the ordered
step list run by :class:`~gsbuild.pipeline.runner.PipelineRunner`. The list
is declarative: optional application steps are always present and flagged
``optional``; the runner drops them unless apps are enabled.
"""

from __future__ import annotations

import shlex

from gsbuild.pipeline.models import StepConfig, StepPhase, StepType
from gsbuild.provision.environment import build_exports, persisted_lines
from gsbuild.provision.osinfo import OsRelease
from gsbuild.provision.packages import install_commands, select_dependencies
from gsbuild.provision.settings import BuildSettings
from gsbuild.provision.shellrc import RC_FILE_ENV_VAR
from gsbuild.provision.sources import Component, app_components, checkout_commands, core_components


def _priv(prefix: str, command: str) -> str:
    return f"{prefix} {command}" if prefix else command


def _install(settings: BuildSettings, *, ldconfig: bool = True, make_args: str = "") -> tuple[str, ...]:
    """``make install`` (keeping the environment) and optionally ``ldconfig``."""
    install = _priv(settings.install, f"make {make_args}install")
    return (install, _priv(settings.sudo, "ldconfig")) if ldconfig else (install,)


def _make_configure(settings: BuildSettings) -> str:
    flags = " ".join(shlex.quote(flag) for flag in settings.make_flags)
    return f"CC={shlex.quote(settings.cc)} ./configure {flags}".rstrip()


def _checkout_step(
    name: str, components: tuple[Component, ...], *, optional: bool, interactive: bool = True
) -> StepConfig:
    commands: list[str] = []
    for component in components:
        commands.extend(checkout_commands(component))
    return StepConfig(
        name=name,
        type=StepType.SHELL,
        commands=tuple(commands),
        working_dir=".",
        interactive=interactive,
        optional=optional,
        phase=StepPhase.APPS if optional else StepPhase.CHECKOUT,
        description="Checking out application sources" if optional else "Checking out sources",
    )


def _source_step(name: str, settings: BuildSettings, *, required: bool, description: str) -> StepConfig:
    return StepConfig(
        name=name,
        type=StepType.SOURCE,
        script=settings.gnustep_sh,
        required=required,
        phase=StepPhase.FINALIZE if not required else StepPhase.ENVIRONMENT,
        description=description,
    )


def _cmake_step(name: str, directory: str, cmake_args: tuple[str, ...], settings: BuildSettings) -> StepConfig:
    args = " ".join(cmake_args)
    return StepConfig(
        name=name,
        commands=(
            "rm -rf build",
            f"cmake -S . -B build {args}",
            f"make -C build -j{settings.jobs}",
            *_install(settings, make_args="-C build "),
        ),
        working_dir=directory,
        interactive=True,
        description=f"Building {directory}",
    )


def _configure_step(name: str, directory: str, settings: BuildSettings, configure: str = "./configure") -> StepConfig:
    return StepConfig(
        name=name,
        commands=(configure, f"make -j{settings.jobs}", *_install(settings)),
        working_dir=directory,
        interactive=True,
        description=f"Building GNUstep {directory}",
    )


def _app_step(name: str, directory: str, settings: BuildSettings, *, configure: bool = False) -> StepConfig:
    first = "./configure" if configure else "make clean"
    return StepConfig(
        name=name,
        commands=(first, f"make -j{settings.jobs}", _priv(settings.install, "make install")),
        working_dir=directory,
        interactive=True,
        optional=True,
        phase=StepPhase.APPS,
        description=f"Building {directory}",
    )


def build_plan(release: OsRelease, settings: BuildSettings) -> tuple[StepConfig, ...]:
    """Return the full ordered step list for ``release``.

    Args:
        release: Detected host OS.
        settings: Build settings.

    Returns:
        Every step, optional application steps included.

    Raises:
        UnsupportedOperatingSystemError: If the OS has no dependency set.
    """
    deps = select_dependencies(release, build_apps=settings.build_apps)
    exports = build_exports(settings)
    exports[RC_FILE_ENV_VAR] = settings.shell_rc
    cc, cxx = shlex.quote(settings.cc), shlex.quote(settings.cxx)
    prefix = settings.prefix
    corebase_configure = (
        'CPP="$(gnustep-config --variable=CPP)" '
        'CPPFLAGS="$(gnustep-config --objc-flags)" '
        'CC="$(gnustep-config --variable=CC)" '
        'CFLAGS="$(gnustep-config --objc-flags)" '
        'LDFLAGS="$(gnustep-config --objc-libs)" '
        "./configure"
    )

    return (
        StepConfig(
            name="install-dependencies",
            commands=install_commands(deps, sudo=settings.sudo),
            interactive=True,
            phase=StepPhase.DEPENDENCIES,
            description=f"Installing dependencies for {release}",
        ),
        StepConfig(
            name="prepare-build-dir",
            commands=(f"mkdir -p {shlex.quote(str(settings.build_dir))}",),
            phase=StepPhase.ENVIRONMENT,
            description="Setting up build environment",
        ),
        StepConfig(
            name="export-build-env",
            type=StepType.ENV,
            env=exports,
            phase=StepPhase.ENVIRONMENT,
            description="Exporting compiler and search path variables",
        ),
        # one pause after all checkouts
        _checkout_step(
            "checkout-sources",
            core_components(settings),
            optional=False,
            interactive=not settings.build_apps,
        ),
        _checkout_step("checkout-apps", app_components(settings), optional=True),
        StepConfig(
            name="build-make-bootstrap",
            commands=(_make_configure(settings), f"make -j{settings.jobs}", *_install(settings)),
            working_dir="tools-make",
            interactive=True,
            description="Building GNUstep-make (1st pass)",
        ),
        _source_step(
            "load-gnustep-env",
            settings,
            required=True,
            description="Sourcing GNUstep environment script",
        ),
        StepConfig(
            name="persist-shell-env",
            type=StepType.CALLABLE,
            callable="gsbuild.provision.shellrc:persist_environment",
            args=persisted_lines(settings),
            interactive=True,
            phase=StepPhase.ENVIRONMENT,
            description="Persisting GNUstep environment to the shell startup file",
        ),
        _cmake_step(
            "build-libdispatch",
            "swift-corelibs-libdispatch",
            (
                f"-DCMAKE_C_COMPILER={cc}",
                f"-DCMAKE_CXX_COMPILER={cxx}",
                "-DCMAKE_BUILD_TYPE=Release",
                f"-DCMAKE_INSTALL_PREFIX={prefix}",
                "-DCMAKE_INSTALL_LIBDIR=System/Library/Libraries",
                "-DINSTALL_DISPATCH_HEADERS_DIR=System/Library/Headers/dispatch",
                "-DINSTALL_BLOCK_HEADERS_DIR=System/Library/Headers/block",
                "-DINSTALL_OS_HEADERS_DIR=System/Library/Headers/os",
                "-DUSE_GOLD_LINKER=NO",
            ),
            settings,
        ),
        _cmake_step(
            "build-libobjc2",
            "libobjc2",
            (
                f"-DCMAKE_C_COMPILER={cc}",
                f"-DCMAKE_CXX_COMPILER={cxx}",
                f"-DCMAKE_ASM_COMPILER={cc}",
                "-DTESTS=OFF",
                "-DBUILD_STATIC_LIBOBJC=ON",
                f"-DCMAKE_INSTALL_PREFIX={prefix}",
            ),
            settings,
        ),
        StepConfig(
            name="build-make",
            commands=(_make_configure(settings), f"make -j{settings.jobs}", *_install(settings, ldconfig=False)),
            working_dir="tools-make",
            interactive=True,
            description="Building GNUstep-make (2nd pass)",
        ),
        _source_step(
            "reload-gnustep-env",
            settings,
            required=True,
            description="Re-sourcing GNUstep environment script",
        ),
        _configure_step("build-libs-base", "libs-base", settings),
        _configure_step("build-libs-corebase", "libs-corebase", settings, configure=corebase_configure),
        _configure_step("build-libs-gui", "libs-gui", settings),
        _configure_step("build-libs-back", "libs-back", settings),
        _source_step(
            "final-gnustep-env",
            settings,
            required=False,
            description="Loading final GNUstep environment",
        ),
        _app_step("build-app-projectcenter", "apps-projectcenter", settings),
        _app_step("build-app-gorm", "apps-gorm", settings),
        _app_step("build-app-gworkspace", "apps-gworkspace", settings, configure=True),
        _app_step("build-app-systempreferences", "apps-systempreferences", settings),
    )


__all__ = [
    "build_plan",
]
