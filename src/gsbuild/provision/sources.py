"""Upstream repositories built by the provisioning plan."""

from __future__ import annotations

import shlex
from dataclasses import dataclass

from gsbuild.provision.settings import BuildSettings


@dataclass(frozen=True, slots=True)
class Component:
    """One upstream source repository.

    Attributes:
        name: Checkout directory name.
        url: Git clone URL.
        submodules: Whether submodules must be initialized after cloning.
        optional: Application component, only checked out with apps enabled.
    """

    name: str
    url: str
    submodules: bool = False
    optional: bool = False


def core_components(settings: BuildSettings) -> tuple[Component, ...]:
    """Return the runtime, build system and library repositories."""
    base = settings.base_url
    return (
        Component("swift-corelibs-libdispatch", settings.libdispatch_url),
        Component("libobjc2", f"{base}/libobjc2.git", submodules=True),
        Component("tools-make", f"{base}/tools-make.git"),
        Component("libs-base", f"{base}/libs-base.git"),
        Component("libs-corebase", f"{base}/libs-corebase.git"),
        Component("libs-gui", f"{base}/libs-gui.git"),
        Component("libs-back", f"{base}/libs-back.git"),
    )


def app_components(settings: BuildSettings) -> tuple[Component, ...]:
    """Return the optional application repositories."""
    base = settings.base_url
    return (
        Component("apps-projectcenter", f"{base}/apps-projectcenter.git", optional=True),
        Component("apps-gorm", f"{base}/apps-gorm.git", optional=True),
        Component("apps-gworkspace", f"{base}/apps-gworkspace.git", optional=True),
        Component("apps-systempreferences", f"{base}/apps-systempreferences.git", optional=True),
    )


def checkout_commands(component: Component) -> tuple[str, ...]:
    """Commands that produce a fresh checkout of ``component``.

    A previous checkout is removed first so a re-run always starts clean.

    Examples:
        >>> checkout_commands(Component("libobjc2", "https://example.org/libobjc2.git", submodules=True))
        ('rm -rf libobjc2', 'git clone https://example.org/libobjc2.git libobjc2', 'git -C libobjc2 submodule init', 'git -C libobjc2 submodule sync', 'git -C libobjc2 submodule update')
    """
    name = shlex.quote(component.name)
    commands = [f"rm -rf {name}", f"git clone {shlex.quote(component.url)} {name}"]
    if component.submodules:
        commands.extend(f"git -C {name} submodule {action}" for action in ("init", "sync", "update"))
    return tuple(commands)


__all__ = [
    "Component",
    "app_components",
    "checkout_commands",
    "core_components",
]
