"""Build dependency selection per distribution."""

from __future__ import annotations

from dataclasses import dataclass

from gsbuild.provision.exceptions import UnsupportedOperatingSystemError
from gsbuild.provision.osinfo import OsRelease

UBUNTU_PACKAGES: tuple[str, ...] = (
    "clang",
    "build-essential",
    "wget",
    "git",
    "subversion",
    "cmake",
    "libffi-dev",
    "libxml2-dev",
    "libgnutls28-dev",
    "libicu-dev",
    "libblocksruntime-dev",
    "libkqueue-dev",
    "libpthread-workqueue-dev",
    "autoconf",
    "libtool",
    "libjpeg-dev",
    "libtiff-dev",
    "libcairo2-dev",
    "libx11-dev",
    "libxt-dev",
    "libxft-dev",
    "libxrandr-dev",
    "g++",
)

DEBIAN_PACKAGES: tuple[str, ...] = (
    "clang",
    "build-essential",
    "git",
    "subversion",
    "cmake",
    "libc6-dev",
    "libxml2-dev",
    "libffi-dev",
    "libicu-dev",
    "libblocksruntime-dev",
    "libkqueue-dev",
    "libpthread-workqueue-dev",
    "autoconf",
    "libtool",
    "libjpeg-dev",
    "libtiff-dev",
    "libcairo2-dev",
    "libx11-dev",
    "libxt-dev",
    "libxft-dev",
    "libxrandr-dev",
    "libgnutls28-dev",
)

#: Extra packages needed only by the optional application builds.
APP_PACKAGES: tuple[str, ...] = ("curl",)

SUPPORTED_PACKAGES: dict[str, tuple[str, ...]] = {
    "ubuntu": UBUNTU_PACKAGES,
    "debian": DEBIAN_PACKAGES,
}

#: Debian releases that need a backports source, by VERSION_ID.
DEBIAN_BACKPORTS: dict[str, str] = {
    "10": "deb http://deb.debian.org/debian buster-backports main",
}

BACKPORTS_LIST = "/etc/apt/sources.list.d/backports.list"


@dataclass(frozen=True, slots=True)
class DependencySet:
    """Packages to install on a given host.

    Attributes:
        os_id: Distribution the set was selected for.
        packages: Package names, in install order.
        backports: APT source line to enable first, if any.
    """

    os_id: str
    packages: tuple[str, ...]
    backports: str | None = None


def select_dependencies(release: OsRelease, *, build_apps: bool = False) -> DependencySet:
    """Pick the dependency set for ``release``.

    Raises:
        UnsupportedOperatingSystemError: For anything but ubuntu and debian.

    Examples:
        >>> deps = select_dependencies(OsRelease("debian", "12"), build_apps=True)
        >>> deps.packages[-1]
        'curl'
    """
    base = SUPPORTED_PACKAGES.get(release.id)
    if base is None:
        raise UnsupportedOperatingSystemError(release.id)

    packages = base + APP_PACKAGES if build_apps else base
    backports = DEBIAN_BACKPORTS.get(release.version_id) if release.id == "debian" else None
    return DependencySet(os_id=release.id, packages=packages, backports=backports)


def _privileged(prefix: str, command: str) -> str:
    return f"{prefix} {command}" if prefix else command


def install_commands(deps: DependencySet, *, sudo: str = "sudo") -> tuple[str, ...]:
    """Render the package manager invocations for ``deps``.

    Examples:
        >>> install_commands(DependencySet("ubuntu", ("git",)), sudo="")
        ('apt-get update', 'apt-get -y install git')
    """
    commands = [_privileged(sudo, "apt-get update")]
    if deps.backports:
        commands.append(f"echo '{deps.backports}' | {_privileged(sudo, 'tee')} {BACKPORTS_LIST}")
        commands.append(_privileged(sudo, "apt-get update"))
    commands.append(_privileged(sudo, "apt-get -y install " + " ".join(deps.packages)))
    return tuple(commands)


__all__ = [
    "APP_PACKAGES",
    "DEBIAN_BACKPORTS",
    "DEBIAN_PACKAGES",
    "DependencySet",
    "SUPPORTED_PACKAGES",
    "UBUNTU_PACKAGES",
    "install_commands",
    "select_dependencies",
]
