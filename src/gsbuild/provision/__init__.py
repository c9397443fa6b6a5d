"""GNUstep provisioning plan: OS detection, dependencies, sources and build steps.

Examples:
    >>> from gsbuild.provision import BuildSettings, build_plan, read_os_release
    >>> release = read_os_release()  # doctest: +SKIP
    >>> steps = build_plan(release, BuildSettings.from_config({}))  # doctest: +SKIP
"""

from gsbuild.provision.environment import build_exports, persisted_lines
from gsbuild.provision.exceptions import ProvisionError, UnsupportedOperatingSystemError
from gsbuild.provision.osinfo import OsRelease, read_os_release
from gsbuild.provision.packages import DependencySet, install_commands, select_dependencies
from gsbuild.provision.plan import build_plan
from gsbuild.provision.settings import BuildSettings
from gsbuild.provision.shellrc import append_lines, persist_environment
from gsbuild.provision.sources import Component, app_components, checkout_commands, core_components

__all__ = [
    "BuildSettings",
    "Component",
    "DependencySet",
    "OsRelease",
    "ProvisionError",
    "UnsupportedOperatingSystemError",
    "app_components",
    "append_lines",
    "build_exports",
    "build_plan",
    "checkout_commands",
    "core_components",
    "install_commands",
    "persist_environment",
    "persisted_lines",
    "read_os_release",
    "select_dependencies",
]
