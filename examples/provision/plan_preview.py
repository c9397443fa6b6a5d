"""Print the GNUstep build plan for this host.

Usage:
    python examples/provision/plan_preview.py [--apps]
"""

from __future__ import annotations

import sys

from gsbuild.config import load_config
from gsbuild.pipeline import select_steps
from gsbuild.provision import BuildSettings, UnsupportedOperatingSystemError, build_plan, read_os_release


def main() -> None:
    """Show every step a run would execute."""
    build_apps = "--apps" in sys.argv[1:]
    settings = BuildSettings.from_config(load_config(), build_apps=build_apps)
    try:
        release = read_os_release()
    except UnsupportedOperatingSystemError as exc:
        print(exc)
        return

    steps = select_steps(build_plan(release, settings), build_apps=build_apps)
    print(f"{release} -> {settings.build_dir}")
    for index, step in enumerate(steps, start=1):
        print(f"{index:>3}. {step.name:<30} {step.type.value:<9} {step.working_dir or ''}")


if __name__ == "__main__":
    main()
