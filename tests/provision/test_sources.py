"""Tests for the gsbuild.provision.sources module."""

from __future__ import annotations

from gsbuild.provision.settings import BuildSettings
from gsbuild.provision.sources import Component, app_components, checkout_commands, core_components


class TestComponents:
    """Tests for the component lists."""

    def test_core_order(self, settings: BuildSettings) -> None:
        """Core repositories are listed in checkout order."""
        names = [c.name for c in core_components(settings)]
        assert names == [
            "swift-corelibs-libdispatch",
            "libobjc2",
            "tools-make",
            "libs-base",
            "libs-corebase",
            "libs-gui",
            "libs-back",
        ]

    def test_urls(self, settings: BuildSettings) -> None:
        """GNUstep repositories share the base URL; libdispatch has its own."""
        components = {c.name: c for c in core_components(settings)}
        assert components["libs-base"].url == "https://github.com/gnustep/libs-base.git"
        assert components["swift-corelibs-libdispatch"].url == settings.libdispatch_url
        assert components["libobjc2"].submodules is True
        assert not any(c.submodules for n, c in components.items() if n != "libobjc2")

    def test_apps_are_optional(self, settings: BuildSettings) -> None:
        """Every application component is optional."""
        apps = app_components(settings)
        assert [c.name for c in apps] == [
            "apps-projectcenter",
            "apps-gorm",
            "apps-gworkspace",
            "apps-systempreferences",
        ]
        assert all(c.optional for c in apps)


class TestCheckoutCommands:
    """Tests for checkout_commands."""

    def test_plain_clone(self) -> None:
        """A previous checkout is removed before cloning."""
        commands = checkout_commands(Component("libs-gui", "https://github.com/gnustep/libs-gui.git"))
        assert commands == ("rm -rf libs-gui", "git clone https://github.com/gnustep/libs-gui.git libs-gui")

    def test_submodules(self) -> None:
        """Submodules are initialized, synced and updated."""
        commands = checkout_commands(Component("libobjc2", "https://github.com/gnustep/libobjc2.git", submodules=True))
        assert commands[2:] == (
            "git -C libobjc2 submodule init",
            "git -C libobjc2 submodule sync",
            "git -C libobjc2 submodule update",
        )
