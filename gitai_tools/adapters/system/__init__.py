"""System adapter.

Host detection and installers for the binaries the other adapters need:
- ``system_info`` and ``verify_installations`` are read-only
- ``install_git`` and ``install_gitkraken_cli`` use the detected package manager

Installing the GitKraken CLI resets the capability cache and awaits the
optional ``on_gitkraken_installed`` callback, which the catalogue uses to
register the GitKraken tools without a restart.
"""

from typing import Any, Awaitable, Callable

from gitai_tools.base import Tool
from gitai_tools.capabilities import CapabilityDetector, SystemDetector

from .installer import InstallResult, Installer
from .tools import (
    InstallGitKrakenCliTool,
    InstallGitTool,
    SystemInfoTool,
    VerifyInstallationsTool,
)


class InstallerProvider:
    def __init__(
        self,
        system_detector: SystemDetector,
        capability_detector: CapabilityDetector,
        installer: Installer | None = None,
        on_gitkraken_installed: Callable[[], Awaitable[Any]] | None = None,
    ):
        self.system_detector = system_detector
        self.capability_detector = capability_detector
        self.installer = installer or Installer(system_detector)
        self.on_gitkraken_installed = on_gitkraken_installed

    def get_tools(self) -> list[Tool]:
        return [
            SystemInfoTool(self.system_detector, self.installer),
            VerifyInstallationsTool(self.system_detector, self.installer),
            InstallGitTool(self.installer),
            InstallGitKrakenCliTool(
                self.installer, self.capability_detector, self.on_gitkraken_installed
            ),
        ]


__all__ = ["InstallResult", "Installer", "InstallerProvider"]
