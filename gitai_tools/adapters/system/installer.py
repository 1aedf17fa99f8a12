"""Package-manager driven installation of git and the GitKraken CLI."""

from dataclasses import dataclass
from typing import Any

from gitai_obs.logging import get_logger
from gitai_tools.capabilities import PROBE_TIMEOUT_SECONDS, SystemDetector, SystemInfo
from gitai_tools.exceptions import CommandError

logger = get_logger(__name__)

GK_RELEASES_URL = "https://github.com/gitkraken/gk-cli/releases"

# package manager -> shell steps; run in order, each elevated
GIT_INSTALL_COMMANDS: dict[str, tuple[str, ...]] = {
    "brew": ("brew install git",),
    "apt": ("apt-get update", "apt-get install -y git"),
    "yum": ("yum install -y git",),
    "dnf": ("dnf install -y git",),
    "pacman": ("pacman -S --noconfirm git",),
    "choco": ("choco install git -y",),
    "winget": ("winget install --id Git.Git -e --source winget",),
    "scoop": ("scoop install git",),
}

GITKRAKEN_INSTALL_COMMANDS: dict[str, tuple[str, ...]] = {
    "winget": ("winget install --id GitKraken.CLI -e --source winget",),
}

PACKAGE_MANAGER_NAMES = {
    "brew": "Homebrew",
    "apt": "apt",
    "yum": "yum",
    "dnf": "dnf",
    "pacman": "pacman",
    "choco": "Chocolatey",
    "winget": "winget",
    "scoop": "Scoop",
}

# binary -> arguments that print its version
VERSION_COMMANDS = {"git": ["--version"], "gk": ["version"]}


@dataclass
class InstallResult:
    success: bool
    message: str
    output: str | None = None
    error: str | None = None
    command: str | None = None
    requires_manual_install: bool = False
    manual_instructions: str | None = None


@dataclass
class Verification:
    installed: bool
    version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "installed": self.installed,
            "version": self.version,
            "status": "ready" if self.installed else "not_installed",
        }


def git_manual_instructions(platform_name: str) -> str:
    if platform_name.startswith("win"):
        return "\n".join(
            [
                "**Windows Installation:**",
                "1. Visit: https://git-scm.com/download/windows",
                "2. Download and run the Git installer",
                "3. Restart your terminal",
                "4. Verify installation: `git --version`",
                "",
                "Package managers: `winget install Git.Git` or `choco install git`",
            ]
        )
    if platform_name == "darwin":
        return "\n".join(
            [
                "**macOS Installation:**",
                "1. Install Homebrew: https://brew.sh/",
                "2. Install Git: `brew install git`",
                "3. Or download from: https://git-scm.com/download/mac",
                "4. Verify installation: `git --version`",
                "",
                "Alternative: `xcode-select --install`",
            ]
        )
    return "\n".join(
        [
            "**Linux Installation:**",
            "- Ubuntu/Debian: `sudo apt update && sudo apt install git`",
            "- CentOS/RHEL: `sudo yum install git` or `sudo dnf install git`",
            "- Arch Linux: `sudo pacman -S git`",
            "- Or visit: https://git-scm.com/download/linux",
            "- Verify installation: `git --version`",
        ]
    )


def gitkraken_manual_instructions(platform_name: str) -> str:
    if platform_name.startswith("win"):
        asset, install = "gk-windows-x64.exe", "Rename to `gk.exe` and add it to your PATH"
    elif platform_name == "darwin":
        asset, install = "gk-darwin-x64 or gk-darwin-arm64", "`chmod +x gk-darwin-*` then `sudo mv gk-darwin-* /usr/local/bin/gk`"
    else:
        asset, install = "gk-linux-x64", "`chmod +x gk-linux-x64` then `sudo mv gk-linux-x64 /usr/local/bin/gk`"
    return "\n".join(
        [
            "**GitKraken CLI Installation:**",
            f"1. Visit: {GK_RELEASES_URL}",
            f"2. Download the latest release ({asset})",
            f"3. {install}",
            "4. Verify: `gk version`",
            "",
            "**Setup:**",
            "- Run `gk auth login` to authenticate",
        ]
    )


class Installer:
    """Installs git and the GitKraken CLI through the detected package manager."""

    def __init__(self, system: SystemDetector):
        self.system = system

    async def verify_installation(self, binary: str) -> Verification:
        try:
            result = await self.system.runner.run(
                binary, VERSION_COMMANDS.get(binary, ["--version"]), timeout=PROBE_TIMEOUT_SECONDS
            )
        except CommandError:
            return Verification(False)
        return Verification(True, result.stdout.strip() or None)

    def git_plan(self, info: SystemInfo) -> tuple[str, ...] | None:
        return GIT_INSTALL_COMMANDS.get(info.package_manager)

    def gitkraken_plan(self, info: SystemInfo) -> tuple[str, ...] | None:
        return GITKRAKEN_INSTALL_COMMANDS.get(info.package_manager)

    async def install_git(self, force: bool = False, dry_run: bool = False) -> InstallResult:
        logger.info("install_git_started", force=force, dry_run=dry_run)
        return await self._install(
            "git",
            "Git",
            self.git_plan,
            git_manual_instructions,
            force=force,
            dry_run=dry_run,
        )

    async def install_gitkraken_cli(self, force: bool = False, dry_run: bool = False) -> InstallResult:
        logger.info("install_gitkraken_cli_started", force=force, dry_run=dry_run)
        return await self._install(
            "gk",
            "GitKraken CLI",
            self.gitkraken_plan,
            gitkraken_manual_instructions,
            force=force,
            dry_run=dry_run,
        )

    async def _install(
        self,
        binary: str,
        label: str,
        plan_for,
        instructions_for,
        *,
        force: bool,
        dry_run: bool,
    ) -> InstallResult:
        if not force:
            existing = await self.verify_installation(binary)
            if existing.installed:
                return InstallResult(
                    True, f"{label} is already installed: {existing.version}", output=existing.version
                )

        info = await self.system.get_system_info()
        steps = plan_for(info)
        if steps is None:
            manager = PACKAGE_MANAGER_NAMES.get(info.package_manager)
            reason = f"not available via {manager}" if manager else "requires manual installation"
            return InstallResult(
                False,
                f"{label} {reason}",
                requires_manual_install=True,
                manual_instructions=instructions_for(info.platform),
            )

        command = " && ".join(steps)
        if dry_run:
            return InstallResult(True, f"Would install {label} via {info.package_manager}", command=command)

        result = await self.system.run_elevated(*steps)
        if not result.success:
            return InstallResult(False, f"{label} installation failed", error=result.error, command=result.command)

        manager = PACKAGE_MANAGER_NAMES.get(info.package_manager, info.package_manager)
        return InstallResult(
            True,
            f"{label} installed successfully via {manager}",
            output=result.output,
            command=result.command,
        )
