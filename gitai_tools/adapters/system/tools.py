"""System information, installation checks and installers."""

from typing import Any, Awaitable, Callable

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.capabilities import CapabilityDetector, SystemDetector, SystemInfo

from .installer import InstallResult, Installer
from .schemas import InstallInput, SystemInfoInput, VerifyInput

logger = get_logger(__name__)

TOOL_BINARIES = {"git": "git", "gitkraken-cli": "gk"}


def recommendations(info: SystemInfo, git_installed: bool, gk_installed: bool) -> list[str]:
    items = []
    if not git_installed:
        items.append("Install Git with install_git")
    if not gk_installed:
        if info.package_manager == "winget":
            items.append("Install GitKraken CLI with install_gitkraken_cli")
        else:
            items.append("Install GitKraken CLI manually from https://github.com/gitkraken/gk-cli/releases")
    if info.package_manager == "unknown":
        items.append("No supported package manager detected; installations will need manual steps")
    if not info.is_admin and not info.platform.startswith("win"):
        items.append("Installation may prompt for your sudo password")
    if info.is_wsl:
        items.append("Running under WSL; install tools inside the Linux distribution")
    return items


def install_result_to_tool_result(result: InstallResult) -> ToolResult:
    data: dict[str, Any] = {}
    if result.command:
        data["command"] = result.command
    if result.output:
        data["output"] = result.output
    if result.requires_manual_install:
        data["requiresManualInstall"] = True
        data["manualInstructions"] = result.manual_instructions
    if result.success:
        return ToolResult.ok(result.message, data=data or None)
    return ToolResult.fail(result.message, error=result.error or result.message, data=data or None)


class SystemInfoTool(BaseTool):
    name = "system_info"
    description = "Get system information and the status of Git and GitKraken CLI installations"
    input_model = SystemInfoInput
    metadata = ToolMetadata(idempotent=True)

    def __init__(self, system: SystemDetector, installer: Installer):
        self.system = system
        self.installer = installer

    async def run(self, ctx: ToolContext, args: SystemInfoInput) -> ToolResult:
        info = await self.system.get_system_info()
        git = await self.installer.verify_installation("git")
        gk = await self.installer.verify_installation("gk")

        return ToolResult.ok(
            "System information retrieved",
            data={
                "system": info.to_dict(),
                "installations": {"git": git.to_dict(), "gitkrakenCli": gk.to_dict()},
                "recommendations": recommendations(info, git.installed, gk.installed),
            },
        )


class VerifyInstallationsTool(BaseTool):
    name = "verify_installations"
    description = "Verify that Git and/or GitKraken CLI are installed and report their versions"
    input_model = VerifyInput
    metadata = ToolMetadata(idempotent=True)

    def __init__(self, system: SystemDetector, installer: Installer):
        self.system = system
        self.installer = installer

    async def run(self, ctx: ToolContext, args: VerifyInput) -> ToolResult:
        names = list(TOOL_BINARIES) if args.tool == "both" else [args.tool]
        verifications = {}
        for name in names:
            verifications[name] = (await self.installer.verify_installation(TOOL_BINARIES[name])).to_dict()

        next_steps = []
        if "git" in verifications and not verifications["git"]["installed"]:
            next_steps.append("Run install_git to install Git")
        if "gitkraken-cli" in verifications:
            if verifications["gitkraken-cli"]["installed"]:
                next_steps.append("Run `gk auth login` to authenticate the GitKraken CLI")
            else:
                next_steps.append("Run install_gitkraken_cli to install the GitKraken CLI")

        ready = all(v["installed"] for v in verifications.values())
        return ToolResult.ok(
            "All requested tools are installed" if ready else "Some tools are missing",
            data={
                "verifications": verifications,
                "system": (await self.system.get_system_info()).to_dict(),
                "nextSteps": next_steps,
            },
        )


class InstallGitTool(BaseTool):
    name = "install_git"
    description = "Install Git using the system package manager"
    input_model = InstallInput
    metadata = ToolMetadata(dry_run_supported=True, risk_level="medium")

    def __init__(self, installer: Installer):
        self.installer = installer

    async def run(self, ctx: ToolContext, args: InstallInput) -> ToolResult:
        logger.info("install_git", force=args.force, dry_run=args.dry_run)
        return install_result_to_tool_result(await self.installer.install_git(args.force, args.dry_run))


class InstallGitKrakenCliTool(BaseTool):
    """Install ``gk``; on success the capability cache is dropped and listeners notified."""

    name = "install_gitkraken_cli"
    description = "Install GitKraken CLI (automatic on Windows via winget, manual instructions elsewhere)"
    input_model = InstallInput
    metadata = ToolMetadata(dry_run_supported=True, risk_level="medium")

    def __init__(
        self,
        installer: Installer,
        detector: CapabilityDetector,
        on_installed: Callable[[], Awaitable[Any]] | None = None,
    ):
        self.installer = installer
        self.detector = detector
        self.on_installed = on_installed

    async def run(self, ctx: ToolContext, args: InstallInput) -> ToolResult:
        logger.info("install_gitkraken_cli", force=args.force, dry_run=args.dry_run)
        result = await self.installer.install_gitkraken_cli(args.force, args.dry_run)

        if result.success and not args.dry_run:
            self.detector.reset_cache()
            if self.on_installed is not None:
                await self.on_installed()
        return install_result_to_tool_result(result)
