"""Capability detection.

``CapabilityDetector`` answers whether the GitKraken CLI is installed and what
it can do; gated providers consult it before exposing tools. ``SystemDetector``
describes the host for the installer. Both cache their answers per instance
until ``reset_cache`` is called.
"""

import json
import os
import platform
import re
import shutil
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from gitai_obs.logging import get_logger
from gitai_tools.exceptions import CommandError
from gitai_tools.process import CommandResult, CommandRunner

logger = get_logger(__name__)

PROBE_TIMEOUT_SECONDS = 15.0
ELEVATED_TIMEOUT_SECONDS = 900.0

FEATURES = ("graph", "workflow", "workspace", "ai")

_VERSION = re.compile(r"\d+\.\d+(?:\.\d+)?(?:[-+][\w.]+)?")


@dataclass(frozen=True)
class CapabilitySnapshot:
    """What the optional binary offers."""

    available: bool
    version: str | None = None
    features: dict[str, bool] = field(default_factory=lambda: dict.fromkeys(FEATURES, False))

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class GkCommandResult:
    success: bool
    data: Any = None
    error: str | None = None


class CapabilityDetector:
    """Detects the GitKraken CLI (``gk``).

    Availability is decided by running ``gk version``, ``gk help`` and
    ``which gk`` (``where gk`` on Windows) in turn; the first one that exits
    cleanly marks the CLI as present. Probe failures are logged, never raised.

    With ``probe_features`` set, sub-features are checked one by one through
    ``--help`` of the matching subcommand. Otherwise every feature is assumed
    present whenever the CLI is.
    """

    def __init__(
        self,
        runner: CommandRunner,
        binary: str = "gk",
        probe_features: bool = False,
        platform_name: str | None = None,
    ):
        self.runner = runner
        self.binary = binary
        self.probe_features = probe_features
        self.platform_name = platform_name or sys.platform
        self._available: bool | None = None
        self._version: str | None = None
        self._features: dict[str, bool] | None = None

    def _probe_commands(self) -> list[tuple[str, list[str]]]:
        locator = "where" if self.platform_name.startswith("win") else "which"
        return [
            (self.binary, ["version"]),
            (self.binary, ["help"]),
            (locator, [self.binary]),
        ]

    async def _probe(self, binary: str, args: list[str]) -> CommandResult | None:
        try:
            return await self.runner.run(binary, args, timeout=PROBE_TIMEOUT_SECONDS)
        except CommandError as e:
            logger.debug("capability_probe_failed", binary=binary, args=args, error=e.message)
            return None

    async def is_available(self) -> bool:
        if self._available is not None:
            return self._available

        for binary, args in self._probe_commands():
            if await self._probe(binary, args) is not None:
                self._available = True
                logger.info("capability_probe", binary=self.binary, available=True)
                return True

        self._available = False
        logger.info("capability_probe", binary=self.binary, available=False)
        return False

    async def get_version(self) -> str | None:
        if self._version is not None:
            return self._version
        if not await self.is_available():
            return None

        result = await self._probe(self.binary, ["version"])
        if result is None:
            return None
        match = _VERSION.search(result.stdout)
        if match is None:
            logger.warning("capability_version_unparsed", output=result.stdout.strip())
            return None
        self._version = match.group(0)
        return self._version

    async def check_capabilities(self) -> dict[str, bool]:
        if not await self.is_available():
            return dict.fromkeys(FEATURES, False)
        if self._features is None:
            if self.probe_features:
                self._features = await self._probe_feature_map()
            else:
                self._features = dict.fromkeys(FEATURES, True)
        return dict(self._features)

    async def _probe_feature_map(self) -> dict[str, bool]:
        graph = await self._probe(self.binary, ["graph", "--help"])
        work = await self._probe(self.binary, ["work", "--help"])
        workspace = await self._probe(self.binary, ["workspace", "--help"])
        work_help = (work.stdout + work.stderr) if work is not None else ""
        return {
            "graph": graph is not None,
            "workflow": work is not None,
            "workspace": workspace is not None,
            "ai": "--ai" in work_help or " ai " in work_help.lower(),
        }

    async def snapshot(self) -> CapabilitySnapshot:
        available = await self.is_available()
        return CapabilitySnapshot(
            available=available,
            version=await self.get_version() if available else None,
            features=await self.check_capabilities(),
        )

    def reset_cache(self) -> None:
        self._available = None
        self._version = None
        self._features = None

    async def execute(self, args: list[str]) -> GkCommandResult:
        """Run a ``gk`` subcommand; JSON output is decoded when possible."""
        if not await self.is_available():
            return GkCommandResult(False, error="GitKraken CLI is not available on this system")

        logger.info("gk_command", args=args)
        try:
            result = await self.runner.run(self.binary, args)
        except CommandError as e:
            logger.warning("gk_command_failed", args=args, error=e.message)
            return GkCommandResult(False, error=e.message)

        if result.stderr.strip() and not result.stdout.strip():
            return GkCommandResult(False, error=result.stderr.strip())

        output = result.stdout.strip()
        try:
            data = json.loads(output)
        except ValueError:
            data = output
        return GkCommandResult(True, data=data)


# ============================================================================
# HOST SYSTEM
# ============================================================================

PACKAGE_MANAGERS = ("brew", "apt", "yum", "dnf", "pacman", "choco", "winget", "scoop")


@dataclass(frozen=True)
class SystemInfo:
    platform: str
    arch: str
    release: str
    package_manager: str
    shell: str
    is_wsl: bool
    is_admin: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "arch": self.arch,
            "release": self.release,
            "packageManager": self.package_manager,
            "shell": self.shell,
            "isWSL": self.is_wsl,
            "isAdmin": self.is_admin,
        }


@dataclass(frozen=True)
class ElevatedResult:
    success: bool
    output: str
    error: str | None = None
    command: str = ""


class SystemDetector:
    """Host platform, package manager and privilege detection."""

    def __init__(self, runner: CommandRunner, platform_name: str | None = None):
        self.runner = runner
        self.platform_name = platform_name or sys.platform
        self._info: SystemInfo | None = None

    @property
    def is_windows(self) -> bool:
        return self.platform_name.startswith("win")

    async def get_system_info(self) -> SystemInfo:
        if self._info is not None:
            return self._info

        self._info = SystemInfo(
            platform=self.platform_name,
            arch=platform.machine(),
            release=platform.release(),
            package_manager=await self.detect_package_manager(),
            shell=os.environ.get("SHELL") or os.environ.get("COMSPEC") or "unknown",
            is_wsl=self._detect_wsl(),
            is_admin=await self._check_admin(),
        )
        logger.info("system_detected", **self._info.to_dict())
        return self._info

    async def detect_package_manager(self) -> str:
        for name in PACKAGE_MANAGERS:
            try:
                await self.runner.run(name, ["--version"], timeout=PROBE_TIMEOUT_SECONDS)
            except CommandError:
                continue
            logger.debug("package_manager_detected", package_manager=name)
            return name
        logger.warning("package_manager_unknown")
        return "unknown"

    def _detect_wsl(self) -> bool:
        if not self.platform_name.startswith("linux"):
            return False
        try:
            version = Path("/proc/version").read_text(encoding="utf-8", errors="ignore").lower()
        except OSError:
            return False
        return "microsoft" in version or "wsl" in version

    async def _check_admin(self) -> bool:
        if self.is_windows:
            try:
                result = await self.runner.run("net", ["session"], check=False)
            except CommandError:
                return False
            return result.success and "Access is denied" not in result.output
        geteuid = getattr(os, "geteuid", None)
        return geteuid is not None and geteuid() == 0

    def has_command(self, command: str) -> bool:
        return shutil.which(command) is not None

    async def run_elevated(self, *steps: str) -> ElevatedResult:
        """Run shell commands in sequence, each prefixed with ``sudo`` on Unix when not root."""
        info = await self.get_system_info()
        prefix = "sudo " if not info.is_admin and not self.is_windows else ""
        elevated = " && ".join(f"{prefix}{step}" for step in steps)

        logger.info("elevated_command", command=elevated)
        try:
            result = await self.runner.run_shell(elevated, timeout=ELEVATED_TIMEOUT_SECONDS)
        except CommandError as e:
            logger.error("elevated_command_failed", command=elevated, error=e.message)
            return ElevatedResult(False, output="", error=e.message, command=elevated)
        return ElevatedResult(
            True,
            output=result.stdout.strip(),
            error=result.stderr.strip() or None,
            command=elevated,
        )

    def reset_cache(self) -> None:
        self._info = None
