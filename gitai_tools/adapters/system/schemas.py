"""System and installer tool schemas."""

from typing import Literal

from pydantic import Field

from gitai_tools.base import ToolInput


class SystemInfoInput(ToolInput):
    """system_info takes no arguments."""


class VerifyInput(ToolInput):
    """Input schema for verify_installations."""

    tool: Literal["git", "gitkraken-cli", "both"] = Field("both", description="Which installation to verify")


class InstallInput(ToolInput):
    """Input schema for install_git and install_gitkraken_cli."""

    force: bool = Field(False, description="Reinstall even when already installed")
    dry_run: bool = Field(False, description="Show the install command without running it")
