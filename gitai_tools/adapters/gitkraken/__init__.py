"""GitKraken CLI adapter.

Tools are exposed only when the ``gk`` binary is installed, and only for the
sub-features it supports:

- graph: ``gk_graph``
- workflow + ai: ``gk_work_commit_ai``, ``gk_work_pr_create_ai``
- workspace: ``gk_workspace_list``, ``gk_workspace_create``
- always (when installed): ``gk_work_list``, ``gk_setup``
"""

from gitai_obs.logging import get_logger
from gitai_tools.base import Tool
from gitai_tools.capabilities import CapabilityDetector

from .tools import (
    GraphTool,
    SetupTool,
    WorkCommitAiTool,
    WorkListTool,
    WorkPrCreateAiTool,
    WorkspaceCreateTool,
    WorkspaceListTool,
)

logger = get_logger(__name__)


class GitKrakenProvider:
    """Capability-gated provider for the GitKraken CLI tools."""

    def __init__(self, detector: CapabilityDetector):
        self.detector = detector

    async def get_tools(self) -> list[Tool]:
        if not await self.detector.is_available():
            logger.info("gitkraken_tools_disabled", reason="cli_not_detected")
            return []

        features = await self.detector.check_capabilities()
        tools: list[Tool] = []
        if features.get("graph"):
            tools.append(GraphTool(self.detector))
        if features.get("workflow") and features.get("ai"):
            tools += [WorkCommitAiTool(self.detector), WorkPrCreateAiTool(self.detector)]
        if features.get("workspace"):
            tools += [WorkspaceListTool(self.detector), WorkspaceCreateTool(self.detector)]
        tools += [WorkListTool(self.detector), SetupTool(self.detector)]

        logger.info(
            "gitkraken_tools_enabled",
            version=await self.detector.get_version(),
            features=features,
            count=len(tools),
        )
        return tools


__all__ = ["GitKrakenProvider"]
