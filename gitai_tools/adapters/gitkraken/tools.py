"""GitKraken CLI tools.

Each tool builds a ``gk`` argument list and runs it through the capability
detector, which refuses to run when the CLI is missing.
"""

from typing import Any

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.capabilities import CapabilityDetector
from gitai_tools.exceptions import ToolError

from .schemas import (
    GraphInput,
    SetupInput,
    WorkCommitAiInput,
    WorkListInput,
    WorkPrCreateAiInput,
    WorkspaceCreateInput,
    WorkspaceListInput,
)

logger = get_logger(__name__)


class GkTool(BaseTool):
    """Base for tools that shell out to ``gk``."""

    def __init__(self, detector: CapabilityDetector):
        self.detector = detector

    async def gk(self, args: list[str]) -> Any:
        """Run ``gk`` and return its (JSON-decoded when possible) output."""
        result = await self.detector.execute(args)
        if not result.success:
            raise ToolError(result.error or "GitKraken CLI command failed")
        return result.data


class GraphTool(GkTool):
    name = "gk_graph"
    description = "Display interactive commit graph visualization using GitKraken CLI"
    input_model = GraphInput
    metadata = ToolMetadata(idempotent=True, capabilities=("gitkraken.graph",))
    failure_message = "Failed to display commit graph"

    async def run(self, ctx: ToolContext, args: GraphInput) -> ToolResult:
        command = ["graph"]
        if args.branch:
            command += ["--branch", args.branch]
        command += ["--limit", str(args.limit), f"--{args.position}"]
        await self.gk(command)

        return ToolResult.ok(
            "Commit graph visualization opened",
            data={
                "graphOpened": True,
                "branch": args.branch or "current",
                "limit": args.limit,
                "position": args.position,
            },
        )


class WorkCommitAiTool(GkTool):
    name = "gk_work_commit_ai"
    description = "Create intelligent commit messages using GitKraken AI"
    input_model = WorkCommitAiInput
    metadata = ToolMetadata(capabilities=("gitkraken.workflow", "gitkraken.ai"), risk_level="medium")
    failure_message = "Failed to create AI-generated commit"

    async def run(self, ctx: ToolContext, args: WorkCommitAiInput) -> ToolResult:
        command = ["work", "commit", "--ai"]
        if args.message:
            command += ["--message", args.message]
        if args.all:
            command.append("--all")
        if args.scope:
            command += ["--scope", args.scope]
        output = await self.gk(command)

        return ToolResult.ok(
            "AI-generated commit created successfully",
            data={
                "commitCreated": True,
                "aiGenerated": True,
                "baseMessage": args.message,
                "scope": args.scope,
                "result": output,
            },
        )


class WorkPrCreateAiTool(GkTool):
    name = "gk_work_pr_create_ai"
    description = "Create pull request with AI-generated title and description"
    input_model = WorkPrCreateAiInput
    metadata = ToolMetadata(capabilities=("gitkraken.workflow", "gitkraken.ai"), risk_level="medium")
    failure_message = "Failed to create AI-generated pull request"

    async def run(self, ctx: ToolContext, args: WorkPrCreateAiInput) -> ToolResult:
        command = ["work", "pr", "create", "--ai"]
        if args.title:
            command += ["--title", args.title]
        if args.description:
            command += ["--description", args.description]
        command += ["--base", args.base]
        if args.draft:
            command.append("--draft")
        output = await self.gk(command)

        return ToolResult.ok(
            "AI-generated pull request created successfully",
            data={
                "prCreated": True,
                "aiGenerated": True,
                "baseTitle": args.title,
                "baseDescription": args.description,
                "targetBranch": args.base,
                "isDraft": args.draft,
                "result": output,
            },
        )


class WorkspaceListTool(GkTool):
    name = "gk_workspace_list"
    description = "List all GitKraken workspaces"
    input_model = WorkspaceListInput
    metadata = ToolMetadata(idempotent=True, capabilities=("gitkraken.workspace",))
    failure_message = "Failed to list workspaces"

    async def run(self, ctx: ToolContext, args: WorkspaceListInput) -> ToolResult:
        command = ["workspace", "list"]
        if args.detailed:
            command.append("--detailed")
        return ToolResult.ok("Workspaces listed successfully", data=await self.gk(command))


class WorkspaceCreateTool(GkTool):
    name = "gk_workspace_create"
    description = "Create a new GitKraken workspace"
    input_model = WorkspaceCreateInput
    metadata = ToolMetadata(capabilities=("gitkraken.workspace",))
    failure_message = "Failed to create workspace"

    async def run(self, ctx: ToolContext, args: WorkspaceCreateInput) -> ToolResult:
        command = ["workspace", "create", args.name]
        if args.description:
            command += ["--description", args.description]
        if args.repos:
            command += ["--repos", ",".join(args.repos)]
        output = await self.gk(command)

        return ToolResult.ok(
            f'Workspace "{args.name}" created successfully',
            data={
                "workspaceName": args.name,
                "description": args.description,
                "repositories": args.repos,
                "result": output,
            },
        )


class WorkListTool(GkTool):
    name = "gk_work_list"
    description = "List work items in GitKraken"
    input_model = WorkListInput
    metadata = ToolMetadata(idempotent=True, capabilities=("gitkraken.workflow",))
    failure_message = "Failed to list work items"

    async def run(self, ctx: ToolContext, args: WorkListInput) -> ToolResult:
        output = await self.gk(["work", "list", "--status", args.status, "--limit", str(args.limit)])
        return ToolResult.ok(f"Found work items with status: {args.status}", data=output)


class SetupTool(GkTool):
    name = "gk_setup"
    description = "Display GitKraken CLI setup and configuration information"
    input_model = SetupInput
    metadata = ToolMetadata(idempotent=True, capabilities=("gitkraken",))
    failure_message = "Failed to get setup information"

    async def run(self, ctx: ToolContext, args: SetupInput) -> ToolResult:
        return ToolResult.ok("GitKraken CLI setup information retrieved", data=await self.gk(["setup"]))
