"""GitHub Actions runs and releases."""

from gitai_obs.logging import get_logger
from gitai_tools.base import ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.github.schemas import (
    ReleaseListInput,
    ReleaseSummary,
    WorkflowRunInput,
    WorkflowRunSummary,
)

from .common import GitHubTool

logger = get_logger(__name__)


class WorkflowRunTool(GitHubTool):
    name = "gh_workflow_run"
    description = "List GitHub Actions workflow runs"
    input_model = WorkflowRunInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to list workflow runs"

    async def run(self, ctx: ToolContext, args: WorkflowRunInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        logger.info("gh_workflow_run", owner=owner, repo=repo, workflow=args.workflow, status=args.status)

        items = await self.client(ctx).list_workflow_runs(
            owner, repo, workflow=args.workflow, status=args.status, per_page=args.limit
        )
        runs = [WorkflowRunSummary.from_api(item).to_data() for item in items[: args.limit]]
        return ToolResult.ok(
            f"Found {len(runs)} workflow runs",
            data={"repo": f"{owner}/{repo}", "runs": runs, "count": len(runs)},
        )


class ReleaseListTool(GitHubTool):
    name = "gh_release_list"
    description = "List releases of a GitHub repository"
    input_model = ReleaseListInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to list releases"

    async def run(self, ctx: ToolContext, args: ReleaseListInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        logger.info("gh_release_list", owner=owner, repo=repo, limit=args.limit)

        items = await self.client(ctx).list_releases(owner, repo, per_page=args.limit)
        releases = [ReleaseSummary.from_api(item).to_data() for item in items[: args.limit]]
        return ToolResult.ok(
            f"Found {len(releases)} releases",
            data={"repo": f"{owner}/{repo}", "releases": releases, "count": len(releases)},
        )
