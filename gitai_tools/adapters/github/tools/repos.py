"""GitHub Repository Info Tool."""

from gitai_obs.logging import get_logger
from gitai_tools.base import ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.github.schemas import RepoInfoInput, RepositoryInfo

from .common import GitHubTool

logger = get_logger(__name__)


class RepoInfoTool(GitHubTool):
    """Tool for reading repository metadata.

    Use Cases:
    - "What is the default branch of this repo?"
    - "Which languages does this project use?"
    """

    name = "gh_repo_info"
    description = "Get detailed information about a GitHub repository"
    input_model = RepoInfoInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to get repository information"

    async def run(self, ctx: ToolContext, args: RepoInfoInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        logger.info("gh_repo_info", owner=owner, repo=repo)

        client = self.client(ctx)
        data = await client.get_repository(owner, repo)
        languages = await client.get_languages(owner, repo)

        return ToolResult.ok(
            "Repository information retrieved successfully",
            data=RepositoryInfo.from_api(data, languages).to_data(),
        )
