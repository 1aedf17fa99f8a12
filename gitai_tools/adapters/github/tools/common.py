"""Shared plumbing for GitHub tools: client lookup and repository resolution."""

import re
from typing import Any

from gitai_tools.base import BaseTool, ToolContext, ToolResult
from gitai_tools.adapters.github.client import GitHubClient
from gitai_tools.adapters.github.exceptions import GitHubAuthError
from gitai_tools.exceptions import PreconditionError

TOKEN_REQUIRED = "GITHUB_TOKEN is required for GitHub tools. Set it in the environment or the config file."

_REPO_URL = re.compile(
    r"^(?:https?://[^/]+/|git@[^:]+:|ssh://git@[^/]+/)(?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"
)
_NUMBER = re.compile(r"(?:^#?|/)(?P<number>\d+)/?$")


def parse_repo(value: str) -> tuple[str, str]:
    """``owner/repo`` or a GitHub URL (https or ssh) to ``(owner, repo)``."""
    value = value.strip()
    match = _REPO_URL.match(value)
    if match:
        return match.group("owner"), match.group("name")
    parts = value.removesuffix(".git").split("/")
    if len(parts) == 2 and all(parts):
        return parts[0], parts[1]
    raise PreconditionError(f"Cannot parse repository '{value}'. Use owner/repo or a GitHub URL.")


def parse_number(value: str) -> int:
    """Issue or PR number from ``42``, ``#42`` or a URL ending in the number."""
    match = _NUMBER.search(value.strip())
    if not match:
        raise PreconditionError(f"Cannot parse issue or pull request number from '{value}'")
    return int(match.group("number"))


class GitHubTool(BaseTool):
    """Base for tools that call the GitHub REST API.

    Fails with an explanatory result when no token is configured.
    """

    async def execute(self, ctx: ToolContext, args: Any) -> ToolResult:
        if ctx.github is None:
            return ToolResult.fail(self.describe_failure(args), error=TOKEN_REQUIRED)
        return await super().execute(ctx, args)

    @staticmethod
    def client(ctx: ToolContext) -> GitHubClient:
        if ctx.github is None:
            raise GitHubAuthError(TOKEN_REQUIRED)
        return ctx.github

    @staticmethod
    async def resolve_repo(ctx: ToolContext, repo: str | None) -> tuple[str, str]:
        """Explicit repository, else the one behind the default remote."""
        if repo:
            return parse_repo(repo)
        remote = ctx.config.GIT_DEFAULT_REMOTE
        url = await ctx.git.remote_url(remote)
        if not url:
            raise PreconditionError(
                f"No repository given and remote '{remote}' is not configured. Pass repo=owner/name."
            )
        return parse_repo(url)
