"""GitHub adapter.

Provides tools for interacting with GitHub through the REST API:
- Repository information
- List, create and view issues
- List, create and view pull requests
- Workflow runs and releases

The tools read the client from the tool context. Without ``GITHUB_TOKEN``
the context carries no client and every tool fails with an explanation.

Usage:
    from gitai_tools.adapters.github import GitHubClient, GitHubProvider

    client = GitHubClient(token="ghp_...")
    registry = await ToolRegistry.build([GitHubProvider()])
"""

from gitai_tools.base import Tool

from .client import GitHubClient
from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from .tools import (
    IssueCreateTool,
    IssueListTool,
    IssueViewTool,
    PrCreateTool,
    PrListTool,
    PrViewTool,
    ReleaseListTool,
    RepoInfoTool,
    WorkflowRunTool,
)


class GitHubProvider:
    def get_tools(self) -> list[Tool]:
        return [
            RepoInfoTool(),
            IssueListTool(),
            IssueCreateTool(),
            IssueViewTool(),
            PrListTool(),
            PrCreateTool(),
            PrViewTool(),
            WorkflowRunTool(),
            ReleaseListTool(),
        ]


__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAPIError",
    "GitHubAuthError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubValidationError",
    # Provider
    "GitHubProvider",
]
