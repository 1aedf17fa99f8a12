"""GitHub adapter exceptions.

Custom exception hierarchy for GitHub API errors. All of them are
``ToolError``s, so a failing request becomes a failed tool result.
"""

from gitai_tools.exceptions import ToolError


class GitHubAPIError(ToolError):
    """Base exception for GitHub adapter."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, data={"statusCode": status_code} if status_code else None)
        self.status_code = status_code


class GitHubAuthError(GitHubAPIError):
    """Missing or invalid API token, or insufficient permissions."""

    pass


class GitHubNotFoundError(GitHubAPIError):
    """Repository, issue, or PR not found (404 response)."""

    pass


class GitHubRateLimitError(GitHubAPIError):
    """Rate limit exceeded (403 with rate limit headers)."""

    pass


class GitHubValidationError(GitHubAPIError):
    """Invalid input parameters (422 response)."""

    pass
