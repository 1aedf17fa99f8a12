"""GitHub API client.

Centralized GitHub REST client with error handling and rate limiting.
"""

import asyncio
from typing import Any

import httpx

from gitai_obs.logging import get_logger
from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubValidationError,
)

logger = get_logger(__name__)


class GitHubClient:
    """GitHub REST API client.

    Provides:
    - Error handling and exception mapping
    - Client-side rate limiting (requests per second)
    - Structured error messages
    """

    BASE_URL = "https://api.github.com"

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        rate_limit_per_second: int = 10,
        timeout_seconds: int = 30,
    ):
        """Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: API root, for GitHub Enterprise
            rate_limit_per_second: Max requests per second
            timeout_seconds: Request timeout
        """
        self.token = token
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.rate_limit_per_second = rate_limit_per_second
        self.timeout_seconds = timeout_seconds
        self._last_request_time = 0.0

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with authentication."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    async def _rate_limit(self) -> None:
        """Enforce rate limiting."""
        loop = asyncio.get_running_loop()
        time_since_last_request = loop.time() - self._last_request_time
        min_interval = 1.0 / self.rate_limit_per_second

        if time_since_last_request < min_interval:
            await asyncio.sleep(min_interval - time_since_last_request)

        self._last_request_time = loop.time()

    def _handle_error(self, response: httpx.Response) -> None:
        """Map GitHub API errors to custom exceptions."""
        status = response.status_code

        try:
            error_data = response.json()
            message = error_data.get("message", str(response.text))
        except ValueError:
            message = str(response.text)

        if status == 401:
            raise GitHubAuthError(f"Authentication failed: {message}", status)
        elif status == 403:
            if "rate limit" in message.lower() or response.headers.get("x-ratelimit-remaining") == "0":
                raise GitHubRateLimitError(f"Rate limit exceeded: {message}", status)
            raise GitHubAuthError(f"Forbidden: {message}", status)
        elif status == 404:
            raise GitHubNotFoundError(f"Resource not found: {message}", status)
        elif status == 422:
            raise GitHubValidationError(f"Validation failed: {message}", status)
        else:
            raise GitHubAPIError(f"GitHub API error ({status}): {message}", status)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            GitHubAuthError: Invalid token
            GitHubRateLimitError: Rate limit exceeded
            GitHubNotFoundError: Unknown repository, issue or PR
            GitHubAPIError: Other API or transport errors
        """
        await self._rate_limit()

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug("github_request", method=method, path=path)
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{path}",
                    headers=self._get_headers(),
                    params=params,
                    json=json,
                )
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"GitHub request failed: {e}") from e

        if response.status_code >= 400:
            self._handle_error(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ========================================================================
    # REPOSITORIES
    # ========================================================================

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{repo}")

    async def get_languages(self, owner: str, repo: str) -> dict[str, int]:
        return await self._request("GET", f"/repos/{owner}/{repo}/languages")

    # ========================================================================
    # ISSUES
    # ========================================================================

    async def list_issues(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        assignee: str | None = None,
        creator: str | None = None,
        labels: str | None = None,
        per_page: int = 30,
    ) -> list[dict[str, Any]]:
        """List issues in a repository.

        The issues endpoint also returns pull requests; they are filtered out.
        """
        items = await self._request(
            "GET",
            f"/repos/{owner}/{repo}/issues",
            params={
                "state": state,
                "assignee": assignee,
                "creator": creator,
                "labels": labels,
                "per_page": per_page,
            },
        )
        return [item for item in items if "pull_request" not in item]

    async def get_issue(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{repo}/issues/{number}")

    async def list_comments(self, owner: str, repo: str, number: int) -> list[dict[str, Any]]:
        """Comments of an issue or pull request conversation."""
        return await self._request("GET", f"/repos/{owner}/{repo}/issues/{number}/comments")

    async def create_issue(
        self,
        owner: str,
        repo: str,
        title: str,
        body: str = "",
        labels: list[str] | None = None,
        assignees: list[str] | None = None,
        milestone: int | None = None,
    ) -> dict[str, Any]:
        """Create a new issue.

        Args:
            owner: Repository owner
            repo: Repository name
            title: Issue title
            body: Issue body
            labels: Issue labels
            assignees: Usernames to assign
            milestone: Milestone number

        Returns:
            Created issue data
        """
        data: dict[str, Any] = {"title": title, "body": body}
        if labels:
            data["labels"] = labels
        if assignees:
            data["assignees"] = assignees
        if milestone is not None:
            data["milestone"] = milestone
        return await self._request("POST", f"/repos/{owner}/{repo}/issues", json=data)

    async def update_issue(self, owner: str, repo: str, number: int, **fields: Any) -> dict[str, Any]:
        """Patch labels, assignees or other issue fields (also used for PRs)."""
        return await self._request("PATCH", f"/repos/{owner}/{repo}/issues/{number}", json=fields)

    # ========================================================================
    # PULL REQUESTS
    # ========================================================================

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        state: str = "open",
        base: str | None = None,
        head: str | None = None,
        per_page: int = 30,
    ) -> list[dict[str, Any]]:
        return await self._request(
            "GET",
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "base": base, "head": head, "per_page": per_page},
        )

    async def get_pull_request(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        return await self._request("GET", f"/repos/{owner}/{repo}/pulls/{number}")

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str = "",
        draft: bool = False,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls",
            json={"title": title, "head": head, "base": base, "body": body, "draft": draft},
        )

    async def request_reviewers(
        self, owner: str, repo: str, number: int, reviewers: list[str]
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{number}/requested_reviewers",
            json={"reviewers": reviewers},
        )

    # ========================================================================
    # ACTIONS & RELEASES
    # ========================================================================

    async def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        workflow: str | None = None,
        status: str | None = None,
        per_page: int = 20,
    ) -> list[dict[str, Any]]:
        """Workflow runs, optionally for one workflow (file name or ID)."""
        path = (
            f"/repos/{owner}/{repo}/actions/workflows/{workflow}/runs"
            if workflow
            else f"/repos/{owner}/{repo}/actions/runs"
        )
        payload = await self._request("GET", path, params={"status": status, "per_page": per_page})
        return payload.get("workflow_runs", [])

    async def list_releases(self, owner: str, repo: str, per_page: int = 30) -> list[dict[str, Any]]:
        return await self._request(
            "GET", f"/repos/{owner}/{repo}/releases", params={"per_page": per_page}
        )
