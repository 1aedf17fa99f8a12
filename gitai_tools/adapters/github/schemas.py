"""GitHub adapter Pydantic schemas.

Input and output schemas for all GitHub tools.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gitai_tools.base import ToolInput

REPO_DESCRIPTION = "Repository as owner/repo or URL. Uses the current repository if not specified."


class GitHubOutput(BaseModel):
    """Base for summaries returned in tool data (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def _login(user: dict[str, Any] | None) -> str:
    return (user or {}).get("login", "")


# ============================================================================
# REPOSITORY SCHEMAS
# ============================================================================


class RepoInfoInput(ToolInput):
    """Input schema for gh_repo_info."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)


class RepositoryInfo(GitHubOutput):
    """Repository details."""

    name: str
    owner: str
    description: str | None = None
    url: str
    ssh_url: str | None = None
    default_branch: str | None = None
    is_private: bool = False
    is_fork: bool = False
    stargazer_count: int = 0
    fork_count: int = 0
    topics: list[str] = Field(default_factory=list)
    languages: dict[str, int] = Field(default_factory=dict)
    created_at: str | None = None
    updated_at: str | None = None
    pushed_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any], languages: dict[str, int] | None = None) -> "RepositoryInfo":
        return cls(
            name=data["name"],
            owner=_login(data.get("owner")),
            description=data.get("description"),
            url=data["html_url"],
            ssh_url=data.get("ssh_url"),
            default_branch=data.get("default_branch"),
            is_private=data.get("private", False),
            is_fork=data.get("fork", False),
            stargazer_count=data.get("stargazers_count", 0),
            fork_count=data.get("forks_count", 0),
            topics=data.get("topics") or [],
            languages=languages or {},
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            pushed_at=data.get("pushed_at"),
        )


# ============================================================================
# ISSUE SCHEMAS
# ============================================================================


class IssueListInput(ToolInput):
    """Input schema for gh_issue_list."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    state: Literal["open", "closed", "all"] = Field("open", description="Issue state filter")
    assignee: str | None = Field(None, description="Filter by assignee username")
    author: str | None = Field(None, description="Filter by author username")
    label: str | None = Field(None, description="Filter by label")
    limit: int = Field(30, ge=1, le=100, description="Maximum issues to return")


class IssueCreateInput(ToolInput):
    """Input schema for gh_issue_create."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    title: str = Field(..., min_length=1, description="Issue title")
    body: str = Field("", description="Issue body")
    assignee: list[str] = Field(default_factory=list, description="Usernames to assign")
    label: list[str] = Field(default_factory=list, description="Labels to add")
    milestone: int | None = Field(None, description="Milestone number")


class IssueViewInput(ToolInput):
    """Input schema for gh_issue_view."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    issue: str = Field(..., min_length=1, description="Issue number or URL")
    comments: bool = Field(False, description="Include comments")


class IssueSummary(GitHubOutput):
    """Single issue."""

    number: int
    title: str
    state: str
    author: str
    labels: list[str] = Field(default_factory=list)
    assignees: list[str] = Field(default_factory=list)
    url: str
    body: str = ""
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "IssueSummary":
        return cls(
            number=data["number"],
            title=data["title"],
            state=data["state"],
            author=_login(data.get("user")),
            labels=[label["name"] for label in data.get("labels", [])],
            assignees=[_login(a) for a in data.get("assignees", [])],
            url=data["html_url"],
            body=data.get("body") or "",
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
        )


class CommentSummary(GitHubOutput):
    author: str
    body: str
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "CommentSummary":
        return cls(author=_login(data.get("user")), body=data.get("body") or "", created_at=data.get("created_at"))


# ============================================================================
# PULL REQUEST SCHEMAS
# ============================================================================


class PrListInput(ToolInput):
    """Input schema for gh_pr_list."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    state: Literal["open", "closed", "merged", "all"] = Field("open", description="Pull request state filter")
    assignee: str | None = Field(None, description="Filter by assignee username")
    author: str | None = Field(None, description="Filter by author username")
    base: str | None = Field(None, description="Filter by base branch")
    head: str | None = Field(None, description="Filter by head branch")
    limit: int = Field(30, ge=1, le=100, description="Maximum pull requests to return")


class PrCreateInput(ToolInput):
    """Input schema for gh_pr_create."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    title: str = Field(..., min_length=1, description="Pull request title")
    body: str = Field("", description="Pull request body")
    base: str = Field("main", description="Target branch")
    head: str | None = Field(None, description="Source branch (defaults to the current branch)")
    assignee: list[str] = Field(default_factory=list, description="Usernames to assign")
    reviewer: list[str] = Field(default_factory=list, description="Usernames to request review from")
    label: list[str] = Field(default_factory=list, description="Labels to add")
    draft: bool = Field(False, description="Create as a draft")


class PrViewInput(ToolInput):
    """Input schema for gh_pr_view."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    pr: str = Field(..., min_length=1, description="Pull request number or URL")
    comments: bool = Field(False, description="Include comments")


class PullRequestSummary(GitHubOutput):
    """Single pull request."""

    number: int
    title: str
    state: Literal["open", "closed", "merged"]
    author: str
    base: str
    head: str
    draft: bool = False
    url: str
    body: str = ""
    labels: list[str] = Field(default_factory=list)
    created_at: str | None = None
    merged_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "PullRequestSummary":
        state = "merged" if data.get("merged_at") else data["state"]
        return cls(
            number=data["number"],
            title=data["title"],
            state=state,
            author=_login(data.get("user")),
            base=data.get("base", {}).get("ref", ""),
            head=data.get("head", {}).get("ref", ""),
            draft=data.get("draft", False),
            url=data["html_url"],
            body=data.get("body") or "",
            labels=[label["name"] for label in data.get("labels", [])],
            created_at=data.get("created_at"),
            merged_at=data.get("merged_at"),
        )


# ============================================================================
# ACTIONS & RELEASE SCHEMAS
# ============================================================================


class WorkflowRunInput(ToolInput):
    """Input schema for gh_workflow_run."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    workflow: str | None = Field(None, description="Workflow file name or ID")
    status: Literal["completed", "in_progress", "queued"] | None = Field(None, description="Run status filter")
    limit: int = Field(20, ge=1, le=100, description="Maximum runs to return")


class WorkflowRunSummary(GitHubOutput):
    id: int
    name: str | None = None
    status: str | None = None
    conclusion: str | None = None
    branch: str | None = None
    event: str | None = None
    url: str
    created_at: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "WorkflowRunSummary":
        return cls(
            id=data["id"],
            name=data.get("name"),
            status=data.get("status"),
            conclusion=data.get("conclusion"),
            branch=data.get("head_branch"),
            event=data.get("event"),
            url=data["html_url"],
            created_at=data.get("created_at"),
        )


class ReleaseListInput(ToolInput):
    """Input schema for gh_release_list."""

    repo: str | None = Field(None, description=REPO_DESCRIPTION)
    limit: int = Field(30, ge=1, le=100, description="Maximum releases to return")


class ReleaseSummary(GitHubOutput):
    tag_name: str
    name: str | None = None
    body: str = ""
    is_draft: bool = False
    is_prerelease: bool = False
    created_at: str | None = None
    published_at: str | None = None
    url: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ReleaseSummary":
        return cls(
            tag_name=data["tag_name"],
            name=data.get("name"),
            body=data.get("body") or "",
            is_draft=data.get("draft", False),
            is_prerelease=data.get("prerelease", False),
            created_at=data.get("created_at"),
            published_at=data.get("published_at"),
            url=data["html_url"],
        )
