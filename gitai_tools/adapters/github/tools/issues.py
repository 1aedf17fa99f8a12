"""GitHub issue tools: list, create and view."""

from gitai_obs.logging import get_logger
from gitai_tools.base import ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.github.schemas import (
    CommentSummary,
    IssueCreateInput,
    IssueListInput,
    IssueSummary,
    IssueViewInput,
)

from .common import GitHubTool, parse_number

logger = get_logger(__name__)


class IssueListTool(GitHubTool):
    name = "gh_issue_list"
    description = "List issues in a GitHub repository with filters"
    input_model = IssueListInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to list issues"

    async def run(self, ctx: ToolContext, args: IssueListInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        logger.info("gh_issue_list", owner=owner, repo=repo, state=args.state, label=args.label)

        items = await self.client(ctx).list_issues(
            owner,
            repo,
            state=args.state,
            assignee=args.assignee,
            creator=args.author,
            labels=args.label,
            per_page=args.limit,
        )
        issues = [IssueSummary.from_api(item).to_data() for item in items[: args.limit]]
        return ToolResult.ok(
            f"Found {len(issues)} issues",
            data={"repo": f"{owner}/{repo}", "issues": issues, "count": len(issues)},
        )


class IssueCreateTool(GitHubTool):
    """Tool for creating GitHub issues."""

    name = "gh_issue_create"
    description = "Create a new GitHub issue"
    input_model = IssueCreateInput
    metadata = ToolMetadata(capabilities=("github.write",), risk_level="medium")
    failure_message = "Failed to create issue"

    async def run(self, ctx: ToolContext, args: IssueCreateInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        logger.info("gh_issue_create", owner=owner, repo=repo, title=args.title)

        issue = await self.client(ctx).create_issue(
            owner,
            repo,
            title=args.title,
            body=args.body,
            labels=args.label or None,
            assignees=args.assignee or None,
            milestone=args.milestone,
        )
        summary = IssueSummary.from_api(issue)
        return ToolResult.ok(f"Issue #{summary.number} created", data=summary.to_data())


class IssueViewTool(GitHubTool):
    name = "gh_issue_view"
    description = "View a GitHub issue with optional comments"
    input_model = IssueViewInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to view issue {issue}"

    async def run(self, ctx: ToolContext, args: IssueViewInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        number = parse_number(args.issue)
        logger.info("gh_issue_view", owner=owner, repo=repo, number=number)

        client = self.client(ctx)
        data = IssueSummary.from_api(await client.get_issue(owner, repo, number)).to_data()
        if args.comments:
            comments = await client.list_comments(owner, repo, number)
            data["comments"] = [CommentSummary.from_api(c).to_data() for c in comments]

        return ToolResult.ok(f"Issue #{number} retrieved", data=data)
