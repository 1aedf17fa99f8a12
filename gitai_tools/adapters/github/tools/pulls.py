"""GitHub pull request tools: list, create and view."""

from gitai_obs.logging import get_logger
from gitai_tools.base import ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.github.schemas import (
    CommentSummary,
    PrCreateInput,
    PrListInput,
    PrViewInput,
    PullRequestSummary,
)
from gitai_tools.exceptions import PreconditionError

from .common import GitHubTool, parse_number

logger = get_logger(__name__)


class PrListTool(GitHubTool):
    name = "gh_pr_list"
    description = "List pull requests in a GitHub repository with filters"
    input_model = PrListInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to list pull requests"

    async def run(self, ctx: ToolContext, args: PrListInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        logger.info("gh_pr_list", owner=owner, repo=repo, state=args.state)

        # the API has no "merged" state; merged PRs are closed ones with merged_at
        api_state = "closed" if args.state == "merged" else args.state
        head = f"{owner}:{args.head}" if args.head and ":" not in args.head else args.head
        items = await self.client(ctx).list_pull_requests(
            owner, repo, state=api_state, base=args.base, head=head, per_page=args.limit
        )

        prs = [PullRequestSummary.from_api(item) for item in items]
        if args.state == "merged":
            prs = [pr for pr in prs if pr.state == "merged"]
        if args.author:
            prs = [pr for pr in prs if pr.author == args.author]
        if args.assignee:
            wanted = {
                item["number"]
                for item in items
                if any(a.get("login") == args.assignee for a in item.get("assignees", []))
            }
            prs = [pr for pr in prs if pr.number in wanted]

        pull_requests = [pr.to_data() for pr in prs[: args.limit]]
        return ToolResult.ok(
            f"Found {len(pull_requests)} pull requests",
            data={"repo": f"{owner}/{repo}", "pullRequests": pull_requests, "count": len(pull_requests)},
        )


class PrCreateTool(GitHubTool):
    """Open a pull request, then apply reviewers, labels and assignees."""

    name = "gh_pr_create"
    description = "Create a new GitHub pull request"
    input_model = PrCreateInput
    metadata = ToolMetadata(capabilities=("github.write",), risk_level="medium")
    failure_message = "Failed to create pull request"

    async def run(self, ctx: ToolContext, args: PrCreateInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        head = args.head or await ctx.git.current_branch()
        if not head:
            raise PreconditionError("Cannot determine the head branch (detached HEAD). Pass head explicitly.")
        logger.info("gh_pr_create", owner=owner, repo=repo, head=head, base=args.base, draft=args.draft)

        client = self.client(ctx)
        pr = await client.create_pull_request(
            owner, repo, title=args.title, head=head, base=args.base, body=args.body, draft=args.draft
        )
        number = pr["number"]

        if args.reviewer:
            await client.request_reviewers(owner, repo, number, args.reviewer)
        if args.label or args.assignee:
            fields = {}
            if args.label:
                fields["labels"] = args.label
            if args.assignee:
                fields["assignees"] = args.assignee
            await client.update_issue(owner, repo, number, **fields)

        summary = PullRequestSummary.from_api(pr).to_data()
        summary["reviewers"] = args.reviewer
        return ToolResult.ok(f"Pull request #{number} created", data=summary)


class PrViewTool(GitHubTool):
    name = "gh_pr_view"
    description = "View a GitHub pull request with optional comments"
    input_model = PrViewInput
    metadata = ToolMetadata(idempotent=True, capabilities=("github.read",))
    failure_message = "Failed to view pull request {pr}"

    async def run(self, ctx: ToolContext, args: PrViewInput) -> ToolResult:
        owner, repo = await self.resolve_repo(ctx, args.repo)
        number = parse_number(args.pr)
        logger.info("gh_pr_view", owner=owner, repo=repo, number=number)

        client = self.client(ctx)
        pr = await client.get_pull_request(owner, repo, number)
        data = PullRequestSummary.from_api(pr).to_data()
        data.update(
            {
                "additions": pr.get("additions", 0),
                "deletions": pr.get("deletions", 0),
                "changedFiles": pr.get("changed_files", 0),
                "mergeable": pr.get("mergeable"),
            }
        )
        if args.comments:
            comments = await client.list_comments(owner, repo, number)
            data["comments"] = [CommentSummary.from_api(c).to_data() for c in comments]

        return ToolResult.ok(f"Pull request #{number} retrieved", data=data)
