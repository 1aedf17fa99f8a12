"""Branch listing, creation, switching, deletion and merging."""

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.git.helpers import output_lines, upstream_divergence
from gitai_tools.adapters.git.schemas import (
    BranchCreateInput,
    BranchDeleteInput,
    BranchListInput,
    BranchSwitchInput,
    MergeInput,
)
from gitai_tools.exceptions import CommandError
from gitai_tools.safety import (
    AggregatePolicy,
    BatchOutcome,
    require_force,
    working_tree_changes,
)

logger = get_logger(__name__)

BRANCH_FORMAT = "%(HEAD)%1f%(refname:short)%1f%(objectname:short)%1f%(upstream:short)%1f%(contents:subject)"


def parse_branches(output: str, verbose: bool = False) -> list[dict]:
    branches = []
    for line in output_lines(output):
        fields = line.split("\x1f")
        if len(fields) < 5:
            continue
        head, name, commit, upstream, subject = fields[:5]
        if name.endswith("/HEAD"):
            continue
        entry = {
            "name": name,
            "current": head == "*",
            "commit": commit,
            "upstream": upstream or None,
        }
        if verbose:
            entry["label"] = subject
        branches.append(entry)
    return branches


class BranchListTool(BaseTool):
    name = "git_branch_list"
    description = "List local and remote branches with tracking information"
    input_model = BranchListInput
    metadata = ToolMetadata(capabilities=("git.read",), idempotent=True)
    failure_message = "Failed to list branches"

    async def run(self, ctx: ToolContext, args: BranchListInput) -> ToolResult:
        logger.info("git_branch_list", include_remote=args.include_remote, all=args.all)

        list_args = ["branch", f"--format={BRANCH_FORMAT}"]
        if args.all:
            list_args.append("-a")
        elif args.include_remote:
            list_args.append("-r")
        if args.merged:
            list_args.append("--merged")
        elif args.no_merged:
            list_args.append("--no-merged")

        branches = parse_branches(await ctx.git.raw(list_args), verbose=args.verbose)
        current = next((b["name"] for b in branches if b["current"]), None)
        if current is None:
            current = await ctx.git.current_branch()

        for branch in branches:
            if branch["current"]:
                branch["ahead"], branch["behind"] = await upstream_divergence(ctx)

        return ToolResult.ok(
            f"Found {len(branches)} branches",
            data={"branches": branches, "current": current, "total": len(branches)},
        )


class BranchCreateTool(BaseTool):
    name = "git_branch_create"
    description = "Create a new branch, optionally from a start point, and check it out"
    input_model = BranchCreateInput
    metadata = ToolMetadata(capabilities=("git.write",), risk_level="low")
    failure_message = "Failed to create branch '{name}'"

    async def run(self, ctx: ToolContext, args: BranchCreateInput) -> ToolResult:
        logger.info("git_branch_create", name=args.name, start_point=args.start_point, checkout=args.checkout)

        exists = await ctx.git.ref_exists(f"refs/heads/{args.name}")
        blocked = require_force(
            exists,
            args.force,
            rule="branch_exists",
            message=f"Branch '{args.name}' already exists",
            error=f"Branch '{args.name}' already exists. Use force=true to reset it.",
            state={"branch": args.name},
        )
        if blocked:
            return blocked

        create_args = ["branch"]
        if args.force:
            create_args.append("--force")
        if args.track:
            create_args.append("--track")
        create_args.append(args.name)
        if args.start_point:
            create_args.append(args.start_point)
        await ctx.git.run(create_args)

        if args.checkout:
            await ctx.git.run(["checkout", args.name])

        return ToolResult.ok(
            f"Branch '{args.name}' created" + (" and checked out" if args.checkout else ""),
            data={
                "name": args.name,
                "startPoint": args.start_point,
                "checkout": args.checkout,
                "replaced": exists,
            },
        )


class BranchSwitchTool(BaseTool):
    name = "git_branch_switch"
    description = "Switch between Git branches with optional creation and stash handling"
    input_model = BranchSwitchInput
    metadata = ToolMetadata(capabilities=("git.write",), risk_level="medium")
    failure_message = "Failed to switch to branch '{name}'"

    async def run(self, ctx: ToolContext, args: BranchSwitchInput) -> ToolResult:
        logger.info("git_branch_switch", name=args.name, create=args.create, stash=args.stash, force=args.force)

        changes = await working_tree_changes(ctx.git)
        blocked = require_force(
            bool(changes) and not args.stash,
            args.force,
            rule="dirty_working_tree",
            message=f"Cannot switch to '{args.name}' with uncommitted changes",
            error="Working tree has uncommitted changes. Use stash=true to stash them or force=true to discard them.",
            state={"uncommittedFiles": changes},
        )
        if blocked:
            return blocked

        stashed = False
        if args.stash and changes:
            await ctx.git.run(["stash", "push", "-u", "-m", f"Auto-stash before switching to {args.name}"])
            stashed = True
            logger.info("git_branch_switch_stashed", name=args.name, files=len(changes))

        checkout_args = ["checkout"]
        if args.force:
            checkout_args.append("-f")
        if args.create:
            if args.track:
                checkout_args.append("--track")
            checkout_args += ["-b", args.name]
            if args.start_point:
                checkout_args.append(args.start_point)
        else:
            checkout_args.append(args.name)
        await ctx.git.run(checkout_args)

        return ToolResult.ok(
            f"Switched to branch '{args.name}'",
            data={"branch": args.name, "created": args.create, "stashed": stashed},
        )


class BranchDeleteTool(BaseTool):
    """Delete several branches; succeeds when at least one is deleted."""

    name = "git_branch_delete"
    description = "Delete one or more branches with safety checks"
    input_model = BranchDeleteInput
    metadata = ToolMetadata(
        capabilities=("git.write",), destructive=True, dry_run_supported=True, risk_level="medium"
    )
    failure_message = "Failed to delete branches"

    async def run(self, ctx: ToolContext, args: BranchDeleteInput) -> ToolResult:
        logger.info("git_branch_delete", names=args.names, force=args.force, dry_run=args.dry_run)

        current = await ctx.git.current_branch()
        batch = BatchOutcome(AggregatePolicy.ANY)

        for name in args.names:
            if not args.remote and name == current:
                batch.record(name, False, error="Cannot delete current branch")
                continue

            if args.dry_run:
                ref = f"refs/remotes/{name}" if args.remote else f"refs/heads/{name}"
                if await ctx.git.ref_exists(ref):
                    batch.record(name, True)
                else:
                    batch.record(name, False, error="Branch does not exist")
                continue

            delete_args = ["branch"]
            if args.remote:
                delete_args.append("-r")
            delete_args += ["-D" if args.force else "-d", name]
            await batch.attempt(name, lambda delete_args=delete_args: self._delete(ctx, delete_args))

        verb = "Would delete" if args.dry_run else "Deleted"
        message = f"{verb} {len(batch.succeeded)}/{len(args.names)} branches"
        data = {
            "results": [o.to_dict("name") for o in batch.outcomes],
            "deleted": batch.succeeded,
            "failed": [o.target for o in batch.failed],
            "successCount": len(batch.succeeded),
            "totalCount": len(args.names),
            "dryRun": args.dry_run,
        }
        if args.dry_run:
            flag = "-D" if args.force else "-d"
            remote = "-r " if args.remote else ""
            data["preview"] = [f"git branch {remote}{flag} {name}" for name in batch.succeeded]
        return batch.to_result(message, data=data)

    @staticmethod
    async def _delete(ctx: ToolContext, delete_args: list[str]) -> None:
        await ctx.git.run(delete_args)


class MergeTool(BaseTool):
    name = "git_merge"
    description = "Merge a branch into the current branch with strategy and conflict reporting"
    input_model = MergeInput
    metadata = ToolMetadata(capabilities=("git.write",), risk_level="medium")
    failure_message = "Failed to merge branch '{branch}'"

    async def run(self, ctx: ToolContext, args: MergeInput) -> ToolResult:
        if args.abort:
            logger.info("git_merge_abort")
            await ctx.git.run(["merge", "--abort"])
            return ToolResult.ok("Merge aborted", data={"action": "abort"})

        if args.continue_:
            logger.info("git_merge_continue")
            await ctx.git.run(["-c", "core.editor=true", "merge", "--continue"])
            return ToolResult.ok("Merge continued", data={"action": "continue"})

        logger.info("git_merge", branch=args.branch, strategy=args.strategy, ff=args.ff, squash=args.squash)

        merge_args = ["merge"]
        if args.strategy:
            merge_args += ["-s", args.strategy]
        if args.ff == "only":
            merge_args.append("--ff-only")
        elif args.ff == "no":
            merge_args.append("--no-ff")
        if args.squash:
            merge_args.append("--squash")
        if args.no_commit:
            merge_args.append("--no-commit")
        if args.message:
            merge_args += ["-m", args.message]
        else:
            merge_args.append("--no-edit")
        merge_args.append(args.branch)

        try:
            result = await ctx.git.run(merge_args)
        except CommandError:
            status = await ctx.git.status()
            if not status.conflicted:
                raise
            logger.warning("git_merge_conflicts", branch=args.branch, files=len(status.conflicted))
            return ToolResult.fail(
                f"Merge conflicts detected in {len(status.conflicted)} files",
                error="Merge conflicts",
                data={
                    "conflicts": status.conflicted,
                    "branch": args.branch,
                    "action": "resolve_conflicts",
                },
            )

        return ToolResult.ok(
            f"Successfully merged '{args.branch}'",
            data={
                "branch": args.branch,
                "strategy": args.strategy,
                "ff": args.ff,
                "squash": args.squash,
                "fastForward": "Fast-forward" in result.stdout,
                "output": result.output,
            },
        )
