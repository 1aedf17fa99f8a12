"""Recovery tools: reset, revert, reflog and clean.

Every tool here can discard work, so each one checks the working tree or
requires ``force`` before running the mutating command, and supports a dry
run that only reports.
"""

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.git.helpers import output_lines, short_sha
from gitai_tools.adapters.git.schemas import (
    CleanInput,
    ReflogInput,
    ResetInput,
    RevertInput,
)
from gitai_tools.exceptions import CommandError, PreconditionError
from gitai_tools.safety import dry_run_preview, require_force, working_tree_changes

logger = get_logger(__name__)

REFLOG_FORMAT = "%H%x1f%gd%x1f%gs"


class ResetTool(BaseTool):
    name = "git_reset"
    description = "Reset current HEAD to specified state (soft, mixed, hard)"
    input_model = ResetInput
    metadata = ToolMetadata(
        capabilities=("git.write",), destructive=True, dry_run_supported=True, risk_level="high"
    )
    failure_message = "Failed to reset repository"

    async def run(self, ctx: ToolContext, args: ResetInput) -> ToolResult:
        target = args.target or "HEAD"
        logger.info("git_reset", mode=args.mode, target=target, paths=args.paths, dry_run=args.dry_run)

        if args.mode == "hard" and not args.dry_run:
            changes = await working_tree_changes(ctx.git)
            blocked = require_force(
                bool(changes),
                args.force,
                rule="dirty_working_tree",
                message="Hard reset would lose uncommitted changes. Use force=true to proceed.",
                error="Uncommitted changes detected",
                state={"uncommittedFiles": changes},
            )
            if blocked:
                return blocked

        current = await ctx.git.rev_parse("HEAD")
        if args.dry_run:
            resolved = await ctx.git.rev_parse(target)
            return dry_run_preview(
                f"Would reset {args.mode} to {short_sha(resolved)}",
                f"git reset --{args.mode} {target}",
                currentCommit=short_sha(current),
                targetCommit=short_sha(resolved),
                mode=args.mode,
            )

        reset_args = ["reset"]
        if args.paths:
            # path resets only touch the index
            reset_args += [target, "--", *args.paths]
        else:
            reset_args += [f"--{args.mode}", target]
        await ctx.git.run(reset_args)

        after = await ctx.git.status()
        return ToolResult.ok(
            f"Reset {args.mode} completed successfully",
            data={
                "mode": args.mode,
                "target": target,
                "previousCommit": short_sha(current),
                "paths": args.paths,
                "filesAfter": len(after.files),
                "status": {
                    "staged": len(after.staged),
                    "modified": len(after.unstaged),
                    "untracked": len(after.untracked),
                },
            },
        )


class RevertTool(BaseTool):
    name = "git_revert"
    description = "Safely revert commits by creating new commits that undo changes"
    input_model = RevertInput
    metadata = ToolMetadata(capabilities=("git.write",), risk_level="medium")
    failure_message = "Failed to revert commits"

    async def run(self, ctx: ToolContext, args: RevertInput) -> ToolResult:
        if args.continue_:
            logger.info("git_revert_continue")
            await ctx.git.run(["-c", "core.editor=true", "revert", "--continue"])
            return ToolResult.ok("Revert continued successfully", data={"action": "continue"})

        if args.abort:
            logger.info("git_revert_abort")
            await ctx.git.run(["revert", "--abort"])
            return ToolResult.ok("Revert operation aborted", data={"action": "abort"})

        if not args.commits:
            raise PreconditionError("At least one commit is required")

        logger.info("git_revert", commits=args.commits, no_commit=args.no_commit, mainline=args.mainline)

        revert_args = ["revert"]
        if args.no_commit:
            revert_args.append("--no-commit")
        revert_args.append("--edit" if args.edit else "--no-edit")
        if args.signoff:
            revert_args.append("--signoff")
        if args.mainline:
            revert_args += ["--mainline", str(args.mainline)]
        revert_args += args.commits

        try:
            await ctx.git.run(revert_args)
        except CommandError:
            status = await ctx.git.status()
            if not status.conflicted:
                raise
            logger.warning("git_revert_conflicts", files=len(status.conflicted))
            return ToolResult.fail(
                "Revert completed with conflicts - resolve conflicts and continue",
                error="Revert conflicts",
                data={
                    "commits": args.commits,
                    "conflicts": status.conflicted,
                    "needsResolution": True,
                    "nextSteps": [
                        "Resolve conflicts in conflicted files",
                        "Stage resolved files with git_add",
                        "Continue the revert with git_revert continue=true",
                    ],
                },
            )

        current = await ctx.git.rev_parse("HEAD")
        return ToolResult.ok(
            f"Successfully reverted {len(args.commits)} commit(s)",
            data={
                "revertedCommits": args.commits,
                "currentCommit": short_sha(current),
                "noCommit": args.no_commit,
                "created": "staged changes" if args.no_commit else "new revert commit",
            },
        )


def parse_reflog(output: str) -> list[dict]:
    entries = []
    for index, line in enumerate(output_lines(output)):
        fields = line.split("\x1f")
        if len(fields) != 3:
            entries.append({"index": index, "raw": line})
            continue
        sha, selector, subject = fields
        entries.append(
            {
                "index": index,
                "hash": short_sha(sha),
                "selector": selector,
                "message": subject,
            }
        )
    return entries


class ReflogTool(BaseTool):
    name = "git_reflog"
    description = "Show or manage reflog (reference logs) for commit recovery"
    input_model = ReflogInput
    metadata = ToolMetadata(
        capabilities=("git.read", "git.write"), destructive=True, dry_run_supported=True, risk_level="high"
    )
    failure_message = "Failed to {action} reflog"

    async def run(self, ctx: ToolContext, args: ReflogInput) -> ToolResult:
        scope = "all" if args.all else args.reference
        logger.info("git_reflog", action=args.action, reference=scope, dry_run=args.dry_run)

        if args.action == "show":
            show_args = ["reflog", "show", f"--format={REFLOG_FORMAT}", "-n", str(args.limit)]
            show_args.append("--all" if args.all else args.reference)
            entries = parse_reflog(await ctx.git.raw(show_args))
            return ToolResult.ok(
                f"Found {len(entries)} reflog entries for {'all references' if args.all else args.reference}",
                data={
                    "reference": scope,
                    "entries": entries,
                    "total": len(entries),
                    "recoveryTip": "Use git_reset to recover to any of these commits",
                },
            )

        if args.action == "expire":
            if not args.expire_time:
                raise PreconditionError("expireTime is required for expire action")
            reflog_args = ["reflog", "expire", f"--expire={args.expire_time}"]
            reflog_args.append("--all" if args.all else args.reference)
        else:
            if "@{" not in args.reference:
                raise PreconditionError("Delete requires an entry selector such as HEAD@{2}")
            reflog_args = ["reflog", "delete", args.reference]

        blocked = require_force(
            not args.dry_run,
            args.force,
            rule="reflog_prune",
            message=f"Refusing to {args.action} reflog entries without force",
            error="Pruning the reflog removes recovery points. Use force=true, or dryRun=true to preview.",
            state={"action": args.action, "reference": scope},
        )
        if blocked:
            return blocked

        if args.dry_run:
            reflog_args.insert(2, "--dry-run")
            result = await ctx.git.run(reflog_args)
            return dry_run_preview(
                f"Would {args.action} reflog entries for {scope}",
                result.output or " ".join(["git", *reflog_args]),
                action=args.action,
                reference=scope,
                expireTime=args.expire_time,
            )

        await ctx.git.run(reflog_args)
        if args.action == "expire":
            message = f"Expired reflog entries older than {args.expire_time}"
        else:
            message = f"Deleted reflog entry {args.reference}"
        return ToolResult.ok(
            message,
            data={"action": args.action, "reference": scope, "expireTime": args.expire_time},
        )


class CleanTool(BaseTool):
    name = "git_clean"
    description = "Remove untracked files and directories from working tree"
    input_model = CleanInput
    metadata = ToolMetadata(
        capabilities=("git.write",), destructive=True, dry_run_supported=True, risk_level="high"
    )
    failure_message = "Failed to clean repository"

    async def run(self, ctx: ToolContext, args: CleanInput) -> ToolResult:
        logger.info("git_clean", dry_run=args.dry_run, force=args.force, directories=args.directories)

        blocked = require_force(
            not args.dry_run,
            args.force,
            rule="clean_requires_force",
            message="Force flag required for actual file removal. Use dryRun=false and force=true.",
            error="Safety check: force flag required",
        )
        if blocked:
            return blocked

        clean_args = ["clean", "--dry-run" if args.dry_run else "--force"]
        if args.directories:
            clean_args.append("-d")
        if args.ignored:
            clean_args.append("-x")
        for pattern in args.exclude:
            clean_args += ["--exclude", pattern]
        if args.paths:
            clean_args += ["--", *args.paths]

        output = await ctx.git.raw(clean_args)
        files = [
            line.removeprefix("Would remove ").removeprefix("Removing ").strip()
            for line in output_lines(output)
        ]
        data = {
            "files": files,
            "count": len(files),
            "directories": args.directories,
            "ignored": args.ignored,
            "paths": args.paths or "all",
        }

        if args.dry_run:
            return dry_run_preview(f"Clean completed: {len(files)} files would be removed", files, **data)
        return ToolResult.ok(
            f"Clean completed: {len(files)} files removed",
            data={**data, "dryRun": False},
        )
