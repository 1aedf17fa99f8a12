"""Staging, committing and remote synchronisation tools."""

import re

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.git.helpers import (
    output_lines,
    resolve_branch,
    resolve_remote,
    short_sha,
)
from gitai_tools.adapters.git.schemas import (
    AddInput,
    CommitInput,
    FetchInput,
    PullInput,
    PushInput,
    StashInput,
)
from gitai_tools.exceptions import PreconditionError
from gitai_tools.safety import dry_run_preview, require_force

logger = get_logger(__name__)

# ============================================================================
# COMMIT MESSAGES
# ============================================================================

GITMOJIS = {
    "feat": "✨",
    "fix": "🐛",
    "docs": "📚",
    "style": "💄",
    "refactor": "♻️",
    "test": "✅",
    "chore": "🔧",
    "ci": "👷",
    "perf": "⚡",
}
DEFAULT_GITMOJI = "📝"

_EMOJI = re.compile(
    "[\U0001F600-\U0001F64F\U0001F300-\U0001F5FF\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF☀-⛿✀-➿]"
)

# first match wins
_TYPE_KEYWORDS = (
    ("fix", ("fix", "bug")),
    ("feat", ("add", "new")),
    ("docs", ("doc",)),
    ("style", ("style", "format")),
    ("refactor", ("refactor", "restructure")),
    ("test", ("test",)),
    ("perf", ("performance", "perf")),
    ("ci", ("ci", "build")),
)

_SHORTSTAT = re.compile(
    r"(?P<files>\d+) files? changed"
    r"(?:, (?P<insertions>\d+) insertions?\(\+\))?"
    r"(?:, (?P<deletions>\d+) deletions?\(-\))?"
)


def gitmoji_for(commit_type: str | None) -> str:
    return GITMOJIS.get(commit_type or "", DEFAULT_GITMOJI)


def has_emoji(text: str) -> bool:
    return bool(_EMOJI.search(text))


def detect_commit_type(message: str) -> str:
    """Guess a conventional type from free text, ``chore`` when nothing matches."""
    lowered = message.lower()
    for commit_type, keywords in _TYPE_KEYWORDS:
        if any(k in lowered for k in keywords):
            return commit_type
    return "chore"


def build_commit_message(args: CommitInput, *, gitmojis: bool, auto_conventions: bool) -> str:
    """Compose the final commit message.

    ``type`` + ``description`` produce a conventional commit, otherwise
    ``message`` is used as given. A gitmoji is prefixed when both the call
    and the configuration allow it and the message has none yet.
    """
    use_gitmoji = args.gitmoji and gitmojis

    if args.type and args.description:
        header = args.type
        if args.scope:
            header += f"({args.scope})"
        if args.breaking:
            header += "!"
        header += f": {args.description}"
        if use_gitmoji:
            header = f"{gitmoji_for(args.type)} {header}"
        message = header
        if args.body:
            message += f"\n\n{args.body}"
        if args.breaking:
            message += f"\n\nBREAKING CHANGE: {args.description}"
        return message

    if not args.message:
        raise PreconditionError("Either message or type+description is required")

    if use_gitmoji and not has_emoji(args.message):
        detected = detect_commit_type(args.message) if auto_conventions else None
        return f"{gitmoji_for(detected)} {args.message}"
    return args.message


def parse_shortstat(output: str) -> dict[str, int]:
    match = _SHORTSTAT.search(output)
    if not match:
        return {"files": 0, "insertions": 0, "deletions": 0}
    return {key: int(value or 0) for key, value in match.groupdict().items()}


# ============================================================================
# TOOLS
# ============================================================================


class AddTool(BaseTool):
    name = "git_add"
    description = "Stage files for commit with smart pattern matching"
    input_model = AddInput
    metadata = ToolMetadata(capabilities=("git.write",), dry_run_supported=True, idempotent=True)
    failure_message = "Failed to stage files"

    async def run(self, ctx: ToolContext, args: AddInput) -> ToolResult:
        logger.info("git_add", files=args.files, all=args.all, update=args.update, dry_run=args.dry_run)

        add_args = ["add"]
        if args.all:
            add_args.append("-A")
        elif args.update:
            add_args.append("-u")

        if args.dry_run:
            # --dry-run only reports; the index is untouched
            output = await ctx.git.raw([*add_args, "--dry-run", "--", *(args.files or ["."])])
            files = [line.split(" ", 1)[-1].strip("'") for line in output_lines(output)]
            return dry_run_preview(
                f"Would stage {len(files)} files",
                f"git {' '.join(add_args)} {' '.join(args.files or ['.'])}",
                staged=files,
            )

        if not args.all and not args.update:
            add_args += ["--", *(args.files or ["."])]
        elif args.files:
            add_args += ["--", *args.files]
        await ctx.git.run(add_args)

        staged = output_lines(await ctx.git.raw(["diff", "--cached", "--name-only"]))
        return ToolResult.ok(
            f"Staged {len(staged)} files",
            data={"staged": staged, "command": add_args, "dryRun": False},
        )


class CommitTool(BaseTool):
    name = "git_commit"
    description = "Create commit with conventional messages, gitmoji support, and smart templates"
    input_model = CommitInput
    metadata = ToolMetadata(capabilities=("git.write",), dry_run_supported=True)
    failure_message = "Failed to create commit"

    async def run(self, ctx: ToolContext, args: CommitInput) -> ToolResult:
        message = build_commit_message(
            args,
            gitmojis=ctx.config.GIT_GITMOJIS,
            auto_conventions=ctx.config.GIT_AUTO_CONVENTIONS,
        )
        logger.info("git_commit", type=args.type, scope=args.scope, amend=args.amend, dry_run=args.dry_run)

        if args.dry_run:
            status = await ctx.git.status()
            files = [*status.staged, *status.unstaged] if args.all else status.staged
            return dry_run_preview(
                f"Would commit {len(files)} files",
                message,
                commitMessage=message,
                files=files,
            )

        commit_args = ["commit"]
        if args.all:
            commit_args.append("-a")
        if args.amend:
            commit_args.append("--amend")
        commit_args += ["-m", message]

        result = await ctx.git.run(commit_args)
        sha = await ctx.git.rev_parse("HEAD")
        stats = parse_shortstat(result.stdout)

        return ToolResult.ok(
            f"Commit created: {short_sha(sha)}",
            data={"hash": sha, "message": message, **stats},
        )


class PushTool(BaseTool):
    name = "git_push"
    description = "Push commits to remote repository with upstream tracking and force options"
    input_model = PushInput
    metadata = ToolMetadata(
        capabilities=("git.write", "git.network"), dry_run_supported=True, risk_level="medium"
    )
    failure_message = "Failed to push"

    async def run(self, ctx: ToolContext, args: PushInput) -> ToolResult:
        remote = resolve_remote(ctx, args.remote)
        branch = await resolve_branch(ctx, args.branch)
        logger.info("git_push", remote=remote, branch=branch, force=args.force, dry_run=args.dry_run)

        push_args = ["push"]
        if args.dry_run:
            push_args.append("--dry-run")
        if args.set_upstream:
            push_args.append("-u")
        if args.force_with_lease:
            push_args.append("--force-with-lease")
        elif args.force:
            push_args.append("--force")
        if args.tags:
            push_args.append("--tags")
        push_args += [remote, branch]

        result = await ctx.git.run(push_args)
        verb = "Would push" if args.dry_run else "Pushed"
        return ToolResult.ok(
            f"{verb} to {remote}/{branch}",
            data={
                "remote": remote,
                "branch": branch,
                "setUpstream": args.set_upstream,
                "dryRun": args.dry_run,
                "output": result.output,
            },
        )


class PullTool(BaseTool):
    name = "git_pull"
    description = "Pull and merge changes from remote repository with rebase options"
    input_model = PullInput
    metadata = ToolMetadata(capabilities=("git.write", "git.network"), risk_level="medium")
    failure_message = "Failed to pull"

    async def run(self, ctx: ToolContext, args: PullInput) -> ToolResult:
        remote = resolve_remote(ctx, args.remote)
        logger.info("git_pull", remote=remote, branch=args.branch, rebase=args.rebase)

        pull_args = ["pull"]
        if args.rebase:
            pull_args.append("--rebase")
        if args.ff == "only":
            pull_args.append("--ff-only")
        elif args.ff == "no":
            pull_args.append("--no-ff")
        if args.squash:
            pull_args.append("--squash")
        if args.tags:
            pull_args.append("--tags")
        pull_args.append(remote)
        if args.branch:
            pull_args.append(args.branch)

        result = await ctx.git.run(pull_args)
        up_to_date = "Already up to date" in result.output
        return ToolResult.ok(
            f"Pulled from {remote}" + (f"/{args.branch}" if args.branch else ""),
            data={
                "remote": remote,
                "branch": args.branch,
                "upToDate": up_to_date,
                "summary": parse_shortstat(result.stdout),
                "output": result.output,
            },
        )


class StashTool(BaseTool):
    name = "git_stash"
    description = "Manage Git stash for temporary storage of changes"
    input_model = StashInput
    metadata = ToolMetadata(capabilities=("git.write",), destructive=True, risk_level="medium")
    failure_message = "Failed to {action} stash"

    async def run(self, ctx: ToolContext, args: StashInput) -> ToolResult:
        logger.info("git_stash", action=args.action, stash_index=args.stash_index)
        ref = f"stash@{{{args.stash_index}}}"

        if args.action == "push":
            stash_args = ["stash", "push"]
            if args.message:
                stash_args += ["-m", args.message]
            if args.include_untracked:
                stash_args.append("-u")
            if args.keep_index:
                stash_args.append("--keep-index")
            await ctx.git.run(stash_args)
            data = {"action": "pushed", "message": args.message}
        elif args.action in ("pop", "apply", "drop"):
            await ctx.git.run(["stash", args.action, ref])
            past = {"pop": "popped", "apply": "applied", "drop": "dropped"}[args.action]
            data = {"action": past, "index": args.stash_index}
        elif args.action == "list":
            stashes = output_lines(await ctx.git.raw(["stash", "list"]))
            data = {"action": "listed", "stashes": stashes, "total": len(stashes)}
        elif args.action == "show":
            content = await ctx.git.raw(["stash", "show", ref])
            data = {"action": "showed", "index": args.stash_index, "content": content.strip()}
        else:
            count = await ctx.git.stash_count()
            blocked = require_force(
                count > 0,
                args.force,
                rule="stash_clear",
                message=f"Refusing to clear {count} stash entries",
                error="Clearing the stash is irreversible. Use force=true to clear all stashes.",
                state={"stashCount": count},
            )
            if blocked:
                return blocked
            await ctx.git.run(["stash", "clear"])
            data = {"action": "cleared", "removed": count}

        return ToolResult.ok(f"Stash {args.action} completed", data=data)


def _remote_refs(output: str) -> dict[str, str]:
    refs = {}
    for line in output_lines(output):
        name, _, sha = line.partition(" ")
        refs[name] = sha
    return refs


class FetchTool(BaseTool):
    name = "git_fetch"
    description = "Fetch changes from remote repository without merging"
    input_model = FetchInput
    metadata = ToolMetadata(
        capabilities=("git.read", "git.network"), dry_run_supported=True, idempotent=True
    )
    failure_message = "Failed to fetch"

    async def run(self, ctx: ToolContext, args: FetchInput) -> ToolResult:
        remote = resolve_remote(ctx, args.remote)
        logger.info("git_fetch", remote=remote, branch=args.branch, all=args.all, dry_run=args.dry_run)

        fetch_args = ["fetch"]
        if args.dry_run:
            fetch_args.append("--dry-run")
        if args.force:
            fetch_args.append("--force")
        if args.prune:
            fetch_args.append("--prune")
        if args.tags:
            fetch_args.append("--tags")
        if args.quiet:
            fetch_args.append("--quiet")
        if args.verbose:
            fetch_args.append("--verbose")
        if args.depth:
            fetch_args += ["--depth", str(args.depth)]
        if args.all:
            fetch_args.append("--all")
        else:
            fetch_args.append(remote)
            if args.branch:
                fetch_args.append(args.branch)

        ref_listing = ["for-each-ref", "--format=%(refname:short) %(objectname)", "refs/remotes"]
        before = _remote_refs(await ctx.git.raw(ref_listing))
        result = await ctx.git.run(fetch_args)
        after = _remote_refs(await ctx.git.raw(ref_listing))

        new_branches = [name for name in after if name not in before]
        updated_branches = [name for name in after if name in before and before[name] != after[name]]

        source = "all remotes" if args.all else remote
        message = f"{'Would fetch' if args.dry_run else 'Fetched'} from {source}"
        if new_branches:
            message += f", {len(new_branches)} new branches"
        if updated_branches:
            message += f", {len(updated_branches)} updated branches"

        return ToolResult.ok(
            message,
            data={
                "remote": "all" if args.all else remote,
                "branch": args.branch or "all",
                "newBranches": new_branches,
                "updatedBranches": updated_branches,
                "dryRun": args.dry_run,
                "output": result.output,
            },
        )
