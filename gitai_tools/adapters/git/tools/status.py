"""Read-only inspection tools: status, log, diff, blame and show."""

import re

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.git.helpers import output_lines, short_sha, upstream_divergence
from gitai_tools.adapters.git.schemas import (
    BlameInput,
    DiffInput,
    LogInput,
    ShowInput,
    StatusInput,
)
from gitai_tools.exceptions import PreconditionError

logger = get_logger(__name__)

READ_ONLY = ToolMetadata(idempotent=True, capabilities=("git.read",))

# unit/record separators keep free-text fields intact
_FIELD = "\x1f"
_RECORD = "\x1e"
LOG_FORMAT = _FIELD.join(["%H", "%an", "%ae", "%aI", "%s", "%b"]) + _RECORD

_BLAME_LINE = re.compile(r"^\^?(?P<hash>[0-9a-f]+)\s+(?:(?P<file>\S+)\s+)?\((?P<info>[^)]*)\)\s?(?P<content>.*)$")
_BLAME_DATE = re.compile(r"\s+(\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} [+-]\d{4})")


def parse_log(output: str) -> list[dict[str, str]]:
    commits = []
    for record in output.split(_RECORD):
        record = record.strip("\n")
        if not record:
            continue
        fields = record.split(_FIELD)
        if len(fields) < 5:
            continue
        commits.append(
            {
                "hash": fields[0],
                "author": fields[1],
                "email": fields[2],
                "date": fields[3],
                "message": fields[4],
                "body": fields[5].strip() if len(fields) > 5 else "",
            }
        )
    return commits


def format_status(status: dict, stash_count: int, style: str) -> str:
    branch = status["branch"]
    ahead, behind = status["ahead"], status["behind"]

    if style == "porcelain":
        header = f"## {branch}"
        if ahead:
            header += f"...ahead {ahead}"
        if behind:
            header += f"...behind {behind}"
        lines = [header]
        lines += [f"A  {f}" for f in status["staged"]]
        lines += [f" M {f}" for f in status["unstaged"]]
        lines += [f"?? {f}" for f in status["untracked"]]
        lines += [f"UU {f}" for f in status["conflicted"]]
        return "\n".join(lines) + "\n"

    if style == "short":
        total = len(status["staged"]) + len(status["unstaged"]) + len(status["untracked"])
        return f"On branch {branch} | {total} changes | {ahead}↑ {behind}↓"

    out = f"On branch {branch}\n"
    if ahead or behind:
        parts = []
        if ahead:
            parts.append(f"ahead of upstream by {ahead} commit{'s' if ahead > 1 else ''}")
        if behind:
            parts.append(f"behind by {behind} commit{'s' if behind > 1 else ''}")
        out += "Your branch is " + " and ".join(parts) + "\n"
    sections = [
        ("Changes to be committed:", "modified: ", status["staged"]),
        ("Changes not staged for commit:", "modified: ", status["unstaged"]),
        ("Untracked files:", "", status["untracked"]),
        ("Unmerged paths:", "both modified: ", status["conflicted"]),
    ]
    for title, prefix, files in sections:
        if files:
            out += f"\n{title}\n" + "".join(f"  {prefix}{f}\n" for f in files)
    if stash_count:
        out += f"\nYou have {stash_count} stash{'es' if stash_count > 1 else ''}\n"
    return out


class StatusTool(BaseTool):
    """Repository status with staged, unstaged, untracked and conflicted files."""

    name = "git_status"
    description = "Get comprehensive Git repository status with staged, unstaged, and untracked files"
    input_model = StatusInput
    metadata = READ_ONLY
    failure_message = "Failed to get repository status"

    async def run(self, ctx: ToolContext, args: StatusInput) -> ToolResult:
        logger.info("git_status")
        status = await ctx.git.status()
        ahead, behind = await upstream_divergence(ctx) if args.branch else (0, 0)
        stash_count = await ctx.git.stash_count() if args.show_stash else 0

        branch = status.branch or ("HEAD (detached)" if status.detached else "")
        summary = {
            "branch": branch,
            "tracking": status.tracking,
            "ahead": ahead,
            "behind": behind,
            "staged": status.staged,
            "unstaged": status.unstaged,
            "untracked": status.untracked,
            "conflicted": status.conflicted,
        }
        style = "porcelain" if args.porcelain else "short" if args.short else "human"
        return ToolResult.ok(
            "Repository status retrieved",
            data={
                "status": summary,
                "clean": status.is_clean,
                "formatted": format_status(summary, stash_count, style),
                "stashCount": stash_count,
            },
        )


class LogTool(BaseTool):
    name = "git_log"
    description = "Get Git commit history with customizable format and filters"
    input_model = LogInput
    metadata = READ_ONLY
    failure_message = "Failed to get commit history"

    async def run(self, ctx: ToolContext, args: LogInput) -> ToolResult:
        logger.info("git_log", max_count=args.max_count, author=args.author, since=args.since)

        filters = [f"--max-count={args.max_count}"]
        if args.author:
            filters.append(f"--author={args.author}")
        if args.since:
            filters.append(f"--since={args.since}")
        if args.until:
            filters.append(f"--until={args.until}")
        if args.grep:
            filters.append(f"--grep={args.grep}")
        pathspec = ["--", args.path] if args.path else []

        output = await ctx.git.raw(["log", f"--format={LOG_FORMAT}", *filters, *pathspec])
        commits = parse_log(output)

        data = {"commits": commits, "total": len(commits), "latest": commits[0] if commits else None}
        if args.oneline or args.graph:
            render = ["log", "--oneline", *filters]
            if args.graph:
                render.insert(1, "--graph")
            data["formatted"] = (await ctx.git.raw([*render, *pathspec])).rstrip("\n")

        return ToolResult.ok(f"Retrieved {len(commits)} commits", data=data)


class DiffTool(BaseTool):
    name = "git_diff"
    description = "Show differences between commits, branches, working tree, or staging area"
    input_model = DiffInput
    metadata = READ_ONLY
    failure_message = "Failed to get diff"

    async def run(self, ctx: ToolContext, args: DiffInput) -> ToolResult:
        logger.info("git_diff", target=args.target, commit1=args.commit1, commit2=args.commit2)

        diff_args = ["diff"]
        if args.context_lines != 3:
            diff_args.append(f"-U{args.context_lines}")
        if args.name_only:
            diff_args.append("--name-only")
        if args.stat:
            diff_args.append("--stat")

        if args.target == "staged":
            diff_args.append("--cached")
        elif args.target in ("commit", "branch"):
            if not args.commit1:
                raise PreconditionError(f"commit1 is required for {args.target} target")
            if args.commit2:
                diff_args += [args.commit1, args.commit2]
            elif args.target == "commit":
                diff_args += [f"{args.commit1}^", args.commit1]
            else:
                diff_args.append(args.commit1)

        if args.path:
            diff_args += ["--", args.path]

        diff = await ctx.git.raw(diff_args)
        return ToolResult.ok(
            "Diff retrieved successfully",
            data={
                "diff": diff,
                "target": args.target,
                "commit1": args.commit1,
                "commit2": args.commit2,
                "path": args.path,
                "options": {
                    "nameOnly": args.name_only,
                    "stat": args.stat,
                    "contextLines": args.context_lines,
                },
            },
        )


def parse_blame(output: str) -> list[dict[str, str]]:
    entries = []
    for line in output.splitlines():
        if not line.strip():
            continue
        match = _BLAME_LINE.match(line)
        if not match:
            entries.append({"hash": "", "author": "", "date": "", "content": line})
            continue
        info = match.group("info")
        date_match = _BLAME_DATE.search(info)
        if date_match:
            author = info[: date_match.start()].strip()
            date = date_match.group(1)
        else:
            author, date = info.strip(), ""
        entries.append(
            {
                "hash": short_sha(match.group("hash")),
                "author": author,
                "date": date,
                "content": match.group("content"),
            }
        )
    return entries


class BlameTool(BaseTool):
    name = "git_blame"
    description = "Show line-by-line authorship and commit information for a file"
    input_model = BlameInput
    metadata = READ_ONLY
    failure_message = "Failed to get blame for {file}"

    async def run(self, ctx: ToolContext, args: BlameInput) -> ToolResult:
        logger.info("git_blame", file=args.file, line_start=args.line_start, line_end=args.line_end)

        blame_args = ["blame"]
        if args.show_email:
            blame_args.append("-e")
        if args.show_line_numbers:
            blame_args.append("-n")
        if args.line_start and args.line_end:
            blame_args += ["-L", f"{args.line_start},{args.line_end}"]
        elif args.line_start:
            blame_args += ["-L", f"{args.line_start},+1"]
        blame_args += ["--", args.file]

        lines = parse_blame(await ctx.git.raw(blame_args))
        line_range = (
            {"start": args.line_start, "end": args.line_end}
            if args.line_start and args.line_end
            else None
        )
        return ToolResult.ok(
            f"Blame retrieved for {args.file}",
            data={"file": args.file, "lines": lines, "lineRange": line_range},
        )


class ShowTool(BaseTool):
    name = "git_show"
    description = "Show commit details including changes, metadata, and files"
    input_model = ShowInput
    metadata = READ_ONLY
    failure_message = "Failed to show commit {commit}"

    async def run(self, ctx: ToolContext, args: ShowInput) -> ToolResult:
        logger.info("git_show", commit=args.commit)

        show_args = ["show", args.commit]
        if not args.show_diff:
            show_args.append("--no-patch")
        if args.name_only:
            show_args.append("--name-only")
        if args.stat:
            show_args.append("--stat")
        raw = await ctx.git.raw(show_args)

        info = await ctx.git.raw(["log", "-1", f"--format={LOG_FORMAT}", args.commit])
        files = output_lines(await ctx.git.raw(["show", "--name-only", "--format=", args.commit]))
        commits = parse_log(info)
        commit = {**commits[0], "files": files} if commits else None

        return ToolResult.ok(
            f"Commit details retrieved for {args.commit}",
            data={"raw": raw, "commit": commit},
        )
