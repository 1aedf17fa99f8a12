"""Tag creation, listing, deletion and publishing."""

import re

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.git.helpers import output_lines, resolve_remote, short_sha
from gitai_tools.adapters.git.schemas import (
    TAG_NAME_PATTERN,
    TagDeleteInput,
    TagInput,
    TagListInput,
    TagPushInput,
)
from gitai_tools.safety import AggregatePolicy, BatchOutcome, dry_run_preview, require_force

logger = get_logger(__name__)

TAG_FORMAT = "%1f".join(
    [
        "%(refname:short)",
        "%(objecttype)",
        "%(objectname)",
        "%(*objectname)",
        "%(contents:subject)",
        "%(taggername)",
        "%(authorname)",
        "%(creatordate:iso8601)",
    ]
)

_SORT_KEYS = {
    "name": "refname",
    "version": "version:refname",
    "creatordate": "creatordate",
    "committerdate": "committerdate",
}


def parse_tag_line(line: str) -> dict[str, str]:
    fields = line.split("\x1f")
    fields += [""] * (8 - len(fields))
    name, object_type, object_sha, peeled, subject, tagger, author, date = fields[:8]
    annotated = object_type == "tag"
    return {
        "name": name,
        "type": "annotated" if annotated else "lightweight",
        "commit": short_sha(peeled if annotated else object_sha) or "unknown",
        "message": subject,
        "tagger": (tagger if annotated else author) or "unknown",
        "date": date or "unknown",
    }


async def tag_info(ctx: ToolContext, name: str) -> dict[str, str] | None:
    output = await ctx.git.raw(["tag", "--list", f"--format={TAG_FORMAT}", name])
    lines = output_lines(output)
    return parse_tag_line(lines[0]) if lines else None


class TagTool(BaseTool):
    name = "git_tag"
    description = "Create a lightweight or annotated tag"
    input_model = TagInput
    metadata = ToolMetadata(capabilities=("git.write",), risk_level="low")
    failure_message = "Failed to create tag '{name}'"

    async def run(self, ctx: ToolContext, args: TagInput) -> ToolResult:
        logger.info("git_tag", name=args.name, commit=args.commit, force=args.force, annotated=args.annotated)

        if not re.match(TAG_NAME_PATTERN, args.name):
            return ToolResult.fail(
                "Invalid tag name. Use only letters, numbers, dots, hyphens, underscores, and slashes.",
                error="Invalid tag name format",
            )

        exists = await ctx.git.ref_exists(f"refs/tags/{args.name}")
        blocked = require_force(
            exists,
            args.force,
            rule="tag_exists",
            message=f"Tag '{args.name}' already exists. Use force=true to replace it.",
            error="Tag already exists",
            state={"tag": args.name},
        )
        if blocked:
            return blocked

        tag_args = ["tag"]
        if args.force:
            tag_args.append("--force")
        if args.sign:
            tag_args.append("--sign")
        if args.message:
            tag_args += ["--message", args.message]
        elif args.annotated:
            # annotated tags need a message; avoid opening an editor
            tag_args += ["--annotate", "--message", args.name]
        tag_args.append(args.name)
        if args.commit:
            tag_args.append(args.commit)
        await ctx.git.run(tag_args)

        info = await tag_info(ctx, args.name) or {"name": args.name}
        return ToolResult.ok(
            f"Tag '{args.name}' created successfully",
            data={**info, "signed": args.sign, "replaced": exists},
        )


class TagListTool(BaseTool):
    name = "git_tag_list"
    description = "List tags with filtering, sorting and optional details"
    input_model = TagListInput
    metadata = ToolMetadata(capabilities=("git.read",), idempotent=True)
    failure_message = "Failed to list tags"

    async def run(self, ctx: ToolContext, args: TagListInput) -> ToolResult:
        logger.info("git_tag_list", pattern=args.pattern, sort=args.sort, limit=args.limit)

        list_args = ["tag", "--list", f"--sort={_SORT_KEYS[args.sort]}", f"--format={TAG_FORMAT}"]
        if args.merged:
            list_args += ["--merged", args.merged]
        if args.contains:
            list_args += ["--contains", args.contains]
        if args.pattern:
            list_args.append(args.pattern)

        lines = output_lines(await ctx.git.raw(list_args))
        has_more = len(lines) > args.limit
        parsed = [parse_tag_line(line) for line in lines[: args.limit]]
        tags = parsed if args.detailed else [{"name": t["name"]} for t in parsed]

        message = f"Found {len(tags)} tags" if tags else "No tags found matching criteria"
        return ToolResult.ok(
            message,
            data={
                "tags": tags,
                "count": len(tags),
                "pattern": args.pattern,
                "sort": args.sort,
                "detailed": args.detailed,
                "hasMore": has_more,
            },
        )


class TagDeleteTool(BaseTool):
    """Delete local tags; succeeds only when every requested tag is deleted."""

    name = "git_tag_delete"
    description = "Delete one or more local tags"
    input_model = TagDeleteInput
    metadata = ToolMetadata(
        capabilities=("git.write",), destructive=True, dry_run_supported=True, risk_level="medium"
    )
    failure_message = "Failed to delete tags"

    async def run(self, ctx: ToolContext, args: TagDeleteInput) -> ToolResult:
        logger.info("git_tag_delete", tags=args.tags, dry_run=args.dry_run)

        existing, missing = [], []
        for tag in args.tags:
            if await ctx.git.ref_exists(f"refs/tags/{tag}"):
                existing.append(tag)
            else:
                missing.append(tag)

        if not existing:
            return ToolResult.fail(
                "None of the specified tags exist",
                error="Tags not found",
                data={"nonExistentTags": missing},
            )

        if args.dry_run:
            return dry_run_preview(
                f"Would delete {len(existing)} tags",
                [f"git tag --delete {tag}" for tag in existing],
                tags=existing,
                nonExistent=missing,
            )

        batch = BatchOutcome(AggregatePolicy.ALL)
        for tag in args.tags:
            if tag in missing:
                batch.record(tag, False, error="Tag does not exist")
                continue
            await batch.attempt(tag, lambda tag=tag: self._delete(ctx, tag))

        return batch.to_result(
            f"Deleted {len(batch.succeeded)} of {len(args.tags)} tags",
            data={
                "deleted": batch.succeeded,
                "failed": [o.target for o in batch.failed],
                "errors": [o.to_dict("tag") for o in batch.failed],
                "nonExistent": missing,
                "total": len(args.tags),
                "successful": len(batch.succeeded),
            },
        )

    @staticmethod
    async def _delete(ctx: ToolContext, tag: str) -> None:
        await ctx.git.run(["tag", "--delete", tag])


class TagPushTool(BaseTool):
    name = "git_tag_push"
    description = "Push tags to remote repository"
    input_model = TagPushInput
    metadata = ToolMetadata(
        capabilities=("git.write", "git.network"), dry_run_supported=True, risk_level="medium"
    )
    failure_message = "Failed to push tags"

    async def run(self, ctx: ToolContext, args: TagPushInput) -> ToolResult:
        remote = resolve_remote(ctx, args.remote)
        logger.info("git_tag_push", remote=remote, tags=args.tags, delete=args.delete, dry_run=args.dry_run)

        if remote not in await ctx.git.remotes():
            return ToolResult.fail(f"Remote '{remote}' not found", error="Remote not found")

        push_args = ["push"]
        if args.dry_run:
            push_args.append("--dry-run")
        if args.force:
            push_args.append("--force")
        push_args.append(remote)

        if args.delete:
            if not args.tags:
                return ToolResult.fail(
                    "Must specify tags to delete from remote", error="No tags specified for deletion"
                )
            push_args += [f":refs/tags/{tag}" for tag in args.tags]
        elif args.tags and not args.all:
            push_args += [f"refs/tags/{tag}:refs/tags/{tag}" for tag in args.tags]
        else:
            push_args.append("--tags")

        result = await ctx.git.run(push_args)
        action = "deleted from" if args.delete else "pushed to"
        return ToolResult.ok(
            f"Tags {action} {remote} successfully",
            data={
                "remote": remote,
                "tags": args.tags or "all",
                "action": "delete" if args.delete else "push",
                "force": args.force,
                "dryRun": args.dry_run,
                "output": result.output,
            },
        )
