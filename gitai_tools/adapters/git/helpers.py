"""Small helpers shared by the git tools."""

from gitai_tools.base import ToolContext


def short_sha(sha: str) -> str:
    return sha.strip()[:8]


def output_lines(text: str) -> list[str]:
    return [line for line in text.splitlines() if line.strip()]


def resolve_remote(ctx: ToolContext, remote: str | None) -> str:
    return remote or ctx.config.GIT_DEFAULT_REMOTE


async def resolve_branch(ctx: ToolContext, branch: str | None) -> str:
    """Explicit branch, else the checked-out one (``HEAD`` when detached)."""
    if branch:
        return branch
    return await ctx.git.current_branch() or "HEAD"


async def upstream_divergence(ctx: ToolContext) -> tuple[int, int]:
    """(ahead, behind) of HEAD against its upstream; zeros without one."""
    upstream = await ctx.git.run(["rev-parse", "--abbrev-ref", "@{upstream}"], check=False)
    if not upstream.success or not upstream.stdout.strip():
        return 0, 0
    counts = await ctx.git.run(
        ["rev-list", "--left-right", "--count", f"{upstream.stdout.strip()}...HEAD"], check=False
    )
    if not counts.success:
        return 0, 0
    parts = counts.stdout.split()
    if len(parts) != 2:
        return 0, 0
    behind, ahead = (int(p) for p in parts)
    return ahead, behind
