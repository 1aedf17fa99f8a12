"""Repository setup tools: init, clone, remotes and config."""

from pathlib import Path

from gitai_obs.logging import get_logger
from gitai_tools.base import BaseTool, ToolContext, ToolMetadata, ToolResult
from gitai_tools.adapters.git.helpers import output_lines
from gitai_tools.adapters.git.schemas import (
    CloneInput,
    ConfigInput,
    InitInput,
    RemoteInput,
)
from gitai_tools.exceptions import PreconditionError

logger = get_logger(__name__)


def _clone_directory(url: str) -> str:
    name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name or "repository"


class InitTool:
    """Tool for initializing repositories."""

    name = "git_init"
    description = "Initialize a new Git repository with optional configuration"
    input_model = InitInput
    metadata = ToolMetadata(capabilities=("git.write",), risk_level="low")

    async def execute(self, ctx: ToolContext, args: InitInput) -> ToolResult:
        target = Path(args.path) if args.path else ctx.working_directory
        if not target.is_absolute():
            target = ctx.working_directory / target
        logger.info("git_init", path=str(target), bare=args.bare, default_branch=args.default_branch)

        init_args = ["init"]
        if args.bare:
            init_args.append("--bare")
        if args.default_branch:
            init_args += ["--initial-branch", args.default_branch]
        if args.template:
            init_args += ["--template", args.template]
        init_args.append(str(target))

        result = await ctx.git.run(init_args, check=False)
        if not result.success:
            return ToolResult.fail("Failed to initialize repository", error=result.output)

        return ToolResult.ok(
            f"Repository initialized at {target}",
            data={"path": str(target), "bare": args.bare, "defaultBranch": args.default_branch},
        )


class CloneTool(BaseTool):
    name = "git_clone"
    description = "Clone a Git repository from a remote URL"
    input_model = CloneInput
    metadata = ToolMetadata(capabilities=("git.write", "git.network"), risk_level="low")
    failure_message = "Failed to clone repository"

    async def run(self, ctx: ToolContext, args: CloneInput) -> ToolResult:
        logger.info("git_clone", url=args.url, directory=args.directory, branch=args.branch)

        clone_args = ["clone"]
        if args.branch:
            clone_args += ["--branch", args.branch]
        if args.depth:
            clone_args += ["--depth", str(args.depth)]
        if args.recursive:
            clone_args.append("--recursive")
        clone_args.append(args.url)
        if args.directory:
            clone_args.append(args.directory)

        await ctx.git.run(clone_args)

        directory = args.directory or _clone_directory(args.url)
        return ToolResult.ok(
            f"Repository cloned to {directory}",
            data={"url": args.url, "directory": directory, "branch": args.branch, "depth": args.depth},
        )


class RemoteTool(BaseTool):
    name = "git_remote"
    description = "Manage Git remotes (add, remove, set-url, list, show)"
    input_model = RemoteInput
    metadata = ToolMetadata(capabilities=("git.read", "git.write"), idempotent=True)
    failure_message = "Failed to {action} remote"

    async def run(self, ctx: ToolContext, args: RemoteInput) -> ToolResult:
        logger.info("git_remote", action=args.action, name=args.name)

        if args.action == "list":
            data = await self._list(ctx, args.verbose)
        elif args.action == "add":
            if not args.name or not args.url:
                raise PreconditionError("Remote name and URL are required for add action")
            await ctx.git.run(["remote", "add", args.name, args.url])
            data = {"name": args.name, "url": args.url, "action": "added"}
        elif args.action == "remove":
            if not args.name:
                raise PreconditionError("Remote name is required for remove action")
            await ctx.git.run(["remote", "remove", args.name])
            data = {"name": args.name, "action": "removed"}
        elif args.action == "set-url":
            if not args.name or not args.url:
                raise PreconditionError("Remote name and URL are required for set-url action")
            await ctx.git.run(["remote", "set-url", args.name, args.url])
            data = {"name": args.name, "url": args.url, "action": "url-updated"}
        else:
            if not args.name:
                raise PreconditionError("Remote name is required for show action")
            info = await ctx.git.raw(["remote", "show", args.name])
            data = {"name": args.name, "info": info.strip()}

        return ToolResult.ok(f"Remote {args.action} completed", data=data)

    async def _list(self, ctx: ToolContext, verbose: bool) -> list:
        if not verbose:
            return await ctx.git.remotes()

        remotes: dict[str, dict[str, str]] = {}
        for line in output_lines(await ctx.git.raw(["remote", "-v"])):
            parts = line.split()
            if len(parts) < 3:
                continue
            name, url, kind = parts[0], parts[1], parts[2].strip("()")
            remotes.setdefault(name, {"name": name})[kind] = url
        return list(remotes.values())


class ConfigTool(BaseTool):
    name = "git_config"
    description = "Get or set Git configuration values (user.name, user.email, etc.)"
    input_model = ConfigInput
    metadata = ToolMetadata(capabilities=("git.read", "git.write"), idempotent=True)
    failure_message = "Failed to {action} git config"

    async def run(self, ctx: ToolContext, args: ConfigInput) -> ToolResult:
        logger.info("git_config", action=args.action, key=args.key, scope_global=args.global_)

        config_args = ["config"]
        if args.global_:
            config_args.append("--global")
        if args.system:
            config_args.append("--system")

        if args.action == "list":
            output = await ctx.git.raw([*config_args, "--list"])
            entries = {}
            for line in output_lines(output):
                key, _, value = line.partition("=")
                entries[key] = value
            data = {"entries": entries, "count": len(entries)}
        elif args.action == "get":
            if not args.key:
                raise PreconditionError("Configuration key is required for get action")
            value = await ctx.git.raw([*config_args, "--get", args.key])
            data = {"key": args.key, "value": value.strip()}
        elif args.action == "set":
            if not args.key or args.value is None:
                raise PreconditionError("Configuration key and value are required for set action")
            await ctx.git.run([*config_args, args.key, args.value])
            data = {"key": args.key, "value": args.value, "action": "set"}
        else:
            if not args.key:
                raise PreconditionError("Configuration key is required for unset action")
            await ctx.git.run([*config_args, "--unset", args.key])
            data = {"key": args.key, "action": "unset"}

        return ToolResult.ok(f"Git config {args.action} completed", data=data)
