"""
Command line entry point.

    git-for-me-dear-ai start [--transport stdio|http] [--host H] [--port P] [-v|-q]
    git-for-me-dear-ai config [--show] [--validate]
    git-for-me-dear-ai tools [--category git|github|gitkraken|system]

``start`` is the default command and serves MCP over stdio.
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from pydantic import ValidationError

from apps import __version__
from gitai_config.settings import Settings
from gitai_obs.logging import get_logger, setup_logging

logger = get_logger(__name__)

# tool name prefix -> category
CATEGORY_PREFIXES = {"git_": "git", "gh_": "github", "gk_": "gitkraken"}
CATEGORIES = ("git", "github", "gitkraken", "system")


def category_of(tool_name: str) -> str:
    for prefix, category in CATEGORY_PREFIXES.items():
        if tool_name.startswith(prefix):
            return category
    return "system"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-for-me-dear-ai",
        description="Git, GitHub and GitKraken CLI tools for AI agents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subcommands = parser.add_subparsers(dest="command")

    start = subcommands.add_parser("start", help="Start the server (default)")
    start.add_argument("--transport", choices=["stdio", "http"], default="stdio")
    start.add_argument("--host", default=None, help="HTTP bind address (default: API_HOST)")
    start.add_argument("--port", type=int, default=None, help="HTTP port (default: API_PORT)")
    start.add_argument("--cwd", type=Path, default=None, help="Repository directory (default: current)")
    verbosity = start.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Errors only")

    config = subcommands.add_parser("config", help="Show or validate configuration")
    config.add_argument("--show", action="store_true", help="Print the effective settings")
    config.add_argument("--validate", action="store_true", help="Exit non-zero if settings are invalid")

    tools = subcommands.add_parser("tools", help="List available tools")
    tools.add_argument("--category", choices=CATEGORIES, default=None)
    tools.add_argument("--cwd", type=Path, default=None, help="Repository directory (default: current)")

    return parser


def load_settings(**overrides) -> Settings | None:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        print("Invalid configuration:", file=sys.stderr)
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            print(f"  {location}: {error['msg']}", file=sys.stderr)
        return None


def cmd_start(args: argparse.Namespace) -> int:
    overrides = {}
    if args.verbose:
        overrides["LOG_LEVEL"] = "DEBUG"
    elif args.quiet:
        overrides["LOG_LEVEL"] = "ERROR"
    settings = load_settings(**overrides)
    if settings is None:
        return 1
    setup_logging(settings)
    logger.info("starting", transport=args.transport, version=__version__)

    if args.transport == "stdio":
        from apps.mcp_server.server import run_stdio

        asyncio.run(run_stdio(settings, args.cwd))
        return 0

    import uvicorn

    from apps.core_api.main import create_app

    if args.cwd is not None:
        # the catalogue is built in the app lifespan, rooted at the process cwd
        os.chdir(args.cwd)
    uvicorn.run(
        create_app(settings=settings),
        host=args.host or settings.API_HOST,
        port=args.port or settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    settings = load_settings()
    if settings is None:
        return 1
    if args.show or not args.validate:
        print(json.dumps(settings.redacted(), indent=2, default=str))
    if args.validate:
        print("Configuration is valid")
    return 0


async def _list_tools(cwd: Path | None, category: str | None) -> list[dict]:
    from gitai_tools.catalogue import create_dispatcher

    settings = Settings(LOG_LEVEL="ERROR")
    setup_logging(settings)
    dispatcher = await create_dispatcher(settings, cwd)
    return [
        tool
        for tool in dispatcher.list_tools()
        if category is None or category_of(tool["name"]) == category
    ]


def cmd_tools(args: argparse.Namespace) -> int:
    tools = asyncio.run(_list_tools(args.cwd, args.category))
    for tool in tools:
        print(f"{tool['name']:<28} {tool['description']}")
    print(f"\n{len(tools)} tools")
    return 0


COMMANDS = {"start": cmd_start, "config": cmd_config, "tools": cmd_tools}


def main(argv: list[str] | None = None) -> int:
    raw = list(sys.argv[1:] if argv is None else argv)
    if not raw or (raw[0] not in COMMANDS and raw[0] not in ("-h", "--help", "--version")):
        raw = ["start", *raw]
    args = build_parser().parse_args(raw)
    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
