"""Assembly of the tool catalogue.

Builds the execution context from settings, instantiates every provider and
populates a registry. The GitKraken provider is registered again after the
CLI has been installed through ``install_gitkraken_cli``, so its tools appear
without a restart.

Usage:
    settings = Settings()
    dispatcher = await create_dispatcher(settings)
    response = await dispatcher.dispatch("git_status", {})
"""

from pathlib import Path

from gitai_config.settings import Settings
from gitai_obs.logging import get_logger
from gitai_tools.adapters.git import git_providers
from gitai_tools.adapters.github import GitHubClient, GitHubProvider
from gitai_tools.adapters.gitkraken import GitKrakenProvider
from gitai_tools.adapters.system import InstallerProvider
from gitai_tools.base import ToolContext, ToolProvider
from gitai_tools.capabilities import CapabilityDetector, SystemDetector
from gitai_tools.dispatcher import ToolDispatcher
from gitai_tools.process import CommandRunner, GitClient
from gitai_tools.registry import ToolRegistry

logger = get_logger(__name__)


def create_context(settings: Settings, working_directory: Path | None = None) -> ToolContext:
    """Execution context rooted at ``working_directory`` (the process cwd by default)."""
    cwd = Path(working_directory or Path.cwd()).resolve()
    runner = CommandRunner(
        cwd=cwd,
        max_concurrent=settings.MAX_CONCURRENT_PROCESSES,
        timeout=settings.COMMAND_TIMEOUT_SECONDS,
    )
    github = None
    if settings.github_enabled:
        github = GitHubClient(
            token=settings.GITHUB_TOKEN,
            base_url=settings.GITHUB_API_URL,
            timeout_seconds=settings.GITHUB_TIMEOUT_SECONDS,
        )
    return ToolContext(
        working_directory=cwd,
        config=settings,
        runner=runner,
        git=GitClient(runner, binary=settings.GIT_BINARY),
        github=github,
    )


def default_providers(
    capability_detector: CapabilityDetector,
    system_detector: SystemDetector,
    registry: ToolRegistry | None = None,
) -> list[ToolProvider]:
    """Every provider in registration order.

    When ``registry`` is given, installing the GitKraken CLI re-registers the
    GitKraken provider into it.
    """
    gitkraken = GitKrakenProvider(capability_detector)

    async def on_gitkraken_installed() -> None:
        if registry is not None:
            added = await registry.register_provider(gitkraken)
            logger.info("gitkraken_tools_refreshed", tools=added)

    return [
        *git_providers(),
        GitHubProvider(),
        gitkraken,
        InstallerProvider(
            system_detector,
            capability_detector,
            on_gitkraken_installed=on_gitkraken_installed,
        ),
    ]


async def build_registry(
    capability_detector: CapabilityDetector,
    system_detector: SystemDetector,
) -> ToolRegistry:
    registry = ToolRegistry()
    for provider in default_providers(capability_detector, system_detector, registry):
        await registry.register_provider(provider)
    logger.info("registry_built", tools=len(registry))
    return registry


async def create_dispatcher(
    settings: Settings, working_directory: Path | None = None
) -> ToolDispatcher:
    """Context, detectors, registry and dispatcher wired from ``settings``."""
    context = create_context(settings, working_directory)
    capability_detector = CapabilityDetector(
        context.runner,
        binary=settings.GITKRAKEN_BINARY,
        probe_features=settings.GITKRAKEN_PROBE_FEATURES,
    )
    system_detector = SystemDetector(context.runner)

    registry = await build_registry(capability_detector, system_detector)
    logger.info(
        "dispatcher_ready",
        working_directory=str(context.working_directory),
        tools=len(registry),
        github=context.github is not None,
    )
    return ToolDispatcher(registry, context)
