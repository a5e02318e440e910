"""Dependency providers for GitHubProjectsFetcher with context awareness.

Provides get_projects_fetcher for use in tool functions.
"""

from __future__ import annotations

import logging

from fastmcp import Context

from mcp_github_projects.github import GitHubProjectsFetcher, ProjectsConfig
from mcp_github_projects.servers.context import MainAppContext

logger = logging.getLogger("mcp-github-projects.servers.dependencies")


def get_app_context(ctx: Context) -> MainAppContext | None:
    """Return the MainAppContext yielded by the server lifespan, if any."""
    request_context = ctx.request_context
    lifespan_ctx_dict = request_context.lifespan_context if request_context else None
    app_lifespan_ctx: MainAppContext | None = (
        lifespan_ctx_dict.get("app_lifespan_context")
        if isinstance(lifespan_ctx_dict, dict)
        else None
    )
    return app_lifespan_ctx


def get_projects_config(ctx: Context) -> ProjectsConfig | None:
    app_lifespan_ctx = get_app_context(ctx)
    return app_lifespan_ctx.projects_config if app_lifespan_ctx else None


async def get_projects_fetcher(ctx: Context) -> GitHubProjectsFetcher:
    """Returns a GitHubProjectsFetcher built from the lifespan configuration.

    A fresh fetcher (and therefore a fresh field catalogue memo) is created
    for every tool invocation.

    Raises:
        ValueError: If the server lifespan did not provide a configuration.
    """
    config = get_projects_config(ctx)
    if config is None:
        logger.error("GitHub Projects configuration could not be resolved.")
        raise ValueError(
            "GitHub Projects client (fetcher) not available. Ensure server is configured correctly."
        )
    logger.debug(
        f"get_projects_fetcher: using global config "
        f"(credential class: {config.credential.capability.value})"
    )
    return GitHubProjectsFetcher(config=config)
