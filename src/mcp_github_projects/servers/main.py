"""Main FastMCP server setup for GitHub Projects integration."""

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import CallNext, Middleware, MiddlewareContext
from fastmcp.tools import Tool as FastMCPTool
from starlette.requests import Request
from starlette.responses import JSONResponse

from mcp_github_projects.github import ProjectsConfig
from mcp_github_projects.github.credentials import log_credential_advisory
from mcp_github_projects.utils.io import is_read_only_mode
from mcp_github_projects.utils.logging import mask_sensitive
from mcp_github_projects.utils.tools import get_enabled_tools, should_include_tool

from .context import MainAppContext
from .dependencies import get_app_context
from .github import projects_mcp

logger = logging.getLogger("mcp-github-projects.server.main")


async def health_check(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


@asynccontextmanager
async def main_lifespan(app: FastMCP[MainAppContext]) -> AsyncIterator[dict]:
    logger.info("Main GitHub Projects MCP server lifespan starting...")
    read_only = is_read_only_mode()
    enabled_tools = get_enabled_tools()

    loaded_config: ProjectsConfig | None = None
    try:
        loaded_config = ProjectsConfig.from_env()
        logger.info(
            f"GitHub configuration loaded (GraphQL: {loaded_config.graphql_url}, "
            f"token: {mask_sensitive(loaded_config.token)})"
        )
        log_credential_advisory(loaded_config.credential)
    except ValueError as e:
        logger.error(f"Failed to load GitHub configuration: {e}", exc_info=True)

    app_context = MainAppContext(
        projects_config=loaded_config,
        read_only=read_only,
        enabled_tools=enabled_tools,
    )
    logger.info(f"Read-only mode: {'ENABLED' if read_only else 'DISABLED'}")
    logger.info(f"Enabled tools filter: {enabled_tools or 'All tools enabled'}")

    try:
        yield {"app_lifespan_context": app_context}
    except Exception as e:
        logger.error(f"Error during lifespan: {e}", exc_info=True)
        raise
    finally:
        logger.info("Main GitHub Projects MCP server lifespan shutdown complete.")


def _filter_settings(ctx: Context | None) -> tuple[bool, list[str] | None]:
    """Read-only flag and enabled-tools list for the current request."""
    app_lifespan_state: MainAppContext | None = None
    if ctx is not None:
        try:
            app_lifespan_state = get_app_context(ctx)
        except (AttributeError, LookupError, ValueError):
            app_lifespan_state = None
    if app_lifespan_state is None:
        logger.debug("Lifespan context not available; reading filters from environment")
        return is_read_only_mode(), get_enabled_tools()
    return app_lifespan_state.read_only, app_lifespan_state.enabled_tools


class ToolFilterMiddleware(Middleware):
    """Hide tools excluded by ENABLED_TOOLS, and write tools in read-only mode."""

    async def on_list_tools(
        self,
        context: MiddlewareContext[Any],
        call_next: CallNext[Any, Sequence[FastMCPTool]],
    ) -> Sequence[FastMCPTool]:
        all_tools = await call_next(context)
        read_only, enabled_tools_filter = _filter_settings(context.fastmcp_context)
        logger.debug(
            f"list_tools: read_only={read_only}, enabled_tools_filter={enabled_tools_filter}"
        )

        filtered_tools: list[FastMCPTool] = []
        for tool_obj in all_tools:
            if not should_include_tool(tool_obj.name, enabled_tools_filter):
                logger.debug(f"Excluding tool '{tool_obj.name}' (not enabled)")
                continue
            if read_only and "write" in tool_obj.tags:
                logger.debug(
                    f"Excluding tool '{tool_obj.name}' due to read-only mode and 'write' tag"
                )
                continue
            filtered_tools.append(tool_obj)
        return filtered_tools

    async def on_call_tool(
        self,
        context: MiddlewareContext[Any],
        call_next: CallNext[Any, Any],
    ) -> Any:
        tool_name = context.message.name
        _, enabled_tools_filter = _filter_settings(context.fastmcp_context)
        if not should_include_tool(tool_name, enabled_tools_filter):
            logger.warning(f"Refusing call to disabled tool '{tool_name}'")
            raise ToolError(f"Tool '{tool_name}' is not enabled on this server.")
        return await call_next(context)


class GitHubProjectsMCP(FastMCP[MainAppContext]):
    """Custom FastMCP server class for GitHub Projects with tool filtering."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.add_middleware(ToolFilterMiddleware())


main_mcp = GitHubProjectsMCP(name="GitHub Projects MCP", lifespan=main_lifespan)
main_mcp.mount(projects_mcp, "github")


@main_mcp.custom_route("/healthz", methods=["GET"], include_in_schema=False)
async def _health_check_route(request: Request) -> JSONResponse:
    return await health_check(request)


logger.info("Added /healthz endpoint for Kubernetes probes")
