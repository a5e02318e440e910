"""Tool filtering helpers driven by the ENABLED_TOOLS environment variable."""

import logging
import os

logger = logging.getLogger("mcp-github-projects.utils.tools")


def get_enabled_tools() -> list[str] | None:
    """Read the comma-separated ENABLED_TOOLS list.

    Returns:
        List of tool names, or None when every tool is enabled.
    """
    raw = os.getenv("ENABLED_TOOLS")
    if not raw or not raw.strip():
        return None
    tools = [name.strip() for name in raw.split(",") if name.strip()]
    logger.debug(f"Enabled tools from environment: {tools}")
    return tools or None


def should_include_tool(tool_name: str, enabled_tools: list[str] | None) -> bool:
    """Decide whether a registered tool is exposed.

    Both the bare name (``list_projects``) and the mounted name
    (``github_list_projects``) match.
    """
    if enabled_tools is None:
        return True
    if tool_name in enabled_tools:
        return True
    _, _, bare_name = tool_name.partition("_")
    return tool_name.startswith("github_") and bare_name in enabled_tools
