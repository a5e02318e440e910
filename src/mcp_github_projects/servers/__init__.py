"""FastMCP servers exposing GitHub Projects tools."""

from .main import main_mcp

__all__ = ["main_mcp"]
