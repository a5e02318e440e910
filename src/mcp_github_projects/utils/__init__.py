"""
Utility functions for the MCP GitHub Projects server.
"""

from .env import get_env_int, is_env_ssl_verify, is_env_truthy
from .io import is_read_only_mode
from .logging import mask_sensitive
from .tools import get_enabled_tools, should_include_tool

__all__ = [
    "get_enabled_tools",
    "get_env_int",
    "is_env_ssl_verify",
    "is_env_truthy",
    "is_read_only_mode",
    "mask_sensitive",
    "should_include_tool",
]
