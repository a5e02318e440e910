from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mcp_github_projects.github.config import ProjectsConfig


@dataclass(frozen=True)
class MainAppContext:
    """Context holding the base config and server settings (no fetchers)."""

    projects_config: ProjectsConfig | None = None
    read_only: bool = False
    enabled_tools: list[str] | None = None
