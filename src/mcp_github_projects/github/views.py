"""Module for GitHub Projects V2 view operations."""

import logging

from ..exceptions import RemoteNotFound
from ..models import ProjectView
from .client import ProjectsClient
from .queries import PROJECT_VIEWS_QUERY

logger = logging.getLogger("mcp-github-projects.views")


class ViewsMixin(ProjectsClient):
    """Mixin for project views (table, board and roadmap layouts)."""

    def list_project_views(
        self, project_id: str, first: int | None = None
    ) -> list[ProjectView]:
        data = self.graphql(
            PROJECT_VIEWS_QUERY,
            {"projectId": project_id, "first": first or self.config.page_size},
        )
        node = data.get("node")
        if not node or "views" not in node:
            raise RemoteNotFound(f"Project with ID {project_id} not found", status=404)
        return [
            ProjectView.from_api_response(view)
            for view in (node.get("views") or {}).get("nodes") or []
            if view
        ]
