"""Module for GitHub Projects V2 project operations."""

import logging
from typing import Any, Literal

from ..exceptions import RemoteNotFound
from ..models import Project
from .client import ProjectsClient
from .queries import (
    CREATE_PROJECT_MUTATION,
    ORG_ID_QUERY,
    ORG_PROJECTS_QUERY,
    UPDATE_PROJECT_MUTATION,
    USER_ID_QUERY,
    USER_PROJECTS_QUERY,
    VIEWER_QUERY,
)

logger = logging.getLogger("mcp-github-projects.projects")

OwnerType = Literal["user", "organization"]


def _check_owner_type(owner_type: str) -> None:
    if owner_type not in ("user", "organization"):
        raise ValueError(
            f"owner_type must be 'user' or 'organization', got '{owner_type}'"
        )


class ProjectsMixin(ProjectsClient):
    """Mixin for listing, creating and updating projects."""

    def get_viewer(self) -> dict[str, Any]:
        """Return the authenticated user's login, name and profile URL."""
        data = self.graphql(VIEWER_QUERY)
        return data.get("viewer") or {}

    def list_projects(
        self, owner: str, owner_type: OwnerType, first: int | None = None
    ) -> tuple[list[Project], dict[str, Any]]:
        """
        List the projects of a user or an organization.

        Args:
            owner: User login or organization name
            owner_type: "user" or "organization"
            first: Page size (defaults to the configured page size)

        Returns:
            The projects and the connection's pageInfo

        Raises:
            RemoteNotFound: If the owner does not exist
        """
        _check_owner_type(owner_type)
        query = USER_PROJECTS_QUERY if owner_type == "user" else ORG_PROJECTS_QUERY
        data = self.graphql(
            query, {"login": owner, "first": first or self.config.page_size}
        )
        owner_node = data.get("owner")
        if owner_node is None:
            raise RemoteNotFound(f"{owner_type.capitalize()} '{owner}' not found", status=404)

        connection = owner_node.get("projectsV2") or {}
        projects = [
            Project.from_api_response(node)
            for node in connection.get("nodes") or []
            if node
        ]
        return projects, connection.get("pageInfo") or {}

    def get_owner_id(self, owner: str, owner_type: OwnerType) -> str:
        """Resolve a user or organization login to its global node id."""
        _check_owner_type(owner_type)
        query = USER_ID_QUERY if owner_type == "user" else ORG_ID_QUERY
        data = self.graphql(query, {"login": owner})
        owner_id = (data.get("owner") or {}).get("id")
        if not owner_id:
            raise RemoteNotFound(f"{owner_type.capitalize()} '{owner}' not found", status=404)
        return owner_id

    def create_project(
        self,
        owner: str,
        owner_type: OwnerType,
        title: str,
        description: str | None = None,
        public: bool | None = None,
    ) -> Project:
        """
        Create a project for a user or an organization.

        ``createProjectV2`` only takes a title; description and visibility are
        applied with a follow-up ``updateProjectV2``.
        """
        owner_id = self.get_owner_id(owner, owner_type)
        data = self.graphql(
            CREATE_PROJECT_MUTATION, {"input": {"ownerId": owner_id, "title": title}}
        )
        created = (data.get("createProjectV2") or {}).get("projectV2") or {}
        project = Project.from_api_response(created)
        logger.info(f"Created project #{project.number} '{title}' for {owner}")

        if description is not None or public is not None:
            project = self.update_project(
                project.id, description=description, public=public
            )
        return project

    def update_project(
        self,
        project_id: str,
        title: str | None = None,
        description: str | None = None,
        public: bool | None = None,
        closed: bool | None = None,
    ) -> Project:
        """
        Update a project's title, description, visibility or closed state.

        Raises:
            ValueError: If no attribute to update was given
        """
        changes: dict[str, Any] = {
            "title": title,
            "shortDescription": description,
            "public": public,
            "closed": closed,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            raise ValueError(
                "At least one of title, description, public or closed must be provided"
            )

        data = self.graphql(
            UPDATE_PROJECT_MUTATION, {"input": {"projectId": project_id, **changes}}
        )
        updated = (data.get("updateProjectV2") or {}).get("projectV2")
        if not updated:
            raise RemoteNotFound(f"Project with ID {project_id} not found", status=404)
        logger.info(f"Updated project {project_id}: {sorted(changes)}")
        return Project.from_api_response(updated)

    def toggle_project_archive(self, project_id: str, archived: bool) -> Project:
        """Close (archive) or reopen a project."""
        return self.update_project(project_id, closed=archived)
