"""Module for GitHub Projects V2 item operations."""

import logging
from typing import Any

from ..exceptions import RemoteNotFound, ResolutionError
from ..models import ProjectItem
from .fields import FieldCatalogueMemo, FieldsMixin
from .queries import (
    ADD_COMMENT_MUTATION,
    ADD_DRAFT_ITEM_MUTATION,
    ADD_ITEM_MUTATION,
    CONVERT_DRAFT_MUTATION,
    DELETE_ITEM_MUTATION,
    ISSUE_ID_QUERY,
    ITEM_QUERY,
    PROJECT_ITEMS_QUERY,
    PULL_REQUEST_ID_QUERY,
    UPDATE_ITEM_FIELD_MUTATION,
)
from .values import ResolvedValue, field_not_found, resolve_field_value

logger = logging.getLogger("mcp-github-projects.items")


class ItemsMixin(FieldsMixin):
    """Mixin for project items: listing, adding, removing and setting field values."""

    def list_project_items(
        self, project_id: str, first: int | None = None, after: str | None = None
    ) -> dict[str, Any]:
        """
        List one page of project items.

        Args:
            project_id: ProjectV2 global node id
            first: Page size (defaults to the configured page size)
            after: Cursor returned as ``pageInfo.endCursor`` by the previous page

        Returns:
            Dict with the project title/number, ``items`` and ``pageInfo``
        """
        data = self.graphql(
            PROJECT_ITEMS_QUERY,
            {
                "projectId": project_id,
                "first": first or self.config.page_size,
                "after": after,
            },
        )
        node = data.get("node")
        if not node or "items" not in node:
            raise RemoteNotFound(f"Project with ID {project_id} not found", status=404)

        connection = node.get("items") or {}
        items = [
            ProjectItem.from_api_response(item)
            for item in connection.get("nodes") or []
            if item
        ]
        page_info = connection.get("pageInfo") or {"hasNextPage": False, "endCursor": None}
        return {
            "projectTitle": node.get("title"),
            "projectNumber": node.get("number"),
            "items": items,
            "pageInfo": page_info,
        }

    def get_project_item(self, item_id: str) -> ProjectItem:
        data = self.graphql(ITEM_QUERY, {"itemId": item_id})
        node = data.get("node")
        if not node:
            raise RemoteNotFound(f"Project item {item_id} not found", status=404)
        return ProjectItem.from_api_response(node)

    def add_item_by_id(self, project_id: str, content_id: str) -> str:
        """Add an issue or pull request to a project and return the new item id."""
        data = self.graphql(
            ADD_ITEM_MUTATION,
            {"input": {"projectId": project_id, "contentId": content_id}},
        )
        item_id = ((data.get("addProjectV2ItemById") or {}).get("item") or {}).get("id")
        if not item_id:
            raise RemoteNotFound(
                f"Content {content_id} could not be added to project {project_id}",
                status=404,
            )
        logger.info(f"Added content {content_id} to project {project_id} as {item_id}")
        return item_id

    def add_project_item(self, project_id: str, content_id: str) -> ProjectItem:
        """
        Add an existing issue or pull request to a project.

        Args:
            project_id: ProjectV2 global node id
            content_id: Issue or pull request global node id

        Returns:
            The new item with its content and field values
        """
        return self.get_project_item(self.add_item_by_id(project_id, content_id))

    def create_draft_item(
        self, project_id: str, title: str, body: str | None = None
    ) -> dict[str, Any]:
        """Create a draft issue directly in a project."""
        draft_input: dict[str, Any] = {"projectId": project_id, "title": title}
        if body:
            draft_input["body"] = body
        data = self.graphql(ADD_DRAFT_ITEM_MUTATION, {"input": draft_input})
        item = (data.get("addProjectV2DraftIssue") or {}).get("projectItem") or {}
        content = item.get("content") or {}
        logger.info(f"Created draft item {item.get('id')} in project {project_id}")
        return {
            "id": item.get("id"),
            "type": item.get("type"),
            "contentId": content.get("id"),
            "title": content.get("title", title),
            "body": content.get("body", body),
        }

    def remove_project_item(self, project_id: str, item_id: str) -> str:
        """Remove an item from a project and return the deleted item id."""
        data = self.graphql(
            DELETE_ITEM_MUTATION,
            {"input": {"projectId": project_id, "itemId": item_id}},
        )
        deleted = (data.get("deleteProjectV2Item") or {}).get("deletedItemId")
        if not deleted:
            raise RemoteNotFound(
                f"Item {item_id} not found in project {project_id}", status=404
            )
        logger.info(f"Removed item {item_id} from project {project_id}")
        return deleted

    def set_item_field_value(
        self, project_id: str, item_id: str, field_id: str, value: ResolvedValue
    ) -> str:
        """Send an already resolved value with ``updateProjectV2ItemFieldValue``."""
        data = self.graphql(
            UPDATE_ITEM_FIELD_MUTATION,
            {
                "input": {
                    "projectId": project_id,
                    "itemId": item_id,
                    "fieldId": field_id,
                    "value": value,
                }
            },
        )
        updated = (
            (data.get("updateProjectV2ItemFieldValue") or {}).get("projectV2Item") or {}
        ).get("id")
        if not updated:
            raise RemoteNotFound(
                f"Item {item_id} not found in project {project_id}", status=404
            )
        return updated

    def update_project_item(
        self,
        project_id: str,
        item_id: str,
        field_id: str,
        raw_value: Any,
        memo: FieldCatalogueMemo | None = None,
    ) -> dict[str, Any] | ResolutionError:
        """
        Set one field of an item from a caller-supplied value.

        The field is looked up by id in the project's catalogue and the value
        is resolved against its data type before anything is written.

        Args:
            project_id: ProjectV2 global node id
            item_id: Project item id
            field_id: Field id
            raw_value: Text, number, date, option name or iteration title
            memo: Catalogue memo shared by the calling tool invocation

        Returns:
            The update summary, or the ResolutionError explaining the miss
        """
        catalogue = (memo or self.field_catalogue_memo()).get(project_id)
        field = catalogue.by_id(field_id)
        if field is None:
            return field_not_found(field_id, catalogue.ids(), by="ID")

        resolved = resolve_field_value(field, raw_value)
        if isinstance(resolved, ResolutionError):
            return resolved

        self.set_item_field_value(project_id, item_id, field.id, resolved)
        logger.info(f"Set field '{field.name}' of item {item_id} to {resolved}")
        return {
            "itemId": item_id,
            "fieldId": field.id,
            "fieldName": field.name,
            "dataType": field.type_name,
            "value": raw_value,
            "payload": resolved,
        }

    def get_issue_id(self, owner: str, repo: str, number: int) -> dict[str, Any]:
        """
        Look up the global node id of an issue, falling back to a pull request.

        Raises:
            RemoteNotFound: If neither an issue nor a pull request has that number
        """
        variables = {"owner": owner, "repo": repo, "number": number}
        for query, key, kind in (
            (ISSUE_ID_QUERY, "issue", "issue"),
            (PULL_REQUEST_ID_QUERY, "pullRequest", "pullRequest"),
        ):
            try:
                data = self.graphql(query, variables)
            except RemoteNotFound:
                logger.debug(f"#{number} in {owner}/{repo} is not a {kind}")
                continue
            node = (data.get("repository") or {}).get(key)
            if node:
                return {"type": kind, **node}
        raise RemoteNotFound(
            f"Issue or pull request #{number} not found in {owner}/{repo}", status=404
        )

    def convert_draft_to_issue(self, item_id: str, repository_id: str) -> dict[str, Any]:
        """Convert a draft item into a real issue in ``repository_id``."""
        data = self.graphql(
            CONVERT_DRAFT_MUTATION,
            {"input": {"itemId": item_id, "repositoryId": repository_id}},
        )
        item = (data.get("convertProjectV2DraftIssueItemToIssue") or {}).get("item") or {}
        issue = item.get("content") or {}
        if not issue:
            raise RemoteNotFound(f"Draft item {item_id} could not be converted", status=404)
        repository = issue.get("repository") or {}
        logger.info(f"Converted draft {item_id} into issue #{issue.get('number')}")
        return {
            "itemId": item.get("id", item_id),
            "issue": {
                "id": issue.get("id"),
                "number": issue.get("number"),
                "title": issue.get("title"),
                "url": issue.get("url"),
                "repository": f"{(repository.get('owner') or {}).get('login')}/{repository.get('name')}",
            },
        }

    def add_comment(self, subject_id: str, body: str) -> dict[str, Any]:
        """Comment on an issue or pull request."""
        data = self.graphql(
            ADD_COMMENT_MUTATION, {"input": {"subjectId": subject_id, "body": body}}
        )
        node = ((data.get("addComment") or {}).get("commentEdge") or {}).get("node") or {}
        return {"id": node.get("id"), "url": node.get("url")}
