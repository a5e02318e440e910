"""Multi-step task workflows built on project items and fields."""

import logging
from collections.abc import Sequence
from typing import Any

from ..exceptions import RemoteNotFound, ResolutionError, UnsupportedFieldType
from ..models import FieldDataType
from .batch import BatchOutcome, BatchResult, run_batch, run_secondary
from .fields import FieldCatalogueMemo
from .items import ItemsMixin
from .queries import REPOSITORY_QUERY
from .values import ResolvedValue, field_not_found, resolve_field_value

logger = logging.getLogger("mcp-github-projects.tasks")


class TasksMixin(ItemsMixin):
    """Mixin for task workflows: creating tasks, moving them and bulk edits."""

    def _resolve_by_field_id(
        self, memo: FieldCatalogueMemo, project_id: str, field_id: str, raw_value: Any
    ) -> tuple[str, ResolvedValue] | ResolutionError:
        catalogue = memo.get(project_id)
        field = catalogue.by_id(field_id)
        if field is None:
            return field_not_found(field_id, catalogue.ids(), by="ID")
        resolved = resolve_field_value(field, raw_value)
        if isinstance(resolved, ResolutionError):
            return resolved
        return field.id, resolved

    def get_repository_name(self, repository_id: str) -> tuple[str, str]:
        """Return ``(owner, name)`` of a repository node."""
        data = self.graphql(REPOSITORY_QUERY, {"id": repository_id})
        node = data.get("node") or {}
        owner = (node.get("owner") or {}).get("login")
        if not owner or not node.get("name"):
            raise RemoteNotFound(f"Repository with ID {repository_id} not found", status=404)
        return owner, node["name"]

    def create_task(
        self,
        project_id: str,
        title: str,
        body: str | None = None,
        repository_id: str | None = None,
        assignees: Sequence[str] | None = None,
        labels: Sequence[str] | None = None,
        milestone: int | None = None,
        as_draft: bool = False,
        custom_fields: Sequence[dict[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """
        Create a task in a project and set its custom fields.

        Without ``repository_id`` (or with ``as_draft``) the task is a draft
        item; otherwise a real issue is created through the REST API and then
        added to the project. Custom fields are applied one by one; a field
        that cannot be set is reported without undoing the task.

        Args:
            project_id: ProjectV2 global node id
            title: Task title
            body: Task description
            repository_id: Repository global node id for a real issue
            assignees: Logins to assign (real issues only)
            labels: Label names (real issues only)
            milestone: Milestone number (real issues only)
            as_draft: Force a draft item
            custom_fields: ``[{"field_id": ..., "value": ...}]``

        Returns:
            The item, its content and the per-field outcomes
        """
        if as_draft or not repository_id:
            draft = self.create_draft_item(project_id, title, body)
            item_id = draft["id"]
            content: dict[str, Any] = {
                "type": "DRAFT",
                "id": draft.get("contentId"),
                "title": draft.get("title"),
                "body": draft.get("body"),
            }
        else:
            owner, repo = self.get_repository_name(repository_id)
            issue_body: dict[str, Any] = {"title": title, "body": body or ""}
            if assignees:
                issue_body["assignees"] = list(assignees)
            if labels:
                issue_body["labels"] = list(labels)
            if milestone is not None:
                issue_body["milestone"] = milestone
            issue = self.rest("POST", f"/repos/{owner}/{repo}/issues", json=issue_body)
            item_id = self.add_item_by_id(project_id, issue["node_id"])
            content = {
                "type": "ISSUE",
                "id": issue["node_id"],
                "number": issue.get("number"),
                "title": issue.get("title"),
                "url": issue.get("html_url"),
                "repository": f"{owner}/{repo}",
            }

        result: dict[str, Any] = {"itemId": item_id, "content": content}
        if custom_fields:
            memo = self.field_catalogue_memo()
            fields_result = run_batch(
                custom_fields,
                lambda spec: self.update_project_item(
                    project_id, item_id, _field_id(spec), spec.get("value"), memo=memo
                ),
                key=_field_id,
            )
            result["customFields"] = fields_result.to_dict()
        return result

    def manage_task_status(
        self,
        project_id: str,
        item_id: str,
        status_field_id: str,
        new_status: str,
        comment: str | None = None,
    ) -> BatchOutcome[dict[str, Any]] | ResolutionError:
        """
        Move an item to another status option, optionally leaving a comment.

        The comment is a secondary action: when it fails the status change
        still stands and the failure is reported under ``details["comment"]``.
        """
        memo = self.field_catalogue_memo()
        catalogue = memo.get(project_id)
        field = catalogue.by_id(status_field_id)
        if field is None:
            return field_not_found(status_field_id, catalogue.ids(), by="ID")
        if field.data_type is not FieldDataType.SINGLE_SELECT:
            return UnsupportedFieldType(
                f"Field '{field.name}' is a {field.type_name} field; a status field "
                "must be SINGLE_SELECT",
                field_name=field.name,
                raw_value=new_status,
            )
        resolved = resolve_field_value(field, new_status)
        if isinstance(resolved, ResolutionError):
            return resolved

        self.set_item_field_value(project_id, item_id, field.id, resolved)
        outcome: BatchOutcome[dict[str, Any]] = BatchOutcome(
            key=item_id,
            success=True,
            value={"statusField": field.name, "status": new_status, **resolved},
        )
        if comment:
            run_secondary(outcome, "comment", lambda: self._comment_on_item(item_id, comment))
        return outcome

    def _comment_on_item(self, item_id: str, body: str) -> dict[str, Any]:
        item = self.get_project_item(item_id)
        if item.content_type not in ("ISSUE", "PULL_REQUEST") or not item.content_id:
            raise ValueError(
                "Comments can only be added to issues or pull requests, not to draft items"
            )
        return self.add_comment(item.content_id, body)

    def group_tasks(
        self, project_id: str, field_id: str, item_ids: Sequence[str], value: Any
    ) -> BatchResult[str] | ResolutionError:
        """
        Set the same field value on many items.

        The value is resolved once; each item update is then attempted in
        order and reported individually.
        """
        resolved = self._resolve_by_field_id(
            self.field_catalogue_memo(), project_id, field_id, value
        )
        if isinstance(resolved, ResolutionError):
            return resolved
        resolved_field_id, payload = resolved
        return run_batch(
            item_ids,
            lambda item_id: self.set_item_field_value(
                project_id, item_id, resolved_field_id, payload
            ),
        )

    def bulk_add_issues(
        self,
        project_id: str,
        owner: str,
        repo: str,
        issue_numbers: Sequence[int],
        status_field_id: str | None = None,
        status_value: str | None = None,
    ) -> BatchResult[dict[str, Any]]:
        """
        Add many issues of one repository to a project.

        Each issue is looked up by number and added; when a status is given it
        is set afterwards as a secondary action, so an issue that was added but
        could not get its status still counts as added.

        Raises:
            ValueError: If ``status_field_id`` is given without ``status_value``
        """
        if status_field_id and not status_value:
            raise ValueError("status_value is required when status_field_id is provided")

        memo = self.field_catalogue_memo()

        def add_issue(number: int) -> dict[str, Any]:
            issue = self.get_issue_id(owner, repo, number)
            item_id = self.add_item_by_id(project_id, issue["id"])
            return {"itemId": item_id, "contentId": issue["id"], "title": issue.get("title")}

        def set_status(outcome: BatchOutcome[dict[str, Any]]) -> None:
            if not status_field_id or outcome.value is None:
                return
            item_id = outcome.value["itemId"]
            run_secondary(
                outcome,
                "status",
                lambda: self._apply_status(memo, project_id, item_id, status_field_id, status_value),
            )

        return run_batch(issue_numbers, add_issue, then=set_status)

    def _apply_status(
        self,
        memo: FieldCatalogueMemo,
        project_id: str,
        item_id: str,
        field_id: str,
        raw_value: Any,
    ) -> ResolvedValue | ResolutionError:
        resolved = self._resolve_by_field_id(memo, project_id, field_id, raw_value)
        if isinstance(resolved, ResolutionError):
            return resolved
        resolved_field_id, payload = resolved
        self.set_item_field_value(project_id, item_id, resolved_field_id, payload)
        return payload


def _field_id(spec: dict[str, Any]) -> str:
    return str(spec.get("field_id") or spec.get("fieldId") or "")
