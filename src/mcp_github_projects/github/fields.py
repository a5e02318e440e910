"""Module for GitHub Projects V2 field operations."""

import logging
from collections.abc import Iterator, Sequence
from typing import Any

from cachetools import LRUCache

from ..exceptions import RemoteNotFound
from ..models import FieldDataType, ProjectField
from .client import ProjectsClient
from .constants import DEFAULT_OPTION_COLOR, FIELDS_PAGE_SIZE, SINGLE_SELECT_COLORS
from .queries import CREATE_FIELD_MUTATION, DELETE_FIELD_MUTATION, PROJECT_FIELDS_QUERY

logger = logging.getLogger("mcp-github-projects.fields")

CREATABLE_FIELD_TYPES = (
    FieldDataType.TEXT,
    FieldDataType.NUMBER,
    FieldDataType.DATE,
    FieldDataType.SINGLE_SELECT,
)


class FieldCatalogue:
    """The field definitions of one project with exact-match lookups."""

    def __init__(self, project_id: str, fields: Sequence[ProjectField]) -> None:
        self.project_id = project_id
        self.fields = list(fields)
        self._by_id = {f.id: f for f in self.fields}
        self._by_name = {f.name: f for f in self.fields}

    def by_id(self, field_id: str) -> ProjectField | None:
        return self._by_id.get(field_id)

    def by_name(self, name: str) -> ProjectField | None:
        return self._by_name.get(name)

    def ids(self) -> list[str]:
        return [f.id for f in self.fields]

    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def __iter__(self) -> Iterator[ProjectField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


class FieldCatalogueMemo:
    """Per-invocation memo of field catalogues keyed by project id.

    Create one per tool call; it is never shared across calls, so field
    changes made elsewhere are seen by the next call.
    """

    def __init__(self, fetcher: "FieldsMixin", maxsize: int = 8) -> None:
        self._fetcher = fetcher
        self._cache: LRUCache[str, FieldCatalogue] = LRUCache(maxsize=maxsize)

    def get(self, project_id: str) -> FieldCatalogue:
        catalogue = self._cache.get(project_id)
        if catalogue is None:
            catalogue = self._fetcher.get_project_fields(project_id)
            self._cache[project_id] = catalogue
        else:
            logger.debug(f"Reusing field catalogue for project {project_id}")
        return catalogue


class FieldsMixin(ProjectsClient):
    """Mixin for project field discovery and field management."""

    def get_project_fields(self, project_id: str) -> FieldCatalogue:
        """
        Fetch every field definition of a project.

        Args:
            project_id: ProjectV2 global node id

        Returns:
            The project's field catalogue

        Raises:
            RemoteNotFound: If the project node does not resolve
        """
        data = self.graphql(
            PROJECT_FIELDS_QUERY, {"projectId": project_id, "first": FIELDS_PAGE_SIZE}
        )
        node = data.get("node")
        if not node or "fields" not in node:
            raise RemoteNotFound(f"Project with ID {project_id} not found", status=404)

        fields = [
            ProjectField.from_api_response(field_node)
            for field_node in (node.get("fields") or {}).get("nodes") or []
            if field_node and field_node.get("id")
        ]
        logger.debug(
            f"Project {project_id} has {len(fields)} fields: {[f.name for f in fields]}"
        )
        return FieldCatalogue(project_id, fields)

    def field_catalogue_memo(self) -> FieldCatalogueMemo:
        return FieldCatalogueMemo(self)

    def create_project_field(
        self,
        project_id: str,
        name: str,
        data_type: FieldDataType | str,
        options: Sequence[dict[str, Any]] | None = None,
    ) -> ProjectField:
        """
        Create a custom field.

        Args:
            project_id: ProjectV2 global node id
            name: Field name
            data_type: TEXT, NUMBER, DATE or SINGLE_SELECT
            options: For SINGLE_SELECT, ``[{"name": ..., "color": ...}]``;
                colour defaults to GRAY

        Returns:
            The created field

        Raises:
            ValueError: On an unsupported type or missing options
        """
        field_type = FieldDataType.coerce(str(data_type))
        if field_type not in CREATABLE_FIELD_TYPES:
            allowed = ", ".join(t.value for t in CREATABLE_FIELD_TYPES)
            raise ValueError(
                f"Unsupported field type: {data_type}. Allowed types: {allowed}"
            )

        field_input: dict[str, Any] = {
            "projectId": project_id,
            "name": name,
            "dataType": field_type.value,
        }
        if field_type is FieldDataType.SINGLE_SELECT:
            if not options:
                raise ValueError("SINGLE_SELECT fields need at least one option")
            field_input["singleSelectOptions"] = [
                self._option_input(option) for option in options
            ]

        data = self.graphql(CREATE_FIELD_MUTATION, {"input": field_input})
        created = (data.get("createProjectV2Field") or {}).get("projectV2Field") or {}
        logger.info(f"Created {field_type.value} field '{name}' in project {project_id}")
        return ProjectField.from_api_response(created)

    @staticmethod
    def _option_input(option: dict[str, Any]) -> dict[str, Any]:
        option_name = str(option.get("name") or "").strip()
        if not option_name:
            raise ValueError("Every single-select option needs a name")
        color = str(option.get("color") or DEFAULT_OPTION_COLOR).upper()
        if color not in SINGLE_SELECT_COLORS:
            raise ValueError(
                f"Invalid option color '{color}'. Allowed: {', '.join(SINGLE_SELECT_COLORS)}"
            )
        return {
            "name": option_name,
            "color": color,
            "description": str(option.get("description") or ""),
        }

    def delete_project_field(self, field_id: str) -> dict[str, Any]:
        """Delete a custom field and return the deleted field's id and name."""
        data = self.graphql(DELETE_FIELD_MUTATION, {"input": {"fieldId": field_id}})
        deleted = (data.get("deleteProjectV2Field") or {}).get("projectV2Field") or {}
        logger.info(f"Deleted project field {field_id}")
        return {"id": deleted.get("id", field_id), "name": deleted.get("name")}
