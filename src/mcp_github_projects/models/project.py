"""
GitHub Projects V2 models.

This module provides Pydantic models for projects, their fields (with
single-select options and iterations), views and items.
"""

import enum
import logging
from typing import Any

from pydantic import Field

from .base import EMPTY_STRING, UNKNOWN, ApiModel

logger = logging.getLogger(__name__)


class FieldDataType(str, enum.Enum):
    """Field data types the value resolver understands.

    GitHub reports more types than these (ASSIGNEES, LABELS, MILESTONE, ...);
    they all coerce to ``UNSUPPORTED`` so a new remote type never breaks
    field discovery.
    """

    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "DATE"
    SINGLE_SELECT = "SINGLE_SELECT"
    ITERATION = "ITERATION"
    UNSUPPORTED = "UNSUPPORTED"

    @classmethod
    def coerce(cls, value: str | None) -> "FieldDataType":
        if not value:
            return cls.UNSUPPORTED
        try:
            return cls(value.upper())
        except ValueError:
            return cls.UNSUPPORTED


class FieldOption(ApiModel):
    """A single-select option."""

    id: str
    name: str
    color: str | None = None
    description: str | None = None


class Iteration(ApiModel):
    """An iteration of an iteration field."""

    id: str
    title: str
    start_date: str | None = Field(default=None, alias="startDate")
    duration: int | None = None
    completed: bool = False


class ProjectField(ApiModel):
    """
    Model representing a project field definition.

    ``type_name`` keeps the remote data type verbatim; ``data_type`` is the
    resolver's view of it.
    """

    id: str
    name: str
    data_type: FieldDataType = FieldDataType.UNSUPPORTED
    type_name: str = UNKNOWN
    options: list[FieldOption] = Field(default_factory=list)
    iterations: list[Iteration] = Field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "ProjectField":
        """
        Create a ProjectField from a ``ProjectV2FieldConfiguration`` node.

        Args:
            data: A node from ``fields(first: N) { nodes { ... } }``

        Returns:
            A ProjectField instance
        """
        type_name = str(data.get("dataType") or UNKNOWN)

        options = [
            FieldOption(
                id=str(option.get("id", EMPTY_STRING)),
                name=str(option.get("name", EMPTY_STRING)),
                color=option.get("color"),
                description=option.get("description"),
            )
            for option in data.get("options") or []
            if isinstance(option, dict)
        ]

        iterations: list[Iteration] = []
        configuration = data.get("configuration") or {}
        for key, completed in (("iterations", False), ("completedIterations", True)):
            for iteration in configuration.get(key) or []:
                if not isinstance(iteration, dict):
                    continue
                iterations.append(
                    Iteration(
                        id=str(iteration.get("id", EMPTY_STRING)),
                        title=str(iteration.get("title", EMPTY_STRING)),
                        start_date=iteration.get("startDate"),
                        duration=iteration.get("duration"),
                        completed=completed,
                    )
                )

        return cls(
            id=str(data.get("id", EMPTY_STRING)),
            name=str(data.get("name", EMPTY_STRING)),
            data_type=FieldDataType.coerce(type_name),
            type_name=type_name,
            options=options,
            iterations=iterations,
        )

    def option_names(self) -> list[str]:
        return [option.name for option in self.options]

    def iteration_titles(self) -> list[str]:
        return [iteration.title for iteration in self.iterations]

    def to_simplified_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "dataType": self.type_name,
        }
        if self.options:
            result["options"] = [
                {"id": option.id, "name": option.name} for option in self.options
            ]
        if self.iterations:
            result["iterations"] = [
                {
                    "id": iteration.id,
                    "title": iteration.title,
                    "startDate": iteration.start_date,
                    "completed": iteration.completed,
                }
                for iteration in self.iterations
            ]
        return result


class Project(ApiModel):
    """Model representing a ProjectV2."""

    id: str = EMPTY_STRING
    number: int | None = None
    title: str = UNKNOWN
    short_description: str | None = Field(default=None, alias="shortDescription")
    url: str | None = None
    closed: bool = False
    public: bool = False
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "Project":
        if not data or not isinstance(data, dict):
            logger.debug("Received empty or non-dictionary project data")
            return cls()
        return cls.model_validate(data)

    def to_simplified_dict(self) -> dict[str, Any]:
        result = super().to_simplified_dict()
        if description := result.pop("shortDescription", None):
            result["description"] = description
        return result


class ProjectView(ApiModel):
    """Model representing a project view (table, board or roadmap)."""

    id: str = EMPTY_STRING
    name: str = UNKNOWN
    number: int | None = None
    layout: str | None = None
    filter: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "ProjectView":
        if not data or not isinstance(data, dict):
            return cls()
        return cls.model_validate(data)


class ProjectItem(ApiModel):
    """
    Model representing a project item with its content and field values.

    ``content_type`` is ``ISSUE``, ``PULL_REQUEST`` or ``DRAFT``; field values
    are flattened to ``{field name: value}``.
    """

    id: str = EMPTY_STRING
    type: str | None = None
    content_type: str | None = None
    content_id: str | None = None
    title: str | None = None
    number: int | None = None
    url: str | None = None
    state: str | None = None
    body: str | None = None
    repository: str | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_api_response(cls, data: dict[str, Any], **kwargs: Any) -> "ProjectItem":
        """
        Create a ProjectItem from a ``ProjectV2Item`` node.

        Args:
            data: An item node including ``content`` and ``fieldValues``

        Returns:
            A ProjectItem instance
        """
        if not data or not isinstance(data, dict):
            return cls()

        content = data.get("content") or {}
        typename = content.get("__typename")
        if typename == "DraftIssue":
            content_type = "DRAFT"
        elif typename == "Issue":
            content_type = "ISSUE"
        elif typename == "PullRequest":
            content_type = "PULL_REQUEST"
        else:
            content_type = None

        repository = None
        if repo := content.get("repository"):
            owner = (repo.get("owner") or {}).get("login")
            repository = f"{owner}/{repo.get('name')}" if owner else repo.get("name")

        return cls(
            id=str(data.get("id", EMPTY_STRING)),
            type=data.get("type"),
            content_type=content_type,
            content_id=content.get("id"),
            title=content.get("title"),
            number=content.get("number"),
            url=content.get("url"),
            state=content.get("state"),
            body=content.get("body"),
            repository=repository,
            fields=flatten_field_values(data.get("fieldValues")),
        )

    def to_simplified_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id, "type": self.type}
        content = {
            "type": self.content_type,
            "id": self.content_id,
            "title": self.title,
            "number": self.number,
            "url": self.url,
            "state": self.state,
            "body": self.body,
            "repository": self.repository,
        }
        if self.content_type:
            result["content"] = {k: v for k, v in content.items() if v is not None}
        result["fields"] = self.fields
        return result


_FIELD_VALUE_KEYS = ("text", "date", "name", "number", "title")


def flatten_field_values(field_values: dict[str, Any] | None) -> dict[str, Any]:
    """Collapse a ``fieldValues { nodes }`` connection to ``{field name: value}``.

    Each node carries exactly one of text/date/name/number/title depending on
    the value type; nodes without a named field are skipped.
    """
    flattened: dict[str, Any] = {}
    for node in (field_values or {}).get("nodes") or []:
        if not isinstance(node, dict):
            continue
        field_name = (node.get("field") or {}).get("name")
        if not field_name:
            continue
        value = None
        for key in _FIELD_VALUE_KEYS:
            if key in node:
                value = node[key]
                break
        flattened[field_name] = value
    return flattened
