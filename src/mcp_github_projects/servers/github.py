"""GitHub Projects FastMCP server instance and tool definitions."""

import json
import logging
from typing import Annotated, Any, Literal

from fastmcp import Context, FastMCP
from mcp.types import TextContent
from pydantic import Field

from mcp_github_projects.exceptions import ResolutionError
from mcp_github_projects.servers.dependencies import get_projects_fetcher
from mcp_github_projects.utils.decorators import (
    check_write_access,
    envelope,
    handle_tool_errors,
)

logger = logging.getLogger("mcp-github-projects.servers.github")

projects_mcp = FastMCP(
    name="GitHub Projects MCP Service",
    instructions=(
        "Provides tools for GitHub Projects V2: projects, fields, views, items "
        "and task workflows, with a milestone-based REST fallback for "
        "fine-grained tokens."
    ),
)


def _parse_custom_fields(
    custom_fields: list[dict[str, Any]] | str | None,
) -> list[dict[str, Any]]:
    """Parse custom_fields from a list or a JSON string.

    Args:
        custom_fields: List of ``{"field_id": ..., "value": ...}``, JSON string, or None.

    Returns:
        Parsed list of field specs.

    Raises:
        ValueError: If the input is not valid JSON or not a list of objects.
    """
    if custom_fields is None:
        return []
    if isinstance(custom_fields, str):
        try:
            custom_fields = json.loads(custom_fields)
        except json.JSONDecodeError as e:
            raise ValueError(f"custom_fields is not valid JSON: {e}") from e
    if not isinstance(custom_fields, list) or not all(
        isinstance(spec, dict) for spec in custom_fields
    ):
        raise ValueError(
            "custom_fields must be a list of objects, e.g. "
            '[{"field_id": "PVTF_...", "value": "High"}]'
        )
    return custom_fields


def _parse_options(
    options: list[dict[str, Any]] | str | None,
) -> list[dict[str, Any]] | None:
    if options is None or isinstance(options, list):
        return options
    try:
        parsed = json.loads(options)
    except json.JSONDecodeError as e:
        raise ValueError(f"options is not valid JSON: {e}") from e
    if not isinstance(parsed, list):
        raise ValueError("options must be a JSON array of {name, color} objects")
    return parsed


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "Test Connection", "readOnlyHint": True},
)
@handle_tool_errors("test_connection")
async def test_connection(ctx: Context) -> list[TextContent]:
    """
    Check the configured GitHub token and the connection to the GraphQL API.

    Args:
        ctx: The FastMCP context.

    Returns:
        The authenticated user, the token type and any advisory about it.
    """
    projects = await get_projects_fetcher(ctx)
    classification = projects.config.credential
    viewer = projects.get_viewer()
    result = {
        "success": True,
        "message": "Connected to GitHub",
        "user": viewer,
        "tokenType": classification.capability.token_type,
        "isValid": True,
    }
    if classification.diagnostic:
        result["advisory"] = classification.diagnostic
    return envelope(result)


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "List Projects", "readOnlyHint": True},
)
@handle_tool_errors("list_projects")
async def list_projects(
    ctx: Context,
    owner: Annotated[
        str, Field(description="User login or organization name that owns the projects")
    ],
    owner_type: Annotated[
        Literal["user", "organization"],
        Field(description="Whether the owner is a 'user' or an 'organization'"),
    ],
    first: Annotated[
        int | None,
        Field(description="(Optional) Number of projects to return (1-100)", ge=1, le=100),
    ] = None,
) -> list[TextContent]:
    """
    List the Projects V2 boards of a user or an organization.

    Args:
        ctx: The FastMCP context.
        owner: User login or organization name.
        owner_type: "user" or "organization".
        first: Number of projects to return.

    Returns:
        One text item per project with its title, node id and status.
    """
    projects = await get_projects_fetcher(ctx)
    found, page_info = projects.list_projects(owner, owner_type, first)
    content: list[Any] = [project.to_simplified_dict() for project in found]
    if content and page_info.get("hasNextPage"):
        content.append(
            f"More projects are available; increase 'first' (showing {len(found)})."
        )
    return envelope({"content": content})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Create Project", "destructiveHint": True},
)
@handle_tool_errors("create_project")
@check_write_access
async def create_project(
    ctx: Context,
    owner: Annotated[str, Field(description="User login or organization name")],
    owner_type: Annotated[
        Literal["user", "organization"],
        Field(description="Whether the owner is a 'user' or an 'organization'"),
    ],
    title: Annotated[str, Field(description="Project title", min_length=1)],
    description: Annotated[
        str | None, Field(description="(Optional) Short description of the project")
    ] = None,
    public: Annotated[
        bool | None, Field(description="(Optional) Make the project public")
    ] = None,
) -> list[TextContent]:
    """
    Create a new Projects V2 board.

    Args:
        ctx: The FastMCP context.
        owner: User login or organization name.
        owner_type: "user" or "organization".
        title: Project title.
        description: Short description.
        public: Visibility.

    Returns:
        The created project.
    """
    projects = await get_projects_fetcher(ctx)
    project = projects.create_project(owner, owner_type, title, description, public)
    return envelope({"success": True, "project": project.to_simplified_dict()})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Update Project", "destructiveHint": True},
)
@handle_tool_errors("update_project")
@check_write_access
async def update_project(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID (e.g. 'PVT_kwDO...')")],
    title: Annotated[str | None, Field(description="(Optional) New title")] = None,
    description: Annotated[
        str | None, Field(description="(Optional) New short description")
    ] = None,
    public: Annotated[
        bool | None, Field(description="(Optional) New visibility")
    ] = None,
    closed: Annotated[
        bool | None, Field(description="(Optional) Close (true) or reopen (false)")
    ] = None,
) -> list[TextContent]:
    """
    Update a project's title, description, visibility or closed state.

    At least one attribute must be given.

    Args:
        ctx: The FastMCP context.
        project_id: Project node ID.
        title: New title.
        description: New short description.
        public: New visibility.
        closed: New closed state.

    Returns:
        The updated project.
    """
    projects = await get_projects_fetcher(ctx)
    project = projects.update_project(project_id, title, description, public, closed)
    return envelope({"success": True, "project": project.to_simplified_dict()})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Archive or Reopen Project", "destructiveHint": True},
)
@handle_tool_errors("toggle_project_archive")
@check_write_access
async def toggle_project_archive(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    archived: Annotated[
        bool, Field(description="True to close (archive) the project, false to reopen it")
    ],
) -> list[TextContent]:
    """Close (archive) or reopen a project."""
    projects = await get_projects_fetcher(ctx)
    project = projects.toggle_project_archive(project_id, archived)
    return envelope(
        {
            "success": True,
            "message": f"Project {'closed' if archived else 'reopened'}",
            "project": project.to_simplified_dict(),
        }
    )


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "List Project Fields", "readOnlyHint": True},
)
@handle_tool_errors("list_project_fields")
async def list_project_fields(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
) -> list[TextContent]:
    """
    List the fields of a project with their data types.

    Single-select fields include their option names and iteration fields
    their iteration titles: these are the values other tools accept.

    Args:
        ctx: The FastMCP context.
        project_id: Project node ID.

    Returns:
        One item per field.
    """
    projects = await get_projects_fetcher(ctx)
    catalogue = projects.get_project_fields(project_id)
    return envelope({"content": [field.to_simplified_dict() for field in catalogue]})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Create Project Field", "destructiveHint": True},
)
@handle_tool_errors("create_project_field")
@check_write_access
async def create_project_field(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    name: Annotated[str, Field(description="Field name", min_length=1)],
    data_type: Annotated[
        Literal["TEXT", "NUMBER", "DATE", "SINGLE_SELECT"],
        Field(description="Field data type"),
    ],
    options: Annotated[
        list[dict[str, Any]] | str | None,
        Field(
            description=(
                "(Optional) Options for SINGLE_SELECT fields, as a list or JSON "
                'string: [{"name": "High", "color": "RED"}]. Colors: GRAY, BLUE, '
                "GREEN, YELLOW, ORANGE, RED, PINK, PURPLE (default GRAY)."
            )
        ),
    ] = None,
) -> list[TextContent]:
    """
    Create a custom field in a project.

    Args:
        ctx: The FastMCP context.
        project_id: Project node ID.
        name: Field name.
        data_type: TEXT, NUMBER, DATE or SINGLE_SELECT.
        options: Options for single-select fields.

    Returns:
        The created field.
    """
    projects = await get_projects_fetcher(ctx)
    field = projects.create_project_field(
        project_id, name, data_type, _parse_options(options)
    )
    return envelope({"success": True, "field": field.to_simplified_dict()})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Delete Project Field", "destructiveHint": True},
)
@handle_tool_errors("delete_project_field")
@check_write_access
async def delete_project_field(
    ctx: Context,
    field_id: Annotated[str, Field(description="Field node ID (e.g. 'PVTF_...')")],
) -> list[TextContent]:
    """Delete a custom field from its project."""
    projects = await get_projects_fetcher(ctx)
    deleted = projects.delete_project_field(field_id)
    return envelope({"success": True, "deletedField": deleted})


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "List Project Views", "readOnlyHint": True},
)
@handle_tool_errors("list_project_views")
async def list_project_views(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    first: Annotated[
        int | None,
        Field(description="(Optional) Number of views to return (1-100)", ge=1, le=100),
    ] = None,
) -> list[TextContent]:
    """List the table, board and roadmap views of a project."""
    projects = await get_projects_fetcher(ctx)
    views = projects.list_project_views(project_id, first)
    return envelope({"content": [view.to_simplified_dict() for view in views]})


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "List Project Items", "readOnlyHint": True},
)
@handle_tool_errors("list_project_items")
async def list_project_items(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    first: Annotated[
        int | None,
        Field(description="(Optional) Number of items to return (1-100)", ge=1, le=100),
    ] = None,
    after: Annotated[
        str | None,
        Field(description="(Optional) Cursor from the previous page's endCursor"),
    ] = None,
) -> list[TextContent]:
    """
    List one page of project items with their content and field values.

    Args:
        ctx: The FastMCP context.
        project_id: Project node ID.
        first: Page size.
        after: Pagination cursor.

    Returns:
        A page header followed by one item per project item.
    """
    projects = await get_projects_fetcher(ctx)
    page = projects.list_project_items(project_id, first, after)
    page_info = page["pageInfo"]
    header = (
        f"Project '{page['projectTitle']}' (#{page['projectNumber']}): "
        f"{len(page['items'])} items"
    )
    if page_info.get("hasNextPage"):
        header += f"; next page cursor: {page_info.get('endCursor')}"
    return envelope(
        {"content": [header, *(item.to_simplified_dict() for item in page["items"])]}
    )


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Add Project Item", "destructiveHint": True},
)
@handle_tool_errors("add_project_item")
@check_write_access
async def add_project_item(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    content_id: Annotated[
        str,
        Field(
            description=(
                "Issue or pull request node ID (use get_issue_id to look it up "
                "from a number)"
            )
        ),
    ],
) -> list[TextContent]:
    """Add an existing issue or pull request to a project."""
    projects = await get_projects_fetcher(ctx)
    item = projects.add_project_item(project_id, content_id)
    return envelope({"success": True, "item": item.to_simplified_dict()})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Create Draft Item", "destructiveHint": True},
)
@handle_tool_errors("create_draft_item")
@check_write_access
async def create_draft_item(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    title: Annotated[str, Field(description="Draft title", min_length=1)],
    body: Annotated[str | None, Field(description="(Optional) Draft body")] = None,
) -> list[TextContent]:
    """Create a draft issue directly in a project."""
    projects = await get_projects_fetcher(ctx)
    draft = projects.create_draft_item(project_id, title, body)
    return envelope({"success": True, "item": draft})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Remove Project Item", "destructiveHint": True},
)
@handle_tool_errors("remove_project_item")
@check_write_access
async def remove_project_item(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    item_id: Annotated[str, Field(description="Project item ID (e.g. 'PVTI_...')")],
) -> list[TextContent]:
    """Remove an item from a project. The issue itself is not deleted."""
    projects = await get_projects_fetcher(ctx)
    deleted = projects.remove_project_item(project_id, item_id)
    return envelope({"success": True, "deletedItemId": deleted})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Update Project Item", "destructiveHint": True},
)
@handle_tool_errors("update_project_item")
@check_write_access
async def update_project_item(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    item_id: Annotated[str, Field(description="Project item ID")],
    field_id: Annotated[str, Field(description="Field node ID (see list_project_fields)")],
    value: Annotated[
        str | int | float,
        Field(
            description=(
                "Value for the field: text; a number; a date (YYYY-MM-DD); the "
                "option NAME of a single-select field; or the iteration TITLE "
                "of an iteration field"
            )
        ),
    ],
) -> list[TextContent]:
    """
    Set one field of a project item.

    The value is checked against the field's type before anything is sent;
    an unknown option name is answered with the list of valid names.

    Args:
        ctx: The FastMCP context.
        project_id: Project node ID.
        item_id: Project item ID.
        field_id: Field node ID.
        value: Raw value.

    Returns:
        The update summary, or a diagnostic explaining why the value was rejected.
    """
    projects = await get_projects_fetcher(ctx)
    result = projects.update_project_item(project_id, item_id, field_id, value)
    if isinstance(result, ResolutionError):
        return envelope(result)
    return envelope({"success": True, **result})


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "Get Issue ID", "readOnlyHint": True},
)
@handle_tool_errors("get_issue_id")
async def get_issue_id(
    ctx: Context,
    owner: Annotated[str, Field(description="Repository owner")],
    repo: Annotated[str, Field(description="Repository name")],
    number: Annotated[int, Field(description="Issue or pull request number", ge=1)],
) -> list[TextContent]:
    """Look up the node ID of an issue (or pull request) from its number."""
    projects = await get_projects_fetcher(ctx)
    issue = projects.get_issue_id(owner, repo, number)
    return envelope({"success": True, "issue": issue})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Convert Draft to Issue", "destructiveHint": True},
)
@handle_tool_errors("convert_draft_to_issue")
@check_write_access
async def convert_draft_to_issue(
    ctx: Context,
    item_id: Annotated[str, Field(description="Project item ID of the draft")],
    repository_id: Annotated[
        str, Field(description="Node ID of the repository to create the issue in")
    ],
) -> list[TextContent]:
    """Convert a draft item into a real issue, keeping it in the project."""
    projects = await get_projects_fetcher(ctx)
    converted = projects.convert_draft_to_issue(item_id, repository_id)
    return envelope({"success": True, **converted})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Create Task", "destructiveHint": True},
)
@handle_tool_errors("create_task")
@check_write_access
async def create_task(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    title: Annotated[str, Field(description="Task title", min_length=1)],
    body: Annotated[str | None, Field(description="(Optional) Task description")] = None,
    repository_id: Annotated[
        str | None,
        Field(
            description=(
                "(Optional) Repository node ID. When given, a real issue is "
                "created; otherwise the task is a draft item."
            )
        ),
    ] = None,
    assignees: Annotated[
        list[str] | None,
        Field(description="(Optional) Logins to assign (real issues only)"),
    ] = None,
    labels: Annotated[
        list[str] | None,
        Field(description="(Optional) Label names (real issues only)"),
    ] = None,
    milestone: Annotated[
        int | None,
        Field(description="(Optional) Milestone number (real issues only)"),
    ] = None,
    as_draft: Annotated[
        bool, Field(description="Create a draft item even when repository_id is given")
    ] = False,
    custom_fields: Annotated[
        list[dict[str, Any]] | str | None,
        Field(
            description=(
                "(Optional) Fields to set, as a list or JSON string: "
                '[{"field_id": "PVTF_...", "value": "In Progress"}]'
            )
        ),
    ] = None,
) -> list[TextContent]:
    """
    Create a task (draft or issue) in a project and set its custom fields.

    A field that cannot be set is reported in ``customFields`` without
    undoing the task.

    Args:
        ctx: The FastMCP context.
        project_id: Project node ID.
        title: Task title.
        body: Task description.
        repository_id: Repository node ID for a real issue.
        assignees: Logins to assign.
        labels: Label names.
        milestone: Milestone number.
        as_draft: Force a draft item.
        custom_fields: Field values to set.

    Returns:
        The item, its content and the per-field outcomes.
    """
    fields = _parse_custom_fields(custom_fields)
    projects = await get_projects_fetcher(ctx)
    result = projects.create_task(
        project_id,
        title,
        body=body,
        repository_id=repository_id,
        assignees=assignees,
        labels=labels,
        milestone=milestone,
        as_draft=as_draft,
        custom_fields=fields,
    )
    return envelope({"success": True, **result})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Manage Task Status", "destructiveHint": True},
)
@handle_tool_errors("manage_task_status")
@check_write_access
async def manage_task_status(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    item_id: Annotated[str, Field(description="Project item ID")],
    status_field_id: Annotated[
        str, Field(description="Node ID of the single-select status field")
    ],
    new_status: Annotated[
        str, Field(description="Option NAME to move the item to (e.g. 'Done')")
    ],
    comment: Annotated[
        str | None,
        Field(
            description=(
                "(Optional) Comment to leave on the issue or pull request; a "
                "failed comment does not undo the status change"
            )
        ),
    ] = None,
) -> list[TextContent]:
    """Move an item to another status, optionally commenting on its issue."""
    projects = await get_projects_fetcher(ctx)
    outcome = projects.manage_task_status(
        project_id, item_id, status_field_id, new_status, comment
    )
    if isinstance(outcome, ResolutionError):
        return envelope(outcome)
    return envelope(outcome.to_dict())


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Group Tasks", "destructiveHint": True},
)
@handle_tool_errors("group_tasks")
@check_write_access
async def group_tasks(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    field_id: Annotated[str, Field(description="Node ID of the field to group by")],
    item_ids: Annotated[
        list[str], Field(description="Project item IDs to update", min_length=1)
    ],
    value: Annotated[
        str | int | float,
        Field(description="Value to set on every item (option name, iteration title, ...)"),
    ],
) -> list[TextContent]:
    """
    Set the same field value on many items.

    Each item is updated in turn; the result lists every item's outcome and
    an "X of N" summary.
    """
    projects = await get_projects_fetcher(ctx)
    result = projects.group_tasks(project_id, field_id, item_ids, value)
    return envelope(result)


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Bulk Add Issues", "destructiveHint": True},
)
@handle_tool_errors("bulk_add_issues")
@check_write_access
async def bulk_add_issues(
    ctx: Context,
    project_id: Annotated[str, Field(description="Project node ID")],
    owner: Annotated[str, Field(description="Repository owner")],
    repo: Annotated[str, Field(description="Repository name")],
    issue_numbers: Annotated[
        list[int], Field(description="Issue numbers to add", min_length=1)
    ],
    status_field_id: Annotated[
        str | None,
        Field(description="(Optional) Status field node ID to set on each added item"),
    ] = None,
    status_value: Annotated[
        str | None,
        Field(description="(Optional) Status option name (required with status_field_id)"),
    ] = None,
) -> list[TextContent]:
    """
    Add many issues of one repository to a project.

    Issues that cannot be found are reported and skipped. A status that
    cannot be set is reported on that issue's outcome while the issue still
    counts as added.
    """
    projects = await get_projects_fetcher(ctx)
    result = projects.bulk_add_issues(
        project_id, owner, repo, issue_numbers, status_field_id, status_value
    )
    return envelope(result)


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "List Milestones (REST)", "readOnlyHint": True},
)
@handle_tool_errors("list_projects_rest")
async def list_projects_rest(
    ctx: Context,
    owner: Annotated[str, Field(description="Repository owner")],
    repo: Annotated[str, Field(description="Repository name")],
) -> list[TextContent]:
    """
    List a repository's milestones as lightweight projects.

    Works with fine-grained tokens, which cannot use Projects V2.
    """
    projects = await get_projects_fetcher(ctx)
    return envelope({"content": projects.list_projects_rest(owner, repo)})


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Create Milestone (REST)", "destructiveHint": True},
)
@handle_tool_errors("create_project_rest")
@check_write_access
async def create_project_rest(
    ctx: Context,
    owner: Annotated[str, Field(description="Repository owner")],
    repo: Annotated[str, Field(description="Repository name")],
    title: Annotated[str, Field(description="Milestone title", min_length=1)],
    description: Annotated[
        str | None, Field(description="(Optional) Milestone description")
    ] = None,
    due_on: Annotated[
        str | None,
        Field(description="(Optional) Due date as an ISO 8601 timestamp"),
    ] = None,
) -> list[TextContent]:
    """Create a milestone to track work when Projects V2 is not reachable."""
    projects = await get_projects_fetcher(ctx)
    milestone = projects.create_project_rest(owner, repo, title, description, due_on)
    return envelope({"success": True, "milestone": milestone})


@projects_mcp.tool(
    tags={"github", "read"},
    annotations={"title": "List Milestone Issues (REST)", "readOnlyHint": True},
)
@handle_tool_errors("list_project_items_rest")
async def list_project_items_rest(
    ctx: Context,
    owner: Annotated[str, Field(description="Repository owner")],
    repo: Annotated[str, Field(description="Repository name")],
    milestone_number: Annotated[int, Field(description="Milestone number", ge=1)],
) -> list[TextContent]:
    """List the open and closed issues attached to a milestone."""
    projects = await get_projects_fetcher(ctx)
    return envelope(
        {"content": projects.list_project_items_rest(owner, repo, milestone_number)}
    )


@projects_mcp.tool(
    tags={"github", "write"},
    annotations={"title": "Add Issue to Milestone (REST)", "destructiveHint": True},
)
@handle_tool_errors("add_project_item_rest")
@check_write_access
async def add_project_item_rest(
    ctx: Context,
    owner: Annotated[str, Field(description="Repository owner")],
    repo: Annotated[str, Field(description="Repository name")],
    issue_number: Annotated[int, Field(description="Issue number", ge=1)],
    milestone_number: Annotated[int, Field(description="Milestone number", ge=1)],
) -> list[TextContent]:
    """Attach an existing issue to a milestone."""
    projects = await get_projects_fetcher(ctx)
    issue = projects.add_project_item_rest(owner, repo, issue_number, milestone_number)
    return envelope({"success": True, "issue": issue})
