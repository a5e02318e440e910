"""GitHub Projects V2 API module.

This module provides the fetcher used by the MCP tools to work with
GitHub Projects V2 over GraphQL, with a REST fallback for restricted tokens.
"""

from .client import ProjectsClient
from .config import ProjectsConfig
from .credentials import CapabilityClass, classify_credential, is_suitable
from .milestones import MilestonesMixin
from .projects import ProjectsMixin
from .tasks import TasksMixin
from .views import ViewsMixin


class GitHubProjectsFetcher(
    ProjectsMixin,
    ViewsMixin,
    TasksMixin,
    MilestonesMixin,
):
    """
    The main GitHub Projects client class providing access to all operations.

    All methods are inherited from the specialized mixins:
    projects, views, fields, items, tasks and the REST milestone fallback.
    """

    pass


__all__ = [
    "CapabilityClass",
    "GitHubProjectsFetcher",
    "ProjectsClient",
    "ProjectsConfig",
    "classify_credential",
    "is_suitable",
]
