"""
Test fixtures for GitHub Projects fetcher tests.

The fetcher's ``graphql`` and ``rest`` methods are the only network seams,
so every mixin is tested with those two replaced by mocks.
"""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from mcp_github_projects.github import GitHubProjectsFetcher, ProjectsConfig
from mcp_github_projects.github.fields import FieldCatalogue
from mcp_github_projects.models import ProjectField
from tests.fixtures.github_mocks import (
    MOCK_CLASSIC_TOKEN,
    MOCK_FIELD_NODES,
    MOCK_PROJECT_ID,
)


@pytest.fixture
def projects_config() -> ProjectsConfig:
    return ProjectsConfig(token=MOCK_CLASSIC_TOKEN)


@pytest.fixture
def projects_fetcher(projects_config: ProjectsConfig) -> GitHubProjectsFetcher:
    """A fetcher whose remote calls are MagicMocks."""
    fetcher = GitHubProjectsFetcher(config=projects_config)
    fetcher.graphql = MagicMock(name="graphql")
    fetcher.rest = MagicMock(name="rest")
    return fetcher


@pytest.fixture
def project_fields() -> list[ProjectField]:
    return [ProjectField.from_api_response(node) for node in MOCK_FIELD_NODES]


@pytest.fixture
def field_catalogue(project_fields: list[ProjectField]) -> FieldCatalogue:
    return FieldCatalogue(MOCK_PROJECT_ID, project_fields)


@pytest.fixture
def field_by_name(project_fields: list[ProjectField]) -> Callable[[str], ProjectField]:
    by_name = {field.name: field for field in project_fields}
    return by_name.__getitem__
