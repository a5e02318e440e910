"""Tests for the GitHub Projects configuration."""

import pytest

from mcp_github_projects.github import ProjectsConfig
from mcp_github_projects.github.credentials import CapabilityClass
from tests.fixtures.github_mocks import MOCK_CLASSIC_TOKEN, MOCK_FINE_GRAINED_TOKEN


def test_from_env_defaults(clean_env):
    clean_env.setenv("GITHUB_TOKEN", MOCK_CLASSIC_TOKEN)

    config = ProjectsConfig.from_env()

    assert config.token == MOCK_CLASSIC_TOKEN
    assert config.graphql_url == "https://api.github.com/graphql"
    assert config.api_url == "https://api.github.com"
    assert config.ssl_verify is True
    assert config.timeout == 30
    assert config.page_size == 20
    assert config.read_only is False
    assert config.is_configured is True


def test_from_env_overrides(clean_env):
    clean_env.setenv("GITHUB_TOKEN", MOCK_FINE_GRAINED_TOKEN)
    clean_env.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
    clean_env.setenv("GITHUB_GRAPHQL_URL", "https://ghe.example.com/api/graphql")
    clean_env.setenv("GITHUB_SSL_VERIFY", "false")
    clean_env.setenv("GITHUB_TIMEOUT", "5")
    clean_env.setenv("GITHUB_PAGE_SIZE", "50")
    clean_env.setenv("READ_ONLY_MODE", "true")

    config = ProjectsConfig.from_env()

    assert config.api_url == "https://ghe.example.com/api/v3"
    assert config.graphql_url == "https://ghe.example.com/api/graphql"
    assert config.ssl_verify is False
    assert config.timeout == 5
    assert config.page_size == 50
    assert config.read_only is True
    assert config.credential.capability is CapabilityClass.RESTRICTED


def test_missing_token_still_builds(clean_env):
    config = ProjectsConfig.from_env()

    assert config.token is None
    assert config.is_configured is False
    assert config.credential.configured is False


@pytest.mark.parametrize("value", ["abc", "0", "-3"])
def test_invalid_numbers_are_rejected(clean_env, value):
    clean_env.setenv("GITHUB_TIMEOUT", value)

    with pytest.raises(ValueError, match="GITHUB_TIMEOUT"):
        ProjectsConfig.from_env()


def test_credential_is_computed_once():
    config = ProjectsConfig(token=MOCK_CLASSIC_TOKEN)
    assert config.credential is config.credential
