"""Shared fixtures for the MCP GitHub Projects test suite."""

import pytest

GITHUB_ENV_VARS = (
    "GITHUB_TOKEN",
    "GITHUB_GRAPHQL_URL",
    "GITHUB_API_URL",
    "GITHUB_SSL_VERIFY",
    "GITHUB_TIMEOUT",
    "GITHUB_PAGE_SIZE",
    "READ_ONLY_MODE",
    "ENABLED_TOOLS",
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every GitHub Projects variable from the environment."""
    for name in GITHUB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
