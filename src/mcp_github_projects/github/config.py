"""Configuration module for GitHub Projects API interactions."""

import os
from dataclasses import dataclass
from functools import cached_property

from ..utils.env import get_env_int, is_env_ssl_verify
from ..utils.io import is_read_only_mode
from .constants import (
    DEFAULT_API_URL,
    DEFAULT_GRAPHQL_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
)
from .credentials import CredentialClassification, classify_credential


@dataclass
class ProjectsConfig:
    """GitHub Projects API configuration.

    Built once at process start and handed to every fetcher; the credential
    classification is computed lazily on first use and then reused.
    """

    token: str | None = None  # Classic (ghp_) or fine-grained (github_pat_) token
    graphql_url: str = DEFAULT_GRAPHQL_URL
    api_url: str = DEFAULT_API_URL
    ssl_verify: bool = True
    timeout: int = DEFAULT_TIMEOUT  # Seconds, per remote call
    page_size: int = DEFAULT_PAGE_SIZE  # Default `first` for list operations
    read_only: bool = False

    def __post_init__(self) -> None:
        self.api_url = self.api_url.rstrip("/")

    @cached_property
    def credential(self) -> CredentialClassification:
        """Capability class of the configured token."""
        return classify_credential(self.token)

    @property
    def is_configured(self) -> bool:
        return bool(self.token)

    @classmethod
    def from_env(cls) -> "ProjectsConfig":
        """Create configuration from environment variables.

        A missing GITHUB_TOKEN does not fail here: the server still starts and
        every tool answers with a "credential not configured" diagnostic.

        Raises:
            ValueError: If a numeric variable is malformed.
        """
        return cls(
            token=os.getenv("GITHUB_TOKEN") or None,
            graphql_url=os.getenv("GITHUB_GRAPHQL_URL", DEFAULT_GRAPHQL_URL),
            api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL),
            ssl_verify=is_env_ssl_verify("GITHUB_SSL_VERIFY"),
            timeout=get_env_int("GITHUB_TIMEOUT", DEFAULT_TIMEOUT),
            page_size=get_env_int("GITHUB_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            read_only=is_read_only_mode(),
        )
