"""Exception hierarchy for MCP GitHub Projects.

Resolution errors are returned as values by the resolver and the batch runner;
credential and remote errors are raised and caught once at the tool boundary.
"""

from collections.abc import Sequence
from typing import Any


class GitHubProjectsError(Exception):
    """Base exception for MCP GitHub Projects errors."""

    pass


class CredentialError(GitHubProjectsError):
    """Base class for credential problems detected before any remote call."""

    def __init__(self, message: str, classification: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.classification = classification


class CredentialMissing(CredentialError):
    """Raised when no GitHub token is configured."""

    pass


class CredentialUnsuitable(CredentialError):
    """Raised when the token's capability class cannot perform the operation."""

    pass


class ResolutionError(GitHubProjectsError):
    """A caller-supplied value could not be turned into a typed field payload.

    Attributes:
        reason: Short machine-readable reason (e.g. "not a number").
        field_name: Name (or id) of the field being resolved.
        raw_value: The value the caller supplied.
        available: Valid identifiers the value was compared against.
    """

    reason = "resolution failed"

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        raw_value: Any = None,
        reason: str | None = None,
        available: Sequence[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field_name = field_name
        self.raw_value = raw_value
        if reason is not None:
            self.reason = reason
        self.available = list(available) if available is not None else None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": False,
            "error": self.message,
            "reason": self.reason,
        }
        if self.field_name is not None:
            data["field"] = self.field_name
        if self.raw_value is not None:
            data["value"] = self.raw_value
        if self.available is not None:
            data["available"] = self.available
        return data


class FieldNotFound(ResolutionError):
    reason = "field not found"


class OptionNotFound(ResolutionError):
    reason = "option not found"


class ValueFormatInvalid(ResolutionError):
    reason = "invalid value format"


class UnsupportedFieldType(ResolutionError):
    reason = "unsupported field type"


class RemoteError(GitHubProjectsError):
    """Base class for failures reported by the GitHub API."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        errors: list[dict[str, Any]] | None = None,
        docs_url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.errors = errors or []
        self.docs_url = docs_url


class RemoteNotFound(RemoteError):
    """Raised when a project, item, field or issue does not resolve (404)."""

    pass


class RemoteRequestFailed(RemoteError):
    """Raised for any other non-success response or GraphQL error list."""

    pass


class MCPGitHubProjectsAuthenticationError(RemoteRequestFailed):
    """Raised when the GitHub API rejects the credential (401/403)."""

    pass
