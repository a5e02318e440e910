"""Credential capability classification.

GitHub tokens announce their kind in their prefix. Classic tokens (``ghp_``)
reach every protocol path, including organization-scoped Projects V2 GraphQL
queries. Fine-grained tokens (``github_pat_``) cannot run those queries but
still work against repository-scoped REST endpoints. Anything else is
accepted with an advisory.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any

from ..exceptions import CredentialMissing, CredentialUnsuitable
from .constants import (
    CLASSIC_TOKEN_PREFIX,
    FINE_GRAINED_TOKEN_PREFIX,
    REQUIRED_TOKEN_SCOPES,
    TOKEN_SETTINGS_URL,
)

logger = logging.getLogger("mcp-github-projects.credentials")

NOT_CONFIGURED_DIAGNOSTIC = (
    "credential not configured: set the GITHUB_TOKEN environment variable "
    f"to a classic token ({CLASSIC_TOKEN_PREFIX}...)"
)
RESTRICTED_DIAGNOSTIC = (
    f"Fine-grained tokens ({FINE_GRAINED_TOKEN_PREFIX}...) cannot run GitHub "
    "Projects V2 GraphQL queries. Create a classic token "
    f"({CLASSIC_TOKEN_PREFIX}...) at {TOKEN_SETTINGS_URL} with the scopes: "
    f"{', '.join(REQUIRED_TOKEN_SCOPES)} (admin:org for organization projects)."
)
UNKNOWN_DIAGNOSTIC = (
    "Unrecognized token prefix. It will be used as a classic token; if calls "
    f"fail with 401/403, use a classic token ({CLASSIC_TOKEN_PREFIX}...) instead."
)


class CapabilityClass(str, enum.Enum):
    """Protocol surface a credential may use."""

    FULL = "full"  # Every path, including Projects V2 GraphQL
    RESTRICTED = "restricted"  # Repository-scoped REST only
    UNKNOWN = "unknown"

    @property
    def token_type(self) -> str:
        return {
            CapabilityClass.FULL: "classic",
            CapabilityClass.RESTRICTED: "fine-grained",
            CapabilityClass.UNKNOWN: "unknown",
        }[self]


@dataclass(frozen=True)
class CredentialClassification:
    """Result of classifying a credential string."""

    capability: CapabilityClass
    configured: bool
    diagnostic: str | None = None

    @property
    def effective_capability(self) -> CapabilityClass:
        """Class used for gating: unknown tokens are treated as full."""
        if self.configured and self.capability is CapabilityClass.UNKNOWN:
            return CapabilityClass.FULL
        return self.capability

    def to_dict(self) -> dict[str, Any]:
        return {
            "tokenType": self.capability.token_type,
            "capability": self.capability.value,
            "configured": self.configured,
            "diagnostic": self.diagnostic,
        }


def classify_credential(token: str | None) -> CredentialClassification:
    """Classify a credential purely from its shape.

    Args:
        token: The raw token string, or None when not configured.

    Returns:
        The capability class and an optional diagnostic.
    """
    if not token:
        return CredentialClassification(
            capability=CapabilityClass.UNKNOWN,
            configured=False,
            diagnostic=NOT_CONFIGURED_DIAGNOSTIC,
        )
    if token.startswith(CLASSIC_TOKEN_PREFIX):
        return CredentialClassification(
            capability=CapabilityClass.FULL, configured=True
        )
    if token.startswith(FINE_GRAINED_TOKEN_PREFIX):
        return CredentialClassification(
            capability=CapabilityClass.RESTRICTED,
            configured=True,
            diagnostic=RESTRICTED_DIAGNOSTIC,
        )
    return CredentialClassification(
        capability=CapabilityClass.UNKNOWN,
        configured=True,
        diagnostic=UNKNOWN_DIAGNOSTIC,
    )


def is_suitable(
    token: str | None, required: CapabilityClass = CapabilityClass.FULL
) -> bool:
    """Tell whether ``token`` may perform an operation needing ``required``.

    Only the fine-grained prefix is unsuitable, and only for full-capability
    (GraphQL) operations. A missing token is not judged here: it is refused
    by ``check_capability`` with its own diagnostic.
    """
    if required is not CapabilityClass.FULL:
        return True
    return classify_credential(token).capability is not CapabilityClass.RESTRICTED


def check_capability(
    classification: CredentialClassification,
    required: CapabilityClass = CapabilityClass.FULL,
    operation: str | None = None,
) -> None:
    """Raise before any remote call if the credential cannot do the operation.

    Raises:
        CredentialMissing: No token is configured.
        CredentialUnsuitable: The token's class is below ``required``.
    """
    if not classification.configured:
        raise CredentialMissing(NOT_CONFIGURED_DIAGNOSTIC, classification)
    if (
        required is CapabilityClass.FULL
        and classification.effective_capability is not CapabilityClass.FULL
    ):
        target = f" for '{operation}'" if operation else ""
        logger.warning(
            f"Refusing GraphQL call{target}: credential class is "
            f"{classification.capability.value}"
        )
        raise CredentialUnsuitable(
            classification.diagnostic or RESTRICTED_DIAGNOSTIC, classification
        )


def log_credential_advisory(classification: CredentialClassification) -> None:
    """Log the startup advisory for the configured credential."""
    if not classification.configured:
        logger.error(NOT_CONFIGURED_DIAGNOSTIC)
    elif classification.diagnostic:
        logger.warning(classification.diagnostic)
    else:
        logger.info("GitHub token is a classic token; all Projects V2 operations are available")
