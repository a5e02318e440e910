"""Render remote failures as actionable text."""

from ..exceptions import RemoteError
from .constants import CLASSIC_TOKEN_PREFIX, REQUIRED_TOKEN_SCOPES
from .credentials import CapabilityClass, CredentialClassification


def _token_hint(classification: CredentialClassification | None) -> str:
    scopes = ", ".join((*REQUIRED_TOKEN_SCOPES, "admin:org"))
    if classification is not None and classification.capability is CapabilityClass.RESTRICTED:
        return (
            "Hint: the configured token is fine-grained. Projects V2 operations need "
            f"a classic token ({CLASSIC_TOKEN_PREFIX}...) with the scopes: {scopes}."
        )
    return (
        f"Hint: check that the token has the required scopes ({scopes}) and that it "
        f"is a classic token ({CLASSIC_TOKEN_PREFIX}...) for GraphQL operations."
    )


def format_remote_error(
    error: RemoteError, classification: CredentialClassification | None = None
) -> str:
    """Format a remote error with its details, a token hint and the docs link.

    Args:
        error: The error raised by ``ProjectsClient``.
        classification: The configured credential's class, used to tailor the
            hint on 401/403.

    Returns:
        Multi-line message starting with ``Error {status}: {message}``.
    """
    status = error.status if error.status is not None else "unknown"
    lines = [f"Error {status}: {error.message}"]

    details = []
    for err in error.errors:
        if not isinstance(err, dict):
            continue
        detail = f"- {err.get('message', 'Unknown error')}"
        if path := err.get("path"):
            detail += f" (at: {'.'.join(str(part) for part in path)})"
        details.append(detail)
    if details:
        lines.append("")
        lines.append("Details:")
        lines.extend(details)

    if error.status in (401, 403):
        lines.append("")
        lines.append(_token_hint(classification))

    if error.docs_url:
        lines.append("")
        lines.append(f"Documentation: {error.docs_url}")

    return "\n".join(lines)
