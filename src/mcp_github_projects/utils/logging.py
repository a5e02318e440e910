"""Logging helpers: secret masking."""

from collections.abc import Mapping
from typing import Any

SENSITIVE_KEYS = frozenset(
    {"token", "password", "secret", "authorization", "github_token", "api_token"}
)


def mask_sensitive(value: str | None, keep_chars: int = 4) -> str:
    """Mask a secret, keeping only its first ``keep_chars`` characters.

    Args:
        value: The secret to mask.
        keep_chars: Number of leading characters to keep visible.

    Returns:
        The masked value, or "Not Provided" for empty input.
    """
    if not value:
        return "Not Provided"
    if len(value) <= keep_chars * 2:
        return "*" * len(value)
    return value[:keep_chars] + "*" * (len(value) - keep_chars)


def mask_sensitive_mapping(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a shallow copy of ``data`` with secret-looking keys masked."""
    masked: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_KEYS and isinstance(value, str):
            masked[key] = mask_sensitive(value)
        elif isinstance(value, Mapping):
            masked[key] = mask_sensitive_mapping(value)
        else:
            masked[key] = value
    return masked
