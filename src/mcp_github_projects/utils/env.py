"""Environment variable utility functions for MCP GitHub Projects."""

import os

_TRUTHY = ("true", "1", "yes", "y", "on")


def is_env_truthy(env_var_name: str, default: str = "") -> bool:
    """Check if an environment variable is set to a truthy value.

    Considers 'true', '1', 'yes', 'y', 'on' as truthy values (case-insensitive).

    Args:
        env_var_name: Name of the environment variable to check
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to a truthy value, False otherwise
    """
    return os.getenv(env_var_name, default).strip().lower() in _TRUTHY


def is_env_ssl_verify(env_var_name: str, default: str = "true") -> bool:
    """SSL verification stays on unless explicitly disabled."""
    return os.getenv(env_var_name, default).strip().lower() not in ("false", "0", "no")


def get_env_int(env_var_name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""
    raw = os.getenv(env_var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{env_var_name} must be an integer, got '{raw}'") from e
    if value <= 0:
        raise ValueError(f"{env_var_name} must be positive, got {value}")
    return value
