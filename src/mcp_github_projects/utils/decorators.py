import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

from fastmcp import Context
from fastmcp.exceptions import ToolError
from mcp.types import TextContent

from mcp_github_projects.exceptions import (
    CredentialError,
    RemoteError,
    ResolutionError,
)
from mcp_github_projects.github.errors import format_remote_error
from mcp_github_projects.logging_config import log_api_event, log_operation
from mcp_github_projects.normalizer import is_error_envelope, normalize_response

logger = logging.getLogger("mcp-github-projects.utils.decorators")


F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _find_context(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Context | None:
    ctx = kwargs.get("ctx")
    if isinstance(ctx, Context):
        return ctx
    return next((arg for arg in args if isinstance(arg, Context)), None)


def _app_context(ctx: Context | None) -> Any:
    if ctx is None:
        return None
    # Imported here: the servers package imports this module while loading.
    from mcp_github_projects.servers.dependencies import get_app_context

    try:
        return get_app_context(ctx)
    except (AttributeError, LookupError, ValueError):
        logger.debug("Lifespan context not available for this call")
        return None


def envelope(raw: Any) -> list[TextContent]:
    """
    Normalize a tool result and flag error-shaped results.

    Raises:
        ToolError: If the normalized items carry an error payload; FastMCP
            returns it to the client with ``isError`` set.
    """
    items = normalize_response(raw)
    if is_error_envelope(items):
        raise ToolError("\n\n".join(item.text for item in items))
    return items


def check_write_access(func: F) -> F:
    """
    Decorator for FastMCP tools to check if the application is in read-only mode.
    If in read-only mode, it raises a ValueError.
    Assumes the decorated function is async and has `ctx: Context` as its first argument.
    """

    @wraps(func)
    async def wrapper(ctx: Context, *args: Any, **kwargs: Any) -> Any:
        app_lifespan_ctx = _app_context(ctx)
        tool_name = func.__name__
        if app_lifespan_ctx is not None and app_lifespan_ctx.read_only:
            action_description = tool_name.replace("_", " ")
            logger.warning(f"Attempted to call tool '{tool_name}' in read-only mode.")
            raise ValueError(f"Cannot {action_description} in read-only mode.")

        return await func(ctx, *args, **kwargs)

    return wrapper  # type: ignore


def _credential_refusal(error: CredentialError) -> dict[str, Any]:
    classification = error.classification
    token_type = (
        classification.capability.token_type
        if classification is not None and classification.configured
        else "none"
    )
    return {
        "success": False,
        "message": error.message,
        "tokenType": token_type,
        "isValid": False,
    }


def handle_tool_errors(operation: str | None = None) -> Callable[[F], F]:
    """
    Decorator turning GitHub Projects failures into diagnostic envelopes.

    Credential refusals, unresolved values, remote failures and invalid
    arguments are logged and rendered as error items (raised as ``ToolError``
    through ``envelope``). Each call emits ``request`` and ``response`` or
    ``error`` audit events.

    Args:
        operation: Name used in logs and audit events (defaults to the
            function name).
    """

    def decorator(func: F) -> F:
        operation_name = operation or func.__name__

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            ctx = _find_context(args, kwargs)
            params = {k: v for k, v in kwargs.items() if not isinstance(v, Context)}
            log_api_event("request", operation_name, params=params)

            with log_operation(logger, operation_name):
                try:
                    result = await func(*args, **kwargs)
                except ToolError as e:
                    log_api_event("error", operation_name, error=str(e))
                    raise
                except CredentialError as e:
                    logger.warning(f"{operation_name} refused: {e.message}")
                    raw: dict[str, Any] = _credential_refusal(e)
                except ResolutionError as e:
                    logger.info(f"{operation_name}: {e.message}")
                    raw = e.to_dict()
                except RemoteError as e:
                    app_lifespan_ctx = _app_context(ctx)
                    config = getattr(app_lifespan_ctx, "projects_config", None)
                    classification = config.credential if config is not None else None
                    log_level = logging.WARNING if e.status == 404 else logging.ERROR
                    logger.log(log_level, f"{operation_name} failed: {e.message}")
                    raw = {
                        "success": False,
                        "error": format_remote_error(e, classification),
                    }
                except ValueError as e:
                    logger.warning(f"{operation_name} rejected: {e}")
                    raw = {"success": False, "error": str(e)}
                else:
                    log_api_event(
                        "response",
                        operation_name,
                        items=len(result) if isinstance(result, list) else 1,
                    )
                    return result

                log_api_event("error", operation_name, error=raw)
                return envelope(raw)

        return wrapper  # type: ignore

    return decorator
