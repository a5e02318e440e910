import asyncio
import os

import click
from dotenv import load_dotenv

__version__ = "0.3.0"

from .logging_config import AUDIT_LOGGER_NAME, log_operation, setup_logger

logger = setup_logger()


@click.command()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (can be used multiple times)",
)
@click.option(
    "--env-file", type=click.Path(exists=True, dir_okay=False), help="Path to .env file"
)
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse", "streamable-http"]),
    default="stdio",
    help="Transport type (stdio, sse or streamable-http)",
)
@click.option(
    "--port",
    default=8000,
    help="Port to listen on for SSE or Streamable HTTP transport",
)
@click.option(
    "--host",
    default="0.0.0.0",  # noqa: S104
    help="Host to bind to for SSE or Streamable HTTP transport",
)
@click.option(
    "--log-dir",
    help="Directory to store log files",
)
@click.option(
    "--log-to-file/--no-log-to-file",
    default=False,
    help="Enable/disable file logging",
)
@click.option(
    "--github-token",
    help="GitHub token: classic (ghp_...) for Projects V2, fine-grained for the REST tools",
)
@click.option(
    "--read-only",
    is_flag=True,
    help="Run in read-only mode (disables all write operations)",
)
@click.option(
    "--enabled-tools",
    help="Comma-separated list of tools to enable (enables all if not specified)",
)
def main(
    verbose: int,
    env_file: str | None,
    transport: str,
    port: int,
    host: str,
    log_dir: str | None,
    log_to_file: bool,
    github_token: str | None,
    read_only: bool,
    enabled_tools: str | None,
) -> None:
    """MCP GitHub Projects Server - GitHub Projects V2 functionality for MCP

    Classic tokens reach every tool; fine-grained tokens are limited to the
    milestone-based *_rest tools.
    """
    logging_level: str | None = None
    if verbose == 1:
        logging_level = "INFO"
    elif verbose >= 2:
        logging_level = "DEBUG"

    setup_logger(
        name="mcp-github-projects",
        level=logging_level,
        log_to_file=log_to_file,
        log_dir=log_dir,
    )
    setup_logger(
        name=AUDIT_LOGGER_NAME,
        level=logging_level,
        log_to_file=log_to_file,
        log_dir=log_dir,
    )

    with log_operation(logger, "application_startup", app_version=__version__):
        if env_file:
            logger.info(f"Loading environment from file: {env_file}")
            load_dotenv(env_file)
        else:
            logger.debug("Attempting to load environment from default .env file")
            load_dotenv()

        if github_token:
            os.environ["GITHUB_TOKEN"] = github_token
        if log_dir:
            os.environ["LOG_DIR"] = log_dir
        if read_only:
            os.environ["READ_ONLY_MODE"] = "true"
        if enabled_tools:
            os.environ["ENABLED_TOOLS"] = enabled_tools

        from .servers import main_mcp

        run_kwargs: dict[str, object] = {"transport": transport}
        if transport in ("sse", "streamable-http"):
            run_kwargs["host"] = host
            run_kwargs["port"] = port
            logger.info(
                f"Starting MCP GitHub Projects v{__version__} with {transport} "
                f"transport on {host}:{port}"
            )
        else:
            logger.info(f"Starting MCP GitHub Projects v{__version__} with stdio transport")

    asyncio.run(main_mcp.run_async(**run_kwargs))  # type: ignore[arg-type]


__all__ = ["main", "__version__", "setup_logger", "log_operation"]

if __name__ == "__main__":
    main()
