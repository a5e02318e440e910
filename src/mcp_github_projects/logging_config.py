"""Contextual logging configuration for MCP GitHub Projects."""

import json
import logging
import os
import sys
import threading
import time
import types
import uuid
from collections.abc import Mapping
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal, cast

from .utils.logging import mask_sensitive_mapping

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] [%(context)s] %(message)s"
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_DIRECTORY = "logs"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

AUDIT_LOGGER_NAME = "mcp-github-projects.audit"

ApiEventKind = Literal["request", "response", "error"]


class ContextualLogger(logging.Logger):
    """Logger that carries operation context (operation, trace_id) per thread."""

    def __init__(self, name: str, level: int = 0) -> None:
        super().__init__(name, level)
        self._context_data = threading.local()

    def _get_context_str(self) -> str:
        context_data = getattr(self._context_data, "data", {})
        if not context_data:
            return "no-context"
        return ",".join(f"{k}={v}" for k, v in context_data.items())

    def _log(
        self,
        level: int,
        msg: object,
        args: tuple[object, ...] | Mapping[str, object],
        exc_info: Any = None,
        extra: Mapping[str, object] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
    ) -> None:
        extra = dict(extra or {})
        extra.setdefault("context", self._get_context_str())
        super()._log(level, msg, args, exc_info, extra, stack_info, stacklevel + 1)

    def set_context(self, **kwargs: Any) -> None:
        """Add key/value pairs to the current thread's logging context."""
        if not hasattr(self._context_data, "data"):
            self._context_data.data = {}
        self._context_data.data.update(kwargs)

    def clear_context(self) -> None:
        if hasattr(self._context_data, "data"):
            self._context_data.data = {}


class _ContextDefaultFilter(logging.Filter):
    """Fills ``%(context)s`` for records emitted by plain ``logging.Logger`` instances."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = "no-context"
        return True


class LoggingContextManager:
    """Context manager that tags log lines with an operation and a trace id."""

    def __init__(self, logger: logging.Logger, operation: str, **context: Any) -> None:
        self.logger = logger
        self.operation = operation
        self.context = context.copy()
        self.start_time = time.time()
        self.trace_id = context.get("trace_id", str(uuid.uuid4())[:8])
        self.old_context: dict[str, Any] = {}

    def __enter__(self) -> "LoggingContextManager":
        if isinstance(self.logger, ContextualLogger):
            self.old_context = getattr(self.logger._context_data, "data", {}).copy()
            self.context["operation"] = self.operation
            self.context["trace_id"] = self.trace_id
            self.logger.set_context(**self.context)
        self.logger.debug(f"Operation started: {self.operation}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        duration = time.time() - self.start_time
        if exc_type:
            self.logger.error(
                f"Operation failed: {self.operation} after {duration:.3f}s - {exc_val}"
            )
        else:
            self.logger.debug(
                f"Operation completed: {self.operation} in {duration:.3f}s"
            )
        if isinstance(self.logger, ContextualLogger):
            self.logger._context_data.data = self.old_context


def setup_logger(
    name: str = "mcp-github-projects",
    level: str | None = None,
    log_to_file: bool = False,
    log_dir: str | None = None,
    log_format: str | None = None,
) -> ContextualLogger:
    """
    Configure and return a contextual logger.

    Console output goes to stderr because stdout carries the stdio MCP stream.
    Calling this twice for the same name replaces the handlers instead of
    stacking them.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, etc.); falls back to LOG_LEVEL
        log_to_file: If True, also log to a rotating file
        log_dir: Directory for log files; falls back to LOG_DIR
        log_format: Log format; falls back to LOG_FORMAT

    Returns:
        Configured contextual logger
    """
    logging.setLoggerClass(ContextualLogger)
    logger = logging.getLogger(name)

    log_level = level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    formatter = logging.Formatter(log_format or os.getenv("LOG_FORMAT", DEFAULT_FORMAT))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(_ContextDefaultFilter())
    logger.addHandler(console_handler)

    if log_to_file:
        log_directory = log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIRECTORY)
        Path(log_directory).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            Path(log_directory) / f"{name}.log",
            maxBytes=MAX_LOG_SIZE,
            backupCount=LOG_BACKUP_COUNT,
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(_ContextDefaultFilter())
        logger.addHandler(file_handler)

    logger.propagate = False
    return cast(ContextualLogger, logger)


def log_operation(
    logger: logging.Logger, operation: str, **context: Any
) -> LoggingContextManager:
    """
    Create a context manager for operation logging.

    Args:
        logger: Logger to write to
        operation: Name of the operation (usually the tool name)
        **context: Additional context data

    Returns:
        Context manager configured for operation logging
    """
    return LoggingContextManager(logger, operation, **context)


def log_api_event(kind: ApiEventKind, operation: str, **fields: Any) -> None:
    """Emit one structured audit record for a tool request, response or error.

    Records are JSON objects so a file handler on the audit logger yields a
    line-oriented event log. Secret-looking keys are masked.
    """
    audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
    record = {"event": kind, "operation": operation}
    record.update(mask_sensitive_mapping(fields))
    level = logging.ERROR if kind == "error" else logging.INFO
    audit_logger.log(level, json.dumps(record, default=str, ensure_ascii=False))
