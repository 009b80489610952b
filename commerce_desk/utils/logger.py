"""
Structured logging configuration.

All desk logs go to stderr so that CLI stdout stays clean for tables, JSON
and generated files. Modules log with keyword context (counts, platforms,
task ids) and the session binds its id through LogContext.
"""

import logging
import sys
from pathlib import Path
from typing import IO, Optional

import structlog
from structlog.types import Processor

_file_handler: Optional[logging.FileHandler] = None


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Configure application-wide structured logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Emit JSON lines instead of the console renderer.
        log_file: Optional file path that receives every event. Events are
            then routed through stdlib logging instead of printed directly.
        stream: Output stream for structlog events (defaults to stderr).
    """
    global _file_handler
    numeric_level = getattr(logging, level.upper())
    output = stream or sys.stderr
    to_file = bool(log_file)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty() and not to_file))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        # With a log file, events go through stdlib logging so the file handler sees them
        logger_factory=structlog.stdlib.LoggerFactory() if to_file else structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=numeric_level,
    )

    root = logging.getLogger()
    if _file_handler is not None:
        root.removeHandler(_file_handler)
        _file_handler.close()
        _file_handler = None

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        _file_handler = logging.FileHandler(log_file, encoding="utf-8")
        _file_handler.setLevel(numeric_level)
        root.addHandler(_file_handler)
        root.setLevel(numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger for the given module name.

    Args:
        name: Logger name, typically __name__.

    Returns:
        Configured structlog logger instance.
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for temporary log context.

    Nested contexts restore the outer values on exit, so a session id bound
    by an outer DeskSession call survives an inner one.

    Example:
        >>> with LogContext(session_id="a1b2c3d4"):
        ...     logger.info("Snapshot analyzed")
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self._tokens = None

    def __enter__(self):
        self._tokens = structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._tokens:
            structlog.contextvars.reset_contextvars(**self._tokens)
            self._tokens = None
