"""
Structured Logging with structlog

Provides the progress log of a build (check / create / update / bundle /
up-to-date) and diagnostics for the rest of the package.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars

DEFAULT_LEVEL = logging.INFO


def setup_logging(
    level: str = "INFO",
    format: str = "console",  # "json" or "console"
    include_timestamp: bool = False,
) -> None:
    """
    Setup structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("json" for machines, "console" for humans)
        include_timestamp: Include timestamp in logs
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Configure stdlib logging to play nice with structlog
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    logging.getLogger("bundlekit").setLevel(numeric_level)

    shared_processors: list[Any] = [
        merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]

    if include_timestamp:
        shared_processors.append(structlog.processors.TimeStamper(fmt="iso"))

    shared_processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]
    )

    if format == "json":
        output_processors = [
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ]
    else:
        output_processors = [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level] + shared_processors + output_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _configure_defaults() -> None:
    """Level filter for library use, when the host never configured structlog"""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(DEFAULT_LEVEL))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__ from calling module)

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("bundle", input="src/main.js", output="dist/deps/ab12.js")
        ```
    """
    if not structlog.is_configured():
        _configure_defaults()
    return structlog.get_logger(name)


class ProgressLogger:
    """
    Build progress events, silenced by ``quiet``.

    Warnings and errors go through the wrapped logger directly and are never
    silenced.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, quiet: bool = False) -> None:
        self.logger = logger
        self.quiet = quiet

    def event(self, event: str, **extra: Any) -> None:
        if not self.quiet:
            self.logger.info(event, **extra)


__all__ = [
    "setup_logging",
    "get_logger",
    "ProgressLogger",
]
