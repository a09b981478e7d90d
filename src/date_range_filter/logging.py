"""Structured logging for the range filter, built on structlog."""

import logging
import sys
from typing import Literal

import structlog


LOG_LEVELS = logging.getLevelNamesMapping()


def configure_logging(
    level: str = "INFO",
    format: Literal["console", "json"] = "console",
) -> None:
    """Configure structlog once per process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "console" for a colored dev renderer, "json" for log shipping
    """
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if format == "json":
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, bound to ``name`` when one is given.

    The logger stays lazy so module-level loggers pick up the configuration
    applied later by ``configure_logging``.
    """
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()
