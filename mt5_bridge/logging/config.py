"""
Centralized logging configuration for the MT5 bridge.

This module provides standardized logging configuration using structlog
for all components. The socket listener, the ingestion pipeline and the
HTTP layer all log through this configuration so that output is consistent
whether rendered for a console or emitted as JSON.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_ingest_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for the ingestion subsystem.

    Every record emitted while decoding, classifying or applying producer
    messages carries ``subsystem="ingestion"`` so the stream can be filtered
    apart from HTTP access logs.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for ingestion
    """
    return get_logger(name).bind(subsystem="ingestion")


def log_rejection(
    logger: FilteringBoundLogger,
    reason: str,
    raw: str,
    peer: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a rejected producer message with standardized format.

    Args:
        logger: Structlog logger instance
        reason: Why the message was rejected
        raw: The offending message text (truncated in the record)
        peer: Remote address of the producer connection, if known
        context: Additional context data
    """
    bound_logger = logger.bind(
        reason=reason,
        raw=raw[:200],
        peer=peer,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Rejected producer message")
