"""
Centralized logging configuration for the date range marking layer.

All components log through structlog on top of the standard library
logging module, so host applications can route plugin output with their
usual handlers while still getting structured key/value events.
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
    Configure structlog for the plugin and its host application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON lines; otherwise console output
        include_timestamp: Include an ISO timestamp in each event
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"
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
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def get_dispatch_logger(name: str) -> FilteringBoundLogger:
    """Logger bound for refresh, lifecycle and click dispatch events."""
    return get_logger(name).bind(subsystem="dispatch")


def get_compiler_logger(name: str) -> FilteringBoundLogger:
    """Logger bound for mark compilation events."""
    return get_logger(name).bind(subsystem="compiler")


def log_lifecycle_transition(
    logger: FilteringBoundLogger,
    plugin_id: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a plugin lifecycle transition with standardized format.

    Args:
        logger: Structlog logger instance
        plugin_id: Identifier of the plugin instance
        from_state: Current state
        to_state: Target state
        trigger: Operation that caused the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        plugin_id=plugin_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Lifecycle transition")


def log_refresh(
    logger: FilteringBoundLogger,
    plugin_id: str,
    removed: int,
    installed: int,
    duration_ms: float,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of a refresh cycle.

    Args:
        logger: Structlog logger instance
        plugin_id: Identifier of the plugin instance
        removed: Number of previously installed marks removed from the host
        installed: Number of marks installed by this refresh
        duration_ms: Wall-clock time spent compiling and installing
        context: Additional context data
    """
    bound_logger = logger.bind(
        plugin_id=plugin_id,
        removed=removed,
        installed=installed,
        duration_ms=round(duration_ms, 3),
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.debug("Refresh completed")
