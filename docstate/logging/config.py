"""
Centralized logging configuration for docstate.

This module provides standardized logging configuration using structlog
for all components. State machine firings, hook dispatch and lifecycle
binding all log through the loggers defined here so that every transition
leaves a consistent, structured audit record.
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


def configure_logging_from(params: Any) -> None:
    """
    Configure logging from loaded logging parameters.

    Args:
        params: LoggingParams (level, format_json, include_timestamp)
    """
    configure_logging(
        level=params.level,
        format_json=params.format_json,
        include_timestamp=params.include_timestamp,
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


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for state machine firings.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for state transitions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="state_machine",
        audit_trail=True
    )


def get_hook_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for transition hook dispatch.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for hook dispatch
    """
    logger = get_logger(name)

    return logger.bind(subsystem="hooks")


def log_state_transition(
    logger: FilteringBoundLogger,
    document_id: Optional[str],
    attribute: str,
    event: str,
    from_state: Optional[str],
    to_state: Optional[str],
    outcome: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a state machine firing with standardized format.

    Applied firings are logged at info level; rejected and failed firings
    are logged as warnings.

    Args:
        logger: Structlog logger instance
        document_id: ID of the document being transitioned (None if unsaved)
        attribute: State attribute governed by the machine
        event: Event that was fired
        from_state: State name before the firing
        to_state: Target state name, if one was resolved
        outcome: Firing outcome (applied, rejected, failed)
        context: Additional context data
    """
    # Use the logger's bind method to avoid conflicts
    bound_logger = logger.bind(
        document_id=document_id,
        attribute=attribute,
        transition_event=event,
        from_state=from_state,
        to_state=to_state,
        outcome=outcome,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if outcome == "applied":
        bound_logger.info("State transition")
    else:
        bound_logger.warning("State transition not applied")
