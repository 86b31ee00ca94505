"""
Centralized logging configuration for the ticker signal engine.

This module provides standardized logging configuration using structlog
for all components. Signal decisions and trend transitions are logged through
the helpers below so their fields stay uniform across tickers.
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


def get_signal_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for BUY/SELL/NEUTRAL classification decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the signals subsystem
    """
    return get_logger(name).bind(
        subsystem="signals",
        audit_trail=True
    )


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for trend state machine transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger bound to the trend machine subsystem
    """
    return get_logger(name).bind(
        subsystem="trend_machine",
        audit_trail=True
    )


def log_signal_decision(
    logger: FilteringBoundLogger,
    symbol: str,
    signal: str,
    previous_signal: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a classifier decision with standardized format.

    Changed signals are logged at INFO, repeats at DEBUG.

    Args:
        logger: Structlog logger instance
        symbol: Ticker symbol
        signal: Newly computed signal
        previous_signal: Signal held before this sample
        context: Indicator readings behind the decision
    """
    bound_logger = logger.bind(
        symbol=symbol,
        signal=signal,
        previous_signal=previous_signal,
        event="signal_decision"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if signal != previous_signal:
        bound_logger.info("Signal changed")
    else:
        bound_logger.debug("Signal unchanged")


def log_trend_transition(
    logger: FilteringBoundLogger,
    symbol: str,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a trend state transition with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Ticker symbol
        from_state: Trend direction before the sample
        to_state: Trend direction after the sample
        trigger: What triggered the transition ("bos" or "coc")
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
        event="trend_transition"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Trend transition")
