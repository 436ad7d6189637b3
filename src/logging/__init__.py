"""Structured logging for the SDK smoke harness.

Lines are JSON in Lambda and carry the invocation's correlation ID plus any
fields set with :func:`set_extra_context` or :func:`probe_context`.

Usage:
    from src.logging import get_logger, probe_context, setup_logging

    setup_logging()
    logger = get_logger(__name__)
    with probe_context("s3"):
        logger.info("Probe succeeded")
"""

from src.logging.config import LogFormat, LoggingConfig, LogLevel
from src.logging.context import (
    clear_context,
    correlation_id,
    generate_correlation_id,
    get_correlation_id,
    get_extra_context,
    probe_context,
    set_correlation_id,
    set_extra_context,
)
from src.logging.formatters import HumanFormatter, JSONFormatter
from src.logging.logger import get_logger, reset_logging, setup_logging

__all__ = [
    "HumanFormatter",
    "JSONFormatter",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "clear_context",
    "correlation_id",
    "generate_correlation_id",
    "get_correlation_id",
    "get_extra_context",
    "get_logger",
    "probe_context",
    "reset_logging",
    "set_correlation_id",
    "set_extra_context",
    "setup_logging",
]
