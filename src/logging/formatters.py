"""Log formatters for CloudWatch (JSON) and local terminal output."""

import json
import logging
import traceback
from datetime import UTC, datetime
from typing import Any, ClassVar, Protocol, runtime_checkable

from src.logging.context import get_correlation_id, get_extra_context

_STANDARD_LOG_ATTRS: frozenset[str] = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    }
)

_MAX_LOGGER_NAME_LENGTH = 30


@runtime_checkable
class _StructuredError(Protocol):
    """Exceptions that describe themselves for structured logging."""

    def to_log_dict(self) -> dict[str, Any]: ...


def _record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Collect the fields passed through ``extra=`` on a logging call."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_LOG_ATTRS and not key.startswith("_")
    }


def _exception_entry(exc_info: Any) -> dict[str, Any]:
    """Describe a logged exception, using the harness error fields when present."""
    exc_type, exc_value, _ = exc_info
    if isinstance(exc_value, _StructuredError):
        entry = exc_value.to_log_dict()
    else:
        entry = {
            "exception_type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "",
        }
    entry["traceback"] = traceback.format_exception(*exc_info)
    return entry


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Compatible with CloudWatch Logs Insights queries on any top-level field.
    """

    def __init__(
        self,
        *,
        service_name: str = "sdk-smoke-harness",
        include_timestamp: bool = True,
        include_location: bool = True,
    ) -> None:
        """Initialize the JSON formatter.

        Args:
            service_name: Service identifier for log aggregation.
            include_timestamp: Whether to include timestamp field.
            include_location: Whether to include module/function/line fields.
        """
        super().__init__()
        self._service_name = service_name
        self._include_timestamp = include_timestamp
        self._include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as a JSON string."""
        log_entry: dict[str, Any] = {}

        if self._include_timestamp:
            log_entry["timestamp"] = datetime.now(UTC).isoformat(timespec="milliseconds")

        log_entry["level"] = record.levelname
        log_entry["logger"] = record.name
        log_entry["message"] = record.getMessage()
        log_entry["service"] = self._service_name

        corr_id = get_correlation_id()
        if corr_id:
            log_entry["correlation_id"] = corr_id

        if self._include_location:
            log_entry["module"] = record.module
            log_entry["function"] = record.funcName
            log_entry["line"] = record.lineno

        log_entry.update(get_extra_context())
        log_entry.update(_record_extras(record))

        if record.exc_info:
            log_entry["exception"] = _exception_entry(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanFormatter(logging.Formatter):
    """Format log records as aligned, optionally coloured text."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self, *, use_colors: bool = True) -> None:
        """Initialize the human formatter.

        Args:
            use_colors: Whether to use ANSI colors in output.
        """
        super().__init__()
        self._use_colors = use_colors

    def _level(self, level: str) -> str:
        if not self._use_colors:
            return f"{level:<8}"
        return f"{self.COLORS.get(level, '')}{level:<8}{self.RESET}"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for human readability."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        logger_name = record.name
        if len(logger_name) > _MAX_LOGGER_NAME_LENGTH:
            logger_name = "..." + logger_name[-(_MAX_LOGGER_NAME_LENGTH - 3):]

        fields: dict[str, Any] = {}
        corr_id = get_correlation_id()
        if corr_id:
            fields["correlation_id"] = corr_id
        fields.update(get_extra_context())
        fields.update(_record_extras(record))

        parts = [
            timestamp,
            "|",
            self._level(record.levelname),
            "|",
            f"{logger_name:<30}",
            "|",
            record.getMessage(),
        ]
        if fields:
            parts.extend(["|", " ".join(f"{key}={value}" for key, value in fields.items())])

        result = " ".join(parts)

        if record.exc_info:
            result += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return result
