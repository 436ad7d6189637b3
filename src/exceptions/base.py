"""Root of the harness exception hierarchy.

Each subclass declares an ``error_code`` and ``http_status`` and is recorded
in a registry keyed by that code when the class is defined.
"""

from http import HTTPStatus
from typing import Any, ClassVar, Self


class HarnessError(Exception):
    """Raised for every failure the harness reports.

    The service wrappers raise subclasses only, so the probe handler can
    collect failures from every service with one except clause and serialize
    them into a single response body.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        http_status: HTTP status used when the error becomes a response.
        context: Resource names, SDK error codes and similar details.
    """

    error_code: ClassVar[str] = "INTERNAL_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR

    _registry: ClassVar[dict[str, type["HarnessError"]]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._registry[cls.error_code] = cls

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            context: Details that help locate the failing resource.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def add_context(self, **details: Any) -> Self:
        """Merge further details into the context and return the error."""
        self.context.update(details)
        return self

    @property
    def cause_type(self) -> str | None:
        """Class name of the exception this error was raised from, if any."""
        if self.__cause__ is None:
            return None
        return type(self.__cause__).__name__

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for a response body."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
        }

    def to_log_dict(self) -> dict[str, Any]:
        """Serialize the error for a structured log line."""
        entry = self.to_dict()
        entry["http_status"] = self.http_status
        entry["exception_type"] = type(self).__name__
        if self.cause_type is not None:
            entry["cause_type"] = self.cause_type
        return entry

    @classmethod
    def get_by_error_code(cls, error_code: str) -> type["HarnessError"] | None:
        """Find the error class registered under a code, or None."""
        return cls._registry.get(error_code)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} (context: {self.context})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, error_code={self.error_code!r}, context={self.context!r})"
