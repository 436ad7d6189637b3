"""Server error exceptions (HTTP 5xx)."""

from http import HTTPStatus
from typing import Any, ClassVar

from src.exceptions.base import HarnessError


class ServerError(HarnessError):
    """Base class for all server errors (5xx)."""

    error_code: ClassVar[str] = "SERVER_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR


class AwsServiceError(ServerError):
    """A managed AWS service call failed."""

    error_code: ClassVar[str] = "AWS_SERVICE_ERROR"
    http_status: ClassVar[int] = HTTPStatus.BAD_GATEWAY

    def __init__(
        self,
        message: str,
        *,
        service_name: str | None = None,
        aws_error_code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Initialize AWS service error.

        Args:
            message: Description of the failure.
            service_name: Name of the AWS service that failed.
            aws_error_code: Error code returned by the service, if any.
            context: Additional context information.
        """
        context_dict = context or {}
        if service_name is not None:
            context_dict["service_name"] = service_name
        if aws_error_code is not None:
            context_dict["aws_error_code"] = aws_error_code
        super().__init__(message, context=context_dict)


class DatabaseError(AwsServiceError):
    """DynamoDB operation failed."""

    error_code: ClassVar[str] = "DATABASE_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR


class StorageError(AwsServiceError):
    """S3 operation failed."""

    error_code: ClassVar[str] = "STORAGE_ERROR"
    http_status: ClassVar[int] = HTTPStatus.BAD_GATEWAY


class QueueError(AwsServiceError):
    """SQS operation failed."""

    error_code: ClassVar[str] = "QUEUE_ERROR"
    http_status: ClassVar[int] = HTTPStatus.BAD_GATEWAY


class ParameterStoreError(AwsServiceError):
    """SSM Parameter Store operation failed."""

    error_code: ClassVar[str] = "PARAMETER_STORE_ERROR"
    http_status: ClassVar[int] = HTTPStatus.BAD_GATEWAY


class ConfigurationError(ServerError):
    """Configuration is invalid or missing."""

    error_code: ClassVar[str] = "CONFIGURATION_ERROR"
    http_status: ClassVar[int] = HTTPStatus.INTERNAL_SERVER_ERROR
