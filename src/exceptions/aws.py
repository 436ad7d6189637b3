"""Helpers for translating botocore failures into harness errors."""

from typing import Any

from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError as BotoClientError

from src.exceptions.server_errors import AwsServiceError

AwsFailure = BotoClientError | BotoCoreError


def service_error_details(error: AwsFailure) -> dict[str, Any]:
    """Extract the error code, message and request ID from a botocore error.

    Args:
        error: The botocore exception.

    Returns:
        Dictionary with ``code``, ``message`` and ``request_id`` keys.
        Values are None when the error carries no service response.
    """
    if not isinstance(error, BotoClientError):
        return {"code": None, "message": str(error), "request_id": None}

    response: dict[str, Any] = error.response
    error_body: dict[str, Any] = response.get("Error", {})
    metadata: dict[str, Any] = response.get("ResponseMetadata", {})
    return {
        "code": error_body.get("Code"),
        "message": error_body.get("Message", str(error)),
        "request_id": metadata.get("RequestId"),
    }


def wrap_service_error[E: AwsServiceError](
    error_class: type[E],
    message: str,
    error: AwsFailure,
    *,
    service_name: str,
    context: dict[str, Any] | None = None,
) -> E:
    """Build a harness error describing a failed AWS call.

    Args:
        error_class: AwsServiceError subclass to instantiate.
        message: Description of the operation that failed.
        error: The underlying botocore exception.
        service_name: AWS service that was called.
        context: Additional context, such as the resource involved.

    Returns:
        The harness error, ready to be raised ``from error``.
    """
    details = service_error_details(error)
    wrapped = error_class(
        f"{message}: {details['message']}",
        service_name=service_name,
        aws_error_code=details["code"],
        context=dict(context or {}),
    )
    if details["request_id"]:
        wrapped.add_context(aws_request_id=details["request_id"])
    return wrapped


def is_error_code(error: AwsFailure, *codes: str) -> bool:
    """Check whether a botocore error carries one of the given error codes."""
    return service_error_details(error)["code"] in codes
