"""API Gateway responses built from harness errors.

Error bodies follow RFC 7807 problem details.
"""

import json
from collections.abc import Callable, Mapping
from functools import wraps
from http import HTTPStatus
from typing import Any

from src.exceptions.base import HarnessError
from src.logging import get_correlation_id, get_logger
from src.types import LambdaResponse

logger = get_logger(__name__)

ERROR_TYPE_BASE_URL = "https://sdk-smoke-harness.dev/errors/"


def _response(status_code: int, content_type: str, body: str) -> LambdaResponse:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": content_type},
        "body": body,
    }


def create_error_response(
    exception: HarnessError,
    *,
    include_context: bool = True,
    request_id: str | None = None,
) -> LambdaResponse:
    """Turn a harness error into a problem details response.

    Args:
        exception: The error to report.
        include_context: Whether the error context goes into the body.
        request_id: Request ID to expose as the problem ``instance``.

    Returns:
        Response with the error's HTTP status.
    """
    problem: dict[str, Any] = {
        "type": f"{ERROR_TYPE_BASE_URL}{exception.error_code}",
        "title": exception.error_code.replace("_", " ").title(),
        "status": exception.http_status,
        "detail": exception.message,
    }
    if request_id:
        problem["instance"] = f"/requests/{request_id}"
    if include_context and exception.context:
        problem["context"] = exception.context

    return _response(exception.http_status, "application/problem+json", json.dumps(problem, default=str))


def create_success_response(status_code: int, body: Mapping[str, Any]) -> LambdaResponse:
    """Create a JSON response."""
    return _response(status_code, "application/json", json.dumps(body))


def create_text_response(status_code: int, body: str) -> LambdaResponse:
    """Create a plain text response."""
    return _response(status_code, "text/plain", body)


def create_exception_handler[**P, T](
    func: Callable[P, T],
) -> Callable[P, T | LambdaResponse]:
    """Decorate a Lambda handler so an escaping HarnessError becomes a response.

    The request ID is taken from the API Gateway event, falling back to the
    correlation ID of the current invocation.
    """

    @wraps(func)
    def handle_call(*args: P.args, **kwargs: P.kwargs) -> T | LambdaResponse:
        try:
            return func(*args, **kwargs)
        except HarnessError as error:
            logger.exception("Handler failed", extra={"error_code": error.error_code})
            request_id = _extract_request_id(args) or get_correlation_id() or None
            return create_error_response(error, request_id=request_id)

    return handle_call


def _extract_request_id(args: tuple[object, ...]) -> str | None:
    """Read ``requestContext.requestId`` from the event, if the call has one."""
    event = args[0] if args else None
    if not isinstance(event, dict):
        return None
    request_context = event.get("requestContext")
    if not isinstance(request_context, dict):
        return None
    request_id = request_context.get("requestId")
    return request_id if isinstance(request_id, str) else None


def get_http_status_for_error_code(error_code: str) -> int:
    """Look up the HTTP status of a registered error code, 500 if unknown."""
    error_class = HarnessError.get_by_error_code(error_code)
    if error_class is None:
        return HTTPStatus.INTERNAL_SERVER_ERROR
    return error_class.http_status
