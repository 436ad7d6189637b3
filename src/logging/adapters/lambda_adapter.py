"""Populate the logging context from a Lambda invocation."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.logging.context import generate_correlation_id, set_correlation_id, set_extra_context
from src.types import LambdaContext


@dataclass
class ContainerState:
    """Whether this execution environment has served an invocation yet."""

    invoked: bool = field(default=False)


_container = ContainerState()


def reset_cold_start() -> None:
    """Treat the next invocation as a cold start. Primarily for testing."""
    _container.invoked = False


def set_lambda_context(
    event: Mapping[str, object],
    context: LambdaContext,
) -> None:
    """Tag every log line of this invocation with request and function details.

    The Lambda request ID becomes the correlation ID; local runs without one
    get a generated ID. API Gateway events also contribute their own
    request ID and the matched route.

    Args:
        event: Lambda event dictionary.
        context: Lambda context object.
    """
    if context.aws_request_id:
        set_correlation_id(context.aws_request_id)
    else:
        generate_correlation_id()
    set_extra_context(
        function_name=context.function_name,
        function_version=context.function_version,
        cold_start=not _container.invoked,
    )
    _container.invoked = True

    request_context = event.get("requestContext")
    if isinstance(request_context, dict) and "requestId" in request_context:
        set_extra_context(api_request_id=str(request_context["requestId"]))

    route = event.get("routeKey") or event.get("resource")
    if isinstance(route, str) and route:
        set_extra_context(route=route)
