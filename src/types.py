"""Shapes of the Lambda runtime objects the harness handles."""

from typing import Any, NotRequired, Protocol, TypedDict


class LambdaContext(Protocol):
    """The attributes of the Lambda context object the harness reads."""

    function_name: str
    function_version: str
    aws_request_id: str

    def get_remaining_time_in_millis(self) -> int: ...


class ApiGatewayRequestContext(TypedDict, total=False):
    requestId: str
    stage: str


class ApiGatewayEvent(TypedDict, total=False):
    """Subset of an API Gateway proxy event (REST or HTTP API)."""

    routeKey: str
    resource: str
    rawPath: str
    path: str
    headers: dict[str, str]
    requestContext: ApiGatewayRequestContext
    body: str | None


class LambdaResponse(TypedDict):
    """API Gateway proxy response structure."""

    statusCode: int
    headers: NotRequired[dict[str, str]]
    body: str


# Direct invocations may pass any JSON value
LambdaEvent = dict[str, Any]
