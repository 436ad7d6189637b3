"""SDK probe Lambda handler.

Exercises each managed-service wrapper once per request and reports either
success or every failure collected along the way.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import cache
from http import HTTPStatus
from typing import Any

from src.config import Settings, validate_startup_config
from src.constants import (
    PROBE_FILE_CONTENTS,
    PROBE_FILE_NAME,
    PROBE_MESSAGE_BODY,
    PROBE_MESSAGE_GROUP_ID,
    PROBE_SUCCESS_BODY,
)
from src.exceptions.base import HarnessError
from src.exceptions.handlers import create_exception_handler, create_text_response
from src.logging import get_logger, probe_context, setup_logging
from src.logging.adapters.lambda_adapter import set_lambda_context
from src.probe.raw import create_dynamodb_client, get_record
from src.probe.repository import ProbeDao
from src.types import ApiGatewayEvent, LambdaContext, LambdaResponse
from src.utils.s3 import S3Wrapper
from src.utils.sqs import MessageAndGroupId, SqsWrapper
from src.utils.ssm import SsmWrapper

logger = get_logger(__name__)


@dataclass
class ServiceClients:
    """Wrappers shared by every invocation of a warm container."""

    dynamodb: Any
    probe_dao: ProbeDao
    s3: S3Wrapper
    sqs: SqsWrapper
    ssm: SsmWrapper


@dataclass
class WarmupState:
    """Tracks whether this container has warmed the parameter cache."""

    warmed: bool = field(default=False)


_warmup = WarmupState()


@cache
def get_clients() -> ServiceClients:
    """Create the service wrappers once per container."""
    return ServiceClients(
        dynamodb=create_dynamodb_client(),
        probe_dao=ProbeDao(),
        s3=S3Wrapper(),
        sqs=SqsWrapper(),
        ssm=SsmWrapper(),
    )


def reset_handler_state() -> None:
    """Forget cached clients and warm-up state. Primarily for testing."""
    get_clients.cache_clear()
    _warmup.warmed = False


def warm_parameter_cache(settings: Settings, clients: ServiceClients) -> None:
    """Read the warm-up parameter once per container.

    A failure only means the first real read goes to the parameter store, so
    it is logged and ignored.
    """
    if _warmup.warmed:
        return
    _warmup.warmed = True
    try:
        clients.ssm.get_param_value(settings.warmup_parameter_name)
    except HarnessError as error:
        logger.warning(
            "Parameter cache warm-up failed",
            extra={"parameter": settings.warmup_parameter_name, "error": error.to_dict()},
        )


def _probes(settings: Settings, clients: ServiceClients) -> list[tuple[str, Callable[[], object]]]:
    """Build the ordered list of service probes."""
    return [
        ("dynamodb_raw", lambda: get_record(clients.dynamodb, settings.table_name)),
        ("dynamodb_dao", clients.probe_dao.get_tree),
        (
            "s3",
            lambda: clients.s3.create_file_in_bucket(
                settings.bucket_name,
                PROBE_FILE_CONTENTS,
                PROBE_FILE_NAME,
                "text/plain",
            ),
        ),
        (
            "sqs",
            lambda: clients.sqs.write_message_batch_to_fifo_queue(
                settings.queue_url,
                [MessageAndGroupId(group_id=PROBE_MESSAGE_GROUP_ID, message=PROBE_MESSAGE_BODY)],
            ),
        ),
    ]


def run_probes(settings: Settings, clients: ServiceClients) -> list[HarnessError]:
    """Run every probe, collecting failures instead of stopping at the first.

    Returns:
        The errors raised, in probe order.
    """
    errors: list[HarnessError] = []
    for name, probe in _probes(settings, clients):
        with probe_context(name):
            try:
                probe()
            except HarnessError as error:
                logger.error("Probe failed", extra={"error": error.to_dict()})
                errors.append(error)
            else:
                logger.info("Probe succeeded")
    return errors


@create_exception_handler
def handler(event: ApiGatewayEvent, context: LambdaContext) -> LambdaResponse:
    """Probe DynamoDB, S3 and SQS and report the outcome.

    Args:
        event: API Gateway proxy event.
        context: Lambda context.

    Returns:
        200 with a greeting when every probe succeeded, otherwise 400 with
        the JSON list of errors as a plain text body. Invalid configuration
        becomes a 500 problem response.
    """
    settings = validate_startup_config()
    setup_logging()
    set_lambda_context(event, context)

    clients = get_clients()
    warm_parameter_cache(settings, clients)

    errors = run_probes(settings, clients)
    if errors:
        body = json.dumps([error.to_dict() for error in errors], indent=2, default=str)
        return create_text_response(HTTPStatus.BAD_REQUEST, body)

    return create_text_response(HTTPStatus.OK, PROBE_SUCCESS_BODY)
