"""Raw DynamoDB read using the low-level client and wire-format keys."""

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError as BotoClientError

from src.config import get_settings
from src.constants import PROBE_PARTITION_KEY, PROBE_SORT_KEY, RAW_RECORD_PK, RAW_RECORD_SK
from src.exceptions.aws import wrap_service_error
from src.exceptions.server_errors import DatabaseError


def create_dynamodb_client(region_name: str | None = None) -> Any:
    """Create a low-level DynamoDB client in the configured region."""
    return boto3.client(  # type: ignore[call-overload]
        "dynamodb",
        region_name=region_name or get_settings().aws_region,
    )


def get_record(client: Any = None, table_name: str | None = None) -> dict[str, Any]:
    """Issue a single GetItem for the fixed ``something``/``else`` key.

    The key is sent in DynamoDB's typed wire format, bypassing the resource
    layer's marshalling.

    Args:
        client: Low-level DynamoDB client. Created if omitted.
        table_name: Table to read, defaults to TABLE_NAME from the settings.

    Returns:
        The raw GetItem response. ``Item`` is absent when the key is missing.

    Raises:
        DatabaseError: If the call fails.
    """
    dynamodb = client or create_dynamodb_client()
    table = table_name or get_settings().table_name
    try:
        response: dict[str, Any] = dynamodb.get_item(
            TableName=table,
            Key={
                PROBE_PARTITION_KEY: {"S": RAW_RECORD_PK},
                PROBE_SORT_KEY: {"S": RAW_RECORD_SK},
            },
        )
    except (BotoClientError, BotoCoreError) as error:
        raise wrap_service_error(
            DatabaseError,
            "DynamoDB GetItem failed",
            error,
            service_name="dynamodb",
            context={"operation": "get_item", "table_name": table},
        ) from error
    return response
