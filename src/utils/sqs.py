"""SQS queue utilities."""

from collections.abc import Sequence
from itertools import batched
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError as BotoClientError
from pydantic import BaseModel, Field

from src.config import get_settings
from src.constants import SQS_BATCH_ENTRY_PREFIX, SQS_MAX_BATCH_SIZE
from src.exceptions.aws import wrap_service_error
from src.exceptions.server_errors import ConfigurationError, QueueError
from src.logging import get_logger

logger = get_logger(__name__)


class MessageAndGroupId(BaseModel):
    """Message body paired with the FIFO group it is ordered within."""

    group_id: str = Field(min_length=1, max_length=128)
    message: str


class SqsWrapper:
    """Wrapper around SQS send operations."""

    def __init__(self, *, region_name: str | None = None) -> None:
        """Initialize the SQS wrapper.

        Args:
            region_name: AWS region, defaults to the configured region.
        """
        self._region_name = region_name
        self._sqs: Any = None

    def get_sqs(self) -> Any:
        """Return the boto3 SQS client, creating it on first use."""
        if self._sqs is None:
            region_name = self._region_name or get_settings().aws_region
            self._sqs = boto3.client("sqs", region_name=region_name)  # type: ignore[call-overload]
        return self._sqs

    def _send(self, operation: str, queue_url: str, **kwargs: Any) -> dict[str, Any]:
        if not queue_url:
            raise ConfigurationError("Queue URL is not configured")
        try:
            response: dict[str, Any] = getattr(self.get_sqs(), operation)(QueueUrl=queue_url, **kwargs)
        except (BotoClientError, BotoCoreError) as error:
            logger.error("SQS call failed", extra={"operation": operation, "queue_url": queue_url})
            raise wrap_service_error(
                QueueError,
                f"SQS {operation} failed",
                error,
                service_name="sqs",
                context={"queue_url": queue_url},
            ) from error
        return response

    def write_message_to_queue(
        self,
        queue_url: str,
        message: str,
        group_id: str | None = None,
    ) -> str | None:
        """Send one message.

        Args:
            queue_url: Target queue URL.
            message: Message body.
            group_id: FIFO message group, required by FIFO queues.

        Returns:
            The SQS message ID.
        """
        params: dict[str, Any] = {"MessageBody": message}
        if group_id is not None:
            params["MessageGroupId"] = group_id
        response = self._send("send_message", queue_url, **params)
        message_id: str | None = response.get("MessageId")
        return message_id

    def write_message_batch_to_fifo_queue(
        self,
        queue_url: str,
        messages: Sequence[MessageAndGroupId],
    ) -> None:
        """Send messages to a FIFO queue in batches of at most ten.

        Batches are sent in order. Entry IDs (``msg-0`` to ``msg-9``) restart
        for every batch.

        Raises:
            QueueError: If a batch is rejected or reports failed entries.
                Later batches are not sent.
        """
        for batch_number, chunk in enumerate(batched(messages, SQS_MAX_BATCH_SIZE)):
            entries = [
                {
                    "Id": f"{SQS_BATCH_ENTRY_PREFIX}{entry_index}",
                    "MessageBody": item.message,
                    "MessageGroupId": item.group_id,
                }
                for entry_index, item in enumerate(chunk)
            ]
            response = self._send("send_message_batch", queue_url, Entries=entries)

            failed: list[dict[str, Any]] = response.get("Failed", [])
            if failed:
                logger.error(
                    "SQS batch had failed entries",
                    extra={"queue_url": queue_url, "batch": batch_number, "failed": failed},
                )
                raise QueueError(
                    f"{len(failed)} of {len(entries)} messages in batch {batch_number} were not sent",
                    service_name="sqs",
                    aws_error_code=failed[0].get("Code"),
                    context={"queue_url": queue_url, "failed_ids": [entry["Id"] for entry in failed]},
                )
