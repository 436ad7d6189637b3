"""Tests for SQS wrapper utilities."""

from unittest.mock import MagicMock

import boto3
import pytest

from src.exceptions.server_errors import ConfigurationError, QueueError
from src.utils.sqs import MessageAndGroupId, SqsWrapper


@pytest.fixture()
def fifo_queue_url(aws) -> str:
    """Create a mock FIFO queue with content-based deduplication."""
    sqs = boto3.client("sqs", region_name="us-east-1")
    response = sqs.create_queue(
        QueueName="probe-queue.fifo",
        Attributes={"FifoQueue": "true", "ContentBasedDeduplication": "true"},
    )
    return response["QueueUrl"]


def _queue_depth(queue_url: str) -> int:
    sqs = boto3.client("sqs", region_name="us-east-1")
    attributes = sqs.get_queue_attributes(
        QueueUrl=queue_url,
        AttributeNames=["ApproximateNumberOfMessages"],
    )["Attributes"]
    return int(attributes["ApproximateNumberOfMessages"])


def _messages(count: int, group_id: str = "group1") -> list[MessageAndGroupId]:
    return [MessageAndGroupId(group_id=group_id, message=f"message {index}") for index in range(count)]


def _stub_wrapper(**responses) -> tuple[SqsWrapper, MagicMock]:
    wrapper = SqsWrapper()
    client = MagicMock()
    client.send_message_batch.return_value = responses.get("batch", {"Successful": [], "Failed": []})
    wrapper._sqs = client
    return wrapper, client


class TestWriteMessageToQueue:
    def test_sends_to_fifo_queue(self, fifo_queue_url: str) -> None:
        message_id = SqsWrapper().write_message_to_queue(fifo_queue_url, "hello", "group1")
        assert message_id
        assert _queue_depth(fifo_queue_url) == 1

    def test_omits_group_id_when_not_given(self) -> None:
        wrapper = SqsWrapper()
        client = MagicMock()
        client.send_message.return_value = {"MessageId": "m-1"}
        wrapper._sqs = client

        assert wrapper.write_message_to_queue("https://queue", "hello") == "m-1"
        client.send_message.assert_called_once_with(QueueUrl="https://queue", MessageBody="hello")

    def test_empty_queue_url_is_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            SqsWrapper().write_message_to_queue("", "hello", "group1")


class TestWriteMessageBatchToFifoQueue:
    def test_single_message_batch(self, fifo_queue_url: str) -> None:
        SqsWrapper().write_message_batch_to_fifo_queue(
            fifo_queue_url,
            [MessageAndGroupId(group_id="group1", message="hello")],
        )
        assert _queue_depth(fifo_queue_url) == 1

    def test_more_than_ten_messages_all_arrive(self, fifo_queue_url: str) -> None:
        SqsWrapper().write_message_batch_to_fifo_queue(fifo_queue_url, _messages(25))
        assert _queue_depth(fifo_queue_url) == 25

    def test_chunks_of_ten_with_restarting_ids(self) -> None:
        wrapper, client = _stub_wrapper()
        wrapper.write_message_batch_to_fifo_queue("https://queue.fifo", _messages(23))

        calls = client.send_message_batch.call_args_list
        assert [len(call.kwargs["Entries"]) for call in calls] == [10, 10, 3]
        assert [entry["Id"] for entry in calls[1].kwargs["Entries"]] == [f"msg-{i}" for i in range(10)]
        assert [entry["Id"] for entry in calls[2].kwargs["Entries"]] == ["msg-0", "msg-1", "msg-2"]
        assert calls[2].kwargs["Entries"][0] == {
            "Id": "msg-0",
            "MessageBody": "message 20",
            "MessageGroupId": "group1",
        }

    def test_empty_list_sends_nothing(self) -> None:
        wrapper, client = _stub_wrapper()
        wrapper.write_message_batch_to_fifo_queue("https://queue.fifo", [])
        client.send_message_batch.assert_not_called()

    def test_failed_entries_stop_later_batches(self) -> None:
        wrapper, client = _stub_wrapper(
            batch={
                "Successful": [],
                "Failed": [{"Id": "msg-1", "Code": "InternalError", "SenderFault": False}],
            },
        )
        with pytest.raises(QueueError) as exc_info:
            wrapper.write_message_batch_to_fifo_queue("https://queue.fifo", _messages(15))

        assert client.send_message_batch.call_count == 1
        assert exc_info.value.context["failed_ids"] == ["msg-1"]
        assert exc_info.value.context["aws_error_code"] == "InternalError"

    def test_missing_queue_raises_queue_error(self, aws) -> None:
        missing_url = "https://sqs.us-east-1.amazonaws.com/123456789012/missing.fifo"
        with pytest.raises(QueueError):
            SqsWrapper().write_message_batch_to_fifo_queue(missing_url, _messages(1))


class TestMessageAndGroupId:
    def test_requires_group_id(self) -> None:
        with pytest.raises(ValueError):
            MessageAndGroupId(group_id="", message="hello")
