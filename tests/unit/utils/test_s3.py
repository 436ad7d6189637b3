"""Tests for S3 wrapper utilities."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ResponseStreamingError

from src.exceptions.client_errors import NotFoundError, ValidationError
from src.exceptions.server_errors import StorageError
from src.utils.s3 import S3Wrapper

BUCKET = "test-bucket"


@pytest.fixture()
def s3_bucket(aws):
    """Create a mock S3 bucket."""
    s3 = boto3.client("s3", region_name="us-east-1")
    s3.create_bucket(Bucket=BUCKET)
    return s3


@pytest.fixture()
def wrapper(s3_bucket) -> S3Wrapper:
    return S3Wrapper()


class TestCreateFileInBucket:
    def test_writes_text_with_content_type(self, wrapper: S3Wrapper, s3_bucket) -> None:
        wrapper.create_file_in_bucket(BUCKET, "some text", "file.txt", "text/plain")
        head = s3_bucket.head_object(Bucket=BUCKET, Key="file.txt")
        assert head["ContentType"] == "text/plain"
        assert wrapper.get_file_by_name(BUCKET, "file.txt") == b"some text"

    def test_defaults_to_json_content_type(self, wrapper: S3Wrapper, s3_bucket) -> None:
        wrapper.create_file_in_bucket(BUCKET, b'{"a": 1}', "data.json")
        head = s3_bucket.head_object(Bucket=BUCKET, Key="data.json")
        assert head["ContentType"] == "application/json"

    def test_sets_content_encoding(self, wrapper: S3Wrapper, s3_bucket) -> None:
        wrapper.create_file_in_bucket(BUCKET, b"\x1f\x8b", "data.gz", "application/gzip", "gzip")
        head = s3_bucket.head_object(Bucket=BUCKET, Key="data.gz")
        assert head["ContentEncoding"] == "gzip"

    def test_none_contents_writes_empty_object(self, wrapper: S3Wrapper) -> None:
        wrapper.create_file_in_bucket(BUCKET, None, "empty.json")
        assert wrapper.get_file_by_name(BUCKET, "empty.json") == b""

    def test_missing_bucket_raises_storage_error(self, aws) -> None:
        with pytest.raises(StorageError) as exc_info:
            S3Wrapper().create_file_in_bucket("no-such-bucket", "x", "file.txt")
        assert exc_info.value.context["aws_error_code"] == "NoSuchBucket"
        assert exc_info.value.context["bucket"] == "no-such-bucket"


class TestGetFileByName:
    def test_missing_object_raises_not_found(self, wrapper: S3Wrapper) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            wrapper.get_file_by_name(BUCKET, "missing.txt")
        assert exc_info.value.context["resource_id"] == f"{BUCKET}/missing.txt"


class TestBodyStreamingFailure:
    @pytest.fixture()
    def broken_stream_wrapper(self) -> S3Wrapper:
        body = MagicMock()
        body.read.side_effect = ResponseStreamingError(error="connection reset")
        client = MagicMock()
        client.get_object.return_value = {"Body": body}
        wrapper = S3Wrapper()
        wrapper._s3 = client
        return wrapper

    def test_get_file_by_name_raises_storage_error(self, broken_stream_wrapper: S3Wrapper) -> None:
        with pytest.raises(StorageError) as exc_info:
            broken_stream_wrapper.get_file_by_name(BUCKET, "report.json")
        assert exc_info.value.context["key"] == "report.json"
        assert isinstance(exc_info.value.__cause__, ResponseStreamingError)

    def test_retrieve_file_data_raises_storage_error(self, broken_stream_wrapper: S3Wrapper) -> None:
        with pytest.raises(StorageError, match="Reading object body failed"):
            broken_stream_wrapper.retrieve_file_data([{"Key": "report.json"}], BUCKET)


class TestDeleteFileByName:
    def test_delete(self, wrapper: S3Wrapper) -> None:
        wrapper.create_file_in_bucket(BUCKET, "x", "gone.txt")
        wrapper.delete_file_by_name(BUCKET, "gone.txt")
        with pytest.raises(NotFoundError):
            wrapper.get_file_by_name(BUCKET, "gone.txt")


class TestRetrieveFileData:
    def test_reads_first_listed_file(self, wrapper: S3Wrapper) -> None:
        wrapper.create_file_in_bucket(BUCKET, "first", "a.txt")
        wrapper.create_file_in_bucket(BUCKET, "second", "b.txt")
        files = [{"Key": "b.txt"}, {"Key": "a.txt"}]
        assert wrapper.retrieve_file_data(files, BUCKET) == "second"

    def test_empty_listing_raises(self, wrapper: S3Wrapper) -> None:
        with pytest.raises(NotFoundError, match="No file found"):
            wrapper.retrieve_file_data([], BUCKET)

    def test_entry_without_key_raises(self, wrapper: S3Wrapper) -> None:
        with pytest.raises(NotFoundError, match="No file found"):
            wrapper.retrieve_file_data([{"Size": 3}], BUCKET)

    def test_empty_object_raises(self, wrapper: S3Wrapper) -> None:
        wrapper.create_file_in_bucket(BUCKET, b"", "blank.txt")
        with pytest.raises(NotFoundError, match="No data found in file blank.txt"):
            wrapper.retrieve_file_data([{"Key": "blank.txt"}], BUCKET)


class TestRetrieveSortedFileList:
    def test_filters_results_and_sorts_newest_first(self) -> None:
        wrapper = S3Wrapper()
        client = MagicMock()
        client.list_objects_v2.return_value = {
            "Contents": [
                {"Key": "old.json", "LastModified": datetime(2024, 1, 1, tzinfo=UTC)},
                {"Key": "result_1.json", "LastModified": datetime(2024, 6, 1, tzinfo=UTC)},
                {"Key": "new.json", "LastModified": datetime(2024, 3, 1, tzinfo=UTC)},
                {"Key": "undated.json"},
            ],
        }
        wrapper._s3 = client

        files = wrapper.retrieve_sorted_file_list(BUCKET)

        assert [f["Key"] for f in files] == ["new.json", "old.json", "undated.json"]
        client.list_objects_v2.assert_called_once_with(Bucket=BUCKET)

    def test_empty_bucket(self, wrapper: S3Wrapper) -> None:
        assert wrapper.retrieve_sorted_file_list(BUCKET) == []

    def test_excludes_result_files_from_real_listing(self, wrapper: S3Wrapper) -> None:
        wrapper.create_file_in_bucket(BUCKET, "x", "input.json")
        wrapper.create_file_in_bucket(BUCKET, "x", "out/result_input.json")
        assert [f["Key"] for f in wrapper.retrieve_sorted_file_list(BUCKET)] == ["input.json"]


class TestGetListOfFileKeys:
    def test_follows_continuation_tokens(self, wrapper: S3Wrapper, s3_bucket) -> None:
        for index in range(250):
            s3_bucket.put_object(Bucket=BUCKET, Key=f"logs/{index:04d}.txt", Body=b"x")
        keys = wrapper.get_list_of_file_keys(BUCKET)
        assert len(keys) == 250
        assert keys[0] == "logs/0000.txt"
        assert keys[-1] == "logs/0249.txt"

    def test_prefix_filter(self, wrapper: S3Wrapper, s3_bucket) -> None:
        s3_bucket.put_object(Bucket=BUCKET, Key="in/a.txt", Body=b"x")
        s3_bucket.put_object(Bucket=BUCKET, Key="out/b.txt", Body=b"x")
        assert wrapper.get_list_of_file_keys(BUCKET, prefix="in/") == ["in/a.txt"]

    def test_empty_bucket(self, wrapper: S3Wrapper) -> None:
        assert wrapper.get_list_of_file_keys(BUCKET) == []


class TestGetSignedUrlForFile:
    @pytest.mark.parametrize("operation", ["get", "put"])
    def test_builds_url(self, wrapper: S3Wrapper, operation: str) -> None:
        url = wrapper.get_signed_url_for_file(BUCKET, "report.csv", operation, expires_seconds=60)
        assert BUCKET in url
        assert "report.csv" in url

    def test_rejects_unknown_operation(self, wrapper: S3Wrapper) -> None:
        with pytest.raises(ValidationError) as exc_info:
            wrapper.get_signed_url_for_file(BUCKET, "report.csv", "delete")  # type: ignore[arg-type]
        assert exc_info.value.context["field"] == "operation"


class TestStripS3ObjectKeyOfSpecialChars:
    @pytest.mark.parametrize(
        ("raw_key", "expected"),
        [
            ("my+file.txt", "my file.txt"),
            ("folder%2Fnested%3Dvalue.json", "folder/nested=value.json"),
            ("caf%C3%A9+menu.pdf", "café menu.pdf"),
            ("plain.txt", "plain.txt"),
        ],
    )
    def test_decodes_event_keys(self, raw_key: str, expected: str) -> None:
        assert S3Wrapper.strip_s3_object_key_of_special_chars(raw_key) == expected
