"""S3 storage utilities."""

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import IO, Any, Literal
from urllib.parse import unquote_plus

import boto3
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError as BotoClientError

from src.config import get_settings
from src.constants import (
    S3_DEFAULT_CONTENT_TYPE,
    S3_EXCLUDED_KEY_MARKER,
    S3_LIST_PAGE_SIZE,
    S3_SIGNED_URL_EXPIRY_SECONDS,
)
from src.exceptions.aws import is_error_code, wrap_service_error
from src.exceptions.client_errors import NotFoundError, ValidationError
from src.exceptions.server_errors import StorageError
from src.logging import get_logger

logger = get_logger(__name__)

S3Object = Mapping[str, Any]
FileContents = str | bytes | bytearray | IO[bytes]
SignedUrlOperation = Literal["get", "put"]

_MISSING_OBJECT_CODES = ("NoSuchKey", "404", "NotFound")
_OLDEST = datetime.min.replace(tzinfo=UTC)


def _is_result_file(s3_object: S3Object) -> bool:
    key: str | None = s3_object.get("Key")
    return not key or S3_EXCLUDED_KEY_MARKER in key


def _last_modified(s3_object: S3Object) -> datetime:
    last_modified: datetime | None = s3_object.get("LastModified")
    return last_modified or _OLDEST


class S3Wrapper:
    """Wrapper around S3 object operations.

    Bucket names are passed per call so one wrapper serves every bucket the
    function can reach.
    """

    def __init__(self, *, region_name: str | None = None) -> None:
        """Initialize the S3 wrapper.

        Args:
            region_name: AWS region, defaults to the configured region.
        """
        self._region_name = region_name
        self._s3: Any = None

    def get_s3(self) -> Any:
        """Return the boto3 S3 client, creating it on first use."""
        if self._s3 is None:
            region_name = self._region_name or get_settings().aws_region
            self._s3 = boto3.client("s3", region_name=region_name)  # type: ignore[call-overload]
        return self._s3

    def _storage_error(
        self,
        message: str,
        error: BotoClientError | BotoCoreError,
        *,
        bucket: str,
        key: str | None = None,
    ) -> StorageError:
        context: dict[str, Any] = {"bucket": bucket}
        if key is not None:
            context["key"] = key
        logger.error(message, extra=context)
        return wrap_service_error(StorageError, message, error, service_name="s3", context=context)

    def _get_object(self, bucket: str, key: str) -> dict[str, Any]:
        try:
            response: dict[str, Any] = self.get_s3().get_object(Bucket=bucket, Key=key)
        except BotoClientError as error:
            if is_error_code(error, *_MISSING_OBJECT_CODES):
                raise NotFoundError(
                    f"S3 object not found: {key}",
                    resource_type="s3_object",
                    resource_id=f"{bucket}/{key}",
                ) from error
            raise self._storage_error("GetObject failed", error, bucket=bucket, key=key) from error
        except BotoCoreError as error:
            raise self._storage_error("GetObject failed", error, bucket=bucket, key=key) from error
        return response

    def _read_object(self, bucket: str, key: str) -> bytes:
        """Get an object and read its whole body, treating a missing body as empty."""
        body = self._get_object(bucket, key).get("Body")
        if body is None:
            return b""
        try:
            data: bytes = body.read()
        except (BotoClientError, BotoCoreError) as error:
            raise self._storage_error("Reading object body failed", error, bucket=bucket, key=key) from error
        return data

    def retrieve_file_data(self, files: Sequence[S3Object], bucket: str) -> str:
        """Read the first object of a listing as text.

        Args:
            files: Listing entries, normally from :meth:`retrieve_sorted_file_list`.
            bucket: Bucket holding the objects.

        Returns:
            The object body decoded as UTF-8.

        Raises:
            NotFoundError: If the listing is empty or the object has no data.
        """
        file_key: str | None = files[0].get("Key") if files else None
        if not file_key:
            raise NotFoundError("No file found", resource_type="s3_object")

        data = self._read_object(bucket, file_key)
        if not data:
            raise NotFoundError(
                f"No data found in file {file_key}",
                resource_type="s3_object",
                resource_id=f"{bucket}/{file_key}",
            )
        return data.decode("utf-8")

    def retrieve_sorted_file_list(self, bucket: str) -> list[dict[str, Any]]:
        """List a bucket without result files, most recently modified first.

        Only the first listing page is read.
        """
        try:
            response = self.get_s3().list_objects_v2(Bucket=bucket)
        except (BotoClientError, BotoCoreError) as error:
            raise self._storage_error("ListObjectsV2 failed", error, bucket=bucket) from error

        contents: list[dict[str, Any]] = response.get("Contents", [])
        files = [s3_object for s3_object in contents if not _is_result_file(s3_object)]
        files.sort(key=_last_modified, reverse=True)
        return files

    def create_file_in_bucket(
        self,
        bucket: str,
        contents: FileContents | None,
        filename: str,
        content_type: str = S3_DEFAULT_CONTENT_TYPE,
        encoding: str | None = None,
    ) -> dict[str, Any]:
        """Write an object.

        Args:
            bucket: Target bucket.
            contents: Object body; None writes an empty object.
            filename: Object key.
            content_type: MIME type stored with the object.
            encoding: Optional Content-Encoding, e.g. ``gzip``.

        Returns:
            The PutObject response.
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": filename,
            "Body": b"" if contents is None else contents,
            "ContentType": content_type,
        }
        if encoding:
            params["ContentEncoding"] = encoding
        try:
            response: dict[str, Any] = self.get_s3().put_object(**params)
        except (BotoClientError, BotoCoreError) as error:
            raise self._storage_error("PutObject failed", error, bucket=bucket, key=filename) from error
        return response

    def get_file_by_name(self, bucket: str, name: str) -> bytes:
        """Read a whole object into memory.

        Raises:
            NotFoundError: If the object does not exist.
        """
        return self._read_object(bucket, name)

    def delete_file_by_name(self, bucket: str, name: str) -> dict[str, Any]:
        """Delete an object. Deleting a missing key is not an error in S3."""
        try:
            response: dict[str, Any] = self.get_s3().delete_object(Bucket=bucket, Key=name)
        except (BotoClientError, BotoCoreError) as error:
            raise self._storage_error("DeleteObject failed", error, bucket=bucket, key=name) from error
        return response

    def get_signed_url_for_file(
        self,
        bucket: str,
        filename: str,
        operation: SignedUrlOperation,
        expires_seconds: int = S3_SIGNED_URL_EXPIRY_SECONDS,
    ) -> str:
        """Create a presigned URL to download or upload an object.

        Args:
            bucket: Bucket holding the object.
            filename: Object key.
            operation: ``"get"`` to download, ``"put"`` to upload.
            expires_seconds: Lifetime of the URL.

        Returns:
            The presigned URL.

        Raises:
            ValidationError: If the operation is not ``get`` or ``put``.
        """
        client_methods = {"get": "get_object", "put": "put_object"}
        client_method = client_methods.get(operation)
        if client_method is None:
            raise ValidationError(
                f"Unsupported signed URL operation: {operation}",
                field="operation",
                value=operation,
            )
        try:
            url: str = self.get_s3().generate_presigned_url(
                client_method,
                Params={"Bucket": bucket, "Key": filename},
                ExpiresIn=expires_seconds,
            )
        except (BotoClientError, BotoCoreError) as error:
            raise self._storage_error("Presigning failed", error, bucket=bucket, key=filename) from error
        return url

    def get_list_of_file_keys(self, bucket: str, prefix: str | None = None) -> list[str]:
        """List every key in a bucket, following continuation tokens.

        Args:
            bucket: Bucket to list.
            prefix: Optional key prefix to filter on.

        Returns:
            All keys in listing order.
        """
        params: dict[str, Any] = {
            "Bucket": bucket,
            "PaginationConfig": {"PageSize": S3_LIST_PAGE_SIZE},
        }
        if prefix:
            params["Prefix"] = prefix

        keys: list[str] = []
        paginator = self.get_s3().get_paginator("list_objects_v2")
        try:
            for page in paginator.paginate(**params):
                keys.extend(s3_object["Key"] for s3_object in page.get("Contents", []) if s3_object.get("Key"))
        except (BotoClientError, BotoCoreError) as error:
            raise self._storage_error("ListObjectsV2 failed", error, bucket=bucket) from error
        return keys

    @staticmethod
    def strip_s3_object_key_of_special_chars(s3_object_key: str) -> str:
        """Decode an object key as delivered in S3 event notifications.

        Notifications URL-encode keys and encode spaces as ``+``.
        """
        return unquote_plus(s3_object_key)
