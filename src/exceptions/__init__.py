"""SDK smoke harness exception hierarchy.

Architecture:
    HarnessError (base)
    ├── ClientError (4xx)
    │   ├── ValidationError (400)
    │   ├── BadRequestError (400)
    │   ├── NotFoundError (404)
    │   └── ConflictError (409)
    │       └── MultipleItemsFoundError (409)
    └── ServerError (5xx)
        ├── ConfigurationError (500)
        └── AwsServiceError (502)
            ├── DatabaseError (500)
            ├── StorageError (502)
            ├── QueueError (502)
            └── ParameterStoreError (502)

Usage:
    from src.exceptions import NotFoundError

    def get_report(bucket: str, key: str) -> bytes:
        try:
            return s3.get_object(Bucket=bucket, Key=key)["Body"].read()
        except s3.exceptions.NoSuchKey as error:
            raise NotFoundError(
                f"S3 object not found: {key}",
                resource_type="s3_object",
                resource_id=key,
            ) from error
"""

from src.exceptions.aws import is_error_code, service_error_details, wrap_service_error
from src.exceptions.base import HarnessError
from src.exceptions.client_errors import (
    BadRequestError,
    ClientError,
    ConflictError,
    MultipleItemsFoundError,
    NotFoundError,
    ValidationError,
)
from src.exceptions.handlers import (
    create_error_response,
    create_exception_handler,
    create_success_response,
    create_text_response,
    get_http_status_for_error_code,
)
from src.exceptions.server_errors import (
    AwsServiceError,
    ConfigurationError,
    DatabaseError,
    ParameterStoreError,
    QueueError,
    ServerError,
    StorageError,
)

__all__ = [
    "AwsServiceError",
    "BadRequestError",
    "ClientError",
    "ConfigurationError",
    "ConflictError",
    "DatabaseError",
    "HarnessError",
    "MultipleItemsFoundError",
    "NotFoundError",
    "ParameterStoreError",
    "QueueError",
    "ServerError",
    "StorageError",
    "ValidationError",
    "create_error_response",
    "create_exception_handler",
    "create_success_response",
    "create_text_response",
    "get_http_status_for_error_code",
    "is_error_code",
    "service_error_details",
    "wrap_service_error",
]
