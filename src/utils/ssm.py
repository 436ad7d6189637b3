"""SSM Parameter Store utilities with an in-memory cache.

Parameter values are cached for the lifetime of the Lambda container in an
LRU cache bounded by total value size, so warm invocations skip the
GetParameter round trip.
"""

import json
from typing import Any, overload

import boto3
import pydantic
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError as BotoClientError
from cachetools import LRUCache

from src.config import get_settings
from src.exceptions.aws import is_error_code, wrap_service_error
from src.exceptions.client_errors import NotFoundError, ValidationError
from src.exceptions.server_errors import ParameterStoreError
from src.logging import get_logger

logger = get_logger(__name__)


def _value_size(value: str) -> int:
    return len(value.encode("utf-8"))


class SsmWrapper:
    """Read-through cache in front of SSM GetParameter."""

    def __init__(
        self,
        *,
        cache_size_bytes: int | None = None,
        region_name: str | None = None,
    ) -> None:
        """Initialize the SSM wrapper.

        Args:
            cache_size_bytes: Upper bound on the total size of cached values.
                Defaults to CACHE_SIZE_MB from the settings.
            region_name: AWS region, defaults to the configured region.
        """
        max_bytes = cache_size_bytes or get_settings().cache_size_bytes
        self._cache: LRUCache[str, str] = LRUCache(maxsize=max_bytes, getsizeof=_value_size)
        self._region_name = region_name
        self._ssm: Any = None

    def init(self) -> Any:
        """Return the boto3 SSM client, creating it on first use."""
        if self._ssm is None:
            region_name = self._region_name or get_settings().aws_region
            self._ssm = boto3.client("ssm", region_name=region_name)  # type: ignore[call-overload]
        return self._ssm

    @property
    def cache(self) -> LRUCache:
        """Cached parameter values keyed by name."""
        return self._cache

    def clear_cache(self) -> None:
        """Drop every cached parameter value."""
        self._cache.clear()

    def _get_param(self, param_name: str, decrypt: bool) -> str | None:
        cached = self._cache.get(param_name)
        if cached:
            return cached

        try:
            response = self.init().get_parameter(Name=param_name, WithDecryption=decrypt)
        except BotoClientError as error:
            if is_error_code(error, "ParameterNotFound"):
                raise NotFoundError(
                    f"Parameter not found: {param_name}",
                    resource_type="parameter",
                    resource_id=param_name,
                ) from error
            logger.error("Failed to get parameter from parameter store", extra={"parameter": param_name})
            raise wrap_service_error(
                ParameterStoreError,
                f"Failed to get parameter '{param_name}'",
                error,
                service_name="ssm",
                context={"parameter": param_name},
            ) from error
        except BotoCoreError as error:
            logger.error("Failed to get parameter from parameter store", extra={"parameter": param_name})
            raise wrap_service_error(
                ParameterStoreError,
                f"Failed to get parameter '{param_name}'",
                error,
                service_name="ssm",
                context={"parameter": param_name},
            ) from error

        value: str | None = response.get("Parameter", {}).get("Value")
        if value:
            if _value_size(value) <= self._cache.maxsize:
                self._cache[param_name] = value
            else:
                logger.debug("Parameter too large to cache", extra={"parameter": param_name})
        return value

    def get_param_value(self, param_name: str, decrypt: bool = True) -> str | None:
        """Fetch a parameter value as a string.

        Args:
            param_name: Parameter name or path.
            decrypt: Decrypt SecureString values.

        Returns:
            The value, served from cache when present.

        Raises:
            NotFoundError: If the parameter does not exist.
            ParameterStoreError: If the parameter store call fails.
        """
        return self._get_param(param_name, decrypt)

    @overload
    def get_param_object(self, param_name: str, decrypt: bool = True) -> Any: ...

    @overload
    def get_param_object[M: pydantic.BaseModel](
        self,
        param_name: str,
        decrypt: bool = True,
        *,
        model: type[M],
    ) -> M | None: ...

    def get_param_object(
        self,
        param_name: str,
        decrypt: bool = True,
        *,
        model: type[pydantic.BaseModel] | None = None,
    ) -> Any:
        """Fetch a parameter and parse its value as JSON.

        Args:
            param_name: Parameter name or path.
            decrypt: Decrypt SecureString values.
            model: Optional pydantic model to validate the parsed value into.

        Returns:
            The parsed value or model instance, None if the value is empty.

        Raises:
            ValidationError: If the value is not JSON or does not fit the model.
        """
        value = self._get_param(param_name, decrypt)
        if not value:
            return None
        try:
            parsed = json.loads(value)
            if model is not None:
                return model.model_validate(parsed)
        except (json.JSONDecodeError, pydantic.ValidationError) as error:
            logger.error("Failed to parse parameter", extra={"parameter": param_name})
            raise ValidationError(
                f"Failed to parse parameter '{param_name}': {error}",
                field=param_name,
            ) from error
        return parsed
