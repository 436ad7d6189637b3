"""Generic DynamoDB access layer for single-table designs.

Tables store every record under a partition key ``PK`` and a sort key ``SK``.
A global secondary index ``GSI1`` inverts the pair (hash ``SK``, range
``PK``) so records can also be found by sort key alone.

Single-record reads strip the key attributes before returning; list reads
return records with their keys intact.
"""

import time
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, ClassVar, Literal, NotRequired, TypedDict, cast

import boto3
from boto3.dynamodb.conditions import ConditionBase, Key
from botocore.exceptions import BotoCoreError
from botocore.exceptions import ClientError as BotoClientError
from pydantic import BaseModel, ConfigDict

from src.config import get_settings
from src.constants import INDEX_NAME, PARTITION_KEY, SORT_KEY
from src.exceptions.aws import wrap_service_error
from src.exceptions.client_errors import MultipleItemsFoundError
from src.exceptions.server_errors import ConfigurationError, DatabaseError
from src.logging import get_logger

logger = get_logger(__name__)

KeyType = Literal["S", "N"]


class DynamoDbKey(TypedDict):
    """Primary key of a single-table record."""

    PK: str
    SK: NotRequired[str]


# Same shape as a key. A key identifies a record; a record is a key plus
# any number of further attributes.
DynamoDbRecord = DynamoDbKey


class DynamoDbTransientRecord(DynamoDbRecord):
    """Record removed by DynamoDB TTL once ``ttl`` (epoch seconds) has passed."""

    ttl: int


class PkSkRange(BaseModel):
    """Partition key value plus an inclusive sort key range."""

    model_config = ConfigDict(frozen=True)

    pk_val: str
    sk_val_from: str
    sk_val_to: str


def ttl_from_now(seconds: int, *, now: float | None = None) -> int:
    """Compute a ``ttl`` attribute value that expires ``seconds`` from now.

    Args:
        seconds: Lifetime of the record.
        now: Current epoch time, defaults to ``time.time()``.

    Returns:
        Epoch time in whole seconds.
    """
    current = time.time() if now is None else now
    return int(current) + seconds


def _convert_decimals(obj: Any) -> Any:
    """Convert Decimal values to int or float for JSON serialization."""
    if isinstance(obj, Decimal):
        if obj == int(obj):
            return int(obj)
        return float(obj)
    if isinstance(obj, dict):
        dict_obj = cast("dict[str, Any]", obj)
        return {k: _convert_decimals(v) for k, v in dict_obj.items()}
    if isinstance(obj, list):
        list_obj = cast("list[Any]", obj)
        return [_convert_decimals(item) for item in list_obj]
    if isinstance(obj, set):
        set_obj = cast("set[Any]", obj)
        return {_convert_decimals(item) for item in set_obj}
    return obj


def _sanitize_for_dynamodb(obj: Any) -> Any:
    """Drop None values and convert floats to Decimal for DynamoDB storage.

    Sets are converted member by member, so float sets become number sets.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, Mapping):
        map_obj = cast("Mapping[str, Any]", obj)
        return {k: _sanitize_for_dynamodb(v) for k, v in map_obj.items() if v is not None}
    if isinstance(obj, list | tuple):
        seq_obj = cast("list[Any]", obj)
        return [_sanitize_for_dynamodb(item) for item in seq_obj if item is not None]
    if isinstance(obj, set | frozenset):
        set_obj = cast("set[Any]", obj)
        return {_sanitize_for_dynamodb(item) for item in set_obj if item is not None}
    return obj


def _typed_key_value(value: str, key_type: KeyType) -> str | Decimal:
    """Convert a key value passed as a string to its DynamoDB type."""
    if key_type == "N":
        return Decimal(value)
    return value


class DynDb:
    """Base class for accessing a single-table DynamoDB design.

    Subclass per table and override :meth:`get_table_name`, or pass the table
    name to the constructor. The boto3 table resource is created on first use
    and reused for the lifetime of the instance.
    """

    INDEX_NAME: ClassVar[str] = INDEX_NAME
    PARTITION_KEY: ClassVar[str] = PARTITION_KEY
    SORT_KEY: ClassVar[str] = SORT_KEY

    def __init__(
        self,
        table_name: str | None = None,
        *,
        region_name: str | None = None,
    ) -> None:
        """Initialize the access layer.

        Args:
            table_name: DynamoDB table name. Subclasses may supply it instead.
            region_name: AWS region, defaults to the configured region.
        """
        self._table_name = table_name
        self._region_name = region_name
        self._table: Any = None

    def get_table_name(self) -> str:
        """Return the name of the table this class reads and writes.

        Raises:
            ConfigurationError: If no table name was supplied.
        """
        if not self._table_name:
            raise ConfigurationError(
                f"{type(self).__name__} has no table name configured",
            )
        return self._table_name

    def init(self) -> Any:
        """Create the boto3 table resource if it does not exist yet.

        Returns:
            The boto3 ``Table`` resource.

        Raises:
            ConfigurationError: If the DynamoDB resource cannot be created.
        """
        if self._table is not None:
            return self._table

        table_name = self.get_table_name()
        region_name = self._region_name or get_settings().aws_region
        logger.info(
            "DynamoDB config",
            extra={"table_name": table_name, "region": region_name},
        )
        try:
            dynamodb = boto3.resource("dynamodb", region_name=region_name)  # type: ignore[call-overload]
        except BotoCoreError as error:
            logger.exception("Failed to initialise DynamoDB", extra={"table_name": table_name})
            raise ConfigurationError(
                f"Failed to initialise DynamoDB for table {table_name}",
                context={"table_name": table_name},
            ) from error
        self._table = dynamodb.Table(table_name)
        return self._table

    def _call(self, operation: str, **kwargs: Any) -> dict[str, Any]:
        """Invoke one table operation, translating SDK failures."""
        table = self.init()
        try:
            response: dict[str, Any] = getattr(table, operation)(**kwargs)
        except (BotoClientError, BotoCoreError) as error:
            table_name = self.get_table_name()
            logger.error(
                "DynamoDB call failed",
                extra={"operation": operation, "table_name": table_name},
            )
            raise wrap_service_error(
                DatabaseError,
                f"DynamoDB {operation} failed",
                error,
                service_name="dynamodb",
                context={"operation": operation, "table_name": table_name},
            ) from error
        except TypeError as error:
            # Raised by the boto3 serializer, e.g. for NaN or infinite numbers
            table_name = self.get_table_name()
            logger.error(
                "DynamoDB request could not be serialized",
                extra={"operation": operation, "table_name": table_name},
            )
            raise DatabaseError(
                f"DynamoDB {operation} failed: {error}",
                service_name="dynamodb",
                context={"operation": operation, "table_name": table_name},
            ) from error
        return response

    def _query(
        self,
        key_condition: ConditionBase,
        *,
        index_name: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a single Query call and return the converted items."""
        kwargs: dict[str, Any] = {"KeyConditionExpression": key_condition}
        if index_name:
            kwargs["IndexName"] = index_name
        response = self._call("query", **kwargs)
        items: list[dict[str, Any]] = response.get("Items", [])
        return [_convert_decimals(item) for item in items]

    def put_item(self, item: Mapping[str, Any]) -> None:
        """Write a record, replacing any record with the same key.

        None values are removed before writing.

        Args:
            item: Record including its key attributes.
        """
        self._call("put_item", Item=_sanitize_for_dynamodb(item))

    def get_item(self, key: Mapping[str, Any]) -> dict[str, Any] | None:
        """Get a record by its full key.

        Args:
            key: Partition key and, for composite tables, sort key.

        Returns:
            The record without key attributes, or None if absent.
        """
        response = self._call("get_item", Key=dict(key))
        item = response.get("Item")
        if not item:
            return None
        return self.delete_key_from_item(_convert_decimals(item))

    def get_item_by_pk(self, pk_val: str) -> dict[str, Any] | None:
        """Get the only record stored under a partition key.

        Args:
            pk_val: Partition key value.

        Returns:
            The record without key attributes, or None if absent.

        Raises:
            MultipleItemsFoundError: If more than one record has this key.
        """
        items = self._query(Key(self.PARTITION_KEY).eq(pk_val))
        if not items:
            return None
        if len(items) > 1:
            raise MultipleItemsFoundError(
                f"Multiple items ({len(items)}) found with {self.PARTITION_KEY} '{pk_val}'",
                key_value=pk_val,
                item_count=len(items),
            )
        return self.delete_key_from_item(items[0])

    def get_items_by_pk(self, pk_val: str) -> list[dict[str, Any]]:
        """Get every record stored under a partition key, keys included."""
        return self._query(Key(self.PARTITION_KEY).eq(pk_val))

    def get_items_with_sk_beginning(self, pk_val: str, sk_val: str) -> list[dict[str, Any]]:
        """Get records under a partition key whose sort key starts with a prefix.

        Args:
            pk_val: Partition key value.
            sk_val: Sort key prefix.

        Returns:
            Matching records with key attributes, empty if none match.
        """
        condition = Key(self.PARTITION_KEY).eq(pk_val) & Key(self.SORT_KEY).begins_with(sk_val)
        return self._query(condition)

    def get_items_with_sk_between(
        self,
        key_vals: PkSkRange,
        partition_key_name: str | None = None,
        sort_key_name: str | None = None,
        partition_key_type: KeyType = "S",
        sort_key_type: KeyType = "S",
        index_name: str | None = None,
    ) -> list[dict[str, Any]]:
        """Get records for a partition key with a sort key in an inclusive range.

        Queries the table keys by default; pass ``index_name`` together with
        that index's key names to query an index instead.

        Args:
            key_vals: Partition key value and sort key bounds.
            partition_key_name: Partition key attribute, defaults to ``PK``.
            sort_key_name: Sort key attribute, defaults to ``SK``.
            partition_key_type: ``"S"`` or ``"N"``.
            sort_key_type: ``"S"`` or ``"N"``; numeric bounds compare numerically.
            index_name: Optional index to query.

        Returns:
            Matching records with key attributes, empty if none match.
        """
        pk_name = partition_key_name or self.PARTITION_KEY
        sk_name = sort_key_name or self.SORT_KEY
        condition = Key(pk_name).eq(
            _typed_key_value(key_vals.pk_val, partition_key_type),
        ) & Key(sk_name).between(
            _typed_key_value(key_vals.sk_val_from, sort_key_type),
            _typed_key_value(key_vals.sk_val_to, sort_key_type),
        )
        return self._query(condition, index_name=index_name)

    def get_item_by_sk(self, sk_val: str) -> dict[str, Any] | None:
        """Get the first record with a sort key, via the inverted index.

        Returns:
            The record without key attributes, or None if absent.
        """
        items = self._query(Key(self.SORT_KEY).eq(sk_val), index_name=self.INDEX_NAME)
        if not items:
            return None
        return self.delete_key_from_item(items[0])

    def get_all_by_pk_prefix_and_sk(self, pk_prefix: str, sk_val: str) -> list[dict[str, Any]]:
        """Get all records with a sort key whose partition key starts with a prefix.

        Args:
            pk_prefix: Partition key prefix.
            sk_val: Exact sort key value.

        Returns:
            Matching records without key attributes.
        """
        condition = Key(self.SORT_KEY).eq(sk_val) & Key(self.PARTITION_KEY).begins_with(pk_prefix)
        items = self._query(condition, index_name=self.INDEX_NAME)
        return [self.delete_key_from_item(item) for item in items]

    def delete_item(self, key: Mapping[str, Any]) -> None:
        """Delete a record by its key. Deleting a missing record is not an error."""
        self._call("delete_item", Key=dict(key))

    @classmethod
    def delete_key_from_item(cls, record: dict[str, Any]) -> dict[str, Any]:
        """Remove the key attributes from a record in place and return it."""
        record.pop(cls.PARTITION_KEY, None)
        record.pop(cls.SORT_KEY, None)
        return record
