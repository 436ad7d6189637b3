"""Probe table record models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.constants import PROBE_PARTITION_KEY, PROBE_SORT_KEY


class ProbeRecord(BaseModel):
    """Record in the probe table.

    The table is keyed on lowercase ``pk``/``sk``. Any further attributes are
    kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    pk: str = Field(min_length=1)
    sk: str = Field(min_length=1)

    def key(self) -> dict[str, str]:
        """Return the record's primary key."""
        return {PROBE_PARTITION_KEY: self.pk, PROBE_SORT_KEY: self.sk}

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return self.model_dump()

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any], *, pk: str, sk: str) -> "ProbeRecord":
        """Create from an item whose key attributes were stripped on read."""
        return cls.model_validate({**item, PROBE_PARTITION_KEY: pk, PROBE_SORT_KEY: sk})
