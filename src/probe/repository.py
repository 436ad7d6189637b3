"""Probe table data access layer."""

from src.config import get_settings
from src.constants import PROBE_PARTITION_KEY, PROBE_SORT_KEY, PROBE_TREE_KEY
from src.probe.models import ProbeRecord
from src.utils.dynamodb import DynDb


class ProbeDynDb(DynDb):
    """Access layer for the probe table provisioned by the harness stack."""

    PARTITION_KEY = PROBE_PARTITION_KEY
    SORT_KEY = PROBE_SORT_KEY

    def get_table_name(self) -> str:
        """Return the explicit table name, else TABLE_NAME from the settings."""
        return self._table_name or get_settings().table_name


class ProbeDao:
    """Repository for probe table records."""

    def __init__(self, db: ProbeDynDb | None = None) -> None:
        """Initialize the repository.

        Args:
            db: Probe table access layer. A default one is created if omitted.
        """
        self._db = db or ProbeDynDb()

    def save(self, record: ProbeRecord) -> ProbeRecord:
        """Write a probe record."""
        self._db.put_item(record.to_dynamodb_item())
        return record

    def get(self, pk: str, sk: str) -> ProbeRecord | None:
        """Get a probe record by key, or None if absent."""
        item = self._db.get_item({PROBE_PARTITION_KEY: pk, PROBE_SORT_KEY: sk})
        if item is None:
            return None
        return ProbeRecord.from_dynamodb_item(item, pk=pk, sk=sk)

    def get_tree(self) -> ProbeRecord | None:
        """Read the fixed ``test``/``test`` record the harness probes."""
        return self.get(PROBE_TREE_KEY, PROBE_TREE_KEY)
