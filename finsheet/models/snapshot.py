"""
Snapshot Document

The versioned JSON document an export/import collaborator writes and reads.
It holds only raw collections; every derived series is recomputed after
import, so a snapshot can never carry stale aggregates.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError

from finsheet.models.finance import NetWorthRow, SchemaEntry, TimeSeriesEntry


SNAPSHOT_VERSION = 1


class SnapshotError(Exception):
    """Base exception for snapshot errors."""
    pass


class SnapshotVersionError(SnapshotError):
    """Snapshot was written by an unsupported format version."""

    def __init__(self, version: int):
        self.version = version
        super().__init__(
            f"Unsupported snapshot version {version}; expected {SNAPSHOT_VERSION}"
        )


class FinanceSnapshot(BaseModel):
    """Raw collections plus the names of the files they came from."""

    version: int = SNAPSHOT_VERSION
    exported_at: datetime = Field(default_factory=datetime.utcnow)

    finance_file_name: Optional[str] = None
    net_worth_file_name: Optional[str] = None

    expenses: list[TimeSeriesEntry] = Field(default_factory=list)
    income: list[TimeSeriesEntry] = Field(default_factory=list)
    expense_schema: list[SchemaEntry] = Field(default_factory=list)
    income_schema: list[SchemaEntry] = Field(default_factory=list)
    net_worth: list[NetWorthRow] = Field(default_factory=list)

    def to_json(self) -> str:
        """Serialize with ISO-8601 dates."""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, payload: Union[str, bytes]) -> 'FinanceSnapshot':
        """
        Parse a snapshot document, re-hydrating dates.

        Raises:
            SnapshotVersionError: If the document version is not supported
            SnapshotError: If the document is malformed
        """
        try:
            snapshot = cls.model_validate_json(payload)
        except ValidationError as e:
            raise SnapshotError(f"Malformed snapshot: {e.error_count()} invalid fields") from e

        if snapshot.version != SNAPSHOT_VERSION:
            raise SnapshotVersionError(snapshot.version)
        return snapshot
