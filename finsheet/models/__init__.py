"""
Data Models Package

This package contains all Pydantic models used in finsheet.
All data flowing through the pipeline must conform to these schemas.
"""

from finsheet.models.finance import (
    DEBT_BUCKETS,
    LIQUID_BUCKETS,
    NET_WORTH_BUCKETS,
    NON_LIQUID_BUCKETS,
    CategoryAllocation,
    CategoryAmount,
    CategoryLabel,
    FIProgressRow,
    MonthlyAggregate,
    NetWorthBuckets,
    NetWorthRow,
    PortfolioHolding,
    ProjectedNetWorthRow,
    RowKind,
    SavingsPoint,
    SavingsSummary,
    SchemaEntry,
    TimeSeriesEntry,
)
from finsheet.models.sheet import (
    FinanceLoadStats,
    FinanceSheet,
    HeaderLocation,
    MeltResult,
    MonthColumn,
    RawGrid,
)
from finsheet.models.snapshot import (
    SNAPSHOT_VERSION,
    FinanceSnapshot,
    SnapshotError,
    SnapshotVersionError,
)
from finsheet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "DEBT_BUCKETS",
    "LIQUID_BUCKETS",
    "NET_WORTH_BUCKETS",
    "NON_LIQUID_BUCKETS",
    "CategoryAllocation",
    "CategoryAmount",
    "CategoryLabel",
    "FIProgressRow",
    "MonthlyAggregate",
    "NetWorthBuckets",
    "NetWorthRow",
    "PortfolioHolding",
    "ProjectedNetWorthRow",
    "RowKind",
    "SavingsPoint",
    "SavingsSummary",
    "SchemaEntry",
    "TimeSeriesEntry",
    # Parse-stage models
    "FinanceLoadStats",
    "FinanceSheet",
    "HeaderLocation",
    "MeltResult",
    "MonthColumn",
    "RawGrid",
    # Snapshot
    "SNAPSHOT_VERSION",
    "FinanceSnapshot",
    "SnapshotError",
    "SnapshotVersionError",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
