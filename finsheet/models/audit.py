"""
Audit Models for finsheet

Every workbook load, recovery and edit is recorded as an audit event.
This provides:
1. Traceability of which file produced which numbers
2. An explanation when a sheet yields partial or empty data
3. A history of manual edits on top of the imported data

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every stage of the pipeline has its own event type.
    """
    # Workbook ingestion
    WORKBOOK_LOADED = "workbook_loaded"
    WORKBOOK_REJECTED = "workbook_rejected"
    HEADER_NOT_FOUND = "header_not_found"
    FINANCE_PARSED = "finance_parsed"
    NET_WORTH_PARSED = "net_worth_parsed"

    # Manual edits
    MONTH_EDITED = "month_edited"
    NET_WORTH_EDITED = "net_worth_edited"

    # Snapshots
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_IMPORTED = "snapshot_imported"

    # Derived data
    DERIVED_RECOMPUTED = "derived_recomputed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - which input is this about?
    source: Optional[str] = Field(
        default=None,
        description="Input the event relates to (e.g., 'finance', 'net_worth', 'snapshot')"
    )
    file_name: Optional[str] = Field(
        default=None,
        description="Workbook or snapshot file name, when known"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events of one upload)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "source": self.source,
            "file_name": self.file_name,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.workbook_loaded("finance", name, size, sheet, cid)
        event = AuditEventBuilder.month_edited(month, 12, 3, cid)
    """

    @staticmethod
    def workbook_loaded(
        source: str,
        file_name: str,
        size_bytes: int,
        sheet_name: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WORKBOOK_LOADED,
            source=source,
            file_name=file_name,
            correlation_id=correlation_id,
            description=f"Workbook loaded: {file_name} (sheet '{sheet_name}')",
            details={
                "size_bytes": size_bytes,
                "sheet_name": sheet_name,
            },
            is_user_action=True,
        )

    @staticmethod
    def workbook_rejected(
        source: str,
        file_name: str,
        error_type: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WORKBOOK_REJECTED,
            severity=AuditSeverity.ERROR,
            source=source,
            file_name=file_name,
            correlation_id=correlation_id,
            description=f"Workbook rejected: {file_name} ({error_type})",
            error_message=error_message,
            details={
                "error_type": error_type,
            },
            is_user_action=True,
        )

    @staticmethod
    def header_not_found(
        file_name: str,
        labels: list[str],
        search_rows: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HEADER_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            source="finance",
            file_name=file_name,
            correlation_id=correlation_id,
            description=f"No header row in the first {search_rows} rows; sheet treated as empty",
            details={
                "labels": labels,
                "search_rows": search_rows,
            },
        )

    @staticmethod
    def finance_parsed(
        file_name: str,
        months: int,
        expense_rows: int,
        income_rows: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FINANCE_PARSED,
            source="finance",
            file_name=file_name,
            correlation_id=correlation_id,
            description=f"Parsed {months} months: {expense_rows} expense and {income_rows} income entries",
            details={
                "months": months,
                "expense_rows": expense_rows,
                "income_rows": income_rows,
            },
        )

    @staticmethod
    def net_worth_parsed(
        file_name: str,
        rows: int,
        dropped_rows: int,
        low_risk_items: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NET_WORTH_PARSED,
            severity=AuditSeverity.INFO if rows else AuditSeverity.WARNING,
            source="net_worth",
            file_name=file_name,
            correlation_id=correlation_id,
            description=f"Parsed {rows} net worth months ({dropped_rows} rows without a month dropped)",
            details={
                "rows": rows,
                "dropped_rows": dropped_rows,
                "low_risk_items": low_risk_items,
            },
        )

    @staticmethod
    def month_edited(
        month: str,
        expense_entries: int,
        income_entries: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MONTH_EDITED,
            source="finance",
            correlation_id=correlation_id,
            description=f"Expenses and income edited for {month}",
            details={
                "month": month,
                "expense_entries": expense_entries,
                "income_entries": income_entries,
            },
            is_user_action=True,
        )

    @staticmethod
    def net_worth_edited(
        month: str,
        net_worth: float,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NET_WORTH_EDITED,
            source="net_worth",
            correlation_id=correlation_id,
            description=f"Net worth row edited for {month}",
            details={
                "month": month,
                "net_worth": net_worth,
            },
            is_user_action=True,
        )

    @staticmethod
    def snapshot_exported(
        version: int,
        counts: dict[str, int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            source="snapshot",
            correlation_id=correlation_id,
            description=f"Snapshot v{version} exported",
            details=counts,
            is_user_action=True,
        )

    @staticmethod
    def snapshot_imported(
        version: int,
        counts: dict[str, int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_IMPORTED,
            source="snapshot",
            correlation_id=correlation_id,
            description=f"Snapshot v{version} imported",
            details=counts,
            is_user_action=True,
        )

    @staticmethod
    def derived_recomputed(
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DERIVED_RECOMPUTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            description="Derived series recomputed",
            details=counts,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
