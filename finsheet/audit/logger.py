"""
Audit Logger

DESIGN DECISION: Every workbook load, recovery and edit is logged.
This provides:
1. Traceability from a chart back to the file it came from
2. An explanation when a sheet yields partial or empty data
3. A history of manual edits

The audit logger:
- Is synchronous, like the pipeline that calls it
- Gracefully handles failures (a storage error never breaks a load)
- Supports correlation IDs to trace the events of one user action
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from finsheet.models.audit import AuditEvent, AuditEventBuilder
from finsheet.services.storage import AuditStorageInterface, StorageError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An optional audit storage backend (for the session history)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except StorageError as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_workbook_loaded(
        self,
        source: str,
        file_name: str,
        size_bytes: int,
        sheet_name: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.workbook_loaded(
            source=source,
            file_name=file_name,
            size_bytes=size_bytes,
            sheet_name=sheet_name,
            correlation_id=correlation_id,
        ))

    def log_workbook_rejected(
        self,
        source: str,
        file_name: str,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        """Log a workbook that could not be read."""
        self.log(AuditEventBuilder.workbook_rejected(
            source=source,
            file_name=file_name,
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        ))

    def log_header_not_found(
        self,
        file_name: str,
        labels: list[str],
        search_rows: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.header_not_found(
            file_name=file_name,
            labels=labels,
            search_rows=search_rows,
            correlation_id=correlation_id,
        ))

    def log_finance_parsed(
        self,
        file_name: str,
        months: int,
        expense_rows: int,
        income_rows: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.finance_parsed(
            file_name=file_name,
            months=months,
            expense_rows=expense_rows,
            income_rows=income_rows,
            correlation_id=correlation_id,
        ))

    def log_net_worth_parsed(
        self,
        file_name: str,
        rows: int,
        dropped_rows: int,
        low_risk_items: int,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.net_worth_parsed(
            file_name=file_name,
            rows=rows,
            dropped_rows=dropped_rows,
            low_risk_items=low_risk_items,
            correlation_id=correlation_id,
        ))

    def log_month_edited(
        self,
        month: str,
        expense_entries: int,
        income_entries: int,
        correlation_id: UUID,
    ) -> None:
        """Log a manual edit of one month."""
        self.log(AuditEventBuilder.month_edited(
            month=month,
            expense_entries=expense_entries,
            income_entries=income_entries,
            correlation_id=correlation_id,
        ))

    def log_net_worth_edited(
        self,
        month: str,
        net_worth: float,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.net_worth_edited(
            month=month,
            net_worth=net_worth,
            correlation_id=correlation_id,
        ))

    def log_snapshot_exported(
        self,
        version: int,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.snapshot_exported(
            version=version,
            counts=counts,
            correlation_id=correlation_id,
        ))

    def log_snapshot_imported(
        self,
        version: int,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.snapshot_imported(
            version=version,
            counts=counts,
            correlation_id=correlation_id,
        ))

    def log_derived_recomputed(
        self,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.derived_recomputed(
            counts=counts,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a workbook upload).
    Pass it through all subsequent operations.
    """
    return uuid4()
