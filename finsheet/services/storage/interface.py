"""
Abstract Storage Interface

DESIGN DECISION: Audit persistence sits behind an abstract interface.
This allows us to:
1. Keep the pipeline free of any storage backend
2. Use in-memory storage for tests and single-session use
3. Add a durable backend later without touching the audit logger

The interface is intentionally small: append and a few reads.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from finsheet.models.audit import AuditEvent, AuditEventType


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully

        Raises:
            StorageError: If the backend cannot accept the event
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one workbook upload).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    def get_events_by_type(
        self,
        event_type: AuditEventType,
    ) -> list[AuditEvent]:
        """Events of one type, in chronological order."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
