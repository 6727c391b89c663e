"""
In-Memory Audit Storage

Keeps the audit trail of one session in a list. Nothing is persisted;
a new process starts with an empty trail.
"""

from typing import Optional
from uuid import UUID

from finsheet.models.audit import AuditEvent, AuditEventType
from finsheet.services.storage.interface import AuditStorageInterface, StorageError


class InMemoryAuditStorage(AuditStorageInterface):
    """
    Append-only audit storage backed by a list.

    Args:
        max_events: Optional cap; appends beyond it raise StorageError
    """

    def __init__(self, max_events: Optional[int] = None):
        self._events: list[AuditEvent] = []
        self._max_events = max_events

    def append_event(self, event: AuditEvent) -> bool:
        if self._max_events is not None and len(self._events) >= self._max_events:
            raise StorageError(f"Audit log is full ({self._max_events} events)")
        self._events.append(event)
        return True

    def get_events_by_correlation_id(self, correlation_id: UUID) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_events_by_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        return [e for e in self._events if e.event_type == event_type]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)
