"""Tests for the audit logger and in-memory storage."""

from uuid import uuid4

import pytest

from finsheet.audit import AuditLogger, create_correlation_id
from finsheet.models import AuditEvent, AuditEventBuilder, AuditEventType, AuditSeverity
from finsheet.services.storage import InMemoryAuditStorage, StorageError


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_local_only_logging(self):
        """Test that logging without storage succeeds."""
        logger = AuditLogger()
        event = AuditEvent(event_type=AuditEventType.DERIVED_RECOMPUTED, description="recomputed")
        assert logger.log(event) is True

    def test_events_are_persisted(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        logger.log_month_edited("2024-01-01", 3, 2, correlation_id)
        logger.log_net_worth_edited("2024-01-01", 1000.0, correlation_id)
        logger.log_derived_recomputed({"aggregates": 1})

        assert len(storage) == 3
        assert [e.event_type for e in storage.get_events_by_correlation_id(correlation_id)] == [
            AuditEventType.MONTH_EDITED,
            AuditEventType.NET_WORTH_EDITED,
        ]

    def test_rejected_workbook_records_error_type(self):
        storage = InMemoryAuditStorage()
        AuditLogger(storage).log_workbook_rejected("finance", "a.xlsx", ValueError("bad"), uuid4())

        event = storage.get_events_by_type(AuditEventType.WORKBOOK_REJECTED)[0]
        assert event.details["error_type"] == "ValueError"
        assert event.error_message == "bad"

    def test_storage_failure_is_not_raised(self):
        """Test that a full storage reports False instead of raising."""
        storage = InMemoryAuditStorage(max_events=1)
        logger = AuditLogger(storage)
        event = AuditEventBuilder.derived_recomputed({"aggregates": 0})

        assert logger.log(event) is True
        assert logger.log(event) is False
        assert len(storage) == 1

    def test_error_event(self):
        storage = InMemoryAuditStorage()
        AuditLogger(storage).log_error("SnapshotError", "not json", {"operation": "import_snapshot"})

        event = storage.get_events_by_type(AuditEventType.SYSTEM_ERROR)[0]
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "not json"


class TestInMemoryAuditStorage:
    """Tests for InMemoryAuditStorage."""

    def test_recent_events_newest_first(self):
        storage = InMemoryAuditStorage()
        first = AuditEventBuilder.derived_recomputed({"n": 1})
        second = AuditEventBuilder.derived_recomputed({"n": 2})
        storage.append_event(first)
        storage.append_event(second)

        assert storage.get_recent_events() == [second, first]
        assert storage.get_recent_events(limit=1) == [second]

    def test_full_storage_raises(self):
        storage = InMemoryAuditStorage(max_events=0)
        with pytest.raises(StorageError):
            storage.append_event(AuditEventBuilder.derived_recomputed({}))

    def test_correlation_ids_are_unique(self):
        assert create_correlation_id() != create_correlation_id()
