"""
Tests for the structlog-backed audit logger.
"""

import logging
import pytest
from uuid import uuid4

from finplan.audit import AuditLogger, create_correlation_id
from finplan.models.audit import AuditEventBuilder, AuditEventType, AuditSeverity
from finplan.storage import InMemoryAuditTrail
from finplan.storage.interface import AuditStorageInterface


class FailingTrail(AuditStorageInterface):
    """Audit storage that always fails."""

    def append_event(self, event):
        raise RuntimeError("trail unavailable")

    def get_events_by_correlation_id(self, correlation_id):
        return []

    def get_recent_events(self, limit=100):
        return []


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_log_appends_to_empty_trail(self):
        """Test that the first event reaches an empty trail."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)
        assert logger.log(AuditEventBuilder.export_completed({"incomes": 0})) is True
        assert len(trail) == 1

    def test_log_without_storage(self):
        """Test local-only logging."""
        logger = AuditLogger()
        assert logger.storage is None
        assert logger.log(AuditEventBuilder.export_completed({"incomes": 0})) is True

    def test_storage_failure_does_not_raise(self):
        """Test that a failing trail is reported, not raised."""
        logger = AuditLogger(FailingTrail())
        assert logger.log(AuditEventBuilder.subscription_toggled("Music", True)) is False

    def test_wrappers_build_expected_events(self):
        """Test the convenience methods."""
        trail = InMemoryAuditTrail()
        logger = AuditLogger(trail)
        correlation_id = create_correlation_id()

        logger.log_record_added("income", {"source": "Salary"})
        logger.log_record_rejected("expense", [{"field": "note", "message": "blank"}], "Invalid Expense")
        logger.log_record_deleted("expense", 3, {"note": "tea"})
        logger.log_subscription_toggled("Music", False)
        logger.log_report_generated(2025, 9, "910", 2)
        logger.log_export_completed({"incomes": 1, "expenses": 2, "subscriptions": 0})
        logger.log_import_completed({"incomes": 1}, correlation_id=correlation_id)
        logger.log_import_failed("parse", "Invalid JSON", 1, correlation_id=correlation_id)

        events = list(reversed(trail.get_recent_events(limit=None)))
        assert [e.event_type for e in events] == [
            AuditEventType.RECORD_ADDED,
            AuditEventType.RECORD_REJECTED,
            AuditEventType.RECORD_DELETED,
            AuditEventType.SUBSCRIPTION_TOGGLED,
            AuditEventType.REPORT_GENERATED,
            AuditEventType.EXPORT_COMPLETED,
            AuditEventType.IMPORT_COMPLETED,
            AuditEventType.IMPORT_FAILED,
        ]
        assert events[1].severity == AuditSeverity.WARNING
        assert events[2].description == "Expense #3 deleted"
        assert events[4].description == "Monthly report generated for 2025-09"
        assert events[5].description == "Exported 3 records"
        assert len(trail.get_events_by_correlation_id(correlation_id)) == 2

    def test_log_level_applied(self):
        """Test the stdlib logger level is set."""
        AuditLogger(log_level="WARNING")
        assert logging.getLogger("finplan.audit").level == logging.WARNING
        AuditLogger(log_level="INFO")

    def test_debug_mode_lowers_level(self, monkeypatch):
        """Test FINPLAN_DEBUG_MODE overrides the configured level."""
        monkeypatch.setenv("FINPLAN_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("FINPLAN_DEBUG_MODE", "true")
        AuditLogger()
        assert logging.getLogger("finplan.audit").level == logging.DEBUG
        AuditLogger(log_level="INFO")

    def test_correlation_ids_unique(self):
        """Test correlation id generation."""
        assert create_correlation_id() != create_correlation_id()

    def test_import_failed_keeps_error_message(self):
        """Test the failure message is carried on the event."""
        trail = InMemoryAuditTrail()
        AuditLogger(trail).log_import_failed("validation", "1 record(s) failed", 1, uuid4())
        event = trail.get_recent_events()[0]
        assert event.error_message == "1 record(s) failed"
        assert event.to_log_dict()["severity"] == "warning"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
