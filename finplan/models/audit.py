"""
Audit Models for finplan

Every mutation of the ledger, and every import or export, is recorded as
an AuditEvent. Events are logged locally through structlog and may be kept
in an in-memory trail.

DESIGN DECISION: An event is written once and never edited. The trail
only ever grows (or forgets its oldest entries when bounded).
"""

import datetime as dt
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """What happened to the ledger."""
    # Store mutations
    RECORD_ADDED = "record_added"
    RECORD_REJECTED = "record_rejected"
    RECORD_DELETED = "record_deleted"
    SUBSCRIPTION_TOGGLED = "subscription_toggled"

    # Reads worth keeping
    REPORT_GENERATED = "report_generated"

    # Bulk transfer
    EXPORT_COMPLETED = "export_completed"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_FAILED = "import_failed"


class AuditSeverity(str, Enum):
    """Log level an event is emitted at."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """One entry of the audit trail."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc),
        description="UTC time the event was recorded"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="'income', 'expense', 'subscription', 'report' or 'ledger'"
    )
    # Shared by every event of one import
    correlation_id: Optional[UUID] = None

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """JSON-safe fields for a structured log line."""
        return self.model_dump(mode="json")


class AuditEventBuilder:
    """
    Factory methods for the events the ledger emits.

    Usage:
        event = AuditEventBuilder.record_added("income", {"source": "Salary"})
        event = AuditEventBuilder.import_failed("parse", "Invalid JSON", 1, correlation_id)
    """

    @staticmethod
    def record_added(entity_type: str, details: dict[str, Any]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_ADDED,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} added",
            details=details,
        )

    @staticmethod
    def record_rejected(
        entity_type: str,
        issues: list[dict[str, str]],
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} rejected with {len(issues)} issues",
            details={"issues": issues},
            error_message=error_message,
        )

    @staticmethod
    def record_deleted(
        entity_type: str,
        position: int,
        details: dict[str, Any],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=entity_type,
            description=f"{entity_type.capitalize()} #{position} deleted",
            details={"position": position, **details},
        )

    @staticmethod
    def subscription_toggled(name: str, is_active: bool) -> AuditEvent:
        state = "active" if is_active else "inactive"
        return AuditEvent(
            event_type=AuditEventType.SUBSCRIPTION_TOGGLED,
            entity_type="subscription",
            description=f"Subscription '{name}' is now {state}",
            details={"name": name, "is_active": is_active},
        )

    @staticmethod
    def report_generated(year: int, month: int, net: str, expense_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REPORT_GENERATED,
            severity=AuditSeverity.DEBUG,
            entity_type="report",
            description=f"Monthly report generated for {year:04d}-{month:02d}",
            details={
                "year": year,
                "month": month,
                "net": net,
                "expense_count": expense_count,
            },
        )

    @staticmethod
    def export_completed(counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="ledger",
            description=f"Exported {sum(counts.values())} records",
            details=counts,
        )

    @staticmethod
    def import_completed(counts: dict[str, int], correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_COMPLETED,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Imported {sum(counts.values())} records, previous contents replaced",
            details=counts,
        )

    @staticmethod
    def import_failed(
        error_kind: str,
        error_message: str,
        issue_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"Import rejected ({error_kind}), store unchanged",
            details={"error_kind": error_kind, "issue_count": issue_count},
            error_message=error_message,
        )
