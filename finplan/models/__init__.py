"""
Data Models Package

This package contains all Pydantic models used in finplan.
All data flowing through the ledger must conform to these schemas.
"""

from finplan.models.records import (
    AnyRecord,
    Category,
    Expense,
    Income,
    LedgerRecord,
    Subscription,
    to_day,
)
from finplan.models.report import (
    CategoryBreakdown,
    CategorySummary,
    MonthlyReport,
    RangeSummary,
    TimelineEntry,
)
from finplan.models.transfer import (
    COLLECTIONS,
    ImportResult,
    StagedLedger,
    ValidationIssue,
)
from finplan.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "AnyRecord",
    "Category",
    "Expense",
    "Income",
    "LedgerRecord",
    "Subscription",
    "to_day",
    # Report values
    "CategoryBreakdown",
    "CategorySummary",
    "MonthlyReport",
    "RangeSummary",
    "TimelineEntry",
    # Transfer values
    "COLLECTIONS",
    "ImportResult",
    "StagedLedger",
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
