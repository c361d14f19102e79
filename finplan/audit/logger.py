"""
Audit Logger

Writes one structured log line per AuditEvent and, when a trail is
configured, keeps the event in it as well. A trail that fails to accept
an event is reported in the log; the ledger operation that produced the
event still succeeds.
"""

import logging
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from finplan.config import get_settings
from finplan.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from finplan.storage.interface import AuditStorageInterface


# JSON lines through the stdlib logging tree
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


_LEVELS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
}


class AuditLogger:
    """
    Emits audit events for the ledger service.

    Each event goes to the 'finplan.audit' structlog logger at the level
    its severity names, then to the trail storage if one was given.
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
        log_level: Optional[str] = None,
    ):
        """
        Args:
            storage: Trail the events are appended to; None logs only.
            log_level: Level for the 'finplan.audit' stdlib logger;
                    defaults to the configured level (DEBUG in debug mode).
        """
        self._storage = storage
        level = log_level or get_settings().app.effective_log_level
        logging.getLogger("finplan.audit").setLevel(level)
        self._logger = structlog.get_logger("finplan.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Emit one event.

        Returns:
            False if the trail rejected the event, True otherwise
        """
        emit = getattr(self._logger, _LEVELS[event.severity])
        emit("audit_event", **event.to_log_dict())

        if self._storage is None:
            return True
        try:
            return self._storage.append_event(event)
        except Exception as e:
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    def log_record_added(self, entity_type: str, details: dict[str, Any]) -> None:
        """Log a record appended to the store."""
        self.log(AuditEventBuilder.record_added(entity_type, details))

    def log_record_rejected(
        self,
        entity_type: str,
        issues: list[dict[str, str]],
        error_message: str,
    ) -> None:
        """Log a record that failed validation on a direct add."""
        self.log(AuditEventBuilder.record_rejected(entity_type, issues, error_message))

    def log_record_deleted(
        self,
        entity_type: str,
        position: int,
        details: dict[str, Any],
    ) -> None:
        """Log a record removed from the store."""
        self.log(AuditEventBuilder.record_deleted(entity_type, position, details))

    def log_subscription_toggled(self, name: str, is_active: bool) -> None:
        """Log a subscription's active flag flip."""
        self.log(AuditEventBuilder.subscription_toggled(name, is_active))

    def log_report_generated(
        self,
        year: int,
        month: int,
        net: str,
        expense_count: int,
    ) -> None:
        """Log a monthly report computation."""
        self.log(AuditEventBuilder.report_generated(year, month, net, expense_count))

    def log_export_completed(self, counts: dict[str, int]) -> None:
        """Log a full export."""
        self.log(AuditEventBuilder.export_completed(counts))

    def log_import_completed(
        self,
        counts: dict[str, int],
        correlation_id: UUID,
    ) -> None:
        """Log a successful import-replace."""
        self.log(AuditEventBuilder.import_completed(counts, correlation_id))

    def log_import_failed(
        self,
        error_kind: str,
        error_message: str,
        issue_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a rejected import."""
        self.log(AuditEventBuilder.import_failed(
            error_kind, error_message, issue_count, correlation_id
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a multi-step action (e.g., an import).
    """
    return uuid4()
