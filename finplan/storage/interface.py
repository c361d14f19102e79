"""
Abstract Storage Interface

The ledger store owns every record for the lifetime of the process.
Business logic (queries, reports, import) only talks to this interface,
so tests and front ends can swap the implementation.

The interface is intentionally small: append, point delete, toggle and
one wholesale replace used by import.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from uuid import UUID

from finplan.models.audit import AuditEvent
from finplan.models.records import Expense, Income, Subscription


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger storage operations.

    Records are matched by identity, never by field values.
    """

    @property
    @abstractmethod
    def incomes(self) -> tuple[Income, ...]:
        """All incomes in insertion order."""
        pass

    @property
    @abstractmethod
    def expenses(self) -> tuple[Expense, ...]:
        """All expenses in insertion order."""
        pass

    @property
    @abstractmethod
    def subscriptions(self) -> tuple[Subscription, ...]:
        """All subscriptions in insertion order."""
        pass

    @abstractmethod
    def contains(self, record: object) -> bool:
        """True if this exact record is held by the store."""
        pass

    @abstractmethod
    def counts(self) -> dict[str, int]:
        """Number of records per collection."""
        pass

    @abstractmethod
    def add_income(self, income: Income) -> None:
        """Append an income. The record is already valid by construction."""
        pass

    @abstractmethod
    def add_expense(self, expense: Expense) -> None:
        """Append an expense."""
        pass

    @abstractmethod
    def add_subscription(self, subscription: Subscription) -> None:
        """Append a subscription."""
        pass

    @abstractmethod
    def delete_income(self, income: Income) -> bool:
        """
        Remove this exact income.

        Returns:
            True if removed, False (and no change) if it is not held
        """
        pass

    @abstractmethod
    def delete_expense(self, expense: Expense) -> bool:
        """Remove this exact expense; False if not held."""
        pass

    @abstractmethod
    def delete_subscription(self, subscription: Subscription) -> bool:
        """Remove this exact subscription; False if not held."""
        pass

    @abstractmethod
    def toggle_subscription_active(self, subscription: Subscription) -> bool:
        """
        Flip the active flag of a held subscription.

        Returns:
            The new value of is_active

        Raises:
            NotFoundError: If the subscription is not held by this store
        """
        pass

    @abstractmethod
    def replace_all(
        self,
        incomes: Iterable[Income],
        expenses: Iterable[Expense],
        subscriptions: Iterable[Subscription],
    ) -> None:
        """
        Atomically replace the whole store.

        Callers must have validated every record first. Previous contents
        are discarded; nothing is merged.
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """All events sharing a correlation ID, in chronological order."""
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: Optional[int] = 100,
    ) -> list[AuditEvent]:
        """The most recent events, newest first."""
        pass
