"""
In-Memory Storage Implementation

The ledger lives only for the lifetime of the process. All three
collections are held in a single state object so a wholesale replace is
one assignment: a reader sees either the old state or the new one,
never a mix.
"""

from collections import deque
from typing import Iterable, NamedTuple, Optional
from uuid import UUID

from finplan.errors import NotFoundError
from finplan.models.audit import AuditEvent
from finplan.models.records import Expense, Income, Subscription
from finplan.storage.interface import AuditStorageInterface, LedgerStorageInterface


class _LedgerState(NamedTuple):
    incomes: list[Income]
    expenses: list[Expense]
    subscriptions: list[Subscription]


def _remove_identical(items: list, record: object) -> bool:
    """Remove `record` itself (not an equal copy) from `items`."""
    for position, item in enumerate(items):
        if item is record:
            del items[position]
            return True
    return False


def _require(record: object, expected: type) -> None:
    if not isinstance(record, expected):
        raise TypeError(
            f"Expected {expected.__name__}, got {type(record).__name__}"
        )


class InMemoryLedgerStore(LedgerStorageInterface):
    """
    Process-memory implementation of the ledger store.

    Collections are unordered from the ledger's point of view; insertion
    order is preserved so display sorting stays stable run to run.
    """

    def __init__(
        self,
        incomes: Iterable[Income] = (),
        expenses: Iterable[Expense] = (),
        subscriptions: Iterable[Subscription] = (),
    ):
        self._state = self._build_state(incomes, expenses, subscriptions)

    @staticmethod
    def _build_state(
        incomes: Iterable[Income],
        expenses: Iterable[Expense],
        subscriptions: Iterable[Subscription],
    ) -> _LedgerState:
        state = _LedgerState(list(incomes), list(expenses), list(subscriptions))
        for income in state.incomes:
            _require(income, Income)
        for expense in state.expenses:
            _require(expense, Expense)
        for subscription in state.subscriptions:
            _require(subscription, Subscription)
        return state

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def incomes(self) -> tuple[Income, ...]:
        return tuple(self._state.incomes)

    @property
    def expenses(self) -> tuple[Expense, ...]:
        return tuple(self._state.expenses)

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return tuple(self._state.subscriptions)

    def contains(self, record: object) -> bool:
        """True if this exact record is held by the store."""
        state = self._state
        return any(
            item is record
            for items in (state.incomes, state.expenses, state.subscriptions)
            for item in items
        )

    def counts(self) -> dict[str, int]:
        state = self._state
        return {
            "incomes": len(state.incomes),
            "expenses": len(state.expenses),
            "subscriptions": len(state.subscriptions),
        }

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(self, income: Income) -> None:
        _require(income, Income)
        self._state.incomes.append(income)

    def add_expense(self, expense: Expense) -> None:
        _require(expense, Expense)
        self._state.expenses.append(expense)

    def add_subscription(self, subscription: Subscription) -> None:
        _require(subscription, Subscription)
        self._state.subscriptions.append(subscription)

    def delete_income(self, income: Income) -> bool:
        return _remove_identical(self._state.incomes, income)

    def delete_expense(self, expense: Expense) -> bool:
        return _remove_identical(self._state.expenses, expense)

    def delete_subscription(self, subscription: Subscription) -> bool:
        return _remove_identical(self._state.subscriptions, subscription)

    def toggle_subscription_active(self, subscription: Subscription) -> bool:
        if not any(item is subscription for item in self._state.subscriptions):
            raise NotFoundError(
                f"Subscription '{getattr(subscription, 'name', subscription)}' is not in the ledger"
            )
        subscription.is_active = not subscription.is_active
        return subscription.is_active

    def replace_all(
        self,
        incomes: Iterable[Income],
        expenses: Iterable[Expense],
        subscriptions: Iterable[Subscription],
    ) -> None:
        # Build fully, then swap in one assignment
        new_state = self._build_state(incomes, expenses, subscriptions)
        self._state = new_state

    def clear(self) -> None:
        self.replace_all((), (), ())


class InMemoryAuditTrail(AuditStorageInterface):
    """
    Bounded, append-only audit event storage.

    Once `max_events` is reached the oldest events are dropped.
    """

    def __init__(self, max_events: int = 1000):
        if max_events < 1:
            raise ValueError("max_events must be at least 1")
        self._events: deque[AuditEvent] = deque(maxlen=max_events)

    def __len__(self) -> int:
        return len(self._events)

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    def get_recent_events(
        self,
        limit: Optional[int] = 100,
    ) -> list[AuditEvent]:
        events = list(reversed(self._events))
        if limit is None:
            return events
        return events[:limit]
