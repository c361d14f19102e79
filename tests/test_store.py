"""
Tests for the in-memory ledger store and audit trail.
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from finplan.errors import NotFoundError
from finplan.models.audit import AuditEventBuilder
from finplan.models.records import Category, Expense, Income, Subscription
from finplan.storage import InMemoryAuditTrail, InMemoryLedgerStore


class TestLedgerStoreAdd:
    """Tests for appending records."""

    def test_empty_store(self):
        """Test that a new store holds nothing."""
        store = InMemoryLedgerStore()
        assert store.incomes == ()
        assert store.counts() == {"incomes": 0, "expenses": 0, "subscriptions": 0}

    def test_add_keeps_insertion_order(self, salary):
        """Test that records are appended in order."""
        store = InMemoryLedgerStore()
        bonus = Income(date=date(2025, 8, 1), source="Bonus", amount=5)
        store.add_income(salary)
        store.add_income(bonus)
        assert store.incomes == (salary, bonus)
        assert store.incomes[0] is salary

    def test_add_rejects_wrong_record_type(self, lunch):
        """Test that an expense cannot be added as an income."""
        store = InMemoryLedgerStore()
        with pytest.raises(TypeError):
            store.add_income(lunch)
        assert store.counts()["incomes"] == 0

    def test_snapshots_are_read_only(self, salary):
        """Test that callers cannot mutate the store through a snapshot."""
        store = InMemoryLedgerStore(incomes=[salary])
        snapshot = store.incomes
        assert isinstance(snapshot, tuple)
        store.add_income(Income(date=date(2025, 9, 2), source="Gift", amount=1))
        assert len(snapshot) == 1
        assert len(store.incomes) == 2

    def test_contains_matches_identity(self, salary):
        """Test that an equal copy is not considered held."""
        store = InMemoryLedgerStore(incomes=[salary])
        copy = Income(date=salary.date, source=salary.source, amount=salary.amount)
        assert store.contains(salary)
        assert not store.contains(copy)


class TestLedgerStoreDelete:
    """Tests for removing records."""

    def test_delete_removes_exact_record(self):
        """Test that deleting one of two equal records removes only that one."""
        first = Expense(date=date(2025, 9, 1), category="Food", amount=5, note="tea")
        second = Expense(date=date(2025, 9, 1), category="Food", amount=5, note="tea")
        store = InMemoryLedgerStore(expenses=[first, second])

        assert store.delete_expense(second) is True
        assert len(store.expenses) == 1
        assert store.expenses[0] is first

    def test_delete_missing_record_returns_false(self, salary):
        """Test that deleting an unheld record changes nothing."""
        store = InMemoryLedgerStore(incomes=[salary])
        stranger = Income(date=date(2025, 1, 1), source="Other", amount=1)
        assert store.delete_income(stranger) is False
        assert store.incomes == (salary,)

    def test_delete_subscription(self, music):
        """Test subscription removal."""
        store = InMemoryLedgerStore(subscriptions=[music])
        assert store.delete_subscription(music) is True
        assert store.subscriptions == ()


class TestLedgerStoreToggle:
    """Tests for toggling subscriptions."""

    def test_toggle_flips_and_returns_state(self, music):
        """Test toggling twice restores the original state."""
        store = InMemoryLedgerStore(subscriptions=[music])
        assert store.toggle_subscription_active(music) is False
        assert music.is_active is False
        assert store.toggle_subscription_active(music) is True

    def test_toggle_unheld_subscription(self, music):
        """Test that toggling a subscription from elsewhere is refused."""
        store = InMemoryLedgerStore()
        with pytest.raises(NotFoundError):
            store.toggle_subscription_active(music)
        assert music.is_active is True


class TestLedgerStoreReplace:
    """Tests for wholesale replacement."""

    def test_replace_all_discards_previous_contents(self, september_store, music):
        """Test that replace does not merge."""
        gift = Income(date=date(2024, 12, 24), source="Gift", amount=20)
        september_store.replace_all([gift], [], [])
        assert september_store.incomes == (gift,)
        assert september_store.expenses == ()
        assert september_store.subscriptions == ()
        assert not september_store.contains(music)

    def test_replace_all_with_bad_input_keeps_old_state(self, september_store, salary):
        """Test that a failed replace leaves the store untouched."""
        before = september_store.counts()
        with pytest.raises(TypeError):
            september_store.replace_all([salary, "not a record"], [], [])
        assert september_store.counts() == before
        assert september_store.contains(salary)

    def test_replace_all_copies_input_lists(self, salary):
        """Test that later changes to the caller's list do not leak in."""
        store = InMemoryLedgerStore()
        incomes = [salary]
        store.replace_all(incomes, [], [])
        incomes.clear()
        assert store.incomes == (salary,)

    def test_clear(self, september_store):
        """Test clearing every collection."""
        september_store.clear()
        assert september_store.counts() == {"incomes": 0, "expenses": 0, "subscriptions": 0}


class TestInMemoryAuditTrail:
    """Tests for the bounded audit trail."""

    def test_recent_events_newest_first(self):
        """Test ordering of recent events."""
        trail = InMemoryAuditTrail()
        first = AuditEventBuilder.subscription_toggled("A", True)
        second = AuditEventBuilder.subscription_toggled("B", False)
        trail.append_event(first)
        trail.append_event(second)
        assert trail.get_recent_events() == [second, first]
        assert trail.get_recent_events(limit=1) == [second]

    def test_oldest_events_dropped(self):
        """Test the max_events bound."""
        trail = InMemoryAuditTrail(max_events=2)
        events = [AuditEventBuilder.subscription_toggled(str(i), True) for i in range(3)]
        for event in events:
            trail.append_event(event)
        assert len(trail) == 2
        assert trail.get_recent_events(limit=None) == [events[2], events[1]]

    def test_events_by_correlation_id(self):
        """Test correlation lookup."""
        trail = InMemoryAuditTrail()
        correlation_id = uuid4()
        related = AuditEventBuilder.import_completed({"incomes": 1}, correlation_id)
        trail.append_event(related)
        trail.append_event(AuditEventBuilder.export_completed({"incomes": 1}))
        assert trail.get_events_by_correlation_id(correlation_id) == [related]

    def test_rejects_non_positive_bound(self):
        """Test that the trail must hold at least one event."""
        with pytest.raises(ValueError):
            InMemoryAuditTrail(max_events=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
