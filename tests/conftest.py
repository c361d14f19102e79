"""Shared fixtures for the finplan test suite."""

from datetime import date
from decimal import Decimal

import pytest

from finplan.config import get_settings
from finplan.models.records import Category, Expense, Income, Subscription
from finplan.storage import InMemoryLedgerStore


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def salary():
    return Income(date=date(2025, 9, 1), source="Salary", amount=Decimal("1000"))


@pytest.fixture
def lunch():
    return Expense(date=date(2025, 9, 5), category=Category.FOOD, amount=Decimal("50"), note="lunch")


@pytest.fixture
def movie():
    return Expense(date=date(2025, 9, 10), category=Category.FUN, amount=Decimal("30"), note="movie")


@pytest.fixture
def music():
    return Subscription(name="Music", monthly_price=Decimal("10"), start_date=date(2025, 8, 1))


@pytest.fixture
def september_store(salary, lunch, movie, music):
    """The September 2025 ledger: one income, two expenses, one active subscription."""
    return InMemoryLedgerStore(
        incomes=[salary],
        expenses=[lunch, movie],
        subscriptions=[music],
    )
