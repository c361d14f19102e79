"""
Monthly Report Generator

Computes a month's aggregate figures from the store: totals, net,
per-category breakdown, largest expense and average daily spend.

The generator assumes a (year, month) pair a front end has already
parsed (see finplan.parsing.parse_year_month); an out-of-range month is
rejected, never clamped.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from finplan.config import ReportSettings, get_settings
from finplan.errors import InputRangeError
from finplan.models.records import Category, Expense
from finplan.models.report import CategoryBreakdown, MonthlyReport
from finplan.queries.filters import (
    by_date_range,
    percentage,
    safe_divide,
    sum_amounts,
)
from finplan.storage.interface import LedgerStorageInterface


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """
    First and last day of a month.

    Raises:
        InputRangeError: If month is outside 1-12 or year outside 1-9999
    """
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InputRangeError(f"Month must be between 1 and 12, got {month!r}")
    if isinstance(year, bool) or not isinstance(year, int) or not 1 <= year <= 9999:
        raise InputRangeError(f"Year must be between 1 and 9999, got {year!r}")

    start = date(year, month, 1)
    if year == 9999 and month == 12:
        # start + 1 month would overflow date.max
        return start, date.max
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


def largest_expense(expenses: list[Expense]) -> Optional[Expense]:
    """The expense with the highest amount; the first one wins ties."""
    largest = None
    for expense in expenses:
        if largest is None or expense.amount > largest.amount:
            largest = expense
    return largest


class MonthlyReportGenerator:
    """
    Builds MonthlyReport values from a ledger store.

    Subscriptions have no end date: an active subscription counts towards
    every month from its start date on, using its current active flag.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        settings: Optional[ReportSettings] = None,
    ):
        self._storage = storage
        self._settings = settings or get_settings().report

    def generate(self, year: int, month: int) -> MonthlyReport:
        """
        Compute the report for one month.

        Raises:
            InputRangeError: If the month or year is out of range
        """
        start, end = month_bounds(year, month)
        days = (end - start).days + 1

        incomes = by_date_range(self._storage.incomes, start, end)
        expenses = by_date_range(self._storage.expenses, start, end)
        active_subscriptions = [
            s for s in self._storage.subscriptions
            if s.is_active and s.start_date <= end
        ]

        income_total = sum_amounts(incomes)
        expense_total = sum_amounts(expenses)
        subscription_total = sum_amounts(active_subscriptions)

        return MonthlyReport(
            year=year,
            month=month,
            period_start=start,
            period_end=end,
            days_in_period=days,
            income_total=income_total,
            expense_total=expense_total,
            subscription_total=subscription_total,
            net=income_total - expense_total - subscription_total,
            category_breakdown=self._breakdown(expenses, expense_total),
            largest_expense=largest_expense(expenses),
            average_daily_spend=safe_divide(expense_total, Decimal(days)),
            income_count=len(incomes),
            expense_count=len(expenses),
            active_subscription_count=len(active_subscriptions),
        )

    def _breakdown(
        self,
        expenses: list[Expense],
        expense_total: Decimal,
    ) -> list[CategoryBreakdown]:
        """Per-category totals in first-encountered order; absent categories omitted."""
        groups: dict[Category, list[Expense]] = {}
        for expense in expenses:
            groups.setdefault(expense.category, []).append(expense)

        result = []
        for category, items in groups.items():
            total = sum_amounts(items)
            result.append(CategoryBreakdown(
                category=category,
                total=total,
                percentage=percentage(
                    total,
                    expense_total,
                    places=self._settings.percentage_places,
                    rounding=self._settings.rounding_mode,
                ),
                expense_count=len(items),
            ))
        return result
