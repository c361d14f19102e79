"""
Report and Query Result Models

Plain value objects returned by the query engine and the report
generator. A front end renders them; nothing here performs I/O.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from finplan.models.records import Category, Expense, Income, Subscription


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class CategoryBreakdown(BaseModel):
    """Expense total and share of one category within a period."""
    model_config = ConfigDict(frozen=True)

    category: Category
    total: Decimal = Field(
        ...,
        ge=0,
        description="Sum of the category's expenses in the period"
    )
    percentage: Decimal = Field(
        ...,
        ge=0,
        le=100,
        description="Share of the period's expense total, rounded"
    )
    expense_count: int = Field(ge=0)


class MonthlyReport(BaseModel):
    """
    Aggregate figures for one calendar month.

    The period is inclusive on both ends. `largest_expense` is None
    when the month has no expenses.
    """
    model_config = ConfigDict(frozen=True)

    year: int
    month: int = Field(ge=1, le=12)
    period_start: dt.date
    period_end: dt.date
    days_in_period: int = Field(ge=0)

    income_total: Decimal
    expense_total: Decimal
    subscription_total: Decimal
    net: Decimal

    category_breakdown: list[CategoryBreakdown] = Field(default_factory=list)
    largest_expense: Optional[Expense] = None
    average_daily_spend: Decimal

    income_count: int = Field(ge=0)
    expense_count: int = Field(ge=0)
    active_subscription_count: int = Field(ge=0)

    generated_at: dt.datetime = Field(default_factory=_utcnow)

    @property
    def has_expenses(self) -> bool:
        return self.expense_count > 0

    def breakdown_for(self, category: Category) -> Optional[CategoryBreakdown]:
        """The breakdown entry for `category`, or None if it had no expenses."""
        for entry in self.category_breakdown:
            if entry.category == category:
                return entry
        return None


class RangeSummary(BaseModel):
    """Incomes and expenses dated within an inclusive range, with totals."""

    start: dt.date
    end: dt.date
    incomes: list[Income] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    income_total: Decimal
    expense_total: Decimal


class CategorySummary(BaseModel):
    """All expenses of one category, with their total."""

    category: Category
    expenses: list[Expense] = Field(default_factory=list)
    total: Decimal


class TimelineEntry(BaseModel):
    """One record of any kind, flattened for a combined date-ordered view."""

    date: dt.date
    kind: str = Field(
        ...,
        pattern="^(income|expense|subscription)$"
    )
    summary: str
    amount: Decimal
    record: Union[Income, Expense, Subscription]
