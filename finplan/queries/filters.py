"""
Query/Filter Engine

Pure selection and aggregation over record collections. Nothing here
touches the store: callers pass in the collections they want filtered,
and every function returns new lists or values.

Dates are compared on each record's effective date (`date` for incomes
and expenses, `start_date` for subscriptions); amounts on its effective
amount (`amount` or `monthly_price`).
"""

import datetime as dt
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterable, Sequence, TypeVar

from finplan.models.records import Category, Expense, Income, LedgerRecord, Subscription
from finplan.models.report import CategorySummary, RangeSummary, TimelineEntry


R = TypeVar("R", bound=LedgerRecord)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def by_date_range(records: Iterable[R], start: dt.date, end: dt.date) -> list[R]:
    """
    Records dated within [start, end], both bounds inclusive.

    An inverted range (start after end) selects nothing.
    """
    return [r for r in records if start <= r.effective_date <= end]


def by_category(expenses: Iterable[Expense], category: Category) -> list[Expense]:
    """Expenses filed under exactly `category`."""
    return [e for e in expenses if e.category == category]


def sum_amounts(records: Iterable[LedgerRecord]) -> Decimal:
    """Sum of effective amounts; Decimal 0 for no records."""
    return sum((r.effective_amount for r in records), ZERO)


def sorted_descending_by_date(records: Iterable[R]) -> list[R]:
    """
    Newest first.

    Records sharing a date keep their original relative order.
    """
    # sorted() is stable, including with reverse=True
    return sorted(records, key=lambda r: r.effective_date, reverse=True)


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, or 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def percentage(
    part: Decimal,
    total: Decimal,
    places: int = 2,
    rounding: str = ROUND_HALF_EVEN,
) -> Decimal:
    """
    part as a percentage of total, rounded to `places` decimal places.

    Returns 0 when total is 0.
    """
    if total == 0:
        return ZERO
    exponent = Decimal(1).scaleb(-places)
    return (safe_divide(part, total) * HUNDRED).quantize(exponent, rounding=rounding)


def range_summary(
    incomes: Iterable[Income],
    expenses: Iterable[Expense],
    start: dt.date,
    end: dt.date,
) -> RangeSummary:
    """Incomes and expenses within [start, end] in display order, with totals."""
    matching_incomes = sorted_descending_by_date(by_date_range(incomes, start, end))
    matching_expenses = sorted_descending_by_date(by_date_range(expenses, start, end))
    return RangeSummary(
        start=start,
        end=end,
        incomes=matching_incomes,
        expenses=matching_expenses,
        income_total=sum_amounts(matching_incomes),
        expense_total=sum_amounts(matching_expenses),
    )


def category_summary(expenses: Iterable[Expense], category: Category) -> CategorySummary:
    """Expenses of one category in display order, with their total."""
    matching = sorted_descending_by_date(by_category(expenses, category))
    return CategorySummary(
        category=category,
        expenses=matching,
        total=sum_amounts(matching),
    )


def _summarize(record: LedgerRecord) -> str:
    if isinstance(record, Income):
        return f"{record.source} {record.amount:.2f}"
    if isinstance(record, Expense):
        return f"{record.category.value} {record.amount:.2f} ({record.note})"
    if isinstance(record, Subscription):
        state = "active" if record.is_active else "inactive"
        return f"{record.name} {record.monthly_price:.2f} {state}"
    raise TypeError(f"Unsupported record type: {type(record).__name__}")


def timeline(
    incomes: Sequence[Income],
    expenses: Sequence[Expense],
    subscriptions: Sequence[Subscription],
) -> list[TimelineEntry]:
    """
    Every record as one entry, newest first.

    Subscriptions are placed on their start date. Among equal dates,
    incomes come before expenses before subscriptions, each in
    insertion order.
    """
    combined: list[LedgerRecord] = [*incomes, *expenses, *subscriptions]
    return [
        TimelineEntry(
            date=record.effective_date,
            kind=record.kind,
            summary=_summarize(record),
            amount=record.effective_amount,
            record=record,
        )
        for record in sorted_descending_by_date(combined)
    ]
