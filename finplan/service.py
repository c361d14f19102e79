"""
Ledger Service for finplan

This module ties the components together for a presentation layer:
- Store mutations (add, delete, toggle) with auditing
- Display views and filters
- Monthly report
- JSON export/import

DESIGN DECISION: Front ends address records by their 1-based position
in a display view. The service resolves a position against the same
sorted view it hands out and then acts on that record object itself, so
two records with identical values can never be confused.
"""

import datetime as dt
from decimal import Decimal
from typing import Callable, Optional, Sequence, TypeVar, Union

from finplan.audit import AuditLogger, create_correlation_id
from finplan.config import get_settings
from finplan.errors import InputRangeError, NotFoundError, ValidationError
from finplan.models.records import Category, Expense, Income, LedgerRecord, Subscription
from finplan.models.report import CategorySummary, MonthlyReport, RangeSummary, TimelineEntry
from finplan.models.transfer import ImportResult
from finplan.parsing import parse_year_month
from finplan.queries import filters
from finplan.reports import MonthlyReportGenerator
from finplan.storage import InMemoryAuditTrail, InMemoryLedgerStore, LedgerStorageInterface
from finplan.transfer import LedgerTransfer


R = TypeVar("R", bound=LedgerRecord)

DateLike = Union[dt.date, dt.datetime, str]
AmountLike = Union[Decimal, int, float, str]


def _describe(record: LedgerRecord) -> dict:
    return record.model_dump(mode="json", by_alias=True)


class LedgerService:
    """
    Facade over the ledger for a single front end.

    All methods are synchronous and finish before returning. Errors are
    finplan errors (ValidationError, InputRangeError, NotFoundError);
    import failures are reported in the ImportResult instead.
    """

    def __init__(
        self,
        storage: Optional[LedgerStorageInterface] = None,
        report_generator: Optional[MonthlyReportGenerator] = None,
        transfer: Optional[LedgerTransfer] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage if storage is not None else InMemoryLedgerStore()
        self._reports = report_generator or MonthlyReportGenerator(self._storage)
        self._transfer = transfer or LedgerTransfer(self._storage)
        self._audit_logger = audit_logger

    @property
    def storage(self) -> LedgerStorageInterface:
        return self._storage

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    # =========================================================================
    # ADD
    # =========================================================================

    def _build(self, entity_type: str, factory: Callable[[], R]) -> R:
        try:
            return factory()
        except ValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_record_rejected(entity_type, e.issues, str(e))
            raise

    def add_income(self, date: DateLike, source: str, amount: AmountLike) -> Income:
        """
        Record an income.

        Raises:
            ValidationError: If any field is invalid; nothing is stored
        """
        income = self._build(
            "income",
            lambda: Income(date=date, source=source, amount=amount),
        )
        self._storage.add_income(income)
        if self._audit_logger:
            self._audit_logger.log_record_added("income", _describe(income))
        return income

    def add_expense(
        self,
        date: DateLike,
        category: Union[Category, str, int],
        amount: AmountLike,
        note: str,
    ) -> Expense:
        """
        Record an expense.

        Raises:
            ValidationError: If any field is invalid; nothing is stored
        """
        expense = self._build(
            "expense",
            lambda: Expense(date=date, category=category, amount=amount, note=note),
        )
        self._storage.add_expense(expense)
        if self._audit_logger:
            self._audit_logger.log_record_added("expense", _describe(expense))
        return expense

    def add_subscription(
        self,
        name: str,
        monthly_price: AmountLike,
        start_date: DateLike,
        is_active: bool = True,
    ) -> Subscription:
        """
        Record a subscription.

        Raises:
            ValidationError: If any field is invalid; nothing is stored
        """
        subscription = self._build(
            "subscription",
            lambda: Subscription(
                name=name,
                monthly_price=monthly_price,
                start_date=start_date,
                is_active=is_active,
            ),
        )
        self._storage.add_subscription(subscription)
        if self._audit_logger:
            self._audit_logger.log_record_added("subscription", _describe(subscription))
        return subscription

    # =========================================================================
    # DISPLAY VIEWS
    # =========================================================================

    def list_incomes(self) -> list[Income]:
        """Incomes, newest first."""
        return filters.sorted_descending_by_date(self._storage.incomes)

    def list_expenses(self) -> list[Expense]:
        """Expenses, newest first."""
        return filters.sorted_descending_by_date(self._storage.expenses)

    def list_subscriptions(self) -> list[Subscription]:
        """Subscriptions, latest start date first."""
        return filters.sorted_descending_by_date(self._storage.subscriptions)

    # =========================================================================
    # DELETE / TOGGLE BY DISPLAY POSITION
    # =========================================================================

    @staticmethod
    def _resolve(view: Sequence[R], position: int, entity_type: str) -> R:
        """The record at 1-based `position` of a display view."""
        if isinstance(position, bool) or not isinstance(position, int):
            raise InputRangeError(f"Position must be a whole number, got {position!r}")
        if not 1 <= position <= len(view):
            if not view:
                raise InputRangeError(f"There are no {entity_type} records")
            raise InputRangeError(
                f"No {entity_type} #{position}; choose between 1 and {len(view)}"
            )
        return view[position - 1]

    def _delete_at(
        self,
        view: Sequence[R],
        position: int,
        entity_type: str,
        delete: Callable[[R], bool],
    ) -> R:
        record = self._resolve(view, position, entity_type)
        if not delete(record):
            raise NotFoundError(f"{entity_type.capitalize()} #{position} is no longer in the ledger")
        if self._audit_logger:
            self._audit_logger.log_record_deleted(entity_type, position, _describe(record))
        return record

    def delete_income_at(self, position: int) -> Income:
        """
        Delete the income shown at `position` in list_incomes().

        Raises:
            InputRangeError: If no income is shown at that position
        """
        return self._delete_at(self.list_incomes(), position, "income", self._storage.delete_income)

    def delete_expense_at(self, position: int) -> Expense:
        """Delete the expense shown at `position` in list_expenses()."""
        return self._delete_at(self.list_expenses(), position, "expense", self._storage.delete_expense)

    def delete_subscription_at(self, position: int) -> Subscription:
        """Delete the subscription shown at `position` in list_subscriptions()."""
        return self._delete_at(
            self.list_subscriptions(), position, "subscription", self._storage.delete_subscription
        )

    def toggle_subscription_at(self, position: int) -> Subscription:
        """
        Flip the active flag of the subscription shown at `position`.

        Returns:
            The toggled subscription
        """
        subscription = self._resolve(self.list_subscriptions(), position, "subscription")
        is_active = self._storage.toggle_subscription_active(subscription)
        if self._audit_logger:
            self._audit_logger.log_subscription_toggled(subscription.name, is_active)
        return subscription

    # =========================================================================
    # FILTERS AND REPORTS
    # =========================================================================

    def filter_by_date_range(self, start: dt.date, end: dt.date) -> RangeSummary:
        """Incomes and expenses within [start, end], with totals."""
        return filters.range_summary(self._storage.incomes, self._storage.expenses, start, end)

    def filter_by_category(self, category: Category) -> CategorySummary:
        """Expenses of one category, with their total."""
        return filters.category_summary(self._storage.expenses, category)

    def timeline(self) -> list[TimelineEntry]:
        """Every record, newest first."""
        return filters.timeline(
            self._storage.incomes,
            self._storage.expenses,
            self._storage.subscriptions,
        )

    def monthly_report(self, year: int, month: int) -> MonthlyReport:
        """
        Report for one month.

        Raises:
            InputRangeError: If the month is outside 1-12
        """
        report = self._reports.generate(year, month)
        if self._audit_logger:
            self._audit_logger.log_report_generated(
                year, month, str(report.net), report.expense_count
            )
        return report

    def monthly_report_for(self, period: str) -> MonthlyReport:
        """
        Report for a 'YYYY-MM' period string.

        Raises:
            ParseError: If the text is not YYYY-MM
            InputRangeError: If the month is outside 1-12
        """
        year, month = parse_year_month(period)
        return self.monthly_report(year, month)

    # =========================================================================
    # IMPORT / EXPORT
    # =========================================================================

    def export_json(self, indent: Optional[int] = None) -> str:
        """The whole ledger as JSON text."""
        text = self._transfer.export_json(indent=indent)
        if self._audit_logger:
            self._audit_logger.log_export_completed(self._storage.counts())
        return text

    def import_json(self, text: str) -> ImportResult:
        """
        Replace the whole ledger with the records in `text`.

        Nothing changes unless every record is valid.
        """
        correlation_id = create_correlation_id()
        result = self._transfer.import_json(text)

        if self._audit_logger:
            if result.success:
                self._audit_logger.log_import_completed(
                    {
                        "incomes": result.incomes_imported,
                        "expenses": result.expenses_imported,
                        "subscriptions": result.subscriptions_imported,
                    },
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_import_failed(
                    error_kind=result.error_kind,
                    error_message=result.error_message,
                    issue_count=result.issue_count,
                    correlation_id=correlation_id,
                )
        return result


def create_ledger_service(with_audit_trail: bool = True) -> LedgerService:
    """
    Factory function to create a fully wired in-memory ledger.

    Args:
        with_audit_trail: Keep audit events in memory (bounded by the
                    configured audit_trail_limit) as well as logging them.
    """
    trail = None
    if with_audit_trail:
        trail = InMemoryAuditTrail(max_events=get_settings().app.audit_trail_limit)

    return LedgerService(
        storage=InMemoryLedgerStore(),
        audit_logger=AuditLogger(trail),
    )
