"""Report generation package."""

from finplan.reports.monthly import MonthlyReportGenerator, largest_expense, month_bounds

__all__ = ["MonthlyReportGenerator", "largest_expense", "month_bounds"]
