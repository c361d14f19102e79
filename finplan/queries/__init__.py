"""Query/filter package."""

from finplan.queries.filters import (
    by_category,
    by_date_range,
    category_summary,
    percentage,
    range_summary,
    safe_divide,
    sorted_descending_by_date,
    sum_amounts,
    timeline,
)

__all__ = [
    "by_category",
    "by_date_range",
    "category_summary",
    "percentage",
    "range_summary",
    "safe_divide",
    "sorted_descending_by_date",
    "sum_amounts",
    "timeline",
]
