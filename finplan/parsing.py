"""
Text input helpers for front ends.

A console or web front end collects strings; these turn them into the
plain values the ledger takes, raising ParseError for text that cannot be
read and InputRangeError for values outside their domain.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation

from finplan.errors import InputRangeError, ParseError
from finplan.models.records import Category, to_day


# Invariant-culture number: optional sign, optional thousands groups, '.' decimals
_AMOUNT_PATTERN = re.compile(r"^[+-]?(\d{1,3}(,\d{3})+|\d+)(\.\d+)?$|^[+-]?\.\d+$")
_YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})$")


def parse_amount(text: str) -> Decimal:
    """
    Parse a positive money amount such as '12.34' or '1,250.00'.

    Raises:
        ParseError: If the text is blank or not a number
        InputRangeError: If the amount is zero or negative
    """
    if text is None or not text.strip():
        raise ParseError("Amount is required")
    cleaned = text.strip()
    if not _AMOUNT_PATTERN.match(cleaned):
        raise ParseError(f"'{text}' is not a number (use '.' for decimals, e.g. 12.34)")
    try:
        value = Decimal(cleaned.replace(",", ""))
    except InvalidOperation as e:
        raise ParseError(f"'{text}' is not a number") from e
    if value <= 0:
        raise InputRangeError(f"Amount must be greater than 0, got {value}")
    return value


def parse_day(text: str) -> date:
    """
    Parse an ISO 8601 date ('2025-09-01'); a full ISO datetime is accepted
    and its time discarded.

    Raises:
        ParseError: If the text is not an ISO date
    """
    if text is None or not text.strip():
        raise ParseError("Date is required (YYYY-MM-DD)")
    try:
        return to_day(text)
    except ValueError as e:
        raise ParseError(f"Invalid date '{text.strip()}', use YYYY-MM-DD") from e


def parse_year_month(text: str) -> tuple[int, int]:
    """
    Parse a report period such as '2025-09'.

    Raises:
        ParseError: If the text is not YYYY-MM
        InputRangeError: If the month is outside 1-12 or the year is 0
    """
    match = _YEAR_MONTH_PATTERN.match((text or "").strip())
    if match is None:
        raise ParseError(f"Invalid period '{text}', use YYYY-MM (e.g. 2025-09)")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise InputRangeError(f"Month must be between 1 and 12, got {month}")
    if year < 1:
        raise InputRangeError(f"Year must be between 1 and 9999, got {year}")
    return year, month


def parse_category(text: str) -> Category:
    """
    Parse a category given as its index ('0'-'4') or its name ('food').

    Raises:
        InputRangeError: If the text names no category
    """
    cleaned = (text or "").strip()
    try:
        if cleaned.isdigit():
            return Category.from_index(int(cleaned))
        return Category.from_name(cleaned)
    except ValueError as e:
        raise InputRangeError(str(e)) from e
