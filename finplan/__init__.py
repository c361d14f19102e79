"""
finplan - Personal Finance Planner

An in-memory, single-user ledger of incomes, expenses and monthly
subscriptions, with filters, a monthly report and JSON import/export.

DESIGN PRINCIPLES:
1. Records are validated when they are built, never after
2. Reads are pure functions over the store
3. Import is all-or-nothing
4. Every mutation is audited
"""

__version__ = "1.0.0"
__author__ = "finplan maintainers"
