"""
Import/Export Models

The staging collection and the result/issue objects of a bulk import.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from finplan.models.records import Expense, Income, Subscription


COLLECTIONS = ("incomes", "expenses", "subscriptions")


class ValidationIssue(BaseModel):
    """A single problem found while validating an import document."""

    collection: Optional[str] = Field(
        default=None,
        description="Collection the record belongs to; None for document-level issues"
    )
    index: Optional[int] = Field(
        default=None,
        ge=0,
        description="0-based position of the record within its collection"
    )
    field: str = Field(
        ...,
        description="Field with the issue"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )

    def describe(self) -> str:
        if self.collection is None:
            return f"{self.field}: {self.message}"
        return f"{self.collection}[{self.index}].{self.field}: {self.message}"


class StagedLedger(BaseModel):
    """
    Fully validated records waiting to replace the live store.

    Only ever built after every record has passed validation.
    """

    incomes: list[Income] = Field(default_factory=list)
    expenses: list[Expense] = Field(default_factory=list)
    subscriptions: list[Subscription] = Field(default_factory=list)

    def counts(self) -> dict[str, int]:
        return {
            "incomes": len(self.incomes),
            "expenses": len(self.expenses),
            "subscriptions": len(self.subscriptions),
        }


class ImportResult(BaseModel):
    """
    Outcome of one import attempt.

    On failure the live store was not touched and `error_kind` is
    'parse' or 'validation'.
    """

    success: bool
    error_kind: Optional[str] = Field(
        default=None,
        pattern="^(parse|validation)$"
    )
    error_message: Optional[str] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    incomes_imported: int = Field(default=0, ge=0)
    expenses_imported: int = Field(default=0, ge=0)
    subscriptions_imported: int = Field(default=0, ge=0)

    completed_at: dt.datetime = Field(
        default_factory=lambda: dt.datetime.now(dt.timezone.utc)
    )

    @property
    def total_imported(self) -> int:
        return self.incomes_imported + self.expenses_imported + self.subscriptions_imported

    @property
    def issue_count(self) -> int:
        return len(self.issues)
