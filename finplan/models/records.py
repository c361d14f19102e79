"""
Ledger Records

These models define the three kinds of financial record the ledger holds:
incomes, expenses and subscriptions. They are designed to:
1. Reject invalid values at construction time (no invalid-but-stored state)
2. Keep financial facts immutable once recorded
3. Serialize to the stable camelCase wire names used by import/export

DESIGN DECISION: Records carry no IDs. Two records with identical field
values are still two records; the store matches by identity.
"""

import datetime as dt
from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    StrictBool,
    field_serializer,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from finplan.errors import ValidationError


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Expense categories.

    Member order is significant: it defines the 0-based index a front end
    (and older exports) may use instead of the name.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    FUN = "Fun"
    SCHOOL = "School"
    OTHER = "Other"

    @classmethod
    def from_index(cls, index: int) -> "Category":
        members = list(cls)
        if not 0 <= index < len(members):
            raise ValueError(
                f"Category index must be between 0 and {len(members) - 1}, got {index}"
            )
        return members[index]

    @classmethod
    def from_name(cls, name: str) -> "Category":
        """Look up a category by name, ignoring case and surrounding whitespace."""
        wanted = name.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        allowed = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown category '{name}'. Allowed: {allowed}")

    @property
    def position(self) -> int:
        return list(type(self)).index(self)


# =============================================================================
# FIELD HELPERS
# =============================================================================

def to_day(value: Any) -> dt.date:
    """
    Normalize a date-like value to a calendar day.

    Accepts date, datetime (time-of-day discarded) and ISO 8601 strings,
    either a plain date or a full datetime.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return dt.date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(text).date()
        except ValueError:
            raise ValueError(f"'{value}' is not an ISO 8601 date")
    raise ValueError(f"Expected a calendar date, got {type(value).__name__}")


def _day_to_text(value: dt.date) -> str:
    return value.isoformat()


Day = Annotated[
    dt.date,
    BeforeValidator(to_day),
    PlainSerializer(_day_to_text, return_type=str),
]

# Dumped as Decimal; the JSON writer emits it as an exact number
Money = Decimal


# =============================================================================
# RECORD MODELS
# =============================================================================

class LedgerRecord(BaseModel, ABC):
    """
    Base for all ledger records.

    Construction and assignment failures surface as finplan's
    ValidationError rather than pydantic's.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    kind: ClassVar[str] = "record"

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(type(self).__name__, exc) from exc

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as exc:
            raise ValidationError.from_pydantic(type(self).__name__, exc) from exc

    @property
    @abstractmethod
    def effective_date(self) -> dt.date:
        """The day this record is filed under."""
        pass

    @property
    @abstractmethod
    def effective_amount(self) -> Decimal:
        """The amount this record contributes to totals."""
        pass

    def to_wire(self) -> dict[str, Any]:
        """
        Field values under their export names.

        Dates become ISO 8601 text and categories their names; amounts
        stay Decimal so no digits are lost on the way out.
        """
        return self.model_dump(by_alias=True)


class Income(LedgerRecord):
    """Money received on a given day."""
    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str] = "income"

    date: Day = Field(
        ...,
        description="Day the income was received"
    )
    source: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Where the money came from"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Amount received"
    )

    @property
    def effective_date(self) -> dt.date:
        return self.date

    @property
    def effective_amount(self) -> Decimal:
        return self.amount


class Expense(LedgerRecord):
    """Money spent on a given day, filed under one category."""
    model_config = ConfigDict(frozen=True)

    kind: ClassVar[str] = "expense"

    date: Day = Field(
        ...,
        description="Day the money was spent"
    )
    category: Category = Field(
        ...,
        description="Expense category"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    note: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the money was spent on"
    )

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> Category:
        """Accept a Category, its name (any case) or its 0-based index."""
        if isinstance(v, Category):
            return v
        if isinstance(v, bool):
            raise ValueError("Category must be a name or an index, not a boolean")
        if isinstance(v, int):
            return Category.from_index(v)
        if isinstance(v, str):
            return Category.from_name(v)
        raise ValueError(f"Category must be a name or an index, got {type(v).__name__}")

    @field_serializer("category")
    def serialize_category(self, category: Category) -> str:
        return category.value

    @property
    def effective_date(self) -> dt.date:
        return self.date

    @property
    def effective_amount(self) -> Decimal:
        return self.amount


class Subscription(LedgerRecord):
    """
    A recurring monthly charge.

    Only `is_active` may change after construction; name, price and
    start date are frozen.
    """
    model_config = ConfigDict(validate_assignment=True)

    kind: ClassVar[str] = "subscription"

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        frozen=True,
        description="Subscription name"
    )
    monthly_price: Money = Field(
        ...,
        gt=0,
        frozen=True,
        description="Price charged every month"
    )
    start_date: Day = Field(
        ...,
        frozen=True,
        description="First day the subscription is charged"
    )
    is_active: StrictBool = Field(
        default=True,
        description="Whether the subscription currently counts towards reports"
    )

    @property
    def effective_date(self) -> dt.date:
        return self.start_date

    @property
    def effective_amount(self) -> Decimal:
        return self.monthly_price


AnyRecord = Union[Income, Expense, Subscription]
