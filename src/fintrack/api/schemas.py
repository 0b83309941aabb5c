"""Request and response models for the ledger API.

Payloads use camelCase keys. Money travels as decimal strings with two
fraction digits; binary floats are refused.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_serializer, model_validator
from pydantic.alias_generators import to_camel

from fintrack.domain.entities import RECURRING_INSTALLMENT, RECURRING_NONE
from fintrack.domain.recurrence import MAX_OCCURRENCES
from fintrack.utils.amount_parser import format_amount, to_positive_money
from fintrack.utils.date_parser import parse_date


def _positive_money(value) -> Decimal:
    return to_positive_money(value)


Money = Annotated[Decimal, BeforeValidator(_positive_money)]
RequestDate = Annotated[date, BeforeValidator(parse_date)]
EntryType = Literal["debit", "credit"]
RecurringType = Literal["none", "installment", "advanced"]
Frequency = Literal["daily", "weekly", "monthly", "yearly"]


class CamelModel(BaseModel):
    """Base model accepting camelCase keys (and snake_case field names)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class EntryRequest(CamelModel):
    """Body of a new expense/income entry, possibly recurring."""

    description: str = Field(..., min_length=1)
    amount: Money
    date: RequestDate
    account_id: int
    transaction_type: EntryType
    category_id: Optional[int] = None
    is_recurring: bool = False
    recurring_type: RecurringType = RECURRING_NONE
    recurring_frequency: Optional[Frequency] = None
    recurring_interval: int = Field(default=1, ge=1)
    installment_total: Optional[int] = Field(default=None, ge=1, le=MAX_OCCURRENCES)
    recurring_end_date: Optional[RequestDate] = None

    @model_validator(mode="after")
    def resolve_recurrence(self) -> "EntryRequest":
        # A recurring request without a type is an installment plan
        if self.is_recurring and self.recurring_type == RECURRING_NONE:
            self.recurring_type = RECURRING_INSTALLMENT
        if self.recurring_type != RECURRING_NONE:
            self.is_recurring = True
        return self


class EntryUpdateRequest(CamelModel):
    """Partial update of an expense/income entry."""

    description: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Money] = None
    date: Optional[RequestDate] = None
    account_id: Optional[int] = None
    category_id: Optional[int] = None
    transaction_type: Optional[EntryType] = None


class TransferRequest(CamelModel):
    """Body of a transfer between two accounts."""

    description: str = Field(..., min_length=1)
    amount: Money
    date: RequestDate
    from_account_id: int
    to_account_id: int
    category_id: Optional[int] = None


class EntryResponse(CamelModel):
    """A stored ledger entry as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    account_id: int
    category_id: Optional[int]
    description: str
    amount: Decimal
    date: date
    transaction_type: str
    transfer_id: Optional[int]
    is_recurring: bool
    recurring_type: str
    recurring_frequency: Optional[str]
    recurring_interval: int
    installment_total: Optional[int]
    installment_current: Optional[int]
    recurring_end_date: Optional[date]
    parent_expense_id: Optional[int]
    created_at: datetime

    @field_serializer("amount")
    def serialize_amount(self, amount: Decimal) -> str:
        return format_amount(amount)


class TransferResponse(CamelModel):
    transfer_id: int
    out_entry: EntryResponse
    in_entry: EntryResponse


class GoalProgressResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    goal_id: int
    current_amount: Decimal
    percent: Decimal

    @field_serializer("current_amount", "percent")
    def serialize_decimal(self, value: Decimal) -> str:
        return format_amount(value)
