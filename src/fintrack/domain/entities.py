"""Domain model entities for fintrack.

These are pure data classes representing business concepts, independent of
database schema. Services hand these out instead of ORM rows, so nothing
outside the database layer can mutate a balance by accident.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

ACCOUNT_KINDS = ("checking", "savings", "credit")

DEBIT = "debit"
CREDIT = "credit"
TRANSFER_IN = "transfer_in"
TRANSFER_OUT = "transfer_out"
TRANSACTION_TYPES = (DEBIT, CREDIT, TRANSFER_IN, TRANSFER_OUT)
TRANSFER_TYPES = (TRANSFER_IN, TRANSFER_OUT)

# Direction of each transaction type relative to the account balance
BALANCE_SIGNS = {
    DEBIT: -1,
    CREDIT: 1,
    TRANSFER_IN: 1,
    TRANSFER_OUT: -1,
}

RECURRING_NONE = "none"
RECURRING_INSTALLMENT = "installment"
RECURRING_ADVANCED = "advanced"
RECURRING_TYPES = (RECURRING_NONE, RECURRING_INSTALLMENT, RECURRING_ADVANCED)

FREQUENCIES = ("daily", "weekly", "monthly", "yearly")


def signed_amount(transaction_type: str, amount: Decimal) -> Decimal:
    """Return the balance contribution of an entry of the given type."""
    return amount * BALANCE_SIGNS[transaction_type]


@dataclass(frozen=True)
class User:
    """User (tenant) domain entity."""

    id: int
    name: str
    email: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account domain entity.

    ``initial_balance`` is the seed; ``balance`` is the cached aggregate of
    the seed plus every ledger entry on the account.
    """

    id: int
    user_id: int
    name: str
    kind: str
    initial_balance: Decimal
    balance: Decimal
    color: str
    last_four_digits: Optional[str]
    is_active: bool
    sort_order: int
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Expense category domain entity."""

    id: int
    user_id: int
    name: str
    icon: str
    color: str
    created_at: datetime


@dataclass(frozen=True)
class EntryDraft:
    """An unsaved ledger entry, as produced by the recurrence expander."""

    description: str
    amount: Decimal
    date: date
    account_id: int
    transaction_type: str
    category_id: Optional[int] = None
    is_recurring: bool = False
    recurring_type: str = RECURRING_NONE
    recurring_frequency: Optional[str] = None
    recurring_interval: int = 1
    installment_total: Optional[int] = None
    installment_current: Optional[int] = None
    recurring_end_date: Optional[date] = None


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry domain entity (expense, income or one half of a transfer)."""

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

    @property
    def signed_amount(self) -> Decimal:
        """Balance contribution of this entry."""
        return signed_amount(self.transaction_type, self.amount)

    @property
    def is_transfer(self) -> bool:
        return self.transaction_type in TRANSFER_TYPES


@dataclass(frozen=True)
class Transfer:
    """Transfer header shared by both halves of a transfer pair."""

    id: int
    user_id: int
    description: str
    amount: Decimal
    date: date
    from_account_id: int
    to_account_id: int
    created_at: datetime


@dataclass(frozen=True)
class TransferPair:
    """A recorded transfer with its two ledger entries."""

    transfer: Transfer
    out_entry: LedgerEntry
    in_entry: LedgerEntry


@dataclass(frozen=True)
class Goal:
    """Savings goal domain entity."""

    id: int
    user_id: int
    name: str
    description: Optional[str]
    target_amount: Decimal
    current_amount: Decimal
    target_date: Optional[date]
    is_completed: bool
    color: str
    icon: str
    created_at: datetime


@dataclass(frozen=True)
class GoalProgress:
    """Derived progress of a goal over its linked accounts."""

    goal_id: int
    current_amount: Decimal
    percent: Decimal


@dataclass(frozen=True)
class Roommate:
    """Roommate domain entity."""

    id: int
    user_id: int
    name: str
    email: Optional[str]
    phone: Optional[str]


@dataclass(frozen=True)
class BillSplitParticipant:
    """One share of a bill split. ``roommate_id`` None is the user's own share."""

    id: int
    bill_split_id: int
    roommate_id: Optional[int]
    amount: Decimal
    is_paid: bool
    paid_at: Optional[datetime]


@dataclass(frozen=True)
class BillSplit:
    """Bill split domain entity with its participant shares."""

    id: int
    created_by: int
    title: str
    total_amount: Decimal
    description: Optional[str]
    created_at: datetime
    participants: tuple[BillSplitParticipant, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Statistics:
    """Dashboard totals for one user."""

    total_balance: Decimal
    monthly_expenses: Decimal
    pending_splits: Decimal
    savings: Decimal


@dataclass(frozen=True)
class CategorySpending:
    """Debits in one category over a period, with their share of all debits."""

    category_id: Optional[int]
    name: str
    amount: Decimal
    percent: Decimal
