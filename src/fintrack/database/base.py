"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from fintrack.domain.entities import (
    User,
    Account,
    Category,
    EntryDraft,
    LedgerEntry,
    Transfer,
    Goal,
    Roommate,
    BillSplit,
    BillSplitParticipant,
)


class Database(ABC):
    """Abstract database interface for fintrack.

    Every mutating method takes part in the surrounding ``atomic()`` block
    when there is one and commits on its own otherwise.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Transaction boundaries and locking
    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Group the enclosed operations into one all-or-nothing unit.

        Nested blocks join the outermost one; only the outermost commits.
        Any exception rolls the whole unit back.
        """
        pass

    @abstractmethod
    def lock_accounts(self, *account_ids: int) -> AbstractContextManager:
        """Serialize balance writers on the given accounts.

        Locks are taken in ascending account id order and are re-entrant
        for the holding thread.
        """
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str, email: Optional[str] = None) -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        user_id: int,
        name: str,
        kind: str,
        initial_balance: Decimal,
        color: str,
        last_four_digits: Optional[str] = None,
        is_active: bool = True,
        sort_order: int = 0,
    ) -> int:
        """Create a new account whose balance starts at its seed. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: int, include_inactive: bool = True) -> list[Account]:
        """List a user's accounts, active first, then by sort order."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        kind: Optional[str] = None,
        color: Optional[str] = None,
        last_four_digits: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update descriptive account fields. Never touches the balance."""
        pass

    @abstractmethod
    def set_sort_orders(self, orders: dict[int, int]) -> None:
        """Rewrite sort_order for the given {account_id: sort_order} mapping."""
        pass

    @abstractmethod
    def set_initial_balance(self, account_id: int, initial_balance: Decimal) -> None:
        """Rewrite the seed balance of an account."""
        pass

    @abstractmethod
    def adjust_balance(self, account_id: int, delta: Decimal) -> Decimal:
        """Add ``delta`` to the cached balance. Returns the new balance."""
        pass

    @abstractmethod
    def set_balance(self, account_id: int, balance: Decimal) -> None:
        """Overwrite the cached balance."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_entry_count(self, account_id: int) -> int:
        """Get count of ledger entries referencing an account."""
        pass

    @abstractmethod
    def get_account_goal_count(self, account_id: int) -> int:
        """Get count of goal links referencing an account."""
        pass

    @abstractmethod
    def next_sort_order(self, user_id: int) -> int:
        """Sort order that places a new account after the user's existing ones."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, user_id: int, name: str, icon: str, color: str) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, user_id: int, name: str) -> Optional[Category]:
        """Get a user's category by name."""
        pass

    @abstractmethod
    def list_categories(self, user_id: int) -> list[Category]:
        """List a user's categories."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entry(
        self,
        user_id: int,
        draft: EntryDraft,
        transfer_id: Optional[int] = None,
        parent_expense_id: Optional[int] = None,
    ) -> int:
        """Store a ledger entry. Returns entry ID. Does not touch balances."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def update_entry(
        self,
        entry_id: int,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
    ) -> None:
        """Update ledger entry fields. Does not touch balances."""
        pass

    @abstractmethod
    def set_entry_parent(self, entry_id: int, parent_expense_id: int) -> None:
        """Link an entry to the entry of the rule that generated it."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete a ledger entry. Does not touch balances."""
        pass

    @abstractmethod
    def list_entries(
        self,
        user_id: Optional[int] = None,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_types: Optional[Iterable[str]] = None,
        transfer_id: Optional[int] = None,
    ) -> list[LedgerEntry]:
        """List ledger entries with optional filters, newest first."""
        pass

    # Transfer operations
    @abstractmethod
    def create_transfer(
        self,
        user_id: int,
        description: str,
        amount: Decimal,
        date: date,
        from_account_id: int,
        to_account_id: int,
    ) -> int:
        """Create a transfer header. Returns transfer ID."""
        pass

    @abstractmethod
    def get_transfer(self, transfer_id: int) -> Optional[Transfer]:
        """Get transfer by ID."""
        pass

    @abstractmethod
    def delete_transfer(self, transfer_id: int) -> None:
        """Delete a transfer header (its entries must already be gone)."""
        pass

    # Goal operations
    @abstractmethod
    def create_goal(
        self,
        user_id: int,
        name: str,
        target_amount: Decimal,
        color: str,
        icon: str,
        description: Optional[str] = None,
        target_date: Optional[date] = None,
    ) -> int:
        """Create a goal. Returns goal ID."""
        pass

    @abstractmethod
    def get_goal(self, goal_id: int) -> Optional[Goal]:
        """Get goal by ID."""
        pass

    @abstractmethod
    def list_goals(self, user_id: int) -> list[Goal]:
        """List a user's goals."""
        pass

    @abstractmethod
    def update_goal_progress(self, goal_id: int, current_amount: Decimal) -> None:
        """Store the derived current amount of a goal."""
        pass

    @abstractmethod
    def set_goal_completed(self, goal_id: int, is_completed: bool) -> None:
        """Set the completion flag of a goal."""
        pass

    @abstractmethod
    def delete_goal(self, goal_id: int) -> None:
        """Delete a goal and its account links."""
        pass

    @abstractmethod
    def link_goal_account(self, goal_id: int, account_id: int) -> bool:
        """Link an account to a goal. Returns False if already linked."""
        pass

    @abstractmethod
    def unlink_goal_account(self, goal_id: int, account_id: int) -> bool:
        """Unlink an account from a goal. Returns False if it was not linked."""
        pass

    @abstractmethod
    def list_goal_account_ids(self, goal_id: int) -> list[int]:
        """IDs of the accounts linked to a goal."""
        pass

    # Roommate operations
    @abstractmethod
    def create_roommate(
        self, user_id: int, name: str, email: Optional[str] = None, phone: Optional[str] = None
    ) -> int:
        """Create a roommate. Returns roommate ID."""
        pass

    @abstractmethod
    def get_roommate(self, roommate_id: int) -> Optional[Roommate]:
        """Get roommate by ID."""
        pass

    @abstractmethod
    def list_roommates(self, user_id: int) -> list[Roommate]:
        """List a user's roommates."""
        pass

    # Bill split operations
    @abstractmethod
    def create_bill_split(
        self,
        created_by: int,
        title: str,
        total_amount: Decimal,
        shares: Sequence[tuple[Optional[int], Decimal]],
        description: Optional[str] = None,
    ) -> int:
        """Create a bill split with its participant shares. Returns split ID."""
        pass

    @abstractmethod
    def get_bill_split(self, bill_split_id: int) -> Optional[BillSplit]:
        """Get bill split (with participants) by ID."""
        pass

    @abstractmethod
    def list_bill_splits(self, user_id: int) -> list[BillSplit]:
        """List bill splits created by a user."""
        pass

    @abstractmethod
    def get_participant(self, participant_id: int) -> Optional[BillSplitParticipant]:
        """Get bill split participant by ID."""
        pass

    @abstractmethod
    def set_participant_paid(
        self, participant_id: int, is_paid: bool, paid_at: Optional[datetime]
    ) -> None:
        """Update the paid flag of a participant share."""
        pass
