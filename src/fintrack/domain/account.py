"""Account domain service."""

from decimal import Decimal
from typing import Optional, Sequence

from fintrack.database.base import Database
from fintrack.domain.balance import BalanceReconciler, load_account
from fintrack.domain.entities import ACCOUNT_KINDS, Account
from fintrack.domain.errors import (
    ConflictError,
    ValidationError,
    account_delete_blocked,
    duplicate_account_name,
)
from fintrack.utils.amount_parser import to_money
from fintrack.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ACCOUNT_COLOR = "#6B7280"


class AccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceReconciler(db)

    def _check_name(self, user_id: int, name: str, exclude_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        for acc in self.db.list_accounts(user_id):
            if acc.id != exclude_id and acc.name == name:
                raise ConflictError(duplicate_account_name(name))
        return name

    @staticmethod
    def _check_kind(kind: str) -> str:
        if kind not in ACCOUNT_KINDS:
            raise ValidationError(
                f"Unknown account kind: '{kind}'. Supported: {', '.join(ACCOUNT_KINDS)}"
            )
        return kind

    @staticmethod
    def _check_last_four(last_four_digits: Optional[str]) -> Optional[str]:
        if last_four_digits is None:
            return None
        if len(last_four_digits) != 4 or not last_four_digits.isdigit():
            raise ValidationError("Last four digits must be exactly four digits")
        return last_four_digits

    def create_account(
        self,
        user_id: int,
        name: str,
        kind: str,
        initial_balance=Decimal("0.00"),
        is_active: bool = True,
        color: Optional[str] = None,
        last_four_digits: Optional[str] = None,
    ) -> Account:
        """Create a new account.

        The account is placed after the user's existing accounts and its
        balance starts at ``initial_balance``.

        Args:
            user_id: Owner of the account
            name: Account name, unique per user
            kind: checking, savings or credit
            initial_balance: Seed balance (may be negative, e.g. for credit)
            is_active: Whether the account counts toward totals
            color: Display color
            last_four_digits: Optional card/account suffix

        Returns:
            Created account

        Raises:
            ValidationError: If name is empty or kind/balance is invalid
            ConflictError: If the user already has an account with this name
        """
        name = self._check_name(user_id, name)
        kind = self._check_kind(kind)
        seed = to_money(initial_balance, "initial_balance")
        last_four_digits = self._check_last_four(last_four_digits)

        account_id = self.db.create_account(
            user_id=user_id,
            name=name,
            kind=kind,
            initial_balance=seed,
            color=color or DEFAULT_ACCOUNT_COLOR,
            last_four_digits=last_four_digits,
            is_active=is_active,
            sort_order=self.db.next_sort_order(user_id),
        )
        return self.db.get_account(account_id)

    def get_account(self, user_id: int, account_id: int) -> Optional[Account]:
        """Get account by ID.

        Returns:
            Account entity or None if not found or owned by another user
        """
        account = self.db.get_account(account_id)
        if account is None or account.user_id != user_id:
            return None
        return account

    def require_account(self, user_id: int, account_id: int) -> Account:
        """Get account by ID.

        Raises:
            NotFoundError: If not found or owned by another user
        """
        return load_account(self.db, user_id, account_id)

    def list_accounts(self, user_id: int, include_inactive: bool = True) -> list[Account]:
        """List accounts: active first, then by sort order, then by ID."""
        return self.db.list_accounts(user_id, include_inactive=include_inactive)

    def update_account(
        self,
        user_id: int,
        account_id: int,
        name: Optional[str] = None,
        kind: Optional[str] = None,
        color: Optional[str] = None,
        last_four_digits: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Account:
        """Update descriptive fields of an account.

        The balance is never touched here; see ``reseed_balance``.

        Raises:
            NotFoundError: If the account is not the user's
            ValidationError: If a new value is invalid
            ConflictError: If the new name is taken
        """
        self.require_account(user_id, account_id)
        if name is not None:
            name = self._check_name(user_id, name, exclude_id=account_id)
        if kind is not None:
            kind = self._check_kind(kind)
        last_four_digits = self._check_last_four(last_four_digits)

        self.db.update_account(
            account_id=account_id,
            name=name,
            kind=kind,
            color=color,
            last_four_digits=last_four_digits,
            is_active=is_active,
        )
        return self.db.get_account(account_id)

    def deactivate(self, user_id: int, account_id: int) -> Account:
        """Soft-disable an account. It keeps its history but leaves totals."""
        account = self.update_account(user_id, account_id, is_active=False)
        logger.info("Deactivated account %s", account_id)
        return account

    def reactivate(self, user_id: int, account_id: int) -> Account:
        """Bring a deactivated account back into totals."""
        account = self.update_account(user_id, account_id, is_active=True)
        logger.info("Reactivated account %s", account_id)
        return account

    def delete_account(self, user_id: int, account_id: int) -> None:
        """Delete an account that has no history.

        Args:
            user_id: Owner of the account
            account_id: Account ID to delete

        Raises:
            NotFoundError: If the account is not the user's
            ConflictError: If the account has ledger entries or goal links
        """
        self.require_account(user_id, account_id)

        entry_count = self.db.get_account_entry_count(account_id)
        goal_count = self.db.get_account_goal_count(account_id)
        if entry_count > 0 or goal_count > 0:
            raise ConflictError(account_delete_blocked(account_id, entry_count, goal_count))

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def reorder_accounts(self, user_id: int, account_ids: Sequence[int]) -> list[Account]:
        """Rewrite display order to follow ``account_ids``.

        Raises:
            ValidationError: If the list does not name exactly the user's accounts
        """
        owned = {acc.id for acc in self.db.list_accounts(user_id)}
        requested = list(account_ids)
        if len(requested) != len(set(requested)) or set(requested) != owned:
            raise ValidationError("Reorder must list each of the user's accounts exactly once")

        with self.db.atomic():
            self.db.set_sort_orders({account_id: index for index, account_id in enumerate(requested)})
        return self.db.list_accounts(user_id)

    def reseed_balance(self, user_id: int, account_id: int, initial_balance) -> Account:
        """Replace an account's seed balance and rebuild its balance from the ledger.

        Raises:
            NotFoundError: If the account is not the user's
            ValidationError: If the amount is invalid
        """
        seed = to_money(initial_balance, "initial_balance")
        self.require_account(user_id, account_id)
        with self.db.lock_accounts(account_id):
            with self.db.atomic():
                account = self.require_account(user_id, account_id)
                self.db.set_initial_balance(account_id, seed)
                # Shift the cache by the seed change so only real drift is reported
                self.db.adjust_balance(account_id, seed - account.initial_balance)
                self.balances.recompute(user_id, account_id)
        logger.info("Reseeded account %s with %s", account_id, seed)
        return self.db.get_account(account_id)
