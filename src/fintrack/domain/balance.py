"""Balance reconciliation: keeps cached account balances equal to the ledger."""

from decimal import Decimal

from fintrack.database.base import Database
from fintrack.domain.entities import Account
from fintrack.domain.errors import (
    ConsistencyError,
    NotFoundError,
    account_not_found,
    balance_drift,
)
from fintrack.utils.amount_parser import format_amount, to_money
from fintrack.utils.logger import get_logger

logger = get_logger(__name__)


def load_account(db: Database, user_id: int, account_id: int) -> Account:
    """Fetch an account owned by ``user_id``.

    Raises:
        NotFoundError: If the account does not exist or belongs to another user
    """
    account = db.get_account(account_id)
    if account is None or account.user_id != user_id:
        raise NotFoundError(account_not_found(account_id))
    return account


class BalanceReconciler:
    """Sole writer of account balances.

    Balances are maintained incrementally through ``apply_delta`` and can be
    rebuilt at any time from the seed and the ledger with ``recompute``.
    """

    def __init__(self, db: Database):
        """Initialize balance reconciler.

        Args:
            db: Database instance
        """
        self.db = db

    def apply_delta(self, user_id: int, account_id: int, signed_amount: Decimal) -> Decimal:
        """Add a signed amount to an account's balance.

        Args:
            user_id: Owner of the account
            account_id: Account to adjust
            signed_amount: Positive to increase the balance, negative to decrease

        Returns:
            The new balance

        Raises:
            NotFoundError: If the account is not the user's
            ValidationError: If the amount is not an exact money value
        """
        delta = to_money(signed_amount, "delta")
        load_account(self.db, user_id, account_id)
        with self.db.lock_accounts(account_id):
            new_balance = self.db.adjust_balance(account_id, delta)
        logger.debug(
            "Account %s balance adjusted by %s to %s", account_id, format_amount(delta), format_amount(new_balance)
        )
        return new_balance

    def _ledger_balance(self, account: Account) -> Decimal:
        entries = self.db.list_entries(account_id=account.id)
        return account.initial_balance + sum((e.signed_amount for e in entries), Decimal("0.00"))

    def recompute(self, user_id: int, account_id: int) -> Decimal:
        """Rebuild an account's balance from its seed and every ledger entry.

        The recomputed value always wins; a differing cached value is logged
        as drift and overwritten. Calling this twice is a no-op the second time.

        Returns:
            The recomputed balance
        """
        with self.db.lock_accounts(account_id):
            with self.db.atomic():
                account = load_account(self.db, user_id, account_id)
                recomputed = self._ledger_balance(account)
                if recomputed != account.balance:
                    logger.warning(balance_drift(account_id, account.balance, recomputed))
                self.db.set_balance(account_id, recomputed)
        logger.info("Recomputed account %s balance: %s", account_id, format_amount(recomputed))
        return recomputed

    def verify(self, user_id: int, account_id: int) -> Decimal:
        """Check the cached balance against the ledger without repairing it.

        Returns:
            The (consistent) balance

        Raises:
            ConsistencyError: If the cached balance has drifted
        """
        with self.db.lock_accounts(account_id):
            account = load_account(self.db, user_id, account_id)
            recomputed = self._ledger_balance(account)
        if recomputed != account.balance:
            raise ConsistencyError(balance_drift(account_id, account.balance, recomputed))
        return recomputed

    def recompute_all(self, user_id: int) -> dict[int, Decimal]:
        """Recompute every account of a user, active or not."""
        return {
            account.id: self.recompute(user_id, account.id)
            for account in self.db.list_accounts(user_id, include_inactive=True)
        }

    def get_balance(self, user_id: int, account_id: int) -> Decimal:
        """Current cached balance of an account."""
        return load_account(self.db, user_id, account_id).balance

    def total_balance(self, user_id: int) -> Decimal:
        """Sum of balances over the user's active accounts."""
        accounts = self.db.list_accounts(user_id, include_inactive=False)
        return sum((account.balance for account in accounts), Decimal("0.00"))
