"""Transaction ledger domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.balance import BalanceReconciler, load_account
from fintrack.domain.entities import (
    CREDIT,
    DEBIT,
    EntryDraft,
    LedgerEntry,
    RECURRING_NONE,
    TRANSFER_IN,
    TRANSFER_OUT,
    Transfer,
    TransferPair,
    signed_amount,
)
from fintrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_not_found,
    entry_not_found,
    transfer_not_found,
)
from fintrack.domain.recurrence import expand
from fintrack.utils.amount_parser import format_amount, to_positive_money
from fintrack.utils.date_parser import parse_date
from fintrack.utils.logger import get_logger

logger = get_logger(__name__)

ENTRY_TYPES = (DEBIT, CREDIT)


class LedgerService:
    """Service for recording expenses, income and transfers.

    Every write goes through the balance reconciler inside one atomic unit,
    so an entry and its balance effect are stored together or not at all.
    """

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceReconciler(db)

    # Validation helpers
    @staticmethod
    def _check_description(description: str) -> str:
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description cannot be empty")
        return description

    @staticmethod
    def _check_type(transaction_type: str) -> str:
        if transaction_type not in ENTRY_TYPES:
            raise ValidationError(
                f"Transaction type must be one of {', '.join(ENTRY_TYPES)}, got '{transaction_type}'"
            )
        return transaction_type

    def _check_category(self, user_id: int, category_id: Optional[int], required: bool = True) -> Optional[int]:
        if category_id is None:
            if required:
                raise ValidationError("A category is required for expenses and income")
            return None
        category = self.db.get_category(category_id)
        if category is None or category.user_id != user_id:
            raise NotFoundError(category_not_found(category_id))
        return category_id

    # Simple and recurring entries
    def record_simple_entry(
        self,
        user_id: int,
        description: str,
        amount,
        date,
        category_id: Optional[int],
        account_id: int,
        transaction_type: str,
    ) -> LedgerEntry:
        """Record a single expense (debit) or income (credit).

        Args:
            user_id: Owner of the entry
            description: What the money was for
            amount: Positive amount with at most two decimals
            date: Entry date
            category_id: Category of the entry
            account_id: Account the entry belongs to
            transaction_type: "debit" or "credit"; never inferred

        Returns:
            Recorded entry

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the account or category is not the user's
        """
        return self.record_entry(
            user_id,
            description=description,
            amount=amount,
            date=date,
            category_id=category_id,
            account_id=account_id,
            transaction_type=transaction_type,
        )[0]

    def record_entry(
        self,
        user_id: int,
        description: str,
        amount,
        date,
        category_id: Optional[int],
        account_id: int,
        transaction_type: str,
        recurring_type: str = RECURRING_NONE,
        recurring_frequency: Optional[str] = None,
        recurring_interval: int = 1,
        installment_total: Optional[int] = None,
        recurring_end_date=None,
    ) -> list[LedgerEntry]:
        """Record an entry, expanding it first when it is recurring.

        All generated entries are stored and applied to the balance in one
        atomic unit. They share ``parent_expense_id``, the id of the first one.

        Returns:
            Recorded entries in date order (a single element when not recurring)

        Raises:
            ValidationError: If any field or the recurrence rule is invalid
            NotFoundError: If the account or category is not the user's
        """
        draft = EntryDraft(
            description=self._check_description(description),
            amount=to_positive_money(amount),
            date=parse_date(date),
            account_id=account_id,
            transaction_type=self._check_type(transaction_type),
            category_id=self._check_category(user_id, category_id),
        )
        end_date = parse_date(recurring_end_date) if recurring_end_date is not None else None
        drafts = expand(
            draft,
            recurring_type,
            frequency=recurring_frequency,
            interval=recurring_interval,
            installment_total=installment_total,
            end_date=end_date,
        )
        load_account(self.db, user_id, account_id)

        entry_ids = []
        with self.db.lock_accounts(account_id):
            with self.db.atomic():
                parent_id = None
                for item in drafts:
                    entry_id = self.db.create_entry(user_id, item, parent_expense_id=parent_id)
                    if recurring_type != RECURRING_NONE and parent_id is None:
                        parent_id = entry_id
                        self.db.set_entry_parent(entry_id, entry_id)
                    entry_ids.append(entry_id)
                total = sum((signed_amount(d.transaction_type, d.amount) for d in drafts), Decimal("0.00"))
                self.balances.apply_delta(user_id, account_id, total)

        if len(entry_ids) > 1:
            logger.info(
                "Recorded %s %s entries on account %s (parent %s)",
                len(entry_ids), recurring_type, account_id, entry_ids[0],
            )
        return [self.db.get_entry(entry_id) for entry_id in entry_ids]

    # Transfers
    def record_transfer(
        self,
        user_id: int,
        description: str,
        amount,
        date,
        from_account_id: int,
        to_account_id: int,
        category_id: Optional[int] = None,
    ) -> TransferPair:
        """Move money between two of the user's accounts.

        Stores the transfer row plus a transfer_out entry on the source and a
        transfer_in entry on the destination. All or nothing.

        Returns:
            The transfer with both of its entries

        Raises:
            ValidationError: If source and destination are the same account
            NotFoundError: If either account is not the user's
        """
        if from_account_id == to_account_id:
            raise ValidationError("Cannot transfer to the same account")
        description = self._check_description(description)
        amount = to_positive_money(amount)
        when = parse_date(date)
        category_id = self._check_category(user_id, category_id, required=False)
        load_account(self.db, user_id, from_account_id)
        load_account(self.db, user_id, to_account_id)

        with self.db.lock_accounts(from_account_id, to_account_id):
            with self.db.atomic():
                transfer_id = self.db.create_transfer(
                    user_id=user_id,
                    description=description,
                    amount=amount,
                    date=when,
                    from_account_id=from_account_id,
                    to_account_id=to_account_id,
                )
                out_id = self.db.create_entry(
                    user_id,
                    EntryDraft(description, amount, when, from_account_id, TRANSFER_OUT, category_id),
                    transfer_id=transfer_id,
                )
                in_id = self.db.create_entry(
                    user_id,
                    EntryDraft(description, amount, when, to_account_id, TRANSFER_IN, category_id),
                    transfer_id=transfer_id,
                )
                self.balances.apply_delta(user_id, from_account_id, -amount)
                self.balances.apply_delta(user_id, to_account_id, amount)

        logger.info(
            "Transferred %s from account %s to account %s (transfer %s)",
            format_amount(amount), from_account_id, to_account_id, transfer_id,
        )
        return TransferPair(
            transfer=self.db.get_transfer(transfer_id),
            out_entry=self.db.get_entry(out_id),
            in_entry=self.db.get_entry(in_id),
        )

    def delete_transfer(self, user_id: int, transfer_id: int) -> None:
        """Delete a transfer, both of its entries, and reverse both balance effects.

        If one half is missing the remaining effects are reversed and both
        accounts are recomputed from the ledger.

        Raises:
            NotFoundError: If the transfer is not the user's
        """
        transfer = self.require_transfer(user_id, transfer_id)
        accounts = (transfer.from_account_id, transfer.to_account_id)

        with self.db.lock_accounts(*accounts):
            with self.db.atomic():
                entries = self.db.list_entries(transfer_id=transfer_id)
                for entry in entries:
                    self.db.delete_entry(entry.id)
                    self.balances.apply_delta(user_id, entry.account_id, -entry.signed_amount)
                self.db.delete_transfer(transfer_id)

                types = sorted(entry.transaction_type for entry in entries)
                if types != [TRANSFER_IN, TRANSFER_OUT]:
                    logger.warning(
                        "Transfer %s was incomplete (%s entries); recomputing accounts %s and %s",
                        transfer_id, len(entries), *accounts,
                    )
                    for account_id in accounts:
                        self.balances.recompute(user_id, account_id)

        logger.info("Deleted transfer %s", transfer_id)

    def get_transfer(self, user_id: int, transfer_id: int) -> Optional[Transfer]:
        """Get transfer by ID, or None if not found or owned by another user."""
        transfer = self.db.get_transfer(transfer_id)
        if transfer is None or transfer.user_id != user_id:
            return None
        return transfer

    def require_transfer(self, user_id: int, transfer_id: int) -> Transfer:
        """Get transfer by ID.

        Raises:
            NotFoundError: If not found or owned by another user
        """
        transfer = self.get_transfer(user_id, transfer_id)
        if transfer is None:
            raise NotFoundError(transfer_not_found(transfer_id))
        return transfer

    # Editing and deleting entries
    def update_entry(
        self,
        user_id: int,
        entry_id: int,
        description: Optional[str] = None,
        amount=None,
        date=None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        transaction_type: Optional[str] = None,
    ) -> LedgerEntry:
        """Edit an expense or income entry.

        The old balance effect is reversed and the new one applied, on
        different accounts when the entry moves.

        Returns:
            Updated entry

        Raises:
            NotFoundError: If the entry, account or category is not the user's
            ConflictError: If the entry is half of a transfer
            ValidationError: If a new value is invalid
        """
        entry = self.require_entry(user_id, entry_id)
        if entry.is_transfer:
            raise ConflictError(
                f"Entry {entry_id} is part of transfer {entry.transfer_id}; "
                "delete the transfer and record it again instead"
            )
        if description is not None:
            description = self._check_description(description)
        if amount is not None:
            amount = to_positive_money(amount)
        if date is not None:
            date = parse_date(date)
        if transaction_type is not None:
            transaction_type = self._check_type(transaction_type)
        if category_id is not None:
            self._check_category(user_id, category_id)
        if account_id is not None:
            load_account(self.db, user_id, account_id)

        target_account = account_id if account_id is not None else entry.account_id
        with self.db.lock_accounts(entry.account_id, target_account):
            with self.db.atomic():
                current = self.require_entry(user_id, entry_id)
                self.db.update_entry(
                    entry_id,
                    description=description,
                    amount=amount,
                    date=date,
                    category_id=category_id,
                    account_id=account_id,
                    transaction_type=transaction_type,
                )
                new_effect = signed_amount(
                    transaction_type or current.transaction_type,
                    amount if amount is not None else current.amount,
                )
                self.balances.apply_delta(user_id, current.account_id, -current.signed_amount)
                self.balances.apply_delta(user_id, target_account, new_effect)

        return self.db.get_entry(entry_id)

    def delete_entry(self, user_id: int, entry_id: int) -> None:
        """Delete an entry and reverse its balance effect.

        Deleting either half of a transfer deletes the whole transfer.

        Raises:
            NotFoundError: If the entry is not the user's
        """
        entry = self.require_entry(user_id, entry_id)
        if entry.transfer_id is not None:
            self.delete_transfer(user_id, entry.transfer_id)
            return

        with self.db.lock_accounts(entry.account_id):
            with self.db.atomic():
                current = self.require_entry(user_id, entry_id)
                self.db.delete_entry(entry_id)
                self.balances.apply_delta(user_id, current.account_id, -current.signed_amount)

    # Queries
    def get_entry(self, user_id: int, entry_id: int) -> Optional[LedgerEntry]:
        """Get entry by ID, or None if not found or owned by another user."""
        entry = self.db.get_entry(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return entry

    def require_entry(self, user_id: int, entry_id: int) -> LedgerEntry:
        """Get entry by ID.

        Raises:
            NotFoundError: If not found or owned by another user
        """
        entry = self.get_entry(user_id, entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        return entry

    def list_entries(
        self,
        user_id: int,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """List a user's entries, newest first, with optional filters."""
        return self.db.list_entries(
            user_id=user_id,
            account_id=account_id,
            category_id=category_id,
            start_date=start_date,
            end_date=end_date,
        )
