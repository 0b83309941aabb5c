"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from fintrack.domain.entities import (
    Account,
    EntryDraft,
    LedgerEntry,
    BALANCE_SIGNS,
    TRANSACTION_TYPES,
    signed_amount,
)


def make_entry(transaction_type="debit", amount="10.00", transfer_id=None):
    return LedgerEntry(
        id=1,
        user_id=1,
        account_id=1,
        category_id=None,
        description="Test",
        amount=Decimal(amount),
        date=date(2024, 1, 15),
        transaction_type=transaction_type,
        transfer_id=transfer_id,
        is_recurring=False,
        recurring_type="none",
        recurring_frequency=None,
        recurring_interval=1,
        installment_total=None,
        installment_current=None,
        recurring_end_date=None,
        parent_expense_id=None,
        created_at=datetime.now(UTC),
    )


class TestAccount:
    """Tests for Account entity."""

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(
            id=1,
            user_id=1,
            name="Checking",
            kind="checking",
            initial_balance=Decimal("0.00"),
            balance=Decimal("10.00"),
            color="#6B7280",
            last_four_digits=None,
            is_active=True,
            sort_order=0,
            created_at=datetime.now(UTC),
        )
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            account.balance = Decimal("0.00")


class TestSignedAmount:
    """Tests for balance direction of each transaction type."""

    def test_every_type_has_a_sign(self):
        assert set(BALANCE_SIGNS) == set(TRANSACTION_TYPES)

    @pytest.mark.parametrize(
        "transaction_type,expected",
        [
            ("debit", Decimal("-25.50")),
            ("credit", Decimal("25.50")),
            ("transfer_in", Decimal("25.50")),
            ("transfer_out", Decimal("-25.50")),
        ],
    )
    def test_signed_amount(self, transaction_type, expected):
        assert signed_amount(transaction_type, Decimal("25.50")) == expected

    def test_entry_signed_amount_and_transfer_flag(self):
        debit = make_entry("debit", "12.34")
        assert debit.signed_amount == Decimal("-12.34")
        assert not debit.is_transfer

        half = make_entry("transfer_in", "5.00", transfer_id=3)
        assert half.signed_amount == Decimal("5.00")
        assert half.is_transfer


class TestEntryDraft:
    """Tests for EntryDraft defaults."""

    def test_defaults_are_not_recurring(self):
        draft = EntryDraft(
            description="Lunch",
            amount=Decimal("20.00"),
            date=date(2024, 1, 1),
            account_id=1,
            transaction_type="debit",
        )
        assert draft.is_recurring is False
        assert draft.recurring_type == "none"
        assert draft.recurring_interval == 1
        assert draft.installment_current is None
