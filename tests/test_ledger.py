"""Tests for the ledger service: entries, recurring batches and transfers."""

import pytest
from datetime import date
from decimal import Decimal

from fintrack.domain.errors import ConflictError, NotFoundError, ValidationError


class TestSimpleEntries:
    """Tests for single expenses and income."""

    def test_debit_lowers_balance(self, ledger_service, account_service, sample_user, sample_account, sample_category):
        entry = ledger_service.record_simple_entry(
            sample_user.id,
            description="Groceries",
            amount="150.00",
            date="2024-01-15",
            category_id=sample_category.id,
            account_id=sample_account.id,
            transaction_type="debit",
        )

        assert entry.amount == Decimal("150.00")
        assert entry.date == date(2024, 1, 15)
        assert not entry.is_recurring
        assert entry.parent_expense_id is None
        acc = account_service.require_account(sample_user.id, sample_account.id)
        assert acc.balance == Decimal("850.00")

    def test_credit_raises_balance(self, account_service, sample_user, sample_account, add_expense):
        add_expense(sample_account, "250.00", transaction_type="credit")

        acc = account_service.require_account(sample_user.id, sample_account.id)
        assert acc.balance == Decimal("1250.00")

    def test_category_is_required(self, ledger_service, sample_user, sample_account):
        with pytest.raises(ValidationError, match="category"):
            ledger_service.record_simple_entry(
                sample_user.id, "Lunch", "10.00", date(2024, 1, 1), None, sample_account.id, "debit"
            )

    def test_transaction_type_is_never_inferred(self, ledger_service, sample_user, sample_account, sample_category):
        with pytest.raises(ValidationError):
            ledger_service.record_simple_entry(
                sample_user.id, "Lunch", "10.00", date(2024, 1, 1), sample_category.id, sample_account.id, ""
            )
        with pytest.raises(ValidationError):
            ledger_service.record_simple_entry(
                sample_user.id, "Move", "10.00", date(2024, 1, 1), sample_category.id, sample_account.id,
                "transfer_in",
            )

    @pytest.mark.parametrize("amount", ["0", "-5.00", "1.005", 9.99])
    def test_bad_amounts_are_rejected(self, ledger_service, sample_user, sample_account, sample_category, amount):
        with pytest.raises(ValidationError):
            ledger_service.record_simple_entry(
                sample_user.id, "Lunch", amount, date(2024, 1, 1), sample_category.id, sample_account.id, "debit"
            )

    @pytest.mark.parametrize("amount", ["99999999999999.99", "1e30"])
    def test_amounts_beyond_column_precision_are_rejected(
        self, ledger_service, account_service, sample_user, sample_account, sample_category, amount
    ):
        with pytest.raises(ValidationError, match="too large"):
            ledger_service.record_simple_entry(
                sample_user.id, "Jackpot", amount, date(2024, 1, 1), sample_category.id, sample_account.id, "credit"
            )

        assert ledger_service.list_entries(sample_user.id) == []
        assert account_service.require_account(sample_user.id, sample_account.id).balance == Decimal("1000.00")

    def test_largest_amount_round_trips_exactly(
        self, ledger_service, account_service, sample_user, sample_account, sample_category
    ):
        entry = ledger_service.record_simple_entry(
            sample_user.id, "Mansion", "9999999999.99", date(2024, 1, 1), sample_category.id, sample_account.id,
            "debit",
        )

        assert ledger_service.get_entry(sample_user.id, entry.id).amount == Decimal("9999999999.99")
        acc = account_service.require_account(sample_user.id, sample_account.id)
        assert acc.balance == Decimal("-9999998999.99")

    def test_failed_validation_writes_nothing(self, ledger_service, account_service, sample_user, sample_account, sample_category):
        with pytest.raises(ValidationError):
            ledger_service.record_simple_entry(
                sample_user.id, "  ", "10.00", date(2024, 1, 1), sample_category.id, sample_account.id, "debit"
            )

        assert ledger_service.list_entries(sample_user.id) == []
        assert account_service.require_account(sample_user.id, sample_account.id).balance == Decimal("1000.00")

    def test_foreign_account_or_category(self, ledger_service, account_service, category_service, sample_user, other_user, sample_category):
        foreign_account = account_service.create_account(other_user.id, "Theirs", "checking")
        foreign_category = category_service.create_category(other_user.id, "Theirs")
        mine = account_service.create_account(sample_user.id, "Mine", "checking")

        with pytest.raises(NotFoundError):
            ledger_service.record_simple_entry(
                sample_user.id, "Lunch", "1.00", date(2024, 1, 1), sample_category.id, foreign_account.id, "debit"
            )
        with pytest.raises(NotFoundError):
            ledger_service.record_simple_entry(
                sample_user.id, "Lunch", "1.00", date(2024, 1, 1), foreign_category.id, mine.id, "debit"
            )


class TestRecurringEntries:
    """Tests for installment and advanced recurring batches."""

    def test_installments_share_parent_and_sum_to_total(
        self, ledger_service, account_service, sample_user, sample_account, sample_category
    ):
        entries = ledger_service.record_entry(
            sample_user.id,
            description="Phone",
            amount="100.00",
            date=date(2024, 1, 31),
            category_id=sample_category.id,
            account_id=sample_account.id,
            transaction_type="debit",
            recurring_type="installment",
            installment_total=3,
        )

        assert len(entries) == 3
        assert sum(e.amount for e in entries) == Decimal("100.00")
        assert {e.parent_expense_id for e in entries} == {entries[0].id}
        assert [e.installment_current for e in entries] == [1, 2, 3]
        acc = account_service.require_account(sample_user.id, sample_account.id)
        assert acc.balance == Decimal("900.00")

    def test_advanced_batch_applies_each_occurrence(
        self, ledger_service, account_service, sample_user, sample_account, sample_category
    ):
        entries = ledger_service.record_entry(
            sample_user.id,
            description="Gym",
            amount="50.00",
            date=date(2024, 1, 31),
            category_id=sample_category.id,
            account_id=sample_account.id,
            transaction_type="debit",
            recurring_type="advanced",
            recurring_frequency="monthly",
            recurring_end_date="2024-04-30",
        )

        assert [e.date for e in entries] == [
            date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)
        ]
        assert all(e.recurring_end_date == date(2024, 4, 30) for e in entries)
        acc = account_service.require_account(sample_user.id, sample_account.id)
        assert acc.balance == Decimal("800.00")

    def test_bad_rule_writes_nothing(self, ledger_service, sample_user, sample_account, sample_category):
        with pytest.raises(ValidationError):
            ledger_service.record_entry(
                sample_user.id, "Gym", "50.00", date(2024, 1, 31), sample_category.id, sample_account.id,
                "debit", recurring_type="advanced",
            )

        assert ledger_service.list_entries(sample_user.id) == []

    def test_storage_failure_rolls_back_whole_batch(
        self, temp_db, monkeypatch, ledger_service, account_service, sample_user, sample_account, sample_category
    ):
        original = temp_db.create_entry
        calls = []

        def failing_create_entry(*args, **kwargs):
            calls.append(1)
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return original(*args, **kwargs)

        monkeypatch.setattr(temp_db, "create_entry", failing_create_entry)

        with pytest.raises(RuntimeError):
            ledger_service.record_entry(
                sample_user.id, "Phone", "90.00", date(2024, 1, 1), sample_category.id, sample_account.id,
                "debit", recurring_type="installment", installment_total=3,
            )

        monkeypatch.undo()
        assert ledger_service.list_entries(sample_user.id) == []
        acc = account_service.require_account(sample_user.id, sample_account.id)
        assert acc.balance == Decimal("1000.00")


class TestTransfers:
    """Tests for transfers between accounts."""

    def test_transfer_conserves_money(
        self, ledger_service, reconciler, sample_user, sample_account, savings_account
    ):
        before = reconciler.total_balance(sample_user.id)

        pair = ledger_service.record_transfer(
            sample_user.id, "To savings", "200.00", "2024-01-10", sample_account.id, savings_account.id
        )

        assert pair.transfer.amount == Decimal("200.00")
        assert pair.out_entry.transaction_type == "transfer_out"
        assert pair.in_entry.transaction_type == "transfer_in"
        assert pair.out_entry.transfer_id == pair.in_entry.transfer_id == pair.transfer.id
        assert pair.out_entry.category_id is None
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("800.00")
        assert reconciler.get_balance(sample_user.id, savings_account.id) == Decimal("700.00")
        assert reconciler.total_balance(sample_user.id) == before

    def test_delete_transfer_restores_both_balances(
        self, ledger_service, reconciler, sample_user, sample_account, savings_account
    ):
        pair = ledger_service.record_transfer(
            sample_user.id, "To savings", "200.00", date(2024, 1, 10), sample_account.id, savings_account.id
        )

        ledger_service.delete_transfer(sample_user.id, pair.transfer.id)

        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")
        assert reconciler.get_balance(sample_user.id, savings_account.id) == Decimal("500.00")
        assert ledger_service.get_transfer(sample_user.id, pair.transfer.id) is None
        assert ledger_service.list_entries(sample_user.id) == []

    def test_transfer_failure_rolls_back_both_sides(
        self, temp_db, monkeypatch, ledger_service, reconciler, sample_user, sample_account, savings_account
    ):
        original_transfer = temp_db.create_transfer
        original_entry = temp_db.create_entry
        transfer_ids = []
        calls = []

        def recording_create_transfer(*args, **kwargs):
            transfer_id = original_transfer(*args, **kwargs)
            transfer_ids.append(transfer_id)
            return transfer_id

        def failing_create_entry(*args, **kwargs):
            calls.append(1)
            # The incoming half is written second
            if len(calls) == 2:
                raise RuntimeError("disk full")
            return original_entry(*args, **kwargs)

        monkeypatch.setattr(temp_db, "create_transfer", recording_create_transfer)
        monkeypatch.setattr(temp_db, "create_entry", failing_create_entry)

        with pytest.raises(RuntimeError):
            ledger_service.record_transfer(
                sample_user.id, "To savings", "200.00", date(2024, 1, 10), sample_account.id, savings_account.id
            )

        monkeypatch.undo()
        assert len(calls) == 2
        assert ledger_service.list_entries(sample_user.id) == []
        assert ledger_service.get_transfer(sample_user.id, transfer_ids[0]) is None
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")
        assert reconciler.get_balance(sample_user.id, savings_account.id) == Decimal("500.00")

    def test_same_account_transfer_is_rejected(self, ledger_service, reconciler, sample_user, sample_account):
        with pytest.raises(ValidationError):
            ledger_service.record_transfer(
                sample_user.id, "Loop", "10.00", date(2024, 1, 1), sample_account.id, sample_account.id
            )

        assert ledger_service.list_entries(sample_user.id) == []
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")

    def test_transfer_to_foreign_account(self, ledger_service, account_service, sample_user, other_user, sample_account):
        theirs = account_service.create_account(other_user.id, "Theirs", "checking")

        with pytest.raises(NotFoundError):
            ledger_service.record_transfer(
                sample_user.id, "Gift", "10.00", date(2024, 1, 1), sample_account.id, theirs.id
            )
        assert ledger_service.list_entries(sample_user.id) == []

    def test_deleting_one_half_deletes_the_transfer(
        self, ledger_service, reconciler, sample_user, sample_account, savings_account
    ):
        pair = ledger_service.record_transfer(
            sample_user.id, "To savings", "75.50", date(2024, 1, 10), sample_account.id, savings_account.id
        )

        ledger_service.delete_entry(sample_user.id, pair.in_entry.id)

        assert ledger_service.get_entry(sample_user.id, pair.out_entry.id) is None
        assert ledger_service.get_transfer(sample_user.id, pair.transfer.id) is None
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")
        assert reconciler.get_balance(sample_user.id, savings_account.id) == Decimal("500.00")

    def test_incomplete_transfer_is_repaired(
        self, temp_db, ledger_service, reconciler, sample_user, sample_account, savings_account
    ):
        pair = ledger_service.record_transfer(
            sample_user.id, "To savings", "40.00", date(2024, 1, 10), sample_account.id, savings_account.id
        )
        # Lose one half behind the service's back
        temp_db.delete_entry(pair.in_entry.id)

        ledger_service.delete_transfer(sample_user.id, pair.transfer.id)

        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")
        assert reconciler.get_balance(sample_user.id, savings_account.id) == Decimal("500.00")

    def test_transfer_halves_cannot_be_edited(self, ledger_service, sample_user, sample_account, savings_account):
        pair = ledger_service.record_transfer(
            sample_user.id, "To savings", "10.00", date(2024, 1, 10), sample_account.id, savings_account.id
        )

        with pytest.raises(ConflictError):
            ledger_service.update_entry(sample_user.id, pair.out_entry.id, amount="20.00")


class TestEditing:
    """Tests for updating and deleting entries."""

    def test_update_amount_rebalances(self, ledger_service, reconciler, sample_user, sample_account, add_expense):
        entry = add_expense(sample_account, "100.00")

        updated = ledger_service.update_entry(sample_user.id, entry.id, amount="40.00", description="Less")

        assert updated.amount == Decimal("40.00")
        assert updated.description == "Less"
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("960.00")

    def test_flip_type_rebalances(self, ledger_service, reconciler, sample_user, sample_account, add_expense):
        entry = add_expense(sample_account, "100.00")

        ledger_service.update_entry(sample_user.id, entry.id, transaction_type="credit")

        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1100.00")

    def test_move_entry_between_accounts(
        self, ledger_service, reconciler, sample_user, sample_account, savings_account, add_expense
    ):
        entry = add_expense(sample_account, "100.00")

        moved = ledger_service.update_entry(sample_user.id, entry.id, account_id=savings_account.id)

        assert moved.account_id == savings_account.id
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")
        assert reconciler.get_balance(sample_user.id, savings_account.id) == Decimal("400.00")
        reconciler.verify(sample_user.id, sample_account.id)
        reconciler.verify(sample_user.id, savings_account.id)

    def test_invalid_update_changes_nothing(self, ledger_service, reconciler, sample_user, sample_account, add_expense):
        entry = add_expense(sample_account, "100.00")

        with pytest.raises(ValidationError):
            ledger_service.update_entry(sample_user.id, entry.id, amount="-1.00")

        assert ledger_service.get_entry(sample_user.id, entry.id).amount == Decimal("100.00")
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("900.00")

    def test_delete_entry_reverses_effect(self, ledger_service, reconciler, sample_user, sample_account, add_expense):
        entry = add_expense(sample_account, "100.00")

        ledger_service.delete_entry(sample_user.id, entry.id)

        assert ledger_service.get_entry(sample_user.id, entry.id) is None
        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")

    def test_other_user_cannot_touch_entry(self, ledger_service, sample_account, other_user, add_expense):
        entry = add_expense(sample_account, "100.00")

        assert ledger_service.get_entry(other_user.id, entry.id) is None
        with pytest.raises(NotFoundError):
            ledger_service.delete_entry(other_user.id, entry.id)


class TestListing:
    """Tests for entry queries."""

    def test_newest_first_with_filters(self, ledger_service, sample_user, sample_account, savings_account, add_expense):
        add_expense(sample_account, "1.00", when=date(2024, 1, 1), description="Old")
        add_expense(sample_account, "2.00", when=date(2024, 2, 1), description="New")
        add_expense(savings_account, "3.00", when=date(2024, 1, 15), description="Other")

        all_entries = ledger_service.list_entries(sample_user.id)
        assert [e.description for e in all_entries] == ["New", "Other", "Old"]

        checking = ledger_service.list_entries(sample_user.id, account_id=sample_account.id)
        assert [e.description for e in checking] == ["New", "Old"]

        january = ledger_service.list_entries(
            sample_user.id, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
        )
        assert [e.description for e in january] == ["Other", "Old"]
