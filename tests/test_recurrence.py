"""Tests for the recurrence expander."""

import pytest
from datetime import date
from decimal import Decimal

from fintrack.domain.entities import EntryDraft
from fintrack.domain.errors import ValidationError
from fintrack.domain.recurrence import MAX_OCCURRENCES, expand


@pytest.fixture
def base():
    return EntryDraft(
        description="Phone",
        amount=Decimal("100.00"),
        date=date(2024, 1, 31),
        account_id=1,
        transaction_type="debit",
        category_id=2,
    )


def test_none_returns_base_unchanged(base):
    assert expand(base, "none") == [base]


class TestInstallments:
    """Tests for installment plans."""

    def test_three_installments_sum_to_total(self, base):
        drafts = expand(base, "installment", installment_total=3)

        assert [d.amount for d in drafts] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]
        assert sum(d.amount for d in drafts) == Decimal("100.00")

    def test_installments_are_monthly_by_default(self, base):
        drafts = expand(base, "installment", installment_total=3)

        assert [d.date for d in drafts] == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31)]
        assert all(d.recurring_frequency == "monthly" for d in drafts)

    def test_installments_are_tagged(self, base):
        drafts = expand(base, "installment", installment_total=3)

        assert [d.installment_current for d in drafts] == [1, 2, 3]
        assert all(d.installment_total == 3 for d in drafts)
        assert all(d.is_recurring and d.recurring_type == "installment" for d in drafts)
        assert all(d.category_id == 2 and d.account_id == 1 for d in drafts)

    def test_explicit_frequency_and_interval(self, base):
        drafts = expand(base, "installment", frequency="weekly", interval=2, installment_total=2)

        assert [d.date for d in drafts] == [date(2024, 1, 31), date(2024, 2, 14)]

    def test_single_installment(self, base):
        drafts = expand(base, "installment", installment_total=1)

        assert len(drafts) == 1
        assert drafts[0].amount == Decimal("100.00")

    @pytest.mark.parametrize("total", [None, 0, MAX_OCCURRENCES + 1])
    def test_invalid_installment_total(self, base, total):
        with pytest.raises(ValidationError):
            expand(base, "installment", installment_total=total)

    def test_installment_share_rounding_to_zero(self, base):
        tiny = EntryDraft("Gum", Decimal("0.02"), date(2024, 1, 1), 1, "debit")
        with pytest.raises(ValidationError):
            expand(tiny, "installment", installment_total=3)


class TestAdvanced:
    """Tests for advanced (frequency based) recurrence."""

    def test_monthly_from_month_end(self, base):
        drafts = expand(base, "advanced", frequency="monthly", end_date=date(2024, 4, 30))

        assert [d.date for d in drafts] == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]
        # Each occurrence repeats the full amount
        assert all(d.amount == Decimal("100.00") for d in drafts)
        assert all(d.installment_current is None for d in drafts)

    def test_end_date_is_inclusive(self, base):
        drafts = expand(base, "advanced", frequency="daily", end_date=date(2024, 2, 2))

        assert [d.date for d in drafts] == [date(2024, 1, 31), date(2024, 2, 1), date(2024, 2, 2)]

    def test_end_date_on_start_yields_one(self, base):
        drafts = expand(base, "advanced", frequency="weekly", end_date=base.date)
        assert len(drafts) == 1

    def test_interval(self, base):
        drafts = expand(base, "advanced", frequency="monthly", interval=3, end_date=date(2024, 12, 31))

        assert [d.date for d in drafts] == [
            date(2024, 1, 31),
            date(2024, 4, 30),
            date(2024, 7, 31),
            date(2024, 10, 31),
        ]

    def test_without_end_date_is_capped(self, base):
        drafts = expand(base, "advanced", frequency="daily")
        assert len(drafts) == MAX_OCCURRENCES

    def test_cap_applies_with_distant_end_date(self, base):
        drafts = expand(base, "advanced", frequency="daily", end_date=date(2030, 1, 1))
        assert len(drafts) == MAX_OCCURRENCES

    def test_requires_frequency(self, base):
        with pytest.raises(ValidationError):
            expand(base, "advanced", end_date=date(2024, 4, 30))


class TestValidation:
    """Tests for malformed rules."""

    def test_end_date_before_start(self, base):
        with pytest.raises(ValidationError):
            expand(base, "advanced", frequency="monthly", end_date=date(2023, 12, 31))

    def test_interval_below_one(self, base):
        with pytest.raises(ValidationError):
            expand(base, "advanced", frequency="monthly", interval=0)

    def test_unknown_frequency(self, base):
        with pytest.raises(ValidationError):
            expand(base, "advanced", frequency="hourly")

    def test_unknown_recurring_type(self, base):
        with pytest.raises(ValidationError):
            expand(base, "sometimes")
