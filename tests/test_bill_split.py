"""Tests for bill splits."""

import pytest
from decimal import Decimal

from fintrack.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def roommates(split_service, sample_user):
    ana = split_service.create_roommate(sample_user.id, "Ana", email="ana@example.com")
    bruno = split_service.create_roommate(sample_user.id, "Bruno")
    return ana, bruno


class TestBillSplitService:
    """Tests for BillSplitService."""

    def test_explicit_shares(self, split_service, sample_user, roommates):
        ana, bruno = roommates

        split = split_service.create_split(
            sample_user.id, "Internet", "100.00", [(None, "40.00"), (ana.id, "35.00"), (bruno.id, "25.00")]
        )

        assert split.total_amount == Decimal("100.00")
        assert [p.amount for p in split.participants] == [Decimal("40.00"), Decimal("35.00"), Decimal("25.00")]
        assert [p.roommate_id for p in split.participants] == [None, ana.id, bruno.id]
        assert not any(p.is_paid for p in split.participants)

    def test_shares_must_sum_to_total(self, split_service, sample_user, roommates):
        ana, _ = roommates

        with pytest.raises(ValidationError, match="add up"):
            split_service.create_split(sample_user.id, "Internet", "100.00", [(None, "40.00"), (ana.id, "50.00")])
        assert split_service.list_splits(sample_user.id) == []

    def test_split_needs_participants_and_title(self, split_service, sample_user):
        with pytest.raises(ValidationError):
            split_service.create_split(sample_user.id, "Internet", "100.00", [])
        with pytest.raises(ValidationError):
            split_service.create_split(sample_user.id, " ", "100.00", [(None, "100.00")])

    def test_foreign_roommate(self, split_service, sample_user, other_user):
        theirs = split_service.create_roommate(other_user.id, "Carla")

        with pytest.raises(NotFoundError):
            split_service.create_split(sample_user.id, "Rent", "10.00", [(theirs.id, "10.00")])

    def test_even_split_is_cent_exact(self, split_service, sample_user, roommates):
        ana, bruno = roommates

        split = split_service.create_even_split(sample_user.id, "Electricity", "100.00", [ana.id, bruno.id])

        assert [p.roommate_id for p in split.participants] == [None, ana.id, bruno.id]
        assert [p.amount for p in split.participants] == [Decimal("33.34"), Decimal("33.33"), Decimal("33.33")]

    def test_even_split_without_self(self, split_service, sample_user, roommates):
        ana, bruno = roommates

        split = split_service.create_even_split(
            sample_user.id, "Water", "50.00", [ana.id, bruno.id], include_self=False
        )

        assert [p.roommate_id for p in split.participants] == [ana.id, bruno.id]
        assert sum(p.amount for p in split.participants) == Decimal("50.00")

    def test_mark_paid_and_pending(self, split_service, sample_user, roommates):
        ana, bruno = roommates
        split = split_service.create_even_split(sample_user.id, "Electricity", "90.00", [ana.id, bruno.id])
        assert split_service.pending_amount(sample_user.id) == Decimal("90.00")

        share = split.participants[1]
        paid = split_service.set_participant_paid(sample_user.id, share.id)

        assert paid.is_paid
        assert paid.paid_at is not None
        assert split_service.pending_amount(sample_user.id) == Decimal("60.00")

        unpaid = split_service.set_participant_paid(sample_user.id, share.id, is_paid=False)
        assert not unpaid.is_paid
        assert unpaid.paid_at is None

    def test_paying_never_touches_accounts(self, split_service, reconciler, sample_user, sample_account, roommates):
        ana, _ = roommates
        split = split_service.create_split(sample_user.id, "Rent", "10.00", [(ana.id, "10.00")])

        split_service.set_participant_paid(sample_user.id, split.participants[0].id)

        assert reconciler.get_balance(sample_user.id, sample_account.id) == Decimal("1000.00")

    def test_other_user_cannot_mark_paid(self, split_service, sample_user, other_user, roommates):
        ana, _ = roommates
        split = split_service.create_split(sample_user.id, "Rent", "10.00", [(ana.id, "10.00")])

        with pytest.raises(NotFoundError):
            split_service.set_participant_paid(other_user.id, split.participants[0].id)
        assert split_service.get_split(other_user.id, split.id) is None

    def test_list_newest_first(self, split_service, sample_user):
        first = split_service.create_split(sample_user.id, "A", "1.00", [(None, "1.00")])
        second = split_service.create_split(sample_user.id, "B", "2.00", [(None, "2.00")])

        assert [s.id for s in split_service.list_splits(sample_user.id)] == [second.id, first.id]
