"""Bill splitting among roommates.

Splits are a record of who owes what. Marking a share paid never moves
money between accounts and never creates ledger entries.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional, Sequence

from fintrack.database.base import Database
from fintrack.domain.entities import BillSplit, BillSplitParticipant, Roommate
from fintrack.domain.errors import (
    NotFoundError,
    ValidationError,
    participant_not_found,
    roommate_not_found,
)
from fintrack.utils.amount_parser import format_amount, split_amount, to_positive_money


class BillSplitService:
    """Service for roommates, bill splits and their participant shares."""

    def __init__(self, db: Database):
        """Initialize bill split service.

        Args:
            db: Database instance
        """
        self.db = db

    # Roommates
    def create_roommate(
        self, user_id: int, name: str, email: Optional[str] = None, phone: Optional[str] = None
    ) -> Roommate:
        """Create a roommate.

        Raises:
            ValidationError: If name is empty
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Roommate name cannot be empty")
        roommate_id = self.db.create_roommate(user_id=user_id, name=name, email=email, phone=phone)
        return self.db.get_roommate(roommate_id)

    def list_roommates(self, user_id: int) -> list[Roommate]:
        return self.db.list_roommates(user_id)

    def _check_roommate(self, user_id: int, roommate_id: Optional[int]) -> None:
        if roommate_id is None:
            return
        roommate = self.db.get_roommate(roommate_id)
        if roommate is None or roommate.user_id != user_id:
            raise NotFoundError(roommate_not_found(roommate_id))

    # Splits
    def create_split(
        self,
        user_id: int,
        title: str,
        total_amount,
        shares: Sequence[tuple[Optional[int], object]],
        description: Optional[str] = None,
    ) -> BillSplit:
        """Create a bill split from explicit shares.

        Args:
            user_id: User creating the split
            title: Short title of the bill
            total_amount: Full amount of the bill
            shares: ``(roommate_id, amount)`` pairs; roommate_id None is the
                user's own share
            description: Optional longer description

        Returns:
            Created split with its participants

        Raises:
            ValidationError: If title is empty, there are no shares, a share is
                not positive, or the shares do not add up to the total
            NotFoundError: If a roommate is not the user's
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError("Bill split title cannot be empty")
        total = to_positive_money(total_amount, "total_amount")
        if not shares:
            raise ValidationError("A bill split needs at least one participant")

        normalized = []
        for roommate_id, amount in shares:
            self._check_roommate(user_id, roommate_id)
            normalized.append((roommate_id, to_positive_money(amount, "share amount")))

        share_sum = sum((amount for _, amount in normalized), Decimal("0.00"))
        if share_sum != total:
            raise ValidationError(
                f"Shares add up to {format_amount(share_sum)}, expected {format_amount(total)}"
            )

        split_id = self.db.create_bill_split(
            created_by=user_id,
            title=title,
            total_amount=total,
            shares=normalized,
            description=description,
        )
        return self.db.get_bill_split(split_id)

    def create_even_split(
        self,
        user_id: int,
        title: str,
        total_amount,
        roommate_ids: Sequence[int],
        include_self: bool = True,
        description: Optional[str] = None,
    ) -> BillSplit:
        """Split a bill evenly, cent-exact, among roommates (and the user).

        Leftover cents go to the first participants; the user's own share,
        when included, comes first.
        """
        participants: list[Optional[int]] = [None] if include_self else []
        participants.extend(roommate_ids)
        if not participants:
            raise ValidationError("A bill split needs at least one participant")
        total = to_positive_money(total_amount, "total_amount")
        amounts = split_amount(total, len(participants))
        return self.create_split(
            user_id,
            title,
            total,
            list(zip(participants, amounts)),
            description=description,
        )

    def get_split(self, user_id: int, split_id: int) -> Optional[BillSplit]:
        split = self.db.get_bill_split(split_id)
        if split is None or split.created_by != user_id:
            return None
        return split

    def list_splits(self, user_id: int) -> list[BillSplit]:
        """List the user's splits, newest first, with participants."""
        return self.db.list_bill_splits(user_id)

    def set_participant_paid(
        self, user_id: int, participant_id: int, is_paid: bool = True
    ) -> BillSplitParticipant:
        """Mark a share paid (stamping ``paid_at``) or unpaid (clearing it).

        Raises:
            NotFoundError: If the share does not belong to one of the user's splits
        """
        participant = self.db.get_participant(participant_id)
        if participant is None or self.get_split(user_id, participant.bill_split_id) is None:
            raise NotFoundError(participant_not_found(participant_id))

        paid_at = datetime.now(UTC) if is_paid else None
        self.db.set_participant_paid(participant_id, is_paid, paid_at)
        return self.db.get_participant(participant_id)

    def pending_amount(self, user_id: int) -> Decimal:
        """Sum of unpaid shares over the user's splits."""
        return sum(
            (
                participant.amount
                for split in self.db.list_bill_splits(user_id)
                for participant in split.participants
                if not participant.is_paid
            ),
            Decimal("0.00"),
        )
