"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so services only ever see frozen
domain entities and never a live ORM row.
"""

from decimal import Decimal

from fintrack.domain import entities as domain
from fintrack.database.models import (
    User as ORMUser,
    Account as ORMAccount,
    Category as ORMCategory,
    Entry as ORMEntry,
    Transfer as ORMTransfer,
    Goal as ORMGoal,
    Roommate as ORMRoommate,
    BillSplit as ORMBillSplit,
    BillSplitParticipant as ORMBillSplitParticipant,
)

CENTS = Decimal("0.01")


def _money(value) -> Decimal:
    """Normalize a stored money value to a two-place Decimal."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        name=orm_user.name,
        email=orm_user.email,
        created_at=orm_user.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        name=orm_account.name,
        kind=orm_account.kind,
        initial_balance=_money(orm_account.initial_balance),
        balance=_money(orm_account.balance),
        color=orm_account.color,
        last_four_digits=orm_account.last_four_digits,
        is_active=bool(orm_account.is_active),
        sort_order=orm_account.sort_order or 0,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        icon=orm_category.icon,
        color=orm_category.color,
        created_at=orm_category.created_at,
    )


def entry_to_domain(orm_entry: ORMEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy Entry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        user_id=orm_entry.user_id,
        account_id=orm_entry.account_id,
        category_id=orm_entry.category_id,
        description=orm_entry.description,
        amount=_money(orm_entry.amount),
        date=orm_entry.date,
        transaction_type=orm_entry.transaction_type,
        transfer_id=orm_entry.transfer_id,
        is_recurring=bool(orm_entry.is_recurring),
        recurring_type=orm_entry.recurring_type or domain.RECURRING_NONE,
        recurring_frequency=orm_entry.recurring_frequency,
        recurring_interval=orm_entry.recurring_interval or 1,
        installment_total=orm_entry.installment_total,
        installment_current=orm_entry.installment_current,
        recurring_end_date=orm_entry.recurring_end_date,
        parent_expense_id=orm_entry.parent_expense_id,
        created_at=orm_entry.created_at,
    )


def transfer_to_domain(orm_transfer: ORMTransfer) -> domain.Transfer:
    """Convert SQLAlchemy Transfer model to domain Transfer entity."""
    return domain.Transfer(
        id=orm_transfer.id,
        user_id=orm_transfer.user_id,
        description=orm_transfer.description,
        amount=_money(orm_transfer.amount),
        date=orm_transfer.date,
        from_account_id=orm_transfer.from_account_id,
        to_account_id=orm_transfer.to_account_id,
        created_at=orm_transfer.created_at,
    )


def goal_to_domain(orm_goal: ORMGoal) -> domain.Goal:
    """Convert SQLAlchemy Goal model to domain Goal entity."""
    return domain.Goal(
        id=orm_goal.id,
        user_id=orm_goal.user_id,
        name=orm_goal.name,
        description=orm_goal.description,
        target_amount=_money(orm_goal.target_amount),
        current_amount=_money(orm_goal.current_amount),
        target_date=orm_goal.target_date,
        is_completed=bool(orm_goal.is_completed),
        color=orm_goal.color,
        icon=orm_goal.icon,
        created_at=orm_goal.created_at,
    )


def roommate_to_domain(orm_roommate: ORMRoommate) -> domain.Roommate:
    """Convert SQLAlchemy Roommate model to domain Roommate entity."""
    return domain.Roommate(
        id=orm_roommate.id,
        user_id=orm_roommate.user_id,
        name=orm_roommate.name,
        email=orm_roommate.email,
        phone=orm_roommate.phone,
    )


def participant_to_domain(orm_participant: ORMBillSplitParticipant) -> domain.BillSplitParticipant:
    """Convert SQLAlchemy BillSplitParticipant model to domain entity."""
    return domain.BillSplitParticipant(
        id=orm_participant.id,
        bill_split_id=orm_participant.bill_split_id,
        roommate_id=orm_participant.roommate_id,
        amount=_money(orm_participant.amount),
        is_paid=bool(orm_participant.is_paid),
        paid_at=orm_participant.paid_at,
    )


def bill_split_to_domain(orm_split: ORMBillSplit) -> domain.BillSplit:
    """Convert SQLAlchemy BillSplit model (with participants) to domain entity."""
    return domain.BillSplit(
        id=orm_split.id,
        created_by=orm_split.created_by,
        title=orm_split.title,
        total_amount=_money(orm_split.total_amount),
        description=orm_split.description,
        created_at=orm_split.created_at,
        participants=tuple(participant_to_domain(p) for p in orm_split.participants),
    )
