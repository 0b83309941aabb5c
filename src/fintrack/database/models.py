"""SQLAlchemy models for the fintrack database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

# Money columns; values are always quantized to cents before they get here
Money = Numeric(12, 2)


class User(Base):
    """User (tenant) model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    kind = Column(String, nullable=False)
    initial_balance = Column(Money, nullable=False, default=Decimal("0.00"))
    balance = Column(Money, nullable=False, default=Decimal("0.00"))
    color = Column(String, nullable=False, default="#6B7280")
    last_four_digits = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_account_user_name"),)

    # Relationships
    entries = relationship("Entry", back_populates="account")
    goal_links = relationship("GoalAccount", back_populates="account")


class Category(Base):
    """Expense category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    color = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_category_user_name"),)

    entries = relationship("Entry", back_populates="category")


class Transfer(Base):
    """Transfer header; its two halves live in the entries table."""

    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Money, nullable=False)
    date = Column(Date, nullable=False)
    from_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    to_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    entries = relationship("Entry", back_populates="transfer")


class Entry(Base):
    """Ledger entry model (expense, income or transfer half)."""

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    description = Column(String, nullable=False)
    amount = Column(Money, nullable=False)
    date = Column(Date, nullable=False)
    transaction_type = Column(String, nullable=False)
    transfer_id = Column(Integer, ForeignKey("transfers.id"), nullable=True)
    # Recurrence metadata
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_type = Column(String, default="none", nullable=False)
    recurring_frequency = Column(String, nullable=True)
    recurring_interval = Column(Integer, default=1, nullable=False)
    installment_total = Column(Integer, nullable=True)
    installment_current = Column(Integer, nullable=True)
    recurring_end_date = Column(Date, nullable=True)
    parent_expense_id = Column(Integer, ForeignKey("entries.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("ix_entries_account_date", "account_id", "date"),
        Index("ix_entries_transfer", "transfer_id"),
    )

    account = relationship("Account", back_populates="entries")
    category = relationship("Category", back_populates="entries")
    transfer = relationship("Transfer", back_populates="entries")


class Goal(Base):
    """Savings goal model."""

    __tablename__ = "goals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    target_amount = Column(Money, nullable=False)
    current_amount = Column(Money, nullable=False, default=Decimal("0.00"))
    target_date = Column(Date, nullable=True)
    is_completed = Column(Boolean, default=False, nullable=False)
    color = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    account_links = relationship("GoalAccount", back_populates="goal", cascade="all, delete-orphan")


class GoalAccount(Base):
    """Link between a goal and an account."""

    __tablename__ = "goal_accounts"

    id = Column(Integer, primary_key=True)
    goal_id = Column(Integer, ForeignKey("goals.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)

    __table_args__ = (UniqueConstraint("goal_id", "account_id", name="uq_goal_account"),)

    goal = relationship("Goal", back_populates="account_links")
    account = relationship("Account", back_populates="goal_links")


class Roommate(Base):
    """Roommate model."""

    __tablename__ = "roommates"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)


class BillSplit(Base):
    """Bill split model."""

    __tablename__ = "bill_splits"

    id = Column(Integer, primary_key=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    total_amount = Column(Money, nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    participants = relationship(
        "BillSplitParticipant",
        back_populates="bill_split",
        cascade="all, delete-orphan",
        order_by="BillSplitParticipant.id",
    )


class BillSplitParticipant(Base):
    """Bill split participant share model."""

    __tablename__ = "bill_split_participants"

    id = Column(Integer, primary_key=True)
    bill_split_id = Column(Integer, ForeignKey("bill_splits.id"), nullable=False)
    roommate_id = Column(Integer, ForeignKey("roommates.id"), nullable=True)
    amount = Column(Money, nullable=False)
    is_paid = Column(Boolean, default=False, nullable=False)
    paid_at = Column(DateTime, nullable=True)

    bill_split = relationship("BillSplit", back_populates="participants")


def create_database_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url`` and make sure the schema exists."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are thread-scoped, connections come back to a shared pool
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return engine
