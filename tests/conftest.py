"""Shared pytest fixtures for fintrack tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from fintrack.database.factories import create_sqlite_database
from fintrack.domain.account import AccountService
from fintrack.domain.balance import BalanceReconciler
from fintrack.domain.bill_split import BillSplitService
from fintrack.domain.category import CategoryService
from fintrack.domain.goal import GoalService
from fintrack.domain.ledger import LedgerService
from fintrack.domain.statistics import StatisticsService
from fintrack.domain.user import UserService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_service(temp_db):
    return UserService(temp_db)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def reconciler(temp_db):
    return BalanceReconciler(temp_db)


@pytest.fixture
def goal_service(temp_db):
    return GoalService(temp_db)


@pytest.fixture
def split_service(temp_db):
    return BillSplitService(temp_db)


@pytest.fixture
def statistics_service(temp_db):
    return StatisticsService(temp_db)


@pytest.fixture
def sample_user(user_service):
    """Create the user most tests act as."""
    return user_service.create_user(name="Demo", email="demo@example.com")


@pytest.fixture
def other_user(user_service):
    """A second user, for ownership checks."""
    return user_service.create_user(name="Other", email="other@example.com")


@pytest.fixture
def sample_account(account_service, sample_user):
    """Create a checking account with a 1000.00 opening balance."""
    return account_service.create_account(
        sample_user.id, name="Checking", kind="checking", initial_balance=Decimal("1000.00")
    )


@pytest.fixture
def savings_account(account_service, sample_user):
    """Create a savings account with a 500.00 opening balance."""
    return account_service.create_account(
        sample_user.id, name="Savings", kind="savings", initial_balance=Decimal("500.00")
    )


@pytest.fixture
def sample_category(category_service, sample_user):
    return category_service.create_category(sample_user.id, "Food")


@pytest.fixture
def add_expense(ledger_service, sample_user, sample_category):
    """Factory recording a debit (or credit) on an account."""

    def _add(account, amount, transaction_type="debit", when=date(2024, 1, 15), description="Entry"):
        return ledger_service.record_simple_entry(
            sample_user.id,
            description=description,
            amount=Decimal(amount),
            date=when,
            category_id=sample_category.id,
            account_id=account.id,
            transaction_type=transaction_type,
        )

    return _add


@pytest.fixture
def cli_runner(monkeypatch):
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    # The environment must not redirect commands away from the temp database
    for name in ("FINTRACK_DATABASE_URL", "FINTRACK_USER"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def cli_args(temp_db, sample_user):
    """Global CLI options pointing at the temporary database and sample user."""
    return ["--db-path", temp_db.database_path, "--user", str(sample_user.id)]
