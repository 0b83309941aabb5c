"""Dashboard statistics."""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.balance import BalanceReconciler
from fintrack.domain.bill_split import BillSplitService
from fintrack.domain.entities import DEBIT, CategorySpending, Statistics
from fintrack.utils.amount_parser import CENTS
from fintrack.utils.date_parser import month_bounds

UNCATEGORIZED = "Uncategorized"


class StatisticsService:
    """Service computing a user's dashboard totals."""

    def __init__(self, db: Database):
        """Initialize statistics service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceReconciler(db)
        self.splits = BillSplitService(db)

    def monthly_expenses(self, user_id: int, today: Optional[date] = None) -> Decimal:
        """Debits dated within the calendar month of ``today``, on active accounts."""
        start, end = month_bounds(today or date.today())
        active = {acc.id for acc in self.db.list_accounts(user_id, include_inactive=False)}
        entries = self.db.list_entries(
            user_id=user_id, start_date=start, end_date=end, transaction_types=[DEBIT]
        )
        return sum((e.amount for e in entries if e.account_id in active), Decimal("0.00"))

    def expenses_by_category(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CategorySpending]:
        """Break a period's spending down by category.

        Only debits count, and only on active accounts, so transfers and
        income never appear. Both dates are inclusive; either may be omitted.

        Args:
            user_id: User to report on
            start_date: First day of the period
            end_date: Last day of the period

        Returns:
            One CategorySpending per category with spending, largest amount
            first. Percentages are shares of the period total, rounded half up
            to two places.
        """
        active = {acc.id for acc in self.db.list_accounts(user_id, include_inactive=False)}
        entries = self.db.list_entries(
            user_id=user_id, start_date=start_date, end_date=end_date, transaction_types=[DEBIT]
        )

        totals: dict[Optional[int], Decimal] = {}
        for entry in entries:
            if entry.account_id not in active:
                continue
            totals[entry.category_id] = totals.get(entry.category_id, Decimal("0.00")) + entry.amount

        grand_total = sum(totals.values(), Decimal("0.00"))
        if not grand_total:
            return []

        names = {cat.id: cat.name for cat in self.db.list_categories(user_id)}
        spending = [
            CategorySpending(
                category_id=category_id,
                name=names.get(category_id, UNCATEGORIZED),
                amount=amount,
                percent=(amount / grand_total * 100).quantize(CENTS, rounding=ROUND_HALF_UP),
            )
            for category_id, amount in totals.items()
        ]
        spending.sort(key=lambda s: (-s.amount, s.name))
        return spending

    def get_statistics(self, user_id: int, today: Optional[date] = None) -> Statistics:
        """Compute the dashboard totals.

        Args:
            user_id: User to compute for
            today: Reference date for the current month (defaults to today)

        Returns:
            Statistics with total balance, monthly expenses, pending split
            amounts and savings (never negative)
        """
        total = self.balances.total_balance(user_id)
        monthly = self.monthly_expenses(user_id, today)
        return Statistics(
            total_balance=total,
            monthly_expenses=monthly,
            pending_splits=self.splits.pending_amount(user_id),
            savings=max(Decimal("0.00"), total - monthly),
        )
