"""Savings goal domain service."""

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from fintrack.database.base import Database
from fintrack.domain.balance import load_account
from fintrack.domain.entities import Account, Goal, GoalProgress
from fintrack.domain.errors import NotFoundError, ValidationError, goal_not_found
from fintrack.utils.amount_parser import CENTS, to_positive_money
from fintrack.utils.date_parser import parse_date
from fintrack.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_GOAL_COLOR = "#3B82F6"
DEFAULT_GOAL_ICON = "piggy-bank"
HUNDRED = Decimal("100")


def progress_percent(current: Decimal, target: Decimal) -> Decimal:
    """Percentage of ``target`` reached by ``current``, capped at 100."""
    percent = (current / target * HUNDRED).quantize(CENTS, rounding=ROUND_HALF_UP)
    return min(percent, HUNDRED.quantize(CENTS))


class GoalService:
    """Service for savings goals.

    A goal's current amount is never entered by hand: it is the sum of the
    balances of its linked accounts, refreshed every time the goal is read.
    """

    def __init__(self, db: Database):
        """Initialize goal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_goal(
        self,
        user_id: int,
        name: str,
        target_amount,
        target_date=None,
        description: Optional[str] = None,
        color: str = DEFAULT_GOAL_COLOR,
        icon: str = DEFAULT_GOAL_ICON,
        account_ids: Iterable[int] = (),
    ) -> Goal:
        """Create a goal, optionally linked to accounts.

        Raises:
            ValidationError: If name is empty or target is not positive
            NotFoundError: If a linked account is not the user's
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Goal name cannot be empty")
        target = to_positive_money(target_amount, "target_amount")
        when: Optional[date] = parse_date(target_date) if target_date is not None else None
        account_ids = list(account_ids)
        for account_id in account_ids:
            load_account(self.db, user_id, account_id)

        with self.db.atomic():
            goal_id = self.db.create_goal(
                user_id=user_id,
                name=name,
                target_amount=target,
                color=color,
                icon=icon,
                description=description,
                target_date=when,
            )
            for account_id in account_ids:
                self.db.link_goal_account(goal_id, account_id)
        return self.get_goal(user_id, goal_id)

    def _owned_goal(self, user_id: int, goal_id: int) -> Goal:
        goal = self.db.get_goal(goal_id)
        if goal is None or goal.user_id != user_id:
            raise NotFoundError(goal_not_found(goal_id))
        return goal

    def _refresh(self, goal: Goal) -> GoalProgress:
        current = sum(
            (self.db.get_account(account_id).balance for account_id in self.db.list_goal_account_ids(goal.id)),
            Decimal("0.00"),
        )
        if current != goal.current_amount:
            self.db.update_goal_progress(goal.id, current)
        return GoalProgress(
            goal_id=goal.id,
            current_amount=current,
            percent=progress_percent(current, goal.target_amount),
        )

    def progress(self, user_id: int, goal_id: int) -> GoalProgress:
        """Compute a goal's progress over its linked accounts.

        Inactive linked accounts still count. The result is written back to
        the goal's current amount.

        Raises:
            NotFoundError: If the goal is not the user's
        """
        return self._refresh(self._owned_goal(user_id, goal_id))

    def get_goal(self, user_id: int, goal_id: int) -> Optional[Goal]:
        """Get goal by ID with a refreshed current amount, or None."""
        goal = self.db.get_goal(goal_id)
        if goal is None or goal.user_id != user_id:
            return None
        self._refresh(goal)
        return self.db.get_goal(goal_id)

    def list_goals(self, user_id: int) -> list[Goal]:
        """List a user's goals with refreshed current amounts."""
        for goal in self.db.list_goals(user_id):
            self._refresh(goal)
        return self.db.list_goals(user_id)

    def link_account(self, user_id: int, goal_id: int, account_id: int) -> bool:
        """Link an account to a goal. Linking twice is a no-op.

        Returns:
            True if a new link was created
        """
        self._owned_goal(user_id, goal_id)
        load_account(self.db, user_id, account_id)
        return self.db.link_goal_account(goal_id, account_id)

    def unlink_account(self, user_id: int, goal_id: int, account_id: int) -> bool:
        """Unlink an account from a goal. Unlinking twice is a no-op.

        Returns:
            True if a link was removed
        """
        self._owned_goal(user_id, goal_id)
        return self.db.unlink_goal_account(goal_id, account_id)

    def linked_accounts(self, user_id: int, goal_id: int) -> list[Account]:
        """Accounts linked to a goal."""
        self._owned_goal(user_id, goal_id)
        return [self.db.get_account(account_id) for account_id in self.db.list_goal_account_ids(goal_id)]

    def set_completed(self, user_id: int, goal_id: int, is_completed: bool = True) -> Goal:
        """Mark a goal completed (or not)."""
        self._owned_goal(user_id, goal_id)
        self.db.set_goal_completed(goal_id, is_completed)
        return self.db.get_goal(goal_id)

    def delete_goal(self, user_id: int, goal_id: int) -> None:
        """Delete a goal and its account links. The accounts are untouched."""
        self._owned_goal(user_id, goal_id)
        with self.db.atomic():
            for account_id in self.db.list_goal_account_ids(goal_id):
                self.db.unlink_goal_account(goal_id, account_id)
            self.db.delete_goal(goal_id)
        logger.info("Deleted goal %s", goal_id)
