"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist for the current user."""


class ConflictError(DomainError):
    """Operation would break a referential or business rule."""


class ConsistencyError(DomainError):
    """Cached state disagrees with ground truth, or an atomic unit failed."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Entry {entry_id} not found"


def transfer_not_found(transfer_id: int) -> str:
    """Return message for missing transfer."""
    return f"Transfer {transfer_id} not found"


def goal_not_found(goal_id: int) -> str:
    """Return message for missing goal."""
    return f"Goal {goal_id} not found"


def roommate_not_found(roommate_id: int) -> str:
    """Return message for missing roommate."""
    return f"Roommate {roommate_id} not found"


def participant_not_found(participant_id: int) -> str:
    """Return message for missing bill split participant."""
    return f"Participant {participant_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"


def account_delete_blocked(account_id: int, entry_count: int, goal_count: int) -> str:
    """Return message when account has dependent entries or goal links."""
    parts = []
    if entry_count > 0:
        parts.append(f"{entry_count} ledger entr{'ies' if entry_count != 1 else 'y'}")
    if goal_count > 0:
        parts.append(f"{goal_count} goal link{'s' if goal_count != 1 else ''}")
    return (
        f"Cannot delete account {account_id}: it has {', '.join(parts)}. "
        "Please reassign or delete them first, or deactivate the account."
    )


def balance_drift(account_id: int, cached, recomputed) -> str:
    """Return message for a cached balance that disagrees with the ledger."""
    return (
        f"Account {account_id} balance drifted: cached {cached}, "
        f"recomputed from ledger {recomputed}"
    )
