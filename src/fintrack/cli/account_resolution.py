"""CLI helpers for resolving users, accounts and categories from names or IDs."""

from __future__ import annotations

import click
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.errors import NotFoundError
from fintrack.domain.user import UserService
from fintrack.cli.error_handling import handle_domain_error


def _as_id(ref: str | int) -> int | None:
    if isinstance(ref, int):
        return ref
    try:
        return int(ref)
    except (ValueError, TypeError):
        return None


def resolve_user(user_service: UserService, user: str | int) -> int:
    """Resolve a user name, email or ID to a user ID.

    Raises:
        NotFoundError: If no user matches
    """
    user_id = _as_id(user)
    if user_id is not None:
        return user_service.require_user(user_id).id

    for candidate in user_service.list_users():
        if candidate.name == user or candidate.email == user:
            return candidate.id
    raise NotFoundError(f"User '{user}' not found")


def resolve_account(account_service: AccountService, user_id: int, account: str | int) -> int:
    """Resolve one of the user's account names or IDs to an account ID.

    Raises:
        NotFoundError: If the user has no such account
    """
    account_id = _as_id(account)
    if account_id is not None:
        return account_service.require_account(user_id, account_id).id

    for acc in account_service.list_accounts(user_id):
        if acc.name == account:
            return acc.id
    raise NotFoundError(f"Account '{account}' not found")


def current_user_or_exit(ctx: click.Context) -> int:
    """Resolve the --user option (or FINTRACK_USER), or exit with a CLI error.

    With no user given, a database holding exactly one user uses that user.
    """
    root = ctx.find_root()
    user_ref = root.obj.get("user_ref")
    service = UserService(root.obj["db"])
    try:
        if user_ref is not None:
            return resolve_user(service, user_ref)
        users = service.list_users()
        if len(users) == 1:
            return users[0].id
    except NotFoundError as e:
        handle_domain_error(ctx, e)

    click.echo(
        "Error: No user selected. Pass --user NAME_OR_ID, set FINTRACK_USER, "
        "or create one with 'fintrack user create'.",
        err=True,
    )
    ctx.exit(1)


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, user_id: int, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, user_id, account)
    except NotFoundError as e:
        handle_domain_error(ctx, e)


def resolve_category_or_exit(ctx: click.Context, category_service: CategoryService, user_id: int, category: str) -> int:
    """Resolve one of the user's category names or IDs, or exit with a CLI error."""
    try:
        category_id = _as_id(category)
        if category_id is not None:
            return category_service.require_category(user_id, category_id).id
        found = category_service.get_category_by_name(user_id, category)
        if found is None:
            raise NotFoundError(f"Category '{category}' not found")
        return found.id
    except NotFoundError as e:
        handle_domain_error(ctx, e)
