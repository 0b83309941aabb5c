"""Ledger entry management commands."""

import click
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import BALANCE_SIGNS
from fintrack.domain.errors import DomainError
from fintrack.domain.ledger import LedgerService
from fintrack.cli.account_resolution import (
    current_user_or_exit,
    resolve_account_or_exit,
    resolve_category_or_exit,
)
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.amount_parser import format_amount, parse_amount
from fintrack.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage ledger entries."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--category", help="Category name or ID")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_entries(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    account: str | None,
) -> None:
    """View entries, newest first, with optional filters.

    Examples:
        fintrack transaction list
        fintrack transaction list --account Nubank --start-date 2024-01-01
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_service = AccountService(db)
    category_service = CategoryService(db)

    account_id = resolve_account_or_exit(ctx, account_service, user_id, account) if account else None
    category_id = resolve_category_or_exit(ctx, category_service, user_id, category) if category else None
    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except DomainError as e:
        handle_domain_error(ctx, e)

    entries = LedgerService(db).list_entries(
        user_id, account_id=account_id, category_id=category_id, start_date=start, end_date=end
    )
    if not entries:
        click.echo("No entries found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts(user_id)}
    categories = {cat.id: cat.name for cat in category_service.list_categories(user_id)}

    click.echo(f"\nFound {len(entries)} entr{'ies' if len(entries) != 1 else 'y'}:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Type':<13} {'Account':<20} {'Category':<14} {'Description':<20}"
    )
    click.echo("-" * 100)
    for entry in entries:
        click.echo(
            f"{entry.id:<6} {str(entry.date):<12} {format_amount(entry.signed_amount):>12} "
            f"{entry.transaction_type:<13} {accounts.get(entry.account_id, 'Unknown'):<20} "
            f"{categories.get(entry.category_id, ''):<14} {entry.description[:20]:<20}"
        )

    total_out = sum(e.amount for e in entries if BALANCE_SIGNS[e.transaction_type] < 0)
    total_in = sum(e.amount for e in entries if BALANCE_SIGNS[e.transaction_type] > 0)
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<6} {'':<12} Out: {format_amount(total_out)} | "
        f"In: {format_amount(total_in)} | Count: {len(entries)}"
    )


@transaction_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--date", help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="Amount, always positive (e.g., 123.45)")
@click.option("--description", help="Entry description")
@click.option("--category", help="Category name or ID")
@click.option("--type", "transaction_type", type=click.Choice(["debit", "credit"]), help="debit or credit")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    account: str | None,
    date: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
    transaction_type: str | None,
) -> None:
    """Update an entry. Only the provided fields change.

    Transfer entries cannot be edited; delete the transfer and record it again.

    Examples:
        fintrack transaction update 1 --amount 75.00
        fintrack transaction update 1 --account Savings --type credit
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account) if account else None
    category_id = (
        resolve_category_or_exit(ctx, CategoryService(db), user_id, category) if category else None
    )

    try:
        entry = LedgerService(db).update_entry(
            user_id,
            entry_id,
            description=description,
            amount=parse_amount(amount) if amount is not None else None,
            date=parse_date(date) if date is not None else None,
            category_id=category_id,
            account_id=account_id,
            transaction_type=transaction_type,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated entry {entry.id}")


@transaction_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool) -> None:
    """Delete an entry and reverse its effect on the balance.

    Deleting either half of a transfer deletes the whole transfer.

    Examples:
        fintrack transaction delete 1
    """
    user_id = current_user_or_exit(ctx)
    ledger = LedgerService(ctx.obj["db"])

    entry = ledger.get_entry(user_id, entry_id)
    if entry is None:
        click.echo(f"Error: Entry {entry_id} not found", err=True)
        ctx.exit(1)

    what = f"transfer {entry.transfer_id}" if entry.transfer_id else f"entry {entry_id}"
    if not yes and not click.confirm(f"Are you sure you want to delete {what}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ledger.delete_entry(user_id, entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted {what}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
