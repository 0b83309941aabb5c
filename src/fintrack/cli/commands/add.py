"""Add entry command."""

import click
from fintrack.domain.account import AccountService
from fintrack.domain.category import CategoryService
from fintrack.domain.entities import FREQUENCIES, RECURRING_ADVANCED, RECURRING_INSTALLMENT, RECURRING_NONE
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


@click.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Amount, always positive (e.g., 123.45)")
@click.option("--description", required=True, help="What the money was for")
@click.option("--category", required=True, help="Category name or ID")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["debit", "credit"]),
    default="debit",
    show_default=True,
    help="debit for an expense, credit for income",
)
@click.option("--installments", type=int, help="Split the amount into this many installments")
@click.option(
    "--every",
    type=click.Choice(FREQUENCIES),
    help="Repeat the full amount at this frequency (installments default to monthly)",
)
@click.option("--interval", type=int, default=1, show_default=True, help="Frequency units between entries")
@click.option("--until", help="Last date a repeated entry may fall on")
@click.pass_context
def add_entry(
    ctx,
    account: str,
    date: str,
    amount: str,
    description: str,
    category: str,
    transaction_type: str,
    installments: int | None,
    every: str | None,
    interval: int,
    until: str | None,
):
    """Record an expense or income entry, optionally recurring.

    Examples:
        fintrack add --account Nubank --amount 45.90 --description "Lunch" --category Food
        fintrack add --account 1 --amount 5000 --description Salary --category Other --type credit
        fintrack add --account 1 --amount 100.00 --description Phone --category Other --installments 3
        fintrack add --account 1 --amount 39.90 --description Gym --category Health \\
            --every monthly --until 2024-12-31
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    ledger = LedgerService(db)
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    category_id = resolve_category_or_exit(ctx, CategoryService(db), user_id, category)

    if installments is not None:
        recurring_type = RECURRING_INSTALLMENT
    elif every is not None:
        recurring_type = RECURRING_ADVANCED
    else:
        recurring_type = RECURRING_NONE

    try:
        entries = ledger.record_entry(
            user_id,
            description=description,
            amount=parse_amount(amount),
            date=parse_date(date),
            category_id=category_id,
            account_id=account_id,
            transaction_type=transaction_type,
            recurring_type=recurring_type,
            recurring_frequency=every,
            recurring_interval=interval,
            installment_total=installments,
            recurring_end_date=parse_date(until) if until else None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if len(entries) == 1:
        entry = entries[0]
        click.echo(f"Created entry {entry.id}")
        click.echo(f"  Date: {entry.date}")
        click.echo(f"  Amount: {format_amount(entry.amount)} ({entry.transaction_type})")
        click.echo(f"  Description: {entry.description}")
    else:
        click.echo(f"Created {len(entries)} entries ({entries[0].date} to {entries[-1].date})")
        for entry in entries:
            label = (
                f"{entry.installment_current}/{entry.installment_total}"
                if entry.installment_total
                else entry.recurring_frequency
            )
            click.echo(f"  {entry.id:5d} | {entry.date} | {format_amount(entry.amount):>10s} | {label}")

    balance = AccountService(db).require_account(user_id, account_id).balance
    click.echo(f"  Account balance: {format_amount(balance)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_entry)
