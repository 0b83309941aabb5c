"""Transfer commands."""

import click
from fintrack.domain.account import AccountService
from fintrack.domain.errors import DomainError
from fintrack.domain.ledger import LedgerService
from fintrack.cli.account_resolution import current_user_or_exit, resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.amount_parser import format_amount, parse_amount
from fintrack.utils.date_parser import parse_date


@click.group()
def transfer_group():
    """Move money between accounts."""
    pass


@transfer_group.command("create")
@click.option("--from", "from_account", required=True, help="Source account name or ID")
@click.option("--to", "to_account", required=True, help="Destination account name or ID")
@click.option("--amount", required=True, help="Amount to move (e.g., 200.00)")
@click.option("--date", default="today", show_default=True, help="Transfer date")
@click.option("--description", default="Transfer", show_default=True, help="Transfer description")
@click.pass_context
def create_transfer(ctx, from_account: str, to_account: str, amount: str, date: str, description: str):
    """Transfer money from one account to another.

    Examples:
        fintrack transfer create --from Nubank --to Savings --amount 200.00
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    accounts = AccountService(db)
    source_id = resolve_account_or_exit(ctx, accounts, user_id, from_account)
    target_id = resolve_account_or_exit(ctx, accounts, user_id, to_account)

    try:
        pair = LedgerService(db).record_transfer(
            user_id,
            description=description,
            amount=parse_amount(amount),
            date=parse_date(date),
            from_account_id=source_id,
            to_account_id=target_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    source = accounts.require_account(user_id, source_id)
    target = accounts.require_account(user_id, target_id)
    click.echo(f"Created transfer {pair.transfer.id}: {format_amount(pair.transfer.amount)}")
    click.echo(f"  {source.name}: {format_amount(source.balance)}")
    click.echo(f"  {target.name}: {format_amount(target.balance)}")


@transfer_group.command("delete")
@click.argument("transfer_id", type=int)
@click.pass_context
def delete_transfer(ctx, transfer_id: int):
    """Delete a transfer and both of its entries."""
    user_id = current_user_or_exit(ctx)
    try:
        LedgerService(ctx.obj["db"]).delete_transfer(user_id, transfer_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transfer {transfer_id}")


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
