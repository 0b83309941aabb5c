"""Account management commands."""

import click
from fintrack.domain.account import AccountService
from fintrack.domain.balance import BalanceReconciler
from fintrack.domain.entities import ACCOUNT_KINDS
from fintrack.domain.errors import DomainError
from fintrack.cli.account_resolution import current_user_or_exit, resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.amount_parser import format_amount, parse_amount


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--kind",
    type=click.Choice(ACCOUNT_KINDS),
    default="checking",
    show_default=True,
    help="Account kind",
)
@click.option("--initial-balance", default="0.00", help="Opening balance (e.g., 1245.30)")
@click.option("--color", help="Display color (e.g., #1E3A8A)")
@click.option("--last-four", help="Last four digits of the card or account number")
@click.option("--inactive", is_flag=True, help="Create the account deactivated")
@click.pass_context
def create_account(
    ctx,
    name: str,
    kind: str,
    initial_balance: str,
    color: str | None,
    last_four: str | None,
    inactive: bool,
):
    """Create a new account.

    Examples:
        fintrack account create "Nubank"
        fintrack account create "Savings" --kind savings --initial-balance 500.00
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    try:
        acc = service.create_account(
            user_id,
            name=name,
            kind=kind,
            initial_balance=parse_amount(initial_balance),
            is_active=not inactive,
            color=color,
            last_four_digits=last_four,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{acc.name}' (ID: {acc.id})")
    click.echo(f"  Balance: {format_amount(acc.balance)}")


@account_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide deactivated accounts")
@click.pass_context
def list_accounts(ctx, active_only: bool):
    """List accounts: active first, then in display order."""
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(user_id, include_inactive=not active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        suffix = f" *{acc.last_four_digits}" if acc.last_four_digits else ""
        click.echo(
            f"ID: {acc.id:3d} | {acc.name + suffix:24s} | {acc.kind:8s} | "
            f"{format_amount(acc.balance):>12s}{status}"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--kind", type=click.Choice(ACCOUNT_KINDS), help="New account kind")
@click.option("--color", help="New display color")
@click.option("--last-four", help="New last four digits")
@click.pass_context
def update_account(
    ctx, account: str, name: str | None, kind: str | None, color: str | None, last_four: str | None
) -> None:
    """Rename, recolor or re-kind an account. Never changes the balance.

    ACCOUNT can be an account name or ID.

    Examples:
        fintrack account update "Nubank" --name "Nubank Checking"
        fintrack account update 1 --color "#059669"
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)

    if name is None and kind is None and color is None and last_four is None:
        click.echo("Error: Nothing to update. Provide at least one option.", err=True)
        ctx.exit(1)

    try:
        acc = service.update_account(
            user_id, account_id, name=name, kind=kind, color=color, last_four_digits=last_four
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account '{acc.name}' (ID: {acc.id})")


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Deactivate an account. It keeps its history but leaves the totals."""
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)
    acc = service.deactivate(user_id, account_id)
    click.echo(f"Deactivated account '{acc.name}'")


@account_group.command("reactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def reactivate_account(ctx, account: str) -> None:
    """Reactivate a deactivated account."""
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)
    acc = service.reactivate(user_id, account_id)
    click.echo(f"Reactivated account '{acc.name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    Only accounts without ledger entries or goal links can be deleted.
    Deactivate accounts with history instead.
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)
    account_obj = service.require_account(user_id, account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(user_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("reorder")
@click.argument("accounts", nargs=-1, required=True, metavar="ACCOUNT...")
@click.pass_context
def reorder_accounts(ctx, accounts: tuple[str, ...]) -> None:
    """Set the display order of all accounts.

    Examples:
        fintrack account reorder Nubank "Banco do Brasil" Savings
    """
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_ids = [resolve_account_or_exit(ctx, service, user_id, ref) for ref in accounts]
    try:
        ordered = service.reorder_accounts(user_id, account_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("New order: " + ", ".join(acc.name for acc in ordered))


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--verify", is_flag=True, help="Fail if the balance disagrees with the ledger")
@click.pass_context
def show_balance(ctx, account: str, verify: bool) -> None:
    """Show the current balance of an account."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    reconciler = BalanceReconciler(db)
    try:
        balance = reconciler.verify(user_id, account_id) if verify else reconciler.get_balance(user_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(format_amount(balance))


@account_group.command("recompute")
@click.argument("account", metavar="ACCOUNT", required=False)
@click.pass_context
def recompute_balance(ctx, account: str | None) -> None:
    """Rebuild balances from the ledger (one account, or all of them)."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    reconciler = BalanceReconciler(db)
    if account is None:
        balances = reconciler.recompute_all(user_id)
    else:
        account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
        balances = {account_id: reconciler.recompute(user_id, account_id)}

    for account_id, balance in balances.items():
        click.echo(f"Account {account_id}: {format_amount(balance)}")


@account_group.command("reseed")
@click.argument("account", metavar="ACCOUNT")
@click.argument("initial_balance", metavar="AMOUNT")
@click.pass_context
def reseed_balance(ctx, account: str, initial_balance: str) -> None:
    """Replace an account's opening balance and rebuild its balance."""
    user_id = current_user_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, user_id, account)
    try:
        acc = service.reseed_balance(user_id, account_id, parse_amount(initial_balance))
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Account '{acc.name}' balance: {format_amount(acc.balance)}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
