"""Savings goal commands."""

import click
from fintrack.domain.account import AccountService
from fintrack.domain.errors import DomainError
from fintrack.domain.goal import GoalService
from fintrack.cli.account_resolution import current_user_or_exit, resolve_account_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.amount_parser import format_amount, parse_amount


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


@goal_group.command("create")
@click.argument("name")
@click.option("--target", required=True, help="Target amount (e.g., 10000.00)")
@click.option("--target-date", help="Date the goal should be reached by")
@click.option("--description", help="Goal description")
@click.option("--account", "accounts", multiple=True, help="Account name or ID to link (repeatable)")
@click.pass_context
def create_goal(
    ctx,
    name: str,
    target: str,
    target_date: str | None,
    description: str | None,
    accounts: tuple[str, ...],
):
    """Create a savings goal tracked over linked accounts.

    Examples:
        fintrack goal create "Emergency fund" --target 10000 --account Savings
    """
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_service = AccountService(db)
    account_ids = [resolve_account_or_exit(ctx, account_service, user_id, ref) for ref in accounts]

    try:
        goal = GoalService(db).create_goal(
            user_id,
            name=name,
            target_amount=parse_amount(target),
            target_date=target_date,
            description=description,
            account_ids=account_ids,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created goal '{goal.name}' (ID: {goal.id})")


@goal_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List goals with their progress."""
    user_id = current_user_or_exit(ctx)
    service = GoalService(ctx.obj["db"])
    goals = service.list_goals(user_id)
    if not goals:
        click.echo("No goals found.")
        return

    click.echo("\nGoals:")
    click.echo("-" * 80)
    for goal in goals:
        progress = service.progress(user_id, goal.id)
        done = " (completed)" if goal.is_completed else ""
        click.echo(
            f"ID: {goal.id:3d} | {goal.name:24s} | {format_amount(progress.current_amount):>12s} / "
            f"{format_amount(goal.target_amount):>12s} | {progress.percent}%{done}"
        )


@goal_group.command("progress")
@click.argument("goal_id", type=int)
@click.pass_context
def show_progress(ctx, goal_id: int):
    """Show a goal's progress over its linked accounts."""
    user_id = current_user_or_exit(ctx)
    service = GoalService(ctx.obj["db"])
    try:
        progress = service.progress(user_id, goal_id)
        accounts = service.linked_accounts(user_id, goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Current: {format_amount(progress.current_amount)}")
    click.echo(f"Progress: {progress.percent}%")
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(f"  {acc.name}: {format_amount(acc.balance)}{status}")


@goal_group.command("link")
@click.argument("goal_id", type=int)
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def link_account(ctx, goal_id: int, account: str):
    """Link an account to a goal."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    try:
        created = GoalService(db).link_account(user_id, goal_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Linked account" if created else "Account already linked")


@goal_group.command("unlink")
@click.argument("goal_id", type=int)
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def unlink_account(ctx, goal_id: int, account: str):
    """Unlink an account from a goal."""
    user_id = current_user_or_exit(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), user_id, account)
    try:
        removed = GoalService(db).unlink_account(user_id, goal_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo("Unlinked account" if removed else "Account was not linked")


@goal_group.command("complete")
@click.argument("goal_id", type=int)
@click.option("--undo", is_flag=True, help="Mark the goal as not completed")
@click.pass_context
def complete_goal(ctx, goal_id: int, undo: bool):
    """Mark a goal as completed."""
    user_id = current_user_or_exit(ctx)
    try:
        goal = GoalService(ctx.obj["db"]).set_completed(user_id, goal_id, not undo)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Goal '{goal.name}' marked {'completed' if goal.is_completed else 'open'}")


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.pass_context
def delete_goal(ctx, goal_id: int):
    """Delete a goal. Linked accounts are not affected."""
    user_id = current_user_or_exit(ctx)
    try:
        GoalService(ctx.obj["db"]).delete_goal(user_id, goal_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted goal {goal_id}")


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
