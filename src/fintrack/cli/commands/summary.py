"""Summary command."""

from datetime import date

import click
from fintrack.domain.errors import DomainError
from fintrack.domain.statistics import StatisticsService
from fintrack.cli.account_resolution import current_user_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.amount_parser import format_amount
from fintrack.utils.date_parser import month_bounds, parse_date


@click.command("summary")
@click.option("--month", "month_of", help="Any date inside the month to report on (default: today)")
@click.pass_context
def summary(ctx, month_of: str | None):
    """Show dashboard totals.

    Total balance and savings cover active accounts only. Monthly expenses
    count debits dated in the chosen calendar month, which are then broken
    down by category.

    Examples:
        fintrack summary
        fintrack summary --month 2024-03-01
    """
    user_id = current_user_or_exit(ctx)
    try:
        today = parse_date(month_of) if month_of else None
    except DomainError as e:
        handle_domain_error(ctx, e)

    service = StatisticsService(ctx.obj["db"])
    stats = service.get_statistics(user_id, today=today)
    click.echo(f"Total balance:    {format_amount(stats.total_balance):>12s}")
    click.echo(f"Monthly expenses: {format_amount(stats.monthly_expenses):>12s}")
    click.echo(f"Pending splits:   {format_amount(stats.pending_splits):>12s}")
    click.echo(f"Savings:          {format_amount(stats.savings):>12s}")

    start, end = month_bounds(today or date.today())
    spending = service.expenses_by_category(user_id, start_date=start, end_date=end)
    if not spending:
        return

    click.echo()
    click.echo("Spending by category:")
    for item in spending:
        click.echo(f"  {item.name:<20s} {format_amount(item.amount):>12s} {item.percent:>6}%")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
