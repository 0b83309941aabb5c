"""Main CLI entry point."""

import click
from fintrack.database.factories import create_database
from fintrack.utils.logger import configure_logging

# Import and register all commands at module level
from fintrack.cli.commands import (
    user,
    account,
    category,
    add,
    transfer,
    transaction,
    goal,
    split,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option(
    "--user",
    "user_ref",
    help="User name or ID to act as (overrides FINTRACK_USER environment variable)",
    envvar="FINTRACK_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="FINTRACK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_ref: str | None, log_level: str):
    """Fintrack - Personal finance tracker.

    Keep account balances consistent with expenses, income, transfers and
    recurring entries, and follow savings goals and shared bills.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)
    ctx.obj["user_ref"] = user_ref

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
user.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
add.register_commands(cli)
transfer.register_commands(cli)
transaction.register_commands(cli)
goal.register_commands(cli)
split.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
