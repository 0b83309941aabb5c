"""CLI error handling helpers."""

import click

from fintrack.domain.errors import ConsistencyError, DomainError
from fintrack.utils.logger import get_logger

logger = get_logger(__name__)

RECOMPUTE_HINT = "Run 'fintrack account recompute' to rebuild balances from the ledger."


def handle_domain_error(ctx: click.Context, error: DomainError) -> None:
    """Report a failed ledger operation on stderr and exit with status 1.

    Balance drift and failed atomic units also print how to repair the
    cached balances.
    """
    logger.debug("%s aborted: %s", ctx.command_path, error, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ConsistencyError):
        click.echo(RECOMPUTE_HINT, err=True)
    ctx.exit(1)
