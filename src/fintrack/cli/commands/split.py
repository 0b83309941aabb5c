"""Bill split commands."""

import click
from fintrack.domain.bill_split import BillSplitService
from fintrack.domain.errors import DomainError, NotFoundError, ValidationError
from fintrack.cli.account_resolution import current_user_or_exit
from fintrack.cli.error_handling import handle_domain_error
from fintrack.utils.amount_parser import format_amount, parse_amount

SELF_NAMES = ("me", "self")


def _resolve_roommate(service: BillSplitService, user_id: int, ref: str) -> int | None:
    """Roommate ID for a name or ID; None for the user's own share."""
    if ref.lower() in SELF_NAMES:
        return None
    roommates = service.list_roommates(user_id)
    for roommate in roommates:
        if roommate.name == ref or str(roommate.id) == ref:
            return roommate.id
    raise NotFoundError(f"Roommate '{ref}' not found")


def _parse_share(service: BillSplitService, user_id: int, share: str):
    who, sep, amount = share.rpartition("=")
    if not sep or not who:
        raise ValidationError(f"Share '{share}' must look like NAME=AMOUNT")
    return _resolve_roommate(service, user_id, who), parse_amount(amount)


@click.group()
def split_group():
    """Split bills with roommates."""
    pass


@split_group.command("roommate-add")
@click.argument("name")
@click.option("--email", help="Roommate email")
@click.option("--phone", help="Roommate phone")
@click.pass_context
def add_roommate(ctx, name: str, email: str | None, phone: str | None):
    """Add a roommate."""
    user_id = current_user_or_exit(ctx)
    try:
        roommate = BillSplitService(ctx.obj["db"]).create_roommate(user_id, name, email=email, phone=phone)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added roommate '{roommate.name}' (ID: {roommate.id})")


@split_group.command("roommates")
@click.pass_context
def list_roommates(ctx):
    """List roommates."""
    user_id = current_user_or_exit(ctx)
    roommates = BillSplitService(ctx.obj["db"]).list_roommates(user_id)
    if not roommates:
        click.echo("No roommates found.")
        return
    for roommate in roommates:
        click.echo(f"ID: {roommate.id:3d} | {roommate.name:20s} | {roommate.email or ''}")


@split_group.command("create")
@click.argument("title")
@click.option("--total", required=True, help="Bill total (e.g., 300.00)")
@click.option("--share", "shares", multiple=True, help="Explicit share NAME=AMOUNT; use 'me' for yourself")
@click.option("--even", "even", multiple=True, help="Roommate to split evenly with (repeatable)")
@click.option("--exclude-self", is_flag=True, help="With --even, leave yourself out of the split")
@click.option("--description", help="Bill description")
@click.pass_context
def create_split(
    ctx,
    title: str,
    total: str,
    shares: tuple[str, ...],
    even: tuple[str, ...],
    exclude_self: bool,
    description: str | None,
):
    """Create a bill split.

    Examples:
        fintrack split create "Electricity" --total 300 --even Ana --even Bruno
        fintrack split create "Internet" --total 100 --share me=40 --share Ana=60
    """
    user_id = current_user_or_exit(ctx)
    service = BillSplitService(ctx.obj["db"])
    if shares and even:
        click.echo("Error: Use either --share or --even, not both.", err=True)
        ctx.exit(1)

    try:
        if shares:
            parsed = [_parse_share(service, user_id, share) for share in shares]
            split = service.create_split(user_id, title, parse_amount(total), parsed, description=description)
        else:
            roommate_ids = [_resolve_roommate(service, user_id, ref) for ref in even]
            split = service.create_even_split(
                user_id,
                title,
                parse_amount(total),
                [rid for rid in roommate_ids if rid is not None],
                include_self=not exclude_self,
                description=description,
            )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created split '{split.title}' (ID: {split.id}) for {format_amount(split.total_amount)}")
    _echo_participants(service, user_id, split)


def _echo_participants(service: BillSplitService, user_id: int, split) -> None:
    names = {roommate.id: roommate.name for roommate in service.list_roommates(user_id)}
    for participant in split.participants:
        who = "me" if participant.roommate_id is None else names.get(participant.roommate_id, "?")
        paid = "paid" if participant.is_paid else "pending"
        click.echo(f"  [{participant.id}] {who:16s} {format_amount(participant.amount):>10s} {paid}")


@split_group.command("list")
@click.pass_context
def list_splits(ctx):
    """List bill splits with their shares."""
    user_id = current_user_or_exit(ctx)
    service = BillSplitService(ctx.obj["db"])
    splits = service.list_splits(user_id)
    if not splits:
        click.echo("No bill splits found.")
        return
    for split in splits:
        click.echo(f"ID: {split.id:3d} | {split.title:24s} | {format_amount(split.total_amount):>10s}")
        _echo_participants(service, user_id, split)
    click.echo(f"Pending: {format_amount(service.pending_amount(user_id))}")


@split_group.command("pay")
@click.argument("participant_id", type=int)
@click.option("--undo", is_flag=True, help="Mark the share as unpaid again")
@click.pass_context
def pay_share(ctx, participant_id: int, undo: bool):
    """Mark a share as paid. No money moves between accounts."""
    user_id = current_user_or_exit(ctx)
    try:
        participant = BillSplitService(ctx.obj["db"]).set_participant_paid(
            user_id, participant_id, is_paid=not undo
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    state = "paid" if participant.is_paid else "unpaid"
    click.echo(f"Share {participant.id} marked {state}")


def register_commands(cli):
    """Register bill split commands with main CLI."""
    cli.add_command(split_group, name="split")
