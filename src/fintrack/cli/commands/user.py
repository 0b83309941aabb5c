"""User management commands."""

import click
from fintrack.domain.errors import DomainError
from fintrack.domain.user import UserService
from fintrack.cli.error_handling import handle_domain_error


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("name")
@click.option("--email", help="Email address (must be unique)")
@click.pass_context
def create_user(ctx, name: str, email: str | None):
    """Create a new user.

    Examples:
        fintrack user create "Alice"
        fintrack user create "Bob" --email bob@example.com
    """
    service = UserService(ctx.obj["db"])
    try:
        user = service.create_user(name=name, email=email)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{user.name}' (ID: {user.id})")


@user_group.command("list")
@click.pass_context
def list_users(ctx):
    """List all users."""
    users = UserService(ctx.obj["db"]).list_users()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\nUsers:")
    click.echo("-" * 60)
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.name:20s} | {u.email or ''}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
