"""Category management commands."""

import click
from fintrack.domain.category import CategoryService, DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ICON
from fintrack.domain.errors import DomainError
from fintrack.cli.account_resolution import current_user_or_exit
from fintrack.cli.error_handling import handle_domain_error


@click.group()
def category_group():
    """Manage expense categories."""
    pass


@category_group.command("create")
@click.argument("name")
@click.option("--icon", default=DEFAULT_CATEGORY_ICON, show_default=True, help="Icon name")
@click.option("--color", default=DEFAULT_CATEGORY_COLOR, show_default=True, help="Display color")
@click.pass_context
def create_category(ctx, name: str, icon: str, color: str):
    """Create a new category.

    Examples:
        fintrack category create "Groceries"
        fintrack category create "Pets" --icon paw --color "#F97316"
    """
    user_id = current_user_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])
    try:
        category = service.create_category(user_id, name, icon=icon, color=color)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{category.name}' (ID: {category.id})")


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories."""
    user_id = current_user_or_exit(ctx)
    categories = CategoryService(ctx.obj["db"]).list_categories(user_id)
    if not categories:
        click.echo("No categories found. Run 'fintrack category init' to create the defaults.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 60)
    for cat in categories:
        click.echo(f"ID: {cat.id:3d} | {cat.name:20s} | {cat.icon} {cat.color}")


@category_group.command("init")
@click.pass_context
def init_categories(ctx):
    """Create the default categories (existing names are kept)."""
    user_id = current_user_or_exit(ctx)
    created = CategoryService(ctx.obj["db"]).init_default_categories(user_id)
    if not created:
        click.echo("Default categories already exist.")
        return
    click.echo(f"Created {len(created)} categories: {', '.join(c.name for c in created)}")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
