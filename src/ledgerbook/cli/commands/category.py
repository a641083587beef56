"""Category management commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import CategoryType
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.resolver import resolve_category

CATEGORY_TYPES = [t.value for t in CategoryType]


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("create")
@click.argument("name", metavar="CATEGORY_NAME")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(CATEGORY_TYPES),
    required=True,
    help="Category type",
)
@click.pass_context
def create_category(ctx, name: str, category_type: str):
    """Create a new category.

    Examples:
        ledgerbook category create "Salary" --type income
        ledgerbook category create "Groceries" --type expense
        ledgerbook category create "Transfer" --type transfer
    """
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(name=name, category_type=category_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created category '{name}' (ID: {category_id})")


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories."""
    service = CategoryService(ctx.obj["db"])

    categories = service.list_categories()
    if not categories:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 60)
    for cat in categories:
        click.echo(f"ID: {cat.id:3d} | {cat.name:20s} | {cat.category_type.value}")


@category_group.command("update")
@click.argument("category", metavar="CATEGORY")
@click.option("--name", help="New category name")
@click.option("--type", "category_type", type=click.Choice(CATEGORY_TYPES), help="New category type")
@click.pass_context
def update_category(ctx, category: str, name: str | None, category_type: str | None) -> None:
    """Update a category.

    CATEGORY can be a category name or ID.

    Examples:
        ledgerbook category update "Food" --name "Groceries"
    """
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = resolve_category(service, category)
        updated = service.update_category_fields(category_id, name=name, category_type=category_type)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated category '{updated.name}' (ID: {updated.id})")


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@click.option("--reassign-to", help="Category (name or ID) receiving the deleted category's transactions")
@click.option("--force", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_category(ctx, category: str, reassign_to: str | None, force: bool) -> None:
    """Delete a category.

    CATEGORY can be a category name or ID. A category used by transactions
    can only be deleted with --reassign-to.

    Examples:
        ledgerbook category delete "Misc" --reassign-to "Groceries"
    """
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = resolve_category(service, category)
        target_id = resolve_category(service, reassign_to) if reassign_to is not None else None
    except DomainError as e:
        handle_domain_error(ctx, e)

    category_obj = service.get_category(category_id)
    if not force and not click.confirm(
        f"Are you sure you want to delete category '{category_obj.name}' (ID: {category_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_category(category_id, reassign_to=target_id, force=force)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted category '{category_obj.name}'")


def register_commands(cli):
    """Register category commands with CLI."""
    cli.add_command(category_group, name="category")
