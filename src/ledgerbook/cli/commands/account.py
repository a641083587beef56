"""Account management commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountType
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.resolver import resolve_account

ACCOUNT_TYPES = [t.value for t in AccountType]


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES),
    default=AccountType.BANK.value,
    show_default=True,
    help="Account type",
)
@click.option("--balance", default="0", show_default=True, help="Opening balance")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str):
    """Create a new account.

    Examples:
        ledgerbook account create "Checking"
        ledgerbook account create "Wallet" --type cash --balance 50
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(name=name, account_type=account_type, balance=balance)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {acc.account_type.value:11s} | "
            f"Balance: {acc.balance:,.2f}"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="New account type")
@click.option("--balance", help="Corrected balance")
@click.pass_context
def update_account(
    ctx, account: str, name: str | None, account_type: str | None, balance: str | None
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID. Only the given fields change.

    Examples:
        ledgerbook account update "Checking" --name "Main Checking"
        ledgerbook account update 1 --type credit_card
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = resolve_account(service, account)
        updated = service.update_account_fields(
            account_id, name=name, account_type=account_type, balance=balance
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account '{updated.name}' (ID: {updated.id})")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--reassign-to", help="Account (name or ID) receiving the deleted account's transactions")
@click.option("--force", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_account(ctx, account: str, reassign_to: str | None, force: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    An account that still has transactions can only be deleted when
    --reassign-to names the account that takes them over.

    Examples:
        ledgerbook account delete "Old Wallet"
        ledgerbook account delete 1 --reassign-to "Checking"
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = resolve_account(service, account)
        target_id = resolve_account(service, reassign_to) if reassign_to is not None else None
    except DomainError as e:
        handle_domain_error(ctx, e)

    account_obj = service.get_account(account_id)
    if not force and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id, reassign_to=target_id, force=force)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with CLI."""
    cli.add_command(account_group, name="account")
