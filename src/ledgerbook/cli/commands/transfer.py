"""Transfer command."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.resolver import resolve_account


@click.command("transfer")
@click.argument("amount")
@click.option("--from", "from_account", required=True, help="Source account name or ID")
@click.option("--to", "to_account", required=True, help="Destination account name or ID")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transfer date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--note", help="Note stored on both legs")
@click.pass_context
def transfer(ctx, amount: str, from_account: str, to_account: str, date: str, note: str | None):
    """Move AMOUNT from one account to another.

    Both legs use the first category of type 'transfer'.

    Examples:
        ledgerbook transfer 100 --from Checking --to Savings
        ledgerbook transfer 25.50 --from 1 --to 2 --date yesterday
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)

    try:
        from_id = resolve_account(account_service, from_account)
        to_id = resolve_account(account_service, to_account)
        source_id, destination_id = transaction_service.register_transfer(
            date=parse_date(date),
            amount=parse_amount(amount),
            from_account_id=from_id,
            to_account_id=to_id,
            note=note,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transfer (transactions {source_id} and {destination_id})")


def register_commands(cli):
    """Register transfer command with CLI."""
    cli.add_command(transfer)
