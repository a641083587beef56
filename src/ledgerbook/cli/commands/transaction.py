"""Transaction management commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import TransactionChanges, TransactionFilter, TransactionType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date, parse_period
from ledgerbook.utils.resolver import resolve_account, resolve_category

TRANSACTION_TYPES = [t.value for t in TransactionType]


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--period", help="Ledger period (YYYY-MM, 'this month' or 'last month')")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--account", help="Account name or ID")
@click.option("--category", help="Category name or ID")
@click.option("--type", "transaction_type", type=click.Choice(TRANSACTION_TYPES), help="Transaction type")
@click.pass_context
def list_transactions(
    ctx,
    period: str | None,
    start_date: str | None,
    end_date: str | None,
    account: str | None,
    category: str | None,
    transaction_type: str | None,
):
    """View transactions with optional filters.

    Account and category can be specified by name or ID.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    try:
        txn_filter = TransactionFilter(
            period=parse_period(period) if period else None,
            start_date=parse_date(start_date) if start_date else None,
            end_date=parse_date(end_date) if end_date else None,
            account_id=resolve_account(account_service, account) if account else None,
            category_id=resolve_category(category_service, category) if category else None,
            transaction_type=TransactionType(transaction_type) if transaction_type else None,
        )
        transactions = service.list_transactions(txn_filter)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = account_service.get_account_map()
    categories = category_service.get_category_map()

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    for txn in transactions:
        account_name = accounts.get(txn.account_id, "Unknown")
        category_name = categories.get(txn.category_id, "Unknown")
        line = (
            f"{txn.id:5d} | {txn.date} | {txn.transaction_type.value:8s} | "
            f"{txn.amount:>12,.2f} | {account_name:15s} | {category_name:15s}"
        )
        if txn.note:
            line += f" | {txn.note}"
        click.echo(line)


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--amount", help="Transaction amount (e.g., 123.45)")
@click.option("--category", help="Category name or ID")
@click.option("--account", help="Account name or ID")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([TransactionType.INCOME.value, TransactionType.EXPENSE.value]),
    help="Transaction type",
)
@click.option("--note", help="Note")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    amount: str | None,
    category: str | None,
    account: str | None,
    transaction_type: str | None,
    note: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Updating either leg of a
    transfer updates both legs.

    Examples:
        ledgerbook transaction update 1 --amount 75.00
        ledgerbook transaction update 1 --account "Checking" --category "Groceries"
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    try:
        changes = TransactionChanges(
            date=parse_date(date) if date is not None else None,
            amount=parse_amount(amount) if amount is not None else None,
            category_id=resolve_category(category_service, category) if category is not None else None,
            account_id=resolve_account(account_service, account) if account is not None else None,
            transaction_type=TransactionType(transaction_type) if transaction_type is not None else None,
            note=note,
        )
        if changes.is_empty():
            click.echo("Nothing to update.")
            return
        transaction_service.update_transaction_fields(transaction_id, changes)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--force", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, force: bool) -> None:
    """Delete a transaction and undo its effect on the account balance.

    Deleting either leg of a transfer deletes both legs.
    """
    service = TransactionService(ctx.obj["db"])

    if not force and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with CLI."""
    cli.add_command(transaction_group, name="transaction")
