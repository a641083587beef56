"""Add transaction command."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import Transaction, TransactionType
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import parse_amount
from ledgerbook.utils.date_parser import parse_date
from ledgerbook.utils.resolver import resolve_account, resolve_category


@click.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--category", required=True, help="Category name or ID")
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([TransactionType.INCOME.value, TransactionType.EXPENSE.value]),
    help="Transaction type (defaults to the category's type)",
)
@click.option("--note", help="Note")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    category: str,
    amount: str,
    date: str,
    transaction_type: str | None,
    note: str | None,
):
    """Add an income or expense transaction.

    The account balance is adjusted immediately. Use 'transfer' to move
    money between accounts.

    Examples:
        ledgerbook add --account Checking --category Groceries --amount 42.50
        ledgerbook add --account 1 --category Salary --amount 3000 --date 2024-01-31
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    try:
        account_id = resolve_account(account_service, account)
        category_id = resolve_category(category_service, category)
        txn_date = parse_date(date)
        txn_amount = parse_amount(amount)
        if transaction_type is None:
            transaction_type = category_service.require_category(category_id).category_type.value

        transaction_id = transaction_service.register_transaction(
            Transaction(
                id=None,
                date=txn_date,
                amount=txn_amount,
                category_id=category_id,
                account_id=account_id,
                transaction_type=transaction_type,
                note=note,
            )
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")


def register_commands(cli):
    """Register add command with CLI."""
    cli.add_command(add_transaction)
