"""Summary command."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.utils.date_parser import parse_period


def _echo_breakdown(title: str, totals: dict, categories: dict[int, str]) -> None:
    if not totals:
        return
    click.echo(f"\n{title}:")
    # Highest first, then by name for ties
    ordered = sorted(totals.items(), key=lambda item: (-item[1], categories.get(item[0], "")))
    for category_id, amount in ordered:
        click.echo(f"  {categories.get(category_id, 'Unknown'):25s} {amount:>12,.2f}")


@click.command("summary")
@click.argument("period")
@click.argument("to_period", required=False)
@click.pass_context
def summary(ctx, period: str, to_period: str | None):
    """Show income and expense totals for PERIOD through TO_PERIOD.

    Periods are YYYY-MM (or 'this month', 'last month'). Transfers count as
    neither income nor expense.

    Examples:
        ledgerbook summary 2024-01
        ledgerbook summary 2024-01 2024-03
    """
    db = ctx.obj["db"]
    ledger_service = LedgerService(db)

    try:
        start = parse_period(period)
        end = parse_period(to_period) if to_period else None
        result = ledger_service.summary(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    categories = CategoryService(db).get_category_map()

    if result.start_period == result.end_period:
        click.echo(f"\nSummary for {result.start_period}")
    else:
        click.echo(f"\nSummary for {result.start_period} to {result.end_period}")
    click.echo("=" * 40)
    click.echo(f"Income:  {result.income:>12,.2f}")
    click.echo(f"Expense: {result.expense:>12,.2f}")
    click.echo(f"Balance: {result.balance:>12,.2f}")
    _echo_breakdown("Income by category", result.income_by_category, categories)
    _echo_breakdown("Expense by category", result.expense_by_category, categories)


def register_commands(cli):
    """Register summary command with CLI."""
    cli.add_command(summary)
