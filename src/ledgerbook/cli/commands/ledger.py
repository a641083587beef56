"""Ledger period commands."""

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.utils.date_parser import parse_period


@click.group()
def ledger_group():
    """Inspect ledger periods."""
    pass


@ledger_group.command("links")
@click.option("--period", help="Only this period (YYYY-MM)")
@click.pass_context
def list_links(ctx, period: str | None):
    """List ledger periods with the transactions associated to each."""
    service = LedgerService(ctx.obj["db"])

    try:
        ledgers = service.list_ledgers(parse_period(period) if period else None)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not ledgers:
        click.echo("No ledgers found.")
        return

    for ledger in ledgers:
        ids = ", ".join(str(t.id) for t in ledger.transactions) or "-"
        click.echo(f"{ledger.period} (ledger {ledger.id}): {ids}")


def register_commands(cli):
    """Register ledger commands with CLI."""
    cli.add_command(ledger_group, name="ledger")
