"""Audit trail commands."""

import json

import click

from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.audit import AuditService
from ledgerbook.domain.entities import AuditOperation
from ledgerbook.domain.errors import DomainError


@click.group()
def audit_group():
    """Inspect the transaction audit trail."""
    pass


@audit_group.command("list")
@click.option("--transaction", "transaction_id", type=int, help="Only records of this transaction ID")
@click.option(
    "--operation",
    type=click.Choice([op.value for op in AuditOperation]),
    help="Only records of this operation",
)
@click.pass_context
def list_audits(ctx, transaction_id: int | None, operation: str | None):
    """List audit records, oldest first."""
    service = AuditService(ctx.obj["db"])

    try:
        records = service.find_audits(transaction_id=transaction_id, operation=operation)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not records:
        click.echo("No audit records found.")
        return

    for record in records:
        created = record.created_at.isoformat(sep=" ", timespec="seconds") if record.created_at else ""
        click.echo(
            f"{record.id:5d} | {created} | {record.operation.value:6s} | "
            f"tx {record.transaction_id} | {json.dumps(record.info, sort_keys=True)}"
        )


def register_commands(cli):
    """Register audit commands with CLI."""
    cli.add_command(audit_group, name="audit")
