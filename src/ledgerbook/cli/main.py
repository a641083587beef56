"""Main CLI entry point."""

import click

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.logging_config import configure_logging

# Import and register all commands at module level
from ledgerbook.cli.commands import (
    account,
    category,
    add,
    transfer,
    transaction,
    summary,
    audit,
    ledger,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERBOOK_DB_PATH environment variable)",
    envvar="LEDGERBOOK_DB_PATH",
)
@click.option(
    "--log-file",
    type=click.Path(),
    help="Write a size-rotated log file (overrides LEDGERBOOK_LOG_FILE environment variable)",
    envvar="LEDGERBOOK_LOG_FILE",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_file: str | None):
    """Ledgerbook - Personal finance ledger.

    Keep accounts, categories and transactions consistent: every
    transaction moves its account balance, transfers move money between
    two accounts, and every change is recorded in an audit trail.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        configure_logging(log_file=log_file)
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
add.register_commands(cli)
transfer.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
audit.register_commands(cli)
ledger.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
