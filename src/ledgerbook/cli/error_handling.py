"""CLI error handling helpers."""

import click

from ledgerbook.domain.errors import DomainError, ErrorKind

EXIT_CODES = {
    ErrorKind.VALIDATION: 2,
    ErrorKind.NOT_FOUND: 3,
    ErrorKind.CONFLICT: 4,
    ErrorKind.CONSISTENCY: 5,
    ErrorKind.UNSUPPORTED: 6,
    ErrorKind.INTEGRITY: 7,
}


def exit_code_for(error: DomainError | ValueError) -> int:
    """Return the process exit code for an error, 1 when it has no kind."""
    kind = getattr(error, "kind", None)
    return EXIT_CODES.get(kind, 1)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with the code of its kind."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(exit_code_for(error))
