"""Shared domain error messages and error types."""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories callers can branch on."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CONSISTENCY = "consistency"
    UNSUPPORTED = "unsupported"
    INTEGRITY = "integrity"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``kind`` identifies the
    category without relying on message text.
    """

    kind: ErrorKind


class ValidationError(DomainError):
    """Malformed or out-of-range field value."""

    kind = ErrorKind.VALIDATION


class NotFoundError(DomainError):
    """Referenced account, category, transaction or ledger does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = ErrorKind.CONFLICT


class ConsistencyError(DomainError):
    """Stored data violates an invariant the operation relies on."""

    kind = ErrorKind.CONSISTENCY


class UnsupportedError(DomainError):
    """Requested change is structurally disallowed."""

    kind = ErrorKind.UNSUPPORTED


class IntegrityError(DomainError):
    """The atomic unit could not be committed."""

    kind = ErrorKind.INTEGRITY


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def ledger_not_found(period: str) -> str:
    """Return message for missing ledger period."""
    return f"Ledger for period '{period}' not found"


def duplicate_account_name(name: str) -> str:
    return f"Account with name '{name}' already exists"


def duplicate_category_name(name: str) -> str:
    return f"Category with name '{name}' already exists"


def transfer_pair_broken(group_id: int, count: int) -> str:
    """Return message when a transfer group does not have exactly two legs."""
    return (
        f"Transfer group {group_id} has {count} transaction{'s' if count != 1 else ''}; "
        "expected exactly 2. Please verify manually."
    )


def delete_requires_reassignment(kind: str, entity_id: int, transaction_count: int) -> str:
    """Return message when an entity is still referenced by transactions."""
    return (
        f"Cannot delete {kind} {entity_id}: it is used by {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        f"Specify a {kind} to reassign them to."
    )
