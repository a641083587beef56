"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum codes and numeric types
are translated in one place.
"""

from decimal import Decimal
from typing import Iterable

from ledgerbook.domain import entities as domain
from ledgerbook.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Ledger as ORMLedger,
    LedgerTransaction as ORMLedgerTransaction,
    TransactionAudit as ORMTransactionAudit,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        balance=Decimal(orm_account.balance),
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        category_type=domain.CategoryType(orm_category.category_type),
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=Decimal(orm_transaction.amount),
        category_id=orm_transaction.category_id,
        account_id=orm_transaction.account_id,
        transaction_type=domain.TransactionType(orm_transaction.transaction_type),
        note=orm_transaction.note,
        transfer_group_id=orm_transaction.transfer_group_id,
        created_at=orm_transaction.created_at,
    )


def ledger_to_domain(
    orm_ledger: ORMLedger, orm_transactions: Iterable[ORMTransaction] = ()
) -> domain.Ledger:
    """Convert SQLAlchemy Ledger model (plus its transactions) to domain Ledger."""
    return domain.Ledger(
        id=orm_ledger.id,
        period=orm_ledger.period,
        transactions=tuple(transaction_to_domain(t) for t in orm_transactions),
    )


def ledger_link_to_domain(orm_link: ORMLedgerTransaction) -> domain.LedgerLink:
    return domain.LedgerLink(ledger_id=orm_link.ledger_id, transaction_id=orm_link.transaction_id)


def audit_to_domain(orm_audit: ORMTransactionAudit) -> domain.AuditRecord:
    """Convert SQLAlchemy TransactionAudit model to domain AuditRecord."""
    return domain.AuditRecord(
        id=orm_audit.id,
        transaction_id=orm_audit.tx_id,
        operation=domain.AuditOperation(orm_audit.operate),
        info=dict(orm_audit.info) if orm_audit.info is not None else None,
        created_at=orm_audit.created_at,
    )


def apply_account(orm_account: ORMAccount, account: domain.Account) -> None:
    """Copy domain Account fields onto an ORM row."""
    orm_account.name = account.name
    orm_account.account_type = account.account_type.value
    orm_account.balance = account.balance


def apply_category(orm_category: ORMCategory, category: domain.Category) -> None:
    orm_category.name = category.name
    orm_category.category_type = category.category_type.value


def apply_transaction(orm_transaction: ORMTransaction, transaction: domain.Transaction) -> None:
    """Copy domain Transaction fields onto an ORM row (identity excluded)."""
    orm_transaction.date = transaction.date
    orm_transaction.amount = transaction.amount
    orm_transaction.category_id = transaction.category_id
    orm_transaction.account_id = transaction.account_id
    orm_transaction.transaction_type = transaction.transaction_type.value
    orm_transaction.note = transaction.note
    orm_transaction.transfer_group_id = transaction.transfer_group_id
