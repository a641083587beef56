"""Tests for the SQLAlchemy persistence gateway and its atomic unit."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain import entities
from ledgerbook.domain.entities import (
    Account,
    AccountType,
    AuditOperation,
    Category,
    CategoryType,
    Transaction,
    TransactionFilter,
    TransactionType,
)
from ledgerbook.domain.errors import ConsistencyError, IntegrityError, NotFoundError


def _account(name="Cash", balance="0"):
    return Account(id=None, name=name, account_type=AccountType.CASH, balance=Decimal(balance))


def _reopen(temp_db):
    """Open a second gateway on the same file to see only committed data."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    return db


@pytest.fixture
def seeded(temp_db):
    """One account and one expense category."""
    account_id = temp_db.insert_account(_account("Cash", "100"))
    category_id = temp_db.insert_category(
        Category(id=None, name="Food", category_type=CategoryType.EXPENSE)
    )
    return account_id, category_id


def _expense(account_id, category_id, txn_date=date(2024, 1, 15), amount="10"):
    return Transaction(
        id=None,
        date=txn_date,
        amount=Decimal(amount),
        category_id=category_id,
        account_id=account_id,
        transaction_type=TransactionType.EXPENSE,
    )


class TestDomainModels:
    """The gateway returns domain records, not ORM rows."""

    def test_fetch_account_returns_domain_model(self, temp_db):
        account_id = temp_db.insert_account(_account("Cash", "12.50"))

        account = temp_db.fetch_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.balance == Decimal("12.50")
        assert isinstance(account.created_at, datetime)

    def test_fetch_missing_returns_none(self, temp_db):
        assert temp_db.fetch_account(999) is None
        assert temp_db.fetch_category(999) is None
        assert temp_db.fetch_transaction(999) is None
        assert temp_db.fetch_ledger_by_period("2024-01") is None

    def test_update_missing_account_raises(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_account(Account(id=42, name="X", account_type=AccountType.BANK, balance=Decimal("0")))

    def test_in_memory_database(self):
        db = create_sqlite_database(database_path=":memory:")
        account_id = db.insert_account(_account())
        assert db.fetch_account(account_id).name == "Cash"
        db.disconnect()


class TestAtomicUnit:
    """Tests for begin/commit/rollback and the atomic() context manager."""

    def test_commit_makes_changes_visible(self, temp_db):
        with temp_db.atomic():
            temp_db.insert_account(_account("A"))
            temp_db.insert_account(_account("B"))
            assert temp_db.in_transaction()

        assert not temp_db.in_transaction()
        other = _reopen(temp_db)
        assert [a.name for a in other.fetch_all_accounts()] == ["A", "B"]
        other.disconnect()

    def test_exception_rolls_back_everything(self, temp_db):
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                temp_db.insert_account(_account("A"))
                raise RuntimeError("boom")

        assert not temp_db.in_transaction()
        assert temp_db.fetch_account_by_name("A") is None

    def test_nested_block_reuses_outer_unit(self, temp_db):
        """An inner block neither commits nor rolls back on its own."""
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                with temp_db.atomic():
                    temp_db.insert_account(_account("Inner"))
                assert temp_db.in_transaction()
                raise RuntimeError("outer fails")

        assert temp_db.fetch_account_by_name("Inner") is None

    def test_begin_reports_ownership(self, temp_db):
        assert temp_db.begin() is True
        assert temp_db.begin() is False
        temp_db.rollback()
        assert not temp_db.in_transaction()

    def test_store_failure_becomes_integrity_error(self, temp_db):
        """A unique violation inside a unit discards the earlier writes too."""
        temp_db.insert_account(_account("Taken"))

        with pytest.raises(IntegrityError) as exc_info:
            with temp_db.atomic():
                temp_db.insert_account(_account("Fresh"))
                temp_db.insert_account(_account("Taken"))

        assert exc_info.value.__cause__ is not None
        assert not temp_db.in_transaction()
        assert temp_db.fetch_account_by_name("Fresh") is None
        assert temp_db.fetch_account_by_name("Taken") is not None

    def test_foreign_keys_are_enforced(self, temp_db, seeded):
        _, category_id = seeded
        with pytest.raises(IntegrityError):
            temp_db.insert_transaction(_expense(999, category_id))

    def test_commit_without_unit(self, temp_db):
        with pytest.raises(ConsistencyError):
            temp_db.commit()

    def test_insert_ledger_requires_unit(self, temp_db):
        with pytest.raises(ConsistencyError):
            temp_db.insert_ledger("2024-01")

        with temp_db.atomic():
            ledger_id = temp_db.insert_ledger("2024-01")
        assert temp_db.fetch_ledger_by_period("2024-01").id == ledger_id


class TestTransactionsAndAudit:
    """Transaction writes carry their audit records."""

    def test_insert_writes_audit(self, temp_db, seeded):
        txn_id = temp_db.insert_transaction(_expense(*seeded))

        audits = temp_db.fetch_audits(transaction_id=txn_id)

        assert [a.operation for a in audits] == [AuditOperation.INSERT]
        assert audits[0].info["amount"] == "10"
        assert audits[0].info["id"] == txn_id

    def test_update_writes_audit(self, temp_db, seeded):
        txn_id = temp_db.insert_transaction(_expense(*seeded))
        txn = temp_db.fetch_transaction(txn_id)

        temp_db.update_transaction(txn.with_note("changed"))

        assert temp_db.fetch_transaction(txn_id).note == "changed"
        audits = temp_db.fetch_audits(transaction_id=txn_id, operation=AuditOperation.UPDATE)
        assert len(audits) == 1
        assert audits[0].info["note"] == "changed"

    def test_delete_removes_links_and_keeps_audit(self, temp_db, seeded):
        txn_id = temp_db.insert_transaction(_expense(*seeded))
        with temp_db.atomic():
            ledger_id = temp_db.insert_ledger("2024-01")
            temp_db.insert_ledger_link(ledger_id, txn_id)

        temp_db.delete_transaction(temp_db.fetch_transaction(txn_id))

        assert temp_db.fetch_transaction(txn_id) is None
        assert temp_db.fetch_ledger_links() == []
        operations = [a.operation for a in temp_db.fetch_audits(transaction_id=txn_id)]
        assert operations == [AuditOperation.INSERT, AuditOperation.DELETE]

    def test_transaction_ids_are_not_reused(self, temp_db, seeded):
        first = temp_db.insert_transaction(_expense(*seeded))
        temp_db.delete_transaction(temp_db.fetch_transaction(first))

        second = temp_db.insert_transaction(_expense(*seeded))

        assert second > first

    def test_fetch_transactions_filters(self, temp_db, seeded):
        account_id, category_id = seeded
        jan = temp_db.insert_transaction(_expense(account_id, category_id, date(2024, 1, 31)))
        feb = temp_db.insert_transaction(_expense(account_id, category_id, date(2024, 2, 1)))
        dec = temp_db.insert_transaction(_expense(account_id, category_id, date(2024, 12, 5)))

        assert [t.id for t in temp_db.fetch_transactions()] == [jan, feb, dec]
        assert [t.id for t in temp_db.fetch_transactions(TransactionFilter(period="2024-01"))] == [jan]
        assert [t.id for t in temp_db.fetch_transactions(TransactionFilter(period="2024-12"))] == [dec]
        assert [
            t.id
            for t in temp_db.fetch_transactions(
                TransactionFilter(start_date=date(2024, 2, 1), end_date=date(2024, 6, 30))
            )
        ] == [feb]
        assert temp_db.fetch_transactions(TransactionFilter(transaction_type=TransactionType.INCOME)) == []


class TestLedgerLinks:
    """Tests for ledger association operations."""

    def test_insert_link_is_idempotent(self, temp_db, seeded):
        txn_id = temp_db.insert_transaction(_expense(*seeded))
        with temp_db.atomic():
            ledger_id = temp_db.insert_ledger("2024-01")
            temp_db.insert_ledger_link(ledger_id, txn_id)
            temp_db.insert_ledger_link(ledger_id, txn_id)

        assert len(temp_db.fetch_ledger_links_for_ledger(ledger_id)) == 1
        assert [t.id for t in temp_db.fetch_ledger_by_period("2024-01").transactions] == [txn_id]

    def test_delete_links_without_any(self, temp_db, seeded):
        txn_id = temp_db.insert_transaction(_expense(*seeded))
        with pytest.raises(NotFoundError):
            temp_db.delete_ledger_links_for_transaction(txn_id)

    def test_replace_links(self, temp_db, seeded):
        first = temp_db.insert_transaction(_expense(*seeded))
        second = temp_db.insert_transaction(_expense(*seeded))
        with temp_db.atomic():
            ledger_id = temp_db.insert_ledger("2024-01")
            temp_db.insert_ledger_link(ledger_id, first)

        temp_db.replace_ledger_links(ledger_id, [second, second])

        assert [link.transaction_id for link in temp_db.fetch_ledger_links_for_ledger(ledger_id)] == [second]
