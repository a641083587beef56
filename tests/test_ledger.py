"""Tests for LedgerService."""

import pytest
from datetime import date
from decimal import Decimal

from ledgerbook.domain.entities import TransactionChanges, TransactionType
from ledgerbook.domain.errors import ConsistencyError, NotFoundError, ValidationError


@pytest.fixture
def populated(transaction_service, make_entry, sample_accounts, sample_categories):
    """Three months of activity, with a transfer in February."""
    transaction_service.register_transaction(
        make_entry(amount="3000", transaction_type=TransactionType.INCOME, txn_date=date(2024, 1, 31))
    )
    transaction_service.register_transaction(make_entry(amount="200", txn_date=date(2024, 1, 3)))
    transaction_service.register_transaction(make_entry(amount="50", txn_date=date(2024, 2, 14)))
    transaction_service.register_transfer(
        date(2024, 2, 20), "400", sample_accounts["Checking"], sample_accounts["Savings"]
    )
    transaction_service.register_transaction(
        make_entry(amount="100", transaction_type=TransactionType.INCOME, txn_date=date(2024, 4, 1))
    )
    return sample_categories


class TestSummary:
    """Tests for period aggregation."""

    def test_single_period(self, ledger_service, populated):
        summary = ledger_service.summary("2024-01")

        assert summary.start_period == summary.end_period == "2024-01"
        assert summary.income == Decimal("3000")
        assert summary.expense == Decimal("200")
        assert summary.balance == Decimal("2800")
        assert summary.income_by_category == {populated["Salary"]: Decimal("3000")}
        assert summary.expense_by_category == {populated["Groceries"]: Decimal("200")}

    def test_range_skips_missing_periods_and_transfers(self, ledger_service, populated):
        summary = ledger_service.summary("2024-01", "2024-04")

        assert summary.income == Decimal("3100")
        assert summary.expense == Decimal("250")
        assert summary.balance == Decimal("2850")
        assert populated["Transfer"] not in summary.expense_by_category
        assert populated["Transfer"] not in summary.income_by_category

    def test_empty_range(self, ledger_service):
        summary = ledger_service.summary("2023-01", "2023-12")
        assert summary.income == Decimal("0")
        assert summary.expense_by_category == {}

    @pytest.mark.parametrize("args", [("2024-02", "2024-01"), ("2024-1",), ("2024-01", "24-02")])
    def test_invalid_ranges(self, ledger_service, args):
        with pytest.raises(ValidationError):
            ledger_service.summary(*args)


class TestLedgers:
    """Tests for ledger lookup and association management."""

    def test_ensure_ledger_is_idempotent(self, ledger_service):
        first = ledger_service.ensure_ledger("2024-07")
        second = ledger_service.ensure_ledger("2024-07")

        assert first.id == second.id
        assert [ledger.period for ledger in ledger_service.list_ledgers()] == ["2024-07"]

    def test_list_ledgers_in_period_order(self, ledger_service, populated):
        assert [ledger.period for ledger in ledger_service.list_ledgers()] == ["2024-01", "2024-02", "2024-04"]
        assert [ledger.period for ledger in ledger_service.list_ledgers("2024-02")] == ["2024-02"]

    def test_links_for_ledger(self, ledger_service, populated):
        feb = ledger_service.get_ledger("2024-02")

        links = ledger_service.list_links_for_ledger(feb.id)

        assert [link.transaction_id for link in links] == [t.id for t in feb.transactions]
        assert len(links) == 3

    def test_every_transaction_has_one_link(self, ledger_service, transaction_service, populated):
        linked = [link.transaction_id for link in ledger_service.list_links()]
        assert sorted(linked) == [t.id for t in transaction_service.list_transactions()]

    def test_replace_links_keeps_period_transactions(self, ledger_service, transaction_service, make_entry):
        first = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 5)))
        second = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 9)))
        ledger = ledger_service.get_ledger("2024-01")

        ledger_service.replace_links("2024-01", [second, first, first])

        assert [link.transaction_id for link in ledger_service.list_links_for_ledger(ledger.id)] == [first, second]

    def test_replace_links_relinks_orphan(self, temp_db, ledger_service, transaction_service, make_entry):
        txn_id = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 5)))
        ledger = ledger_service.get_ledger("2024-01")
        with temp_db.atomic():
            temp_db.delete_ledger_links_for_transaction(txn_id)

        ledger_service.replace_links("2024-01", [txn_id])

        assert [link.transaction_id for link in ledger_service.list_links_for_ledger(ledger.id)] == [txn_id]

    def test_replace_links_rejects_dropping_a_transaction(self, ledger_service, transaction_service, make_entry):
        """Leaving out a transaction of the period would orphan it."""
        first = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 5)))
        second = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 9)))

        with pytest.raises(ConsistencyError):
            ledger_service.replace_links("2024-01", [first])

        assert sorted(link.transaction_id for link in ledger_service.list_links()) == [first, second]
        # The untouched transaction can still move to another period
        moved = transaction_service.update_transaction_fields(second, TransactionChanges(date=date(2024, 2, 1)))
        assert moved.period == "2024-02"

    def test_replace_links_rejects_other_period(self, ledger_service, transaction_service, make_entry):
        january = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 5)))
        february = transaction_service.register_transaction(make_entry(txn_date=date(2024, 2, 5)))

        with pytest.raises(ValidationError):
            ledger_service.replace_links("2024-01", [january, february])

        feb = ledger_service.get_ledger("2024-02")
        assert [link.transaction_id for link in ledger_service.list_links_for_ledger(feb.id)] == [february]
        assert len(ledger_service.list_links()) == 2

    def test_replace_links_missing_transaction(self, ledger_service, transaction_service, make_entry):
        txn_id = transaction_service.register_transaction(make_entry(txn_date=date(2024, 1, 5)))

        with pytest.raises(NotFoundError):
            ledger_service.replace_links("2024-01", [txn_id, 999])

    def test_replace_links_missing_ledger(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.replace_links("2030-01", [])

    def test_ledger_creation_requires_unit(self, temp_db):
        with pytest.raises(ConsistencyError):
            temp_db.insert_ledger("2024-01")
