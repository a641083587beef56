"""Ledger period domain service."""

from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Ledger as LedgerEntity, LedgerLink, LedgerSummary
from ledgerbook.domain.errors import (
    ConsistencyError,
    NotFoundError,
    ValidationError,
    ledger_not_found,
    transaction_not_found,
)
from ledgerbook.domain.validation import iter_periods, validate_id, validate_period


def _merge_totals(target: dict[int, Decimal], source: dict[int, Decimal]) -> None:
    for category_id, amount in source.items():
        target[category_id] = target.get(category_id, Decimal("0")) + amount


class LedgerService:
    """Service for monthly ledger periods and their aggregation."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_ledger(self, period: str) -> Optional[LedgerEntity]:
        """Get the ledger of one period with its transactions, or None."""
        return self.db.fetch_ledger_by_period(validate_period(period))

    def list_ledgers(self, period: Optional[str] = None) -> list[LedgerEntity]:
        """List ledgers ordered by period, optionally restricted to one period."""
        if period is not None:
            period = validate_period(period)
        return self.db.fetch_ledgers(period)

    def ensure_ledger(self, period: str) -> LedgerEntity:
        """Return the ledger for ``period``, creating it if it does not exist."""
        period = validate_period(period)
        with self.db.atomic():
            ledger = self.db.fetch_ledger_by_period(period)
            if ledger is None:
                self.db.insert_ledger(period)
        return self.db.fetch_ledger_by_period(period)

    def list_links(self) -> list[LedgerLink]:
        """List every ledger to transaction association."""
        return self.db.fetch_ledger_links()

    def list_links_for_ledger(self, ledger_id: int) -> list[LedgerLink]:
        return self.db.fetch_ledger_links_for_ledger(validate_id(ledger_id, "ledger ID"))

    def replace_links(self, period: str, transaction_ids: list[int]) -> None:
        """Re-link a period's ledger to ``transaction_ids``.

        Only transactions dated in ``period`` may be linked, and every
        transaction of the period that is linked to this ledger must stay in
        the list; a transaction is never left without a ledger or given a
        second one. Unlinked transactions of the period are linked again.

        Raises:
            NotFoundError: If no ledger exists for the period, or a transaction is missing
            ValidationError: If a transaction is dated in another period
            ConsistencyError: If the change would orphan a transaction or link it twice
        """
        period = validate_period(period)
        wanted = list(dict.fromkeys(validate_id(t, "transaction ID") for t in transaction_ids))
        with self.db.atomic():
            ledger = self.db.fetch_ledger_by_period(period)
            if ledger is None:
                raise NotFoundError(ledger_not_found(period))

            linked_to: dict[int, set[int]] = {}
            for link in self.db.fetch_ledger_links():
                linked_to.setdefault(link.transaction_id, set()).add(link.ledger_id)

            for transaction_id in wanted:
                transaction = self.db.fetch_transaction(transaction_id)
                if transaction is None:
                    raise NotFoundError(transaction_not_found(transaction_id))
                if transaction.period != period:
                    raise ValidationError(
                        f"Transaction {transaction_id} belongs to period {transaction.period}, not {period}"
                    )
                if linked_to.get(transaction_id, set()) - {ledger.id}:
                    raise ConsistencyError(f"Transaction {transaction_id} is linked to another ledger")

            for transaction in ledger.transactions:
                if transaction.period == period and transaction.id not in wanted:
                    raise ConsistencyError(
                        f"Transaction {transaction.id} would be left without a ledger"
                    )

            self.db.replace_ledger_links(ledger.id, wanted)

    def summary(self, period: str, to_period: Optional[str] = None) -> LedgerSummary:
        """Sum income and expense over ``period`` through ``to_period`` inclusive.

        Periods without a ledger contribute nothing. Transfers count as
        neither income nor expense.

        Args:
            period: First period (YYYY-MM)
            to_period: Last period (YYYY-MM), defaults to ``period``

        Returns:
            LedgerSummary with totals and per-category breakdowns keyed by category ID

        Raises:
            ValidationError: If a period is malformed or the range is reversed
        """
        if to_period is None:
            to_period = period

        income = Decimal("0")
        expense = Decimal("0")
        balance = Decimal("0")
        income_by_category: dict[int, Decimal] = {}
        expense_by_category: dict[int, Decimal] = {}

        for current in iter_periods(period, to_period):
            ledger = self.db.fetch_ledger_by_period(current)
            if ledger is None:
                continue
            income += ledger.total_income
            expense += ledger.total_expense
            balance += ledger.balance
            _merge_totals(income_by_category, ledger.income_by_category())
            _merge_totals(expense_by_category, ledger.expense_by_category())

        return LedgerSummary(
            start_period=period,
            end_period=to_period,
            income=income,
            expense=expense,
            balance=balance,
            income_by_category=income_by_category,
            expense_by_category=expense_by_category,
        )
