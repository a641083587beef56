"""Domain model entities for ledgerbook.

These are pure value records, independent of the database schema. Every
change produces a new value; nothing is mutated in place.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class AccountType(str, Enum):
    """Kind of account holding a balance."""

    CASH = "cash"
    BANK = "bank"
    CREDIT_CARD = "credit_card"
    E_WALLET = "e_wallet"
    CRYPTO = "crypto"


class CategoryType(str, Enum):
    """Kind of category."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class TransactionType(str, Enum):
    """Kind of transaction."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class AuditOperation(str, Enum):
    """Operation tag stored on audit records."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: Optional[int]
    name: str
    account_type: AccountType
    balance: Decimal
    created_at: Optional[datetime] = None

    def deposit(self, amount: Decimal) -> "Account":
        return replace(self, balance=self.balance + amount)

    def withdraw(self, amount: Decimal) -> "Account":
        return replace(self, balance=self.balance - amount)

    def transfer_to(self, amount: Decimal, other: "Account") -> tuple["Account", "Account"]:
        """Move ``amount`` from this account into ``other``.

        Returns:
            Tuple of (updated source, updated destination)
        """
        return self.withdraw(amount), other.deposit(amount)

    def with_balance(self, balance: Decimal) -> "Account":
        return replace(self, balance=balance)

    def with_name(self, name: str) -> "Account":
        return replace(self, name=name)

    def with_type(self, account_type: AccountType) -> "Account":
        return replace(self, account_type=account_type)


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: Optional[int]
    name: str
    category_type: CategoryType
    created_at: Optional[datetime] = None

    @property
    def is_income(self) -> bool:
        return self.category_type == CategoryType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.category_type == CategoryType.EXPENSE

    @property
    def is_transfer(self) -> bool:
        return self.category_type == CategoryType.TRANSFER

    def with_name(self, name: str) -> "Category":
        return replace(self, name=name)

    def with_type(self, category_type: CategoryType) -> "Category":
        return replace(self, category_type=category_type)


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    A transfer is stored as two transactions (one per account) sharing a
    ``transfer_group_id``.
    """

    id: Optional[int]
    date: date
    amount: Decimal
    category_id: int
    account_id: int
    transaction_type: TransactionType
    note: Optional[str] = None
    transfer_group_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def is_income(self) -> bool:
        return self.transaction_type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.transaction_type == TransactionType.EXPENSE

    @property
    def is_transfer(self) -> bool:
        return self.transaction_type == TransactionType.TRANSFER

    @property
    def period(self) -> str:
        """Ledger period key (YYYY-MM) derived from the date."""
        return self.date.strftime("%Y-%m")

    def with_amount(self, amount: Decimal) -> "Transaction":
        return replace(self, amount=amount)

    def with_date(self, new_date: date) -> "Transaction":
        return replace(self, date=new_date)

    def with_category(self, category_id: int) -> "Transaction":
        return replace(self, category_id=category_id)

    def with_account(self, account_id: int) -> "Transaction":
        return replace(self, account_id=account_id)

    def with_note(self, note: Optional[str]) -> "Transaction":
        return replace(self, note=note)

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-serializable field map for audit records."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "amount": str(self.amount),
            "category_id": self.category_id,
            "account_id": self.account_id,
            "transaction_type": self.transaction_type.value,
            "note": self.note,
            "transfer_group_id": self.transfer_group_id,
        }


@dataclass(frozen=True)
class Ledger:
    """Monthly ledger period with its associated transactions."""

    id: Optional[int]
    period: str
    transactions: tuple[Transaction, ...] = ()

    @property
    def total_income(self) -> Decimal:
        return sum((t.amount for t in self.transactions if t.is_income), Decimal("0"))

    @property
    def total_expense(self) -> Decimal:
        return sum((t.amount for t in self.transactions if t.is_expense), Decimal("0"))

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense

    def income_by_category(self) -> dict[int, Decimal]:
        return _totals_by_category(t for t in self.transactions if t.is_income)

    def expense_by_category(self) -> dict[int, Decimal]:
        return _totals_by_category(t for t in self.transactions if t.is_expense)


def _totals_by_category(transactions) -> dict[int, Decimal]:
    totals: dict[int, Decimal] = {}
    for txn in transactions:
        totals[txn.category_id] = totals.get(txn.category_id, Decimal("0")) + txn.amount
    return totals


@dataclass(frozen=True)
class LedgerLink:
    """Association between a ledger period and a transaction."""

    ledger_id: int
    transaction_id: int


@dataclass(frozen=True)
class AuditRecord:
    """Append-only audit trail entry."""

    id: int
    transaction_id: Optional[int]
    operation: AuditOperation
    info: Optional[dict[str, Any]]
    created_at: datetime


@dataclass(frozen=True)
class TransactionFilter:
    """Typed filter for transaction queries. Unset fields do not filter."""

    category_id: Optional[int] = None
    account_id: Optional[int] = None
    period: Optional[str] = None
    transaction_type: Optional[TransactionType] = None
    transfer_group_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class TransactionChanges:
    """Fields to change on an existing transaction. ``None`` means keep."""

    date: Optional[date] = None
    amount: Optional[Decimal] = None
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    transaction_type: Optional[TransactionType] = None
    note: Optional[str] = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (
                self.date,
                self.amount,
                self.category_id,
                self.account_id,
                self.transaction_type,
                self.note,
            )
        )

    def apply(self, txn: Transaction) -> Transaction:
        """Merge the supplied fields over ``txn``."""
        merged = txn
        if self.date is not None:
            merged = merged.with_date(self.date)
        if self.amount is not None:
            merged = merged.with_amount(self.amount)
        if self.category_id is not None:
            merged = merged.with_category(self.category_id)
        if self.account_id is not None:
            merged = merged.with_account(self.account_id)
        if self.transaction_type is not None:
            merged = replace(merged, transaction_type=self.transaction_type)
        if self.note is not None:
            merged = merged.with_note(self.note)
        return merged

@dataclass(frozen=True)
class LedgerSummary:
    """Income/expense totals over an inclusive range of ledger periods."""

    start_period: str
    end_period: str
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    income_by_category: dict[int, Decimal] = field(default_factory=dict)
    expense_by_category: dict[int, Decimal] = field(default_factory=dict)
