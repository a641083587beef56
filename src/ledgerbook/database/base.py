"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerbook.domain.entities import (
    Account,
    AuditOperation,
    AuditRecord,
    Category,
    Ledger,
    LedgerLink,
    Transaction,
    TransactionFilter,
)


class Database(ABC):
    """Abstract persistence gateway for ledgerbook.

    Point operations issued outside an atomic unit are committed one by one.
    Inside a unit (see :meth:`atomic`) they are only flushed, and become
    visible together when the unit commits.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Atomic unit
    @abstractmethod
    def in_transaction(self) -> bool:
        """Return True while an atomic unit is open."""
        pass

    @abstractmethod
    def begin(self) -> bool:
        """Open an atomic unit.

        Returns:
            True if a new unit was opened, False if one was already open and
            is being reused.
        """
        pass

    @abstractmethod
    def commit(self) -> None:
        """Commit the open atomic unit.

        Raises:
            IntegrityError: If the store rejects the commit (the unit is rolled back)
        """
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard every change made in the open atomic unit."""
        pass

    @contextmanager
    def atomic(self) -> Iterator["Database"]:
        """Run a block as one all-or-nothing unit.

        If a unit is already open, the block joins it and the outer owner
        decides whether to commit.
        """
        owner = self.begin()
        try:
            yield self
        except BaseException:
            if owner:
                self.rollback()
            raise
        if owner:
            self.commit()

    # Account operations
    @abstractmethod
    def insert_account(self, account: Account) -> int:
        """Insert an account. Returns account ID."""
        pass

    @abstractmethod
    def update_account(self, account: Account) -> None:
        """Persist name, type and balance of an existing account."""
        pass

    @abstractmethod
    def delete_account(self, account: Account) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def fetch_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def fetch_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by name."""
        pass

    @abstractmethod
    def fetch_all_accounts(self) -> list[Account]:
        """List all accounts ordered by ID."""
        pass

    # Category operations
    @abstractmethod
    def insert_category(self, category: Category) -> int:
        """Insert a category. Returns category ID."""
        pass

    @abstractmethod
    def update_category(self, category: Category) -> None:
        """Persist name and type of an existing category."""
        pass

    @abstractmethod
    def delete_category(self, category: Category) -> None:
        """Delete a category."""
        pass

    @abstractmethod
    def fetch_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def fetch_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def fetch_all_categories(self) -> list[Category]:
        """List all categories ordered by ID."""
        pass

    # Transaction operations
    @abstractmethod
    def insert_transaction(self, transaction: Transaction) -> int:
        """Insert a transaction and its "insert" audit record. Returns transaction ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> None:
        """Update a transaction and write an "update" audit record."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction: Transaction) -> None:
        """Write a "delete" audit record, then remove ledger links and the row."""
        pass

    @abstractmethod
    def fetch_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def fetch_transactions(self, filter: Optional[TransactionFilter] = None) -> list[Transaction]:
        """List transactions matching ``filter`` in ascending ID order."""
        pass

    @abstractmethod
    def insert_transfer_group(self) -> int:
        """Allocate a new transfer group identity."""
        pass

    # Ledger operations
    @abstractmethod
    def insert_ledger(self, period: str) -> int:
        """Insert a ledger period. Must be called inside an atomic unit."""
        pass

    @abstractmethod
    def fetch_ledger_by_period(self, period: str) -> Optional[Ledger]:
        """Get a ledger with its associated transactions."""
        pass

    @abstractmethod
    def fetch_ledgers(self, period: Optional[str] = None) -> list[Ledger]:
        """List ledgers, optionally restricted to one period."""
        pass

    # Ledger association operations
    @abstractmethod
    def insert_ledger_link(self, ledger_id: int, transaction_id: int) -> None:
        """Associate a transaction with a ledger (no-op if already linked)."""
        pass

    @abstractmethod
    def delete_ledger_links_for_transaction(self, transaction_id: int) -> None:
        """Remove the ledger association(s) of a transaction."""
        pass

    @abstractmethod
    def replace_ledger_links(self, ledger_id: int, transaction_ids: list[int]) -> None:
        """Replace every association of a ledger with ``transaction_ids``."""
        pass

    @abstractmethod
    def fetch_ledger_links(self) -> list[LedgerLink]:
        """List all ledger associations."""
        pass

    @abstractmethod
    def fetch_ledger_links_for_ledger(self, ledger_id: int) -> list[LedgerLink]:
        """List associations of one ledger."""
        pass

    # Audit operations
    @abstractmethod
    def insert_audit(
        self,
        transaction_id: Optional[int],
        operation: AuditOperation,
        info: Optional[dict[str, Any]] = None,
    ) -> int:
        """Append an audit record. Returns audit ID."""
        pass

    @abstractmethod
    def fetch_audits(
        self,
        transaction_id: Optional[int] = None,
        operation: Optional[AuditOperation] = None,
    ) -> list[AuditRecord]:
        """List audit records in insertion order."""
        pass
