"""Shared pytest fixtures for ledgerbook tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerbook.database.factories import create_sqlite_database
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.audit import AuditService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import Transaction, TransactionType
from ledgerbook.domain.errors import IntegrityError
from ledgerbook.domain.ledger import LedgerService
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    """The CLI configures logging once per process; undo it between tests."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def audit_service(temp_db):
    """Create an AuditService with a temporary database."""
    return AuditService(temp_db)


@pytest.fixture
def sample_accounts(account_service):
    """Create a checking account (1000) and a savings account (500)."""
    checking = account_service.create_account(name="Checking", account_type="bank", balance="1000")
    savings = account_service.create_account(name="Savings", account_type="bank", balance="500")
    return {"Checking": checking, "Savings": savings}


@pytest.fixture
def sample_categories(category_service):
    """Create one category of each type and return their IDs by name."""
    return {
        "Salary": category_service.create_category(name="Salary", category_type="income"),
        "Groceries": category_service.create_category(name="Groceries", category_type="expense"),
        "Transfer": category_service.create_category(name="Transfer", category_type="transfer"),
    }


@pytest.fixture
def make_entry(sample_accounts, sample_categories):
    """Build an unsaved transaction with sensible defaults."""

    def _make(
        amount="100",
        transaction_type=TransactionType.EXPENSE,
        account="Checking",
        category=None,
        txn_date=date(2024, 1, 15),
        note=None,
    ):
        if category is None:
            category = "Salary" if transaction_type == TransactionType.INCOME else "Groceries"
        return Transaction(
            id=None,
            date=txn_date,
            amount=Decimal(amount),
            category_id=sample_categories[category],
            account_id=sample_accounts[account],
            transaction_type=transaction_type,
            note=note,
        )

    return _make


@pytest.fixture
def store_state(temp_db):
    """Return a callable capturing every row the services write."""

    def _capture():
        return {
            "accounts": temp_db.fetch_all_accounts(),
            "categories": temp_db.fetch_all_categories(),
            "transactions": temp_db.fetch_transactions(),
            "ledgers": temp_db.fetch_ledgers(),
            "links": temp_db.fetch_ledger_links(),
            "audits": temp_db.fetch_audits(),
        }

    return _capture


@pytest.fixture
def fail_on_call():
    """Wrap a gateway method so that its ``nth`` call raises IntegrityError.

    Earlier calls go through to the real method, so the failure happens
    after part of the operation has already been written.
    """

    def _wrap(method, nth=1):
        calls = []

        def _side_effect(*args, **kwargs):
            calls.append(args)
            if len(calls) == nth:
                raise IntegrityError("disk full")
            return method(*args, **kwargs)

        return _side_effect

    return _wrap


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
