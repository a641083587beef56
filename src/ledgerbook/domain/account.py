"""Account domain service."""

from decimal import Decimal
from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Account as AccountEntity, AccountType, TransactionFilter
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    UnsupportedError,
    ValidationError,
    account_not_found,
    delete_requires_reassignment,
    duplicate_account_name,
)
from ledgerbook.domain.validation import coerce_enum, validate_balance, validate_id, validate_name
from ledgerbook.logging_config import get_logger

logger = get_logger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        account_type: AccountType | str,
        balance: Decimal | int | str = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            name: Account name (unique)
            account_type: Account type or its code (e.g. "bank")
            balance: Opening balance, must not be negative

        Returns:
            Account ID

        Raises:
            ValidationError: If a field is malformed
            ConflictError: If account name already exists
        """
        name = validate_name(name, "account name")
        account_type = coerce_enum(AccountType, account_type, "account type")
        balance = validate_balance(balance)

        if self.db.fetch_account_by_name(name) is not None:
            raise ConflictError(duplicate_account_name(name))

        account_id = self.db.insert_account(
            AccountEntity(id=None, name=name, account_type=account_type, balance=balance)
        )
        logger.info("created account %s (%s)", account_id, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.fetch_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising NotFoundError if it does not exist."""
        account = self.db.fetch_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        return self.db.fetch_account_by_name(name)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.fetch_all_accounts()

    def get_account_map(self) -> dict[int, str]:
        """Return a mapping of account ID to account name."""
        return {account.id: account.name for account in self.list_accounts()}

    def update_account_fields(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType | str] = None,
        balance: Optional[Decimal | int | str] = None,
    ) -> AccountEntity:
        """Update the given fields of an account.

        Args:
            account_id: Account ID to update
            name: Optional new name
            account_type: Optional new type
            balance: Optional corrected balance (not reconciled against transactions)

        Returns:
            The updated account

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name is used by another account
        """
        account = self.require_account(account_id)

        if name is not None:
            name = validate_name(name, "account name")
            existing = self.db.fetch_account_by_name(name)
            if existing is not None and existing.id != account_id:
                raise ConflictError(duplicate_account_name(name))
            account = account.with_name(name)
        if account_type is not None:
            account = account.with_type(coerce_enum(AccountType, account_type, "account type"))
        if balance is not None:
            account = account.with_balance(validate_balance(balance))

        self.db.update_account(account)
        return account

    def rename_account(self, account_id: int, name: str) -> None:
        """Rename an account."""
        self.update_account_fields(account_id, name=name)

    def _check_transfer_legs(self, transactions: list, reassign_to: int) -> None:
        """Reject a reassignment that would put both legs of a transfer on one account."""
        for group_id in {t.transfer_group_id for t in transactions if t.is_transfer}:
            legs = self.db.fetch_transactions(TransactionFilter(transfer_group_id=group_id))
            if any(leg.account_id == reassign_to for leg in legs):
                raise UnsupportedError(
                    f"Reassigning to account {reassign_to} would turn transfer group "
                    f"{group_id} into a same-account transfer"
                )

    def delete_account(
        self, account_id: int, reassign_to: Optional[int] = None, force: bool = False
    ) -> None:
        """Delete an account, moving its transactions to another account first.

        Args:
            account_id: Account ID to delete
            reassign_to: Account receiving every transaction of the deleted account.
                Required when the account has transactions.
            force: Accepted for symmetry with the CLI. It never allows deleting
                an account that still has transactions.

        Raises:
            NotFoundError: If the account or the reassignment target does not exist
            UnsupportedError: If the account has transactions and no target was given
            ValidationError: If the target is the account itself
        """
        validate_id(account_id, "account ID")
        account = self.require_account(account_id)

        with self.db.atomic():
            transactions = self.db.fetch_transactions(TransactionFilter(account_id=account_id))

            if transactions:
                if reassign_to is None:
                    raise UnsupportedError(
                        delete_requires_reassignment("account", account_id, len(transactions))
                    )
                validate_id(reassign_to, "reassignment account ID")
                if reassign_to == account_id:
                    raise ValidationError("Reassignment to the same account is not allowed")
                if self.db.fetch_account(reassign_to) is None:
                    raise NotFoundError(account_not_found(reassign_to))
                self._check_transfer_legs(transactions, reassign_to)

                for txn in transactions:
                    self.db.update_transaction(txn.with_account(reassign_to))

            self.db.delete_account(account)

        if transactions:
            logger.info(
                "deleted account %s after reassigning %d transactions to %s",
                account_id,
                len(transactions),
                reassign_to,
            )
        else:
            logger.info("deleted account %s", account_id)
