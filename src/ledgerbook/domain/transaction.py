"""Transaction domain service.

Every mutation here runs inside one atomic unit of the database gateway:
the transaction rows, the affected account balances, the ledger period
associations and the audit trail change together or not at all.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import (
    Account as AccountEntity,
    Transaction as TransactionEntity,
    TransactionChanges,
    TransactionFilter,
    TransactionType,
)
from ledgerbook.domain.errors import (
    ConsistencyError,
    NotFoundError,
    UnsupportedError,
    ValidationError,
    account_not_found,
    category_not_found,
    transaction_not_found,
    transfer_pair_broken,
)
from ledgerbook.domain.validation import (
    coerce_enum,
    validate_amount,
    validate_date,
    validate_id,
    validate_period,
)
from ledgerbook.logging_config import get_logger

logger = get_logger(__name__)

TransactionTransform = Callable[[TransactionEntity], TransactionEntity]


class TransactionService:
    """Service for registering, updating and deleting transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    # Validation helpers

    def _validate_entry(self, entry: TransactionEntity) -> TransactionEntity:
        """Check primitive fields and return the entry with normalized values."""
        return replace(
            entry,
            date=validate_date(entry.date),
            amount=validate_amount(entry.amount),
            category_id=validate_id(entry.category_id, "category ID"),
            account_id=validate_id(entry.account_id, "account ID"),
            transaction_type=coerce_enum(TransactionType, entry.transaction_type, "transaction type"),
        )

    def _require_account(self, account_id: int) -> AccountEntity:
        account = self.db.fetch_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_category(self, category_id: int) -> None:
        if self.db.fetch_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

    def _require_transaction(self, transaction_id: int) -> TransactionEntity:
        entry = self.db.fetch_transaction(transaction_id)
        if entry is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return entry

    # Building blocks used inside an atomic unit

    def _ledger_id_for(self, period: str) -> int:
        """Return the ledger ID for ``period``, creating the ledger if needed."""
        ledger = self.db.fetch_ledger_by_period(period)
        if ledger is not None:
            return ledger.id
        ledger_id = self.db.insert_ledger(period)
        logger.debug("created ledger %s for period %s", ledger_id, period)
        return ledger_id

    def _move_to_period(self, transaction_ids: list[int], period: str) -> None:
        for transaction_id in transaction_ids:
            self.db.delete_ledger_links_for_transaction(transaction_id)
        ledger_id = self._ledger_id_for(period)
        for transaction_id in transaction_ids:
            self.db.insert_ledger_link(ledger_id, transaction_id)

    @staticmethod
    def _apply_effect(
        account: AccountEntity, entry: TransactionEntity, reverse: bool = False
    ) -> AccountEntity:
        """Return ``account`` after applying (or undoing) an income/expense entry."""
        credit = entry.is_income
        if reverse:
            credit = not credit
        if credit:
            return account.deposit(entry.amount)
        return account.withdraw(entry.amount)

    def _transfer_legs(self, entry: TransactionEntity) -> tuple[TransactionEntity, TransactionEntity]:
        """Return the (source, destination) legs of the transfer ``entry`` belongs to.

        Legs are ordered by ascending ID; the source leg is always inserted first.
        """
        if entry.transfer_group_id is None:
            raise ConsistencyError(f"Transfer transaction {entry.id} has no transfer group")
        legs = self.db.fetch_transactions(TransactionFilter(transfer_group_id=entry.transfer_group_id))
        if len(legs) != 2:
            raise ConsistencyError(transfer_pair_broken(entry.transfer_group_id, len(legs)))
        source, destination = sorted(legs, key=lambda leg: leg.id)
        if source.account_id == destination.account_id:
            raise ConsistencyError(
                f"Transfer group {entry.transfer_group_id} has both legs on account {source.account_id}"
            )
        return source, destination

    # Queries

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.fetch_transaction(transaction_id)

    def get_transfer_legs(self, transaction_id: int) -> tuple[TransactionEntity, TransactionEntity]:
        """Return the (source, destination) legs of a transfer given either leg's ID."""
        entry = self._require_transaction(transaction_id)
        if not entry.is_transfer:
            raise ValidationError(f"Transaction {transaction_id} is not a transfer")
        return self._transfer_legs(entry)

    def list_transactions(self, filter: Optional[TransactionFilter] = None) -> list[TransactionEntity]:
        """List transactions matching ``filter`` in ascending ID order."""
        if filter is not None and filter.period is not None:
            validate_period(filter.period)
        return self.db.fetch_transactions(filter)

    # Registration

    def register_transaction(self, entry: TransactionEntity) -> int:
        """Register an income or expense transaction and adjust its account.

        The row, its ledger association, the account balance and the audit
        record are written in one atomic unit.

        Args:
            entry: Transaction to register. Its ``id`` is ignored.

        Returns:
            Transaction ID

        Raises:
            ValidationError: If a field is malformed
            UnsupportedError: If the entry is a transfer (use register_transfer)
            NotFoundError: If the category or account does not exist
        """
        entry = self._validate_entry(entry)
        if entry.is_transfer or entry.transfer_group_id is not None:
            raise UnsupportedError("Transfers must be registered with register_transfer")
        entry = replace(entry, id=None)

        self._require_category(entry.category_id)
        self._require_account(entry.account_id)

        with self.db.atomic():
            transaction_id = self.db.insert_transaction(entry)
            self.db.insert_ledger_link(self._ledger_id_for(entry.period), transaction_id)

            account = self._require_account(entry.account_id)
            self.db.update_account(self._apply_effect(account, entry))

        logger.info(
            "registered %s transaction %s on account %s (%s)",
            entry.transaction_type.value,
            transaction_id,
            entry.account_id,
            entry.amount,
        )
        return transaction_id

    def register_transfer(
        self,
        date: date | str,
        amount: Decimal | int | str,
        from_account_id: int,
        to_account_id: int,
        category_id: Optional[int] = None,
        note: Optional[str] = None,
    ) -> tuple[int, int]:
        """Move money between two accounts as a linked pair of transactions.

        The category of both legs is always the first registered
        transfer-type category. ``category_id`` is checked for existence
        when given but does not change which category is used.

        Returns:
            Tuple of (source transaction ID, destination transaction ID)

        Raises:
            ValidationError: If a field is malformed or both accounts are the same
            NotFoundError: If an account, the given category, or any
                transfer-type category does not exist
        """
        txn_date = validate_date(date)
        amount = validate_amount(amount)
        validate_id(from_account_id, "source account ID")
        validate_id(to_account_id, "destination account ID")
        if from_account_id == to_account_id:
            raise ValidationError(
                "The transfer origin and transfer destination cannot be the same account"
            )

        self._require_account(from_account_id)
        self._require_account(to_account_id)
        if category_id is not None:
            self._require_category(validate_id(category_id, "category ID"))

        transfer_category = next(
            (c for c in self.db.fetch_all_categories() if c.is_transfer), None
        )
        if transfer_category is None:
            raise NotFoundError(
                "No transfer category found. Please register a category of type 'transfer' first."
            )
        if category_id is not None and category_id != transfer_category.id:
            logger.debug(
                "ignoring category %s for transfer, using transfer category %s",
                category_id,
                transfer_category.id,
            )

        with self.db.atomic():
            group_id = self.db.insert_transfer_group()
            leg = TransactionEntity(
                id=None,
                date=txn_date,
                amount=amount,
                category_id=transfer_category.id,
                account_id=from_account_id,
                transaction_type=TransactionType.TRANSFER,
                note=note,
                transfer_group_id=group_id,
            )
            from_id = self.db.insert_transaction(leg)
            to_id = self.db.insert_transaction(leg.with_account(to_account_id))

            ledger_id = self._ledger_id_for(leg.period)
            self.db.insert_ledger_link(ledger_id, from_id)
            self.db.insert_ledger_link(ledger_id, to_id)

            source, destination = self._require_account(from_account_id).transfer_to(
                amount, self._require_account(to_account_id)
            )
            self.db.update_account(source)
            self.db.update_account(destination)

        logger.info(
            "registered transfer group %s: %s from account %s to %s",
            group_id,
            amount,
            from_account_id,
            to_account_id,
        )
        return from_id, to_id

    # Updates

    def update_transaction_fields(
        self, transaction_id: int, changes: TransactionChanges
    ) -> TransactionEntity:
        """Update the supplied fields of a transaction, keeping balances consistent.

        Fields left as ``None`` in ``changes`` keep their current value.

        For a transfer leg both legs receive the new date, amount, category
        and note, and the amount difference moves between the two accounts.
        For income/expense the old effect is undone on the old account and
        the new effect applied on the (possibly different) new account.
        The ledger association follows the date's period.

        Returns:
            The updated transaction

        Raises:
            NotFoundError: If the transaction, category or account does not exist
            ValidationError: If a supplied field is malformed
            UnsupportedError: If the change would turn a transfer into income/expense
                (or back), or reassign a transfer leg to another account
            ConsistencyError: If the transfer pair is broken
        """
        changes = TransactionChanges(
            date=validate_date(changes.date) if changes.date is not None else None,
            amount=validate_amount(changes.amount) if changes.amount is not None else None,
            category_id=(
                validate_id(changes.category_id, "category ID")
                if changes.category_id is not None
                else None
            ),
            account_id=(
                validate_id(changes.account_id, "account ID")
                if changes.account_id is not None
                else None
            ),
            transaction_type=(
                coerce_enum(TransactionType, changes.transaction_type, "transaction type")
                if changes.transaction_type is not None
                else None
            ),
            note=changes.note,
        )
        entry = self._require_transaction(transaction_id)
        if changes.is_empty():
            return entry
        return self._update(entry, changes.apply(entry), changes.account_id)

    def apply_change(self, transaction_id: int, transform: TransactionTransform) -> TransactionEntity:
        """Load a transaction, transform it, and persist the result consistently.

        Args:
            transaction_id: Transaction to change
            transform: Function from the current record to the desired record

        Returns:
            The updated transaction
        """
        entry = self._require_transaction(transaction_id)
        new_entry = transform(entry)
        if new_entry.id != entry.id:
            raise ValidationError("A transaction's ID cannot be changed")
        requested_account = new_entry.account_id if new_entry.account_id != entry.account_id else None
        return self._update(entry, new_entry, requested_account)

    def change_amount(self, transaction_id: int, amount: Decimal | int | str) -> TransactionEntity:
        """Change the amount of a transaction (both legs for a transfer)."""
        new_amount = validate_amount(amount)
        return self.apply_change(transaction_id, lambda entry: entry.with_amount(new_amount))

    def change_category(self, transaction_id: int, category_id: int) -> TransactionEntity:
        """Change the category of a transaction (both legs for a transfer)."""
        validate_id(category_id, "category ID")
        return self.apply_change(transaction_id, lambda entry: entry.with_category(category_id))

    def _update(
        self,
        entry: TransactionEntity,
        new_entry: TransactionEntity,
        requested_account_id: Optional[int],
    ) -> TransactionEntity:
        new_entry = self._validate_entry(new_entry)
        self._require_category(new_entry.category_id)
        self._require_account(new_entry.account_id)

        if entry.is_transfer != new_entry.is_transfer:
            raise UnsupportedError(
                "Changing between transfer and non-transfer transactions is not supported. "
                "Please delete and recreate the transaction."
            )

        with self.db.atomic():
            if entry.is_transfer:
                updated = self._update_transfer(entry, new_entry, requested_account_id)
            else:
                updated = self._update_single(entry, new_entry)

        logger.info("updated transaction %s", entry.id)
        return updated

    def _update_transfer(
        self,
        entry: TransactionEntity,
        new_entry: TransactionEntity,
        requested_account_id: Optional[int],
    ) -> TransactionEntity:
        source, destination = self._transfer_legs(entry)

        if requested_account_id is not None and requested_account_id not in (
            source.account_id,
            destination.account_id,
        ):
            raise UnsupportedError("Changing the account of a transfer transaction is not supported")

        delta = new_entry.amount - source.amount
        if delta != 0:
            source_account = self._require_account(source.account_id)
            destination_account = self._require_account(destination.account_id)
            if delta > 0:
                source_account, destination_account = source_account.transfer_to(
                    delta, destination_account
                )
            else:
                destination_account, source_account = destination_account.transfer_to(
                    -delta, source_account
                )
            self.db.update_account(source_account)
            self.db.update_account(destination_account)

        updated_legs = [
            replace(
                leg,
                date=new_entry.date,
                amount=new_entry.amount,
                category_id=new_entry.category_id,
                note=new_entry.note,
            )
            for leg in (source, destination)
        ]
        for leg in updated_legs:
            self.db.update_transaction(leg)

        if source.period != new_entry.period:
            self._move_to_period([source.id, destination.id], new_entry.period)

        return next(leg for leg in updated_legs if leg.id == entry.id)

    def _update_single(self, entry: TransactionEntity, new_entry: TransactionEntity) -> TransactionEntity:
        original_account = self._require_account(entry.account_id)
        self.db.update_account(self._apply_effect(original_account, entry, reverse=True))

        # Re-read: the target may be the account just updated
        target_account = self._require_account(new_entry.account_id)
        self.db.update_account(self._apply_effect(target_account, new_entry))

        self.db.update_transaction(new_entry)

        if entry.period != new_entry.period:
            self._move_to_period([entry.id], new_entry.period)

        return new_entry

    # Deletion

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction and undo its effect on account balances.

        Deleting either leg of a transfer deletes both legs.

        Raises:
            NotFoundError: If the transaction does not exist
            ConsistencyError: If the transfer pair is broken
        """
        entry = self._require_transaction(transaction_id)

        with self.db.atomic():
            if entry.is_transfer:
                source, destination = self._transfer_legs(entry)
                source_account = self._require_account(source.account_id).deposit(source.amount)
                destination_account = self._require_account(destination.account_id).withdraw(
                    destination.amount
                )
                self.db.update_account(source_account)
                self.db.update_account(destination_account)
                self.db.delete_transaction(source)
                self.db.delete_transaction(destination)
            else:
                account = self._require_account(entry.account_id)
                self.db.update_account(self._apply_effect(account, entry, reverse=True))
                self.db.delete_transaction(entry)

        if entry.is_transfer:
            logger.info("deleted transfer group %s", entry.transfer_group_id)
        else:
            logger.info("deleted transaction %s", transaction_id)
