"""Audit trail domain service.

Audit records are written by the database gateway as part of every
transaction insert, update and delete. This service only reads them and
appends ad-hoc entries; records are never changed or removed.
"""

from typing import Any, Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import AuditOperation, AuditRecord
from ledgerbook.domain.validation import coerce_enum


class AuditService:
    """Service for the append-only transaction audit trail."""

    def __init__(self, db: Database):
        self.db = db

    def record(
        self,
        transaction_id: Optional[int],
        operation: AuditOperation | str,
        info: Optional[dict[str, Any]] = None,
    ) -> int:
        """Append an audit record. Returns its ID."""
        operation = coerce_enum(AuditOperation, operation, "audit operation")
        return self.db.insert_audit(transaction_id, operation, info)

    def find_audits(
        self,
        transaction_id: Optional[int] = None,
        operation: Optional[AuditOperation | str] = None,
    ) -> list[AuditRecord]:
        """List audit records, optionally filtered, oldest first."""
        if operation is not None:
            operation = coerce_enum(AuditOperation, operation, "audit operation")
        return self.db.fetch_audits(transaction_id=transaction_id, operation=operation)

    def find_by_transaction(self, transaction_id: int) -> list[AuditRecord]:
        return self.find_audits(transaction_id=transaction_id)

    def find_by_operation(self, operation: AuditOperation | str) -> list[AuditRecord]:
        return self.find_audits(operation=operation)
