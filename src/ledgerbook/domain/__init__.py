"""Domain layer for ledgerbook application."""

# Services are imported lazily: the database layer imports domain.entities,
# and the services import the database layer.
_SERVICES = {
    "AccountService": "ledgerbook.domain.account",
    "AuditService": "ledgerbook.domain.audit",
    "CategoryService": "ledgerbook.domain.category",
    "LedgerService": "ledgerbook.domain.ledger",
    "TransactionService": "ledgerbook.domain.transaction",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
