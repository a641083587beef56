"""Utilities for resolving account and category names to IDs."""

from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.errors import NotFoundError


def _as_id(value: str | int) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    account_id = _as_id(account)
    if account_id is not None:
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    account_obj = account_service.get_account_by_name(account)
    if account_obj is None:
        raise NotFoundError(f"Account '{account}' not found")
    return account_obj.id


def resolve_category(category_service: CategoryService, category: str | int) -> int:
    """Resolve category name or ID to category ID.

    Raises:
        NotFoundError: If category is not found
    """
    category_id = _as_id(category)
    if category_id is not None:
        if category_service.get_category(category_id) is None:
            raise NotFoundError(f"Category ID {category_id} not found")
        return category_id

    category_obj = category_service.get_category_by_name(category)
    if category_obj is None:
        raise NotFoundError(f"Category '{category}' not found")
    return category_obj.id
