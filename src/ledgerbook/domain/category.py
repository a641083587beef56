"""Category domain service."""

from typing import Optional

from ledgerbook.database.base import Database
from ledgerbook.domain.entities import Category as CategoryEntity, CategoryType, TransactionFilter
from ledgerbook.domain.errors import (
    ConflictError,
    NotFoundError,
    UnsupportedError,
    ValidationError,
    category_not_found,
    delete_requires_reassignment,
    duplicate_category_name,
)
from ledgerbook.domain.validation import coerce_enum, validate_id, validate_name
from ledgerbook.logging_config import get_logger

logger = get_logger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, name: str, category_type: CategoryType | str) -> int:
        """Create a category.

        Args:
            name: Category name (unique)
            category_type: Category type or its code ("income", "expense", "transfer")

        Returns:
            Category ID

        Raises:
            ValidationError: If a field is malformed
            ConflictError: If category name already exists
        """
        name = validate_name(name, "category name")
        category_type = coerce_enum(CategoryType, category_type, "category type")

        if self.db.fetch_category_by_name(name) is not None:
            raise ConflictError(duplicate_category_name(name))

        category_id = self.db.insert_category(
            CategoryEntity(id=None, name=name, category_type=category_type)
        )
        logger.info("created category %s (%s, %s)", category_id, name, category_type.value)
        return category_id

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Returns:
            Category entity or None if not found
        """
        return self.db.fetch_category(category_id)

    def require_category(self, category_id: int) -> CategoryEntity:
        category = self.db.fetch_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        return self.db.fetch_category_by_name(name)

    def list_categories(self) -> list[CategoryEntity]:
        """List all categories in creation order."""
        return self.db.fetch_all_categories()

    def get_category_map(self) -> dict[int, str]:
        """Return a mapping of category ID to category name."""
        return {category.id: category.name for category in self.list_categories()}

    def find_transfer_category(self) -> Optional[CategoryEntity]:
        """Return the first registered transfer-type category, if any."""
        for category in self.db.fetch_all_categories():
            if category.is_transfer:
                return category
        return None

    def update_category_fields(
        self,
        category_id: int,
        name: Optional[str] = None,
        category_type: Optional[CategoryType | str] = None,
    ) -> CategoryEntity:
        """Update the given fields of a category.

        Raises:
            NotFoundError: If category not found
            ConflictError: If the new name is used by another category
        """
        category = self.require_category(category_id)

        if name is not None:
            name = validate_name(name, "category name")
            existing = self.db.fetch_category_by_name(name)
            if existing is not None and existing.id != category_id:
                raise ConflictError(duplicate_category_name(name))
            category = category.with_name(name)
        if category_type is not None:
            category = category.with_type(coerce_enum(CategoryType, category_type, "category type"))

        self.db.update_category(category)
        return category

    def rename_category(self, category_id: int, name: str) -> None:
        """Rename a category."""
        self.update_category_fields(category_id, name=name)

    def delete_category(
        self, category_id: int, reassign_to: Optional[int] = None, force: bool = False
    ) -> None:
        """Delete a category, moving its transactions to another category first.

        ``force`` never allows deleting a category that still has transactions;
        reassignment is the only way to remove a category in use.

        Raises:
            NotFoundError: If the category or the reassignment target does not exist
            UnsupportedError: If the category has transactions and no target was given
            ValidationError: If the target is the category itself
        """
        validate_id(category_id, "category ID")
        category = self.require_category(category_id)

        with self.db.atomic():
            transactions = self.db.fetch_transactions(TransactionFilter(category_id=category_id))

            if transactions:
                if reassign_to is None:
                    raise UnsupportedError(
                        delete_requires_reassignment("category", category_id, len(transactions))
                    )
                validate_id(reassign_to, "reassignment category ID")
                if reassign_to == category_id:
                    raise ValidationError("Reassignment to the same category is not allowed")
                if self.db.fetch_category(reassign_to) is None:
                    raise NotFoundError(category_not_found(reassign_to))

                for txn in transactions:
                    self.db.update_transaction(txn.with_category(reassign_to))

            self.db.delete_category(category)

        logger.info(
            "deleted category %s (%d transactions reassigned)", category_id, len(transactions)
        )
