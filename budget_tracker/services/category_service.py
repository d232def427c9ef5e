import logging

from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.database.recurring_dao import RecurringDAO
from budget_tracker.database.transaction_dao import TransactionDAO
from budget_tracker.models.category import Category
from budget_tracker.utils.constants import UNCATEGORIZED_CATEGORY
from budget_tracker.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(
        self,
        db: DatabaseManager,
        category_dao: CategoryDAO,
        tx_dao: TransactionDAO,
        recurring_dao: RecurringDAO,
    ):
        self._db = db
        self._dao = category_dao
        self._tx_dao = tx_dao
        self._recurring_dao = recurring_dao

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_id(self, category_id: int) -> Category:
        cat = self._dao.get_by_id(category_id)
        if cat is None:
            raise NotFoundError(f"Category not found (id: {category_id}).")
        return cat

    def resolve_or_create(self, name: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        return self._dao.get_or_create(name)

    def add_category(self, name: str) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        if self._dao.get_by_name(name):
            raise ValidationError(f"A category named '{name}' already exists.")
        cat = self._dao.create(name)
        logger.info("Created category %r", cat.name)
        return cat

    def rename_category(self, category_id: int, new_name: str) -> Category:
        new_name = (new_name or "").strip()
        if not new_name:
            raise ValidationError("New category name cannot be empty.")
        self.get_by_id(category_id)
        clash = self._dao.get_by_name(new_name)
        if clash and clash.id != category_id:
            raise ValidationError(f"A category named '{new_name}' already exists.")
        return self._dao.rename(category_id, new_name)

    def delete_category(self, category_id: int):
        """Delete a category, moving its transactions and templates to Uncategorized."""
        cat = self._dao.get_by_id(category_id)
        if cat is None:
            return
        if cat.is_system:
            raise ValidationError(f"System category '{cat.name}' cannot be deleted.")
        with self._db.transaction():
            fallback = self._dao.get_or_create(UNCATEGORIZED_CATEGORY)
            moved = self._tx_dao.reassign_category(category_id, fallback.id)
            self._recurring_dao.reassign_category(category_id, fallback.id)
            self._dao.delete(category_id)
        logger.info("Deleted category %r; %d transaction(s) moved to %s",
                    cat.name, moved, fallback.name)
