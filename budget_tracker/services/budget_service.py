import logging
from decimal import Decimal

from budget_tracker.database.budget_change_log_dao import BudgetChangeLogDAO
from budget_tracker.database.budget_dao import BudgetDAO
from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.database.transaction_dao import TransactionDAO
from budget_tracker.models.budget import BudgetChangeLog, BudgetStatus, MonthlyBudget
from budget_tracker.models.category import Category
from budget_tracker.utils.constants import BUDGET_HISTORY_ROWS
from budget_tracker.utils.currency import ZERO, to_money
from budget_tracker.utils.date_helpers import validate_year_month
from budget_tracker.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class BudgetService:
    """Per-category, per-month budget amounts plus their change history."""

    def __init__(
        self,
        db: DatabaseManager,
        budget_dao: BudgetDAO,
        change_log_dao: BudgetChangeLogDAO,
        tx_dao: TransactionDAO,
        category_dao: CategoryDAO,
    ):
        self._db = db
        self._budget_dao = budget_dao
        self._change_log_dao = change_log_dao
        self._tx_dao = tx_dao
        self._category_dao = category_dao

    def get_categories(self) -> list[Category]:
        return self._category_dao.get_all()

    def get_budget_status(self, year: int, month: int) -> list[BudgetStatus]:
        """Return all budgets for the month with spent amounts filled in."""
        validate_year_month(year, month)
        spending = self._tx_dao.get_spending_by_category(year, month)
        return [
            BudgetStatus(
                budget=budget,
                category_name=name,
                spent_amount=spending.get(budget.category_id, ZERO),
                color_hex=color,
            )
            for budget, name, color in self._budget_dao.get_by_month(year, month)
        ]

    def set_monthly_budget(self, category_id: int, year: int, month: int, amount) -> MonthlyBudget:
        validate_year_month(year, month)
        amount = to_money(amount)
        if amount < 0:
            raise ValidationError("Budget amount must be zero or positive.")
        if self._category_dao.get_by_id(category_id) is None:
            raise NotFoundError(f"Category does not exist (id: {category_id}).")

        with self._db.transaction():
            existing = self._budget_dao.get(category_id, year, month)
            old_amount = existing.amount if existing else ZERO
            budget = self._budget_dao.upsert(category_id, year, month, amount)
            if old_amount != amount:
                self._change_log_dao.add(category_id, year, month, old_amount, amount, "update")
        logger.info("Budget for category %d in %04d-%02d set to %s (was %s)",
                    category_id, year, month, amount, old_amount)
        return budget

    def delete_monthly_budget(self, category_id: int, year: int, month: int):
        validate_year_month(year, month)
        with self._db.transaction():
            existing = self._budget_dao.get(category_id, year, month)
            if existing is None:
                return
            self._budget_dao.delete(category_id, year, month)
            if existing.amount != 0:
                self._change_log_dao.add(category_id, year, month, existing.amount, ZERO, "clear")
        logger.info("Budget for category %d in %04d-%02d cleared", category_id, year, month)

    def try_get_monthly_budget_amount(self, category_id: int, year: int, month: int) -> Decimal | None:
        """Return the budget amount, or None when no budget row exists.

        None means "no budget set", which is different from a zero budget.
        """
        validate_year_month(year, month)
        budget = self._budget_dao.get(category_id, year, month)
        return budget.amount if budget else None

    def get_monthly_budget_history(
        self, category_id: int, year: int, month: int, max_rows: int = BUDGET_HISTORY_ROWS
    ) -> list[BudgetChangeLog]:
        validate_year_month(year, month)
        return self._change_log_dao.get_for_category_month(category_id, year, month, max_rows)

    def copy_from_previous_month(self, year: int, month: int) -> int:
        validate_year_month(year, month)
        from_year, from_month = (year - 1, 12) if month == 1 else (year, month - 1)
        with self._db.transaction():
            copied = [b for b, _, _ in self._budget_dao.get_by_month(from_year, from_month)]
            for budget in copied:
                existing = self._budget_dao.get(budget.category_id, year, month)
                old_amount = existing.amount if existing else ZERO
                if old_amount != budget.amount:
                    self._change_log_dao.add(
                        budget.category_id, year, month, old_amount, budget.amount, "update"
                    )
            count = self._budget_dao.copy_month(from_year, from_month, year, month)
        logger.info("Copied %d budget(s) into %04d-%02d", count, year, month)
        return count
