import logging
from datetime import date
from decimal import Decimal

from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.database.transaction_dao import TransactionDAO
from budget_tracker.models.transaction import LedgerTransaction
from budget_tracker.utils.constants import DIRECTIONS
from budget_tracker.utils.currency import to_money
from budget_tracker.utils.date_helpers import coerce_date, validate_year_month
from budget_tracker.utils.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def normalize_direction(direction: str) -> str:
    value = (direction or "").strip().lower()
    if value not in DIRECTIONS:
        raise ValidationError("Direction must be 'income' or 'expense'.")
    return value


class TransactionService:
    """Ledger entry point: every transaction, manual or generated, is validated here."""

    def __init__(self, db: DatabaseManager, tx_dao: TransactionDAO, category_dao: CategoryDAO):
        self._db = db
        self._dao = tx_dao
        self._category_dao = category_dao

    def add_transaction(
        self,
        description: str,
        amount,
        direction: str,
        category: str,
        date: date,
        recurring_template_id: int | None = None,
    ) -> LedgerTransaction:
        description, amount, direction, date = self._validate(
            description, amount, direction, date
        )
        category = (category or "").strip()
        if not category:
            raise ValidationError("Category is required.")
        with self._db.transaction():
            cat = self._category_dao.get_or_create(category)
            tx = self._dao.create(
                description=description,
                amount=amount,
                direction=direction,
                category_id=cat.id,
                date=date,
                recurring_template_id=recurring_template_id,
            )
        logger.debug("Added %s %s in %s on %s", direction, amount, cat.name, date)
        return tx

    def update_transaction(
        self,
        tx_id: int,
        description: str,
        amount,
        direction: str,
        category: str,
        date: date,
    ) -> LedgerTransaction:
        description, amount, direction, date = self._validate(
            description, amount, direction, date
        )
        category = (category or "").strip()
        if not category:
            raise ValidationError("Category is required.")
        if self._dao.get_by_id(tx_id) is None:
            raise NotFoundError(f"Transaction not found (id: {tx_id}).")
        with self._db.transaction():
            cat = self._category_dao.get_or_create(category)
            return self._dao.update(tx_id, description, amount, direction, cat.id, date)

    def delete_transaction(self, tx_id: int):
        self._dao.delete(tx_id)

    def get_transaction(self, tx_id: int) -> LedgerTransaction:
        tx = self._dao.get_by_id(tx_id)
        if tx is None:
            raise NotFoundError(f"Transaction not found (id: {tx_id}).")
        return tx

    def get_all(self) -> list[LedgerTransaction]:
        return self._dao.get_all()

    def get_by_month(self, year: int, month: int) -> list[LedgerTransaction]:
        validate_year_month(year, month)
        return self._dao.get_by_month(year, month)

    def get_for_template(self, template_id: int) -> list[LedgerTransaction]:
        return self._dao.get_by_template(template_id)

    def search(self, keyword: str) -> list[LedgerTransaction]:
        keyword = (keyword or "").strip()
        if not keyword:
            return self._dao.get_all()
        return self._dao.search(keyword)

    def get_monthly_totals(self, year: int, month: int) -> tuple[Decimal, Decimal]:
        """Return (income, expense) for the month."""
        validate_year_month(year, month)
        totals = self._dao.get_totals_for_month(year, month)
        return totals["income"], totals["expense"]

    def get_total_expenses_for_category_month(
        self, category_id: int, year: int, month: int
    ) -> Decimal:
        validate_year_month(year, month)
        return self._dao.get_total_expenses_for_category_month(category_id, year, month)

    def get_spending_by_category(self, year: int, month: int) -> dict[int, Decimal]:
        validate_year_month(year, month)
        return self._dao.get_spending_by_category(year, month)

    def _validate(self, description, amount, direction, tx_date):
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required.")
        amount = to_money(amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero.")
        direction = normalize_direction(direction)
        tx_date = coerce_date(tx_date)
        return description, amount, direction, tx_date
