import logging
from datetime import datetime
from decimal import Decimal

from budget_tracker.database.carry_over_run_dao import CarryOverRunDAO
from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.models.carry_over import CarryOverPreviewItem, CarryOverRun
from budget_tracker.services.budget_service import BudgetService
from budget_tracker.services.transaction_service import TransactionService
from budget_tracker.utils.constants import SAVINGS_CATEGORY
from budget_tracker.utils.currency import ZERO
from budget_tracker.utils.date_helpers import first_of_next_month, utc_now, validate_year_month
from budget_tracker.utils.errors import AlreadyAppliedError

logger = logging.getLogger(__name__)


class CarryOverService:
    """Rolls unspent monthly budget into a savings transaction, once per month.

    A month with nothing to carry over is not recorded, so it can be checked
    again later as spending changes. Only an application with a positive
    total writes a run record and locks the month.
    """

    def __init__(
        self,
        db: DatabaseManager,
        budget_service: BudgetService,
        tx_service: TransactionService,
        category_dao: CategoryDAO,
        run_dao: CarryOverRunDAO,
        savings_category: str = SAVINGS_CATEGORY,
    ):
        self._db = db
        self._budget_service = budget_service
        self._tx_service = tx_service
        self._category_dao = category_dao
        self._run_dao = run_dao
        self._savings_category = savings_category

    def preview_carry_over(self, year: int, month: int) -> list[CarryOverPreviewItem]:
        """Per-category unspent budget for the month, biggest first.

        Categories without a budget row, with a non-positive budget, or
        with spending at or above budget are left out.
        """
        validate_year_month(year, month)
        items = []
        for cat in self._category_dao.get_all():
            budget = self._budget_service.try_get_monthly_budget_amount(cat.id, year, month)
            if budget is None or budget <= 0:
                continue
            spent = self._tx_service.get_total_expenses_for_category_month(cat.id, year, month)
            remaining = budget - spent
            if remaining > 0:
                items.append(CarryOverPreviewItem(
                    category_id=cat.id,
                    category_name=cat.name,
                    carry_over_amount=remaining,
                ))
        items.sort(key=lambda i: i.category_name)
        items.sort(key=lambda i: i.carry_over_amount, reverse=True)
        return items

    def preview_carry_over_total(self, year: int, month: int) -> Decimal:
        return sum((i.carry_over_amount for i in self.preview_carry_over(year, month)), ZERO)

    def is_applied(self, year: int, month: int) -> bool:
        validate_year_month(year, month)
        return self._run_dao.exists(year, month)

    def get_run(self, year: int, month: int) -> CarryOverRun | None:
        validate_year_month(year, month)
        return self._run_dao.get(year, month)

    def list_runs(self) -> list[CarryOverRun]:
        return self._run_dao.get_all()

    def apply_carry_over_to_savings(
        self, year: int, month: int, now: datetime | None = None
    ) -> Decimal:
        """Create one savings income transaction for the month's unspent budget.

        Raises AlreadyAppliedError if the month was applied before. Returns
        0 without writing anything when there is nothing to carry over.
        The transaction and the run record are committed together; if the
        run record is rejected the transaction is rolled back with it.
        """
        validate_year_month(year, month)
        if self._run_dao.exists(year, month):
            logger.warning("Carry-over for %04d/%02d was already applied", year, month)
            raise AlreadyAppliedError(year, month)

        total = self.preview_carry_over_total(year, month)
        if total <= 0:
            logger.info("Nothing to carry over for %04d/%02d", year, month)
            return ZERO

        applied_at = now or utc_now()
        try:
            with self._db.transaction():
                self._tx_service.add_transaction(
                    description=f"Budget carry-over from {year:04d}/{month:02d}",
                    amount=total,
                    direction="income",
                    category=self._savings_category,
                    date=first_of_next_month(year, month),
                )
                self._run_dao.add(year, month, total, applied_at)
        except AlreadyAppliedError:
            logger.warning("Carry-over for %04d/%02d was applied concurrently; rolled back",
                           year, month)
            raise

        logger.info("Carried over %s from %04d/%02d into %s",
                    total, year, month, self._savings_category)
        return total
