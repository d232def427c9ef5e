import logging
from datetime import date

from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.database.recurring_dao import RecurringDAO
from budget_tracker.models.recurring_template import RecurringTemplate
from budget_tracker.services.transaction_service import TransactionService, normalize_direction
from budget_tracker.utils.constants import (
    FREQUENCIES, FREQUENCY_ALIASES, MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH,
)
from budget_tracker.utils.currency import to_money
from budget_tracker.utils.date_helpers import (
    advance, coerce_date, initial_next_run, occurrences_between, today,
)
from budget_tracker.utils.errors import (
    BudgetTrackerError, NotFoundError, RunDueError, ValidationError,
)

logger = logging.getLogger(__name__)


def normalize_frequency(frequency: str) -> str:
    value = (frequency or "").strip().lower()
    value = FREQUENCY_ALIASES.get(value, value)
    if value not in FREQUENCIES:
        raise ValidationError(f"Invalid frequency: {frequency!r}.")
    return value


class RecurringService:
    """Recurring templates and their materialization into ledger transactions.

    Nothing here reads the clock while computing: "today" is always an
    argument, and only defaults to the current date when the caller omits it.
    """

    def __init__(
        self,
        db: DatabaseManager,
        recurring_dao: RecurringDAO,
        category_dao: CategoryDAO,
        tx_service: TransactionService,
    ):
        self._db = db
        self._dao = recurring_dao
        self._category_dao = category_dao
        self._tx_service = tx_service

    def get_all_templates(self) -> list[RecurringTemplate]:
        """Active first, then by next run date, then by id."""
        return self._dao.get_all()

    def get_template(self, template_id: int) -> RecurringTemplate:
        template = self._dao.get_by_id(template_id)
        if template is None:
            raise NotFoundError(f"Recurring template not found (id: {template_id}).")
        return template

    def create_template(
        self,
        description: str,
        amount,
        direction: str,
        category: str,
        start_date: date,
        frequency: str,
        day_of_month: int | None = None,
        as_of: date | None = None,
    ) -> int:
        description = (description or "").strip()
        if not description:
            raise ValidationError("Description is required.")
        amount = to_money(amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero.")
        direction = normalize_direction(direction)
        category = (category or "").strip()
        if not category:
            raise ValidationError("Category is required.")
        start_date = coerce_date(start_date, "start date")
        frequency = normalize_frequency(frequency)
        if frequency == "monthly":
            if (
                day_of_month is None
                or isinstance(day_of_month, bool)
                or not isinstance(day_of_month, int)
                or not MIN_DAY_OF_MONTH <= day_of_month <= MAX_DAY_OF_MONTH
            ):
                raise ValidationError(
                    "Monthly templates require a day of month between 1 and 28."
                )
        else:
            day_of_month = None

        ref = coerce_date(as_of, "as-of date") if as_of is not None else today()
        next_run = initial_next_run(start_date, frequency, day_of_month, ref)

        with self._db.transaction():
            cat = self._category_dao.get_or_create(category)
            template_id = self._dao.create(
                description=description,
                amount=amount,
                direction=direction,
                category_id=cat.id,
                start_date=start_date,
                frequency=frequency,
                next_run_date=next_run,
                day_of_month=day_of_month,
            )
        logger.info("Created %s template %d %r, next run %s",
                    frequency, template_id, description, next_run)
        return template_id

    def deactivate_template(self, template_id: int):
        """Soft delete; unknown ids are ignored."""
        if self._dao.deactivate(template_id):
            logger.info("Deactivated recurring template %d", template_id)
        else:
            logger.debug("Deactivate: no recurring template %d", template_id)

    def run_due(self, as_of: date | None = None) -> int:
        """Materialize every active template due on or before as_of.

        Each template yields at most one transaction per call, dated at its
        current next_run_date, and then advances one cadence step from that
        date. Templates that are several periods behind catch up over
        repeated calls. Each template is its own unit: the transaction and
        the date advance are committed together or not at all.

        Returns the number of transactions created. If a template fails,
        RunDueError is raised with the count committed before it.
        """
        ref = coerce_date(as_of, "as-of date") if as_of is not None else today()
        due = self._dao.get_due(ref)
        created = 0
        for template in due:
            try:
                self._materialize(template)
            except BudgetTrackerError as exc:
                logger.error("Recurring template %d failed: %s", template.id, exc)
                raise RunDueError(template.id, created, str(exc)) from exc
            created += 1

        if created:
            logger.info("run_due(%s): created %d transaction(s)", ref, created)
        return created

    def _materialize(self, template: RecurringTemplate):
        advanced = template.with_next_run(
            advance(template.next_run_date, template.frequency, template.day_of_month)
        )
        with self._db.transaction():
            self._tx_service.add_transaction(
                description=template.description,
                amount=template.amount,
                direction=template.direction,
                category=template.category_name,
                date=template.next_run_date,
                recurring_template_id=template.id,
            )
            self._dao.update_next_run_date(template.id, advanced.next_run_date)
        logger.debug("Template %d materialized on %s, next run %s",
                     template.id, template.next_run_date, advanced.next_run_date)

    def upcoming(self, start: date, end: date) -> list[tuple[date, RecurringTemplate]]:
        """Project the occurrences active templates will produce in [start, end].

        Read-only; ordered by date, then template id.
        """
        start, end = coerce_date(start, "start date"), coerce_date(end, "end date")
        result = []
        for template in self._dao.get_active():
            for d in occurrences_between(
                template.next_run_date, template.frequency, template.day_of_month, start, end
            ):
                result.append((d, template))
        result.sort(key=lambda pair: (pair[0], pair[1].id))
        return result
