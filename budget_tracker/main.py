import logging

import customtkinter as ctk

from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.database.transaction_dao import TransactionDAO
from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.budget_dao import BudgetDAO
from budget_tracker.database.budget_change_log_dao import BudgetChangeLogDAO
from budget_tracker.database.recurring_dao import RecurringDAO
from budget_tracker.database.carry_over_run_dao import CarryOverRunDAO

from budget_tracker.services.transaction_service import TransactionService
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.budget_service import BudgetService
from budget_tracker.services.recurring_service import RecurringService
from budget_tracker.services.carry_over_service import CarryOverService

from budget_tracker.ui.app_window import AppWindow
from budget_tracker.utils.app_config import get_db_folder, get_log_level, get_savings_category
from budget_tracker.utils.constants import SAVINGS_CATEGORY
from budget_tracker.utils.errors import RunDueError
from budget_tracker.utils.logging_setup import configure_logging
from budget_tracker.utils.date_helpers import today

logger = logging.getLogger(__name__)


def build_services(db: DatabaseManager, savings_category: str = SAVINGS_CATEGORY) -> dict:
    """Wire DAOs and services over one open database."""
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    budget_dao = BudgetDAO(db)
    change_log_dao = BudgetChangeLogDAO(db)
    recurring_dao = RecurringDAO(db)
    run_dao = CarryOverRunDAO(db)

    tx_svc = TransactionService(db, tx_dao, category_dao)
    category_svc = CategoryService(db, category_dao, tx_dao, recurring_dao)
    budget_svc = BudgetService(db, budget_dao, change_log_dao, tx_dao, category_dao)
    recurring_svc = RecurringService(db, recurring_dao, category_dao, tx_svc)
    carry_over_svc = CarryOverService(
        db, budget_svc, tx_svc, category_dao, run_dao, savings_category=savings_category
    )
    return {
        "transactions": tx_svc,
        "categories": category_svc,
        "budgets": budget_svc,
        "recurring": recurring_svc,
        "carry_over": carry_over_svc,
    }


def main():
    # ── Bootstrap: read DB folder from pre-DB config ──────────────────────────
    db_folder = get_db_folder()
    configure_logging(get_log_level(), db_folder)

    # ── Database & services ──────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=db_folder)
    services = build_services(db, savings_category=get_savings_category())

    # ── Apply due recurring templates ────────────────────────────────────────
    try:
        created = services["recurring"].run_due(today())
    except RunDueError as exc:
        logger.error("Start-up run stopped early: %s", exc)
        created = exc.created

    # ── Appearance ───────────────────────────────────────────────────────────
    appearance = db.get_setting("appearance_mode", "system")
    date_format = db.get_setting("date_format", "MM/DD/YYYY")
    ctk.set_appearance_mode(appearance)
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        transaction_service=services["transactions"],
        recurring_service=services["recurring"],
        budget_service=services["budgets"],
        carry_over_service=services["carry_over"],
        category_service=services["categories"],
        startup_created=created,
        date_format=date_format,
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
