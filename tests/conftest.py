"""Shared test fixtures: one in-memory database per test with services wired over it."""

from datetime import date
from types import SimpleNamespace

import pytest

from budget_tracker.database.budget_change_log_dao import BudgetChangeLogDAO
from budget_tracker.database.budget_dao import BudgetDAO
from budget_tracker.database.carry_over_run_dao import CarryOverRunDAO
from budget_tracker.database.category_dao import CategoryDAO
from budget_tracker.database.db_manager import DatabaseManager
from budget_tracker.database.recurring_dao import RecurringDAO
from budget_tracker.database.transaction_dao import TransactionDAO
from budget_tracker.services.budget_service import BudgetService
from budget_tracker.services.carry_over_service import CarryOverService
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.recurring_service import RecurringService
from budget_tracker.services.transaction_service import TransactionService


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:")
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def app(db):
    """DAOs and services over the test database, reachable by attribute."""
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    budget_dao = BudgetDAO(db)
    change_log_dao = BudgetChangeLogDAO(db)
    recurring_dao = RecurringDAO(db)
    run_dao = CarryOverRunDAO(db)

    transactions = TransactionService(db, tx_dao, category_dao)
    budgets = BudgetService(db, budget_dao, change_log_dao, tx_dao, category_dao)
    return SimpleNamespace(
        db=db,
        tx_dao=tx_dao,
        category_dao=category_dao,
        budget_dao=budget_dao,
        recurring_dao=recurring_dao,
        run_dao=run_dao,
        transactions=transactions,
        categories=CategoryService(db, category_dao, tx_dao, recurring_dao),
        budgets=budgets,
        recurring=RecurringService(db, recurring_dao, category_dao, transactions),
        carry_over=CarryOverService(db, budgets, transactions, category_dao, run_dao),
    )


@pytest.fixture
def june():
    return date(2025, 6, 15)
