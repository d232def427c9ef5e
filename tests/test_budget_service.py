from datetime import date
from decimal import Decimal

import pytest

from budget_tracker.utils.errors import NotFoundError, ValidationError


@pytest.fixture
def food(app):
    return app.category_dao.get_by_name("Food")


def test_set_and_read_budget(app, food):
    budget = app.budgets.set_monthly_budget(food.id, 2025, 6, 250)
    assert budget.amount == Decimal("250.00")
    assert (budget.year, budget.month) == (2025, 6)
    assert app.budgets.try_get_monthly_budget_amount(food.id, 2025, 6) == Decimal("250.00")


def test_missing_budget_is_none_not_zero(app, food):
    assert app.budgets.try_get_monthly_budget_amount(food.id, 2025, 6) is None
    app.budgets.set_monthly_budget(food.id, 2025, 6, "0")
    assert app.budgets.try_get_monthly_budget_amount(food.id, 2025, 6) == Decimal("0")


def test_negative_budget_is_rejected(app, food):
    with pytest.raises(ValidationError):
        app.budgets.set_monthly_budget(food.id, 2025, 6, "-1")


def test_unknown_category_is_rejected(app):
    with pytest.raises(NotFoundError):
        app.budgets.set_monthly_budget(9999, 2025, 6, "10")


def test_change_log_records_only_real_changes(app, food):
    app.budgets.set_monthly_budget(food.id, 2025, 6, "100")
    app.budgets.set_monthly_budget(food.id, 2025, 6, "100.00")
    app.budgets.set_monthly_budget(food.id, 2025, 6, "120")

    history = app.budgets.get_monthly_budget_history(food.id, 2025, 6)
    assert [(h.old_amount, h.new_amount, h.action) for h in history] == [
        (Decimal("100.00"), Decimal("120.00"), "update"),
        (Decimal("0.00"), Decimal("100.00"), "update"),
    ]


def test_setting_zero_on_missing_budget_logs_nothing(app, food):
    app.budgets.set_monthly_budget(food.id, 2025, 6, "0")
    assert app.budgets.get_monthly_budget_history(food.id, 2025, 6) == []


def test_delete_logs_clear_for_non_zero_budget(app, food):
    app.budgets.set_monthly_budget(food.id, 2025, 6, "80")
    app.budgets.delete_monthly_budget(food.id, 2025, 6)

    assert app.budgets.try_get_monthly_budget_amount(food.id, 2025, 6) is None
    latest = app.budgets.get_monthly_budget_history(food.id, 2025, 6)[0]
    assert (latest.old_amount, latest.new_amount, latest.action) == (
        Decimal("80.00"), Decimal("0.00"), "clear"
    )


def test_delete_missing_or_zero_budget_logs_nothing(app, food):
    app.budgets.delete_monthly_budget(food.id, 2025, 6)
    app.budgets.set_monthly_budget(food.id, 2025, 7, "0")
    app.budgets.delete_monthly_budget(food.id, 2025, 7)

    assert app.budgets.get_monthly_budget_history(food.id, 2025, 6) == []
    assert app.budgets.get_monthly_budget_history(food.id, 2025, 7) == []


def test_history_respects_max_rows(app, food):
    for amount in ("10", "20", "30", "40"):
        app.budgets.set_monthly_budget(food.id, 2025, 6, amount)
    history = app.budgets.get_monthly_budget_history(food.id, 2025, 6, max_rows=2)
    assert [h.new_amount for h in history] == [Decimal("40.00"), Decimal("30.00")]


def test_budget_status_includes_spending(app, food):
    app.budgets.set_monthly_budget(food.id, 2025, 6, "200")
    app.transactions.add_transaction("Groceries", "150", "expense", "Food", date(2025, 6, 3))
    app.transactions.add_transaction("Groceries", "70", "expense", "Food", date(2025, 6, 20))

    [status] = app.budgets.get_budget_status(2025, 6)
    assert status.category_name == "Food"
    assert status.spent_amount == Decimal("220.00")
    assert status.remaining == Decimal("0")
    assert status.percentage == pytest.approx(1.1)


def test_copy_from_previous_month(app, food):
    transport = app.category_dao.get_by_name("Transport")
    app.budgets.set_monthly_budget(food.id, 2024, 12, "300")
    app.budgets.set_monthly_budget(transport.id, 2024, 12, "60")

    assert app.budgets.copy_from_previous_month(2025, 1) == 2
    assert app.budgets.try_get_monthly_budget_amount(food.id, 2025, 1) == Decimal("300.00")
    assert app.budgets.try_get_monthly_budget_amount(transport.id, 2025, 1) == Decimal("60.00")
    assert len(app.budgets.get_monthly_budget_history(food.id, 2025, 1)) == 1


def test_copy_from_empty_month_returns_zero(app):
    assert app.budgets.copy_from_previous_month(2025, 6) == 0


def test_invalid_month_is_rejected(app, food):
    with pytest.raises(ValidationError):
        app.budgets.set_monthly_budget(food.id, 2025, 13, "10")
    with pytest.raises(ValidationError):
        app.budgets.try_get_monthly_budget_amount(food.id, 0, 1)
