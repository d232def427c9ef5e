from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from budget_tracker.services.carry_over_service import CarryOverService
from budget_tracker.utils.errors import AlreadyAppliedError, StorageError, ValidationError

NOW = datetime(2025, 7, 1, 9, 30, tzinfo=timezone.utc)


def _cat(app, name):
    return app.category_dao.get_by_name(name)


def _spend(app, category, amount, day=date(2025, 6, 10), direction="expense"):
    app.transactions.add_transaction("Spend", amount, direction, category, day)


def test_end_to_end_food_budget(app):
    food = _cat(app, "Food")
    app.budgets.set_monthly_budget(food.id, 2025, 6, "300")
    _spend(app, "Food", "180")

    preview = app.carry_over.preview_carry_over(2025, 6)
    assert [(p.category_name, p.carry_over_amount) for p in preview] == [("Food", Decimal("120.00"))]

    assert app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW) == Decimal("120.00")

    savings = [t for t in app.transactions.get_all() if t.category_name == "Savings"]
    assert len(savings) == 1
    assert savings[0].direction == "income"
    assert savings[0].amount == Decimal("120.00")
    assert savings[0].date == date(2025, 7, 1)
    assert savings[0].description == "Budget carry-over from 2025/06"

    run = app.carry_over.get_run(2025, 6)
    assert run.total_amount == Decimal("120.00")
    assert run.applied_at_utc == NOW
    assert app.carry_over.is_applied(2025, 6)

    with pytest.raises(AlreadyAppliedError):
        app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW)
    assert len([t for t in app.transactions.get_all() if t.category_name == "Savings"]) == 1


def test_preview_skips_missing_zero_and_overspent(app):
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 6, "100")
    app.budgets.set_monthly_budget(_cat(app, "Transport").id, 2025, 6, "0")
    app.budgets.set_monthly_budget(_cat(app, "Utilities").id, 2025, 6, "50")
    _spend(app, "Food", "100")
    _spend(app, "Utilities", "75")
    _spend(app, "Entertainment", "10")

    assert app.carry_over.preview_carry_over(2025, 6) == []
    assert app.carry_over.preview_carry_over_total(2025, 6) == Decimal("0")


def test_preview_counts_only_expenses_in_that_month(app):
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 6, "100")
    _spend(app, "Food", "40")
    _spend(app, "Food", "500", day=date(2025, 7, 1))
    _spend(app, "Food", "30", direction="income")

    [item] = app.carry_over.preview_carry_over(2025, 6)
    assert item.carry_over_amount == Decimal("60.00")


def test_preview_orders_by_amount_then_name(app):
    for name, amount in [("Utilities", "20"), ("Food", "50"), ("Entertainment", "20")]:
        app.budgets.set_monthly_budget(_cat(app, name).id, 2025, 6, amount)

    preview = app.carry_over.preview_carry_over(2025, 6)
    assert [p.category_name for p in preview] == ["Food", "Entertainment", "Utilities"]
    assert app.carry_over.preview_carry_over_total(2025, 6) == Decimal("90.00")


def test_preview_is_read_only(app):
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 6, "100")
    app.carry_over.preview_carry_over(2025, 6)
    assert app.transactions.get_all() == []
    assert app.carry_over.list_runs() == []


@pytest.mark.parametrize("year, month", [(0, 6), (2025, 0), (2025, 13), (9999, 12)])
def test_invalid_month_is_rejected(app, year, month):
    with pytest.raises(ValidationError):
        app.carry_over.preview_carry_over(year, month)
    with pytest.raises(ValidationError):
        app.carry_over.apply_carry_over_to_savings(year, month)


def test_zero_total_does_not_lock_the_month(app):
    food = _cat(app, "Food")
    app.budgets.set_monthly_budget(food.id, 2025, 6, "100")
    _spend(app, "Food", "100")

    assert app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW) == 0
    assert app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW) == 0
    assert not app.carry_over.is_applied(2025, 6)
    assert app.carry_over.list_runs() == []

    # Raising the budget later makes the month applicable.
    app.budgets.set_monthly_budget(food.id, 2025, 6, "130")
    assert app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW) == Decimal("30.00")
    assert app.carry_over.is_applied(2025, 6)


def test_december_carries_into_january(app):
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 12, "10")
    app.carry_over.apply_carry_over_to_savings(2025, 12, now=NOW)
    [tx] = app.transactions.get_by_month(2026, 1)
    assert tx.date == date(2026, 1, 1)


def test_custom_savings_category_is_created(app):
    service = CarryOverService(
        app.db, app.budgets, app.transactions, app.category_dao, app.run_dao,
        savings_category="Rainy Day",
    )
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 6, "25")
    service.apply_carry_over_to_savings(2025, 6, now=NOW)

    [tx] = app.transactions.get_all()
    assert tx.category_name == "Rainy Day"


def test_failed_run_record_rolls_back_savings_transaction(app, monkeypatch):
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 6, "100")

    def broken_add(*args, **kwargs):
        raise StorageError("disk full")

    monkeypatch.setattr(app.run_dao, "add", broken_add)
    with pytest.raises(StorageError):
        app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW)

    assert app.transactions.get_all() == []
    assert not app.carry_over.is_applied(2025, 6)


def test_concurrent_apply_is_rejected_and_rolled_back(app, monkeypatch):
    app.budgets.set_monthly_budget(_cat(app, "Food").id, 2025, 6, "100")

    # Another writer records the run between the check and our insert.
    monkeypatch.setattr(app.run_dao, "exists", lambda year, month: False)
    app.run_dao.add(2025, 6, Decimal("100.00"), NOW)

    with pytest.raises(AlreadyAppliedError) as excinfo:
        app.carry_over.apply_carry_over_to_savings(2025, 6, now=NOW)

    assert (excinfo.value.from_year, excinfo.value.from_month) == (2025, 6)
    assert app.transactions.get_all() == []
    assert len(app.carry_over.list_runs()) == 1


def test_list_runs_newest_month_first(app):
    app.run_dao.add(2025, 5, Decimal("10.00"), NOW)
    app.run_dao.add(2025, 6, Decimal("20.00"), NOW)
    app.run_dao.add(2024, 12, Decimal("5.00"), NOW)

    runs = app.carry_over.list_runs()
    assert [(r.from_year, r.from_month) for r in runs] == [(2025, 6), (2025, 5), (2024, 12)]
    assert app.carry_over.get_run(2025, 1) is None
