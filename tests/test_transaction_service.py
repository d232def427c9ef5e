from datetime import date, datetime
from decimal import Decimal

import pytest

from budget_tracker.utils.errors import NotFoundError, ValidationError

DAY = date(2025, 6, 10)


def test_add_transaction_resolves_category_case_insensitively(app):
    tx = app.transactions.add_transaction("  Lunch ", "12.5", "EXPENSE", "food", DAY)
    assert tx.description == "Lunch"
    assert tx.amount == Decimal("12.50")
    assert tx.direction == "expense"
    assert tx.category_name == "Food"
    assert tx.signed_amount == Decimal("-12.50")


def test_add_transaction_creates_unknown_category(app):
    tx = app.transactions.add_transaction("Vet", "80", "expense", "Pets", DAY)
    assert app.category_dao.get_by_id(tx.category_id).name == "Pets"


@pytest.mark.parametrize("description, amount, direction, category, day", [
    ("", "10", "expense", "Food", DAY),
    ("Lunch", "0", "expense", "Food", DAY),
    ("Lunch", "-3", "expense", "Food", DAY),
    ("Lunch", "10", "refund", "Food", DAY),
    ("Lunch", "10", "expense", "  ", DAY),
    ("Lunch", "10", "expense", "Food", "2025-06-10"),
    ("Lunch", "1e40", "expense", "Food", DAY),
])
def test_add_transaction_validation(app, description, amount, direction, category, day):
    with pytest.raises(ValidationError):
        app.transactions.add_transaction(description, amount, direction, category, day)
    assert app.transactions.get_all() == []


def test_update_and_delete(app):
    tx = app.transactions.add_transaction("Lunch", "10", "expense", "Food", DAY)
    updated = app.transactions.update_transaction(
        tx.id, "Dinner", "25", "expense", "Entertainment", date(2025, 6, 11)
    )
    assert updated.description == "Dinner"
    assert updated.category_name == "Entertainment"
    assert updated.date == date(2025, 6, 11)

    app.transactions.delete_transaction(tx.id)
    with pytest.raises(NotFoundError):
        app.transactions.get_transaction(tx.id)


def test_update_missing_transaction(app):
    with pytest.raises(NotFoundError):
        app.transactions.update_transaction(42, "x", "1", "expense", "Food", DAY)


def test_monthly_queries(app):
    app.transactions.add_transaction("Pay", "3000", "income", "Salary", date(2025, 6, 1))
    app.transactions.add_transaction("Lunch", "12.25", "expense", "Food", date(2025, 6, 30))
    app.transactions.add_transaction("Bus", "2.75", "expense", "Transport", date(2025, 6, 2))
    app.transactions.add_transaction("Lunch", "99", "expense", "Food", date(2025, 7, 1))

    assert [t.description for t in app.transactions.get_by_month(2025, 6)] == ["Pay", "Bus", "Lunch"]
    assert app.transactions.get_monthly_totals(2025, 6) == (Decimal("3000.00"), Decimal("15.00"))

    food = app.category_dao.get_by_name("Food")
    assert app.transactions.get_total_expenses_for_category_month(food.id, 2025, 6) == Decimal("12.25")
    assert app.transactions.get_total_expenses_for_category_month(food.id, 2025, 5) == Decimal("0")


def test_decimal_sums_are_exact(app):
    for _ in range(10):
        app.transactions.add_transaction("Coffee", "0.10", "expense", "Food", DAY)
    food = app.category_dao.get_by_name("Food")
    assert app.transactions.get_total_expenses_for_category_month(food.id, 2025, 6) == Decimal("1.00")


def test_search_matches_description_and_category(app):
    app.transactions.add_transaction("Weekly shop", "60", "expense", "Food", DAY)
    app.transactions.add_transaction("Train", "20", "expense", "Transport", DAY)

    assert [t.description for t in app.transactions.search("shop")] == ["Weekly shop"]
    assert [t.description for t in app.transactions.search("transport")] == ["Train"]
    assert len(app.transactions.search("  ")) == 2


def test_datetime_dates_are_stored_as_dates(app):
    tx = app.transactions.add_transaction("Lunch", "10", "expense", "Food", datetime(2025, 6, 30, 22, 15))
    assert tx.date == date(2025, 6, 30)
    assert [t.id for t in app.transactions.get_by_month(2025, 6)] == [tx.id]

    updated = app.transactions.update_transaction(
        tx.id, "Lunch", "10", "expense", "Food", datetime(2025, 7, 1, 0, 5)
    )
    assert updated.date == date(2025, 7, 1)
