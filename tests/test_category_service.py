from datetime import date

import pytest

from budget_tracker.utils.constants import SAVINGS_CATEGORY, UNCATEGORIZED_CATEGORY
from budget_tracker.utils.errors import NotFoundError, StorageError, ValidationError


def test_defaults_are_seeded(app):
    names = {c.name for c in app.categories.get_all()}
    assert {"Food", "Salary", SAVINGS_CATEGORY, UNCATEGORIZED_CATEGORY} <= names


def test_initialize_is_idempotent(app):
    before = len(app.categories.get_all())
    app.db.initialize()
    assert len(app.categories.get_all()) == before


def test_resolve_or_create_reuses_existing(app):
    food = app.categories.resolve_or_create("FOOD")
    assert food.name == "Food"
    pets = app.categories.resolve_or_create(" Pets ")
    assert pets.name == "Pets"
    assert app.categories.resolve_or_create("pets").id == pets.id


def test_add_category_rejects_duplicates_and_blanks(app):
    app.categories.add_category("Travel")
    with pytest.raises(ValidationError):
        app.categories.add_category("travel")
    with pytest.raises(ValidationError):
        app.categories.add_category("   ")


def test_rename_category(app):
    food = app.category_dao.get_by_name("Food")
    renamed = app.categories.rename_category(food.id, "Groceries")
    assert renamed.name == "Groceries"
    # Case-only rename of the same category is allowed.
    assert app.categories.rename_category(food.id, "GROCERIES").name == "GROCERIES"

    with pytest.raises(ValidationError):
        app.categories.rename_category(food.id, "Transport")
    with pytest.raises(NotFoundError):
        app.categories.rename_category(9999, "Nope")


def test_rename_is_visible_through_transactions(app):
    tx = app.transactions.add_transaction("Lunch", "10", "expense", "Food", date(2025, 6, 1))
    app.categories.rename_category(tx.category_id, "Eating Out")
    assert app.transactions.get_transaction(tx.id).category_name == "Eating Out"


def test_delete_moves_references_to_uncategorized(app):
    tx = app.transactions.add_transaction("Vet", "80", "expense", "Pets", date(2025, 6, 1))
    template_id = app.recurring.create_template(
        "Pet food", "30", "expense", "Pets", date(2025, 6, 1), "weekly", as_of=date(2025, 6, 1)
    )

    app.categories.delete_category(tx.category_id)

    assert app.transactions.get_transaction(tx.id).category_name == UNCATEGORIZED_CATEGORY
    assert app.recurring.get_template(template_id).category_name == UNCATEGORIZED_CATEGORY
    assert app.category_dao.get_by_name("Pets") is None


def test_system_categories_cannot_be_deleted(app):
    savings = app.category_dao.get_by_name(SAVINGS_CATEGORY)
    with pytest.raises(ValidationError):
        app.categories.delete_category(savings.id)


def test_delete_unknown_category_is_a_no_op(app):
    app.categories.delete_category(9999)


def test_get_by_id_missing(app):
    with pytest.raises(NotFoundError):
        app.categories.get_by_id(9999)


def test_storage_errors_are_wrapped(app):
    app.db.close()
    app.db.db_path = "/nonexistent-dir/budget.db"
    with pytest.raises(StorageError):
        app.categories.get_all()
