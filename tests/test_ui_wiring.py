import inspect
import time
from datetime import date

import pytest

tk = pytest.importorskip("tkinter")
ctk = pytest.importorskip("customtkinter")

from budget_tracker.main import build_services
from budget_tracker.ui.app_window import AppWindow, _REFRESH_SCOPES
from budget_tracker.ui.components.alert_banner import AlertBanner
from budget_tracker.ui.components.confirm_dialog import ConfirmDialog, ask_confirm
from budget_tracker.ui.tabs.categories_tab import CategoriesTab
from budget_tracker.ui.tabs.register_tab import RegisterTab
from budget_tracker.utils.date_helpers import today

ALL_TABS = {"transactions", "recurring", "budgets", "categories"}


@pytest.fixture
def root():
    try:
        window = ctk.CTk()
    except tk.TclError:
        pytest.skip("no display available")
    window.withdraw()
    yield window
    window.destroy()


def test_refresh_scopes_cover_every_tab():
    assert _REFRESH_SCOPES["full"] == ALL_TABS
    for tabs in _REFRESH_SCOPES.values():
        assert tabs <= ALL_TABS
    assert "transactions" in _REFRESH_SCOPES["transaction"]
    assert "transactions" in _REFRESH_SCOPES["recurring"]
    assert _REFRESH_SCOPES["category"] == ALL_TABS


def test_every_service_reaches_the_window(db):
    services = build_services(db)
    params = inspect.signature(AppWindow).parameters
    for key, param in [
        ("transactions", "transaction_service"),
        ("categories", "category_service"),
        ("budgets", "budget_service"),
        ("recurring", "recurring_service"),
        ("carry_over", "carry_over_service"),
    ]:
        assert key in services
        assert param in params


def test_banner_with_timeout_dismisses_itself(root):
    banner = AlertBanner(root, message="Saved", timeout_ms=20)
    banner.pack()
    for _ in range(100):
        root.update()
        if not banner.winfo_exists():
            break
        time.sleep(0.01)
    assert not banner.winfo_exists()


def test_banner_without_timeout_stays(root):
    banner = AlertBanner(root, message="Failed", color="#F44336")
    banner.pack()
    root.update()
    time.sleep(0.05)
    root.update()
    assert banner.winfo_exists()
    banner.dismiss()
    assert not banner.winfo_exists()


def test_register_tab_shows_month_and_searches_all_months(root, app):
    app.transactions.add_transaction("Lunch", "10", "expense", "Food", today())
    app.transactions.add_transaction("Old rent", "900", "expense", "Rent/Mortgage", date(2020, 1, 1))
    tab = RegisterTab(
        root, tx_service=app.transactions, category_service=app.categories,
        notify_refresh=lambda scope: None,
    )
    assert len(tab._scroll.winfo_children()) == 1

    tab._search_var.set("old rent")
    assert len(tab._scroll.winfo_children()) == 1
    assert tab._totals_var.get() == "1 match"

    tab._search_var.set("")
    assert tab._totals_var.get().startswith("In $0.00  Out $10.00")

    tab._type_var.set("income")
    tab.refresh()
    [empty] = tab._scroll.winfo_children()
    assert empty.cget("text") == "No transactions for this month."


def test_categories_tab_lists_every_category(root, app):
    tab = CategoriesTab(
        root, category_service=app.categories,
        notify_refresh=lambda scope: None, show_banner=lambda *a, **kw: None,
    )
    before = len(app.categories.get_all())
    assert len(tab._scroll.winfo_children()) == before

    app.categories.add_category("Travel")
    tab.refresh()
    assert len(tab._scroll.winfo_children()) == before + 1


def _label_texts(widget) -> list[str]:
    texts = []
    for child in widget.winfo_children():
        if isinstance(child, ctk.CTkLabel):
            texts.append(child.cget("text"))
        texts.extend(_label_texts(child))
    return texts


def _answer_after(root, delay_ms, choose, seen):
    def answer():
        dialogs = [w for w in root.winfo_children() if isinstance(w, ConfirmDialog)]
        try:
            seen["texts"] = _label_texts(dialogs[0])
            choose(dialogs[0])
        finally:
            for dialog in dialogs:
                if dialog.winfo_exists():
                    dialog.destroy()
    root.after(delay_ms, answer)


def test_ask_confirm_shows_details_and_returns_yes(root, monkeypatch):
    monkeypatch.setattr(ConfirmDialog, "grab_set", lambda self: None)
    seen = {}
    _answer_after(root, 50, lambda d: d._answer_yes(), seen)

    details = [(f"Category {i}", "$1.00") for i in range(10)]
    assert ask_confirm(root, "Apply Carry-Over", "Move it?",
                       details=details, footnote="Once per month.") is True

    assert "Category 0" in seen["texts"]
    assert "Category 7" in seen["texts"]
    assert "Category 8" not in seen["texts"]
    assert "...and 2 more" in seen["texts"]
    assert "Once per month." in seen["texts"]


def test_ask_confirm_cancel_returns_no(root, monkeypatch):
    monkeypatch.setattr(ConfirmDialog, "grab_set", lambda self: None)
    seen = {}
    _answer_after(root, 50, lambda d: d._answer_no(), seen)

    assert ask_confirm(root, "Delete Category", "Delete 'Pets'?") is False
    assert seen["texts"] == ["Delete 'Pets'?"]
