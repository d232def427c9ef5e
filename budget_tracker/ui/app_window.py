import customtkinter as ctk
from budget_tracker.services.budget_service import BudgetService
from budget_tracker.services.carry_over_service import CarryOverService
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.recurring_service import RecurringService
from budget_tracker.services.transaction_service import TransactionService
from budget_tracker.ui.components.alert_banner import AlertBanner
from budget_tracker.ui.tabs.budgets_tab import BudgetsTab
from budget_tracker.ui.tabs.categories_tab import CategoriesTab
from budget_tracker.ui.tabs.recurring_tab import RecurringTab
from budget_tracker.ui.tabs.register_tab import RegisterTab
from budget_tracker.utils.constants import APP_NAME, APP_WIDTH, APP_HEIGHT, BANNER_TIMEOUT_MS


_REFRESH_SCOPES: dict[str, set[str]] = {
    "transaction": {"transactions", "budgets"},
    "budget":      {"budgets"},
    "recurring":   {"recurring", "transactions", "budgets"},
    "category":    {"categories", "transactions", "recurring", "budgets"},
    "full":        {"transactions", "recurring", "budgets", "categories"},
}


class AppWindow(ctk.CTk):
    def __init__(
        self,
        transaction_service: TransactionService,
        recurring_service: RecurringService,
        budget_service: BudgetService,
        carry_over_service: CarryOverService,
        category_service: CategoryService,
        startup_created: int = 0,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(**kwargs)
        self._tx_svc = transaction_service
        self._recurring_svc = recurring_service
        self._budget_svc = budget_service
        self._carry_over_svc = carry_over_service
        self._cat_svc = category_service
        self._date_format = date_format

        self.title(APP_NAME)
        self.minsize(APP_WIDTH, APP_HEIGHT)
        self.geometry(f"{APP_WIDTH}x{APP_HEIGHT}")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_banner_area()
        self._build_tabs()

        # Show startup banner for new recurring transactions
        if startup_created:
            self.after(300, lambda: self.show_banner(
                f"{startup_created} recurring transaction"
                f"{'s were' if startup_created != 1 else ' was'} automatically added.",
                timeout_ms=BANNER_TIMEOUT_MS,
            ))

    def _build_banner_area(self):
        self._banner_frame = ctk.CTkFrame(self, fg_color="transparent", height=0)
        self._banner_frame.grid(row=0, column=0, sticky="ew", padx=8)

    def _build_tabs(self):
        self._tabview = ctk.CTkTabview(self)
        self._tabview.grid(row=1, column=0, sticky="nsew", padx=8, pady=(0, 8))

        for tab_name in ("Transactions", "Recurring", "Budgets", "Categories"):
            self._tabview.add(tab_name)
            self._tabview.tab(tab_name).grid_columnconfigure(0, weight=1)
            self._tabview.tab(tab_name).grid_rowconfigure(0, weight=1)

        self._register_tab = RegisterTab(
            self._tabview.tab("Transactions"),
            tx_service=self._tx_svc,
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
            date_format=self._date_format,
        )
        self._register_tab.grid(row=0, column=0, sticky="nsew")

        self._recurring_tab = RecurringTab(
            self._tabview.tab("Recurring"),
            recurring_service=self._recurring_svc,
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
            show_banner=self.show_banner,
            date_format=self._date_format,
        )
        self._recurring_tab.grid(row=0, column=0, sticky="nsew")

        self._budgets_tab = BudgetsTab(
            self._tabview.tab("Budgets"),
            budget_service=self._budget_svc,
            carry_over_service=self._carry_over_svc,
            notify_refresh=self.notify_tabs_refresh,
            show_banner=self.show_banner,
        )
        self._budgets_tab.grid(row=0, column=0, sticky="nsew")

        self._categories_tab = CategoriesTab(
            self._tabview.tab("Categories"),
            category_service=self._cat_svc,
            notify_refresh=self.notify_tabs_refresh,
            show_banner=self.show_banner,
        )
        self._categories_tab.grid(row=0, column=0, sticky="nsew")

    # ── Refresh ──────────────────────────────────────────────────────────────
    def notify_tabs_refresh(self, scope: str = "full"):
        tabs = _REFRESH_SCOPES.get(scope, _REFRESH_SCOPES["full"])
        if "transactions" in tabs: self._register_tab.refresh()
        if "recurring"    in tabs: self._recurring_tab.refresh()
        if "budgets"      in tabs: self._budgets_tab.refresh()
        if "categories"   in tabs: self._categories_tab.refresh()

    # ── Banners ──────────────────────────────────────────────────────────────
    def show_banner(self, message: str, color: str = "#2196F3", timeout_ms: int | None = None):
        """Replace the current banner. Errors stay until closed; pass timeout_ms for notices."""
        for w in self._banner_frame.winfo_children():
            w.destroy()
        AlertBanner(
            self._banner_frame, message=message, color=color, timeout_ms=timeout_ms,
        ).pack(fill="x", pady=2)
