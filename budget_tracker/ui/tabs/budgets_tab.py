import customtkinter as ctk
from budget_tracker.services.budget_service import BudgetService
from budget_tracker.services.carry_over_service import CarryOverService
from budget_tracker.ui.components.budget_form import BudgetForm
from budget_tracker.ui.components.confirm_dialog import ask_confirm
from budget_tracker.utils.constants import BANNER_TIMEOUT_MS
from budget_tracker.utils.currency import ZERO, format_currency
from budget_tracker.utils.date_helpers import (
    format_month, friendly_month, prev_month, next_month, split_month_key, today,
)
from budget_tracker.utils.errors import AlreadyAppliedError


class BudgetsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        budget_service: BudgetService,
        carry_over_service: CarryOverService,
        notify_refresh,
        show_banner,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = budget_service
        self._carry_svc = carry_over_service
        self._notify_refresh = notify_refresh
        self._show_banner = show_banner
        self._month = format_month(today())
        self._month_var = ctk.StringVar(value=friendly_month(self._month))

        self.grid_columnconfigure(0, weight=3)
        self.grid_columnconfigure(1, weight=2)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._build_carry_over_panel()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, columnspan=2, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).pack(side="left", padx=(8, 0), pady=6)
        ctk.CTkLabel(
            bar, textvariable=self._month_var, width=130, anchor="center",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).pack(side="left", padx=(0, 12))

        ctk.CTkButton(bar, text="+ Add Budget", command=self._open_add).pack(side="left", padx=4)
        ctk.CTkButton(
            bar, text="Copy from Previous Month",
            command=self._copy_prev,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
        ).pack(side="left", padx=4)

    def _set_month(self, month: str):
        self._month = month
        self._month_var.set(friendly_month(month))
        self._load()

    def _prev_month(self):
        self._set_month(prev_month(self._month))

    def _next_month(self):
        self._set_month(next_month(self._month))

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=(8, 4), pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _build_carry_over_panel(self):
        panel = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        panel.grid(row=1, column=1, sticky="nsew", padx=(4, 8), pady=8)
        panel.grid_columnconfigure(0, weight=1)
        panel.grid_rowconfigure(1, weight=1)

        ctk.CTkLabel(
            panel, text="Carry Over to Savings",
            font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, padx=12, pady=(10, 4), sticky="ew")

        self._carry_list = ctk.CTkScrollableFrame(panel, fg_color="transparent")
        self._carry_list.grid(row=1, column=0, sticky="nsew", padx=4)
        self._carry_list.grid_columnconfigure(0, weight=1)

        self._carry_total_var = ctk.StringVar()
        ctk.CTkLabel(
            panel, textvariable=self._carry_total_var,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=2, column=0, padx=12, pady=(6, 0), sticky="ew")

        self._carry_status_var = ctk.StringVar()
        ctk.CTkLabel(
            panel, textvariable=self._carry_status_var,
            text_color="gray60", anchor="w", wraplength=260,
        ).grid(row=3, column=0, padx=12, sticky="ew")

        self._apply_btn = ctk.CTkButton(
            panel, text="Apply Carry-Over", command=self._apply_carry_over,
        )
        self._apply_btn.grid(row=4, column=0, padx=12, pady=(6, 12), sticky="ew")

    def _load(self):
        self._load_budgets()
        self._load_carry_over()

    def _load_budgets(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        year, month = split_month_key(self._month)
        statuses = self._svc.get_budget_status(year, month)
        if not statuses:
            ctk.CTkLabel(
                self._scroll,
                text="No budgets set for this month. Click '+ Add Budget' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, s in enumerate(statuses):
            self._add_budget_card(idx, s)

    def _add_budget_card(self, idx, s):
        card = ctk.CTkFrame(
            self._scroll, fg_color=("gray90", "gray20"), corner_radius=8
        )
        card.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        card.grid_columnconfigure(0, weight=1)

        hdr = ctk.CTkFrame(card, fg_color="transparent")
        hdr.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 4))
        hdr.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            hdr, text=s.category_name,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w")

        pct = s.percentage
        pct_color = "#4CAF50" if pct < 0.8 else ("#FF9800" if pct < 1.0 else "#F44336")
        ctk.CTkLabel(hdr, text=f"{pct*100:.1f}%", text_color=pct_color).grid(
            row=0, column=1, padx=(8, 0)
        )

        ctk.CTkButton(
            hdr, text="Edit", width=50, height=24,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda status=s: self._open_edit(status),
        ).grid(row=0, column=2, padx=(8, 0))

        ctk.CTkLabel(
            card,
            text=f"Spent: {format_currency(s.spent_amount)}  /  Budget: {format_currency(s.limit_amount)}"
                 f"  |  Remaining: {format_currency(s.remaining)}",
            text_color="gray60", anchor="w",
        ).grid(row=1, column=0, padx=12, sticky="ew")

        bar = ctk.CTkProgressBar(card, progress_color=pct_color)
        bar.grid(row=2, column=0, padx=12, pady=(4, 10), sticky="ew")
        bar.set(min(pct, 1.0))

    def _load_carry_over(self):
        for w in self._carry_list.winfo_children():
            w.destroy()

        year, month = split_month_key(self._month)
        run = self._carry_svc.get_run(year, month)
        items = self._carry_svc.preview_carry_over(year, month)

        for idx, item in enumerate(items):
            ctk.CTkLabel(self._carry_list, text=item.category_name, anchor="w").grid(
                row=idx, column=0, padx=8, pady=1, sticky="ew"
            )
            ctk.CTkLabel(
                self._carry_list, text=format_currency(item.carry_over_amount),
                anchor="e", text_color="#4CAF50",
            ).grid(row=idx, column=1, padx=8, pady=1, sticky="e")
        if not items:
            ctk.CTkLabel(
                self._carry_list, text="No unspent budget this month.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=20)

        total = sum((i.carry_over_amount for i in items), ZERO)
        self._carry_total_var.set(f"Total: {format_currency(total)}")

        if run:
            self._carry_status_var.set(
                f"Applied {format_currency(run.total_amount)} on "
                f"{run.applied_at_utc:%Y-%m-%d %H:%M} UTC."
            )
            self._apply_btn.configure(state="disabled")
        else:
            self._carry_status_var.set("")
            self._apply_btn.configure(state="normal" if items else "disabled")

    def _apply_carry_over(self):
        year, month = split_month_key(self._month)
        items = self._carry_svc.preview_carry_over(year, month)
        if not ask_confirm(
            self, "Apply Carry-Over",
            f"Move unspent budget from {friendly_month(self._month)} into savings?",
            confirm_text="Apply",
            destructive=False,
            details=[(i.category_name, format_currency(i.carry_over_amount)) for i in items],
            footnote="This can only be done once per month.",
        ):
            return
        try:
            amount = self._carry_svc.apply_carry_over_to_savings(year, month)
        except AlreadyAppliedError as e:
            self._show_banner(str(e), color="#FF9800")
            self._load_carry_over()
            return
        if amount > 0:
            self._show_banner(
                f"{format_currency(amount)} carried over to savings.",
                color="#4CAF50", timeout_ms=BANNER_TIMEOUT_MS,
            )
        else:
            self._show_banner("Nothing to carry over for this month.", timeout_ms=BANNER_TIMEOUT_MS)
        self._notify_refresh("transaction")

    def _open_add(self):
        year, month = split_month_key(self._month)
        form = BudgetForm(self.winfo_toplevel(), self._svc, year, month)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")

    def _open_edit(self, status):
        year, month = split_month_key(self._month)
        form = BudgetForm(self.winfo_toplevel(), self._svc, year, month, status=status)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")

    def _copy_prev(self):
        year, month = split_month_key(self._month)
        count = self._svc.copy_from_previous_month(year, month)
        if count == 0:
            self._show_banner("No budgets in previous month to copy.", timeout_ms=BANNER_TIMEOUT_MS)
        else:
            self._notify_refresh("budget")
