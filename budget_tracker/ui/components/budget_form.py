import customtkinter as ctk
from budget_tracker.models.budget import BudgetStatus
from budget_tracker.services.budget_service import BudgetService
from budget_tracker.utils.currency import format_currency
from budget_tracker.utils.date_helpers import friendly_month, month_key, format_display_date
from budget_tracker.utils.errors import BudgetTrackerError


class BudgetForm(ctk.CTkToplevel):
    """Add or edit a budget amount for a category/month."""

    def __init__(
        self,
        master,
        budget_service: BudgetService,
        year: int,
        month: int,
        status: BudgetStatus | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = budget_service
        self._year = year
        self._month = month
        self._status = status
        self.saved = False

        self.title("Edit Budget" if status else "New Budget")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        categories = budget_service.get_categories()
        cat_names = [c.name for c in categories]
        self._categories = categories

        r = 0
        # Category selector
        ctk.CTkLabel(self, text="Category:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        current_cat = status.category_name if status else (cat_names[0] if cat_names else "")
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var,
            width=200, state="readonly" if not status else "disabled"
        ).grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")
        r += 1

        # Month (read-only display)
        ctk.CTkLabel(self, text="Month:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        ctk.CTkLabel(self, text=friendly_month(month_key(year, month)), anchor="w").grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Amount
        ctk.CTkLabel(self, text="Amount ($):").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._amount_var = ctk.StringVar(
            value=f"{status.limit_amount:.2f}" if status else ""
        )
        ctk.CTkEntry(self, textvariable=self._amount_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Recent changes for an existing budget
        if status:
            history = budget_service.get_monthly_budget_history(
                status.category_id, year, month, max_rows=5
            )
            if history:
                ctk.CTkLabel(
                    self, text="Recent changes:",
                    font=ctk.CTkFont(size=11, weight="bold"),
                ).grid(row=r, column=0, columnspan=2, padx=16, pady=(8, 0), sticky="w")
                r += 1
                for entry in history:
                    ctk.CTkLabel(
                        self,
                        text=f"{format_display_date(entry.changed_at_utc.date())}  "
                             f"{entry.action}: {format_currency(entry.old_amount)} → "
                             f"{format_currency(entry.new_amount)}",
                        text_color="gray60", anchor="w",
                        font=ctk.CTkFont(size=11),
                    ).grid(row=r, column=0, columnspan=2, padx=16, sticky="w")
                    r += 1

        # Error label
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        # Buttons
        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if status:
            ctk.CTkButton(
                btn_frame, text="Clear", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_clear,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _on_save(self):
        cat_name = self._cat_var.get()
        cat = next((c for c in self._categories if c.name == cat_name), None)
        if not cat:
            self._error_var.set("Please select a category.")
            return
        try:
            self._svc.set_monthly_budget(
                cat.id, self._year, self._month, self._amount_var.get().strip()
            )
            self.saved = True
            self.destroy()
        except BudgetTrackerError as e:
            self._error_var.set(str(e))

    def _on_clear(self):
        self._svc.delete_monthly_budget(self._status.category_id, self._year, self._month)
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
