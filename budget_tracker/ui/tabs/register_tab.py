import customtkinter as ctk
from budget_tracker.models.transaction import LedgerTransaction
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.transaction_service import TransactionService
from budget_tracker.ui.components.confirm_dialog import ask_confirm
from budget_tracker.ui.components.transaction_form import TransactionForm
from budget_tracker.utils.currency import ZERO, format_currency
from budget_tracker.utils.date_helpers import (
    format_display_date, format_month, friendly_month, next_month, prev_month,
    split_month_key, today,
)


_MAX_RENDERED_ROWS = 100
_COLUMNS = [("Date", 85), ("Type", 72), ("Category", 130), ("Description", 200),
            ("Amount", 90), ("Month Net", 90), ("Actions", 100)]


class RegisterTab(ctk.CTkFrame):
    """Ledger for one month, or every month when searching."""

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        category_service: CategoryService,
        notify_refresh,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._tx_svc = tx_service
        self._cat_svc = category_service
        self._notify_refresh = notify_refresh
        self._date_format = date_format

        self._month = format_month(today())
        self._month_var = ctk.StringVar(value=friendly_month(self._month))
        self._type_var = ctk.StringVar(value="all")
        self._totals_var = ctk.StringVar()
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._load())

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_filter_bar()
        self._build_header()
        self._build_register()
        self._load()

    def refresh(self):
        self._load()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(5, weight=1)

        ctk.CTkButton(bar, text="◀", width=28, command=self._prev_month).grid(
            row=0, column=0, padx=(8, 0), pady=6
        )
        ctk.CTkLabel(
            bar, textvariable=self._month_var, width=120, anchor="center",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).grid(row=0, column=1, padx=4)
        ctk.CTkButton(bar, text="▶", width=28, command=self._next_month).grid(
            row=0, column=2, padx=(0, 8)
        )

        ctk.CTkSegmentedButton(
            bar,
            values=["all", "income", "expense"],
            variable=self._type_var,
            command=lambda _: self._load(),
            width=210,
        ).grid(row=0, column=3, padx=8)

        ctk.CTkEntry(
            bar, textvariable=self._search_var,
            placeholder_text="Search all months...", width=180,
        ).grid(row=0, column=4, padx=8)

        ctk.CTkLabel(bar, textvariable=self._totals_var, text_color="gray60", anchor="w").grid(
            row=0, column=5, padx=8, sticky="w"
        )

        btn_frame = ctk.CTkFrame(bar, fg_color="transparent")
        btn_frame.grid(row=0, column=6, padx=(0, 8))
        for label, direction in (("+ Income", "income"), ("+ Expense", "expense")):
            ctk.CTkButton(
                btn_frame, text=label, width=88,
                command=lambda d=direction: self._open_add_form(d),
            ).pack(side="left", padx=2)

    def _prev_month(self):
        self._month = prev_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self._load()

    def _next_month(self):
        self._month = next_month(self._month)
        self._month_var.set(friendly_month(self._month))
        self._load()

    # ── Column headers ───────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=1, column=0, sticky="ew", padx=8, pady=(4, 0))
        for i, (label, width) in enumerate(_COLUMNS):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    # ── Scrollable register ──────────────────────────────────────────────────
    def _build_register(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        keyword = self._search_var.get().strip()
        if keyword:
            rows = self._tx_svc.search(keyword)
            self._totals_var.set(f"{len(rows)} match{'es' if len(rows) != 1 else ''}")
        else:
            year, month = split_month_key(self._month)
            rows = self._tx_svc.get_by_month(year, month)
            income, expense = self._tx_svc.get_monthly_totals(year, month)
            self._totals_var.set(
                f"In {format_currency(income)}  Out {format_currency(expense)}"
                f"  Net {format_currency(income - expense)}"
            )

        type_f = self._type_var.get()
        if type_f != "all":
            rows = [t for t in rows if t.direction == type_f]

        if not rows:
            ctk.CTkLabel(
                self._scroll,
                text="No matching transactions." if keyword else "No transactions for this month.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        running = ZERO
        visible = rows[:_MAX_RENDERED_ROWS]
        for idx, tx in enumerate(visible):
            running += tx.signed_amount
            self._add_row(idx, tx, None if keyword else running)

        if len(rows) > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {len(rows)} transactions. "
                     "Narrow the search to see the rest.",
                text_color="gray60",
                font=ctk.CTkFont(size=11),
            ).grid(row=_MAX_RENDERED_ROWS, column=0, pady=8)

    def _add_row(self, idx: int, tx: LedgerTransaction, running):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        is_income = tx.direction == "income"
        type_text = tx.direction.title()
        if tx.recurring_template_id:
            type_text += " ↻"

        cells = [
            (format_display_date(tx.date, self._date_format), None),
            (type_text, "#4CAF50" if is_income else "#F44336"),
            (tx.category_name or "-", None),
            (tx.description, None),
        ]
        for i, (text, color) in enumerate(cells):
            label = ctk.CTkLabel(row, text=text, width=_COLUMNS[i][1], anchor="w")
            if color:
                label.configure(text_color=color)
            label.grid(row=0, column=i, padx=4, pady=4)

        ctk.CTkLabel(
            row, text=f"{'+' if is_income else '-'}{format_currency(tx.amount)}",
            width=90, anchor="e", text_color="#4CAF50" if is_income else "#F44336",
        ).grid(row=0, column=4, padx=4)

        net_text = "" if running is None else format_currency(running)
        ctk.CTkLabel(
            row, text=net_text, width=90, anchor="e",
            text_color="#4CAF50" if running is None or running >= 0 else "#F44336",
        ).grid(row=0, column=5, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=6, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    def _open_add_form(self, direction: str):
        form = TransactionForm(
            self.winfo_toplevel(),
            self._tx_svc, self._cat_svc,
            initial_direction=direction,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_edit_form(self, tx: LedgerTransaction):
        form = TransactionForm(
            self.winfo_toplevel(),
            self._tx_svc, self._cat_svc,
            transaction=tx,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _delete_tx(self, tx: LedgerTransaction):
        if ask_confirm(
            self, "Delete Transaction",
            f"Delete this {tx.direction} of {format_currency(tx.amount)}?",
            confirm_text="Delete",
            details=[
                ("Description", tx.description),
                ("Category", tx.category_name),
                ("Date", format_display_date(tx.date, self._date_format)),
            ],
            footnote="The recurring template that created it is not changed."
            if tx.recurring_template_id else None,
        ):
            self._tx_svc.delete_transaction(tx.id)
            self._notify_refresh("transaction")
