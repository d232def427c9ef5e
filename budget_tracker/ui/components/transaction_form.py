from datetime import date

import customtkinter as ctk
from budget_tracker.models.transaction import LedgerTransaction
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.transaction_service import TransactionService
from budget_tracker.ui.components.date_picker import DatePickerWidget
from budget_tracker.utils.constants import DIRECTIONS
from budget_tracker.utils.date_helpers import today
from budget_tracker.utils.errors import BudgetTrackerError


class TransactionForm(ctk.CTkToplevel):
    """Add or edit a manual income or expense."""

    _last_date: date | None = None  # remembered between forms, per app run

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        category_service: CategoryService,
        initial_direction: str = "expense",
        transaction: LedgerTransaction | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._transaction = transaction
        self._date_format = date_format
        self.saved = False

        direction = transaction.direction if transaction else initial_direction
        self.title(f"{'Edit' if transaction else 'Add'} {direction.title()}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        cat_names = [c.name for c in category_service.get_all()]

        r = 0

        # Type
        self._label("Type:", r)
        self._type_var = ctk.StringVar(value=direction)
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in DIRECTIONS:
            ctk.CTkRadioButton(
                type_frame, text=t.title(),
                variable=self._type_var, value=t,
            ).pack(side="left", padx=4)
        r += 1

        # Description
        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=transaction.description if transaction else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Amount
        self._label("Amount:", r)
        self._amount_var = ctk.StringVar(
            value=f"{transaction.amount:.2f}" if transaction else ""
        )
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Date
        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial_date=transaction.date if transaction else (TransactionForm._last_date or today()),
            date_format=self._date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Category: existing name or a new one, created on save
        self._label("Category:", r)
        if transaction:
            current_cat = transaction.category_name
        else:
            current_cat = cat_names[0] if cat_names else ""
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=220,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        if transaction and transaction.recurring_template_id:
            ctk.CTkLabel(
                self, text="Created by a recurring template. Edits apply to this entry only.",
                text_color="gray60", wraplength=280, anchor="w",
            ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
            r += 1

        self._build_footer(r)

        self.transient(master)
        self.grab_set()
        self._center()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _build_footer(self, r):
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=280, anchor="w"
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

    def _on_save(self):
        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return
        tx_date = self._date_picker.get()

        fields = dict(
            description=self._desc_var.get(),
            amount=self._amount_var.get().strip(),
            direction=self._type_var.get(),
            category=self._cat_var.get(),
            date=tx_date,
        )
        try:
            if self._transaction:
                self._tx_svc.update_transaction(self._transaction.id, **fields)
            else:
                self._tx_svc.add_transaction(**fields)
        except BudgetTrackerError as e:
            self._error_var.set(str(e))
            return
        TransactionForm._last_date = tx_date
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
