import customtkinter as ctk
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.recurring_service import RecurringService
from budget_tracker.ui.components.date_picker import DatePickerWidget
from budget_tracker.utils.constants import (
    FREQUENCIES, FREQUENCY_LABELS, MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH,
)
from budget_tracker.utils.date_helpers import today
from budget_tracker.utils.errors import BudgetTrackerError


class RecurringForm(ctk.CTkToplevel):
    """Create a recurring template. Templates are never edited, only deactivated."""

    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        category_service: CategoryService,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = recurring_service
        self._date_format = date_format
        self.saved = False

        self.title("New Recurring Template")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        cat_names = [c.name for c in category_service.get_all()]
        self._label_to_freq = {FREQUENCY_LABELS[f]: f for f in FREQUENCIES}

        r = 0

        # Description
        self._add_label("Description:", r)
        self._desc_var = ctk.StringVar()
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Type
        self._add_label("Type:", r)
        self._type_var = ctk.StringVar(value="expense")
        type_frame = ctk.CTkFrame(self, fg_color="transparent")
        type_frame.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        for t in ("income", "expense"):
            ctk.CTkRadioButton(
                type_frame, text=t.title(),
                variable=self._type_var, value=t,
            ).pack(side="left", padx=4)
        r += 1

        # Amount
        self._add_label("Amount:", r)
        self._amount_var = ctk.StringVar()
        ctk.CTkEntry(self, textvariable=self._amount_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        # Category: pick an existing one or type a new name
        self._add_label("Category:", r)
        self._cat_var = ctk.StringVar(value=cat_names[0] if cat_names else "")
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=220,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Frequency
        self._add_label("Frequency:", r)
        self._freq_var = ctk.StringVar(value=FREQUENCY_LABELS["monthly"])
        ctk.CTkComboBox(
            self, values=list(self._label_to_freq), variable=self._freq_var,
            width=220, state="readonly",
            command=self._on_freq_change,
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Day of month (monthly only)
        self._day_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._day_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=2, sticky="ew")
        self._day_frame.grid_columnconfigure(1, weight=1)
        r += 1
        self._dom_var = ctk.StringVar(value=str(min(today().day, MAX_DAY_OF_MONTH)))
        self._refresh_day_fields()

        # Start date
        self._add_label("Start Date:", r)
        self._start_picker = DatePickerWidget(
            self,
            initial_date=today(),
            date_format=self._date_format,
        )
        self._start_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Error + buttons
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

        self.transient(master)
        self.grab_set()
        self._center()

    def _add_label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=4, sticky="e"
        )

    def _frequency(self) -> str:
        return self._label_to_freq.get(self._freq_var.get(), "monthly")

    def _on_freq_change(self, value=None):
        self._refresh_day_fields()

    def _refresh_day_fields(self):
        for w in self._day_frame.winfo_children():
            w.destroy()

        if self._frequency() == "monthly":
            ctk.CTkLabel(self._day_frame, text="Day of Month:").grid(
                row=0, column=0, padx=(0, 8), sticky="e"
            )
            ctk.CTkComboBox(
                self._day_frame,
                values=[str(i) for i in range(MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH + 1)],
                variable=self._dom_var, width=80, state="readonly",
            ).grid(row=0, column=1, sticky="w")

    def _on_save(self):
        if not self._start_picker.is_valid():
            self._error_var.set("Invalid start date.")
            return
        start_date = self._start_picker.get()

        frequency = self._frequency()
        day_of_month = None
        if frequency == "monthly":
            try:
                day_of_month = int(self._dom_var.get())
            except ValueError:
                self._error_var.set("Day of month must be 1-28.")
                return

        try:
            self._svc.create_template(
                description=self._desc_var.get(),
                amount=self._amount_var.get().strip(),
                direction=self._type_var.get(),
                category=self._cat_var.get(),
                start_date=start_date,
                frequency=frequency,
                day_of_month=day_of_month,
                as_of=today(),
            )
            self.saved = True
            self.destroy()
        except BudgetTrackerError as e:
            self._error_var.set(str(e))

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
