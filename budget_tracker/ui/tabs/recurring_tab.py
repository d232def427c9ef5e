from datetime import timedelta

import customtkinter as ctk
from budget_tracker.services.category_service import CategoryService
from budget_tracker.services.recurring_service import RecurringService
from budget_tracker.ui.components.recurring_form import RecurringForm
from budget_tracker.ui.components.confirm_dialog import ask_confirm
from budget_tracker.utils.constants import BANNER_TIMEOUT_MS, FREQUENCY_LABELS, UPCOMING_DAYS
from budget_tracker.utils.currency import format_currency
from budget_tracker.utils.date_helpers import today, format_display_date
from budget_tracker.utils.errors import RunDueError


class RecurringTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        recurring_service: RecurringService,
        category_service: CategoryService,
        notify_refresh,
        show_banner,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = recurring_service
        self._cat_svc = category_service
        self._notify_refresh = notify_refresh
        self._show_banner = show_banner
        self._date_format = date_format

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=3)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_list()
        self._build_upcoming()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Recurring Templates",
            font=ctk.CTkFont(size=14, weight="bold"),
        ).pack(side="left", padx=12, pady=8)
        ctk.CTkButton(bar, text="+ Add Template", command=self._open_add).pack(
            side="right", padx=8, pady=6
        )
        ctk.CTkButton(
            bar, text="Run Due Now", command=self._run_due,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
        ).pack(side="right", padx=4, pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _build_upcoming(self):
        frame = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        frame.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        frame.grid_columnconfigure(0, weight=1)
        frame.grid_rowconfigure(1, weight=1)
        ctk.CTkLabel(
            frame, text=f"Upcoming (next {UPCOMING_DAYS} days)",
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).grid(row=0, column=0, padx=12, pady=(8, 2), sticky="ew")
        self._upcoming = ctk.CTkScrollableFrame(frame, fg_color="transparent", height=120)
        self._upcoming.grid(row=1, column=0, sticky="nsew", padx=4, pady=(0, 6))
        self._upcoming.grid_columnconfigure(1, weight=1)

    def _load(self):
        self._load_templates()
        self._load_upcoming()

    def _load_upcoming(self):
        for w in self._upcoming.winfo_children():
            w.destroy()

        start = today()
        items = self._svc.upcoming(start, start + timedelta(days=UPCOMING_DAYS))
        if not items:
            ctk.CTkLabel(
                self._upcoming, text="Nothing scheduled.", text_color="gray60",
            ).grid(row=0, column=0, columnspan=3, pady=10)
            return

        for idx, (d, template) in enumerate(items):
            color = "#4CAF50" if template.direction == "income" else ("gray10", "gray90")
            ctk.CTkLabel(
                self._upcoming, text=format_display_date(d, self._date_format),
                width=100, anchor="w",
            ).grid(row=idx, column=0, padx=8, sticky="w")
            ctk.CTkLabel(self._upcoming, text=template.description, anchor="w").grid(
                row=idx, column=1, padx=8, sticky="ew"
            )
            ctk.CTkLabel(
                self._upcoming, text=format_currency(template.amount),
                anchor="e", text_color=color,
            ).grid(row=idx, column=2, padx=8, sticky="e")

    def _load_templates(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        templates = self._svc.get_all_templates()
        if not templates:
            ctk.CTkLabel(
                self._scroll,
                text="No recurring templates yet. Click '+ Add Template' to create one.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        # Header
        hdr = ctk.CTkFrame(self._scroll, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=0, column=0, sticky="ew", pady=(0, 2))
        for i, (col, w) in enumerate([
            ("Description", 180), ("Type", 70), ("Amount", 90),
            ("Category", 120), ("Frequency", 110), ("Next Run", 100),
            ("Status", 70), ("Actions", 90),
        ]):
            ctk.CTkLabel(
                hdr, text=col, width=w, anchor="w",
                font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4)

        for idx, template in enumerate(templates):
            self._add_row(idx + 1, template)

    def _add_row(self, idx, template):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=idx, column=0, sticky="ew", pady=1, padx=2)

        freq = FREQUENCY_LABELS.get(template.frequency, template.frequency)
        if template.day_of_month:
            freq = f"{freq} ({template.day_of_month})"
        status_text = "Active" if template.is_active else "Inactive"
        status_color = "#4CAF50" if template.is_active else "gray60"

        data = [
            (template.description, 180),
            (template.direction.title(), 70),
            (format_currency(template.amount), 90),
            (template.category_name, 120),
            (freq, 110),
            (format_display_date(template.next_run_date, self._date_format), 100),
        ]
        for i, (text, width) in enumerate(data):
            ctk.CTkLabel(row, text=text, width=width, anchor="w").grid(
                row=0, column=i, padx=4, pady=4
            )

        ctk.CTkLabel(
            row, text=status_text, width=70, anchor="w",
            text_color=status_color,
        ).grid(row=0, column=6, padx=4)

        if template.is_active:
            ctk.CTkButton(
                row, text="Deactivate", width=80, height=24,
                fg_color="transparent", border_width=1,
                text_color=("gray10", "gray90"),
                command=lambda t=template: self._deactivate(t),
            ).grid(row=0, column=7, padx=(4, 6))

    def _open_add(self):
        form = RecurringForm(
            self.winfo_toplevel(),
            self._svc, self._cat_svc,
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("recurring")

    def _deactivate(self, template):
        if ask_confirm(
            self, "Deactivate Template",
            f"Stop generating '{template.description}'?",
            confirm_text="Deactivate",
            details=[
                ("Amount", format_currency(template.amount)),
                ("Next run", format_display_date(template.next_run_date, self._date_format)),
            ],
            footnote="Transactions already created are kept.",
        ):
            self._svc.deactivate_template(template.id)
            self._notify_refresh("recurring")

    def _run_due(self):
        try:
            created = self._svc.run_due(today())
        except RunDueError as e:
            self._show_banner(str(e), color="#F44336")
            created = e.created
        else:
            self._show_banner(
                f"{created} recurring transaction{'s' if created != 1 else ''} created.",
                timeout_ms=BANNER_TIMEOUT_MS,
            )
        if created:
            self._notify_refresh("recurring")
