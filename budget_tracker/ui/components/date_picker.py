import tkinter as tk
from datetime import date
from tkinter import ttk

import customtkinter as ctk
from tkcalendar import Calendar

from budget_tracker.utils.date_helpers import parse_date, format_display_date, parse_display_date, today


def _parse_loose(raw: str, date_format: str) -> date | None:
    """Parse the display format first, then ISO with '/' or '.' separators."""
    if not raw:
        return None
    d = parse_display_date(raw, date_format)
    if d is None:
        d = parse_date(raw.replace("/", "-").replace(".", "-"))
    return d


class DatePickerWidget(ctk.CTkFrame):
    """Entry in the user's display format plus a calendar popup.

    .get() returns a date (or None when empty/invalid).
    .set() accepts a date or a YYYY-MM-DD string.
    """

    def __init__(
        self,
        master,
        initial_date: date | str | None = None,
        date_format: str = "MM/DD/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self.grid_columnconfigure(0, weight=1)

        self._date_format = date_format
        self._popup: ctk.CTkToplevel | None = None
        self._var = tk.StringVar(value=format_display_date(initial_date, date_format))

        self._entry = ctk.CTkEntry(self, textvariable=self._var, width=110)
        self._entry.grid(row=0, column=0, sticky="ew")
        self._entry.bind("<FocusOut>", self._on_focus_out)
        self._entry.bind("<Return>", self._on_focus_out)

        ctk.CTkButton(self, text="📅", width=32, command=self._open_popup).grid(
            row=0, column=1, padx=(4, 0)
        )

    def get(self) -> date | None:
        return _parse_loose(self._var.get().strip(), self._date_format)

    def set(self, value: date | str | None):
        self._var.set(format_display_date(value, self._date_format) if value else "")
        self._reset_border()

    def is_valid(self) -> bool:
        return self.get() is not None

    def _on_focus_out(self, _event=None):
        raw = self._var.get().strip()
        if not raw:
            self._reset_border()
            return
        d = _parse_loose(raw, self._date_format)
        if d:
            self.set(d)
        else:
            self._entry.configure(border_color="#F44336")

    def _reset_border(self):
        self._entry.configure(border_color=("gray65", "gray35"))

    def _open_popup(self):
        if self._popup and self._popup.winfo_exists():
            self._close_popup()
            return

        popup = ctk.CTkToplevel(self)
        popup.overrideredirect(True)
        popup.resizable(False, False)
        self._popup = popup

        # Match the calendar to the CTk appearance
        if ctk.get_appearance_mode() == "Dark":
            bg, fg = "#2b2b2b", "#ffffff"
        else:
            bg, fg = "#ffffff", "#000000"
        style = ttk.Style(popup)
        style.theme_use("default")
        style.configure("Calendar.Treeview", background=bg, foreground=fg, fieldbackground=bg)

        current = self.get() or today()
        cal = Calendar(
            popup,
            selectmode="day",
            year=current.year,
            month=current.month,
            day=current.day,
            date_pattern="yyyy-mm-dd",
            background=bg,
            foreground=fg,
            headersbackground=bg,
            headersforeground=fg,
            selectbackground="#1f6aa5",
            weekendbackground=bg,
            weekendforeground=fg,
            othermonthforeground="gray60",
            bordercolor=bg,
        )
        cal.pack(padx=4, pady=4)
        cal.bind("<<CalendarSelected>>", lambda e: self._on_date_selected(cal))

        self._entry.update_idletasks()
        x = self._entry.winfo_rootx()
        y = self._entry.winfo_rooty() + self._entry.winfo_height() + 2
        popup.geometry(f"+{x}+{y}")
        popup.bind("<FocusOut>", lambda e: self._maybe_close())

    def _on_date_selected(self, cal):
        self.set(cal.selection_get())
        self._close_popup()

    def _maybe_close(self):
        popup = self._popup
        if popup is None or not popup.winfo_exists():
            return
        try:
            focused = popup.focus_get()
        except (KeyError, tk.TclError):
            # focus moved to a widget tkinter cannot name (e.g. a native dialog)
            focused = None
        if focused is None or not str(focused).startswith(str(popup)):
            self._close_popup()

    def _close_popup(self):
        if self._popup is not None:
            self._popup.destroy()
            self._popup = None
