import customtkinter as ctk

_MAX_DETAIL_ROWS = 8
_DANGER_COLORS = {"fg_color": "#F44336", "hover_color": "#D32F2F"}


class ConfirmDialog(ctk.CTkToplevel):
    """Modal question about a write the user is about to make.

    ``details`` is an optional list of (label, value) rows shown under the
    message, such as the per-category amounts a carry-over will move.
    ``footnote`` is a muted line under that, for consequences worth
    repeating. Return confirms and Escape cancels. The constructor blocks
    until the window closes; the answer is in ``result``.
    """

    def __init__(
        self,
        master,
        title: str,
        message: str,
        confirm_text: str = "Confirm",
        destructive: bool = True,
        details: list[tuple[str, str]] | None = None,
        footnote: str | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self.title(title)
        self.result = False
        self.resizable(False, False)
        self.grid_columnconfigure(0, weight=1)

        r = 0
        ctk.CTkLabel(
            self, text=message, wraplength=360, justify="left", anchor="w",
        ).grid(row=r, column=0, padx=20, pady=(16, 8), sticky="ew")
        r += 1

        if details:
            self._build_details(details).grid(row=r, column=0, padx=20, pady=(0, 8), sticky="ew")
            r += 1

        if footnote:
            ctk.CTkLabel(
                self, text=footnote, text_color="gray60", wraplength=360,
                justify="left", anchor="w", font=ctk.CTkFont(size=11),
            ).grid(row=r, column=0, padx=20, pady=(0, 8), sticky="ew")
            r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, padx=20, pady=(4, 16), sticky="e")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._answer_no,
        ).pack(side="left", padx=(0, 8))
        ctk.CTkButton(
            btn_frame, text=confirm_text, width=90,
            command=self._answer_yes,
            **(_DANGER_COLORS if destructive else {}),
        ).pack(side="left")

        self.protocol("WM_DELETE_WINDOW", self._answer_no)
        self.bind("<Return>", lambda _e: self._answer_yes())
        self.bind("<Escape>", lambda _e: self._answer_no())

        self.transient(master)
        self.grab_set()
        self._place_over_master()
        self.focus_set()
        self.wait_window()

    def _build_details(self, details):
        box = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=6)
        box.grid_columnconfigure(0, weight=1)
        shown = details[:_MAX_DETAIL_ROWS]
        for idx, (label, value) in enumerate(shown):
            ctk.CTkLabel(box, text=label, anchor="w").grid(
                row=idx, column=0, padx=(10, 4), pady=1, sticky="w"
            )
            ctk.CTkLabel(box, text=value, anchor="e").grid(
                row=idx, column=1, padx=(4, 10), pady=1, sticky="e"
            )
        hidden = len(details) - len(shown)
        if hidden > 0:
            ctk.CTkLabel(
                box, text=f"...and {hidden} more", text_color="gray60", anchor="w",
            ).grid(row=len(shown), column=0, columnspan=2, padx=10, pady=(0, 4), sticky="w")
        return box

    def _place_over_master(self):
        self.update_idletasks()
        cx = self.master.winfo_x() + self.master.winfo_width() // 2
        cy = self.master.winfo_y() + self.master.winfo_height() // 2
        self.geometry(f"+{cx - self.winfo_reqwidth() // 2}+{cy - self.winfo_reqheight() // 2}")

    def _answer_yes(self):
        self.result = True
        self.destroy()

    def _answer_no(self):
        self.result = False
        self.destroy()


def ask_confirm(master, title: str, message: str, **kwargs) -> bool:
    """Show a ConfirmDialog over master's toplevel and return the answer."""
    return ConfirmDialog(master.winfo_toplevel(), title, message, **kwargs).result
