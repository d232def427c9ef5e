import customtkinter as ctk


class AlertBanner(ctk.CTkFrame):
    """Coloured notification strip with a close button.

    With ``timeout_ms`` set the banner removes itself after that delay.
    """

    def __init__(self, master, message: str, color: str = "#2196F3",
                 timeout_ms: int | None = None, **kwargs):
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, text_color="white",
            anchor="w", justify="left", wraplength=900, padx=10, pady=6
        ).grid(row=0, column=0, sticky="ew")

        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent", hover_color=color,
            text_color="white", command=self.dismiss,
        ).grid(row=0, column=1, padx=(0, 4))

        self._after_id = self.after(timeout_ms, self._on_timeout) if timeout_ms else None

    def _on_timeout(self):
        self._after_id = None
        self.dismiss()

    def dismiss(self):
        if self.winfo_exists():
            self.destroy()

    def destroy(self):
        if self._after_id is not None:
            self.after_cancel(self._after_id)
            self._after_id = None
        super().destroy()
