import customtkinter as ctk
from budget_tracker.models.category import Category
from budget_tracker.services.category_service import CategoryService
from budget_tracker.utils.errors import BudgetTrackerError


class CategoryForm(ctk.CTkToplevel):
    """Add a category, or rename an existing one."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self.saved = False

        self.title("Rename Category" if category else "Add Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        r = 0
        ctk.CTkLabel(self, text="Name:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=category.name if category else "")
        entry = ctk.CTkEntry(self, textvariable=self._name_var, width=220)
        entry.grid(row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")
        entry.bind("<Return>", lambda _e: self._on_save())
        r += 1

        if category and category.is_system:
            ctk.CTkLabel(
                self, text="System category: it can be renamed but not deleted.",
                text_color="gray60", anchor="w",
            ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
            r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
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
        entry.focus_set()

    def _on_save(self):
        name = self._name_var.get()
        try:
            if self._category:
                self._svc.rename_category(self._category.id, name)
            else:
                self._svc.add_category(name)
        except BudgetTrackerError as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
