import customtkinter as ctk
from budget_tracker.services.category_service import CategoryService
from budget_tracker.ui.components.category_form import CategoryForm
from budget_tracker.ui.components.confirm_dialog import ask_confirm
from budget_tracker.utils.constants import UNCATEGORIZED_CATEGORY
from budget_tracker.utils.errors import BudgetTrackerError


class CategoriesTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        category_service: CategoryService,
        notify_refresh,
        show_banner,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = category_service
        self._notify_refresh = notify_refresh
        self._show_banner = show_banner

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(
            bar, text="Categories",
            font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)

        ctk.CTkButton(
            bar, text="+ Add Category", command=self._open_add,
        ).pack(side="left", padx=4, pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        categories = self._svc.get_all()
        if not categories:
            ctk.CTkLabel(
                self._scroll, text="No categories found.", text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        for idx, cat in enumerate(categories):
            self._add_row(idx, cat)

    def _add_row(self, idx, cat):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=3)
        row.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            row, text="", width=28, height=28, corner_radius=4,
            fg_color=cat.color_hex,
        ).grid(row=0, column=0, padx=(10, 0), pady=8)

        name_frame = ctk.CTkFrame(row, fg_color="transparent")
        name_frame.grid(row=0, column=1, padx=8, sticky="w")
        ctk.CTkLabel(
            name_frame, text=cat.name,
            font=ctk.CTkFont(size=13, weight="bold"), anchor="w",
        ).pack(side="left")
        if cat.is_system:
            ctk.CTkLabel(
                name_frame, text="system",
                text_color="gray60", font=ctk.CTkFont(size=10),
            ).pack(side="left", padx=(6, 0))

        btn_frame = ctk.CTkFrame(row, fg_color="transparent")
        btn_frame.grid(row=0, column=2, padx=(4, 10), pady=6)
        ctk.CTkButton(
            btn_frame, text="Rename", width=70, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=cat: self._open_rename(c),
        ).pack(side="left", padx=(0, 4))

        del_btn = ctk.CTkButton(
            btn_frame, text="Delete", width=65, height=26,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda c=cat: self._on_delete(c),
        )
        if cat.is_system:
            del_btn.configure(state="disabled", fg_color="gray50")
        del_btn.pack(side="left")

    def _open_add(self):
        form = CategoryForm(self.winfo_toplevel(), self._svc)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _open_rename(self, cat):
        form = CategoryForm(self.winfo_toplevel(), self._svc, category=cat)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("category")

    def _on_delete(self, cat):
        if not ask_confirm(
            self, "Delete Category",
            f"Delete the category '{cat.name}'?",
            confirm_text="Delete",
            footnote=f"Its transactions and recurring templates move to {UNCATEGORIZED_CATEGORY}.",
        ):
            return
        try:
            self._svc.delete_category(cat.id)
        except BudgetTrackerError as e:
            self._show_banner(str(e), color="#F44336")
            return
        self._notify_refresh("category")
