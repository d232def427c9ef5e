from typing import Optional
from budget_tracker.database.db_manager import DatabaseManager, storage_call
from budget_tracker.models.category import Category


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            color_hex=row["color_hex"],
            is_system=bool(row["is_system"]),
        )

    @storage_call
    def get_all(self) -> list[Category]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM categories ORDER BY name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    @storage_call
    def get_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive lookup (the name column is COLLATE NOCASE)."""
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE name = ?", (name.strip(),)
        ).fetchone()
        return self._row_to_model(row) if row else None

    @storage_call
    def create(self, name: str, color_hex: str = "#888888") -> Category:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "INSERT INTO categories(name, color_hex) VALUES (?, ?)",
            (name.strip(), color_hex),
        )
        self._db.commit()
        return self.get_by_id(cursor.lastrowid)

    def get_or_create(self, name: str) -> Category:
        return self.get_by_name(name) or self.create(name)

    @storage_call
    def rename(self, category_id: int, name: str) -> Category:
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE categories SET name = ? WHERE id = ?",
            (name.strip(), category_id),
        )
        self._db.commit()
        return self.get_by_id(category_id)

    @storage_call
    def delete(self, category_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
        self._db.commit()
