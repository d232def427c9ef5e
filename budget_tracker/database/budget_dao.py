from decimal import Decimal
from typing import Optional
from budget_tracker.database.db_manager import DatabaseManager, storage_call
from budget_tracker.models.budget import MonthlyBudget
from budget_tracker.utils.date_helpers import month_key, split_month_key


class BudgetDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> MonthlyBudget:
        year, month = split_month_key(row["month"])
        return MonthlyBudget(
            category_id=row["category_id"],
            year=year,
            month=month,
            amount=Decimal(row["limit_amount"]),
        )

    @storage_call
    def get_by_month(self, year: int, month: int) -> list[tuple[MonthlyBudget, str, str]]:
        """Return (budget, category_name, color_hex) rows ordered by category name."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT b.*, c.name AS category_name, c.color_hex
               FROM budgets b
               JOIN categories c ON b.category_id = c.id
               WHERE b.month = ?
               ORDER BY c.name""",
            (month_key(year, month),),
        ).fetchall()
        return [(self._row_to_model(r), r["category_name"], r["color_hex"]) for r in rows]

    @storage_call
    def get(self, category_id: int, year: int, month: int) -> Optional[MonthlyBudget]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM budgets WHERE category_id = ? AND month = ?",
            (category_id, month_key(year, month)),
        ).fetchone()
        return self._row_to_model(row) if row else None

    @storage_call
    def upsert(self, category_id: int, year: int, month: int, amount: Decimal) -> MonthlyBudget:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budgets(category_id, month, limit_amount)
               VALUES (?, ?, ?)
               ON CONFLICT(category_id, month)
               DO UPDATE SET limit_amount = excluded.limit_amount""",
            (category_id, month_key(year, month), str(amount)),
        )
        self._db.commit()
        return self.get(category_id, year, month)

    @storage_call
    def delete(self, category_id: int, year: int, month: int):
        conn = self._db.get_connection()
        conn.execute(
            "DELETE FROM budgets WHERE category_id = ? AND month = ?",
            (category_id, month_key(year, month)),
        )
        self._db.commit()

    @storage_call
    def copy_month(self, from_year: int, from_month: int, to_year: int, to_month: int) -> int:
        """Copy all budget limits from one month to another. Returns count copied."""
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT category_id, limit_amount FROM budgets WHERE month = ?",
            (month_key(from_year, from_month),),
        ).fetchall()
        target = month_key(to_year, to_month)
        for row in rows:
            conn.execute(
                """INSERT INTO budgets(category_id, month, limit_amount)
                   VALUES (?, ?, ?)
                   ON CONFLICT(category_id, month)
                   DO UPDATE SET limit_amount = excluded.limit_amount""",
                (row["category_id"], target, row["limit_amount"]),
            )
        self._db.commit()
        return len(rows)
