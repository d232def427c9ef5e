from datetime import datetime
from decimal import Decimal
from budget_tracker.database.db_manager import DatabaseManager, storage_call
from budget_tracker.models.budget import BudgetChangeLog


class BudgetChangeLogDAO:
    """Audit trail of monthly budget changes."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> BudgetChangeLog:
        return BudgetChangeLog(
            id=row["id"],
            category_id=row["category_id"],
            year=row["year"],
            month=row["month"],
            old_amount=Decimal(row["old_amount"]),
            new_amount=Decimal(row["new_amount"]),
            action=row["action"],
            changed_at_utc=datetime.fromisoformat(row["changed_at_utc"]),
        )

    @storage_call
    def add(
        self,
        category_id: int,
        year: int,
        month: int,
        old_amount: Decimal,
        new_amount: Decimal,
        action: str,
    ):
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO budget_change_log
               (category_id, year, month, old_amount, new_amount, action)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (category_id, year, month, str(old_amount), str(new_amount), action),
        )
        self._db.commit()

    @storage_call
    def get_for_category_month(
        self, category_id: int, year: int, month: int, max_rows: int = 50
    ) -> list[BudgetChangeLog]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT * FROM budget_change_log
               WHERE category_id = ? AND year = ? AND month = ?
               ORDER BY changed_at_utc DESC, id DESC
               LIMIT ?""",
            (category_id, year, month, max_rows),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]
