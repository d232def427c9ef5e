from datetime import date
from decimal import Decimal
from typing import Optional
from budget_tracker.database.db_manager import DatabaseManager, storage_call
from budget_tracker.models.transaction import LedgerTransaction
from budget_tracker.utils.currency import ZERO
from budget_tracker.utils.date_helpers import format_date, month_key, parse_date


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> LedgerTransaction:
        return LedgerTransaction(
            id=row["id"],
            description=row["description"],
            amount=Decimal(row["amount"]),
            direction=row["direction"],
            category_id=row["category_id"],
            date=parse_date(row["date"]),
            category_name=row["category_name"] if "category_name" in row.keys() else "",
            recurring_template_id=row["recurring_template_id"],
            created_at=row["created_at"],
        )

    def _select(self) -> str:
        return """
            SELECT t.*,
                   COALESCE(c.name, '') AS category_name
            FROM transactions t
            LEFT JOIN categories c ON t.category_id = c.id
        """

    @storage_call
    def get_all(self) -> list[LedgerTransaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " ORDER BY t.date ASC, t.id ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_by_id(self, tx_id: int) -> Optional[LedgerTransaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE t.id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    @storage_call
    def get_by_month(self, year: int, month: int) -> list[LedgerTransaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + """
            WHERE strftime('%Y-%m', t.date) = ?
            ORDER BY t.date ASC, t.id ASC
            """,
            (month_key(year, month),),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_by_template(self, template_id: int) -> list[LedgerTransaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE t.recurring_template_id = ? ORDER BY t.date ASC, t.id ASC",
            (template_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def search(self, keyword: str) -> list[LedgerTransaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + """
            WHERE t.description LIKE ? OR COALESCE(c.name, '') LIKE ?
            ORDER BY t.date DESC, t.id DESC
            """,
            (f"%{keyword}%", f"%{keyword}%"),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_total_expenses_for_category_month(
        self, category_id: int, year: int, month: int
    ) -> Decimal:
        # Summed in Python: SQLite's SUM() would go through REAL.
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT amount FROM transactions
               WHERE category_id = ?
                 AND direction = 'expense'
                 AND strftime('%Y-%m', date) = ?""",
            (category_id, month_key(year, month)),
        ).fetchall()
        return sum((Decimal(r["amount"]) for r in rows), ZERO)

    @storage_call
    def get_spending_by_category(self, year: int, month: int) -> dict[int, Decimal]:
        """Sum of expense amounts per category_id for the given month."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT category_id, amount FROM transactions
               WHERE direction = 'expense'
                 AND strftime('%Y-%m', date) = ?""",
            (month_key(year, month),),
        ).fetchall()
        result: dict[int, Decimal] = {}
        for r in rows:
            result[r["category_id"]] = result.get(r["category_id"], ZERO) + Decimal(r["amount"])
        return result

    @storage_call
    def get_totals_for_month(self, year: int, month: int) -> dict[str, Decimal]:
        """Return income and expense totals for the given month."""
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT direction, amount FROM transactions WHERE strftime('%Y-%m', date) = ?",
            (month_key(year, month),),
        ).fetchall()
        totals = {"income": ZERO, "expense": ZERO}
        for r in rows:
            totals[r["direction"]] += Decimal(r["amount"])
        return totals

    @storage_call
    def create(
        self,
        description: str,
        amount: Decimal,
        direction: str,
        category_id: int,
        date: date,
        recurring_template_id: int | None = None,
    ) -> LedgerTransaction:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO transactions
               (description, amount, direction, category_id, date, recurring_template_id)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                description, str(amount), direction, category_id,
                format_date(date), recurring_template_id,
            ),
        )
        self._db.commit()
        return self.get_by_id(cursor.lastrowid)

    @storage_call
    def update(
        self,
        tx_id: int,
        description: str,
        amount: Decimal,
        direction: str,
        category_id: int,
        date: date,
    ) -> Optional[LedgerTransaction]:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE transactions SET
               description=?, amount=?, direction=?, category_id=?, date=?
               WHERE id=?""",
            (description, str(amount), direction, category_id, format_date(date), tx_id),
        )
        self._db.commit()
        return self.get_by_id(tx_id)

    @storage_call
    def reassign_category(self, from_category_id: int, to_category_id: int) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE transactions SET category_id = ? WHERE category_id = ?",
            (to_category_id, from_category_id),
        )
        self._db.commit()
        return cursor.rowcount

    @storage_call
    def delete(self, tx_id: int):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
        self._db.commit()
