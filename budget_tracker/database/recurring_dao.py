from datetime import date
from decimal import Decimal
from typing import Optional
from budget_tracker.database.db_manager import DatabaseManager, storage_call
from budget_tracker.models.recurring_template import RecurringTemplate
from budget_tracker.utils.date_helpers import format_date, parse_date


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringTemplate:
        return RecurringTemplate(
            id=row["id"],
            description=row["description"],
            amount=Decimal(row["amount"]),
            direction=row["direction"],
            category_id=row["category_id"],
            start_date=parse_date(row["start_date"]),
            frequency=row["frequency"],
            next_run_date=parse_date(row["next_run_date"]),
            is_active=bool(row["is_active"]),
            day_of_month=row["day_of_month"],
            category_name=row["category_name"] if "category_name" in row.keys() else "",
        )

    def _select(self) -> str:
        return """
            SELECT r.*,
                   c.name AS category_name
            FROM recurring_templates r
            JOIN categories c ON r.category_id = c.id
        """

    @storage_call
    def get_all(self) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " ORDER BY r.is_active DESC, r.next_run_date ASC, r.id ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_active(self) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + " WHERE r.is_active = 1 ORDER BY r.next_run_date ASC, r.id ASC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_due(self, as_of: date) -> list[RecurringTemplate]:
        conn = self._db.get_connection()
        rows = conn.execute(
            self._select() + """
            WHERE r.is_active = 1
              AND r.next_run_date <= ?
            ORDER BY r.next_run_date ASC, r.id ASC
            """,
            (format_date(as_of),),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def get_by_id(self, template_id: int) -> Optional[RecurringTemplate]:
        conn = self._db.get_connection()
        row = conn.execute(
            self._select() + " WHERE r.id = ?", (template_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    @storage_call
    def create(
        self,
        description: str,
        amount: Decimal,
        direction: str,
        category_id: int,
        start_date: date,
        frequency: str,
        next_run_date: date,
        day_of_month: int | None = None,
    ) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            """INSERT INTO recurring_templates
               (description, amount, direction, category_id, start_date,
                frequency, day_of_month, next_run_date, is_active)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1)""",
            (
                description, str(amount), direction, category_id,
                format_date(start_date), frequency, day_of_month,
                format_date(next_run_date),
            ),
        )
        self._db.commit()
        return cursor.lastrowid

    @storage_call
    def update_next_run_date(self, template_id: int, next_run_date: date):
        conn = self._db.get_connection()
        conn.execute(
            "UPDATE recurring_templates SET next_run_date = ? WHERE id = ?",
            (format_date(next_run_date), template_id),
        )
        self._db.commit()

    @storage_call
    def deactivate(self, template_id: int) -> bool:
        """Returns False when no template has that id."""
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE recurring_templates SET is_active = 0 WHERE id = ?",
            (template_id,),
        )
        self._db.commit()
        return cursor.rowcount > 0

    @storage_call
    def reassign_category(self, from_category_id: int, to_category_id: int) -> int:
        conn = self._db.get_connection()
        cursor = conn.execute(
            "UPDATE recurring_templates SET category_id = ? WHERE category_id = ?",
            (to_category_id, from_category_id),
        )
        self._db.commit()
        return cursor.rowcount
