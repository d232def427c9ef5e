import sqlite3
from datetime import datetime
from decimal import Decimal
from typing import Optional
from budget_tracker.database.db_manager import DatabaseManager, storage_call
from budget_tracker.models.carry_over import CarryOverRun
from budget_tracker.utils.errors import AlreadyAppliedError


class CarryOverRunDAO:
    """One row per applied source month; UNIQUE(from_year, from_month)."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> CarryOverRun:
        return CarryOverRun(
            id=row["id"],
            from_year=row["from_year"],
            from_month=row["from_month"],
            applied_at_utc=datetime.fromisoformat(row["applied_at_utc"]),
            total_amount=Decimal(row["total_amount"]),
        )

    @storage_call
    def exists(self, from_year: int, from_month: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(1) FROM carry_over_runs WHERE from_year = ? AND from_month = ?",
            (from_year, from_month),
        ).fetchone()
        return row[0] > 0

    @storage_call
    def get(self, from_year: int, from_month: int) -> Optional[CarryOverRun]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM carry_over_runs WHERE from_year = ? AND from_month = ?",
            (from_year, from_month),
        ).fetchone()
        return self._row_to_model(row) if row else None

    @storage_call
    def get_all(self) -> list[CarryOverRun]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM carry_over_runs ORDER BY from_year DESC, from_month DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    @storage_call
    def add(self, from_year: int, from_month: int, total_amount: Decimal, applied_at_utc: datetime):
        """Insert the run record; a duplicate month raises AlreadyAppliedError."""
        conn = self._db.get_connection()
        try:
            conn.execute(
                """INSERT INTO carry_over_runs
                   (from_year, from_month, applied_at_utc, total_amount)
                   VALUES (?, ?, ?, ?)""",
                (from_year, from_month, applied_at_utc.isoformat(), str(total_amount)),
            )
        except sqlite3.IntegrityError as exc:
            raise AlreadyAppliedError(from_year, from_month) from exc
        self._db.commit()
