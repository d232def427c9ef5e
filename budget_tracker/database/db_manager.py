import functools
import logging
import os
import sqlite3
from contextlib import contextmanager

from budget_tracker.utils.constants import DB_FILE, DEFAULT_CATEGORIES
from budget_tracker.utils.errors import StorageError

logger = logging.getLogger(__name__)


def storage_call(func):
    """Translate sqlite3 errors raised by a DAO method into StorageError."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except sqlite3.Error as exc:
            raise StorageError(f"{func.__qualname__}: {exc}") from exc
    return wrapper


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._tx_depth = 0

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        try:
            self._create_schema(conn)
            self._seed_defaults(conn)
            conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not initialize {self.db_path}: {exc}") from exc

    @property
    def in_transaction(self) -> bool:
        return self._tx_depth > 0

    @contextmanager
    def transaction(self):
        """Group DAO writes into one unit: commit on success, roll back on error.

        Nested uses join the outermost unit. DAO writes made inside do not
        commit on their own (see commit()).
        """
        conn = self.get_connection()
        self._tx_depth += 1
        try:
            yield conn
        except BaseException:
            self._tx_depth -= 1
            if self._tx_depth == 0:
                conn.rollback()
                logger.warning("Rolled back database transaction")
            raise
        self._tx_depth -= 1
        if self._tx_depth == 0:
            try:
                conn.commit()
            except sqlite3.Error as exc:
                conn.rollback()
                raise StorageError(f"Commit failed: {exc}") from exc

    def commit(self):
        """Commit a single DAO write unless an enclosing transaction() owns it."""
        if not self.in_transaction:
            self.get_connection().commit()

    def _create_schema(self, conn: sqlite3.Connection):
        # Amounts are stored as TEXT so Decimal values round-trip exactly.
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS categories (
                id         INTEGER PRIMARY KEY AUTOINCREMENT,
                name       TEXT NOT NULL UNIQUE COLLATE NOCASE,
                color_hex  TEXT NOT NULL DEFAULT '#888888',
                is_system  INTEGER NOT NULL DEFAULT 0
            );

            CREATE TABLE IF NOT EXISTS recurring_templates (
                id            INTEGER PRIMARY KEY AUTOINCREMENT,
                description   TEXT NOT NULL CHECK(trim(description) <> ''),
                amount        TEXT NOT NULL CHECK(CAST(amount AS REAL) > 0),
                direction     TEXT NOT NULL CHECK(direction IN ('income','expense')),
                category_id   INTEGER NOT NULL REFERENCES categories(id),
                start_date    TEXT NOT NULL,
                frequency     TEXT NOT NULL CHECK(frequency IN ('weekly','biweekly','monthly')),
                day_of_month  INTEGER CHECK(day_of_month BETWEEN 1 AND 28),
                next_run_date TEXT NOT NULL CHECK(next_run_date >= start_date),
                is_active     INTEGER NOT NULL DEFAULT 1,
                created_at    TEXT NOT NULL DEFAULT (datetime('now')),
                CHECK((frequency = 'monthly') = (day_of_month IS NOT NULL))
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id                    INTEGER PRIMARY KEY AUTOINCREMENT,
                description           TEXT NOT NULL CHECK(trim(description) <> ''),
                amount                TEXT NOT NULL CHECK(CAST(amount AS REAL) > 0),
                direction             TEXT NOT NULL CHECK(direction IN ('income','expense')),
                category_id           INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
                date                  TEXT NOT NULL,
                recurring_template_id INTEGER REFERENCES recurring_templates(id) ON DELETE SET NULL,
                created_at            TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS budgets (
                id           INTEGER PRIMARY KEY AUTOINCREMENT,
                category_id  INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
                month        TEXT NOT NULL,
                limit_amount TEXT NOT NULL CHECK(CAST(limit_amount AS REAL) >= 0),
                UNIQUE(category_id, month)
            );

            CREATE TABLE IF NOT EXISTS budget_change_log (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                category_id    INTEGER NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
                year           INTEGER NOT NULL,
                month          INTEGER NOT NULL CHECK(month BETWEEN 1 AND 12),
                old_amount     TEXT NOT NULL,
                new_amount     TEXT NOT NULL,
                action         TEXT NOT NULL CHECK(action IN ('update','clear')),
                changed_at_utc TEXT NOT NULL
                               DEFAULT (strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now'))
            );

            CREATE TABLE IF NOT EXISTS carry_over_runs (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                from_year      INTEGER NOT NULL,
                from_month     INTEGER NOT NULL CHECK(from_month BETWEEN 1 AND 12),
                applied_at_utc TEXT NOT NULL,
                total_amount   TEXT NOT NULL,
                UNIQUE(from_year, from_month)
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_date        ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_category_id ON transactions(category_id);
            CREATE INDEX IF NOT EXISTS idx_templates_due            ON recurring_templates(is_active, next_run_date);
            CREATE INDEX IF NOT EXISTS idx_budgets_month            ON budgets(month);
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        # Default settings
        defaults = [
            ("appearance_mode", "system"),
            ("date_format", "MM/DD/YYYY"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        # Default categories
        for cat in DEFAULT_CATEGORIES:
            conn.execute(
                """INSERT OR IGNORE INTO categories(name, color_hex, is_system)
                   VALUES (?, ?, ?)""",
                (cat["name"], cat["color_hex"], cat["is_system"]),
            )

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: open (creating if needed) the database file.

        db_folder: if provided, the DB file lives in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        logger.info("Opened database %s", path)
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
