"""SQLite data store for tradelog."""

import logging
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from tradelog.errors import DuplicateEntryError, EntryNotFoundError, StoreError
from tradelog.models import EntryDraft, MonthlyNAV, NAVDraft, TradingEntry

logger = logging.getLogger(__name__)

ENTRY_COLUMNS = "id, date, realized_pnl, paper_pnl, notes, created_at, updated_at"
NAV_COLUMNS = "id, year, month, nav_value, created_at, updated_at"


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> str:
    return datetime.now().isoformat()


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _row_to_entry(row: sqlite3.Row) -> TradingEntry:
    return TradingEntry(
        id=row["id"],
        date=date.fromisoformat(row["date"]),
        realized_pnl=row["realized_pnl"],
        paper_pnl=row["paper_pnl"],
        notes=row["notes"],
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


def _row_to_nav(row: sqlite3.Row) -> MonthlyNAV:
    return MonthlyNAV(
        id=row["id"],
        year=row["year"],
        month=row["month"],
        nav_value=row["nav_value"],
        created_at=_parse_timestamp(row["created_at"]),
        updated_at=_parse_timestamp(row["updated_at"]),
    )


class JournalStore:
    """SQLite-based store for trading entries and monthly NAV marks.

    Every public method opens its own connection and commits before
    returning. Bulk methods run in a single transaction, so a batch is
    either applied whole or not at all.
    """

    REQUIRED_TABLES = [
        "trading_entries",
        "monthly_nav",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = Path(db_path)
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Cursor]:
        """Run statements in one transaction, rolling back on failure.

        sqlite3 errors are raised as StoreError. Constraint violations the
        caller cares about are caught inside the block.
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open journal database {self.db_path}: {e}") from e
        try:
            cursor = conn.cursor()
            yield cursor
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Journal database error: {e}") from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        with self._transaction() as cursor:
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trading_entries (
                    id TEXT PRIMARY KEY,
                    date TEXT NOT NULL UNIQUE,
                    realized_pnl REAL NOT NULL,
                    paper_pnl REAL NOT NULL,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS monthly_nav (
                    id TEXT PRIMARY KEY,
                    year INTEGER NOT NULL,
                    month INTEGER NOT NULL CHECK (month BETWEEN 1 AND 12),
                    nav_value REAL NOT NULL CHECK (nav_value > 0),
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    UNIQUE(year, month)
                )
            """)

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        with self._transaction() as cursor:
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]

    # ==================== Trading entries ====================

    def get_entries(self) -> list[TradingEntry]:
        """Get all trading entries, newest first."""
        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT {ENTRY_COLUMNS} FROM trading_entries ORDER BY date DESC"
            )
            return [_row_to_entry(row) for row in cursor.fetchall()]

    def get_entry(self, entry_id: str) -> Optional[TradingEntry]:
        """Get an entry by ID.

        Args:
            entry_id: Entry ID.

        Returns:
            Entry if found, None otherwise.
        """
        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT {ENTRY_COLUMNS} FROM trading_entries WHERE id = ?",
                (entry_id,),
            )
            row = cursor.fetchone()
            return _row_to_entry(row) if row else None

    def get_entry_by_date(self, day: date) -> Optional[TradingEntry]:
        """Get the entry recorded for a date.

        Args:
            day: Trading date.

        Returns:
            Entry if found, None otherwise.
        """
        with self._transaction() as cursor:
            return self._find_by_date(cursor, day)

    def _find_by_date(self, cursor: sqlite3.Cursor, day: date) -> Optional[TradingEntry]:
        cursor.execute(
            f"SELECT {ENTRY_COLUMNS} FROM trading_entries WHERE date = ?",
            (day.isoformat(),),
        )
        row = cursor.fetchone()
        return _row_to_entry(row) if row else None

    def _insert_entry(self, cursor: sqlite3.Cursor, draft: EntryDraft) -> str:
        entry_id = _new_id()
        now = _now()
        try:
            cursor.execute(
                """
                INSERT INTO trading_entries
                (id, date, realized_pnl, paper_pnl, notes, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry_id,
                    draft.date.isoformat(),
                    draft.realized_pnl,
                    draft.paper_pnl,
                    draft.notes,
                    now,
                    now,
                ),
            )
        except sqlite3.IntegrityError:
            existing = self._find_by_date(cursor, draft.date)
            if existing is None:
                raise
            raise DuplicateEntryError(existing) from None
        return entry_id

    def add_entry(self, draft: EntryDraft) -> TradingEntry:
        """Insert a new trading entry.

        Args:
            draft: Entry to insert.

        Returns:
            The stored entry.

        Raises:
            DuplicateEntryError: If the date already has an entry.
        """
        with self._transaction() as cursor:
            entry_id = self._insert_entry(cursor, draft)
        logger.debug("Added entry %s for %s", entry_id, draft.date)
        return self.get_entry(entry_id)

    def add_entries(self, drafts: list[EntryDraft]) -> list[TradingEntry]:
        """Insert several entries in one transaction.

        Args:
            drafts: Entries to insert.

        Returns:
            The stored entries, in input order.

        Raises:
            DuplicateEntryError: If any date already has an entry; nothing
                from the batch is stored.
        """
        with self._transaction() as cursor:
            ids = [self._insert_entry(cursor, draft) for draft in drafts]
        logger.debug("Added %d entries", len(ids))
        return [self.get_entry(entry_id) for entry_id in ids]

    def _update_entry(self, cursor: sqlite3.Cursor, entry_id: str, draft: EntryDraft) -> None:
        try:
            cursor.execute(
                """
                UPDATE trading_entries
                SET date = ?, realized_pnl = ?, paper_pnl = ?, notes = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    draft.date.isoformat(),
                    draft.realized_pnl,
                    draft.paper_pnl,
                    draft.notes,
                    _now(),
                    entry_id,
                ),
            )
        except sqlite3.IntegrityError:
            existing = self._find_by_date(cursor, draft.date)
            if existing is None:
                raise
            raise DuplicateEntryError(existing) from None
        if cursor.rowcount == 0:
            raise EntryNotFoundError(f"No entry with id {entry_id}")

    def update_entry(self, entry_id: str, draft: EntryDraft) -> TradingEntry:
        """Replace the fields of an existing entry.

        Args:
            entry_id: ID of the entry to update.
            draft: New field values.

        Returns:
            The updated entry.

        Raises:
            EntryNotFoundError: If no entry has that ID.
            DuplicateEntryError: If the new date belongs to another entry.
        """
        with self._transaction() as cursor:
            self._update_entry(cursor, entry_id, draft)
        logger.debug("Updated entry %s", entry_id)
        return self.get_entry(entry_id)

    def update_entries(self, updates: list[tuple[str, EntryDraft]]) -> list[TradingEntry]:
        """Update several entries in one transaction.

        Args:
            updates: Pairs of (entry_id, new field values).

        Returns:
            The updated entries, in input order.
        """
        with self._transaction() as cursor:
            for entry_id, draft in updates:
                self._update_entry(cursor, entry_id, draft)
        logger.debug("Updated %d entries", len(updates))
        return [self.get_entry(entry_id) for entry_id, _ in updates]

    def delete_entry(self, entry_id: str) -> None:
        """Delete an entry.

        Args:
            entry_id: ID of the entry to delete.

        Raises:
            EntryNotFoundError: If no entry has that ID.
        """
        with self._transaction() as cursor:
            cursor.execute("DELETE FROM trading_entries WHERE id = ?", (entry_id,))
            if cursor.rowcount == 0:
                raise EntryNotFoundError(f"No entry with id {entry_id}")
        logger.debug("Deleted entry %s", entry_id)

    # ==================== Monthly NAV ====================

    def get_monthly_nav(self) -> list[MonthlyNAV]:
        """Get all monthly NAV records, newest first."""
        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT {NAV_COLUMNS} FROM monthly_nav ORDER BY year DESC, month DESC"
            )
            return [_row_to_nav(row) for row in cursor.fetchall()]

    def get_nav(self, year: int, month: int) -> Optional[MonthlyNAV]:
        """Get the NAV recorded for a month.

        Args:
            year: Calendar year.
            month: Calendar month (1-12).

        Returns:
            NAV record if found, None otherwise.
        """
        with self._transaction() as cursor:
            cursor.execute(
                f"SELECT {NAV_COLUMNS} FROM monthly_nav WHERE year = ? AND month = ?",
                (year, month),
            )
            row = cursor.fetchone()
            return _row_to_nav(row) if row else None

    def upsert_monthly_nav(self, draft: NAVDraft) -> MonthlyNAV:
        """Set the NAV for a month, updating the existing record if any.

        Args:
            draft: Year, month and NAV value.

        Returns:
            The single stored record for that month.
        """
        now = _now()
        with self._transaction() as cursor:
            cursor.execute(
                """
                INSERT INTO monthly_nav (id, year, month, nav_value, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(year, month) DO UPDATE SET
                    nav_value = excluded.nav_value,
                    updated_at = excluded.updated_at
                """,
                (_new_id(), draft.year, draft.month, draft.nav_value, now, now),
            )
        logger.debug("Set NAV for %d-%02d to %s", draft.year, draft.month, draft.nav_value)
        return self.get_nav(draft.year, draft.month)

    def add_monthly_navs(self, drafts: list[NAVDraft]) -> list[MonthlyNAV]:
        """Insert several NAV records in one transaction.

        Args:
            drafts: NAV records to insert.

        Returns:
            The stored records, in input order.

        Raises:
            StoreError: If any month already has a NAV; nothing is stored.
        """
        now = _now()
        with self._transaction() as cursor:
            for draft in drafts:
                try:
                    cursor.execute(
                        """
                        INSERT INTO monthly_nav
                        (id, year, month, nav_value, created_at, updated_at)
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (_new_id(), draft.year, draft.month, draft.nav_value, now, now),
                    )
                except sqlite3.IntegrityError:
                    raise StoreError(
                        f"NAV already recorded for {draft.year}-{draft.month:02d}"
                    ) from None
        logger.debug("Added %d NAV records", len(drafts))
        return [self.get_nav(d.year, d.month) for d in drafts]

    def update_monthly_navs(self, updates: list[tuple[str, float]]) -> list[MonthlyNAV]:
        """Change the value of several NAV records in one transaction.

        Args:
            updates: Pairs of (nav_id, new nav_value).

        Returns:
            The updated records, in input order.

        Raises:
            EntryNotFoundError: If any ID is unknown; nothing is changed.
        """
        now = _now()
        with self._transaction() as cursor:
            for nav_id, nav_value in updates:
                cursor.execute(
                    "UPDATE monthly_nav SET nav_value = ?, updated_at = ? WHERE id = ?",
                    (nav_value, now, nav_id),
                )
                if cursor.rowcount == 0:
                    raise EntryNotFoundError(f"No NAV record with id {nav_id}")
            ids = [nav_id for nav_id, _ in updates]
            placeholders = ", ".join("?" for _ in ids)
            cursor.execute(
                f"SELECT {NAV_COLUMNS} FROM monthly_nav WHERE id IN ({placeholders})",
                ids,
            )
            by_id = {row["id"]: _row_to_nav(row) for row in cursor.fetchall()}
        logger.debug("Updated %d NAV records", len(updates))
        return [by_id[nav_id] for nav_id in ids]

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        with self._transaction() as cursor:
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
