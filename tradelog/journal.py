"""Trading journal service.

Every mutation writes to the store and then calls ``refresh()``, which
re-reads entries and NAV marks and recomputes the monthly summaries from
scratch. Summaries are never patched in place.
"""

import logging
from collections.abc import Callable
from datetime import date
from typing import Optional, TypeVar, Union

from tradelog.config import DEFAULT_NAV, Settings
from tradelog.db.store import JournalStore
from tradelog.errors import (
    DuplicateEntryError,
    EntryNotFoundError,
    StoreError,
    ValidationError,
)
from tradelog.ingest import (
    ImportPlan,
    parse_date,
    parse_entries_csv,
    parse_entry_form,
    parse_nav_csv,
    parse_nav_form,
)
from tradelog.ingest.forms import Number
from tradelog.market import CalendarDay, holiday_table, month_grid
from tradelog.models import MonthlyNAV, MonthlySummary, TradingEntry, YTDSummary
from tradelog.reports import aggregate_monthly, summarize_ytd

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TradingJournal:
    """Journal of daily P&L entries and monthly NAV marks.

    Attributes:
        entries: Entries as of the last refresh, newest first.
        monthly_nav: NAV records as of the last refresh.
        monthly: Monthly summaries computed at the last refresh.
        error: Message of the last store failure, None when healthy.
    """

    def __init__(
        self,
        store: JournalStore,
        default_nav: float = DEFAULT_NAV,
        holidays: Optional[dict[date, str]] = None,
    ):
        """Initialize the journal.

        Args:
            store: Backing data store.
            default_nav: NAV reported before any month has one.
            holidays: Extra market holidays added to the built-in table.
        """
        self.store = store
        self.default_nav = default_nav
        self.holidays = holiday_table(holidays)
        self.entries: list[TradingEntry] = []
        self.monthly_nav: list[MonthlyNAV] = []
        self.monthly: list[MonthlySummary] = []
        self.error: Optional[str] = None
        self._loaded = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "TradingJournal":
        """Create a journal backed by the configured database."""
        return cls(
            JournalStore(settings.db_path),
            default_nav=settings.default_nav,
            holidays=settings.holidays,
        )

    def _guard(self, operation: Callable[[], T]) -> T:
        """Run a store operation, recording failures in ``error``."""
        try:
            return operation()
        except StoreError as e:
            self.error = str(e)
            logger.error("Journal store failure: %s", e)
            raise

    def refresh(self) -> list[MonthlySummary]:
        """Re-read the store and recompute the monthly summaries.

        On failure the previous entries and summaries are kept.

        Returns:
            The recomputed monthly summaries.
        """
        def load() -> tuple[list[TradingEntry], list[MonthlyNAV]]:
            return self.store.get_entries(), self.store.get_monthly_nav()

        entries, nav_marks = self._guard(load)
        self.entries = entries
        self.monthly_nav = nav_marks
        self.monthly = aggregate_monthly(entries, nav_marks)
        self.error = None
        self._loaded = True
        logger.debug(
            "Refreshed journal: %d entries, %d NAV records, %d months",
            len(entries),
            len(nav_marks),
            len(self.monthly),
        )
        return self.monthly

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    # ==================== Entries ====================

    def get_entry(self, day: Union[str, date]) -> Optional[TradingEntry]:
        """Get the entry for a date, if any."""
        self._ensure_loaded()
        day = parse_date(day)
        return next((e for e in self.entries if e.date == day), None)

    def _require_entry(self, day: Union[str, date]) -> TradingEntry:
        entry = self.get_entry(day)
        if entry is None:
            raise EntryNotFoundError(f"No entry for {parse_date(day).isoformat()}")
        return entry

    def add_entry(
        self,
        day: Union[str, date],
        realized_pnl: Number,
        paper_pnl: Number,
        notes: Optional[str] = None,
    ) -> TradingEntry:
        """Record a new daily entry.

        Raises:
            ValidationError: If the form values are invalid.
            DuplicateEntryError: If the date already has an entry.
        """
        draft = parse_entry_form(day, realized_pnl, paper_pnl, notes)
        existing = self.get_entry(draft.date)
        if existing is not None:
            raise DuplicateEntryError(existing)

        entry = self._guard(lambda: self.store.add_entry(draft))
        logger.info("Added entry for %s", draft.date)
        self.refresh()
        return entry

    def update_entry(
        self,
        day: Union[str, date],
        realized_pnl: Optional[Number] = None,
        paper_pnl: Optional[Number] = None,
        notes: Optional[str] = None,
    ) -> TradingEntry:
        """Edit fields of the entry for a date; omitted fields are kept.

        Raises:
            EntryNotFoundError: If the date has no entry.
            ValidationError: If a new value is invalid.
        """
        current = self._require_entry(day)
        draft = parse_entry_form(
            current.date,
            current.realized_pnl if realized_pnl is None else realized_pnl,
            current.paper_pnl if paper_pnl is None else paper_pnl,
            current.notes if notes is None else notes,
        )
        entry = self._guard(lambda: self.store.update_entry(current.id, draft))
        logger.info("Updated entry for %s", current.date)
        self.refresh()
        return entry

    def delete_entry(self, day: Union[str, date]) -> TradingEntry:
        """Delete the entry for a date.

        Returns:
            The deleted entry.
        """
        current = self._require_entry(day)
        self._guard(lambda: self.store.delete_entry(current.id))
        logger.info("Deleted entry for %s", current.date)
        self.refresh()
        return current

    # ==================== Monthly NAV ====================

    def get_monthly_nav(self, year: int, month: int) -> Optional[MonthlyNAV]:
        """Get the NAV recorded for a month, if any."""
        self._ensure_loaded()
        return next(
            (n for n in self.monthly_nav if (n.year, n.month) == (year, month)), None
        )

    def set_monthly_nav(self, year: Number, month: Number, nav_value: Number) -> MonthlyNAV:
        """Set the end-of-month NAV, replacing any existing value.

        Raises:
            ValidationError: If the month or value is invalid.
        """
        draft = parse_nav_form(year, month, nav_value)
        nav = self._guard(lambda: self.store.upsert_monthly_nav(draft))
        logger.info("Set NAV for %d-%02d", draft.year, draft.month)
        self.refresh()
        return nav

    # ==================== Bulk import ====================

    def plan_import(self, kind: str, text: str) -> ImportPlan:
        """Parse a CSV upload against the current records.

        Args:
            kind: ``"entries"`` or ``"nav"``.
            text: CSV content.

        Returns:
            Plan of inserts and updates, not yet applied.
        """
        self._ensure_loaded()
        if kind == "entries":
            return parse_entries_csv(text, self.entries)
        if kind == "nav":
            return parse_nav_csv(text, self.monthly_nav)
        raise ValidationError(f"Unknown upload type: {kind!r}")

    def apply_import(self, plan: ImportPlan) -> tuple[int, int]:
        """Apply an import plan, then refresh.

        Inserts and updates are separate batches; each is all-or-nothing.
        If the second batch fails the first stays applied, and the next
        read reloads whatever the store holds.

        Returns:
            Tuple of (inserted, updated) counts.
        """
        try:
            if plan.kind == "entries":
                if plan.inserts:
                    self._guard(lambda: self.store.add_entries(list(plan.inserts)))
                if plan.updates:
                    self._guard(
                        lambda: self.store.update_entries(
                            [(u.id, u.draft) for u in plan.updates]
                        )
                    )
            else:
                if plan.inserts:
                    self._guard(lambda: self.store.add_monthly_navs(list(plan.inserts)))
                if plan.updates:
                    self._guard(
                        lambda: self.store.update_monthly_navs(
                            [(u.id, u.draft.nav_value) for u in plan.updates]
                        )
                    )
        except Exception:
            self._loaded = False
            raise
        logger.info(
            "Imported %s: %d inserted, %d updated",
            plan.kind,
            len(plan.inserts),
            len(plan.updates),
        )
        self.refresh()
        return len(plan.inserts), len(plan.updates)

    # ==================== Views ====================

    def ytd(self, year: Optional[int] = None) -> YTDSummary:
        """Year-to-date summary, for the current year by default."""
        self._ensure_loaded()
        year = date.today().year if year is None else year
        return summarize_ytd(self.entries, self.monthly_nav, year, self.default_nav)

    def calendar(self, year: int, month: int) -> list[list[Optional[CalendarDay]]]:
        """Calendar grid for one month."""
        self._ensure_loaded()
        return month_grid(year, month, self.entries, self.holidays)
