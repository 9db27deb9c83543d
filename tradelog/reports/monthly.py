"""Monthly rollup of trading entries joined with end-of-month NAV marks.

Entries are deduplicated by date before summing: when several entries share
a date, the last one in input order wins. Months that only have a NAV mark
still produce a row, with zero totals and ``entry_count`` of 0.
"""

from collections.abc import Iterable
from datetime import date

from tradelog.models import MonthlyNAV, MonthlySummary, TradingEntry, YTDSummary


def dedupe_entries(entries: Iterable[TradingEntry]) -> dict[date, TradingEntry]:
    """Keep one entry per date, the last one seen.

    Args:
        entries: Trading entries in any order.

    Returns:
        Mapping of date to the entry that counts for it.
    """
    by_date: dict[date, TradingEntry] = {}
    for entry in entries:
        by_date[entry.date] = entry
    return by_date


def aggregate_monthly(
    entries: Iterable[TradingEntry],
    nav_marks: Iterable[MonthlyNAV],
) -> list[MonthlySummary]:
    """Summarize entries and NAV marks per calendar month.

    Args:
        entries: Trading entries, unsorted, possibly with duplicate dates.
        nav_marks: Monthly NAV records, unsorted.

    Returns:
        One summary per (year, month) present in either input, sorted
        chronologically.
    """
    totals: dict[tuple[int, int], dict] = {}

    def bucket(key: tuple[int, int]) -> dict:
        if key not in totals:
            totals[key] = {"realized": 0.0, "paper": 0.0, "count": 0, "nav": None}
        return totals[key]

    for nav in nav_marks:
        bucket((nav.year, nav.month))["nav"] = nav.nav_value

    for day, entry in dedupe_entries(entries).items():
        month = bucket((day.year, day.month))
        month["realized"] += entry.realized_pnl
        month["paper"] += entry.paper_pnl
        month["count"] += 1

    return [
        MonthlySummary(
            year=year,
            month=month,
            total_realized_pnl=values["realized"],
            total_paper_pnl=values["paper"],
            end_of_month_nav=values["nav"] if values["nav"] is not None else 0.0,
            has_nav=values["nav"] is not None,
            entry_count=values["count"],
        )
        for (year, month), values in sorted(totals.items())
    ]


def latest_nav(summaries: Iterable[MonthlySummary], default: float) -> tuple[float, bool]:
    """Find the most recent recorded NAV.

    Args:
        summaries: Monthly summaries in any order.
        default: Value to use when no month has a NAV.

    Returns:
        Tuple of (nav_value, recorded).
    """
    with_nav = [s for s in summaries if s.has_nav]
    if not with_nav:
        return default, False
    newest = max(with_nav, key=lambda s: (s.year, s.month))
    return newest.end_of_month_nav, True


def summarize_ytd(
    entries: Iterable[TradingEntry],
    nav_marks: Iterable[MonthlyNAV],
    year: int,
    default_nav: float,
) -> YTDSummary:
    """Roll the monthly summaries of one year into YTD totals.

    The current NAV is the latest recorded mark up to and including
    ``year``, so a January without a NAV yet still shows December's.

    Args:
        entries: All trading entries.
        nav_marks: All monthly NAV records.
        year: Calendar year to report.
        default_nav: NAV used when none is recorded.

    Returns:
        Year-to-date summary.
    """
    summaries = aggregate_monthly(entries, nav_marks)
    months = [s for s in summaries if s.year == year]
    current_nav, has_nav = latest_nav(
        (s for s in summaries if s.year <= year), default_nav
    )

    return YTDSummary(
        year=year,
        total_realized_pnl=sum(s.total_realized_pnl for s in months),
        total_paper_pnl=sum(s.total_paper_pnl for s in months),
        trading_days=sum(s.entry_count for s in months),
        current_nav=current_nav,
        has_nav=has_nav,
        months=months,
    )
