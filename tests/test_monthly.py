"""Property-based tests for the monthly rollup.

**Feature: tradelog**
"""

import copy
from datetime import date

from hypothesis import given, settings
from hypothesis import strategies as st

from tradelog.models import MonthlyNAV, TradingEntry
from tradelog.reports import aggregate_monthly, dedupe_entries, latest_nav, summarize_ytd


def make_entry(day: str, realized: float, paper: float, entry_id: str = "e1") -> TradingEntry:
    return TradingEntry(
        id=entry_id,
        date=date.fromisoformat(day),
        realized_pnl=realized,
        paper_pnl=paper,
    )


def make_nav(year: int, month: int, value: float, nav_id: str = "n1") -> MonthlyNAV:
    return MonthlyNAV(id=nav_id, year=year, month=month, nav_value=value)


amounts = st.floats(min_value=-100000.0, max_value=100000.0, allow_nan=False, allow_infinity=False)


def entry_strategy():
    """Generate entries spread over a few years."""
    return st.builds(
        TradingEntry,
        id=st.uuids().map(lambda u: u.hex),
        date=st.dates(min_value=date(2023, 1, 1), max_value=date(2026, 12, 31)),
        realized_pnl=amounts,
        paper_pnl=amounts,
        notes=st.none(),
    )


def nav_strategy():
    return st.builds(
        MonthlyNAV,
        id=st.uuids().map(lambda u: u.hex),
        year=st.integers(min_value=2023, max_value=2026),
        month=st.integers(min_value=1, max_value=12),
        nav_value=st.floats(min_value=1.0, max_value=10_000_000.0, allow_nan=False),
    )


class TestSummationCorrectness:
    """
    **Feature: tradelog, Property 1: Summation Correctness**

    *For any* set of entries in a month, the monthly totals equal the sums
    over the deduplicated entries of that month.
    """

    def test_two_entries_in_january(self):
        entries = [
            make_entry("2025-01-05", 100, -20, "a"),
            make_entry("2025-01-20", -50, 10, "b"),
        ]

        summaries = aggregate_monthly(entries, [])

        assert len(summaries) == 1
        january = summaries[0]
        assert (january.year, january.month) == (2025, 1)
        assert january.total_realized_pnl == 50
        assert january.total_paper_pnl == -10
        assert january.entry_count == 2
        assert january.has_nav is False

    @given(entries=st.lists(entry_strategy(), max_size=40))
    @settings(max_examples=50)
    def test_totals_match_deduplicated_entries(self, entries):
        """
        *For any* entries, each month's totals and count match the
        deduplicated entries falling in that month.
        """
        summaries = aggregate_monthly(entries, [])
        unique = dedupe_entries(entries)

        assert sum(s.entry_count for s in summaries) == len(unique)
        for summary in summaries:
            in_month = [
                e for d, e in unique.items() if (d.year, d.month) == (summary.year, summary.month)
            ]
            assert summary.entry_count == len(in_month)
            assert abs(summary.total_realized_pnl - sum(e.realized_pnl for e in in_month)) < 1e-6
            assert abs(summary.total_paper_pnl - sum(e.paper_pnl for e in in_month)) < 1e-6


class TestDeduplication:
    """
    **Feature: tradelog, Property 2: Deduplication**

    *For any* date with several entries, the date counts once and only the
    last entry seen contributes.
    """

    def test_duplicate_date_counted_once_last_wins(self):
        entries = [
            make_entry("2025-01-05", 100, 0, "first"),
            make_entry("2025-01-05", 400, 5, "second"),
        ]

        summaries = aggregate_monthly(entries, [])

        assert len(summaries) == 1
        assert summaries[0].entry_count == 1
        assert summaries[0].total_realized_pnl == 400
        assert summaries[0].total_paper_pnl == 5

    def test_dedupe_entries_keeps_last(self):
        entries = [
            make_entry("2025-03-03", 1, 1, "a"),
            make_entry("2025-03-04", 2, 2, "b"),
            make_entry("2025-03-03", 3, 3, "c"),
        ]

        unique = dedupe_entries(entries)

        assert set(unique) == {date(2025, 3, 3), date(2025, 3, 4)}
        assert unique[date(2025, 3, 3)].id == "c"

    @given(entry=entry_strategy(), copies=st.integers(min_value=2, max_value=5))
    @settings(max_examples=30)
    def test_repeated_entry_never_double_counted(self, entry, copies):
        summaries = aggregate_monthly([entry] * copies, [])

        assert len(summaries) == 1
        assert summaries[0].entry_count == 1
        assert summaries[0].total_realized_pnl == entry.realized_pnl


class TestNAVJoin:
    """
    **Feature: tradelog, Property 3: NAV Join**

    *For any* NAV mark, its month appears with that NAV, even when the
    month has no entries.
    """

    def test_nav_only_month_appears(self):
        entries = [make_entry("2025-01-10", 10, 0)]
        navs = [make_nav(2025, 2, 300000)]

        summaries = aggregate_monthly(entries, navs)

        assert [(s.year, s.month) for s in summaries] == [(2025, 1), (2025, 2)]
        january, february = summaries
        assert january.end_of_month_nav == 0.0
        assert january.has_nav is False
        assert february.end_of_month_nav == 300000
        assert february.has_nav is True
        assert february.entry_count == 0
        assert february.total_realized_pnl == 0.0

    def test_nav_joined_to_entry_month(self):
        entries = [make_entry("2025-04-01", -5, 5)]
        navs = [make_nav(2025, 4, 123456.78)]

        (april,) = aggregate_monthly(entries, navs)

        assert april.end_of_month_nav == 123456.78
        assert april.has_nav is True
        assert april.entry_count == 1

    @given(navs=st.lists(nav_strategy(), max_size=20))
    @settings(max_examples=50)
    def test_every_nav_month_appears_once(self, navs):
        summaries = aggregate_monthly([], navs)
        keys = [(s.year, s.month) for s in summaries]

        assert len(keys) == len(set(keys))
        assert set(keys) == {(n.year, n.month) for n in navs}
        assert all(s.has_nav for s in summaries)


class TestCalendarOrdering:
    """
    **Feature: tradelog, Property 4: Calendar Ordering**

    *For any* input order, summaries come out in chronological order.
    """

    def test_year_boundary_ordering(self):
        entries = [
            make_entry("2025-02-03", 1, 0, "feb"),
            make_entry("2024-12-30", 1, 0, "dec"),
            make_entry("2025-01-06", 1, 0, "jan"),
        ]

        summaries = aggregate_monthly(entries, [])

        assert [(s.year, s.month) for s in summaries] == [(2024, 12), (2025, 1), (2025, 2)]

    def test_months_sorted_numerically_not_by_label(self):
        navs = [make_nav(2025, m, 1000.0 + m, f"n{m}") for m in (12, 4, 8, 1, 2)]

        summaries = aggregate_monthly([], navs)

        assert [s.month for s in summaries] == [1, 2, 4, 8, 12]

    @given(entries=st.lists(entry_strategy(), max_size=30), navs=st.lists(nav_strategy(), max_size=10))
    @settings(max_examples=50)
    def test_output_sorted(self, entries, navs):
        keys = [(s.year, s.month) for s in aggregate_monthly(entries, navs)]

        assert keys == sorted(keys)
        assert len(keys) == len(set(keys))


class TestIdempotence:
    """
    **Feature: tradelog, Property 5: Idempotence**

    *For any* inputs, aggregating twice gives equal output and leaves the
    inputs untouched.
    """

    @given(entries=st.lists(entry_strategy(), max_size=30), navs=st.lists(nav_strategy(), max_size=10))
    @settings(max_examples=50)
    def test_same_output_twice(self, entries, navs):
        assert aggregate_monthly(entries, navs) == aggregate_monthly(entries, navs)

    @given(entries=st.lists(entry_strategy(), max_size=30), navs=st.lists(nav_strategy(), max_size=10))
    @settings(max_examples=30)
    def test_inputs_not_mutated(self, entries, navs):
        entries_before = copy.deepcopy(entries)
        navs_before = copy.deepcopy(navs)

        aggregate_monthly(entries, navs)

        assert entries == entries_before
        assert navs == navs_before

    def test_accepts_iterators(self):
        entries = [make_entry("2025-01-05", 1, 2)]
        navs = [make_nav(2025, 1, 1000)]

        assert aggregate_monthly(iter(entries), iter(navs)) == aggregate_monthly(entries, navs)


class TestYearToDate:
    """
    **Feature: tradelog, YTD Summary**

    *For any* year, YTD totals sum that year's months, and the current NAV
    is the latest recorded mark up to that year.
    """

    def test_ytd_totals_only_include_year(self):
        entries = [
            make_entry("2024-12-31", 1000, 100, "a"),
            make_entry("2025-01-02", 200, -50, "b"),
            make_entry("2025-03-10", -75, 25, "c"),
        ]

        ytd = summarize_ytd(entries, [], 2025, 250000.0)

        assert ytd.total_realized_pnl == 125
        assert ytd.total_paper_pnl == -25
        assert ytd.trading_days == 2
        assert [s.month for s in ytd.months] == [1, 3]

    def test_default_nav_when_none_recorded(self):
        ytd = summarize_ytd([make_entry("2025-01-02", 1, 1)], [], 2025, 250000.0)

        assert ytd.current_nav == 250000.0
        assert ytd.has_nav is False

    def test_latest_nav_carries_over_year_end(self):
        navs = [make_nav(2024, 11, 200000, "a"), make_nav(2024, 12, 210000, "b")]

        ytd = summarize_ytd([make_entry("2025-01-02", 1, 1)], navs, 2025, 250000.0)

        assert ytd.current_nav == 210000
        assert ytd.has_nav is True

    def test_later_years_ignored_for_current_nav(self):
        navs = [make_nav(2025, 6, 300000, "a"), make_nav(2026, 1, 400000, "b")]

        ytd = summarize_ytd([], navs, 2025, 250000.0)

        assert ytd.current_nav == 300000

    def test_latest_nav_picks_newest_month(self):
        summaries = aggregate_monthly(
            [], [make_nav(2025, 2, 2.0, "a"), make_nav(2025, 10, 10.0, "b"), make_nav(2025, 7, 7.0, "c")]
        )

        assert latest_nav(reversed(summaries), 1.0) == (10.0, True)
        assert latest_nav([], 1.0) == (1.0, False)
