"""Tests for form validation and CSV import planning.

**Feature: tradelog**
"""

from datetime import date, datetime

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradelog.errors import ValidationError
from tradelog.ingest import (
    csv_template,
    parse_date,
    parse_entries_csv,
    parse_entry_form,
    parse_nav_csv,
    parse_nav_form,
)
from tradelog.models import EntryDraft, MonthlyNAV, NAVDraft, TradingEntry


class TestEntryForm:
    """
    **Feature: tradelog, Entry Form Validation**

    *For any* submission, a date and both P&L amounts are required.
    """

    def test_valid_entry(self):
        entry = parse_entry_form("2025-01-02", "1250.50", "-300", "  Good day  ")

        assert entry == EntryDraft(
            date=date(2025, 1, 2), realized_pnl=1250.5, paper_pnl=-300.0, notes="Good day"
        )

    def test_blank_notes_become_none(self):
        assert parse_entry_form("2025-01-02", 1, 2, "   ").notes is None

    @pytest.mark.parametrize(
        "day, realized, paper, message",
        [
            ("", "1", "2", "date is required"),
            ("02/01/2025", "1", "2", "Invalid date"),
            ("2025-01-02", "", "2", "realized_pnl is required"),
            ("2025-01-02", "1", None, "paper_pnl is required"),
            ("2025-01-02", "abc", "2", "realized_pnl must be a number"),
            ("2025-01-02", "1", "nan", "paper_pnl must be a number"),
            ("2025-01-02", "1", "inf", "paper_pnl must be a number"),
            ("2025-01-02", "1_000", "2", "realized_pnl must be a number"),
            ("2025-01-02", "0x10", "2", "realized_pnl must be a number"),
            ("2025-01-02", 1, float("nan"), "paper_pnl must be a finite number"),
        ],
    )
    def test_invalid_entry(self, day, realized, paper, message):
        with pytest.raises(ValidationError, match=message):
            parse_entry_form(day, realized, paper)

    def test_datetime_day_becomes_date(self):
        day = parse_date(datetime(2025, 1, 2, 15, 30))

        assert type(day) is date
        assert day == date(2025, 1, 2)
        assert parse_entry_form(datetime(2025, 1, 2, 9, 0), 1, 2).date == date(2025, 1, 2)

    @given(
        day=st.dates(min_value=date(1900, 1, 1), max_value=date(2200, 12, 31)),
        realized=st.floats(allow_nan=False, allow_infinity=False),
        paper=st.floats(allow_nan=False, allow_infinity=False),
    )
    @settings(max_examples=50)
    def test_string_input_parses(self, day, realized, paper):
        entry = parse_entry_form(day.isoformat(), repr(realized), repr(paper))

        assert entry.date == day
        assert entry.realized_pnl == realized
        assert entry.paper_pnl == paper


class TestNAVForm:
    """
    **Feature: tradelog, NAV Form Validation**

    *For any* submission, the month must be 1-12 and the NAV greater than 0.
    """

    def test_valid_nav(self):
        assert parse_nav_form("2025", "3", "250000") == NAVDraft(year=2025, month=3, nav_value=250000)

    @given(month=st.integers().filter(lambda m: not 1 <= m <= 12))
    @settings(max_examples=30)
    def test_month_out_of_range(self, month):
        with pytest.raises(ValidationError, match="Must be between 1 and 12"):
            parse_nav_form(2025, month, 1000)

    @pytest.mark.parametrize("value", ["0", "-1", 0, -250000.0])
    def test_nav_must_be_positive(self, value):
        with pytest.raises(ValidationError, match="greater than 0"):
            parse_nav_form(2025, 1, value)

    @pytest.mark.parametrize(
        "year, month, value",
        [("", 1, 1), (2025, "", 1), (2025, 1, ""), ("20x5", 1, 1), (2025, "1.5", 1), (2025, "1_0", 1), (0, 1, 1)],
    )
    def test_invalid_fields(self, year, month, value):
        with pytest.raises(ValidationError):
            parse_nav_form(year, month, value)


class TestEntriesCSV:
    """
    **Feature: tradelog, Entries CSV Import**

    *For any* valid CSV, each row becomes an insert, or an update when its
    date is already stored.
    """

    def test_template_parses(self):
        plan = parse_entries_csv(csv_template("entries"), [])

        assert plan.kind == "entries"
        assert len(plan.inserts) == 2
        assert plan.updates == []
        assert plan.inserts[0].notes == "Opening week"
        assert plan.inserts[1].notes is None

    def test_existing_date_becomes_update(self):
        stored = TradingEntry(id="abc", date=date(2025, 1, 2), realized_pnl=1, paper_pnl=1)
        text = "date,realized_pnl,paper_pnl\n2025-01-02,5,6\n2025-01-03,7,8\n"

        plan = parse_entries_csv(text, [stored])

        assert [d.date for d in plan.inserts] == [date(2025, 1, 3)]
        assert len(plan.updates) == 1
        assert plan.updates[0].id == "abc"
        assert plan.updates[0].previous == stored
        assert plan.updates[0].draft.realized_pnl == 5

    def test_whitespace_and_column_order(self):
        text = " paper_pnl , date , realized_pnl \n 2 , 2025-01-02 , 1 \n"

        plan = parse_entries_csv(text, [])

        assert plan.inserts == [
            EntryDraft(date=date(2025, 1, 2), realized_pnl=1.0, paper_pnl=2.0)
        ]

    def test_quoted_notes(self):
        text = 'date,realized_pnl,paper_pnl,notes\n2025-01-02,1,2,"Scaled in, then out"\n'

        plan = parse_entries_csv(text, [])

        assert plan.inserts[0].notes == "Scaled in, then out"

    @pytest.mark.parametrize("text", ["", "   \n", "date,realized_pnl,paper_pnl\n"])
    def test_needs_header_and_data(self, text):
        with pytest.raises(ValidationError, match="at least a header row and one data row"):
            parse_entries_csv(text, [])

    def test_missing_column(self):
        with pytest.raises(ValidationError, match="Missing required column: paper_pnl"):
            parse_entries_csv("date,realized_pnl\n2025-01-02,1\n", [])

    def test_bad_row_reports_row_number(self):
        text = "date,realized_pnl,paper_pnl\n2025-01-02,1,2\n2025-01-03,oops,2\n"

        with pytest.raises(ValidationError) as exc_info:
            parse_entries_csv(text, [])

        assert exc_info.value.row == 2
        assert str(exc_info.value).startswith("Row 2: ")

    def test_short_row_rejected(self):
        text = "date,realized_pnl,paper_pnl\n2025-01-02,1\n"

        with pytest.raises(ValidationError, match="paper_pnl is required"):
            parse_entries_csv(text, [])

    @pytest.mark.parametrize(
        "text",
        [
            "date,realized_pnl,paper_pnl\n5,2025-01-02,1,2\n",
            "date,realized_pnl,paper_pnl\n2025-01-02,1,2\n2025-01-03,1,2,3\n",
        ],
    )
    def test_long_row_rejected(self, text):
        with pytest.raises(ValidationError, match="Row has more fields than the header"):
            parse_entries_csv(text, [])

    def test_duplicate_column_rejected(self):
        text = "date,realized_pnl,paper_pnl,date\n2025-01-02,1,2,2025-01-03\n"

        with pytest.raises(ValidationError, match="Duplicate column: date"):
            parse_entries_csv(text, [])

    def test_duplicate_date_in_file(self):
        text = "date,realized_pnl,paper_pnl\n2025-01-02,1,2\n2025-01-02,3,4\n"

        with pytest.raises(ValidationError, match="Duplicate date 2025-01-02") as exc_info:
            parse_entries_csv(text, [])

        assert exc_info.value.row == 2


class TestNAVCSV:
    """
    **Feature: tradelog, NAV CSV Import**

    *For any* valid CSV, each row becomes an insert, or an update when its
    month already has a NAV.
    """

    def test_template_parses(self):
        plan = parse_nav_csv(csv_template("nav"), [])

        assert plan.kind == "nav"
        assert [(d.year, d.month) for d in plan.inserts] == [(2025, 1), (2025, 2), (2025, 3)]

    def test_existing_month_becomes_update(self):
        stored = MonthlyNAV(id="n1", year=2025, month=2, nav_value=1000)
        text = "year,month,nav_value\n2025,2,1500\n2025,3,1600\n"

        plan = parse_nav_csv(text, [stored])

        assert [(d.year, d.month) for d in plan.inserts] == [(2025, 3)]
        assert plan.updates[0].id == "n1"
        assert plan.updates[0].draft.nav_value == 1500

    def test_invalid_month_row(self):
        text = "year,month,nav_value\n2025,13,1000\n"

        with pytest.raises(ValidationError, match="Row 1: Invalid month: 13"):
            parse_nav_csv(text, [])

    def test_long_row_rejected(self):
        text = "year,month,nav_value\n2025,1,2,250000\n"

        with pytest.raises(ValidationError, match="Row has more fields than the header"):
            parse_nav_csv(text, [])

    def test_duplicate_month_in_file(self):
        text = "year,month,nav_value\n2025,1,1000\n2025,1,2000\n"

        with pytest.raises(ValidationError, match="Duplicate month 2025-01"):
            parse_nav_csv(text, [])

    def test_unknown_template(self):
        with pytest.raises(ValidationError, match="Unknown upload type"):
            csv_template("trades")
