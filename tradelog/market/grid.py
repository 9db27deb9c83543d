"""Month grid for the calendar view."""

import calendar
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Literal, NamedTuple, Optional

from tradelog.market.holidays import TradingHoliday, get_trading_holiday, is_weekend
from tradelog.models import TradingEntry
from tradelog.reports.monthly import dedupe_entries

DayStatus = Literal["profit", "loss", "neutral"]


class CalendarDay(NamedTuple):
    """One cell of the calendar grid."""

    date: date
    entry: Optional[TradingEntry]
    holiday: Optional[TradingHoliday]
    is_weekend: bool

    @property
    def is_trading_day(self) -> bool:
        return not self.is_weekend and self.holiday is None

    @property
    def status(self) -> Optional[DayStatus]:
        """Colour class of the day from its realized P&L."""
        if self.entry is None:
            return None
        if self.entry.realized_pnl > 0:
            return "profit"
        if self.entry.realized_pnl < 0:
            return "loss"
        return "neutral"


def month_grid(
    year: int,
    month: int,
    entries: Iterable[TradingEntry],
    holidays: Optional[Mapping[date, str]] = None,
) -> list[list[Optional[CalendarDay]]]:
    """Lay out a month as Sunday-first weeks.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        entries: Trading entries; only those in the month are used.
        holidays: Holiday table, defaults to the built-in one.

    Returns:
        Rows of seven cells; cells outside the month are None.
    """
    by_date = dedupe_entries(e for e in entries if (e.date.year, e.date.month) == (year, month))
    weeks = []
    for week in calendar.Calendar(firstweekday=calendar.SUNDAY).monthdatescalendar(year, month):
        row: list[Optional[CalendarDay]] = []
        for day in week:
            if day.month != month:
                row.append(None)
                continue
            row.append(
                CalendarDay(
                    date=day,
                    entry=by_date.get(day),
                    holiday=get_trading_holiday(day, holidays),
                    is_weekend=is_weekend(day),
                )
            )
        weeks.append(row)
    return weeks
