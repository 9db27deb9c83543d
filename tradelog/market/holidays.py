"""NASDAQ trading holidays and the trading-day predicate.

The holiday table is static reference data and has to be extended for each
new calendar year, either here or through the ``[holidays]`` section of the
config file. Dates in years the table does not cover count as trading days
unless they fall on a weekend.
"""

from collections.abc import Mapping
from datetime import date, datetime
from typing import NamedTuple, Optional, Union

DateLike = Union[date, str]


class TradingHoliday(NamedTuple):
    """A named market holiday."""

    date: date
    name: str


TRADING_HOLIDAYS: dict[date, str] = {
    # 2024
    date(2024, 1, 1): "New Year's Day",
    date(2024, 1, 15): "Martin Luther King Jr. Day",
    date(2024, 2, 19): "Presidents' Day",
    date(2024, 3, 29): "Good Friday",
    date(2024, 5, 27): "Memorial Day",
    date(2024, 6, 19): "Juneteenth",
    date(2024, 7, 4): "Independence Day",
    date(2024, 9, 2): "Labor Day",
    date(2024, 11, 28): "Thanksgiving Day",
    date(2024, 12, 25): "Christmas Day",
    # 2025
    date(2025, 1, 1): "New Year's Day",
    date(2025, 1, 20): "Martin Luther King Jr. Day",
    date(2025, 2, 17): "Presidents' Day",
    date(2025, 4, 18): "Good Friday",
    date(2025, 5, 26): "Memorial Day",
    date(2025, 6, 19): "Juneteenth",
    date(2025, 7, 4): "Independence Day",
    date(2025, 9, 1): "Labor Day",
    date(2025, 11, 27): "Thanksgiving Day",
    date(2025, 12, 25): "Christmas Day",
    # 2026
    date(2026, 1, 1): "New Year's Day",
    date(2026, 1, 19): "Martin Luther King Jr. Day",
    date(2026, 2, 16): "Presidents' Day",
    date(2026, 4, 3): "Good Friday",
    date(2026, 5, 25): "Memorial Day",
    date(2026, 6, 19): "Juneteenth",
    date(2026, 7, 3): "Independence Day (observed)",
    date(2026, 9, 7): "Labor Day",
    date(2026, 11, 26): "Thanksgiving Day",
    date(2026, 12, 25): "Christmas Day",
}


def _to_date(day: DateLike) -> date:
    if isinstance(day, str):
        return date.fromisoformat(day)
    if isinstance(day, datetime):
        return day.date()
    return day


def holiday_table(extra: Optional[Mapping[date, str]] = None) -> dict[date, str]:
    """Build the holiday table, adding configured holidays.

    Args:
        extra: Additional holidays; these override built-in names.

    Returns:
        New mapping of date to holiday name.
    """
    table = dict(TRADING_HOLIDAYS)
    if extra:
        table.update(extra)
    return table


def is_weekend(day: DateLike) -> bool:
    """Check whether a date is a Saturday or Sunday."""
    return _to_date(day).weekday() >= 5  # Saturday = 5, Sunday = 6


def get_trading_holiday(
    day: DateLike, holidays: Optional[Mapping[date, str]] = None
) -> Optional[TradingHoliday]:
    """Look up the market holiday falling on a date.

    Args:
        day: Date or ISO ``YYYY-MM-DD`` string.
        holidays: Holiday table, defaults to ``TRADING_HOLIDAYS``.

    Returns:
        The holiday, or None if the market is not closed for one.
    """
    table = TRADING_HOLIDAYS if holidays is None else holidays
    day = _to_date(day)
    name = table.get(day)
    if name is None:
        return None
    return TradingHoliday(date=day, name=name)


def is_trading_day(
    day: DateLike, holidays: Optional[Mapping[date, str]] = None
) -> bool:
    """Check whether the market is open on a date.

    Args:
        day: Date or ISO ``YYYY-MM-DD`` string.
        holidays: Holiday table, defaults to ``TRADING_HOLIDAYS``.

    Returns:
        True unless the date is a weekend or a listed holiday.
    """
    return not is_weekend(day) and get_trading_holiday(day, holidays) is None
