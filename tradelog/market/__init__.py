"""Market calendar: weekends, trading holidays and month grids."""

from tradelog.market.grid import CalendarDay, month_grid
from tradelog.market.holidays import (
    TRADING_HOLIDAYS,
    TradingHoliday,
    get_trading_holiday,
    holiday_table,
    is_trading_day,
    is_weekend,
)

__all__ = [
    "CalendarDay",
    "month_grid",
    "TRADING_HOLIDAYS",
    "TradingHoliday",
    "get_trading_holiday",
    "holiday_table",
    "is_trading_day",
    "is_weekend",
]
