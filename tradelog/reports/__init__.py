"""Monthly and year-to-date P&L reporting."""

from tradelog.reports.monthly import (
    aggregate_monthly,
    dedupe_entries,
    latest_nav,
    summarize_ytd,
)

__all__ = [
    "aggregate_monthly",
    "dedupe_entries",
    "latest_nav",
    "summarize_ytd",
]
