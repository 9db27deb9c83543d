"""Data models for tradelog."""

from tradelog.models.entry import EntryDraft, TradingEntry
from tradelog.models.nav import MonthlyNAV, NAVDraft
from tradelog.models.summary import MONTH_LABELS, MonthlySummary, YTDSummary

__all__ = [
    "TradingEntry",
    "EntryDraft",
    "MonthlyNAV",
    "NAVDraft",
    "MonthlySummary",
    "YTDSummary",
    "MONTH_LABELS",
]
