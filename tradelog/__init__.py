"""tradelog - personal trading journal for daily P&L and monthly NAV."""

__version__ = "0.1.0"
