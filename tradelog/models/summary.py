"""Derived monthly and year-to-date summary models."""

from pydantic import BaseModel, Field

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


class MonthlySummary(BaseModel):
    """P&L totals and NAV mark for one calendar month."""

    year: int = Field(..., description="Calendar year")
    month: int = Field(..., ge=1, le=12, description="Calendar month (1-12)")
    total_realized_pnl: float = Field(default=0.0, description="Sum of realized P&L")
    total_paper_pnl: float = Field(default=0.0, description="Sum of paper P&L")
    end_of_month_nav: float = Field(
        default=0.0, ge=0, description="Recorded NAV, 0.0 when unset"
    )
    has_nav: bool = Field(default=False, description="Whether a NAV is recorded")
    entry_count: int = Field(default=0, ge=0, description="Distinct trading dates")

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        """Short month name, e.g. 'Jan'."""
        return MONTH_LABELS[self.month - 1]


class YTDSummary(BaseModel):
    """Year-to-date totals across the monthly summaries of one year."""

    year: int = Field(..., description="Calendar year")
    total_realized_pnl: float = Field(default=0.0, description="YTD realized P&L")
    total_paper_pnl: float = Field(default=0.0, description="YTD paper P&L")
    trading_days: int = Field(default=0, ge=0, description="Days with an entry")
    current_nav: float = Field(..., description="Latest recorded NAV or the default")
    has_nav: bool = Field(default=False, description="Whether current_nav was recorded")
    months: list[MonthlySummary] = Field(default_factory=list, description="Monthly breakdown")

    model_config = {"frozen": True}
