"""TradingEntry data model."""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class EntryDraft(BaseModel):
    """A daily entry as submitted, before the store assigns an id."""

    date: date_type = Field(..., description="Trading date")
    realized_pnl: float = Field(..., description="Realized P&L from closed positions")
    paper_pnl: float = Field(..., description="Unrealized P&L on open positions")
    notes: Optional[str] = Field(default=None, description="User notes")

    model_config = {"frozen": True}


class TradingEntry(EntryDraft):
    """Represents one day's realized and paper P&L."""

    id: str = Field(..., min_length=1, description="Store-assigned identifier")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
