"""MonthlyNAV data model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class NAVDraft(BaseModel):
    """An end-of-month NAV mark before it is stored."""

    year: int = Field(..., ge=1, le=9999, description="Calendar year")
    month: int = Field(..., ge=1, le=12, description="Calendar month (1-12)")
    nav_value: float = Field(..., gt=0, description="End-of-month net asset value")

    model_config = {"frozen": True}


class MonthlyNAV(NAVDraft):
    """Represents the recorded NAV for one month."""

    id: str = Field(..., min_length=1, description="Store-assigned identifier")
    created_at: Optional[datetime] = Field(default=None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp")
