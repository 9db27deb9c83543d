"""Form-level validation for daily entries and monthly NAV.

Every parser raises ``ValidationError`` with a message suitable for showing
to the user. Values are never coerced to a default.
"""

import math
import re
from datetime import date, datetime
from typing import Optional, Union

from tradelog.errors import ValidationError
from tradelog.models import EntryDraft, NAVDraft

Number = Union[str, int, float]

# Signed decimal with optional exponent; no underscores, no nan/inf words
AMOUNT_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
INTEGER_PATTERN = re.compile(r"[+-]?\d+")


def parse_date(value: Union[str, date], field: str = "date") -> date:
    """Parse an ISO ``YYYY-MM-DD`` date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value!r}. Use YYYY-MM-DD") from None


def parse_amount(value: Optional[Number], field: str) -> float:
    """Parse a currency amount, rejecting blanks and non-finite values."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required")
    if isinstance(value, str) and not AMOUNT_PATTERN.fullmatch(value.strip()):
        raise ValidationError(f"{field} must be a number, got {value!r}")
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number, got {value!r}") from None
    if not math.isfinite(amount):
        raise ValidationError(f"{field} must be a finite number")
    return amount


def parse_int(value: Optional[Number], field: str) -> int:
    """Parse a whole number such as a year or month."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number")
    if isinstance(value, int):
        return value
    text = str(value if value is not None else "").strip()
    if not text:
        raise ValidationError(f"{field} is required")
    if not INTEGER_PATTERN.fullmatch(text):
        raise ValidationError(f"{field} must be a whole number, got {value!r}")
    return int(text)


def parse_entry_form(
    day: Union[str, date],
    realized_pnl: Optional[Number],
    paper_pnl: Optional[Number],
    notes: Optional[str] = None,
) -> EntryDraft:
    """Validate a daily entry submission.

    Args:
        day: Trading date.
        realized_pnl: Realized P&L.
        paper_pnl: Paper P&L.
        notes: Optional notes; blank notes are stored as None.

    Returns:
        Validated entry draft.

    Raises:
        ValidationError: If any field is missing or malformed.
    """
    notes = notes.strip() if notes else None
    return EntryDraft(
        date=parse_date(day),
        realized_pnl=parse_amount(realized_pnl, "realized_pnl"),
        paper_pnl=parse_amount(paper_pnl, "paper_pnl"),
        notes=notes or None,
    )


def parse_nav_form(
    year: Optional[Number], month: Optional[Number], nav_value: Optional[Number]
) -> NAVDraft:
    """Validate a monthly NAV submission.

    Raises:
        ValidationError: If the month is outside 1-12 or the NAV is not a
            number greater than 0.
    """
    year = parse_int(year, "year")
    month = parse_int(month, "month")
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}. Must be between 1 and 12.")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year: {year}")
    value = parse_amount(nav_value, "nav_value")
    if value <= 0:
        raise ValidationError("Please enter a valid NAV value greater than 0")
    return NAVDraft(year=year, month=month, nav_value=value)
