"""Bulk CSV import of trading entries and monthly NAV.

Rows whose key matches a stored record (the date for entries, the
(year, month) pair for NAV) are planned as updates of that record; all
other rows are planned as inserts.
"""

import io
from collections.abc import Iterable
from typing import Literal, Union

import pandas as pd
from pydantic import BaseModel, Field

from tradelog.errors import ValidationError
from tradelog.ingest.forms import parse_entry_form, parse_nav_form
from tradelog.models import EntryDraft, MonthlyNAV, NAVDraft, TradingEntry

ENTRY_COLUMNS = ["date", "realized_pnl", "paper_pnl"]
NAV_COLUMNS = ["year", "month", "nav_value"]

TEMPLATES = {
    "entries": (
        "date,realized_pnl,paper_pnl,notes\n"
        "2025-01-02,1250.00,-300.00,Opening week\n"
        "2025-01-03,-420.50,150.00,\n"
    ),
    "nav": (
        "year,month,nav_value\n"
        "2025,1,250000.00\n"
        "2025,2,275000.00\n"
        "2025,3,290000.00\n"
    ),
}


class ImportUpdate(BaseModel):
    """A CSV row that replaces the values of a stored record."""

    id: str = Field(..., description="ID of the stored record")
    draft: Union[EntryDraft, NAVDraft] = Field(..., description="New values from the CSV")
    previous: Union[TradingEntry, MonthlyNAV] = Field(..., description="Stored record")

    model_config = {"frozen": True}


class ImportPlan(BaseModel):
    """Rows of a CSV upload split into inserts and updates."""

    kind: Literal["entries", "nav"] = Field(..., description="What the CSV holds")
    inserts: list[Union[EntryDraft, NAVDraft]] = Field(default_factory=list)
    updates: list[ImportUpdate] = Field(default_factory=list)

    model_config = {"frozen": True}


def csv_template(kind: str) -> str:
    """Get the CSV template text for ``"entries"`` or ``"nav"``."""
    try:
        return TEMPLATES[kind]
    except KeyError:
        raise ValidationError(f"Unknown upload type: {kind!r}") from None


def _reject_long_row(fields: list[str]) -> None:
    raise ValidationError(f"Row has more fields than the header: {','.join(fields)}")


def _read_csv(text: str, required: list[str]) -> pd.DataFrame:
    """Read CSV text as strings and check the required columns.

    The header row is read as data so that pandas never infers a row
    index from rows longer than the header; such rows are rejected.
    """
    if not text.strip():
        raise ValidationError("CSV must have at least a header row and one data row")
    try:
        raw = pd.read_csv(
            io.StringIO(text.strip()),
            header=None,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            engine="python",
            on_bad_lines=_reject_long_row,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise ValidationError(f"Failed to parse CSV: {e}") from e

    header = [str(column).strip() for column in raw.iloc[0].fillna("")]
    for column in required:
        if column not in header:
            raise ValidationError(f"Missing required column: {column}")
    duplicated = sorted({column for column in header if header.count(column) > 1})
    if duplicated:
        raise ValidationError(f"Duplicate column: {duplicated[0]}")

    frame = raw.iloc[1:].reset_index(drop=True)
    frame.columns = header
    if frame.empty:
        raise ValidationError("CSV must have at least a header row and one data row")
    return frame.fillna("").apply(lambda column: column.str.strip())


def _row_error(row: int, error: ValidationError) -> ValidationError:
    return ValidationError(str(error), row=row)


def parse_entries_csv(text: str, existing: Iterable[TradingEntry]) -> ImportPlan:
    """Parse a ``date,realized_pnl,paper_pnl[,notes]`` CSV.

    Args:
        text: CSV content including the header row.
        existing: Entries already stored.

    Returns:
        Import plan with one insert or update per row.

    Raises:
        ValidationError: On a structural problem or the first invalid row.
    """
    frame = _read_csv(text, ENTRY_COLUMNS)
    by_date = {entry.date: entry for entry in existing}
    has_notes = "notes" in frame.columns

    inserts = []
    updates = []
    seen = set()
    for row_number, record in enumerate(frame.to_dict("records"), start=1):
        try:
            draft = parse_entry_form(
                record["date"],
                record["realized_pnl"],
                record["paper_pnl"],
                record["notes"] if has_notes else None,
            )
        except ValidationError as e:
            raise _row_error(row_number, e) from None

        if draft.date in seen:
            raise ValidationError(f"Duplicate date {draft.date.isoformat()} in CSV", row=row_number)
        seen.add(draft.date)

        stored = by_date.get(draft.date)
        if stored is None:
            inserts.append(draft)
        else:
            updates.append(ImportUpdate(id=stored.id, draft=draft, previous=stored))

    return ImportPlan(kind="entries", inserts=inserts, updates=updates)


def parse_nav_csv(text: str, existing: Iterable[MonthlyNAV]) -> ImportPlan:
    """Parse a ``year,month,nav_value`` CSV.

    Args:
        text: CSV content including the header row.
        existing: NAV records already stored.

    Returns:
        Import plan with one insert or update per row.

    Raises:
        ValidationError: On a structural problem or the first invalid row.
    """
    frame = _read_csv(text, NAV_COLUMNS)
    by_month = {(nav.year, nav.month): nav for nav in existing}

    inserts = []
    updates = []
    seen = set()
    for row_number, record in enumerate(frame.to_dict("records"), start=1):
        try:
            draft = parse_nav_form(record["year"], record["month"], record["nav_value"])
        except ValidationError as e:
            raise _row_error(row_number, e) from None

        key = (draft.year, draft.month)
        if key in seen:
            raise ValidationError(
                f"Duplicate month {draft.year}-{draft.month:02d} in CSV", row=row_number
            )
        seen.add(key)

        stored = by_month.get(key)
        if stored is None:
            inserts.append(draft)
        else:
            updates.append(ImportUpdate(id=stored.id, draft=draft, previous=stored))

    return ImportPlan(kind="nav", inserts=inserts, updates=updates)
