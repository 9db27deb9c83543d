"""Validation of user input before it reaches the store."""

from tradelog.ingest.csv_import import (
    ImportPlan,
    csv_template,
    parse_entries_csv,
    parse_nav_csv,
)
from tradelog.ingest.forms import parse_date, parse_entry_form, parse_nav_form

__all__ = [
    "ImportPlan",
    "csv_template",
    "parse_entries_csv",
    "parse_nav_csv",
    "parse_date",
    "parse_entry_form",
    "parse_nav_form",
]
