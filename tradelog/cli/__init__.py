"""CLI commands for tradelog.

This package provides the command-line interface for recording daily
entries and monthly NAV, and for viewing the calendar and P&L reports.
"""

from tradelog.cli.main import cli, main

__all__ = ["cli", "main"]
