"""Trading calendar command for tradelog CLI."""

from datetime import date
from typing import Optional

import click
from rich.table import Table

from tradelog.cli.common import console, fail, format_money, format_pnl, get_journal, get_settings
from tradelog.market import CalendarDay
from tradelog.models import MONTH_LABELS

WEEKDAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

STATUS_STYLES = {
    "profit": "green",
    "loss": "red",
    "neutral": "yellow",
}


def _cell(day: Optional[CalendarDay], currency: str) -> str:
    """Render one day of the grid."""
    if day is None:
        return ""

    style = STATUS_STYLES.get(day.status, "")
    number = f"[bold {style}]{day.date.day}[/bold {style}]" if style else f"[bold]{day.date.day}[/bold]"
    lines = [number]

    if day.holiday is not None:
        lines.append(f"[magenta]{day.holiday.name}[/magenta]")
    elif day.is_weekend:
        lines.append("[dim]Weekend[/dim]")

    if day.entry is not None:
        lines.append(f"R: {format_pnl(day.entry.realized_pnl, currency, 0)}")
        lines.append(f"P: {format_pnl(day.entry.paper_pnl, currency, 0)}")

    return "\n".join(lines)


@click.command("calendar")
@click.option("--year", type=int, default=None, help="Year (default: current year).")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Month 1-12 (default: current month).")
@click.pass_context
def calendar_cmd(ctx: click.Context, year: Optional[int], month: Optional[int]) -> None:
    """Show a month of trading entries on a calendar.

    Days are coloured by realized P&L: green for profit, red for loss,
    yellow for flat. Weekends and market holidays are labelled.

    \b
    Examples:
      tradelog calendar
      tradelog calendar --year 2025 --month 7
    """
    today = date.today()
    year = today.year if year is None else year
    month = today.month if month is None else month
    if not 1 <= year <= 9999:
        fail(f"[red]Invalid year: {year}[/red]")

    settings = get_settings(ctx)
    journal = get_journal(ctx)
    currency = settings.currency

    table = Table(
        title=f"{MONTH_LABELS[month - 1]} {year}",
        show_header=True,
        header_style="bold cyan",
        show_lines=True,
    )
    for name in WEEKDAYS:
        table.add_column(name, justify="left")

    for week in journal.calendar(year, month):
        table.add_row(*(_cell(day, currency) for day in week))

    console.print(table)

    summary = next((s for s in journal.monthly if (s.year, s.month) == (year, month)), None)
    if summary is None:
        console.print("[dim]No entries or NAV recorded for this month.[/dim]")
        return

    console.print(
        f"\n[bold]Trading Days:[/bold] {summary.entry_count}   "
        f"[bold]Realized:[/bold] {format_pnl(summary.total_realized_pnl, currency)}   "
        f"[bold]Paper:[/bold] {format_pnl(summary.total_paper_pnl, currency)}"
    )
    if summary.has_nav:
        console.print(f"[bold]End-of-Month NAV:[/bold] [blue]{format_money(summary.end_of_month_nav, currency)}[/blue]")
    else:
        console.print("[bold]End-of-Month NAV:[/bold] [dim]not set[/dim]")
