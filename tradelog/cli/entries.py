"""Daily entry commands for tradelog CLI.

Handles adding, editing, deleting and listing daily P&L entries.
"""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradelog.cli.common import console, entry_panel, fail, format_pnl, get_journal, get_settings
from tradelog.errors import DuplicateEntryError, EntryNotFoundError, StoreError, ValidationError
from tradelog.market import get_trading_holiday, is_weekend


@click.command("add", context_settings={"ignore_unknown_options": True})
@click.argument("day", metavar="DATE")
@click.argument("realized_pnl", metavar="REALIZED")
@click.argument("paper_pnl", metavar="PAPER")
@click.option("--notes", "-n", default=None, help="Notes or highlights for the day.")
@click.pass_context
def add_entry(
    ctx: click.Context,
    day: str,
    realized_pnl: str,
    paper_pnl: str,
    notes: Optional[str],
) -> None:
    """Record realized and paper P&L for a day.

    DATE is YYYY-MM-DD. If the date already has an entry, that entry is
    shown instead; use 'tradelog edit' to change it.

    \b
    Examples:
      tradelog add 2025-01-02 1250.00 -300
      tradelog add 2025-01-03 -420.50 150 --notes "Stopped out early"
    """
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    try:
        entry = journal.add_entry(day, realized_pnl, paper_pnl, notes)
    except ValidationError as e:
        fail(f"[red]{e}[/red]", title="Invalid Entry")
    except DuplicateEntryError as e:
        console.print(
            f"[yellow]An entry for {e.existing.date.isoformat()} already exists.[/yellow] "
            f"Use [cyan]tradelog edit {e.existing.date.isoformat()}[/cyan] to change it.\n"
        )
        console.print(entry_panel(e.existing, settings.currency, title="Existing Entry"))
        return
    except StoreError as e:
        fail(f"[red]Failed to add entry:[/red]\n\n{e}")

    console.print(f"[green]✓ Added entry for {entry.date.isoformat()}[/green]")
    if is_weekend(entry.date):
        console.print("[yellow]Note: this date falls on a weekend.[/yellow]")
    holiday = get_trading_holiday(entry.date, journal.holidays)
    if holiday:
        console.print(f"[yellow]Note: the market was closed for {holiday.name}.[/yellow]")


@click.command("edit")
@click.argument("day", metavar="DATE")
@click.option("--realized", "realized_pnl", default=None, help="New realized P&L.")
@click.option("--paper", "paper_pnl", default=None, help="New paper P&L.")
@click.option("--notes", "-n", default=None, help="New notes (empty string clears them).")
@click.pass_context
def edit_entry(
    ctx: click.Context,
    day: str,
    realized_pnl: Optional[str],
    paper_pnl: Optional[str],
    notes: Optional[str],
) -> None:
    """Change the entry recorded for a date.

    \b
    Examples:
      tradelog edit 2025-01-02 --realized 1300
      tradelog edit 2025-01-02 --notes ""
    """
    if realized_pnl is None and paper_pnl is None and notes is None:
        fail("[red]Nothing to change.[/red] Pass --realized, --paper or --notes.")

    settings = get_settings(ctx)
    journal = get_journal(ctx)

    try:
        entry = journal.update_entry(day, realized_pnl, paper_pnl, notes)
    except (ValidationError, EntryNotFoundError) as e:
        fail(f"[red]{e}[/red]")
    except StoreError as e:
        fail(f"[red]Failed to update entry:[/red]\n\n{e}")

    console.print(entry_panel(entry, settings.currency, title="Entry Updated"))


@click.command("delete")
@click.argument("day", metavar="DATE")
@click.option("--yes", "-y", is_flag=True, default=False, help="Do not ask for confirmation.")
@click.pass_context
def delete_entry(ctx: click.Context, day: str, yes: bool) -> None:
    """Delete the entry recorded for a date."""
    journal = get_journal(ctx)

    try:
        entry = journal.get_entry(day)
    except ValidationError as e:
        fail(f"[red]{e}[/red]")
    if entry is None:
        fail(f"[red]No entry for {day}[/red]")

    if not yes and not click.confirm(f"Delete the entry for {entry.date.isoformat()}?"):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        journal.delete_entry(entry.date)
    except (EntryNotFoundError, StoreError) as e:
        fail(f"[red]Failed to delete entry:[/red]\n\n{e}")

    console.print(f"[green]✓ Deleted entry for {entry.date.isoformat()}[/green]")


@click.command("show")
@click.argument("day", metavar="DATE")
@click.pass_context
def show_entry(ctx: click.Context, day: str) -> None:
    """Show the entry recorded for a date."""
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    try:
        entry = journal.get_entry(day)
    except ValidationError as e:
        fail(f"[red]{e}[/red]")

    if entry is None:
        console.print(Panel(
            f"[dim]No entry for {day}[/dim]\n\n"
            f"Run [cyan]tradelog add {day} REALIZED PAPER[/cyan] to record one.",
            title="[bold]Daily Entry[/bold]",
            border_style="dim",
        ))
        return

    console.print(entry_panel(entry, settings.currency))


@click.command("entries")
@click.option("--year", type=int, default=None, help="Only show this year.")
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Only show this month.")
@click.pass_context
def list_entries(ctx: click.Context, year: Optional[int], month: Optional[int]) -> None:
    """List daily entries, newest first.

    \b
    Examples:
      tradelog entries
      tradelog entries --year 2025 --month 1
    """
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    entries = [
        e for e in journal.entries
        if (year is None or e.date.year == year) and (month is None or e.date.month == month)
    ]

    if not entries:
        console.print(Panel(
            "[dim]No entries found[/dim]",
            title="[bold]Trading Entries[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Trading Entries",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Date", style="bold")
    table.add_column("Realized", justify="right")
    table.add_column("Paper", justify="right")
    table.add_column("Notes", max_width=30)

    total_realized = 0.0
    total_paper = 0.0

    for entry in entries:
        table.add_row(
            entry.date.isoformat(),
            format_pnl(entry.realized_pnl, settings.currency),
            format_pnl(entry.paper_pnl, settings.currency),
            (entry.notes[:27] + "...") if entry.notes and len(entry.notes) > 30 else (entry.notes or "-"),
        )
        total_realized += entry.realized_pnl
        total_paper += entry.paper_pnl

    console.print(table)
    console.print(f"\n[bold]Entries:[/bold] {len(entries)}")
    console.print(f"[bold]Realized P&L:[/bold] {format_pnl(total_realized, settings.currency)}")
    console.print(f"[bold]Paper P&L:[/bold] {format_pnl(total_paper, settings.currency)}")
