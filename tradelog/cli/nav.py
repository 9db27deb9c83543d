"""Monthly NAV commands for tradelog CLI."""

from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradelog.cli.common import console, fail, format_money, get_journal, get_settings
from tradelog.errors import StoreError, ValidationError
from tradelog.ingest import parse_nav_form
from tradelog.models import MONTH_LABELS


@click.group()
def nav() -> None:
    """Manage end-of-month NAV marks.

    Each month holds at most one NAV value; setting it again replaces it.

    \b
    Examples:
      tradelog nav set 2025 1 250000
      tradelog nav list
      tradelog nav list --year 2025
    """
    pass


@nav.command("set", context_settings={"ignore_unknown_options": True})
@click.argument("year")
@click.argument("month")
@click.argument("nav_value", metavar="VALUE")
@click.pass_context
def set_nav(ctx: click.Context, year: str, month: str, nav_value: str) -> None:
    """Set the end-of-month NAV for YEAR and MONTH (1-12)."""
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    try:
        draft = parse_nav_form(year, month, nav_value)
    except ValidationError as e:
        fail(f"[red]{e}[/red]", title="Invalid NAV")

    previous = journal.get_monthly_nav(draft.year, draft.month)
    try:
        record = journal.set_monthly_nav(draft.year, draft.month, draft.nav_value)
    except StoreError as e:
        fail(f"[red]Failed to save NAV:[/red]\n\n{e}")

    label = f"{MONTH_LABELS[record.month - 1]} {record.year}"
    value = format_money(record.nav_value, settings.currency)
    if previous is not None:
        was = format_money(previous.nav_value, settings.currency)
        console.print(f"[green]✓ Updated NAV for {label}: {value}[/green] [dim](was {was})[/dim]")
    else:
        console.print(f"[green]✓ Added NAV for {label}: {value}[/green]")


@nav.command("list")
@click.option("--year", type=int, default=None, help="Only show this year.")
@click.pass_context
def list_nav(ctx: click.Context, year: Optional[int]) -> None:
    """List recorded NAV marks, newest first."""
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    records = [n for n in journal.monthly_nav if year is None or n.year == year]

    if not records:
        console.print(Panel(
            "[dim]No NAV recorded[/dim]\n\n"
            "Run [cyan]tradelog nav set YEAR MONTH VALUE[/cyan] to add one.",
            title="[bold]Monthly NAV[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Monthly NAV",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Month", style="bold")
    table.add_column("NAV", justify="right")
    table.add_column("Updated", style="dim")

    for record in records:
        table.add_row(
            f"{MONTH_LABELS[record.month - 1]} {record.year}",
            format_money(record.nav_value, settings.currency),
            f"{record.updated_at:%Y-%m-%d %H:%M}" if record.updated_at else "-",
        )

    console.print(table)
