"""Report commands for tradelog CLI.

Monthly P&L breakdown against end-of-month NAV, and the
year-to-date summary.
"""

from datetime import date
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradelog.cli.common import console, format_money, format_pnl, get_journal, get_settings


@click.command("monthly")
@click.option("--year", type=int, default=None, help="Only show this year.")
@click.pass_context
def monthly(ctx: click.Context, year: Optional[int]) -> None:
    """Show P&L totals and end-of-month NAV per month.

    Months with a NAV but no entries are listed with zero totals.

    \b
    Examples:
      tradelog monthly
      tradelog monthly --year 2025
    """
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    summaries = [s for s in journal.monthly if year is None or s.year == year]

    if not summaries:
        console.print(Panel(
            "[dim]No data available. Add some trading entries to see your performance.[/dim]",
            title="[bold]Monthly Breakdown[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Monthly Trading P&L vs End-of-Month NAV",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("Month", style="bold")
    table.add_column("Days", justify="right")
    table.add_column("Realized", justify="right")
    table.add_column("Paper", justify="right")
    table.add_column("NAV", justify="right")

    for summary in summaries:
        table.add_row(
            f"{summary.label} {summary.year}",
            str(summary.entry_count),
            format_pnl(summary.total_realized_pnl, settings.currency),
            format_pnl(summary.total_paper_pnl, settings.currency),
            format_money(summary.end_of_month_nav, settings.currency)
            if summary.has_nav
            else "[dim]-[/dim]",
        )

    console.print(table)


@click.command("ytd")
@click.option("--year", type=int, default=None, help="Year to summarize (default: current year).")
@click.pass_context
def ytd(ctx: click.Context, year: Optional[int]) -> None:
    """Show the year-to-date summary.

    \b
    Examples:
      tradelog ytd
      tradelog ytd --year 2025
    """
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    summary = journal.ytd(date.today().year if year is None else year)
    currency = settings.currency

    nav_note = "" if summary.has_nav else " [dim](default, none recorded)[/dim]"
    lines = [
        f"[bold]Year-to-Date Summary[/bold] ({summary.year})\n",
        f"YTD Realized P&L: {format_pnl(summary.total_realized_pnl, currency, 0)}",
        f"YTD Paper P&L:    {format_pnl(summary.total_paper_pnl, currency, 0)}",
        f"Current NAV:      [blue]{format_money(summary.current_nav, currency, 0)}[/blue]{nav_note}",
        f"Trading Days:     [magenta]{summary.trading_days}[/magenta]",
    ]

    if summary.months:
        best = max(summary.months, key=lambda s: s.total_realized_pnl)
        worst = min(summary.months, key=lambda s: s.total_realized_pnl)
        lines.append("")
        if best.total_realized_pnl > 0:
            lines.append(
                f"[bold]Best Month:[/bold]  {best.label} "
                f"{format_pnl(best.total_realized_pnl, currency, 0)}"
            )
        if worst.total_realized_pnl < 0:
            lines.append(
                f"[bold]Worst Month:[/bold] {worst.label} "
                f"{format_pnl(worst.total_realized_pnl, currency, 0)}"
            )

    console.print(Panel(
        "\n".join(lines),
        title="[bold cyan]YTD[/bold cyan]",
        border_style="cyan",
    ))
