"""Helpers shared by the tradelog CLI commands."""

from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.panel import Panel

from tradelog.config import Settings
from tradelog.errors import StoreError
from tradelog.journal import TradingJournal
from tradelog.models import TradingEntry

console = Console()


def fail(message: str, title: str = "Error") -> NoReturn:
    """Print an error panel and exit with status 1."""
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def get_settings(ctx: click.Context) -> Settings:
    """Get the settings resolved by the root command."""
    return ctx.find_root().obj["settings"]


def get_journal(ctx: click.Context) -> TradingJournal:
    """Open the journal and load its current state.

    A store failure blocks the command with a single error panel; running
    the command again is the retry.
    """
    settings = get_settings(ctx)
    try:
        journal = TradingJournal.from_settings(settings)
        journal.refresh()
    except StoreError as e:
        fail(
            f"[red]Failed to load the journal:[/red]\n\n{e}\n\n"
            f"[dim]Check {settings.db_path} and run the command again to retry.[/dim]",
            title="Journal Unavailable",
        )
    return journal


def format_money(value: float, currency: str = "$", decimals: int = 2) -> str:
    """Format an amount like -$1,234.50."""
    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{abs(value):,.{decimals}f}"


def pnl_color(value: float) -> str:
    if value > 0:
        return "green"
    if value < 0:
        return "red"
    return "dim"


def format_pnl(value: float, currency: str = "$", decimals: int = 2) -> str:
    """Format a P&L amount with sign and colour markup."""
    color = pnl_color(value)
    sign = "+" if value > 0 else ""
    return f"[{color}]{sign}{format_money(value, currency, decimals)}[/{color}]"


def entry_panel(entry: TradingEntry, currency: str, title: Optional[str] = None) -> Panel:
    """Render one entry as a panel."""
    lines = [
        f"[bold]Date:[/bold]         {entry.date.isoformat()}",
        f"[bold]Realized P&L:[/bold] {format_pnl(entry.realized_pnl, currency)}",
        f"[bold]Paper P&L:[/bold]    {format_pnl(entry.paper_pnl, currency)}",
    ]
    if entry.notes:
        lines.append(f"\n[bold]Notes:[/bold]\n{entry.notes}")
    if entry.updated_at:
        lines.append(f"\n[dim]Last updated {entry.updated_at:%Y-%m-%d %H:%M}[/dim]")
    return Panel(
        "\n".join(lines),
        title=f"[bold cyan]{title or 'Daily Entry'}[/bold cyan]",
        border_style="cyan",
    )
