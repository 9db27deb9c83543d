"""Bulk CSV upload commands for tradelog CLI.

Uploads are previewed before anything is written. Rows matching a
stored record are shown as updates with the value they replace.
"""

import click
from rich.panel import Panel
from rich.table import Table

from tradelog.cli.common import console, fail, format_money, format_pnl, get_journal, get_settings
from tradelog.errors import DuplicateEntryError, EntryNotFoundError, StoreError, ValidationError
from tradelog.ingest import ImportPlan, csv_template
from tradelog.models import MONTH_LABELS

UPLOAD_KINDS = click.Choice(["entries", "nav"])


def _preview(plan: ImportPlan, currency: str) -> Table:
    """Build the preview table of an import plan."""
    table = Table(
        title=f"Upload Preview ({plan.kind})",
        show_header=True,
        header_style="bold cyan",
    )

    if plan.kind == "entries":
        table.add_column("Date", style="bold")
        table.add_column("Realized", justify="right")
        table.add_column("Paper", justify="right")
        table.add_column("Action")

        for draft in plan.inserts:
            table.add_row(
                draft.date.isoformat(),
                format_pnl(draft.realized_pnl, currency),
                format_pnl(draft.paper_pnl, currency),
                "[green]new[/green]",
            )
        for update in plan.updates:
            was = (
                f"{format_money(update.previous.realized_pnl, currency)} / "
                f"{format_money(update.previous.paper_pnl, currency)}"
            )
            table.add_row(
                update.draft.date.isoformat(),
                format_pnl(update.draft.realized_pnl, currency),
                format_pnl(update.draft.paper_pnl, currency),
                f"[yellow]update[/yellow] [dim](was {was})[/dim]",
            )
    else:
        table.add_column("Month", style="bold")
        table.add_column("NAV", justify="right")
        table.add_column("Action")

        for draft in plan.inserts:
            table.add_row(
                f"{MONTH_LABELS[draft.month - 1]} {draft.year}",
                format_money(draft.nav_value, currency),
                "[green]new[/green]",
            )
        for update in plan.updates:
            was = format_money(update.previous.nav_value, currency)
            table.add_row(
                f"{MONTH_LABELS[update.draft.month - 1]} {update.draft.year}",
                format_money(update.draft.nav_value, currency),
                f"[yellow]update[/yellow] [dim](was {was})[/dim]",
            )

    return table


@click.command("upload")
@click.argument("kind", type=UPLOAD_KINDS)
@click.argument("csv_file", metavar="FILE", type=click.File("r", encoding="utf-8-sig"))
@click.option("--yes", "-y", is_flag=True, default=False, help="Apply without asking for confirmation.")
@click.pass_context
def upload(ctx: click.Context, kind: str, csv_file, yes: bool) -> None:
    """Import daily entries or monthly NAV from a CSV file.

    Use 'tradelog template entries' or 'tradelog template nav' to get
    the expected columns. Rows for dates (or months) that already have
    a record replace that record.

    \b
    Examples:
      tradelog upload entries january.csv
      tradelog upload nav nav.csv --yes
      tradelog template entries > entries.csv
    """
    settings = get_settings(ctx)
    journal = get_journal(ctx)

    try:
        plan = journal.plan_import(kind, csv_file.read())
    except ValidationError as e:
        fail(f"[red]{e}[/red]", title="Invalid CSV")

    console.print(_preview(plan, settings.currency))
    console.print(
        f"\n[bold]{len(plan.inserts)}[/bold] new, "
        f"[bold]{len(plan.updates)}[/bold] to update"
    )

    if not yes and not click.confirm("Apply this upload?"):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        inserted, updated = journal.apply_import(plan)
    except (StoreError, DuplicateEntryError, EntryNotFoundError) as e:
        fail(f"[red]Upload failed:[/red]\n\n{e}")

    console.print(Panel(
        f"[green]✓ Uploaded {kind}[/green]\n\n"
        f"Inserted: {inserted}\n"
        f"Updated:  {updated}",
        title="[bold green]Upload Complete[/bold green]",
        border_style="green",
    ))


@click.command("template")
@click.argument("kind", type=UPLOAD_KINDS)
def template(kind: str) -> None:
    """Print a CSV template for an upload.

    \b
    Examples:
      tradelog template entries > entries.csv
      tradelog template nav > nav.csv
    """
    click.echo(csv_template(kind), nl=False)
