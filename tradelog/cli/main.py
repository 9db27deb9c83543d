"""Main CLI entry point for tradelog.

This module provides the main click group and lazy loading
of the command modules to keep startup fast.
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from tradelog.config import load_settings
from tradelog.errors import ConfigError


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when one of their commands
    is actually invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        cmd = None
        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if isinstance(attr, click.Command) and attr.name == cmd_name:
                cmd = attr
                break

        if cmd is None:
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(cmd)
        return cmd


LAZY_SUBCOMMANDS = {
    # Daily entries
    "add": "tradelog.cli.entries",
    "edit": "tradelog.cli.entries",
    "delete": "tradelog.cli.entries",
    "show": "tradelog.cli.entries",
    "entries": "tradelog.cli.entries",
    # Monthly NAV
    "nav": "tradelog.cli.nav",
    # Views
    "calendar": "tradelog.cli.calendar_view",
    "monthly": "tradelog.cli.reports",
    "ytd": "tradelog.cli.reports",
    # Bulk upload
    "upload": "tradelog.cli.upload",
    "template": "tradelog.cli.upload",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def setup_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradelog")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="TRADELOG_DB",
    default=None,
    help="Journal database file (overrides the config file).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.config/tradelog/config.toml).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    db_path: Optional[Path],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """tradelog - personal trading journal.

    Record daily realized and paper P&L, keep end-of-month NAV marks,
    and review them on a trading calendar and in monthly and YTD reports.

    \b
    Quick Start:
      tradelog add 2025-01-02 1250 -300   # Record a day
      tradelog nav set 2025 1 250000      # Set January's NAV
      tradelog calendar                   # This month's calendar
      tradelog ytd                        # Year-to-date summary
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["settings"] = load_settings(config_path, db_path=db_path)
    except ConfigError as e:
        from tradelog.cli.common import fail

        fail(f"[red]Invalid configuration:[/red]\n\n{e}", title="Configuration Error")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
