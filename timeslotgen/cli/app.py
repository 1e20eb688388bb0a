"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..adapters.records import format_instant, slots_to_json
from ..config import ScheduleSettings, get_default_config_path
from ..domain.civil_time import CivilTimeResolver, Zone
from ..domain.exceptions import TimeslotError
from ..domain.generator import TimeslotGenerator
from ..domain.models import Slot
from ..services.daily import DEFAULT_MAX_DAYS, DailyTimeslotGenerator

app = typer.Typer(
    name="timeslotgen",
    help="Generate timeslots from a declarative schedule description",
    add_completion=False
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_settings(config_file: Optional[Path]) -> ScheduleSettings:
    config_path = config_file or get_default_config_path()
    return ScheduleSettings.load_from_yaml(config_path)


def _render_slots(slots: List[Slot], timezone: Optional[str], as_json: bool, title: str) -> None:
    """Print slots as JSON records or as a table in the schedule's zone."""
    if as_json:
        typer.echo(slots_to_json(slots, indent=2))
        return

    if not slots:
        console.print("[yellow]⚠ No slots generated for this schedule.[/yellow]")
        return

    zone = Zone.from_optional(timezone)
    tzinfo = CivilTimeResolver().tzinfo(zone)
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column(f"Start ({zone})", style="bold yellow")
    table.add_column(f"End ({zone})")
    table.add_column("Minutes", justify="right")
    table.add_column("Label", style="dim")
    table.add_column("UTC", style="dim")

    for position, slot in enumerate(slots):
        index = slot.metadata.index if slot.metadata else position
        label = slot.metadata.label if slot.metadata and slot.metadata.label is not None else ""
        duration = slot.duration_minutes()
        minutes = str(int(duration)) if duration == int(duration) else f"{duration:.2f}"
        table.add_row(
            str(index),
            f"{slot.start.astimezone(tzinfo):%Y-%m-%d %H:%M}",
            f"{slot.end.astimezone(tzinfo):%Y-%m-%d %H:%M}",
            minutes,
            label,
            format_instant(slot.start),
        )

    console.print()
    console.print(table)
    console.print(f"\n[bold green]✓ {len(slots)} slot(s) generated[/bold green]\n")


@app.command()
def generate(
    config_file: Annotated[Optional[Path], typer.Argument(help="Schedule file. Defaults to ./timeslots.yaml")] = None,
    day: Annotated[Optional[str], typer.Option("--day", "-d", help="Day for time-only boundaries (YYYY-MM-DD)")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone, overrides the file")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON records instead of a table.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Generate the slots of a single day.

    Examples:

        timeslotgen generate timeslots.yaml --day 2024-01-15

        timeslotgen generate timeslots.yaml --timezone America/New_York --json
    """
    _configure_logging(verbose)

    try:
        settings = _load_settings(config_file)
        config = settings.to_generation_config(day=day, timezone=timezone)
        slots = TimeslotGenerator().generate(config)
    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
    except TimeslotError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    _render_slots(slots, config.timezone, as_json, title="Generated slots")


@app.command()
def daily(
    start: Annotated[str, typer.Option("--start", help="Period start (date, or datetime with offset)")],
    end: Annotated[str, typer.Option("--end", help="Period end (date, or datetime with offset)")],
    config_file: Annotated[Optional[Path], typer.Argument(help="Schedule file. Defaults to ./timeslots.yaml")] = None,
    max_days: Annotated[int, typer.Option("--max-days", help="Maximum number of days to iterate.")] = DEFAULT_MAX_DAYS,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="IANA timezone, overrides the file")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print JSON records instead of a table.")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
):
    """
    Generate slots for every day of a period.

    The schedule's range is applied to each day; slots that leave the period
    are dropped.

    Example:

        timeslotgen daily timeslots.yaml --start 2024-01-01 --end 2024-01-08
    """
    _configure_logging(verbose)

    try:
        settings = _load_settings(config_file)
        config = settings.to_daily_config(timezone=timezone)
        slots = DailyTimeslotGenerator().generate({"start": start, "end": end}, config, max_days=max_days)
    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
    except TimeslotError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    _render_slots(slots, config.timezone, as_json, title=f"Slots {start} → {end}")


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]timeslotgen[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
