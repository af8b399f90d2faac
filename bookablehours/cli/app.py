"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookableHoursError
from ..domain.models import describe_rule
from ..services.availability_service import AvailabilityService

app = typer.Typer(
    name="bookablehours",
    help="Materialize bookable time intervals from weekly availability rules",
    add_completion=False
)

console = Console()


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config_path = config_file or get_default_config_path()
    return AppConfig.load_from_yaml(config_path)


def _determine_date_range(
    *,
    tz: str,
    range_days: int,
    next_week: bool,
    start_option: Optional[str],
    end_option: Optional[str]
):
    """
    Resolve the requested window into UTC-midnight instants.

    Returns (date_from, date_to) with date_to exclusive.
    """
    if next_week:
        today = pendulum.now(tz)
        next_monday = today.next(pendulum.MONDAY)
        start_date = pendulum.datetime(next_monday.year, next_monday.month, next_monday.day, tz="UTC")
        return start_date, start_date.add(days=7)

    if start_option:
        try:
            start_date = pendulum.from_format(start_option, "YYYY-MM-DD", tz="UTC")
        except ValueError as e:
            console.print(f"[red]Could not parse start date: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        today = pendulum.now(tz)
        start_date = pendulum.datetime(today.year, today.month, today.day, tz="UTC")

    if end_option:
        try:
            end_date = pendulum.from_format(end_option, "YYYY-MM-DD", tz="UTC")
        except ValueError as e:
            console.print(f"[red]Could not parse end date: {escape(str(e))}[/red]")
            raise typer.Exit(1)
    else:
        end_date = start_date.add(days=range_days)

    return start_date, end_date


@app.command()
def materialize(
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")] = None,
    rules_file: Annotated[Optional[Path], typer.Option("--rules", "-r", help="JSON file with availability records")] = None,
    timezone: Annotated[Optional[str], typer.Option("--timezone", "-t", help="Target timezone, overrides the config")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD)")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD), exclusive")] = None,
    next_week: Annotated[bool, typer.Option("--next-week", help="Materialize the coming week (Monday to Sunday).")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """
    Materialize bookable intervals for a date range.

    Examples:

        bookablehours materialize

        bookablehours materialize --start 2024-01-01 --end 2024-01-08

        bookablehours materialize --rules availability.json --timezone America/New_York
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = _load_config(config_file)
        tz = timezone or config.timezone

        date_from, date_to = _determine_date_range(
            tz=tz,
            range_days=config.defaults.range_days,
            next_week=next_week,
            start_option=start,
            end_option=end
        )

        service = AvailabilityService(
            rule_source=config.get_rule_source(rules_file),
            max_range_days=config.defaults.max_range_days,
        )

        intervals = service.get_availability(
            timezone=tz,
            date_from=date_from,
            date_to=date_to,
        )

        console.print(
            f"\n[bold cyan]Availability[/bold cyan] {date_from.format('YYYY-MM-DD')} "
            f"- {date_to.format('YYYY-MM-DD')} (exclusive) in [bold]{tz}[/bold]\n"
        )

        if not intervals:
            console.print("[yellow]No bookable intervals in this range.[/yellow]\n")
            return

        table = Table(show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold yellow")
        table.add_column("Weekday")
        table.add_column("Start")
        table.add_column("End")
        table.add_column("Minutes", justify="right", style="dim")

        for day, day_intervals in service.group_by_date(intervals).items():
            for interval in day_intervals:
                table.add_row(
                    day,
                    interval.weekday_name(),
                    interval.start.format("HH:mm"),
                    interval.end.format("HH:mm"),
                    str(interval.duration_minutes()),
                )

        console.print(table)
        console.print(f"\n[bold green]✓ {len(intervals)} interval(s)[/bold green]\n")

    except (FileNotFoundError, ValueError, BookableHoursError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def show_rules(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    ),
    rules_file: Optional[Path] = typer.Option(
        None,
        "--rules", "-r",
        help="JSON file with availability records"
    )
):
    """
    List the availability rules in effect.
    """
    try:
        config = _load_config(config_file)
        rules = config.get_rule_source(rules_file).load_rules()

        if not rules:
            console.print("[yellow]No availability rules defined.[/yellow]")
            return

        table = Table(
            title="Availability rules",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Kind", style="bold yellow")
        table.add_column("Rule")

        for rule in rules:
            table.add_row(
                "override" if rule.is_override() else "weekly",
                describe_rule(rule)
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, BookableHoursError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]bookablehours[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
