"""
Main CLI application for the WOD scraper.

Provides the primary command-line interface for:
- Extracting the WOD from a saved page
- Scraping, structuring and scheduling a day's WOD
- Inspecting tracks and team schedules
- Managing configuration
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from wod_scraper import __version__
from wod_scraper.config import Settings, get_default_config_path, load_config
from wod_scraper.core.exceptions import APIAuthenticationError, WodScraperError
from wod_scraper.extraction import extract_wod_details
from wod_scraper.pipeline import DailyScrapePipeline, ScrapeStatus
from wod_scraper.scraper import WodPageFetcher, generate_wod_url
from wod_scraper.utils.dates import current_date, parse_date
from wod_scraper.utils.logging import get_logger, setup_logging

app = typer.Typer(
    name="wod-scraper",
    help="WOD Scraper - Extract, structure and schedule the daily workout",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
logger = get_logger(__name__)

# logging is configured once settings are loaded
_cli_state = {"verbose": False}

STATUS_STYLES = {
    ScrapeStatus.COMPLETED: "green",
    ScrapeStatus.REST_DAY: "cyan",
    ScrapeStatus.NO_CONTENT: "yellow",
    ScrapeStatus.FAILED: "red",
}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]WOD Scraper[/bold blue] v{__version__}")
        raise typer.Exit()


def _parse_date_option(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


def _load_settings(config_file: Optional[Path]) -> Settings:
    settings = load_config(config_file or get_default_config_path())
    setup_logging(settings.logging, level="DEBUG" if _cli_state["verbose"] else None)
    return settings


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """
    WOD Scraper - Extract, structure and schedule the daily workout.

    Use 'wod-scraper --help' for command list.
    """
    _cli_state["verbose"] = verbose


@app.command()
def extract(
    html_file: Path = typer.Argument(
        ...,
        help="Saved WOD page",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print {wodText, isRestDay} as JSON",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    Extract the WOD from a local HTML file.

    Examples:
        wod-scraper extract page.html
        wod-scraper extract page.html --json
    """
    try:
        settings = _load_settings(config_file)
        details = extract_wod_details(
            html_file.read_bytes(), settings.extraction)
    except (OSError, WodScraperError) as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Extraction failed")
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(details.to_dict()))
        return

    if details.wod_text is None:
        console.print("[yellow]No WOD found on this page[/yellow]")
        return

    title = "Rest Day" if details.is_rest_day else "Workout of the Day"
    console.print(Panel(
        details.wod_text,
        title=f"[bold]{title}[/bold]",
        border_style="cyan" if details.is_rest_day else "green",
    ))


@app.command()
def url(
    day: Optional[str] = typer.Option(
        None,
        "--date",
        "-d",
        help="Date as YYYY-MM-DD (default: today on the site)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Print the WOD page URL for a date."""
    target = _parse_date_option(day)
    try:
        settings = _load_settings(config_file)
    except WodScraperError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    target = target or current_date(settings.scraper.timezone)
    typer.echo(generate_wod_url(target, settings.scraper.base_url))


@app.command()
def scrape(
    day: Optional[str] = typer.Option(
        None,
        "--date",
        "-d",
        help="Date as YYYY-MM-DD (default: today on the site)",
    ),
    no_llm: bool = typer.Option(
        False,
        "--no-llm",
        help="Build the workout from the text alone",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Do not write to the database",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """
    Scrape, structure and schedule the WOD for a date.

    Examples:
        wod-scraper scrape
        wod-scraper scrape --date 2025-01-06 --dry-run --no-llm
    """
    from wod_scraper.llm import WorkoutGenerator
    from wod_scraper.storage import Database, ProgrammingService

    target = _parse_date_option(day)

    database = None
    try:
        settings = _load_settings(config_file)
        target = target or current_date(settings.scraper.timezone)

        generator = None
        if not no_llm and settings.api_llm.enabled:
            try:
                generator = WorkoutGenerator.from_settings(settings.api_llm)
            except APIAuthenticationError as e:
                console.print(
                    f"[yellow]Warning:[/yellow] {e}; structuring from text only")

        service = None
        if not dry_run:
            database = Database.from_settings(settings.storage)
            service = ProgrammingService(database, timezone=settings.scraper.timezone)

        with WodPageFetcher.from_settings(settings.scraper) as fetcher:
            pipeline = DailyScrapePipeline(
                fetcher=fetcher,
                generator=generator,
                service=service,
                settings=settings,
            )
            result = pipeline.run(target)

    except KeyboardInterrupt:
        console.print("\n[yellow]Scrape cancelled by user[/yellow]")
        raise typer.Exit(1)
    except WodScraperError as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Scrape failed")
        raise typer.Exit(1)
    finally:
        if database is not None:
            database.close()

    if as_json:
        typer.echo(json.dumps(result.to_dict()))
    else:
        _print_scrape_result(result)

    if result.status == ScrapeStatus.FAILED:
        raise typer.Exit(1)


def _print_scrape_result(result) -> None:
    style = STATUS_STYLES[result.status]

    table = Table(title=f"WOD for {result.date.isoformat()}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("URL", result.url)
    table.add_row("Status", f"[{style}]{result.status.value}[/{style}]")
    if result.workout:
        table.add_row("Workout", result.workout.name)
        table.add_row("Scheme", result.workout.scheme)
    if result.workout_id:
        table.add_row("Workout ID", result.workout_id)
    if result.track_workout_id:
        table.add_row("Track workout ID", result.track_workout_id)
    if result.scheduled_instance_id:
        table.add_row("Scheduled ID", result.scheduled_instance_id)
    if result.error:
        table.add_row("Error", f"[red]{result.error}[/red]")

    console.print(table)

    if result.wod_details and result.wod_details.wod_text:
        console.print(Panel(result.wod_details.wod_text, border_style=style))


@app.command()
def schedule(
    team_id: str = typer.Argument(
        ...,
        help="Team ID",
    ),
    day: Optional[str] = typer.Option(
        None,
        "--date",
        "-d",
        help="Date as YYYY-MM-DD (default: today on the site)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """List workouts scheduled for a team on a date."""
    from wod_scraper.storage import Database, ProgrammingService

    target = _parse_date_option(day)
    try:
        settings = _load_settings(config_file)
        target = target or current_date(settings.scraper.timezone)
        with Database.from_settings(settings.storage) as database:
            service = ProgrammingService(
                database, timezone=settings.scraper.timezone)
            instances = service.get_scheduled_workouts(team_id, target)
    except WodScraperError as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Listing schedule failed")
        raise typer.Exit(1)

    if not instances:
        console.print(
            f"[yellow]No workouts scheduled for {team_id} on {target.isoformat()}[/yellow]")
        return

    table = Table(title=f"Schedule for {team_id} on {target.isoformat()}")
    table.add_column("ID", style="dim")
    table.add_column("Workout", style="cyan")
    table.add_column("Day", justify="right")
    table.add_column("Notes")

    for instance in instances:
        table.add_row(
            instance.id,
            str(instance.extra.get("workout_name", "")),
            str(instance.extra.get("day_number", "")),
            instance.team_specific_notes or "",
        )

    console.print(table)


@app.command()
def track(
    track_id: str = typer.Argument(
        ...,
        help="Programming track ID",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """List the workouts on a programming track."""
    from wod_scraper.storage import Database, ProgrammingService

    try:
        settings = _load_settings(config_file)
        with Database.from_settings(settings.storage) as database:
            service = ProgrammingService(
                database, timezone=settings.scraper.timezone)
            workouts = service.get_track_workouts(track_id)
    except WodScraperError as e:
        console.print(f"[red]Error:[/red] {e}")
        logger.exception("Listing track failed")
        raise typer.Exit(1)

    if not workouts:
        console.print(f"[yellow]No workouts on track {track_id}[/yellow]")
        return

    table = Table(title=f"Track {track_id}")
    table.add_column("Day", justify="right")
    table.add_column("Workout", style="cyan")
    table.add_column("ID", style="dim")

    for row in workouts:
        table.add_row(
            str(row["day_number"]),
            row["workout_name"],
            row["workout_id"],
        )

    console.print(table)


@app.command()
def config(
    show: bool = typer.Option(
        False,
        "--show",
        "-s",
        help="Show current configuration",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Create default configuration file",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """
    Configuration management.

    View or initialize configuration files.

    Examples:
        wod-scraper config --show
        wod-scraper config --init --output ./my-config.yaml
    """
    if init:
        _init_config(output)
    elif show:
        _show_config()
    else:
        console.print(
            "Use --show to view config or --init to create default config")


def _show_config() -> None:
    """Show current configuration."""
    try:
        settings = load_config(get_default_config_path())
    except WodScraperError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    config_dict = settings.model_dump(mode="json")

    console.print(Panel(
        "[bold]Current Configuration[/bold]",
        border_style="blue",
    ))

    for section, values in config_dict.items():
        console.print(f"\n[bold cyan]{section}:[/bold cyan]")
        if isinstance(values, dict):
            for key, value in values.items():
                console.print(f"  {key}: [dim]{value}[/dim]")
        else:
            console.print(f"  {values}")


def _init_config(output: Optional[Path]) -> None:
    """Create default configuration file."""
    import yaml

    config_dict = Settings().model_dump(mode="json")

    output_path = output or Path("config.yaml")

    if output_path.exists():
        if not typer.confirm(f"File {output_path} exists. Overwrite?"):
            raise typer.Exit(0)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)

    console.print(f"[green]✓[/green] Configuration saved to: {output_path}")


if __name__ == "__main__":
    app()
