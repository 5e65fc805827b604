"""
Main CLI application using Typer.
"""

from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..adapters.holiday_client import StaticHolidayProvider
from ..api.main import build_service, create_app
from ..api.validation import parse_working_days_query
from ..config import AppConfig, ValidationProfile
from ..domain.exceptions import WorkingDaysError
from ..domain.models import REGION_TIMEZONE
from ..logging_config import configure_logging
from ..services.working_time import WorkingTimeService, format_utc

app = typer.Typer(
    name="workingdays",
    help="Add working days and hours on the Colombian business calendar",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
OfflineOption = Annotated[
    bool,
    typer.Option("--offline", help="Use the embedded holiday list instead of the remote one."),
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config = AppConfig.load(config_file)
    configure_logging(config.log_level, console=Console(stderr=True))
    return config


def _build_service(config: AppConfig, offline: bool) -> WorkingTimeService:
    if offline:
        return WorkingTimeService(holiday_provider=StaticHolidayProvider())
    return build_service(config)


@app.command()
def add(
    date: Annotated[Optional[str], typer.Option("--date", help="Start instant, ISO 8601 with offset. Defaults to now.")] = None,
    days: Annotated[Optional[str], typer.Option("--days", "-d", help="Working days to add")] = None,
    hours: Annotated[Optional[str], typer.Option("--hours", "-H", help="Working hours to add")] = None,
    profile: Annotated[Optional[ValidationProfile], typer.Option("--profile", help="Validation profile (overrides config)")] = None,
    config_file: ConfigOption = None,
    offline: OfflineOption = False,
):
    """
    Add working days and/or hours to a date.

    Examples:

        # One working day from now
        workingdays add --days 1

        # Twenty working hours from a given instant
        workingdays add --date 2025-04-09T19:00:00Z --hours 20

        # Without network access
        workingdays add --hours 1.5 --offline
    """
    try:
        config = _load_config(config_file)
        query = parse_working_days_query(
            {"date": date, "days": days, "hours": hours},
            profile or config.validation_profile,
        )
        service = _build_service(config, offline)

        start = query.date if query.date is not None else pendulum.now(pendulum.UTC)
        result = service.add_working_time(start, days=query.days or 0, hours=query.hours or 0)

        local = result.in_timezone(REGION_TIMEZONE)
        console.print(format_utc(result))
        console.print(f"[dim]Local: {local.format('dddd, YYYY-MM-DD HH:mm')} (UTC-5)[/dim]")

    except (FileNotFoundError, ValueError, WorkingDaysError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def holidays(
    config_file: ConfigOption = None,
    offline: OfflineOption = False,
):
    """
    List the holiday calendar in use.
    """
    try:
        config = _load_config(config_file)
        provider = _build_service(config, offline).holiday_provider

        dates = sorted(provider.get_holidays())

        table = Table(
            title=f"Holidays ({provider.source})",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Date", style="bold yellow")
        table.add_column("Weekday", style="dim")

        for holiday in dates:
            table.add_row(holiday.isoformat(), holiday.strftime("%A"))

        console.print()
        console.print(table)
        console.print(f"[dim]{len(dates)} holiday(s)[/dim]\n")

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def serve(
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address (overrides config)")] = None,
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port (overrides config)")] = None,
    config_file: ConfigOption = None,
):
    """
    Run the HTTP API with uvicorn.
    """
    import uvicorn

    try:
        config = AppConfig.load(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    bind_host = host or config.server.host
    bind_port = port or config.server.port

    console.print(Panel.fit(
        f"[bold]Server:[/bold] http://{bind_host}:{bind_port}\n"
        f"[bold]Health:[/bold] http://{bind_host}:{bind_port}/health\n"
        f"[bold]API:[/bold] http://{bind_host}:{bind_port}/api/working-days",
        title="Working Days API"
    ))

    uvicorn.run(create_app(config), host=bind_host, port=bind_port, log_config=None)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]workingdays[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
