import asyncio
import logging
from typing import List, Optional

import typer
from rich.table import Table

from tasktimetracker import create_client
from tasktimetracker.config import get_settings
from tasktimetracker.exceptions import TimeTrackerError
from tasktimetracker.logging import configure as configure_logging
from tasktimetracker.models.booking import BookingFilter
from tasktimetracker.utils.cli_utils import format_ms, get_rich_console


app = typer.Typer(help="CLI for the tasktimetracker booking and task stores.")
logger = logging.getLogger(__name__)
console = get_rich_console()

DomainOption = typer.Option("all", "--domain", "-d", help="Store to act on: bookings, tasks or all.")


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL.")):
    configure_logging(log_level)


@app.command()
def migrate(
    domain: str = DomainOption,
    force: bool = typer.Option(False, "--force", help="Re-run every statement, including applied migrations."),
):
    """Applies pending schema migrations."""
    console.rule("[bold cyan]Schema Migration[/bold cyan]")

    async def _migrate():
        client = create_client()
        try:
            return await client.migrate(domain, force=force)
        finally:
            await client.aclose()

    try:
        applied = asyncio.run(_migrate())
    except TimeTrackerError as e:
        console.print(f"[bold red]✖[/bold red] Migration FAILED: {e}")
        raise typer.Exit(code=1)

    for store, migrations in applied.items():
        if migrations:
            for m in migrations:
                console.print(f"[bold green]✔[/bold green] {store}: applied {m.filename}")
        else:
            console.print(f"[bold green]✔[/bold green] {store}: up to date")


@app.command()
def status(domain: str = DomainOption):
    """Shows applied and pending migrations."""

    async def _status():
        client = create_client()
        try:
            return await client.migration_status(domain)
        finally:
            await client.aclose()

    try:
        statuses = asyncio.run(_status())
    except TimeTrackerError as e:
        console.print(f"[bold red]✖[/bold red] Status FAILED: {e}")
        raise typer.Exit(code=1)

    table = Table("store", "version", "description", "state", "installed on")
    for store, items in statuses.items():
        for s in items:
            state = "applied" if s.applied else "pending"
            table.add_row(store, str(s.version), s.description, state, s.installed_on or "-")
    console.print(table)


@app.command()
def check():
    """Checks that both stores can be reached."""
    console.rule("[bold cyan]Connection Check[/bold cyan]")

    async def _check():
        client = create_client()
        try:
            return await client.check_connections()
        finally:
            await client.aclose()

    try:
        statuses = asyncio.run(_check())
    except TimeTrackerError as e:
        console.print(f"[bold red]✖[/bold red] Connection check FAILED: {e}")
        raise typer.Exit(code=1)

    failed = False
    for store, state in statuses.items():
        if state == "ok":
            console.print(f"[bold green]✔[/bold green] {store} store: OK")
        else:
            failed = True
            console.print(f"[bold red]✖[/bold red] {store} store: FAILED ({state})")
    if failed:
        raise typer.Exit(code=1)


@app.command()
def bookings(
    tag: Optional[List[str]] = typer.Option(None, "--tag", "-t", help="Only bookings carrying one of these tags."),
    contains: Optional[str] = typer.Option(None, "--contains", help="Substring of the description."),
):
    """Lists bookings of the booking store."""

    async def _list():
        client = create_client()
        try:
            return await client.bookings.search(
                BookingFilter(tags=tag or [], description_contains=contains)
            )
        finally:
            await client.aclose()

    try:
        rows = asyncio.run(_list())
    except TimeTrackerError as e:
        console.print(f"[bold red]✖[/bold red] Listing FAILED: {e}")
        raise typer.Exit(code=1)

    table = Table("id", "start", "end", "description")
    for b in rows:
        table.add_row(str(b.id), format_ms(b.startdate), format_ms(b.enddate), b.des)
    console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default from SERVER__HOST)."),
    port: Optional[int] = typer.Option(None, help="Port (default from SERVER__PORT)."),
):
    """Runs the HTTP API."""
    import uvicorn
    from tasktimetracker.server import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings.to_client_config()),
        host=host or settings.server.host,
        port=port or settings.server.port,
        log_config=None,
    )
