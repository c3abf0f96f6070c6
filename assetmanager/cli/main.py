"""assetmanager CLI.

`assetmanager init` creates and upgrades the database, `status` and
`history` report its schema version, and `asset-type` manages asset
types. The database file comes from --db or ASSETMANAGER_DB_PATH.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from assetmanager.cli import assets
from assetmanager.cli.context import open_database, resolve_db_path, setup_logging
from assetmanager.db.database import Database
from assetmanager.db.version import current_version, version_history
from assetmanager.exceptions import DatabaseError
from assetmanager.migrations.runner import Upgrader

console = Console()

app = typer.Typer(
    name="assetmanager",
    help="assetmanager -- keep track of what you own.",
    no_args_is_help=True,
)
app.add_typer(assets.app, name="asset-type", help="Manage asset types (add, list, rename, remove)")


@app.callback()
def main(
    ctx: typer.Context,
    db: Optional[Path] = typer.Option(None, "--db", help="Database file (default: ASSETMANAGER_DB_PATH)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING, ERROR"),
):
    """Personal finance tracking."""
    setup_logging(log_level)
    ctx.obj = db


@app.command("init")
def init(ctx: typer.Context):
    """Create the database if needed and upgrade it to the latest version."""
    upgrader = Upgrader()
    try:
        with open_database(ctx.obj, upgrader) as db:
            version = current_version(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    applied = ", ".join(str(v) for v in upgrader.applied) or "none"
    console.print(
        Panel(
            f"[green]Database ready at {resolve_db_path(ctx.obj)}[/green]\n\n"
            f"Schema version: [bold]{version}[/bold]\n"
            f"Steps applied:  {applied}",
            title="assetmanager",
            border_style="cyan",
        )
    )


@app.command("status")
def status(ctx: typer.Context):
    """Show the schema version of the database without upgrading it."""
    path = resolve_db_path(ctx.obj)
    if not path.exists():
        console.print(f"[red]No database at {path}. Run 'assetmanager init' first.[/red]")
        raise typer.Exit(code=1)

    upgrader = Upgrader()
    try:
        with Database.open(path) as db:
            version = current_version(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if version < upgrader.latest_version:
        state = "[yellow]upgrade pending[/yellow]"
    else:
        state = "[green]up to date[/green]"

    from assetmanager import __version__
    console.print(Panel(
        f"[bold]assetmanager v{__version__}[/bold]\n\n"
        f"Database:   {path}\n"
        f"Schema:     {version} (latest {upgrader.latest_version})\n"
        f"State:      {state}",
        title="Database Status",
        border_style="cyan",
    ))


@app.command("history")
def history(ctx: typer.Context):
    """List the recorded schema versions."""
    try:
        with open_database(ctx.obj) as db:
            records = version_history(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Schema versions")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Date", style="white")
    for record in records:
        table.add_row(str(record.version), record.date.isoformat())

    console.print(table)
