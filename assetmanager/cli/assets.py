"""Asset type commands — add, list, rename, remove."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from assetmanager.cli.context import open_database
from assetmanager.exceptions import DatabaseError
from assetmanager.models.asset_type import AssetType

app = typer.Typer(help="Manage asset types")
console = Console()


@app.command("add")
def add(ctx: typer.Context, name: str = typer.Argument(help="Name of the asset type")):
    """Add an asset type."""
    asset_type = AssetType(name=name)
    try:
        with open_database(ctx.obj) as db:
            asset_type.create(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Added asset type {asset_type.id}: {asset_type.name}[/green]")


@app.command("list")
def list_asset_types(ctx: typer.Context):
    """List all asset types."""
    try:
        with open_database(ctx.obj) as db:
            asset_types = AssetType.read_all(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    if not asset_types:
        console.print("[dim]No asset types yet.[/dim]")
        return

    table = Table(title="Asset types")
    table.add_column("ID", justify="right", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    for at in asset_types:
        table.add_row(str(at.id), at.name)

    console.print(table)


@app.command("rename")
def rename(
    ctx: typer.Context,
    asset_type_id: int = typer.Argument(help="ID of the asset type"),
    name: str = typer.Argument(help="New name"),
):
    """Rename an asset type."""
    try:
        with open_database(ctx.obj) as db:
            asset_type = AssetType.read(asset_type_id, db)
            if asset_type is None:
                console.print(f"[red]No asset type with ID {asset_type_id}[/red]")
                raise typer.Exit(code=1)
            asset_type.name = name
            asset_type.update(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Renamed asset type {asset_type_id} to {name}[/green]")


@app.command("remove")
def remove(ctx: typer.Context, asset_type_id: int = typer.Argument(help="ID of the asset type")):
    """Remove an asset type."""
    try:
        with open_database(ctx.obj) as db:
            asset_type = AssetType.read(asset_type_id, db)
            if asset_type is None:
                console.print(f"[red]No asset type with ID {asset_type_id}[/red]")
                raise typer.Exit(code=1)
            asset_type.delete(db)
    except DatabaseError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Removed asset type {asset_type_id}[/green]")
