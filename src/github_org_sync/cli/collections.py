"""Commands for browsing synced collections."""

import json
from typing import Any

import typer
from rich.table import Table

from github_org_sync.cli.common import console, run_async_command
from github_org_sync.db import (
    CollectionRepository,
    ResourceCollection,
    create_tables,
    get_session,
)

app = typer.Typer(help="Browse synced collections")


@app.command("list")
def list_collections() -> None:
    """List collections that hold data, with their record counts."""

    async def _list() -> dict[ResourceCollection, int]:
        await create_tables()
        async with get_session() as session:
            return await CollectionRepository(session).list_collections()

    counts = run_async_command(_list(), error_prefix="Failed to list collections")

    if not counts:
        console.print("[yellow]No synced data yet.[/yellow] Run `ghsync sync resync`.")
        return

    table = Table()
    table.add_column("Collection")
    table.add_column("Records", justify="right")
    for collection, count in counts.items():
        table.add_row(collection.value, str(count))
    console.print(table)


@app.command("show")
def show_collection(
    name: str = typer.Argument(
        ...,
        help="Collection name (e.g., github-commits or commits)",
    ),
    limit: int | None = typer.Option(
        None,
        "--limit",
        "-n",
        min=1,
        help="Maximum number of records to print",
    ),
) -> None:
    """Print a collection's records as JSON.

    Examples:
        ghsync collections show github-users
        ghsync collections show commits --limit 5
    """
    try:
        collection = ResourceCollection.from_name(name)
    except ValueError as e:
        valid = ", ".join(c.value for c in ResourceCollection)
        console.print(f"[red]Error:[/red] {e}. Valid collections: {valid}")
        raise typer.Exit(1) from None

    async def _show() -> list[dict[str, Any]]:
        await create_tables()
        async with get_session() as session:
            return await CollectionRepository(session).get_records(collection, limit=limit)

    records = run_async_command(
        _show(), error_prefix=f"Failed to fetch data for {collection.value}"
    )
    console.print_json(json.dumps(records))
