"""Sync commands for GitHub Org Sync."""

import json
from typing import Any

import typer
from rich.table import Table

from github_org_sync.cli.common import OutputFormatOption, console, run_async_command
from github_org_sync.db import (
    CollectionRepository,
    IntegrationRepository,
    create_tables,
    get_session,
)
from github_org_sync.github import OutputFormat, ResyncOrchestrator
from github_org_sync.logging import LogContext

app = typer.Typer(help="Sync GitHub data into the local store")


@app.command("resync")
def resync(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Re-fetch everything for the connected account and replace stored data.

    Fetches organizations, their repositories, and each repository's
    commits, pull requests, issues and issue timelines, plus every user
    referenced by them. Each collection is replaced with the new data.

    Examples:
        ghsync sync resync
        ghsync sync resync --format json
        ghsync -v sync resync  # Debug logging
    """

    async def _resync() -> dict[str, Any]:
        await create_tables()
        async with get_session() as session:
            orchestrator = ResyncOrchestrator(
                integration_repository=IntegrationRepository(session),
                collection_repository=CollectionRepository(session),
            )
            with LogContext(run="resync"):
                result = await orchestrator.resync()
            return result.to_dict()

    if output_format == OutputFormat.TEXT:
        console.print("[dim]Re-syncing GitHub data...[/dim]")

    result = run_async_command(_resync(), error_prefix="Failed to re-sync GitHub data")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(result))
        return

    table = Table(title="Re-sync complete")
    table.add_column("Collection")
    table.add_column("Records", justify="right")
    for name, count in result["counts"].items():
        table.add_row(name, str(count))
    console.print(table)

    if result["repos_failed"]:
        console.print(
            f"[yellow]Incomplete repositories:[/yellow] {', '.join(result['repos_failed'])}"
        )
    if result["timelines_failed"]:
        console.print(
            f"[yellow]Issue timelines skipped:[/yellow] {result['timelines_failed']}"
        )
    console.print(f"[dim]Finished in {result['duration_seconds']}s[/dim]")
