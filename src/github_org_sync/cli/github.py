"""GitHub integration commands: connect, status, disconnect."""

import json
from typing import Any

import typer

from github_org_sync.cli.common import OutputFormatOption, console, run_async_command
from github_org_sync.config import get_settings
from github_org_sync.db import IntegrationRepository, create_tables, get_session
from github_org_sync.github import GitHubClient, OutputFormat
from github_org_sync.schemas import IntegrationStatus

app = typer.Typer(help="Manage the connected GitHub account")


@app.command("connect")
def connect(
    token: str | None = typer.Option(
        None,
        "--token",
        "-t",
        help="GitHub access token (defaults to GITHUB_TOKEN)",
    ),
    scope: str | None = typer.Option(
        None,
        "--scope",
        help="Scopes granted to the token, stored for reference",
    ),
) -> None:
    """Verify a token against GitHub and store it as the integration.

    Replaces any previously connected account.

    Examples:
        ghsync github connect --token ghp_xxx
        GITHUB_TOKEN=ghp_xxx ghsync github connect
    """

    access_token = token or get_settings().github_token

    async def _connect() -> dict[str, Any]:
        async with GitHubClient(access_token) as client:
            user = await client.get_authenticated_user()

            await create_tables()
            async with get_session() as session:
                integration = await IntegrationRepository(session).upsert(
                    access_token,
                    user,
                    scope=scope,
                )
                return IntegrationStatus.from_integration(integration).model_dump()

    status = run_async_command(_connect(), error_prefix="Connect failed")
    login = (status.get("user") or {}).get("login", "unknown")
    console.print(f"[green]Connected[/green] as [bold]{login}[/bold]")


@app.command("status")
def status(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show whether a GitHub account is connected.

    Examples:
        ghsync github status
        ghsync github status --format json
    """

    async def _status() -> IntegrationStatus:
        await create_tables()
        async with get_session() as session:
            integration = await IntegrationRepository(session).get()
            return IntegrationStatus.from_integration(integration)

    result = run_async_command(_status(), error_prefix="Failed to fetch status")

    if output_format == OutputFormat.JSON:
        console.print_json(result.model_dump_json())
        return

    if not result.connected:
        console.print("[yellow]Not connected[/yellow]")
        return

    since = result.connected_at.strftime("%Y-%m-%d %H:%M") if result.connected_at else "unknown"
    console.print(f"[green]Connected[/green] as [bold]{result.login}[/bold] since {since}")


@app.command("disconnect")
def disconnect(
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Remove the stored GitHub integration.

    Synced collections are left in place.
    """

    async def _disconnect() -> bool:
        await create_tables()
        async with get_session() as session:
            return await IntegrationRepository(session).delete()

    deleted = run_async_command(_disconnect(), error_prefix="Failed to remove integration")

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps({"success": True, "removed": deleted}))
        return

    if deleted:
        console.print("Integration removed successfully")
    else:
        console.print("[yellow]No integration to remove[/yellow]")
