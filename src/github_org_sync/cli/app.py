"""Main CLI application for GitHub Org Sync."""

from typing import Annotated

import typer
from rich.console import Console

from github_org_sync import __version__
from github_org_sync.cli import collections as collections_cmd
from github_org_sync.cli import github as github_cmd
from github_org_sync.cli import sync as sync_cmd
from github_org_sync.config import get_settings
from github_org_sync.logging import setup_logging

app = typer.Typer(
    name="ghsync",
    help="Snapshot your GitHub organizations' activity into a local store.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"ghsync version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-error output (WARNING level).",
        ),
    ] = False,
) -> None:
    """GitHub Org Sync - snapshot GitHub activity into a local store."""
    settings = get_settings()
    setup_logging(settings.log_level, verbose=verbose, quiet=quiet, config=settings.logging)


app.add_typer(github_cmd.app, name="github")
app.add_typer(sync_cmd.app, name="sync")
app.add_typer(collections_cmd.app, name="collections")


if __name__ == "__main__":
    app()
