"""CLI for the OSF API MCP server."""

from pathlib import Path
from typing import Optional

import typer

from .config import configure_logging, get_settings
from .errors import SpecLoadError
from .updater import update_spec_sync

app = typer.Typer(
    name="osf-api-mcp",
    help="OSF API Documentation MCP Server CLI",
)


def _spec_path(spec: Optional[Path]) -> Path:
    return spec if spec is not None else get_settings().resolved_spec_path()


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level"),
) -> None:
    """Configure logging for every command."""
    configure_logging(log_level or get_settings().log_level)


@app.command()
def update(
    url: Optional[str] = typer.Option(
        None,
        "--url",
        "-u",
        help="Swagger document URL (default: OSF_API_MCP_SPEC_URL)",
    ),
    spec: Optional[Path] = typer.Option(
        None,
        "--spec",
        "-s",
        help="Where to write the Swagger document",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-n",
        help="Check for updates without writing files",
    ),
) -> None:
    """Download the Swagger document."""
    settings = get_settings()
    source_url = url or settings.spec_url
    if not source_url:
        typer.echo("No URL given. Use --url or set OSF_API_MCP_SPEC_URL.", err=True)
        raise typer.Exit(1)

    output = _spec_path(spec)
    action = "Checking" if dry_run else "Updating"
    typer.echo(f"{action} {output} from {source_url}...")

    result = update_spec_sync(source_url, output, dry_run, settings.http_timeout)

    if not result.success:
        typer.echo(f"ERROR {result.error}", err=True)
        raise typer.Exit(1)

    if result.updated:
        typer.echo("Would update specification" if dry_run else "Updated specification")
    else:
        typer.echo("Specification is up to date")


@app.command()
def stats(
    spec: Optional[Path] = typer.Option(None, "--spec", "-s", help="Path to the Swagger document"),
) -> None:
    """Build the indexes and print their sizes."""
    from .index import load_index

    try:
        index = load_index(_spec_path(spec))
    except SpecLoadError as e:
        typer.echo(f"ERROR {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Title: {index.spec.info.title}")
    typer.echo(f"Paths: {len(index.endpoints.paths)}")
    typer.echo(f"Endpoints: {index.endpoint_count}")
    typer.echo(f"Tags: {len(index.endpoints.tags)}")
    typer.echo(f"Schemas: {len(index.schemas.by_name)}")
    typer.echo(f"Indexed words: {len(index.fulltext.words)}")


@app.command("search")
def search_command(
    query: str = typer.Argument(..., help="Search query"),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum number of results"),
    spec: Optional[Path] = typer.Option(None, "--spec", "-s", help="Path to the Swagger document"),
) -> None:
    """Run a full-text search from the shell."""
    from .index import load_index
    from .search import fulltext_search

    try:
        index = load_index(_spec_path(spec))
    except SpecLoadError as e:
        typer.echo(f"ERROR {e}", err=True)
        raise typer.Exit(1)

    results = fulltext_search(index, query, limit)
    if not results:
        typer.echo("No results")
        return

    for result in results:
        typer.echo(f"{result.score:.3f}  {result.method:<7} {result.path}  {result.summary or ''}")


@app.command()
def serve() -> None:
    """Start the MCP server on stdio."""
    # Import here to avoid circular imports
    from .server import mcp

    mcp.run()


if __name__ == "__main__":
    app()
