# changelog_scribe/cli.py
"""
CLI interface for changelog-scribe.

Thin presentation layer over the api/ service layer.
All commands delegate to the same functions the HTTP routes wrap.
"""

import asyncio
import json

import typer

app = typer.Typer(
    name="changelog-scribe",
    help="AI-written, user-facing changelogs from GitHub commit history.",
    no_args_is_help=True,
)


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


def _build_lifecycle(memory: bool = False):
    """Create an AppLifecycle from the user's config."""
    from changelog_scribe.background.lifecycle import AppLifecycle
    from changelog_scribe.config.loader import load_config

    config = load_config()
    if memory:
        return AppLifecycle.in_memory(config)
    return AppLifecycle(config)


def _status_color(status: str) -> str:
    """Return ANSI color for job status."""
    colors = {
        "completed": typer.colors.GREEN,
        "processing": typer.colors.YELLOW,
        "error": typer.colors.RED,
    }
    return colors.get(status, typer.colors.WHITE)


@app.command()
def generate(
    start_date: str = typer.Argument(..., help="Range start (ISO-8601, e.g. 2024-01-01)"),
    end_date: str = typer.Argument(..., help="Range end (ISO-8601)"),
    version: str = typer.Option(None, "--version", "-v", help="Release version label"),
    title: str = typer.Option(None, "--title", "-t", help="Release title"),
    memory: bool = typer.Option(False, "--memory", help="Don't persist the changelog"),
):
    """Generate a changelog for a date range and print the job result as JSON."""
    from changelog_scribe.api.changelogs import check_status

    async def _generate():
        lifecycle = _build_lifecycle(memory)
        await lifecycle.startup()
        try:
            job_id = await lifecycle.orchestrator.submit(
                start_date, end_date, version=version, title=title
            )
            typer.echo(f"Started job {job_id}...", err=True)
            await lifecycle.orchestrator.wait(job_id)
            return await check_status(job_id, orchestrator=lifecycle.orchestrator)
        finally:
            await lifecycle.shutdown()

    try:
        result = _run(_generate())
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        typer.echo("\nCancelled.", err=True)
        raise typer.Exit(130)

    status = result["status"]
    typer.echo(typer.style(f"Status: {status}", fg=_status_color(status)), err=True)
    typer.echo(json.dumps(result, indent=2))
    if status != "completed":
        raise typer.Exit(1)


@app.command()
def commits(
    page: int = typer.Option(0, "--page", "-p", help="Zero-based page number"),
    page_size: int = typer.Option(10, "--page-size", "-n", help="Commits per page"),
    start_date: str = typer.Option(None, "--start", help="Range start (ISO-8601)"),
    end_date: str = typer.Option(None, "--end", help="Range end (ISO-8601)"),
):
    """List repository commits."""
    from changelog_scribe.api.commits import list_commits

    async def _list():
        lifecycle = _build_lifecycle(memory=True)
        try:
            return await list_commits(
                page, page_size, start_date, end_date, commit_source=lifecycle.commit_source
            )
        finally:
            await lifecycle.commit_source.close()

    try:
        result = _run(_list())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not result["items"]:
        typer.echo("No commits found.")
        return

    typer.echo(f"{'SHA':<9} {'DATE':<21} {'AUTHOR':<20} MESSAGE")
    typer.echo("-" * 80)
    for item in result["items"]:
        first_line = item["message"].splitlines()[0] if item["message"] else ""
        if len(first_line) > 40:
            first_line = first_line[:37] + "..."
        typer.echo(f"{item['sha'][:7]:<9} {item['date']:<21} {item['author'][:20]:<20} {first_line}")

    more = " (more available)" if result["hasMore"] else ""
    typer.echo(f"\nPage {page + 1} of {result['totalPages']}{more}")


@app.command()
def changelogs(
    page_size: int = typer.Option(10, "--page-size", "-n", help="Changelogs per page"),
    last_timestamp: str = typer.Option(
        None, "--last-timestamp", help="Cursor from a previous page's lastTimestamp"
    ),
):
    """Print stored changelogs (newest first) as JSON."""
    from changelog_scribe.api.changelogs import list_changelogs

    async def _list():
        lifecycle = _build_lifecycle()
        await lifecycle.store.initialize()
        try:
            return await list_changelogs(page_size, last_timestamp, store=lifecycle.store)
        finally:
            await lifecycle.store.close()

    try:
        result = _run(_list())
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(json.dumps(result, indent=2))


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", help="Listen port (default from config)"),
):
    """Start the HTTP API server."""
    from changelog_scribe.__main__ import main

    main(host=host, port=port)


if __name__ == "__main__":
    app()
