#!/usr/bin/env python3
"""
CLI interface for the LinkedIn-to-Sheets job sync.

Usage:
    python -m src.cli sync
    python -m src.cli sync --dry-run
    python -m src.cli preview --limit 10
    python -m src.cli tabs
"""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from src.jobsync import (
    JobSync,
    LinkedInJobsClient,
    SyncConfig,
)

app = typer.Typer(
    name="jobsync",
    help="Sync new LinkedIn job listings into a dated Google Sheets tab",
    add_completion=False,
)
console = Console()
logger = logging.getLogger("jobsync")


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )
    # googleapiclient is chatty at INFO about discovery documents
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


@app.command()
def sync(
    spreadsheet_id: Optional[str] = typer.Option(
        None, "--spreadsheet-id", "-s", envvar="SPREADSHEET_ID",
        help="Destination spreadsheet (defaults to $SPREADSHEET_ID)",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would be appended without writing"
    ),
    fail_on_error: bool = typer.Option(
        False, "--fail-on-error", help="Exit with status 1 when the run fails"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Fetch today's listings and append the new ones to the spreadsheet.

    Credentials come from $GOOGLE_CREDENTIALS and $RAPIDAPI_KEY.

    Examples:
        jobsync sync
        jobsync sync --dry-run -v
    """
    setup_logging(verbose)

    console.print("\n[bold blue]LinkedIn Job Sync[/bold blue]")
    if dry_run:
        console.print("[yellow]Dry run: no changes will be written[/yellow]")
    console.print()

    config = SyncConfig.from_env(spreadsheet_id=spreadsheet_id)
    logger.info("Processing jobs...")
    summary = asyncio.run(JobSync(config).run_safely(dry_run=dry_run))

    if summary is None:
        console.print("[red]Sync failed[/red]")
        if fail_on_error:
            raise typer.Exit(code=1)
        return

    logger.info("Processing Successful")

    if summary.message:
        console.print(f"[yellow]{summary.message}[/yellow]")
        return

    table = Table(show_header=True)
    table.add_column("Tab", style="cyan")
    table.add_column("Processed", justify="right")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Skipped", justify="right")
    table.add_row(
        summary.sheet_name or "",
        str(summary.jobs_processed),
        str(summary.jobs_added),
        str(summary.jobs_skipped),
    )
    console.print(table)


@app.command()
def preview(
    limit: int = typer.Option(5, "--limit", "-n", help="Number of jobs to show"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    Preview the job search results without touching the spreadsheet.
    """
    setup_logging(verbose)
    config = SyncConfig.from_env()

    console.print(f"\n[bold blue]Preview: {config.search.keywords}[/bold blue]\n")

    async def run():
        async with LinkedInJobsClient(
            config.require("rapidapi_key"), timeout=config.timeout
        ) as client:
            jobs = await client.fetch_jobs(config.search)

        console.print(f"Found {len(jobs)} jobs\n")

        if not jobs:
            console.print("[yellow]No results[/yellow]")
            return

        for job in jobs[:limit]:
            console.print(f"[bold cyan]{job.title or 'N/A'}[/bold cyan]")
            console.print(f"  Company: {job.company or 'N/A'}")
            console.print(f"  Job ID: {job.id}")
            console.print(f"  URL: {job.url or 'N/A'}")
            console.print()

    asyncio.run(run())


@app.command()
def tabs(
    spreadsheet_id: Optional[str] = typer.Option(
        None, "--spreadsheet-id", "-s", envvar="SPREADSHEET_ID",
        help="Spreadsheet to inspect (defaults to $SPREADSHEET_ID)",
    ),
) -> None:
    """
    List the tabs of the destination spreadsheet.
    """
    setup_logging(verbose=False)
    config = SyncConfig.from_env(spreadsheet_id=spreadsheet_id)

    sheets = JobSync(config).connect_sheets()
    titles = sheets.get_sheet_titles()

    if not titles:
        console.print("[yellow]No tabs found[/yellow]")
        return

    console.print(f"\n[bold blue]Tabs ({len(titles)})[/bold blue]\n")
    for title in titles:
        console.print(f"  {title}")


if __name__ == "__main__":
    app()
