"""
Sync orchestration: fetch jobs, then merge them into today's tab.

Steps run strictly in sequence:
1. Fetch and normalize the job search (no Google calls if it is empty)
2. Authorize the service account
3. Resolve or create today's tab
4. Append jobs whose id is not already in the tab
"""

import logging
from typing import Any, Callable, Optional

import httpx

from .api_client import LinkedInJobsClient
from .auth import authorize
from .config import SyncConfig
from .models import JobRecord, SyncSummary
from .sheets import SheetsClient, today_sheet_name
from .storage import SheetJobStorage

logger = logging.getLogger(__name__)

NO_JOBS_MESSAGE = "No new jobs found"


class JobSync:
    """
    High-level runner for one sync.

    Overlapping runs are not coordinated: two runs that read the tab before
    either appends will both write the same new jobs.

    Example:
        sync = JobSync(SyncConfig.from_env())
        summary = await sync.run()
        print(summary.to_dict())
    """

    def __init__(
        self,
        config: SyncConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sheets: Optional[SheetsClient] = None,
        authorizer: Callable[..., Any] = authorize,
    ):
        """
        Initialize the runner.

        Args:
            config: Run settings
            transport: Optional httpx transport for the job-search client
            sheets: Pre-built Sheets client; skips authorization when given
            authorizer: Callable turning a credential into Google credentials
        """
        self.config = config
        self._transport = transport
        self._sheets = sheets
        self._authorizer = authorizer

    async def fetch_jobs(self) -> list[JobRecord]:
        """Run the configured search and return normalized records."""
        api_key = self.config.require("rapidapi_key")
        async with LinkedInJobsClient(
            api_key,
            timeout=self.config.timeout,
            transport=self._transport,
        ) as client:
            return await client.fetch_jobs(self.config.search)

    def connect_sheets(self) -> SheetsClient:
        """Authorize and build the Sheets client, once per runner."""
        if self._sheets is None:
            spreadsheet_id = self.config.require("spreadsheet_id")
            credentials = self._authorizer(self.config.credential())
            self._sheets = SheetsClient.from_credentials(credentials, spreadsheet_id)
        return self._sheets

    async def run(self, dry_run: bool = False) -> SyncSummary:
        """
        Execute one sync.

        Args:
            dry_run: Compute what would be appended without creating the tab
                or writing rows

        Returns:
            SyncSummary with counts, or a "No new jobs found" message when the
            search returned nothing
        """
        jobs = await self.fetch_jobs()

        if not jobs:
            logger.info("No new jobs found.")
            return SyncSummary(success=True, message=NO_JOBS_MESSAGE)

        sheets = self.connect_sheets()

        if dry_run:
            return self._preview_append(sheets, jobs)

        sheet_name = sheets.get_or_create_sheet()
        storage = SheetJobStorage(sheets, sheet_name)
        result = storage.append_jobs(jobs)

        logger.info(f"Jobs processed. Added: {result.added}, Skipped: {result.skipped}")
        return SyncSummary(
            success=True,
            sheet_name=sheet_name,
            jobs_processed=result.total,
            jobs_added=result.added,
            jobs_skipped=result.skipped,
        )

    def _preview_append(self, sheets: SheetsClient, jobs: list[JobRecord]) -> SyncSummary:
        sheet_name = today_sheet_name()
        storage = SheetJobStorage(sheets, sheet_name)

        if sheet_name in sheets.get_sheet_titles():
            existing_ids = storage.get_existing_job_ids()
        else:
            existing_ids = set()

        new_jobs = storage.filter_new(jobs, existing_ids)
        logger.info(
            f"Dry run: would add {len(new_jobs)}, skip {len(jobs) - len(new_jobs)} "
            f"in '{sheet_name}'"
        )
        return SyncSummary(
            success=True,
            sheet_name=sheet_name,
            jobs_processed=len(jobs),
            jobs_added=len(new_jobs),
            jobs_skipped=len(jobs) - len(new_jobs),
        )

    async def run_safely(self, dry_run: bool = False) -> Optional[SyncSummary]:
        """
        Run and log any failure instead of raising.

        Returns:
            The summary, or None if the run failed
        """
        try:
            return await self.run(dry_run=dry_run)
        except Exception:
            logger.exception("Error running job sync")
            return None
