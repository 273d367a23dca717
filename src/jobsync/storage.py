"""
Deduplicated append of job records to a spreadsheet tab.

The set of known ids is read from column A at the start of every append and
discarded afterwards. Nothing is cached between calls.
"""

import logging
from typing import Iterable

from .models import AppendResult, JobRecord
from .sheets import SheetsClient

logger = logging.getLogger(__name__)


class SheetJobStorage:
    """
    Append-only job storage backed by one spreadsheet tab.

    Column A holds the job id and is the dedup key. Row 1 is the header.

    Example:
        storage = SheetJobStorage(sheets, "2025-03-10")
        result = storage.append_jobs(jobs)
        print(f"Added: {result.added}, Skipped: {result.skipped}")
    """

    def __init__(self, sheets: SheetsClient, sheet_name: str):
        self.sheets = sheets
        self.sheet_name = sheet_name

    def get_existing_job_ids(self) -> set[str]:
        """
        Read all job ids already in the tab.

        A failed read is logged and treated as an empty tab, so every
        incoming job is written rather than silently dropped.

        Returns:
            Set of non-empty column A values below the header
        """
        try:
            values = self.sheets.get_values(self.sheet_name, "A:A")
        except Exception as e:
            logger.error(f"Error fetching existing job IDs from '{self.sheet_name}': {e}")
            return set()

        existing_ids: set[str] = set()
        for row in values[1:]:
            if row and row[0]:
                existing_ids.add(str(row[0]))

        logger.debug(f"Found {len(existing_ids)} existing job IDs in '{self.sheet_name}'")
        return existing_ids

    def filter_new(self, jobs: Iterable[JobRecord], existing_ids: set[str]) -> list[JobRecord]:
        """
        Drop jobs whose id is already known.

        Repeated ids within ``jobs`` are collapsed to their first occurrence.
        """
        seen = set(existing_ids)
        new_jobs = []
        for job in jobs:
            if job.id in seen:
                logger.debug(f"Duplicate job skipped: {job.id}")
                continue
            seen.add(job.id)
            new_jobs.append(job)
        return new_jobs

    def append_jobs(self, jobs: list[JobRecord]) -> AppendResult:
        """
        Append jobs not already present in the tab.

        Args:
            jobs: Normalized job records

        Returns:
            AppendResult with added and skipped counts
        """
        existing_ids = self.get_existing_job_ids()
        new_jobs = self.filter_new(jobs, existing_ids)

        if not new_jobs:
            return AppendResult(added=0, skipped=len(jobs))

        rows = [job.to_row() for job in new_jobs]
        self.sheets.append_rows(self.sheet_name, rows, cells="A:D")

        logger.info(f"Appended {len(rows)} jobs to '{self.sheet_name}'")
        return AppendResult(added=len(rows), skipped=len(jobs) - len(rows))
