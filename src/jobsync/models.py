"""
Pydantic models for LinkedIn job-search API responses.

The API (served through RapidAPI) returns loosely shaped job entries: the
identifier may live under ``jobId`` or ``id``, the company may be nested or
flat, and the URL may be ``jobUrl`` or ``url``. These models absorb that
variation and produce uniform ``JobRecord`` rows for the spreadsheet.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

SHEET_HEADER = ["JobId", "Title", "Company", "Url"]
MISSING_CELL = "N/A"


def _scalar_text(value: Any) -> Optional[str]:
    """Render a scalar display value as text; anything else is dropped."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


class Company(BaseModel):
    """Company block nested inside a job entry."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Any:
        return _scalar_text(value)


class RawJob(BaseModel):
    """
    A single job entry as returned by the search endpoint.

    Only the fields needed to build a ``JobRecord`` are declared; everything
    else in the payload is ignored.
    """
    model_config = ConfigDict(extra="ignore")

    jobId: Optional[str] = None
    id: Optional[str] = None
    title: Optional[str] = None
    companyName: Optional[str] = None
    company: Optional[Company] = None
    jobUrl: Optional[str] = None
    url: Optional[str] = None

    @field_validator("jobId", "id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        # The API sometimes sends numeric ids
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value)) if float(value).is_integer() else str(value)
        return value

    @field_validator("title", "companyName", "jobUrl", "url", mode="before")
    @classmethod
    def _coerce_display_field(cls, value: Any) -> Any:
        return _scalar_text(value)

    @field_validator("company", mode="before")
    @classmethod
    def _coerce_company(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return None
        return value

    @property
    def job_id(self) -> str:
        """
        Identifier used as the dedup key.

        Falls back from ``jobId`` to ``id`` and finally to a key synthesized
        from company name and title, with whitespace runs turned into hyphens.
        """
        if self.jobId:
            return self.jobId
        if self.id:
            return self.id
        return re.sub(r"\s+", "-", f"{self.companyName}-{self.title}")

    @property
    def company_name(self) -> str:
        """Get company name from the nested company block."""
        if self.company and self.company.name:
            return self.company.name
        return ""

    @property
    def job_url(self) -> str:
        """Get the posting URL."""
        return self.jobUrl or self.url or ""

    def to_record(self) -> "JobRecord":
        """Normalize into a ``JobRecord``."""
        return JobRecord(
            id=self.job_id,
            title=self.title or "",
            company=self.company_name,
            url=self.job_url,
        )


class JobRecord(BaseModel):
    """Uniform job shape written to the spreadsheet."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    company: str = ""
    url: str = ""

    def to_row(self) -> list[str]:
        """Render as a JobId/Title/Company/Url row, blanks shown as N/A."""
        return [
            self.id or MISSING_CELL,
            self.title or MISSING_CELL,
            self.company or MISSING_CELL,
            self.url or MISSING_CELL,
        ]


class SearchEnvelope(BaseModel):
    """Search result wrapped with the query that produced it."""
    success: bool = True
    data: Any = None
    query: dict[str, Any] = Field(default_factory=dict)


def extract_job_data(envelope: Any) -> list[JobRecord]:
    """
    Normalize a search envelope into job records.

    Accepts either a ``SearchEnvelope`` or its plain dict form. A missing or
    malformed ``data.data`` array yields an empty list rather than an error.

    Args:
        envelope: ``{"success": ..., "data": {"data": [...]}, "query": ...}``

    Returns:
        List of JobRecord, in API order
    """
    if isinstance(envelope, SearchEnvelope):
        body = envelope.data
    elif isinstance(envelope, dict):
        body = envelope.get("data")
    else:
        return []

    if not isinstance(body, dict):
        return []
    entries = body.get("data")
    if not isinstance(entries, list):
        return []

    records = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.warning(f"Skipping non-object job entry: {entry!r}")
            continue
        try:
            records.append(RawJob.model_validate(entry).to_record())
        except ValidationError as e:
            logger.warning(f"Failed to parse job: {e}")
            continue

    return records


@dataclass
class AppendResult:
    """Outcome of one dedup-append call."""

    added: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.added + self.skipped


@dataclass
class SyncSummary:
    """
    Summary of one sync run.

    ``message`` is only set when the fetch produced no records at all; a run
    where every fetched job was already present still reports counts.
    """

    success: bool = True
    sheet_name: Optional[str] = None
    jobs_processed: int = 0
    jobs_added: int = 0
    jobs_skipped: int = 0
    message: Optional[str] = None

    def to_dict(self) -> dict:
        """Render in the camelCase shape used by the run log."""
        if self.message is not None:
            return {"success": self.success, "message": self.message}
        return {
            "success": self.success,
            "sheetName": self.sheet_name,
            "jobsProcessed": self.jobs_processed,
            "jobsAdded": self.jobs_added,
            "jobsSkipped": self.jobs_skipped,
        }
