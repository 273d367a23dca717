"""
jobsync - LinkedIn job listings to a dated Google Sheets tab.

Polls the LinkedIn job-search API on RapidAPI, normalizes the listings and
appends the ones not yet recorded to today's tab of a spreadsheet.

Features:
- Async API client with explicit error on non-2xx responses
- Service-account authorization for Sheets and Drive
- One tab per UTC day, created with a JobId/Title/Company/Url header
- Dedup by job id against the tab's existing rows
"""

from .models import JobRecord, RawJob, SearchEnvelope, AppendResult, SyncSummary, extract_job_data
from .config import SyncConfig, SearchParams, ServiceAccountCredential, ConfigurationError, load_credential
from .auth import authorize, SCOPES
from .api_client import LinkedInJobsClient, JobsAPIError
from .sheets import SheetsClient, SheetsError, today_sheet_name
from .storage import SheetJobStorage
from .sync import JobSync

__all__ = [
    # Models
    "JobRecord",
    "RawJob",
    "SearchEnvelope",
    "AppendResult",
    "SyncSummary",
    "extract_job_data",
    # Configuration
    "SyncConfig",
    "SearchParams",
    "ServiceAccountCredential",
    "ConfigurationError",
    "load_credential",
    # Auth
    "authorize",
    "SCOPES",
    # API client
    "LinkedInJobsClient",
    "JobsAPIError",
    # Sheets
    "SheetsClient",
    "SheetsError",
    "today_sheet_name",
    "SheetJobStorage",
    # Orchestration
    "JobSync",
]
__version__ = "1.0.0"
