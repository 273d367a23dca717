"""
Test data factories and fakes.

The job factories build raw entries shaped like the LinkedIn search API.
``FakeSheetsService`` stands in for the discovery-built Sheets v4 resource:
it exposes the same ``spreadsheets().values().get(...).execute()`` chain and
keeps tabs in memory so tests can assert on what was written.
"""

import json
import random
from typing import Any, Optional

import httplib2
from googleapiclient.errors import HttpError


# =============================================================================
# Sample Data Pools
# =============================================================================

TITLES = [
    "Software Engineer Intern",
    "Backend Developer Intern",
    "Data Engineering Intern",
    "Machine Learning Intern",
    "Frontend Developer Intern",
    "Site Reliability Intern",
]

COMPANIES = [
    "Google",
    "Shopify",
    "Stripe",
    "Wealthsimple",
    "Cohere",
    "RBC",
]


# =============================================================================
# Job Factories
# =============================================================================


def generate_raw_job(
    job_id: Optional[str] = None,
    title: Optional[str] = None,
    company_name: Optional[str] = None,
    url: Optional[str] = None,
) -> dict:
    """
    Generate one job entry as returned by the search endpoint.

    Args:
        job_id: Override ``id`` (random digits by default)
        title: Override job title
        company_name: Override ``company.name``
        url: Override job URL
    """
    job_id = job_id or str(random.randint(3_000_000_000, 4_999_999_999))
    title = title or random.choice(TITLES)
    company_name = company_name or random.choice(COMPANIES)

    return {
        "id": job_id,
        "title": title,
        "url": url or f"https://www.linkedin.com/jobs/view/{job_id}",
        "referenceId": f"ref-{job_id}",
        "postAt": "2025-03-10 08:00:00 +0000 UTC",
        "postedTimestamp": 1741593600000,
        "location": "Toronto, Ontario, Canada",
        "company": {
            "id": random.randint(1000, 99999),
            "name": company_name,
            "url": f"https://www.linkedin.com/company/{company_name.lower()}",
        },
    }


def generate_raw_jobs(n: int) -> list[dict]:
    """Generate ``n`` entries with distinct ids."""
    return [generate_raw_job(job_id=str(4_000_000_000 + i)) for i in range(n)]


def make_search_body(entries: list[dict]) -> dict:
    """Response body of a successful search."""
    return {"success": True, "message": "", "data": entries}


def make_envelope(entries: list[dict]) -> dict:
    """Body wrapped the way the API client wraps it."""
    return {"success": True, "data": make_search_body(entries), "query": {}}


# =============================================================================
# Sheets Fake
# =============================================================================


def _parse_range(a1: str) -> tuple[str, str]:
    """Split ``'Tab'!A1:D1`` into (title, cells)."""
    title, _, cells = a1.rpartition("!")
    if title.startswith("'") and title.endswith("'"):
        title = title[1:-1].replace("''", "'")
    return title, cells


def make_http_error(status: int, message: str) -> HttpError:
    """Build an HttpError the way googleapiclient raises it."""
    resp = httplib2.Response({"status": status})
    content = json.dumps({"error": {"code": status, "message": message}}).encode()
    return HttpError(resp, content)


class _Request:
    def __init__(self, fn):
        self._fn = fn

    def execute(self) -> Any:
        return self._fn()


class _FakeValues:
    def __init__(self, service: "FakeSheetsService"):
        self._service = service

    def get(self, spreadsheetId: str, range: str) -> _Request:
        self._service.calls.append(("values.get", range))

        def run():
            if self._service.read_error is not None:
                raise self._service.read_error
            title, _ = _parse_range(range)
            rows = self._service.tabs.get(title, [])
            column = [row[:1] for row in rows]
            return {"range": range, "values": column} if column else {"range": range}

        return _Request(run)

    def update(self, spreadsheetId: str, range: str, valueInputOption: str, body: dict) -> _Request:
        self._service.calls.append(("values.update", range))

        def run():
            title, _ = _parse_range(range)
            rows = self._service.tabs[title]
            values = body["values"]
            for i, row in enumerate(values):
                if i < len(rows):
                    rows[i] = list(row)
                else:
                    rows.append(list(row))
            return {"updatedRange": range, "updatedRows": len(values)}

        return _Request(run)

    def append(
        self,
        spreadsheetId: str,
        range: str,
        valueInputOption: str,
        insertDataOption: str,
        body: dict,
    ) -> _Request:
        self._service.calls.append(("values.append", range))
        self._service.append_options.append((valueInputOption, insertDataOption))

        def run():
            if self._service.write_error is not None:
                raise self._service.write_error
            title, _ = _parse_range(range)
            rows = self._service.tabs[title]
            rows.extend(list(row) for row in body["values"])
            return {"updates": {"updatedRows": len(body["values"])}}

        return _Request(run)


class _FakeSpreadsheets:
    def __init__(self, service: "FakeSheetsService"):
        self._service = service

    def values(self) -> _FakeValues:
        return _FakeValues(self._service)

    def get(self, spreadsheetId: str, fields: Optional[str] = None) -> _Request:
        self._service.calls.append(("get", spreadsheetId))

        def run():
            return {
                "sheets": [
                    {"properties": {"sheetId": i, "title": title}}
                    for i, title in enumerate(self._service.tabs)
                ]
            }

        return _Request(run)

    def batchUpdate(self, spreadsheetId: str, body: dict) -> _Request:
        self._service.calls.append(("batchUpdate", spreadsheetId))

        def run():
            props = body["requests"][0]["addSheet"]["properties"]
            title = props["title"]
            if title in self._service.tabs or self._service.create_conflict:
                self._service.tabs.setdefault(title, [])
                raise make_http_error(
                    400,
                    f'Invalid requests[0].addSheet: A sheet with the name "{title}" '
                    "already exists. Please enter another name.",
                )
            self._service.tabs[title] = []
            self._service.grid[title] = props["gridProperties"]
            return {
                "spreadsheetId": spreadsheetId,
                "replies": [
                    {"addSheet": {"properties": dict(props, sheetId=len(self._service.tabs))}}
                ],
            }

        return _Request(run)


class FakeSheetsService:
    """
    In-memory Sheets v4 resource.

    Attributes:
        tabs: Tab title -> list of rows
        calls: (operation, target) tuples in call order
        read_error: Raised from ``values().get().execute()`` when set
        write_error: Raised from ``values().append().execute()`` when set
        create_conflict: Make addSheet fail as if another run created the tab
    """

    MUTATIONS = {"batchUpdate", "values.update", "values.append"}

    def __init__(self, tabs: Optional[dict[str, list[list[str]]]] = None):
        self.tabs: dict[str, list[list[str]]] = {
            title: [list(row) for row in rows] for title, rows in (tabs or {}).items()
        }
        self.grid: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []
        self.append_options: list[tuple[str, str]] = []
        self.read_error: Optional[Exception] = None
        self.write_error: Optional[Exception] = None
        self.create_conflict = False

    def spreadsheets(self) -> _FakeSpreadsheets:
        return _FakeSpreadsheets(self)

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] in self.MUTATIONS]

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]
