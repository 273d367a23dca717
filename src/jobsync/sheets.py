"""
Thin wrapper over the Google Sheets v4 API.

Every call is executed synchronously, so a mutating request has completed
(or raised) before the next one is issued.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .models import SHEET_HEADER

logger = logging.getLogger(__name__)

DEFAULT_ROW_COUNT = 1000
DEFAULT_COLUMN_COUNT = len(SHEET_HEADER)
VALUE_INPUT_OPTION = "RAW"
INSERT_DATA_OPTION = "INSERT_ROWS"


class SheetsError(Exception):
    """Raised when the Sheets API returns something we cannot act on."""
    pass


def today_sheet_name(now: Optional[datetime] = None) -> str:
    """Title of today's tab: the UTC calendar date as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date().isoformat()


def a1_range(sheet_name: str, cells: str) -> str:
    """Build an A1 range, quoting the tab title."""
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cells}"


def _is_already_exists(error: HttpError) -> bool:
    status = getattr(error.resp, "status", None)
    return str(status) == "400" and "already exists" in str(error).lower()


class SheetsClient:
    """
    Spreadsheet operations used by the sync.

    Example:
        client = SheetsClient.from_credentials(creds, spreadsheet_id)
        tab = client.get_or_create_sheet()
        client.append_rows(tab, [["123", "Intern", "Foo", "http://x"]])
    """

    def __init__(self, service: Any, spreadsheet_id: str):
        """
        Args:
            service: A ``googleapiclient`` Sheets v4 resource
            spreadsheet_id: Target spreadsheet
        """
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.svc = service.spreadsheets()

    @classmethod
    def from_credentials(cls, credentials: Any, spreadsheet_id: str) -> "SheetsClient":
        """Build a client backed by the discovery-based Sheets service."""
        service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        return cls(service, spreadsheet_id)

    def get_sheet_titles(self) -> list[str]:
        """Titles of all tabs in the spreadsheet, in display order."""
        info = self.svc.get(
            spreadsheetId=self.spreadsheet_id,
            fields="sheets(properties(sheetId,title))",
        ).execute()
        return [
            sheet["properties"]["title"]
            for sheet in info.get("sheets", [])
            if sheet.get("properties", {}).get("title") is not None
        ]

    def add_sheet(
        self,
        title: str,
        rows: int = DEFAULT_ROW_COUNT,
        columns: int = DEFAULT_COLUMN_COUNT,
    ) -> dict:
        """
        Create a tab and return the properties the API assigned to it.

        Raises:
            SheetsError: If the reply does not describe a tab with ``title``
        """
        body = {
            "requests": [
                {
                    "addSheet": {
                        "properties": {
                            "title": title,
                            "gridProperties": {
                                "rowCount": rows,
                                "columnCount": columns,
                            },
                        }
                    }
                }
            ]
        }
        reply = self.svc.batchUpdate(spreadsheetId=self.spreadsheet_id, body=body).execute()

        replies = reply.get("replies") or [{}]
        properties = replies[0].get("addSheet", {}).get("properties", {})
        if properties.get("title") != title:
            raise SheetsError(f"Tab '{title}' was not confirmed by the API: {reply}")

        logger.info(f"Created tab '{title}' ({rows}x{columns})")
        return properties

    def update_values(self, sheet_name: str, cells: str, values: list[list[Any]]) -> dict:
        """Overwrite a fixed range."""
        return self.svc.values().update(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range(sheet_name, cells),
            valueInputOption=VALUE_INPUT_OPTION,
            body={"values": values},
        ).execute()

    def get_values(self, sheet_name: str, cells: str) -> list[list[Any]]:
        """Read a range; trailing empty rows are omitted by the API."""
        result = self.svc.values().get(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range(sheet_name, cells),
        ).execute()
        return result.get("values", [])

    def append_rows(self, sheet_name: str, rows: list[list[Any]], cells: str = "A:D") -> dict:
        """Insert rows after the last row of data in ``cells``."""
        result = self.svc.values().append(
            spreadsheetId=self.spreadsheet_id,
            range=a1_range(sheet_name, cells),
            valueInputOption=VALUE_INPUT_OPTION,
            insertDataOption=INSERT_DATA_OPTION,
            body={"values": rows},
        ).execute()
        updates = result.get("updates", {})
        logger.debug(f"Appended {updates.get('updatedRows', len(rows))} rows at {updates.get('updatedRange')}")
        return result

    def get_or_create_sheet(self, today: Optional[str] = None) -> str:
        """
        Return today's tab, creating it with a header row if needed.

        Repeat calls on the same day find the tab and make no changes. When
        the tab is missing, the create and the header write both complete
        before the title is returned.

        Args:
            today: Tab title to resolve (defaults to the UTC date)

        Returns:
            The tab title
        """
        today = today or today_sheet_name()

        if today in self.get_sheet_titles():
            logger.debug(f"Tab '{today}' already exists")
            return today

        try:
            self.add_sheet(today)
        except HttpError as e:
            # Another run may have created it after our title check
            if _is_already_exists(e) and today in self.get_sheet_titles():
                logger.warning(f"Tab '{today}' was created concurrently, reusing it")
                return today
            raise

        self.update_values(today, "A1:D1", [list(SHEET_HEADER)])
        return today
