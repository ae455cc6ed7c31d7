"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the ledger backend because:
1. The shop owner can read and fix the ledger directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (fine for one counter)
- No transactions (a failed multi-row write leaves earlier rows in place)
- Limited query capabilities (we read whole sheets and filter in Python)
"""

from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import rowcol_to_a1
from tenacity import retry, stop_after_attempt, wait_exponential

from src.config import GoogleSheetsSettings, get_settings
from src.config.logging import get_logger
from src.services.storage.interface import (
    ConnectionError,
    NotFoundError,
    RowStoreInterface,
    StorageError,
)


logger = get_logger(__name__)


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to open spreadsheet: {e}")
        return self._spreadsheet


class GoogleSheetsRowStore(RowStoreInterface):
    """
    Row store backed by worksheets of one spreadsheet.

    Each table is a worksheet of the same name. Worksheet handles are
    cached after first use.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
        self._worksheets: dict[str, gspread.Worksheet] = {}

    def _worksheet(self, table: str) -> gspread.Worksheet:
        if table not in self._worksheets:
            try:
                self._worksheets[table] = self._client.get_spreadsheet().worksheet(table)
            except gspread.WorksheetNotFound:
                raise NotFoundError(f"Sheet not found: {table}")
        return self._worksheets[table]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def ensure_table(self, table: str, header: list[str]) -> None:
        """Get or create the worksheet, writing the header on creation."""
        if table in self._worksheets:
            return
        spreadsheet = self._client.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(table)
        except gspread.WorksheetNotFound:
            try:
                sheet = spreadsheet.add_worksheet(
                    title=table,
                    rows=1000,
                    cols=len(header),
                )
                sheet.append_row(header, value_input_option="RAW")
            except Exception as e:
                raise StorageError(f"Failed to create sheet {table}: {e}")
            logger.info("sheet_created", sheet=table)
        except Exception as e:
            raise StorageError(f"Failed to open sheet {table}: {e}")
        self._worksheets[table] = sheet

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def append_row(self, table: str, row: list[Any]) -> None:
        try:
            self._worksheet(table).append_row(row, value_input_option="RAW")
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to append to {table}: {e}")

    async def read_all_rows(self, table: str) -> list[list[str]]:
        try:
            return self._worksheet(table).get_all_values()
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read {table}: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def update_cell(
        self,
        table: str,
        row: int,
        column: int,
        value: Any,
    ) -> None:
        try:
            self._worksheet(table).update(
                range_name=rowcol_to_a1(row, column),
                values=[[value]],
                value_input_option="RAW",
            )
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update {table} R{row}C{column}: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def update_range(
        self,
        table: str,
        start_cell: str,
        rows: list[list[Any]],
    ) -> None:
        try:
            self._worksheet(table).update(
                range_name=start_cell,
                values=rows,
                value_input_option="RAW",
            )
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write {table}!{start_cell}: {e}")

    async def clear_range(self, table: str, cell_range: str) -> None:
        try:
            self._worksheet(table).batch_clear([cell_range])
        except NotFoundError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to clear {table}!{cell_range}: {e}")
