"""Google Sheets row store implementation.

Talks to the Sheets v4 REST API directly with httpx. The sheet holds one item
per row, with a header row above starting_row.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from loguru import logger

from ..items.base import COLUMNS, Row
from .base import RemoteStoreError, RowStore

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
STARTING_COLUMN = "A"
NUM_LETTERS = 26

TokenProvider = Callable[[], Awaitable[str]]


def column_letter(column_number: int) -> str | None:
    """Convert a 1-based column number to its spreadsheet letters (27 -> "AA")."""
    if column_number <= 0:
        return None

    name = ""
    while column_number > 0:
        column_number, remainder = divmod(column_number - 1, NUM_LETTERS)
        name = chr(ord("A") + remainder) + name
    return name


class ServiceAccountTokenProvider:
    """Supplies OAuth access tokens for a Google service account."""

    def __init__(self, credentials_file: str | Path, scopes: Sequence[str] = SHEETS_SCOPES):
        """
        Load service account credentials.

        Args:
            credentials_file: Path to the JSON key downloaded from Google Cloud
            scopes: OAuth scopes to request

        Raises:
            RemoteStoreError: If the key file cannot be read
        """
        try:
            self.credentials = service_account.Credentials.from_service_account_file(
                str(credentials_file), scopes=list(scopes)
            )
        except (OSError, ValueError) as e:
            raise RemoteStoreError(f"Could not load Google credentials: {e}") from e
        logger.debug("Loaded service account {}", self.credentials.service_account_email)

    async def __call__(self) -> str:
        if not self.credentials.valid:
            try:
                # google-auth refreshes synchronously
                await asyncio.to_thread(self.credentials.refresh, Request())
            except GoogleAuthError as e:
                raise RemoteStoreError(f"Could not authorize with Google: {e}") from e
            logger.info("Successfully connected to Google Sheets API")
        return self.credentials.token


class SheetsRowStore(RowStore):
    """Google Sheets implementation of RowStore."""

    trims_trailing_cells = True

    def __init__(
        self,
        spreadsheet_id: str,
        token_provider: TokenProvider,
        columns: Sequence[str] = COLUMNS,
        starting_row: int = 2,
        sheet_name: str | None = None,
        sheet_id: int | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the Sheets adapter.

        Args:
            spreadsheet_id: Spreadsheet identifier from its URL
            token_provider: Async callable returning a bearer token
            columns: Column schema, the first len(columns) columns are managed
            starting_row: Row number of the first data row
            sheet_name: Sheet (tab) to address, defaults to the first sheet
            sheet_id: Numeric id of that sheet, used for row deletion. Looked up
                from sheet_name (or the first sheet) on first delete when None
            timeout: HTTP timeout in seconds
            client: Optional shared HTTP client; closed by aclose() only if owned

        Raises:
            ValueError: If spreadsheet_id is empty

        """
        if not spreadsheet_id:
            raise ValueError("Spreadsheet id is required")
        super().__init__(columns=columns, starting_row=starting_row)

        self.spreadsheet_id = spreadsheet_id
        self.token_provider = token_provider
        self.sheet_name = sheet_name
        self.sheet_id = sheet_id
        self.last_column = column_letter(len(self.columns))
        self.data_range = self._qualify(f"{STARTING_COLUMN}{starting_row}:{self.last_column}")
        self.base_url = f"{SHEETS_API_URL}/{spreadsheet_id}"

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        logger.debug(
            "SheetsRowStore initialized: spreadsheet={}, range={}",
            spreadsheet_id,
            self.data_range,
        )

    def _qualify(self, cell_range: str) -> str:
        if self.sheet_name:
            escaped = self.sheet_name.replace("'", "''")
            return f"'{escaped}'!{cell_range}"
        return cell_range

    def _row_range(self, position: int) -> str:
        return self._qualify(f"{STARTING_COLUMN}{position}:{self.last_column}{position}")

    def _values_url(self, suffix: str = "") -> str:
        return f"{self.base_url}/values/{quote(self.data_range, safe='!:')}{suffix}"

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        token = await self.token_provider()
        try:
            response = await self.client.request(
                method,
                url,
                headers={"Authorization": f"Bearer {token}"},
                **kwargs,
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"Google Sheets API returned an error: {e}") from e
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RemoteStoreError(f"Google Sheets API returned invalid JSON: {e}") from e

    async def _resolve_sheet_id(self) -> int:
        """Return the numeric id of the addressed sheet, fetching it once."""
        if self.sheet_id is not None:
            return self.sheet_id

        data = await self._request("GET", self.base_url, params={"fields": "sheets.properties"})
        for sheet in data.get("sheets", []):
            properties = sheet.get("properties", {})
            if self.sheet_name is None or properties.get("title") == self.sheet_name:
                self.sheet_id = properties.get("sheetId", 0)
                logger.debug("Resolved sheet {} to id {}", self.sheet_name, self.sheet_id)
                return self.sheet_id

        raise RemoteStoreError(f"Sheet '{self.sheet_name}' not found in spreadsheet")

    async def fetch_all(self) -> list[Row]:
        """Fetch every row in the data range.

        The API omits trailing empty cells, so rows come back as short as
        their last non-empty cell.

        Returns:
            List of rows in sheet order.

        """
        logger.debug("Fetching range {}", self.data_range)
        data = await self._request("GET", self._values_url())
        rows = data.get("values", [])
        logger.debug("Fetched {} rows", len(rows))
        return rows

    async def append(self, row: Row) -> bool:
        """Append a row after the last row of the table."""
        if not self._check_append(row):
            return False

        data = await self._request(
            "POST",
            self._values_url(":append"),
            params={"valueInputOption": "RAW"},
            json={"values": [row]},
        )
        logger.info("Updated {} cells", data.get("updates", {}).get("updatedCells", 0))
        return True

    async def batch_update(self, positions: Sequence[int], rows: Sequence[Row]) -> list[int]:
        """Overwrite rows with one values:batchUpdate request."""
        updates = self._prepare_updates(positions, rows)
        if not updates:
            logger.warning("No rows to update")
            return []

        data = await self._request(
            "POST",
            f"{self.base_url}/values:batchUpdate",
            json={
                "valueInputOption": "RAW",
                "data": [
                    {"range": self._row_range(position), "values": [row]}
                    for position, row in updates
                ],
            },
        )
        logger.info(
            "Updated {} rows ({} cells)",
            data.get("totalUpdatedRows", len(updates)),
            data.get("totalUpdatedCells", 0),
        )
        return [position for position, _ in updates]

    async def delete_rows(self, positions: Sequence[int]) -> list[int]:
        """Delete rows with one deleteDimension request per row, highest first."""
        if not positions:
            logger.warning("Row positions list is empty")
            return []

        sheet_id = await self._resolve_sheet_id()
        ordered = self._descending(positions)
        requests = []
        for position in ordered:
            logger.debug("Deleting row {}", position)
            requests.append(
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": position - 1,
                            "endIndex": position,
                        }
                    }
                }
            )

        await self._request("POST", f"{self.base_url}:batchUpdate", json={"requests": requests})
        logger.info("Deleted {} rows", len(requests))
        return ordered

    async def aclose(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            await self.client.aclose()
