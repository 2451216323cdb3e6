from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.application.exceptions import SpreadsheetError
from app.application.ports.spreadsheet import SpreadsheetPort
from app.core.config import settings


class GoogleSheets(SpreadsheetPort):
    """Appends reservation rows through the Sheets v4 values:append endpoint."""

    def __init__(
        self,
        access_token: str | None = None,
        spreadsheet_id: str | None = None,
        value_range: str | None = None,
        base_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token or settings.GOOGLE_ACCESS_TOKEN
        self._spreadsheet_id = spreadsheet_id or settings.GOOGLE_SHEETS_SPREADSHEET_ID
        self._range = value_range or settings.GOOGLE_SHEETS_RANGE
        self._base_url = (base_url or settings.GOOGLE_SHEETS_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

        if not self._access_token:
            raise ValueError("GOOGLE_ACCESS_TOKEN is required for Google Sheets")
        if not self._spreadsheet_id:
            raise ValueError("GOOGLE_SHEETS_SPREADSHEET_ID is required for Google Sheets")

    def append_row(self, values: list[Any]) -> bool:
        url = (
            f"{self._base_url}/spreadsheets/{self._spreadsheet_id}"
            f"/values/{quote(self._range, safe='')}:append"
        )
        params = {"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"}
        headers = {"Authorization": f"Bearer {self._access_token}", "Content-Type": "application/json"}
        payload = {"values": [["" if v is None else v for v in values]]}

        try:
            response = self._client.post(url, params=params, json=payload, headers=headers)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("Error appending spreadsheet row", extra={"error": str(e)})
            raise SpreadsheetError(f"Google Sheets append failed: {e}") from e

        updated_rows = (data.get("updates") or {}).get("updatedRows", 0)
        return bool(updated_rows)
