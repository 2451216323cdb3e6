from __future__ import annotations

import logging
from typing import Any

from app.application.exceptions import SpreadsheetError
from app.application.ports.spreadsheet import SpreadsheetPort


class MockSheets(SpreadsheetPort):
    def __init__(self, fail: bool = False) -> None:
        self.rows: list[list[Any]] = []
        self._fail = fail
        self._logger = logging.getLogger(__name__)

    def append_row(self, values: list[Any]) -> bool:
        if self._fail:
            raise SpreadsheetError("Mock spreadsheet unavailable")
        self.rows.append(list(values))
        self._logger.info("Mock spreadsheet row appended")
        return True
